"""Utility helpers for the Stat Optimizer.

Includes:
    - ANSI colorized logging setup.
    - Attribute-name normalization (aliases like "str" -> "strength").
    - CLI option parsers for bound and stat specs.
"""

from __future__ import annotations

import logging
import sys
from typing import Tuple

from .defaults import ALL_ATTRIBUTES, ATTRIBUTE_ALIASES
from .models import StatBounds


# === ANSI color codes for logger ===
class ColorFormatter(logging.Formatter):
    """Custom log formatter with ANSI color codes."""

    COLORS = {
        logging.DEBUG: "\033[92m",   # Green
        logging.INFO: "\033[94m",    # Blue
        logging.WARNING: "\033[93m", # Yellow
        logging.ERROR: "\033[91m",   # Red
        logging.CRITICAL: "\033[95m" # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelno, self.RESET)
        message = super().format(record)
        return f"{color}{message}{self.RESET}"


def setup_logger(verbose: bool = False) -> logging.Logger:
    """Configure the colorized `stat_optimizer` logger."""
    logger = logging.getLogger("stat_optimizer")
    level = logging.DEBUG if verbose else logging.INFO
    if logger.handlers:
        logger.setLevel(level)
        return logger
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColorFormatter("%(asctime)s [%(levelname)s]\t| %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


# === Attribute names ===
def normalize_attribute(name: str) -> str:
    """Canonical attribute name for a full name or alias (case-insensitive)."""
    key = name.strip().lower()
    key = ATTRIBUTE_ALIASES.get(key, key)
    if key not in ALL_ATTRIBUTES:
        raise ValueError(f"Unknown attribute {name!r}")
    return key


# === CLI spec parsers ===
def parse_bound_spec(spec: str) -> Tuple[str, StatBounds]:
    """'str=10:60' -> ('strength', StatBounds(10, 60)); 'vig=40' locks vigor at 40."""
    name, sep, value = spec.partition("=")
    if not sep or not value:
        raise ValueError(f"Bound {spec!r} must look like ATTR=MIN:MAX or ATTR=VALUE")
    attribute = normalize_attribute(name)
    lo, colon, hi = value.partition(":")
    try:
        if colon:
            return attribute, StatBounds(int(lo), int(hi))
        return attribute, StatBounds(int(lo), int(lo))
    except ValueError:
        raise ValueError(f"Bound {spec!r} has a non-integer value") from None


def parse_stat_spec(spec: str) -> Tuple[str, int]:
    """'dex=40' -> ('dexterity', 40)."""
    name, sep, value = spec.partition("=")
    if not sep:
        raise ValueError(f"Stat {spec!r} must look like ATTR=VALUE")
    try:
        return normalize_attribute(name), int(value)
    except ValueError as exc:
        raise ValueError(f"Invalid stat {spec!r}: {exc}") from None
