# stat_optimizer/io/loader.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Union, TYPE_CHECKING

from .sources import FileSource, DictSource
from . import parsers
from ..models import GameData, SolverSettings

if TYPE_CHECKING:
    from logging import Logger

SourceLike = Union[str, Path, FileSource, DictSource]


class Loader:
    """
    Unified loader for file paths (CLI) and in-memory JSON (API bodies, tests).

    - Game data is required: missing files and malformed payloads raise.
    - Solver settings are optional: a missing or broken file falls back to the
      built-in defaults with a warning.
    """

    def __init__(self, logger: "Logger | None" = None):
        self.logger = logger

    # ---------- Public API ----------
    def load_json(self, file_path: str | Path) -> Any:
        data = FileSource(file_path).load_json()
        self._debug(f"📘 Loaded file: {file_path}")
        return data

    def load_game_data(self, source: SourceLike) -> GameData:
        data, label = self._coerce(source)
        game = parsers.parse_game_data(data)
        self._info(
            f"✅ Loaded game data {game.version!r} from {label}: "
            f"{len(game.weapons)} weapons, {len(game.curves)} curves, {len(game.skills)} skills."
        )
        return game

    def load_settings_or_default(self, file_path: str | Path | None) -> SolverSettings:
        """Solver settings from JSON, or defaults when the file is absent or invalid."""
        if not file_path:
            self._info("ℹ️ No solver settings file — using built-in defaults.")
            return SolverSettings()

        p = Path(file_path)
        if not p.exists():
            self._warn(f"⚠️ Solver settings file not found at {file_path} — using defaults.")
            return SolverSettings()

        try:
            raw = self.load_json(p)
        except ValueError as exc:
            self._warn(f"⚠️ Solver settings file is not valid JSON ({exc}) — using defaults.")
            return SolverSettings()
        if not isinstance(raw, dict):
            self._warn("⚠️ Solver settings file must be an object — using defaults.")
            return SolverSettings()

        try:
            settings = parsers.parse_settings(raw, self.logger)
        except (TypeError, ValueError) as exc:
            self._warn(f"⚠️ Invalid solver settings ({exc}) — using defaults.")
            return SolverSettings()
        self._info(f"✅ Loaded solver settings from {file_path} (lookahead={settings.lookahead}).")
        return settings

    # ---------- Helpers ----------
    def _coerce(self, source: SourceLike) -> tuple[Any, str]:
        if isinstance(source, (str, Path)):
            source = FileSource(source)
        if isinstance(source, (FileSource, DictSource)):
            return source.load_json(), source.describe()
        # raw dict/list
        return source, "<in-memory>"

    # ---------- Logging wrappers ----------
    def _debug(self, msg: str) -> None:
        if self.logger:
            self.logger.debug(msg)

    def _info(self, msg: str) -> None:
        if self.logger:
            self.logger.info(msg)

    def _warn(self, msg: str) -> None:
        if self.logger:
            self.logger.warning(msg)
