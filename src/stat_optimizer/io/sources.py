# stat_optimizer/io/sources.py
from __future__ import annotations

import gzip
import json
from pathlib import Path
from typing import Any, Optional


class FileSource:
    """Reads JSON from disk. Files ending in .gz are decompressed first
    (game-data bundles are large)."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load_json(self) -> Any:
        if self.path.suffix == ".gz":
            with gzip.open(self.path, "rt", encoding="utf-8") as f:
                return json.load(f)
        with self.path.open("r", encoding="utf-8") as f:
            return json.load(f)

    def describe(self) -> str:
        return str(self.path)


class DictSource:
    """Returns JSON that is already in memory (API bodies, tests)."""

    def __init__(self, data: Any, label: Optional[str] = None):
        self.data = data
        self.label = label or "<in-memory>"

    def load_json(self) -> Any:
        return self.data

    def describe(self) -> str:
        return self.label
