"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access."""

    def __init__(self, settings_path: str | Path | None = None, data: dict | None = None) -> None:
        self._path = Path(settings_path) if settings_path is not None else None
        if data is not None:
            self._data = data
            return
        if self._path is None:
            self._data = {}
            return
        if not self._path.exists():
            raise FileNotFoundError(f"settings.json not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            self._data = json.load(f)

    @classmethod
    def load_or_default(cls, settings_path: str | Path) -> JsonSettings:
        """Read `settings_path` if present, else return empty settings."""
        path = Path(settings_path)
        if not path.exists():
            logger.info("No settings file at {}, using defaults", path)
            return cls(data={})
        return cls(path)

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def get_int(self, key: str, default: int) -> int:
        """Return `key` as int, falling back to `default` on bad values."""
        try:
            return int(self.get(key, default))
        except (ValueError, TypeError):
            logger.warning("Invalid integer setting {}, using {}", key, default)
            return default
