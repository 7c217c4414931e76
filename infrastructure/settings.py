"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

from datetime import date
import json
from pathlib import Path
from typing import Any

from loguru import logger

from core.services.acceptance import AcceptanceWindow


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access.

    A missing file yields empty settings so every lookup falls back to its
    default; a malformed file is an error.
    """

    def __init__(self, settings_path: str | Path | None = None, data: dict | None = None) -> None:
        self._path = Path(settings_path) if settings_path is not None else None
        self._data: dict[str, Any] = dict(data or {})
        if self._path is None:
            return
        if not self._path.exists():
            logger.info("settings.json not found at {}, using defaults", self._path)
            return
        with self._path.open("r", encoding="utf-8") as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            raise ValueError(f"settings.json must contain an object: {self._path}")
        self._data.update(loaded)

    @property
    def path(self) -> Path | None:
        return self._path

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

    def set(self, key: str, value: Any) -> None:
        """Set dotted `key` in memory (used for command-line overrides)."""
        parts = key.split(".")
        node = self._data
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = value


def acceptance_window_from_settings(settings: JsonSettings | None) -> AcceptanceWindow:
    """Build the acceptance window from `acceptance.*` keys.

    `acceptance.mode` is "rolling" (default, `acceptance.months`, default 6)
    or "fixed" (`acceptance.since`, an ISO date such as "2024-12-01").
    """
    if settings is None:
        return AcceptanceWindow.rolling(6)
    mode = str(settings.get("acceptance.mode", "rolling") or "rolling").lower()
    if mode == "fixed":
        raw = settings.get("acceptance.since")
        try:
            return AcceptanceWindow.fixed(date.fromisoformat(str(raw)))
        except (TypeError, ValueError):
            logger.warning("Invalid acceptance.since {!r}, falling back to rolling window", raw)
    try:
        months = int(settings.get("acceptance.months", 6))
    except (TypeError, ValueError):
        months = 6
    return AcceptanceWindow.rolling(max(0, months))
