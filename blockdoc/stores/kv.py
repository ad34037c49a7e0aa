"""Whole-value key/value store persisted as JSON."""

from __future__ import annotations

from datetime import UTC, datetime
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

_STORE_VERSION = 1


class Store(Protocol):
    """Persistence boundary consumed by the pipeline."""

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value or ``default`` when absent."""

    def set(self, key: str, value: Any) -> None:
        """Replace the value stored under ``key``."""


class KeyValueStore:
    """Last-writer-wins store; JSON-file backed when a path is given, in-memory otherwise."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path
        self._entries: Dict[str, Dict[str, Any]] = {}
        if self._path is not None:
            self._load(self._path)

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return default
        return entry.get("value", default)

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = {
            "value": value,
            "updated_at": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        }
        self._persist()

    def delete(self, key: str) -> None:
        if self._entries.pop(key, None) is not None:
            self._persist()

    def keys(self) -> List[str]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()
        self._persist()

    # ------------------------------------------------------------------
    # Internal helpers

    def _persist(self) -> None:
        if self._path is None:
            return
        payload = {"version": _STORE_VERSION, "entries": self._entries}
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        tmp_path.replace(self._path)

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError):
            return
        if not isinstance(data, dict) or data.get("version") != _STORE_VERSION:
            return
        entries = data.get("entries")
        if not isinstance(entries, dict):
            return
        self._entries = {
            key: raw
            for key, raw in entries.items()
            if isinstance(key, str) and isinstance(raw, dict) and "value" in raw
        }


__all__ = ["KeyValueStore", "Store"]
