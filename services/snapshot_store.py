"""Local snapshot of every content collection plus the hashed PIN (JSON).

The snapshot is a display cache for the dashboard home page. Managers never
read from it; they only write a fresh copy after each successful fetch, from
worker threads, while the GUI thread reads counts. Every read and write holds
the store lock and files are replaced atomically.
"""
from __future__ import annotations

import copy
import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

import bcrypt

from models.content import CONTENT_TYPES, Record
from utils.path_utils import get_data_dir, write_json_atomic

log = logging.getLogger(__name__)

SNAPSHOT_FILE_NAME = "admin_snapshot.json"


def _empty() -> Dict[str, Any]:
    data: Dict[str, Any] = {key: [] for key in CONTENT_TYPES}
    data["pin_hash"] = None
    return data


class SnapshotStore:
    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path or get_data_dir() / SNAPSHOT_FILE_NAME
        self._lock = threading.RLock()
        self._last_good: Optional[Dict[str, Any]] = None

    def load(self) -> Dict[str, Any]:
        """Return the snapshot, with an empty list for any missing collection."""
        with self._lock:
            return self._read()

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return _empty()
        try:
            stored = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.warning("Ignoring unreadable snapshot %s: %s", self.path, exc)
            return self._fallback()
        if not isinstance(stored, dict):
            log.warning("Ignoring snapshot %s: not a JSON object", self.path)
            return self._fallback()
        data = _empty()
        for key in CONTENT_TYPES:
            value = stored.get(key)
            if isinstance(value, list):
                data[key] = value
        pin_hash = stored.get("pin_hash")
        if isinstance(pin_hash, str) and pin_hash:
            data["pin_hash"] = pin_hash
        self._last_good = copy.deepcopy(data)
        return data

    def _fallback(self) -> Dict[str, Any]:
        # A damaged file must not wipe what this process already knows.
        if self._last_good is None:
            return _empty()
        return copy.deepcopy(self._last_good)

    def _write(self, data: Dict[str, Any]) -> None:
        write_json_atomic(self.path, data)
        self._last_good = copy.deepcopy(data)

    def save_collection(self, key: str, records: List[Record]) -> None:
        if key not in CONTENT_TYPES:
            raise KeyError(f"Unknown content type '{key}'")
        with self._lock:
            data = self._read()
            data[key] = list(records)
            self._write(data)

    def counts(self) -> Dict[str, int]:
        data = self.load()
        return {key: len(data[key]) for key in CONTENT_TYPES}

    # -- PIN ------------------------------------------------------------------

    def set_pin(self, pin: str) -> None:
        hashed = bcrypt.hashpw(pin.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
        with self._lock:
            data = self._read()
            data["pin_hash"] = hashed
            self._write(data)

    def has_pin(self) -> bool:
        return self.load()["pin_hash"] is not None


__all__ = ["SNAPSHOT_FILE_NAME", "SnapshotStore"]
