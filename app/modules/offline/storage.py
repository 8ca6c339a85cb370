"""
Durable local storage: one JSON file per fixed key under the client data directory.

Reads and writes are fail-soft. A missing, unreadable or malformed file reads
as the caller's default; a failed write is logged and reported as False.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from app.errors import StorageError

logger = logging.getLogger(__name__)

LEADS_KEY = "leadAppLeads"
QUEUE_KEY = "offlineQueue"
REMINDERS_KEY = "leadAppReminders"


class LocalStorage:
    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def _read(self, key: str) -> Any:
        path = self._path(key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Cannot read {path}: {e}") from e
        if not raw.strip():
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Malformed JSON in {path}: {e}") from e

    def _write(self, key: str, value: Any) -> None:
        path = self._path(key)
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Cannot serialise {key}: {e}") from e
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, path)
        except OSError as e:
            raise StorageError(f"Cannot write {path}: {e}") from e

    def get(self, key: str, default: Any) -> Any:
        try:
            value = self._read(key)
        except StorageError as e:
            logger.error("Failed to parse %s from local storage: %s", key, e)
            return default
        return default if value is None else value

    def set(self, key: str, value: Any) -> bool:
        try:
            self._write(key, value)
        except StorageError as e:
            logger.error("Failed to set %s in local storage: %s", key, e)
            return False
        return True
