# src/history.py
from __future__ import annotations

import json
import logging
import math
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from filelock import FileLock

from errors import InvalidSnapshot

logger = logging.getLogger(__name__)

SCALAR_TYPES = (str, int, float, bool, type(None))


def iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SnapshotStore:
    """
    Append-only history of metric snapshots kept as a JSON array in one file.

    Every append rewrites the whole array to a temporary file next to the
    target and renames it into place, so a failed write leaves the previous
    history untouched. Appends hold a lock file beside the history, which
    serialises writers across processes (web server and Celery worker).
    """

    def __init__(self, path: Union[str, Path], lock_timeout: float = 30.0):
        self.path = Path(path)
        self.lock_timeout = lock_timeout

    def read_all(self) -> List[Dict[str, Any]]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.error("Could not read history file %s: %s", self.path, e)
            return []

        history = self._decode(raw)
        return history if history is not None else []

    def append(
        self, snapshot: Mapping[str, Any], date: Optional[str] = None
    ) -> Dict[str, Any]:
        record = self.build_snapshot(snapshot, date=date)
        with self._file_lock():
            history = self._load_for_append()
            history.append(record)
            self._write(history)
        return record

    @staticmethod
    def build_snapshot(snapshot: Mapping[str, Any], date: Optional[str] = None) -> Dict[str, Any]:
        if not isinstance(snapshot, Mapping):
            raise InvalidSnapshot("Snapshot must be a JSON object")
        for key, value in snapshot.items():
            if not isinstance(key, str):
                raise InvalidSnapshot(f"Snapshot keys must be strings, got {key!r}")
            if not isinstance(value, SCALAR_TYPES):
                raise InvalidSnapshot(f"Snapshot field {key!r} must be a scalar value")
            if isinstance(value, float) and not math.isfinite(value):
                raise InvalidSnapshot(f"Snapshot field {key!r} must be a finite number")
        # The server clock owns the date field.
        record: Dict[str, Any] = {"date": date or iso_now()}
        record.update((k, v) for k, v in snapshot.items() if k != "date")
        return record

    def _file_lock(self) -> FileLock:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        return FileLock(str(self.path.with_name(f"{self.path.name}.lock")), timeout=self.lock_timeout)

    def _decode(self, raw: bytes) -> Optional[List[Dict[str, Any]]]:
        if not raw.strip():
            return []
        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("History file %s is corrupt: %s", self.path, e)
            return None
        if not isinstance(data, list):
            logger.warning("History file %s does not hold a JSON array", self.path)
            return None
        if not all(isinstance(entry, dict) for entry in data):
            logger.warning("History file %s holds entries that are not objects", self.path)
            return None
        return data

    def _load_for_append(self) -> List[Dict[str, Any]]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return []

        history = self._decode(raw)
        if history is None:
            stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
            aside = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
            os.replace(self.path, aside)
            logger.warning("Moved unreadable history to %s, starting a new log", aside)
            return []
        return history

    def _write(self, history: List[Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(history, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
