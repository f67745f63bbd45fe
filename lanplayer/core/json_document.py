"""Persist and load whole-file JSON documents with one writer at a time per file."""
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator

logger = logging.getLogger(__name__)

# One lock per resolved path, shared by every JsonDocument pointing at it
_locks: Dict[Path, threading.Lock] = {}
_locks_guard = threading.Lock()


class StorageError(Exception):
    """A JSON document could not be read, parsed, or written."""


def _lock_for(path: Path) -> threading.Lock:
    key = path.resolve()
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.Lock()
        return lock


class JsonDocument:
    """A JSON object stored in one file.

    Every read and read-modify-write holds the file's lock, so two requests
    racing on the same document cannot drop each other's update. Writes go to
    a temp file in the same directory and are renamed into place.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._lock = _lock_for(self._path)

    def ensure(self) -> None:
        """Create the file as an empty object if it does not exist."""
        with self._lock:
            if not self._path.exists():
                self._write({})

    def read(self) -> dict:
        with self._lock:
            return self._read()

    @contextmanager
    def update(self) -> Iterator[dict]:
        """Yield the current document; it is written back when the block exits cleanly."""
        with self._lock:
            data = self._read()
            yield data
            self._write(data)

    def _read(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except OSError as e:
            raise StorageError(f"Cannot read {self._path.name}: {e}") from e
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt JSON in {self._path.name}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"{self._path.name} does not hold a JSON object")
        return data

    def _write(self, data: dict) -> None:
        d = self._path.parent
        try:
            d.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=d, suffix=".tmp")
        except OSError as e:
            raise StorageError(f"Cannot write {self._path.name}: {e}") from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp, self._path)
        except OSError as e:
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise StorageError(f"Cannot write {self._path.name}: {e}") from e
