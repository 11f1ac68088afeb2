"""
Persistence media for the store.

A medium is any object with synchronous get/set/remove by string key, holding
serialized text. Implementations may raise; the store absorbs those errors.

- MemoryStorage: dict-backed, for tests and ephemeral sessions
- JsonFileStorage: one <key>.json file per key under a directory
"""

import os
import re
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Optional

from muster.contexts.state.exceptions import StorageError

_SAFE_KEY = re.compile(r"^[A-Za-z0-9._-]+$")


class MemoryStorage:
    """In-memory key/value medium."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __repr__(self) -> str:
        return f"MemoryStorage(keys={sorted(self._data)})"


class JsonFileStorage:
    """
    File-backed key/value medium.

    Each key is stored as <directory>/<key>.json. Writes go to a temp file in
    the same directory first and are moved into place only once complete, so a
    failed write never leaves a truncated record behind.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        self.directory.mkdir(parents=True, exist_ok=True)

        # Write to temp file first (atomic write pattern)
        temp_fd, temp_path = tempfile.mkstemp(suffix=".json", dir=self.directory, text=True)
        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                f.write(value)

            # Only overwrite original if write succeeded
            shutil.move(temp_path, path)
        except Exception:
            # Clean up temp file if write failed
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

    def remove(self, key: str) -> None:
        path = self.path_for(key)
        if path.exists():
            path.unlink()

    def __repr__(self) -> str:
        return f"JsonFileStorage({str(self.directory)!r})"
