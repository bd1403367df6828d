"""
Storage Engine: LocalStore

A key/value store with browser local-storage semantics: one JSON document per
key, read and written wholesale. Implements cross-platform locking and
atomic writes (write temp, then rename).
"""

import json
import os
import re
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Any, List, Optional

from ..config import settings
from ..utils.events import log_debug

# --- Cross-Platform Locking ---
try:
    import fcntl
    def lock_file(f): fcntl.flock(f, fcntl.LOCK_EX)
    def unlock_file(f): fcntl.flock(f, fcntl.LOCK_UN)
except ImportError:
    # Windows Fallback (No-Op)
    def lock_file(f): pass
    def unlock_file(f): pass

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class StorageError(RuntimeError):
    """Raised when a document cannot be written."""


class LocalStore:
    def __init__(self, directory: Optional[Path] = None):
        self.directory = Path(directory) if directory else settings.STORAGE_DIR
        self.directory.mkdir(parents=True, exist_ok=True)
        self.lock_path = settings.LOCK_FILE if directory is None else self.directory / "storage.lock"

    @contextmanager
    def _file_lock(self):
        """Cross-platform File Lock."""
        with open(self.lock_path, 'w') as lock_f:
            try:
                lock_file(lock_f)
                yield
            finally:
                unlock_file(lock_f)

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[Any]:
        """
        Returns the decoded value for key, or None if it is missing.

        A corrupted document is backed up next to the original and treated
        as missing, so callers can re-seed.
        """
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except json.JSONDecodeError:
            backup_path = self.backup_item(key)
            log_debug(f"CRITICAL: Storage key '{key}' corrupted. Backed up to {backup_path}")
            return None

    def backup_item(self, key: str) -> Optional[Path]:
        """Copies the stored document to `<key>.bak.<hex>` and returns the copy's path."""
        path = self._path(key)
        if not path.exists():
            return None
        backup_path = path.with_suffix(f".bak.{os.urandom(4).hex()}")
        shutil.copy(path, backup_path)
        return backup_path

    def set_item(self, key: str, value: Any) -> None:
        """Serializes value and replaces the stored document atomically."""
        path = self._path(key)
        try:
            with self._file_lock():
                temp_path = path.with_suffix(".tmp")
                with open(temp_path, 'w', encoding='utf-8') as f:
                    json.dump(value, f, ensure_ascii=False, indent=2)
                os.replace(temp_path, path)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Could not write '{key}': {e}") from e

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()

    def keys(self) -> List[str]:
        return sorted(p.stem for p in self.directory.glob("*.json"))

    def clear(self) -> None:
        """Removes every stored key."""
        for key in self.keys():
            self.remove_item(key)
