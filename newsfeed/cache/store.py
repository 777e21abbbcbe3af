"""Key-value stores backing the feed cache and reader comments.

Values are opaque strings (serialized JSON), mirroring browser local storage:
- MemoryStore keeps everything in-process (tests, ephemeral sessions)
- FileStore persists a single JSON document guarded by filelock
- Both can emulate a storage quota and raise StorageError on failed writes
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from filelock import FileLock

from newsfeed.errors import StorageError

logger = logging.getLogger(__name__)

STORE_FILENAME = "store.json"


def _payload_size(data: Dict[str, str]) -> int:
    return sum(len(k.encode("utf-8")) + len(v.encode("utf-8")) for k, v in data.items())


class KeyValueStore:
    """Interface for the persistent store shared by cache and comments."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def put(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def keys(self) -> List[str]:
        raise NotImplementedError

    @staticmethod
    def _check_quota(data: Dict[str, str], quota_bytes: Optional[int]) -> None:
        if quota_bytes is not None and _payload_size(data) > quota_bytes:
            raise StorageError(f"Storage quota of {quota_bytes} bytes exceeded")


class MemoryStore(KeyValueStore):
    """In-process store. Last writer wins, no isolation."""

    def __init__(self, quota_bytes: Optional[int] = None):
        self.quota_bytes = quota_bytes
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def put(self, key: str, value: str) -> None:
        candidate = dict(self._data)
        candidate[key] = value
        self._check_quota(candidate, self.quota_bytes)
        self._data = candidate

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data.keys())


class FileStore(KeyValueStore):
    """File-backed store in <directory>/store.json.

    Uses filelock for process-safe access. A corrupt document is backed up
    and treated as empty rather than failing reads.
    """

    def __init__(self, directory: Path, quota_bytes: Optional[int] = None):
        self.directory = Path(directory)
        self.quota_bytes = quota_bytes
        self._file = self.directory / STORE_FILENAME
        self._lock = FileLock(str(self.directory / f"{STORE_FILENAME}.lock"), timeout=10)
        self._ensure_directory()

    def _ensure_directory(self) -> None:
        """Create the store directory if it doesn't exist."""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Cannot create store directory {self.directory}: {e}")

    def _load_unlocked(self) -> Dict[str, str]:
        if not self._file.exists():
            return {}

        try:
            with open(self._file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Store file corrupted: {e}")
            self._backup_corrupt_file()
            return {}
        except OSError as e:
            logger.warning(f"Error reading store file: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning("Store file does not hold an object, ignoring it")
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _save_unlocked(self, data: Dict[str, str]) -> None:
        try:
            with open(self._file, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
        except OSError as e:
            raise StorageError(f"Cannot write to store file: {e}") from e

    def _backup_corrupt_file(self) -> None:
        """Backup a corrupted store file."""
        backup_path = self._file.with_suffix(".json.corrupt")
        try:
            self._file.rename(backup_path)
            logger.info(f"Backed up corrupt store to {backup_path}")
        except OSError as e:
            logger.warning(f"Could not backup corrupt store: {e}")

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load_unlocked().get(key)

    def put(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load_unlocked()
            data[key] = value
            self._check_quota(data, self.quota_bytes)
            self._save_unlocked(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._load_unlocked()
            if data.pop(key, None) is not None:
                self._save_unlocked(data)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._load_unlocked().keys())


def build_store(settings) -> KeyValueStore:
    """Create the process-wide store from settings."""
    if settings.cache_dir:
        return FileStore(settings.cache_dir, quota_bytes=settings.storage_quota_bytes)
    return MemoryStore(quota_bytes=settings.storage_quota_bytes)
