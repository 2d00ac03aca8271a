"""Flat JSON file cache with per-key expiry stamps."""

import os
import threading
import time
from pathlib import Path
from typing import Any

import orjson

from src.utils.logger import get_logger
from src.utils.settings.cache import CacheSettings

logger = get_logger(__name__)

TTL_SUFFIX = ":ttl"

# One lock for every FileCache; get_cache() builds a new instance per call
_write_lock = threading.Lock()


class FileCache:
    """Key/value store persisted to a single JSON document.

    Each entry ``key`` has a companion ``key:ttl`` entry holding the expiry
    as epoch milliseconds. Values must be JSON serializable. Entries are never
    evicted; expired values stay readable until overwritten or deleted.

    Every call reads the whole file and writes are read-modify-write, so call
    it from worker threads in async code (``with_cache`` does). Writes are
    serialized within one process only; workers sharing a file can drop each
    other's updates.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            return orjson.loads(self.path.read_bytes())
        except (orjson.JSONDecodeError, OSError) as e:
            logger.warning("Discarding unreadable cache file", path=str(self.path), error=str(e))
            return {}

    def _save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_bytes(orjson.dumps(data))
        os.replace(tmp_path, self.path)

    @staticmethod
    def _expired(data: dict[str, Any], key: str) -> bool:
        expires_at = data.get(f"{key}{TTL_SUFFIX}")
        if not isinstance(expires_at, (int, float)):
            return True
        return time.time() * 1000 > expires_at

    def get(self, key: str) -> Any | None:
        return self._load().get(key)

    def read(self, key: str) -> tuple[Any | None, bool]:
        """Value and whether it has expired, from a single load."""
        data = self._load()
        return data.get(key), self._expired(data, key)

    def set(self, key: str, value: Any, ttl: int = 300) -> None:
        with _write_lock:
            data = self._load()
            data[key] = value
            data[f"{key}{TTL_SUFFIX}"] = int(time.time() * 1000) + ttl * 1000
            self._save(data)

    def delete(self, key: str) -> None:
        with _write_lock:
            data = self._load()
            data.pop(key, None)
            data.pop(f"{key}{TTL_SUFFIX}", None)
            self._save(data)

    def is_expired(self, key: str) -> bool:
        return self._expired(self._load(), key)

    def clear(self) -> None:
        with _write_lock:
            self._save({})

    @staticmethod
    def user_key(user_id: Any, key: str) -> str:
        return f"user:{user_id}:{key}"


def get_cache() -> FileCache:
    """Cache bound to the configured directory."""
    settings = CacheSettings()
    return FileCache(Path(settings.CACHE_DIR) / settings.CACHE_FILE_NAME)
