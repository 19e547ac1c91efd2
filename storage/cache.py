"""
Cache
Two-tier snapshot cache for extracted listing media
"""
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional, Tuple
from pathlib import Path
import hashlib
import json
import logging
import os
import time

from pydantic import ValidationError

from config import CacheSettings, get_settings
from models import CacheEntry, MediaItem
from utils.exceptions import CacheError, ConfigurationError


logger = logging.getLogger(__name__)

PROVENANCE_MEMORY = "cache(mem)"
PROVENANCE_DISK = "cache(disk)"


class BaseCache(ABC):
    """
    Key/value cache interface
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the stored value or None"""
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a value, replacing any previous one"""
        pass


class MemoryCache(BaseCache):
    """
    In-process cache
    Holds values as-is, without serialization, for the life of the object
    """

    def __init__(self):
        self._cache: Dict[str, Any] = {}

    def get(self, key: str) -> Optional[Any]:
        return self._cache.get(key)

    def set(self, key: str, value: Any) -> None:
        self._cache[key] = value


class DiskCache(BaseCache):
    """
    Disk cache
    One JSON document per key, survives process restarts
    """

    def __init__(self, cache_dir: str = "./data/cache"):
        """
        Args:
            cache_dir: directory holding the cache files
        """
        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    def _get_path(self, key: str) -> Path:
        # hashed so any key is a safe file name
        digest = hashlib.md5(key.encode()).hexdigest()
        return self.cache_dir / f"{digest}.json"

    def get(self, key: str) -> Optional[Any]:
        """
        Load the value stored under ``key``

        Raises:
            CacheError: the file exists but cannot be read or decoded
        """
        path = self._get_path(key)
        if not path.exists():
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise CacheError(f"Failed to load cache {key}", {"path": str(path), "error": str(e)}) from e

    def set(self, key: str, value: Any) -> None:
        path = self._get_path(key)
        tmp_path = path.with_suffix(".tmp")

        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(value, f, ensure_ascii=False, default=str)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            raise CacheError(f"Failed to save cache {key}", {"path": str(path), "error": str(e)}) from e


class ListingCache:
    """
    Snapshot cache keyed by (collection, fetch mode)

    Reads check the memory tier, then the disk tier; a live disk hit is
    promoted into memory. Writes go to both tiers. Entries older than the
    TTL are treated as absent; nothing is evicted otherwise.
    """

    def __init__(
        self,
        memory: Optional[MemoryCache] = None,
        disk: Optional[BaseCache] = None,
        ttl: Optional[float] = None,
        key_prefix: Optional[str] = None,
        clock: Callable[[], float] = time.time,
        settings: Optional[CacheSettings] = None,
    ):
        settings = settings or get_settings().cache
        self.memory = memory if memory is not None else MemoryCache()
        self.disk = disk
        self.ttl = float(ttl if ttl is not None else settings.ttl_seconds)
        self.key_prefix = key_prefix if key_prefix is not None else settings.key_prefix
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Optional[CacheSettings] = None) -> "ListingCache":
        settings = settings or get_settings().cache
        disk = get_cache("disk", settings.cache_dir) if settings.disk_enabled else None
        return cls(disk=disk, settings=settings)

    @staticmethod
    def entry_key(collection: str, data_saver: bool) -> str:
        return f"{collection}:{'saver' if data_saver else 'full'}"

    def lookup(self, collection: str, data_saver: bool) -> Optional[Tuple[CacheEntry, str]]:
        """
        Find a live snapshot

        Returns:
            (entry, provenance) or None when neither tier holds a live entry
        """
        key = self.entry_key(collection, data_saver)
        now = self._clock()

        entry = self.memory.get(key)
        if isinstance(entry, CacheEntry) and entry.is_live(now, self.ttl):
            logger.debug(f"Memory cache hit for {key}")
            return entry, PROVENANCE_MEMORY

        entry = self._load_disk(key)
        if entry is not None and entry.is_live(now, self.ttl):
            self.memory.set(key, entry)
            logger.debug(f"Disk cache hit for {key}")
            return entry, PROVENANCE_DISK

        return None

    def store(self, collection: str, data_saver: bool, items: List[MediaItem]) -> CacheEntry:
        """Record a fresh snapshot in both tiers"""
        key = self.entry_key(collection, data_saver)
        entry = CacheEntry(captured_at=self._clock(), items=list(items))

        self.memory.set(key, entry)
        if self.disk is not None:
            try:
                self.disk.set(self.key_prefix + key, entry.model_dump(mode="json"))
            except CacheError as e:
                logger.error(str(e))
        return entry

    def _load_disk(self, key: str) -> Optional[CacheEntry]:
        if self.disk is None:
            return None
        try:
            raw = self.disk.get(self.key_prefix + key)
            if raw is None:
                return None
            return CacheEntry.model_validate(raw)
        except (CacheError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable cache entry {key}: {e}")
            return None


def get_cache(provider: str = "memory", cache_dir: Optional[str] = None) -> BaseCache:
    """
    Build a single cache tier

    Args:
        provider: memory or disk
        cache_dir: disk cache directory, defaults to the configured one

    Returns:
        A new cache instance
    """
    if provider == "memory":
        return MemoryCache()

    elif provider == "disk":
        return DiskCache(cache_dir=cache_dir or get_settings().cache.cache_dir)

    else:
        raise ConfigurationError(f"Unknown cache provider: {provider}")


@lru_cache()
def get_listing_cache() -> ListingCache:
    """Process-wide listing cache built from the global settings"""
    return ListingCache.from_settings()
