import asyncio
import logging
import math
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from .config import Settings
from .errors import CacheInitializationError

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    value: Any
    stored_at: float


class TTLCache:
    """Bounded in-memory cache with per-entry expiry and LRU eviction.

    Both reads and writes move a key to the most-recently-used end; once
    more than ``capacity`` keys are held the least recently used one is
    dropped, expired or not. Expired entries are removed when read.
    """

    def __init__(self, capacity: int, ttl: float, clock: Callable[[], float] = time.monotonic):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise CacheInitializationError(f"Cache capacity must be a positive integer, got {capacity!r}")
        if isinstance(ttl, bool) or not isinstance(ttl, (int, float)) or not math.isfinite(ttl) or ttl < 0:
            raise CacheInitializationError(f"Cache TTL must be a finite non-negative number, got {ttl!r}")
        self._capacity = capacity
        self._ttl = float(ttl)
        self._clock = clock
        self._store: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Optional[Settings]) -> "TTLCache":
        if settings is None:
            raise CacheInitializationError("Cache configuration is missing")
        return cls(settings.cache_capacity, settings.cache_ttl)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def ttl(self) -> float:
        return self._ttl

    def __len__(self) -> int:
        return len(self._store)

    def _is_expired(self, entry: CacheEntry) -> bool:
        return self._clock() >= entry.stored_at + self._ttl

    async def get(self, key: str) -> Optional[Any]:
        async with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if self._is_expired(entry):
                del self._store[key]
                logger.debug("Cache entry for %s expired", key)
                return None
            self._store.move_to_end(key)
            return entry.value

    async def put(self, key: str, value: Any) -> None:
        async with self._lock:
            self._store[key] = CacheEntry(value=value, stored_at=self._clock())
            self._store.move_to_end(key)
            while len(self._store) > self._capacity:
                self._evict_lru()

    async def evict_lru(self) -> Optional[str]:
        async with self._lock:
            return self._evict_lru()

    def _evict_lru(self) -> Optional[str]:
        if not self._store:
            return None
        key, _ = self._store.popitem(last=False)
        logger.debug("Evicted least recently used cache entry %s", key)
        return key

    async def keys(self) -> List[str]:
        async with self._lock:
            return list(self._store)

    async def clear(self) -> None:
        async with self._lock:
            self._store.clear()
