# src/cache/memory_store.py — v1
"""In-process LRU cache store with per-entry time-to-live (CACHE_BACKEND=memory).

Expired entries are removed lazily when touched. At capacity the
least-recently-used entry is evicted before a new key is inserted.

Entries are private deep copies: put() copies the caller's result and get()
hands out a fresh copy, so no caller can mutate what another caller reads.

Recency order is global, so every operation takes one store-wide lock.
The lock is never held across an await and never held while copying; the
critical sections only touch the ordered dict.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable

from resumelens.cache.base_cache_store import BaseCacheStore
from resumelens.cache.models import CacheEntry, CacheStats
from resumelens.core.models import AnalysisResult, Fingerprint

logger = logging.getLogger(__name__)


class MemoryCacheStore(BaseCacheStore):
    """Bounded in-memory cache keyed by fingerprint hex.

    Args:
        capacity: Maximum number of entries.
        ttl_seconds: Lifetime of an entry from insertion.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        capacity: int = 256,
        ttl_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        self._capacity = capacity
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()
        self._stats = CacheStats(capacity=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    async def get(self, fingerprint: Fingerprint) -> AnalysisResult | None:
        """Return the live entry and mark it most recently used."""
        key = fingerprint.hex
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._stats.misses += 1
                return None
            now = self._clock()
            if self._is_expired(entry, now):
                del self._entries[key]
                self._stats.expirations += 1
                self._stats.misses += 1
                logger.debug("Cache entry expired: %s", key[:12])
                return None
            entry.last_accessed = now
            self._entries.move_to_end(key)
            self._stats.hits += 1
            stored = entry.result
        return stored.model_copy(deep=True)

    async def put(self, fingerprint: Fingerprint, result: AnalysisResult) -> None:
        """Insert or overwrite; evicts the LRU entry when a new key needs room."""
        key = fingerprint.hex
        result = result.model_copy(deep=True)
        with self._lock:
            now = self._clock()
            if key not in self._entries:
                self._purge_expired(now)
                while len(self._entries) >= self._capacity:
                    evicted, _ = self._entries.popitem(last=False)
                    self._stats.evictions += 1
                    logger.debug("Evicted LRU cache entry: %s", evicted[:12])
            self._entries[key] = CacheEntry(
                fingerprint=key,
                result=result,
                created_at=now,
                last_accessed=now,
            )
            self._entries.move_to_end(key)

    async def delete(self, fingerprint: Fingerprint) -> None:
        with self._lock:
            self._entries.pop(fingerprint.hex, None)

    async def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    async def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> CacheStats:
        with self._lock:
            return self._stats.model_copy(update={"size": len(self._entries)})

    def keys(self) -> list[str]:
        """Keys from least to most recently used."""
        with self._lock:
            return list(self._entries.keys())

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.created_at >= self._ttl

    def _purge_expired(self, now: float) -> None:
        expired = [k for k, e in self._entries.items() if self._is_expired(e, now)]
        for key in expired:
            del self._entries[key]
            self._stats.expirations += 1
