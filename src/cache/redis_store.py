# src/cache/redis_store.py — v2
"""Redis-based cache store (CACHE_BACKEND=redis).

Requires 'redis' package: pip install resumelens[redis].
Entry lifetime uses native key expiry; recency is tracked in a sorted set
scored by last access time, and capacity eviction removes its lowest
members. Writes that touch both go through one MULTI/EXEC transaction.
"""

from __future__ import annotations

import logging
import time

from pydantic import ValidationError

from resumelens.cache.base_cache_store import BaseCacheStore, CacheUnavailableError
from resumelens.core.models import AnalysisResult, Fingerprint

logger = logging.getLogger(__name__)

_KEY_PREFIX = "resumelens:cache:"
_LRU_KEY = "resumelens:cache:__lru__"
_MAX_RETRIES = 5


class RedisCacheStore(BaseCacheStore):
    """Redis-backed cache store shared between processes.

    put() runs as an optimistic transaction: the value key and the recency
    set are WATCHed, eviction is planned from their state, and the writes
    are applied in one MULTI/EXEC. A concurrent change aborts the EXEC and
    the plan is retried, so capacity holds across processes.
    """

    def __init__(
        self,
        redis_url: str,
        capacity: int = 256,
        ttl_seconds: float = 3600.0,
        max_retries: int = _MAX_RETRIES,
    ) -> None:
        try:
            import redis
        except ImportError as e:
            raise ImportError(
                "redis package required: pip install redis"
            ) from e

        self._client = redis.Redis.from_url(redis_url, decode_responses=True)
        self._redis_error: type[Exception] = redis.RedisError
        self._watch_error: type[Exception] = redis.WatchError
        self._capacity = capacity
        self._ttl = ttl_seconds
        self._max_retries = max_retries

    async def get(self, fingerprint: Fingerprint) -> AnalysisResult | None:
        """Retrieve a live result and refresh its recency."""
        key = fingerprint.hex
        redis_key = f"{_KEY_PREFIX}{key}"
        try:
            with self._client.pipeline(transaction=True) as pipe:
                pipe.watch(redis_key)
                data = pipe.get(redis_key)
                pipe.multi()
                if data is None:
                    # Expired by Redis; drop the stale recency record.
                    pipe.zrem(_LRU_KEY, key)
                else:
                    # xx: never re-add a member evicted since the read.
                    pipe.zadd(_LRU_KEY, {key: time.time()}, xx=True)
                try:
                    pipe.execute()
                except self._watch_error:
                    logger.debug(
                        "Entry %s changed during read; recency not updated", key[:12]
                    )
        except self._redis_error as e:
            raise CacheUnavailableError(f"redis get failed: {e}") from e

        if data is None:
            return None
        try:
            return AnalysisResult.model_validate_json(data)
        except ValidationError as e:
            logger.warning("Failed to deserialize cache entry %s: %s", key[:12], e)
            return None

    async def put(self, fingerprint: Fingerprint, result: AnalysisResult) -> None:
        """Store a result, evicting least-recently-used keys at capacity."""
        key = fingerprint.hex
        redis_key = f"{_KEY_PREFIX}{key}"
        payload = result.model_dump_json()
        try:
            with self._client.pipeline(transaction=True) as pipe:
                for _ in range(self._max_retries):
                    try:
                        evicted = self._put_once(pipe, key, redis_key, payload)
                    except self._watch_error:
                        logger.debug("Cache contention on %s; retrying put", key[:12])
                        continue
                    for member in evicted:
                        logger.debug("Evicted LRU cache entry: %s", member[:12])
                    return
        except self._redis_error as e:
            raise CacheUnavailableError(f"redis put failed: {e}") from e
        raise CacheUnavailableError(
            f"redis put failed: contention persisted after {self._max_retries} attempts"
        )

    def _put_once(self, pipe, key: str, redis_key: str, payload: str) -> list[str]:
        """One WATCH / plan / MULTI / EXEC attempt; returns evicted members."""
        pipe.watch(_LRU_KEY, redis_key)
        evicted: list[str] = []
        if not pipe.exists(redis_key):
            members = [m for m in pipe.zrange(_LRU_KEY, 0, -1) if m != key]
            overflow = len(members) - self._capacity + 1
            if overflow > 0:
                evicted = members[:overflow]

        pipe.multi()
        for member in evicted:
            pipe.delete(f"{_KEY_PREFIX}{member}")
            pipe.zrem(_LRU_KEY, member)
        pipe.setex(redis_key, max(1, int(self._ttl)), payload)
        pipe.zadd(_LRU_KEY, {key: time.time()})
        pipe.execute()
        return evicted

    async def delete(self, fingerprint: Fingerprint) -> None:
        key = fingerprint.hex
        try:
            with self._client.pipeline(transaction=True) as pipe:
                pipe.delete(f"{_KEY_PREFIX}{key}")
                pipe.zrem(_LRU_KEY, key)
                pipe.execute()
        except self._redis_error as e:
            raise CacheUnavailableError(f"redis delete failed: {e}") from e

    async def clear(self) -> None:
        try:
            keys = self._client.zrange(_LRU_KEY, 0, -1)
            for key in keys:
                self._client.delete(f"{_KEY_PREFIX}{key}")
            self._client.delete(_LRU_KEY)
        except self._redis_error as e:
            raise CacheUnavailableError(f"redis clear failed: {e}") from e

    async def size(self) -> int:
        try:
            return int(self._client.zcard(_LRU_KEY))
        except self._redis_error as e:
            raise CacheUnavailableError(f"redis size failed: {e}") from e

    def close(self) -> None:
        """Close the Redis connection."""
        self._client.close()
