# src/cache/cache_factory.py — v3
"""Factory for cache store instantiation."""

from __future__ import annotations

from resumelens.cache.base_cache_store import BaseCacheStore
from resumelens.config.settings import Settings


def create_cache_store(settings: Settings | None = None) -> BaseCacheStore:
    """Instantiate the configured cache backend.

    Args:
        settings: Application settings. Defaults to the in-memory backend.

    Returns:
        Configured BaseCacheStore implementation.
    """
    if settings is not None and (
        not settings.cache_enabled or settings.cache_backend == "none"
    ):
        from resumelens.cache.null_store import NullCacheStore
        return NullCacheStore()

    backend = "memory" if settings is None else settings.cache_backend
    capacity = 256 if settings is None else settings.cache_capacity
    ttl_seconds = 3600.0 if settings is None else settings.cache_ttl_seconds

    if backend == "memory":
        from resumelens.cache.memory_store import MemoryCacheStore
        return MemoryCacheStore(capacity=capacity, ttl_seconds=ttl_seconds)

    if backend == "redis":
        from resumelens.cache.redis_store import RedisCacheStore
        if settings is None or not settings.cache_redis_url:
            raise ValueError(
                "CACHE_REDIS_URL must be set when CACHE_BACKEND=redis"
            )
        return RedisCacheStore(
            redis_url=settings.cache_redis_url,
            capacity=capacity,
            ttl_seconds=ttl_seconds,
        )

    raise ValueError(f"Unsupported cache backend: {backend!r}")
