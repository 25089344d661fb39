# src/cache/null_store.py — v1
"""No-op cache store (CACHE_BACKEND=none or CACHE_ENABLED=false)."""

from __future__ import annotations

from resumelens.cache.base_cache_store import BaseCacheStore
from resumelens.core.models import AnalysisResult, Fingerprint


class NullCacheStore(BaseCacheStore):
    """Cache that never stores anything; every lookup is a miss."""

    async def get(self, fingerprint: Fingerprint) -> AnalysisResult | None:
        return None

    async def put(self, fingerprint: Fingerprint, result: AnalysisResult) -> None:
        return None

    async def delete(self, fingerprint: Fingerprint) -> None:
        return None

    async def clear(self) -> None:
        return None

    async def size(self) -> int:
        return 0
