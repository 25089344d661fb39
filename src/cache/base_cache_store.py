# src/cache/base_cache_store.py — v2
"""Abstract analysis cache interface.

A miss is a normal outcome and returns None. Backend faults raise
CacheUnavailableError so callers can treat them as a forced miss.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from resumelens.cache.models import CacheStats
from resumelens.core.models import AnalysisResult, Fingerprint


class CacheUnavailableError(Exception):
    """Raised when the cache backend cannot serve a request."""


class BaseCacheStore(ABC):
    """Unified interface for analysis cache backends."""

    @abstractmethod
    async def get(self, fingerprint: Fingerprint) -> AnalysisResult | None:
        """Return the live result for a fingerprint, or None."""

    @abstractmethod
    async def put(self, fingerprint: Fingerprint, result: AnalysisResult) -> None:
        """Insert or overwrite the result for a fingerprint."""

    @abstractmethod
    async def delete(self, fingerprint: Fingerprint) -> None:
        """Remove the entry for a fingerprint if present."""

    @abstractmethod
    async def clear(self) -> None:
        """Drop every entry."""

    @abstractmethod
    async def size(self) -> int:
        """Number of entries currently held (expired ones may be included)."""

    def stats(self) -> CacheStats:
        """Return backend counters. Backends without counters report zeros."""
        return CacheStats()
