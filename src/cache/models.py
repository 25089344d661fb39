# src/cache/models.py — v2
"""Cache domain models: CacheEntry, CacheStats."""

from __future__ import annotations

from pydantic import BaseModel

from resumelens.core.models import AnalysisResult


class CacheEntry(BaseModel):
    """Single cache entry linking a fingerprint to its analysis result.

    Timestamps are monotonic-clock seconds for the in-memory backend.
    """

    fingerprint: str
    result: AnalysisResult
    created_at: float
    last_accessed: float


class CacheStats(BaseModel):
    """Counters exposed by cache backends for diagnostics."""

    hits: int = 0
    misses: int = 0
    expirations: int = 0
    evictions: int = 0
    size: int = 0
    capacity: int = 0
