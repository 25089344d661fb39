# src/scoring/ranker.py — v1
"""Turn analyzer issues into a bucketed, deduplicated suggestion list.

Buckets: high -> critical, medium -> recommended, low -> optional.
Issues are read in fixed analyzer-kind order so the output never depends
on which analyzer finished first.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from resumelens.core.models import (
    ANALYZER_KINDS,
    SEVERITY_RANK,
    AnalyzerSuccess,
    Issue,
    PartialResult,
    Suggestions,
)

DEFAULT_MAX_PER_BUCKET = 10

_SPACE_RE = re.compile(r"\s+")

_BUCKET_FOR_SEVERITY = {"high": "critical", "medium": "recommended", "low": "optional"}


class SuggestionRanker:
    """Rank issues into capped severity buckets.

    Args:
        max_per_bucket: Maximum suggestions kept in each bucket.
    """

    def __init__(self, max_per_bucket: int = DEFAULT_MAX_PER_BUCKET) -> None:
        if max_per_bucket < 1:
            raise ValueError("max_per_bucket must be >= 1")
        self._max_per_bucket = max_per_bucket

    def rank(self, partials: Iterable[PartialResult]) -> Suggestions:
        """Bucket, deduplicate, order and cap issues from successful partials."""
        by_kind: dict[str, AnalyzerSuccess] = {
            p.kind: p for p in partials if isinstance(p, AnalyzerSuccess)
        }

        # normalized text -> (first_seen, issue); a later duplicate only
        # replaces the severity/confidence if it is stronger.
        unique: dict[str, tuple[int, Issue]] = {}
        seen = 0
        for kind in ANALYZER_KINDS:
            partial = by_kind.get(kind)
            if partial is None:
                continue
            for issue in partial.issues:
                key = normalize_suggestion(issue.message)
                if not key:
                    continue
                if key not in unique:
                    unique[key] = (seen, issue)
                    seen += 1
                    continue
                first_seen, kept = unique[key]
                if _strength(issue) > _strength(kept):
                    unique[key] = (first_seen, issue)

        ordered = sorted(
            unique.values(),
            key=lambda item: (
                -SEVERITY_RANK[item[1].severity],
                -item[1].confidence,
                item[0],
            ),
        )

        buckets: dict[str, list[Issue]] = {"critical": [], "recommended": [], "optional": []}
        for _, issue in ordered:
            bucket = buckets[_BUCKET_FOR_SEVERITY[issue.severity]]
            if len(bucket) < self._max_per_bucket:
                bucket.append(issue)

        return Suggestions(
            critical=tuple(buckets["critical"]),
            recommended=tuple(buckets["recommended"]),
            optional=tuple(buckets["optional"]),
        )


def normalize_suggestion(text: str) -> str:
    """Dedup key: casefolded, whitespace collapsed, trailing punctuation dropped."""
    return _SPACE_RE.sub(" ", text.casefold()).strip().rstrip(".!;:,").strip()


def _strength(issue: Issue) -> tuple[int, float]:
    return SEVERITY_RANK[issue.severity], issue.confidence
