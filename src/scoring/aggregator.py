# src/scoring/aggregator.py — v1
"""Weighted combination of analyzer scores into a FinalScore.

Weights of failed analyzers are redistributed proportionally among the
successful ones, so the effective weights used always sum to 1. The result
depends only on the set of successful partials, never on their order.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping

from resumelens.core.models import (
    ANALYZER_KINDS,
    AnalyzerSuccess,
    FinalScore,
    PartialResult,
    ScoreBreakdown,
)

logger = logging.getLogger(__name__)

DEFAULT_WEIGHTS: dict[str, float] = {"structure": 0.3, "ats": 0.4, "content": 0.3}


class ScoreAggregator:
    """Combine partial results into one normalized overall score.

    Args:
        weights: Weight per analyzer kind; must be non-negative and sum to 1.
    """

    def __init__(self, weights: Mapping[str, float] | None = None) -> None:
        weights = dict(DEFAULT_WEIGHTS if weights is None else weights)
        missing = [k for k in ANALYZER_KINDS if k not in weights]
        if missing:
            raise ValueError(f"missing weights for: {', '.join(missing)}")
        if any(w < 0 for w in weights.values()):
            raise ValueError("weights must be >= 0")
        if not math.isclose(sum(weights[k] for k in ANALYZER_KINDS), 1.0, abs_tol=1e-6):
            raise ValueError("weights must sum to 1.0")
        self._weights = {k: float(weights[k]) for k in ANALYZER_KINDS}

    @property
    def weights(self) -> dict[str, float]:
        return dict(self._weights)

    def aggregate(self, partials: Iterable[PartialResult]) -> FinalScore:
        """Compute the FinalScore from whatever partials are available."""
        successes: dict[str, AnalyzerSuccess] = {}
        for partial in partials:
            if isinstance(partial, AnalyzerSuccess):
                successes[partial.kind] = partial

        confidence = round(len(successes) / len(ANALYZER_KINDS), 3)
        effective = self.effective_weights(successes.keys())

        overall = 0.0
        for kind in ANALYZER_KINDS:
            if kind in effective:
                overall += successes[kind].score * effective[kind]

        breakdown = ScoreBreakdown(
            **{kind: successes[kind].score for kind in successes}
        )
        return FinalScore(
            overall=round(min(100.0, max(0.0, overall)), 2),
            breakdown=breakdown,
            confidence=confidence,
            effective_weights=effective,
        )

    def effective_weights(self, succeeded: Iterable[str]) -> dict[str, float]:
        """Redistribute weight proportionally over the succeeded kinds.

        If every succeeded kind has zero configured weight, they share the
        weight equally.
        """
        kinds = [k for k in ANALYZER_KINDS if k in set(succeeded)]
        if not kinds:
            return {}
        total = sum(self._weights[k] for k in kinds)
        if total <= 0:
            logger.warning("All succeeded analyzers have zero weight; splitting evenly")
            return {k: 1.0 / len(kinds) for k in kinds}
        return {k: self._weights[k] / total for k in kinds}
