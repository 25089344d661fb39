# tests/unit/scoring/test_unit_aggregator.py — v1
"""Tests for scoring/aggregator.py — weighted scores with redistribution."""

from __future__ import annotations

import itertools

import pytest

from resumelens.core.models import AnalyzerFailure, AnalyzerSuccess
from resumelens.scoring.aggregator import DEFAULT_WEIGHTS, ScoreAggregator


def _ok(kind: str, score: float) -> AnalyzerSuccess:
    return AnalyzerSuccess(kind=kind, score=score)


def _failed(kind: str) -> AnalyzerFailure:
    return AnalyzerFailure(kind=kind, reason="timeout")


class TestScoreAggregatorInit:
    def test_defaults(self):
        assert ScoreAggregator().weights == DEFAULT_WEIGHTS

    def test_missing_weight(self):
        with pytest.raises(ValueError, match="missing"):
            ScoreAggregator({"ats": 0.5, "content": 0.5})

    def test_negative_weight(self):
        with pytest.raises(ValueError, match=">= 0"):
            ScoreAggregator({"structure": -0.2, "ats": 0.6, "content": 0.6})

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValueError, match="sum"):
            ScoreAggregator({"structure": 0.3, "ats": 0.3, "content": 0.3})


class TestAggregate:
    def test_all_succeed(self):
        final = ScoreAggregator().aggregate([
            _ok("structure", 90), _ok("ats", 70), _ok("content", 85),
        ])
        assert final.overall == 80.5
        assert final.confidence == 1.0
        assert final.breakdown.ats == 70
        assert sum(final.effective_weights.values()) == pytest.approx(1.0)

    def test_equal_scores_give_that_score(self):
        final = ScoreAggregator().aggregate([
            _ok("structure", 80), _ok("ats", 80), _ok("content", 80),
        ])
        assert final.overall == 80.0

    def test_redistributes_failed_weight(self):
        final = ScoreAggregator().aggregate([
            _ok("structure", 80), _failed("ats"), _ok("content", 80),
        ])
        assert final.overall == 80.0
        assert final.confidence == 0.667
        assert final.breakdown.ats is None
        assert final.effective_weights == {"structure": 0.5, "content": 0.5}

    def test_proportional_redistribution(self):
        final = ScoreAggregator().aggregate([
            _ok("structure", 100), _ok("ats", 0), _failed("content"),
        ])
        # 0.3 / 0.7 of the weight goes to structure
        assert final.overall == pytest.approx(42.86, abs=0.01)

    def test_single_success(self):
        final = ScoreAggregator().aggregate([_ok("ats", 64)])
        assert final.overall == 64.0
        assert final.confidence == 0.333
        assert final.effective_weights == {"ats": 1.0}

    def test_no_success(self):
        final = ScoreAggregator().aggregate([_failed("ats")])
        assert final.overall == 0.0
        assert final.confidence == 0.0
        assert final.effective_weights == {}

    def test_order_independent(self):
        partials = [_ok("structure", 61.3), _ok("ats", 77.7), _ok("content", 12.9)]
        aggregator = ScoreAggregator()
        results = {
            aggregator.aggregate(list(p)).overall
            for p in itertools.permutations(partials)
        }
        assert len(results) == 1

    def test_zero_weight_successes_split_evenly(self):
        aggregator = ScoreAggregator({"structure": 0.0, "ats": 1.0, "content": 0.0})
        final = aggregator.aggregate([_ok("structure", 40), _ok("content", 60)])
        assert final.overall == 50.0

    def test_degradation_never_raises_confidence(self):
        aggregator = ScoreAggregator()
        full = aggregator.aggregate([_ok("structure", 50), _ok("ats", 50), _ok("content", 50)])
        for failed in ("structure", "ats", "content"):
            partials = [
                _failed(k) if k == failed else _ok(k, 50)
                for k in ("structure", "ats", "content")
            ]
            assert aggregator.aggregate(partials).confidence < full.confidence
