# tests/unit/core/test_unit_models.py — v2
"""Tests for core/models.py — domain models and their invariants."""

from __future__ import annotations

import hashlib

import pytest
from pydantic import TypeAdapter, ValidationError

from resumelens.core.models import (
    AnalysisResult,
    AnalyzerFailure,
    AnalyzerSuccess,
    ContentBlock,
    ExtractedContent,
    FinalScore,
    Fingerprint,
    Issue,
    LayoutSummary,
    PartialResult,
    Suggestions,
)


def _result(**overrides) -> AnalysisResult:
    defaults = dict(
        fingerprint="ab" * 32,
        run_id="20260101_000000_abcd1234",
        final_score=FinalScore(overall=80.0, confidence=1.0),
        suggestions=Suggestions(),
        completeness=True,
        status="complete",
    )
    defaults.update(overrides)
    return AnalysisResult(**defaults)


class TestExtractedContent:
    def test_defaults(self):
        content = ExtractedContent()
        assert content.text == ""
        assert content.blocks == ()
        assert content.layout.column_count == 1

    def test_frozen(self):
        content = ExtractedContent(text="hello")
        with pytest.raises(ValidationError):
            content.text = "changed"

    def test_layout_rejects_zero_columns(self):
        with pytest.raises(ValidationError):
            LayoutSummary(column_count=0)

    def test_block_rejects_negative_position(self):
        with pytest.raises(ValidationError):
            ContentBlock(type="paragraph", text="x", position=-1)

    def test_from_text_guesses_block_types(self):
        content = ExtractedContent.from_text(
            "EXPERIENCE\n\n- Led a team of five\nI enjoy building reliable systems."
        )
        types = [b.type for b in content.blocks]
        assert types == ["heading", "list", "paragraph"]
        assert [b.position for b in content.blocks] == [0, 1, 2]

    def test_from_text_keeps_layout(self):
        layout = LayoutSummary(column_count=2)
        content = ExtractedContent.from_text("Skills", layout=layout)
        assert content.layout.column_count == 2


class TestFingerprint:
    def test_hex(self):
        digest = hashlib.sha256(b"x").digest()
        fp = Fingerprint(digest=digest)
        assert fp.hex == digest.hex()
        assert str(fp) == digest.hex()

    def test_rejects_wrong_length(self):
        with pytest.raises(ValidationError):
            Fingerprint(digest=b"short")

    def test_hashable_and_equal(self):
        digest = hashlib.sha256(b"x").digest()
        assert Fingerprint(digest=digest) == Fingerprint(digest=digest)
        assert len({Fingerprint(digest=digest), Fingerprint(digest=digest)}) == 1


class TestPartialResults:
    def test_success_score_bounds(self):
        with pytest.raises(ValidationError):
            AnalyzerSuccess(kind="ats", score=101.0)
        with pytest.raises(ValidationError):
            AnalyzerSuccess(kind="ats", score=-1.0)

    def test_success_sub_score_bounds(self):
        with pytest.raises(ValidationError):
            AnalyzerSuccess(kind="ats", score=50.0, sub_scores={"formatting": 120.0})

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            AnalyzerSuccess(kind="spelling", score=50.0)

    def test_succeeded_flags(self):
        assert AnalyzerSuccess(kind="ats", score=1.0).succeeded is True
        assert AnalyzerFailure(kind="ats", reason="timeout").succeeded is False

    def test_discriminated_union_round_trip(self):
        adapter = TypeAdapter(PartialResult)
        failure = adapter.validate_python(
            {"status": "failed", "kind": "content", "reason": "error"}
        )
        assert isinstance(failure, AnalyzerFailure)
        success = adapter.validate_python({"status": "ok", "kind": "ats", "score": 70})
        assert isinstance(success, AnalyzerSuccess)

    def test_issue_confidence_bounds(self):
        with pytest.raises(ValidationError):
            Issue(code="x", message="m", severity="high", confidence=1.5, analyzer="ats")


class TestAnalysisResult:
    def test_failed_analyzers(self):
        result = _result(
            partials=(
                AnalyzerSuccess(kind="structure", score=80.0),
                AnalyzerFailure(kind="ats", reason="timeout"),
            ),
            completeness=False,
            status="partial",
        )
        assert result.failed_analyzers == ["ats"]

    def test_content_equals_ignores_cache_flag(self):
        result = _result()
        copy = result.model_copy(update={"from_cache": True})
        assert copy.from_cache is True
        assert result.content_equals(copy)

    def test_content_equals_detects_difference(self):
        result = _result()
        other = _result(final_score=FinalScore(overall=10.0, confidence=1.0))
        assert not result.content_equals(other)

    def test_json_round_trip_keeps_partial_types(self):
        result = _result(
            partials=(
                AnalyzerSuccess(kind="structure", score=80.0),
                AnalyzerFailure(kind="ats", reason="timeout"),
            ),
            completeness=False,
            status="partial",
        )
        restored = AnalysisResult.model_validate_json(result.model_dump_json())
        assert restored == result
        assert isinstance(restored.partials[1], AnalyzerFailure)


class TestSuggestions:
    def test_all_in_bucket_order(self):
        high = Issue(code="a", message="a", severity="high", analyzer="ats")
        low = Issue(code="b", message="b", severity="low", analyzer="ats")
        suggestions = Suggestions(critical=(high,), optional=(low,))
        assert suggestions.all() == [high, low]
