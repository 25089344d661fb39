# tests/unit/logging/test_unit_context.py — v2
"""Tests for logging/context.py — contextual logging variables."""

from __future__ import annotations

from resumelens.logging.context import (
    clear_context,
    get_context,
    set_analyzer_context,
    set_run_context,
    set_stage_context,
)


class TestLogContext:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_initial_state(self):
        ctx = get_context()
        assert ctx.fingerprint is None
        assert ctx.run_id is None
        assert ctx.analyzer is None
        assert ctx.stage is None

    def test_set_run_context(self):
        set_run_context("abc123", "run1")
        ctx = get_context()
        assert ctx.fingerprint == "abc123"
        assert ctx.run_id == "run1"

    def test_set_analyzer_and_stage(self):
        set_analyzer_context("ats")
        set_stage_context("collecting")
        ctx = get_context()
        assert ctx.analyzer == "ats"
        assert ctx.stage == "collecting"

    def test_as_dict_filters_none(self):
        set_run_context("abc123", "run1")
        assert get_context().as_dict() == {"fingerprint": "abc123", "run_id": "run1"}

    def test_clear(self):
        set_run_context("abc123", "run1")
        set_analyzer_context("ats")
        clear_context()
        assert get_context().as_dict() == {}
