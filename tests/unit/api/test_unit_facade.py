# tests/unit/api/test_unit_facade.py — v2
"""Tests for api/facade.py — process-wide analyze() entry point."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio

from resumelens.api import facade
from resumelens.config.settings import Settings


@pytest_asyncio.fixture
async def fresh_facade():
    await facade.reset_orchestrator()
    yield facade
    await facade.reset_orchestrator()


class TestFacade:
    @pytest.mark.asyncio
    async def test_analyze_end_to_end(self, fresh_facade, sample_content):
        settings = Settings(_env_file=None)
        result = await fresh_facade.analyze(sample_content, deadline=5.0, settings=settings)
        assert result.status == "complete"
        assert result.completeness is True
        assert 0.0 <= result.final_score.overall <= 100.0

    @pytest.mark.asyncio
    async def test_cache_is_process_wide(self, fresh_facade, sample_content):
        settings = Settings(_env_file=None)
        await fresh_facade.analyze(sample_content, deadline=5.0, settings=settings)
        second = await fresh_facade.analyze(sample_content, deadline=5.0)
        assert second.from_cache is True

    @pytest.mark.asyncio
    async def test_get_orchestrator_is_singleton(self, fresh_facade):
        first = fresh_facade.get_orchestrator(Settings(_env_file=None))
        assert fresh_facade.get_orchestrator() is first

    @pytest.mark.asyncio
    async def test_delegates_deadline(self, fresh_facade, sample_content):
        orch = fresh_facade.get_orchestrator(Settings(_env_file=None))
        with patch.object(orch, "analyze", new=AsyncMock(return_value="sentinel")) as mock:
            assert await fresh_facade.analyze(sample_content, deadline=2.5) == "sentinel"
        mock.assert_awaited_once_with(sample_content, 2.5)

    @pytest.mark.asyncio
    async def test_reset_drops_cache(self, fresh_facade, sample_content):
        settings = Settings(_env_file=None)
        await fresh_facade.analyze(sample_content, deadline=5.0, settings=settings)
        await fresh_facade.reset_orchestrator()
        again = await fresh_facade.analyze(sample_content, deadline=5.0, settings=settings)
        assert again.from_cache is False
