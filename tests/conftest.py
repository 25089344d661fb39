# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides sample resume content, isolated settings and orchestrator
builders over fake analyzers. No external dependencies; redis is mocked.
"""

from __future__ import annotations

import threading

import pytest

from fakes import SAMPLE_RESUME_LINES, build_registry, make_content
from resumelens.cache.memory_store import MemoryCacheStore
from resumelens.config.settings import Settings
from resumelens.core.models import ExtractedContent
from resumelens.logging.context import clear_context
from resumelens.pipeline.orchestrator import AnalysisOrchestrator


# === FIXTURES: Sample data ===


@pytest.fixture
def sample_content() -> ExtractedContent:
    """Well-formed single-column resume with the three core sections."""
    return make_content(SAMPLE_RESUME_LINES)


@pytest.fixture
def other_content() -> ExtractedContent:
    """A second, different document."""
    return make_content([
        ("heading", "Skills"),
        ("paragraph", "Excel, Tableau, communication"),
    ])


@pytest.fixture
def empty_content() -> ExtractedContent:
    return ExtractedContent()


# === FIXTURES: Settings and orchestrators ===


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def release_event():
    """Released on teardown so blocked worker threads always exit."""
    event = threading.Event()
    yield event
    event.set()


@pytest.fixture
def make_orchestrator(test_settings):
    """Factory for orchestrators over fake analyzers; pools are shut down on teardown."""
    created: list[AnalysisOrchestrator] = []

    def _make(*analyzers, cache_store=None, settings=None):
        orchestrator = AnalysisOrchestrator(
            settings=settings or test_settings,
            cache_store=cache_store if cache_store is not None else MemoryCacheStore(),
            registry=build_registry(*analyzers),
        )
        created.append(orchestrator)
        return orchestrator

    yield _make
    for orchestrator in created:
        if orchestrator._executor is not None:
            orchestrator._executor.shutdown(wait=False, cancel_futures=True)


@pytest.fixture(autouse=True)
def _reset_log_context():
    clear_context()
    yield
    clear_context()
