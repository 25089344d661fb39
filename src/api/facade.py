# src/api/facade.py — v2
"""Public API facade — single entry point for document analysis.

Usage:
    from resumelens.api.facade import analyze
    result = await analyze(content, deadline=5.0)

The default orchestrator (and therefore the cache) is process-scoped and
created on first use.
"""

from __future__ import annotations

import logging

from resumelens.config.settings import Settings
from resumelens.core.models import AnalysisResult, ExtractedContent
from resumelens.pipeline.orchestrator import AnalysisOrchestrator

logger = logging.getLogger(__name__)

_default_orchestrator: AnalysisOrchestrator | None = None


async def analyze(
    content: ExtractedContent,
    deadline: float | None = None,
    settings: Settings | None = None,
) -> AnalysisResult:
    """Analyze extracted content and return score plus suggestions.

    Args:
        content: Content produced by the extraction collaborator.
        deadline: Seconds allowed for the run. Defaults to
            settings.pipeline_deadline_seconds.
        settings: Settings for the process-wide orchestrator. Only used
            when that orchestrator is first created.

    Returns:
        AnalysisResult. Never raises for analyzer or cache failures;
        inspect ``status`` / ``completeness`` instead.
    """
    orchestrator = get_orchestrator(settings)
    return await orchestrator.analyze(content, deadline)


def get_orchestrator(settings: Settings | None = None) -> AnalysisOrchestrator:
    """Return the process-wide orchestrator, creating it if needed."""
    global _default_orchestrator
    if _default_orchestrator is None:
        _default_orchestrator = AnalysisOrchestrator(settings=settings)
        logger.debug("Created default orchestrator")
    elif settings is not None:
        logger.debug("Default orchestrator already exists; ignoring settings")
    return _default_orchestrator


async def reset_orchestrator() -> None:
    """Close and drop the process-wide orchestrator (drops its cache too)."""
    global _default_orchestrator
    if _default_orchestrator is not None:
        await _default_orchestrator.close()
        _default_orchestrator = None
