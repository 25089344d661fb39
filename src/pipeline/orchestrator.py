# src/pipeline/orchestrator.py — v2
"""Analysis orchestrator — cache check, concurrent dispatch, aggregation.

Drives one run through the stage machine in pipeline/state.py:
  cache_check: fingerprint the content and look it up; a hit returns the
               cached result flagged from_cache=True
  dispatching: start every registered analyzer on the thread pool
  collecting:  wait for all of them or the run deadline, whichever is first
  aggregating: score, rank suggestions, write through to the cache
  errored:     nothing succeeded; return an uncached degraded result

No failure escapes analyze(): analyzer errors and timeouts become failure
partials and cache faults become forced misses.
"""

from __future__ import annotations

import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from resumelens.cache.cache_factory import create_cache_store
from resumelens.cache.fingerprint import compute_fingerprint
from resumelens.config.settings import Settings
from resumelens.core.models import (
    ANALYZER_KINDS,
    AnalysisResult,
    AnalyzerFailure,
    ExtractedContent,
    FinalScore,
    Fingerprint,
    Issue,
    PartialResult,
    Suggestions,
)
from resumelens.logging.context import clear_context, set_run_context
from resumelens.pipeline.registry import AnalyzerRegistry
from resumelens.pipeline.state import PipelineStage, PipelineState
from resumelens.scoring.aggregator import ScoreAggregator
from resumelens.scoring.ranker import SuggestionRanker

if TYPE_CHECKING:
    from resumelens.analyzers.base_analyzer import BaseAnalyzer
    from resumelens.cache.base_cache_store import BaseCacheStore

logger = logging.getLogger(__name__)

INCOMPLETE_MESSAGE = "Analysis could not complete. Please try again."


class AnalysisOrchestrator:
    """Top-level orchestrator for one-document analysis runs.

    Args:
        settings: Application settings. Loaded from .env if None.
        cache_store: Cache backend. Built from settings if None.
        registry: Analyzer registry. Loaded from ANALYZER_REGISTRY if None.
        aggregator: Score aggregator. Built from settings weights if None.
        ranker: Suggestion ranker. Built from settings if None.
        executor: Thread pool for analyzers. Owned and created lazily if None.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        cache_store: BaseCacheStore | None = None,
        registry: AnalyzerRegistry | None = None,
        aggregator: ScoreAggregator | None = None,
        ranker: SuggestionRanker | None = None,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._cache = (
            cache_store if cache_store is not None else create_cache_store(self._settings)
        )
        if registry is None:
            registry = AnalyzerRegistry()
            registry.load_all(self._settings)
        self._registry = registry
        self._aggregator = aggregator or ScoreAggregator(self._settings.weights)
        self._ranker = ranker or SuggestionRanker(self._settings.max_suggestions_per_bucket)
        self._executor = executor
        self._owns_executor = executor is None

    @property
    def cache(self) -> BaseCacheStore:
        return self._cache

    @property
    def registry(self) -> AnalyzerRegistry:
        return self._registry

    async def analyze(
        self,
        content: ExtractedContent,
        deadline: float | None = None,
    ) -> AnalysisResult:
        """Analyze content and return a well-formed result.

        Args:
            content: Immutable extracted content.
            deadline: Seconds for the whole run. Defaults to
                settings.pipeline_deadline_seconds.

        Returns:
            AnalysisResult; check ``completeness`` / ``status`` for
            partial or failed runs and ``from_cache`` for cache hits.

        Raises:
            ValueError: If deadline is not positive.
        """
        if deadline is None:
            deadline = self._settings.pipeline_deadline_seconds
        if deadline <= 0:
            raise ValueError("deadline must be > 0")

        state = PipelineState()
        start_ns = time.monotonic_ns()
        try:
            return await self._run(state, content, deadline, start_ns)
        finally:
            clear_context()

    async def close(self) -> None:
        """Release the owned thread pool; running analyzers are not waited on."""
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

    async def __aenter__(self) -> AnalysisOrchestrator:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    async def _run(
        self,
        state: PipelineState,
        content: ExtractedContent,
        deadline: float,
        start_ns: int,
    ) -> AnalysisResult:
        state.transition(PipelineStage.CACHE_CHECK)
        fingerprint = compute_fingerprint(content)
        state.fingerprint = fingerprint.hex
        set_run_context(fingerprint.hex, state.run_id)

        cached = await self._cache_get(fingerprint)
        if cached is not None:
            state.from_cache = True
            state.transition(PipelineStage.DONE)
            logger.info("Cache hit for %s (run %s)", fingerprint.hex[:12], cached.run_id)
            return cached.model_copy(update={"from_cache": True})

        state.transition(PipelineStage.DISPATCHING)
        analyzers = self._registry.analyzers
        if not analyzers:
            logger.error("No analyzers registered; nothing to dispatch")
            state.transition(PipelineStage.ERRORED)
            return self._degraded_result(state, start_ns)

        tasks = self._dispatch(analyzers, content, deadline)

        state.transition(PipelineStage.COLLECTING)
        await self._collect(state, tasks, deadline)
        for kind in self._registry.missing_kinds():
            state.record_partial(AnalyzerFailure(
                kind=kind, reason="error", detail="no analyzer registered"
            ))

        if state.succeeded_count == 0:
            logger.error("All analyzers failed for %s", fingerprint.hex[:12])
            state.transition(PipelineStage.ERRORED)
            return self._degraded_result(state, start_ns)

        state.transition(PipelineStage.AGGREGATING)
        result = self._aggregate(state, start_ns)
        await self._cache_put(fingerprint, result)
        state.transition(PipelineStage.DONE)

        logger.info(
            "Analysis complete: overall=%.2f, confidence=%.3f, status=%s, %dms",
            result.final_score.overall,
            result.final_score.confidence,
            result.status,
            result.duration_ms,
        )
        return result

    def _dispatch(
        self,
        analyzers: list[BaseAnalyzer],
        content: ExtractedContent,
        deadline: float,
    ) -> dict[asyncio.Task[PartialResult], str]:
        """Start every analyzer concurrently against the same content."""
        per_analyzer = min(self._settings.analyzer_deadline_seconds, deadline)
        executor = self._get_executor()
        tasks: dict[asyncio.Task[PartialResult], str] = {}
        for analyzer in analyzers:
            task = asyncio.create_task(
                analyzer.analyze(content, per_analyzer, executor),
                name=f"analyzer:{analyzer.kind}",
            )
            tasks[task] = analyzer.kind
        logger.debug(
            "Dispatched %d analyzers (deadline %.2fs each)", len(tasks), per_analyzer
        )
        return tasks

    async def _collect(
        self,
        state: PipelineState,
        tasks: dict[asyncio.Task[PartialResult], str],
        deadline: float,
    ) -> None:
        """Wait for all tasks or the deadline; unfinished tasks become timeouts."""
        done, pending = await asyncio.wait(tasks.keys(), timeout=deadline)

        for task in pending:
            task.cancel()
            kind = tasks[task]
            logger.warning("Analyzer '%s' still running at run deadline", kind)
            state.record_partial(AnalyzerFailure(
                kind=kind,
                reason="timeout",
                detail=f"run deadline of {deadline:.2f}s exceeded",
            ))
        if pending:
            # Worker threads are not joined; only the asyncio side unwinds here.
            await asyncio.wait(pending)

        for task in done:
            kind = tasks[task]
            if task.cancelled():
                state.record_partial(AnalyzerFailure(
                    kind=kind, reason="cancelled", detail="task cancelled"
                ))
                continue
            exc = task.exception()
            if exc is not None:
                logger.error("Analyzer '%s' raised past its boundary: %s", kind, exc)
                state.record_partial(AnalyzerFailure(
                    kind=kind, reason="error", detail=f"{type(exc).__name__}: {exc}"
                ))
                continue
            state.record_partial(task.result())

    def _aggregate(self, state: PipelineState, start_ns: int) -> AnalysisResult:
        partials = state.ordered_partials()
        final_score = self._aggregator.aggregate(partials)
        suggestions = self._ranker.rank(partials)
        completeness = all(
            kind in state.partials and state.partials[kind].succeeded
            for kind in ANALYZER_KINDS
        )
        return AnalysisResult(
            fingerprint=state.fingerprint,
            run_id=state.run_id,
            final_score=final_score,
            suggestions=suggestions,
            analyzer_confidence={
                p.kind: (p.confidence if p.succeeded else 0.0) for p in partials
            },
            partials=partials,
            completeness=completeness,
            status="complete" if completeness else "partial",
            duration_ms=_elapsed_ms(start_ns),
        )

    def _degraded_result(self, state: PipelineState, start_ns: int) -> AnalysisResult:
        """Result for a run where no analyzer succeeded. Never cached."""
        partials = state.ordered_partials()
        notice = Issue(
            code="analysis_incomplete",
            message=INCOMPLETE_MESSAGE,
            severity="high",
            confidence=1.0,
            analyzer="pipeline",
        )
        return AnalysisResult(
            fingerprint=state.fingerprint,
            run_id=state.run_id,
            final_score=FinalScore(overall=0.0, confidence=0.0),
            suggestions=Suggestions(critical=(notice,)),
            analyzer_confidence={p.kind: 0.0 for p in partials},
            partials=partials,
            completeness=False,
            status="failed",
            duration_ms=_elapsed_ms(start_ns),
        )

    # ------------------------------------------------------------------
    # Cache access (backend faults become forced misses)
    # ------------------------------------------------------------------

    async def _cache_get(self, fingerprint: Fingerprint) -> AnalysisResult | None:
        try:
            return await self._cache.get(fingerprint)
        except Exception as exc:
            logger.warning("Cache lookup failed, treating as miss: %s", exc)
            return None

    async def _cache_put(self, fingerprint: Fingerprint, result: AnalysisResult) -> None:
        try:
            await self._cache.put(fingerprint, result)
        except Exception as exc:
            logger.warning("Cache write failed, result not cached: %s", exc)

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is not None and self._owns_executor:
            self._retire_pinned_executor()
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self._settings.analyzer_max_workers,
                thread_name_prefix="resumelens-analyzer",
            )
        return self._executor

    def _retire_pinned_executor(self) -> None:
        """Drop the pool when overrunning evaluations leave too few free workers.

        Retired threads finish on their own; new work goes to a fresh pool.
        """
        analyzers = self._registry.analyzers
        stuck = sum(a.stuck_evaluations(self._executor) for a in analyzers)
        runnable = sum(1 for a in analyzers if not a.is_overrunning)
        if stuck == 0 or self._settings.analyzer_max_workers - stuck >= runnable:
            return
        logger.warning(
            "%d of %d analyzer workers held by overrunning evaluations; "
            "starting a fresh pool",
            stuck,
            self._settings.analyzer_max_workers,
        )
        self._executor.shutdown(wait=False)
        self._executor = None


def _elapsed_ms(start_ns: int) -> int:
    return (time.monotonic_ns() - start_ns) // 1_000_000
