# src/analyzers/base_analyzer.py — v1
"""Standard analyzer interface.

Every analyzer exposes the same async entry point, analyze(content, deadline),
which never raises: internal errors, invalid output and deadline overruns are
all returned as an AnalyzerFailure carrying a reason code.
"""

from __future__ import annotations

import asyncio
import contextvars
import logging
import threading
import time
from abc import ABC, abstractmethod
from concurrent.futures import Executor
from typing import TYPE_CHECKING

from pydantic import ValidationError

from resumelens.core.models import (
    AnalyzerFailure,
    AnalyzerKind,
    AnalyzerSuccess,
    ExtractedContent,
    PartialResult,
)
from resumelens.logging.context import set_analyzer_context

if TYPE_CHECKING:
    from resumelens.config.settings import Settings

logger = logging.getLogger(__name__)


class AnalyzerError(Exception):
    """Raised inside an analyzer; converted to an AnalyzerFailure at its boundary."""


class AnalysisCancelled(AnalyzerError):
    """Raised by an analyzer that noticed its cancellation signal."""


class _Evaluation:
    """One evaluate() call handed to a worker thread."""

    __slots__ = ("executor", "started", "finished")

    def __init__(self, executor: Executor | None) -> None:
        self.executor = executor
        self.started = threading.Event()
        self.finished = threading.Event()

    @property
    def running(self) -> bool:
        return self.started.is_set() and not self.finished.is_set()


class BaseAnalyzer(ABC):
    """Standard interface for all analyzers.

    Analyzers are stateless: evaluate() may only read its arguments.
    """

    @property
    @abstractmethod
    def kind(self) -> AnalyzerKind:
        """Analyzer kind; also the aggregation weight key."""

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def description(self) -> str:
        return ""

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> BaseAnalyzer:
        """Build an instance from settings. Override to read options."""
        return cls()

    @abstractmethod
    def evaluate(
        self, content: ExtractedContent, cancel: threading.Event
    ) -> AnalyzerSuccess:
        """Compute this analyzer's contribution.

        Runs on a worker thread. Long evaluations should poll ``cancel``
        and stop with AnalysisCancelled once it is set.
        """

    def stuck_evaluations(self, executor: Executor | None = None) -> int:
        """Count evaluations on ``executor`` still running past their deadline."""
        return sum(1 for e in self._overrunning() if e.executor is executor)

    @property
    def is_overrunning(self) -> bool:
        """True while an earlier evaluation still holds a worker thread."""
        return bool(self._overrunning())

    async def analyze(
        self,
        content: ExtractedContent,
        deadline: float,
        executor: Executor | None = None,
        cancel: threading.Event | None = None,
    ) -> PartialResult:
        """Run evaluate() on a worker thread, bounded by ``deadline`` seconds.

        An evaluation that ignores its cancellation signal keeps its worker
        thread after the deadline. While one is still running, further calls
        fail at once with reason ``timeout`` instead of queueing behind it.

        Args:
            content: Immutable extracted content.
            deadline: Seconds allowed before the result is discarded.
            executor: Thread pool to run on (loop default if None).
            cancel: Cancellation signal, created if not supplied.

        Returns:
            AnalyzerSuccess, or AnalyzerFailure with reason
            timeout / error / cancelled / invalid_output.
        """
        if deadline <= 0:
            raise ValueError("deadline must be > 0")
        if self.is_overrunning:
            logger.warning(
                "Analyzer '%s' skipped: an earlier evaluation is still running",
                self.kind,
            )
            return AnalyzerFailure(
                kind=self.kind,
                reason="timeout",
                detail="earlier evaluation still running past its deadline",
            )

        cancel = cancel or threading.Event()
        loop = asyncio.get_running_loop()
        ctx = contextvars.copy_context()
        start_ns = time.monotonic_ns()
        evaluation = _Evaluation(executor)

        future = loop.run_in_executor(
            executor, ctx.run, self._evaluate_tracked, content, cancel, evaluation
        )
        try:
            return await asyncio.wait_for(future, timeout=deadline)
        except asyncio.TimeoutError:
            cancel.set()
            self._abandon(evaluation)
            logger.warning(
                "Analyzer '%s' exceeded deadline of %.2fs", self.kind, deadline
            )
            return AnalyzerFailure(
                kind=self.kind,
                reason="timeout",
                detail=f"no result within {deadline:.2f}s",
                duration_ms=_elapsed_ms(start_ns),
            )
        except asyncio.CancelledError:
            cancel.set()
            self._abandon(evaluation)
            raise

    def _evaluate_tracked(
        self,
        content: ExtractedContent,
        cancel: threading.Event,
        evaluation: _Evaluation,
    ) -> PartialResult:
        evaluation.started.set()
        try:
            if cancel.is_set():
                return self._failure(
                    "cancelled", "cancelled before start", time.monotonic_ns()
                )
            return self._evaluate_safely(content, cancel)
        finally:
            evaluation.finished.set()

    def _overrunning(self) -> list[_Evaluation]:
        """Abandoned evaluations that still hold a thread; finished ones are dropped."""
        live = [e for e in getattr(self, "_abandoned", ()) if e.running]
        self._abandoned = live
        return live

    def _abandon(self, evaluation: _Evaluation) -> None:
        self._abandoned = [*self._overrunning(), evaluation]

    def _evaluate_safely(
        self, content: ExtractedContent, cancel: threading.Event
    ) -> PartialResult:
        """Boundary wrapper: nothing raised by evaluate() escapes."""
        set_analyzer_context(self.kind)
        start_ns = time.monotonic_ns()
        try:
            result = self.evaluate(content, cancel)
        except AnalysisCancelled as exc:
            return self._failure("cancelled", str(exc), start_ns)
        except ValidationError as exc:
            logger.error("Analyzer '%s' produced invalid output: %s", self.kind, exc)
            return self._failure("invalid_output", str(exc), start_ns)
        except Exception as exc:
            logger.error("Analyzer '%s' failed: %s", self.kind, exc, exc_info=True)
            return self._failure("error", f"{type(exc).__name__}: {exc}", start_ns)

        if not isinstance(result, AnalyzerSuccess) or result.kind != self.kind:
            logger.error("Analyzer '%s' returned an unexpected result", self.kind)
            return self._failure("invalid_output", "unexpected result type", start_ns)

        duration_ms = _elapsed_ms(start_ns)
        logger.info(
            "Analyzer '%s' completed: score=%.1f, confidence=%.2f, issues=%d, time=%dms",
            self.kind, result.score, result.confidence, len(result.issues), duration_ms,
        )
        return result.model_copy(update={"duration_ms": duration_ms})

    def _failure(self, reason: str, detail: str, start_ns: int) -> AnalyzerFailure:
        return AnalyzerFailure(
            kind=self.kind,
            reason=reason,  # type: ignore[arg-type]
            detail=detail,
            duration_ms=_elapsed_ms(start_ns),
        )


def check_cancelled(cancel: threading.Event) -> None:
    """Raise AnalysisCancelled if the cancellation signal is set."""
    if cancel.is_set():
        raise AnalysisCancelled("cancellation requested")


def clamp_score(value: float) -> float:
    """Clamp to the 0-100 score range, rounded to 2 decimals."""
    return round(min(100.0, max(0.0, value)), 2)


def _elapsed_ms(start_ns: int) -> int:
    return (time.monotonic_ns() - start_ns) // 1_000_000
