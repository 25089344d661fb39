# src/logging/context.py — v2
"""Contextual logging support — attach fingerprint, run_id, analyzer, stage to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per pipeline run.
_fingerprint: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "fingerprint", default=None
)
_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_analyzer: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "analyzer", default=None
)
_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    fingerprint: str | None = None
    run_id: str | None = None
    analyzer: str | None = None
    stage: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        fingerprint=_fingerprint.get(),
        run_id=_run_id.get(),
        analyzer=_analyzer.get(),
        stage=_stage.get(),
    )


def set_run_context(fingerprint: str, run_id: str) -> None:
    """Set run-level context (called once per pipeline run)."""
    _fingerprint.set(fingerprint)
    _run_id.set(run_id)


def set_analyzer_context(analyzer: str) -> None:
    """Set analyzer-level context (called per analyzer execution)."""
    _analyzer.set(analyzer)


def set_stage_context(stage: str | None) -> None:
    """Set the current pipeline stage."""
    _stage.set(stage)


def clear_context() -> None:
    """Reset all context variables."""
    _fingerprint.set(None)
    _run_id.set(None)
    _analyzer.set(None)
    _stage.set(None)
