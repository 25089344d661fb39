# src/pipeline/state.py — v2
"""Per-run pipeline state and its stage machine.

    idle -> cache_check -> dispatching -> collecting -> aggregating -> done
    cache_check -> done                  (cache hit)
    dispatching | collecting -> errored  (no analyzer succeeded)

A PipelineState belongs to exactly one run and is never shared.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field

from resumelens.core.models import ANALYZER_KINDS, PartialResult
from resumelens.logging.context import set_stage_context


class PipelineStage(str, Enum):
    IDLE = "idle"
    CACHE_CHECK = "cache_check"
    DISPATCHING = "dispatching"
    COLLECTING = "collecting"
    AGGREGATING = "aggregating"
    DONE = "done"
    ERRORED = "errored"


ALLOWED_TRANSITIONS: dict[PipelineStage, frozenset[PipelineStage]] = {
    PipelineStage.IDLE: frozenset({PipelineStage.CACHE_CHECK}),
    PipelineStage.CACHE_CHECK: frozenset({PipelineStage.DISPATCHING, PipelineStage.DONE}),
    PipelineStage.DISPATCHING: frozenset({PipelineStage.COLLECTING, PipelineStage.ERRORED}),
    PipelineStage.COLLECTING: frozenset({PipelineStage.AGGREGATING, PipelineStage.ERRORED}),
    PipelineStage.AGGREGATING: frozenset({PipelineStage.DONE}),
    PipelineStage.DONE: frozenset(),
    PipelineStage.ERRORED: frozenset(),
}


class InvalidTransitionError(Exception):
    """Raised on a stage change the state machine does not allow."""


def generate_run_id() -> str:
    """Generate a run ID: yyyymmdd_hhmmss_{uuid4_short}."""
    ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    return f"{ts}_{uuid.uuid4().hex[:8]}"


class PipelineState(BaseModel):
    """Mutable state of a single pipeline run."""

    run_id: str = Field(default_factory=generate_run_id)
    fingerprint: str = ""
    stage: PipelineStage = PipelineStage.IDLE
    history: list[PipelineStage] = Field(
        default_factory=lambda: [PipelineStage.IDLE]
    )
    from_cache: bool = False
    partials: dict[str, PartialResult] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def transition(self, target: PipelineStage) -> None:
        """Move to ``target`` or raise InvalidTransitionError."""
        if target not in ALLOWED_TRANSITIONS[self.stage]:
            raise InvalidTransitionError(
                f"cannot move from {self.stage.value} to {target.value}"
            )
        self.stage = target
        self.history.append(target)
        set_stage_context(target.value)

    def record_partial(self, partial: PartialResult) -> None:
        """Record one analyzer's result; the first result per kind wins."""
        self.partials.setdefault(partial.kind, partial)

    def ordered_partials(self) -> tuple[PartialResult, ...]:
        """Recorded partials in fixed kind order."""
        return tuple(self.partials[k] for k in ANALYZER_KINDS if k in self.partials)

    @property
    def succeeded_count(self) -> int:
        return sum(1 for p in self.partials.values() if p.succeeded)

    @property
    def is_terminal(self) -> bool:
        return self.stage in (PipelineStage.DONE, PipelineStage.ERRORED)
