# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
Every model here is frozen: extracted content, partial results and
analysis results are never mutated after creation.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, field_validator

BlockType = Literal["paragraph", "list", "heading"]
AnalyzerKind = Literal["structure", "ats", "content"]
Severity = Literal["high", "medium", "low"]
FailureReason = Literal["timeout", "error", "cancelled", "invalid_output"]
ResultStatus = Literal["complete", "partial", "failed"]
IssueSource = Literal["structure", "ats", "content", "pipeline"]

# Fixed visiting order for anything that must not depend on completion order.
ANALYZER_KINDS: tuple[AnalyzerKind, ...] = ("structure", "ats", "content")

SEVERITY_RANK: dict[str, int] = {"high": 3, "medium": 2, "low": 1}


# === EXTRACTED CONTENT ===


class ContentBlock(BaseModel):
    """One block of extracted content, in reading order."""

    model_config = {"frozen": True}

    type: BlockType
    text: str
    position: int = Field(ge=0)


class LayoutSummary(BaseModel):
    """Layout signals reported by the extraction collaborator."""

    model_config = {"frozen": True}

    column_count: int = Field(default=1, ge=1)
    has_header: bool = False
    has_footer: bool = False
    has_tables: bool = False
    has_images: bool = False


class ExtractedContent(BaseModel):
    """Normalized text plus ordered blocks and layout summary.

    Produced once by the extraction collaborator; read-only to the core.
    """

    model_config = {"frozen": True}

    text: str = ""
    blocks: tuple[ContentBlock, ...] = ()
    layout: LayoutSummary = Field(default_factory=LayoutSummary)

    @classmethod
    def from_text(cls, text: str, layout: LayoutSummary | None = None) -> ExtractedContent:
        """Build content from plain text, one block per non-empty line.

        Lines that look like section titles become headings, bullet lines
        become list blocks, everything else is a paragraph.
        """
        blocks: list[ContentBlock] = []
        for line in text.splitlines():
            stripped = line.strip()
            if not stripped:
                continue
            blocks.append(
                ContentBlock(
                    type=_guess_block_type(stripped),
                    text=stripped,
                    position=len(blocks),
                )
            )
        return cls(text=text, blocks=tuple(blocks), layout=layout or LayoutSummary())


def _guess_block_type(line: str) -> BlockType:
    if line[0] in "-*•●◦":
        return "list"
    words = line.split()
    if len(words) <= 4 and not line.endswith((".", ",", ";")) and (
        line.isupper() or line.istitle()
    ):
        return "heading"
    return "paragraph"


# === FINGERPRINT ===


class Fingerprint(BaseModel):
    """Content-derived cache key (SHA-256 digest)."""

    model_config = {"frozen": True, "ser_json_bytes": "hex"}

    digest: bytes

    @field_validator("digest")
    @classmethod
    def validate_digest(cls, v: bytes) -> bytes:
        if len(v) != 32:
            raise ValueError("fingerprint digest must be 32 bytes")
        return v

    @property
    def hex(self) -> str:
        return self.digest.hex()

    def __str__(self) -> str:
        return self.hex


# === PARTIAL RESULTS ===


class Issue(BaseModel):
    """A single problem or improvement suggestion raised by an analyzer."""

    model_config = {"frozen": True}

    code: str
    message: str
    severity: Severity
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    analyzer: IssueSource


class AnalyzerSuccess(BaseModel):
    """Successful contribution of one analyzer."""

    model_config = {"frozen": True}

    status: Literal["ok"] = "ok"
    kind: AnalyzerKind
    score: float = Field(ge=0.0, le=100.0)
    sub_scores: dict[str, Annotated[float, Field(ge=0.0, le=100.0)]] = Field(
        default_factory=dict
    )
    issues: tuple[Issue, ...] = ()
    metrics: dict[str, Any] = Field(default_factory=dict)
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    duration_ms: int = 0

    @property
    def succeeded(self) -> bool:
        return True


class AnalyzerFailure(BaseModel):
    """Failure marker for an analyzer that errored or ran out of time."""

    model_config = {"frozen": True}

    status: Literal["failed"] = "failed"
    kind: AnalyzerKind
    reason: FailureReason
    detail: str = ""
    duration_ms: int = 0

    @property
    def succeeded(self) -> bool:
        return False


PartialResult = Annotated[
    AnalyzerSuccess | AnalyzerFailure, Field(discriminator="status")
]


# === SCORING ===


class ScoreBreakdown(BaseModel):
    """Per-component scores; None for a component that did not contribute."""

    model_config = {"frozen": True}

    ats: float | None = None
    content: float | None = None
    structure: float | None = None


class FinalScore(BaseModel):
    """Overall score derived from partial results. Never mutated in place."""

    model_config = {"frozen": True}

    overall: float = Field(ge=0.0, le=100.0)
    breakdown: ScoreBreakdown = Field(default_factory=ScoreBreakdown)
    confidence: float = Field(ge=0.0, le=1.0)
    effective_weights: dict[str, float] = Field(default_factory=dict)


class Suggestions(BaseModel):
    """Ranked, deduplicated suggestions bucketed by severity."""

    model_config = {"frozen": True}

    critical: tuple[Issue, ...] = ()
    recommended: tuple[Issue, ...] = ()
    optional: tuple[Issue, ...] = ()

    def all(self) -> list[Issue]:
        return [*self.critical, *self.recommended, *self.optional]


# === ANALYSIS RESULT ===


class AnalysisResult(BaseModel):
    """Aggregate of all partial results for one fingerprint."""

    model_config = {"frozen": True}

    fingerprint: str
    run_id: str
    final_score: FinalScore
    suggestions: Suggestions
    analyzer_confidence: dict[str, float] = Field(default_factory=dict)
    partials: tuple[PartialResult, ...] = ()
    completeness: bool
    status: ResultStatus
    from_cache: bool = False
    duration_ms: int = 0
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def failed_analyzers(self) -> list[str]:
        return [p.kind for p in self.partials if not p.succeeded]

    def content_equals(self, other: AnalysisResult) -> bool:
        """Compare everything except the per-call cache flag."""
        exclude = {"from_cache"}
        return self.model_dump(exclude=exclude) == other.model_dump(exclude=exclude)
