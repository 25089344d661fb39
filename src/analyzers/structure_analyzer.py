# src/analyzers/structure_analyzer.py — v1
"""Structure analyzer — partition content blocks into labeled sections.

Sections are opened by heading blocks and labeled education, experience,
skills or other. Each section gets a confidence from its heading match and
the evidence found in its body. A section below the confidence threshold is
reported as an issue, never as a failure.
"""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass, field

from resumelens.analyzers.base_analyzer import BaseAnalyzer, check_cancelled, clamp_score
from resumelens.analyzers.lexicon import (
    OTHER_HEADINGS,
    SECTION_EVIDENCE,
    SECTION_HEADINGS,
    SECTION_KEYWORDS,
)
from resumelens.config.settings import Settings
from resumelens.core.models import (
    AnalyzerKind,
    AnalyzerSuccess,
    ContentBlock,
    ExtractedContent,
    Issue,
)

CORE_SECTIONS: tuple[str, ...] = ("education", "experience", "skills")
DEFAULT_CONFIDENCE_THRESHOLD = 0.5

# Penalty and severity when a core section is absent.
_MISSING_SECTION_RULES: dict[str, tuple[int, str]] = {
    "experience": (25, "high"),
    "education": (20, "medium"),
    "skills": (20, "medium"),
}

_HEADING_WEIGHT = 0.75
_EVIDENCE_WEIGHT = 0.25
_WORD_RE = re.compile(r"[a-z0-9.+#]+")


@dataclass
class DetectedSection:
    """A run of blocks under one heading."""

    label: str
    heading: str
    heading_confidence: float
    blocks: list[ContentBlock] = field(default_factory=list)
    confidence: float = 0.0

    def as_dict(self) -> dict[str, object]:
        return {
            "label": self.label,
            "heading": self.heading,
            "block_count": len(self.blocks),
            "confidence": self.confidence,
        }


class StructureAnalyzer(BaseAnalyzer):
    """Section partitioning and coverage scoring."""

    def __init__(
        self, confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
    ) -> None:
        self._threshold = confidence_threshold

    @property
    def kind(self) -> AnalyzerKind:
        return "structure"

    @property
    def description(self) -> str:
        return "Partitions content into sections and scores section coverage."

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> StructureAnalyzer:
        if settings is None:
            return cls()
        return cls(confidence_threshold=settings.section_confidence_threshold)

    def evaluate(
        self, content: ExtractedContent, cancel: threading.Event
    ) -> AnalyzerSuccess:
        blocks = content.blocks or ExtractedContent.from_text(content.text).blocks
        sections = partition_sections(blocks)
        check_cancelled(cancel)

        issues: list[Issue] = []
        score = 100.0

        if not any(b.type == "heading" for b in blocks):
            issues.append(self._issue(
                "no_section_headings",
                "Add clear section headings such as Experience, Education and Skills.",
                "high",
            ))
            score -= 30

        present = {s.label for s in sections if s.label in CORE_SECTIONS}
        for label in CORE_SECTIONS:
            if label in present:
                continue
            penalty, severity = _MISSING_SECTION_RULES[label]
            score -= penalty
            issues.append(self._issue(
                f"missing_{label}_section",
                f"Add a dedicated {label.capitalize()} section.",
                severity,
            ))

        seen: set[str] = set()
        for section in sections:
            if not section.heading:
                continue  # preamble before the first heading
            if section.label in CORE_SECTIONS and section.label in seen:
                score -= 5
                issues.append(self._issue(
                    f"duplicate_{section.label}_section",
                    f"Merge the repeated {section.label.capitalize()} sections into one.",
                    "low",
                ))
            seen.add(section.label)

            if not section.blocks:
                score -= 5
                issues.append(self._issue(
                    "empty_section",
                    f"Section '{section.heading}' has no content below its heading.",
                    "low",
                ))

            if section.confidence < self._threshold:
                score -= 5
                issues.append(self._issue(
                    "section_low_confidence",
                    f"Rename heading '{section.heading}' to a standard section title.",
                    "medium" if section.label in CORE_SECTIONS else "low",
                    confidence=round(1.0 - section.confidence, 3),
                ))

        labelled = [s for s in sections if s.heading]
        clarity = (
            sum(s.confidence for s in labelled) / len(labelled) if labelled else 0.0
        )
        coverage = len(present) / len(CORE_SECTIONS)

        return AnalyzerSuccess(
            kind=self.kind,
            score=clamp_score(score),
            sub_scores={
                "coverage": clamp_score(coverage * 100),
                "clarity": clamp_score(clarity * 100),
            },
            issues=tuple(issues),
            metrics={
                "sections": [s.as_dict() for s in sections],
                "block_count": len(blocks),
            },
            confidence=round(clarity if labelled else 0.3, 3),
        )

    def _issue(
        self, code: str, message: str, severity: str, confidence: float = 1.0
    ) -> Issue:
        return Issue(
            code=code,
            message=message,
            severity=severity,  # type: ignore[arg-type]
            confidence=confidence,
            analyzer=self.kind,
        )


def partition_sections(blocks: tuple[ContentBlock, ...]) -> list[DetectedSection]:
    """Group blocks (in position order) under their closest preceding heading."""
    sections: list[DetectedSection] = []
    current = DetectedSection(label="other", heading="", heading_confidence=0.0)

    for block in sorted(blocks, key=lambda b: b.position):
        if block.type == "heading":
            if current.heading or current.blocks:
                sections.append(current)
            label, confidence = classify_heading(block.text)
            current = DetectedSection(
                label=label, heading=block.text.strip(), heading_confidence=confidence
            )
        else:
            current.blocks.append(block)

    if current.heading or current.blocks:
        sections.append(current)

    for section in sections:
        section.confidence = _section_confidence(section)
    return sections


def classify_heading(text: str) -> tuple[str, float]:
    """Return (label, confidence) for a heading's text."""
    norm = " ".join(_words(text))
    if not norm:
        return "other", 0.0

    for label in CORE_SECTIONS:
        if norm in SECTION_HEADINGS[label]:
            return label, 0.95
    if norm in OTHER_HEADINGS:
        return "other", 0.9

    words = set(norm.split())
    best_label, best_hits = "other", 0
    for label in CORE_SECTIONS:
        hits = len(words & SECTION_KEYWORDS[label])
        if hits > best_hits:
            best_label, best_hits = label, hits
    if best_hits:
        return best_label, round(0.6 + 0.1 * min(best_hits - 1, 2), 3)
    return "other", 0.4


def _section_confidence(section: DetectedSection) -> float:
    if not section.heading:
        return 1.0
    if section.label not in CORE_SECTIONS:
        return round(section.heading_confidence, 3)
    words: set[str] = set()
    for block in section.blocks:
        words.update(_words(block.text))
    hits = len(words & SECTION_EVIDENCE[section.label])
    evidence = min(1.0, hits / 2)
    return round(
        _HEADING_WEIGHT * section.heading_confidence + _EVIDENCE_WEIGHT * evidence, 3
    )


def _words(text: str) -> list[str]:
    stripped = (w.strip(".") for w in _WORD_RE.findall(text.lower()))
    return [w for w in stripped if w]
