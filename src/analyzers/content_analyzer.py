# src/analyzers/content_analyzer.py — v1
"""Content quality analyzer — writing heuristics over bullet points.

Scores action-verb usage, quantified impact, bullet length, passive voice
and weak phrasing, and turns each weak signal into a suggestion.
"""

from __future__ import annotations

import re
import threading

from resumelens.analyzers.base_analyzer import BaseAnalyzer, check_cancelled, clamp_score
from resumelens.analyzers.lexicon import (
    ACTION_VERBS,
    BULLET_CHARS,
    PASSIVE_VOICE_RE,
    QUANTIFIED_RE,
    WEAK_PHRASE_PATTERNS,
)
from resumelens.core.models import AnalyzerKind, AnalyzerSuccess, ExtractedContent, Issue

MIN_BULLET_WORDS = 4
MAX_BULLET_WORDS = 30
ACTION_RATIO_TARGET = 0.5
QUANTIFIED_RATIO_TARGET = 0.3

_FIRST_WORD_RE = re.compile(r"[A-Za-z]+")


class ContentAnalyzer(BaseAnalyzer):
    """Writing-quality heuristics."""

    @property
    def kind(self) -> AnalyzerKind:
        return "content"

    @property
    def description(self) -> str:
        return "Scores bullet points for action verbs, impact and clarity."

    def evaluate(
        self, content: ExtractedContent, cancel: threading.Event
    ) -> AnalyzerSuccess:
        bullets = extract_bullets(content)
        check_cancelled(cancel)

        total = len(bullets)
        action = sum(1 for b in bullets if starts_with_action_verb(b))
        quantified = sum(1 for b in bullets if QUANTIFIED_RE.search(b))
        well_sized = sum(
            1 for b in bullets if MIN_BULLET_WORDS <= len(b.split()) <= MAX_BULLET_WORDS
        )
        long_bullets = sum(1 for b in bullets if len(b.split()) > MAX_BULLET_WORDS)
        passive = len(PASSIVE_VOICE_RE.findall(content.text))
        weak_phrases = sorted({
            m.group(0).lower()
            for pattern in WEAK_PHRASE_PATTERNS
            for m in pattern.finditer(content.text)
        })
        check_cancelled(cancel)

        action_ratio = action / total if total else 0.0
        quantified_ratio = quantified / total if total else 0.0
        sized_ratio = well_sized / total if total else 0.0

        issues: list[Issue] = []
        if not total:
            issues.append(self._issue(
                "no_bullet_points",
                "Describe your experience with bullet points instead of paragraphs.",
                "high",
            ))
        else:
            if action_ratio < ACTION_RATIO_TARGET:
                issues.append(self._issue(
                    "weak_action_verbs",
                    "Start each bullet with a strong action verb such as Led, Built or Reduced.",
                    "medium",
                    confidence=round(1.0 - action_ratio, 3),
                ))
            if quantified_ratio < QUANTIFIED_RATIO_TARGET:
                issues.append(self._issue(
                    "missing_quantified_impact",
                    "Quantify outcomes with numbers, percentages or amounts.",
                    "medium",
                    confidence=round(1.0 - quantified_ratio, 3),
                ))
            if long_bullets:
                issues.append(self._issue(
                    "long_bullets",
                    f"Shorten {long_bullets} bullet(s) to at most {MAX_BULLET_WORDS} words.",
                    "low",
                ))
        if passive:
            issues.append(self._issue(
                "passive_voice",
                f"Rewrite {passive} passive construction(s) in active voice.",
                "medium" if passive >= 3 else "low",
            ))
        if weak_phrases:
            quoted = ", ".join(f"'{p}'" for p in weak_phrases[:3])
            issues.append(self._issue(
                "weak_phrasing",
                f"Replace vague phrases like {quoted} with concrete accomplishments.",
                "medium",
            ))

        score = (
            40.0
            + 30.0 * action_ratio
            + 20.0 * quantified_ratio
            + 10.0 * sized_ratio
            - min(15, 3 * passive)
            - min(15, 3 * len(weak_phrases))
        )
        return AnalyzerSuccess(
            kind=self.kind,
            score=clamp_score(score),
            sub_scores={
                "action_verbs": clamp_score(action_ratio * 100),
                "quantified_impact": clamp_score(quantified_ratio * 100),
                "bullet_length": clamp_score(sized_ratio * 100),
            },
            issues=tuple(issues),
            metrics={
                "bullet_count": total,
                "action_verb_bullets": action,
                "quantified_bullets": quantified,
                "long_bullets": long_bullets,
                "passive_voice_count": passive,
                "weak_phrases": weak_phrases,
            },
            confidence=0.9 if total >= 5 else (0.7 if total else 0.4),
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


def extract_bullets(content: ExtractedContent) -> list[str]:
    """Bullet texts from list blocks, falling back to bullet-prefixed lines."""
    bullets = [
        b.text.strip().lstrip(BULLET_CHARS).strip()
        for b in sorted(content.blocks, key=lambda b: b.position)
        if b.type == "list"
    ]
    if not bullets:
        bullets = [
            line.strip().lstrip(BULLET_CHARS).strip()
            for line in content.text.splitlines()
            if line.strip()[:1] in BULLET_CHARS and line.strip()
        ]
    return [b for b in bullets if b]


def starts_with_action_verb(bullet: str) -> bool:
    match = _FIRST_WORD_RE.search(bullet)
    return bool(match) and match.group(0).lower() in ACTION_VERBS
