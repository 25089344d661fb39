# src/analyzers/ats_analyzer.py — v1
"""ATS compatibility analyzer — layout signals and keyword presence.

Formatting checks (columns, header/footer, tables, images, glyphs) feed the
formatting sub-score; contact details, standard headings and known skill
terms feed the keyword sub-score. Every finding is a severity-tagged issue.
"""

from __future__ import annotations

import re
import threading

from resumelens.analyzers.base_analyzer import BaseAnalyzer, check_cancelled, clamp_score
from resumelens.analyzers.lexicon import (
    EMAIL_RE,
    PHONE_RE,
    SECTION_HEADINGS,
    SKILL_TERMS,
    UNSUPPORTED_GLYPH_RE,
)
from resumelens.core.models import AnalyzerKind, AnalyzerSuccess, ExtractedContent, Issue

_FORMATTING_WEIGHT = 0.6
_KEYWORD_WEIGHT = 0.4

MIN_WORDS = 150
MAX_WORDS = 1200
MIN_SKILL_TERMS = 3


class AtsAnalyzer(BaseAnalyzer):
    """Applicant-tracking-system compatibility checks."""

    @property
    def kind(self) -> AnalyzerKind:
        return "ats"

    @property
    def description(self) -> str:
        return "Checks layout and keyword signals that affect ATS parsing."

    def evaluate(
        self, content: ExtractedContent, cancel: threading.Event
    ) -> AnalyzerSuccess:
        layout = content.layout
        text = content.text
        issues: list[Issue] = []

        # --- Formatting ---
        formatting = 100.0
        if layout.column_count > 1:
            formatting -= 25 if layout.column_count == 2 else 35
            issues.append(self._issue(
                "multi_column_layout",
                "Use a single-column layout; multi-column text is often read out of order.",
                "high",
            ))
        if layout.has_header or layout.has_footer:
            formatting -= 10
            issues.append(self._issue(
                "header_footer_content",
                "Move contact details out of page headers and footers.",
                "medium",
            ))
        if layout.has_tables:
            formatting -= 10
            issues.append(self._issue(
                "tables_detected",
                "Replace tables with plain text lists.",
                "medium",
            ))
        if layout.has_images:
            formatting -= 5
            issues.append(self._issue(
                "images_detected",
                "Avoid images and icons; their content is invisible to ATS parsers.",
                "low",
            ))
        glyphs = sorted(set(UNSUPPORTED_GLYPH_RE.findall(text)))
        if glyphs:
            formatting -= 5
            issues.append(self._issue(
                "unsupported_characters",
                "Remove decorative symbols and emoji.",
                "low",
            ))
        check_cancelled(cancel)

        # --- Keywords ---
        keywords = 100.0
        has_email = bool(EMAIL_RE.search(text))
        has_phone = bool(PHONE_RE.search(text))
        if not has_email:
            keywords -= 15
            issues.append(self._issue(
                "missing_email", "Add an email address in the document body.", "high"
            ))
        if not has_phone:
            keywords -= 5
            issues.append(self._issue(
                "missing_phone", "Add a phone number in the document body.", "medium"
            ))

        standard_headings = _count_standard_headings(content)
        if standard_headings < 2:
            keywords -= 15
            issues.append(self._issue(
                "nonstandard_headings",
                "Use standard headings (Experience, Education, Skills) so ATS can map sections.",
                "medium",
            ))

        skills_found = find_skill_terms(text)
        keywords -= max(0, MIN_SKILL_TERMS - len(skills_found)) * 10
        if len(skills_found) < MIN_SKILL_TERMS:
            issues.append(self._issue(
                "low_keyword_coverage",
                "Mention the concrete tools and skills you use; few recognizable keywords were found.",
                "medium",
            ))

        word_count = len(text.split())
        if word_count < MIN_WORDS:
            keywords -= 10
            issues.append(self._issue(
                "content_too_short",
                f"Expand the document; {word_count} words is too little for keyword matching.",
                "low",
            ))
        elif word_count > MAX_WORDS:
            issues.append(self._issue(
                "content_too_long",
                "Trim the document to the most relevant experience.",
                "low",
            ))

        formatting = clamp_score(formatting)
        keywords = clamp_score(keywords)
        return AnalyzerSuccess(
            kind=self.kind,
            score=clamp_score(_FORMATTING_WEIGHT * formatting + _KEYWORD_WEIGHT * keywords),
            sub_scores={"formatting": formatting, "keywords": keywords},
            issues=tuple(issues),
            metrics={
                "column_count": layout.column_count,
                "has_email": has_email,
                "has_phone": has_phone,
                "standard_headings": standard_headings,
                "skill_terms": skills_found,
                "unsupported_glyphs": glyphs,
                "word_count": word_count,
            },
            confidence=0.9 if word_count >= 50 else 0.5,
        )

    def _issue(self, code: str, message: str, severity: str) -> Issue:
        return Issue(
            code=code,
            message=message,
            severity=severity,  # type: ignore[arg-type]
            analyzer=self.kind,
        )


def find_skill_terms(text: str) -> list[str]:
    """Known skill terms present in the text, sorted."""
    lowered = text.lower()
    found: set[str] = set()
    for term in SKILL_TERMS:
        pattern = r"(?<![\w+#])" + re.escape(term) + r"(?![\w+#])"
        if re.search(pattern, lowered):
            found.add(term)
    return sorted(found)


def _count_standard_headings(content: ExtractedContent) -> int:
    standard = set().union(*SECTION_HEADINGS.values())
    headings = [b.text for b in content.blocks if b.type == "heading"]
    if not headings:
        headings = content.text.splitlines()
    count = 0
    for heading in headings:
        norm = heading.strip().strip(":").strip().lower()
        if norm in standard:
            count += 1
    return count
