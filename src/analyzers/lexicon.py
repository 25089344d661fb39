# src/analyzers/lexicon.py — v1
"""Keyword lists and patterns shared by the built-in analyzers."""

from __future__ import annotations

import re

# Heading phrases per section label. Exact matches score higher than
# partial keyword hits.
SECTION_HEADINGS: dict[str, frozenset[str]] = {
    "education": frozenset({
        "education", "academic background", "academics", "qualifications",
        "education and training", "academic qualifications", "degrees",
    }),
    "experience": frozenset({
        "experience", "work experience", "professional experience",
        "employment", "employment history", "work history", "career history",
        "relevant experience", "internships",
    }),
    "skills": frozenset({
        "skills", "technical skills", "core skills", "key skills",
        "competencies", "core competencies", "technologies", "tools",
        "skills and tools",
    }),
}

SECTION_KEYWORDS: dict[str, frozenset[str]] = {
    "education": frozenset({
        "education", "academic", "degree", "university", "school", "training",
        "certification", "certifications",
    }),
    "experience": frozenset({
        "experience", "employment", "work", "career", "history", "positions",
        "internship",
    }),
    "skills": frozenset({
        "skills", "skill", "competencies", "technologies", "tools", "expertise",
        "proficiencies",
    }),
}

# Body evidence used to confirm a section label.
SECTION_EVIDENCE: dict[str, frozenset[str]] = {
    "education": frozenset({
        "university", "college", "institute", "school", "bachelor", "master",
        "degree", "diploma", "gpa", "b.sc", "m.sc", "phd", "mba", "graduated",
    }),
    "experience": frozenset({
        "engineer", "developer", "manager", "analyst", "intern", "lead",
        "consultant", "present", "inc", "ltd", "llc", "company", "team",
    }),
    "skills": frozenset({
        "python", "java", "sql", "excel", "aws", "docker", "communication",
        "leadership", "javascript", "git", "linux", "react",
    }),
}

ACTION_VERBS: frozenset[str] = frozenset({
    "accelerated", "achieved", "analyzed", "architected", "automated", "built",
    "coached", "consolidated", "configured", "coordinated", "created",
    "delivered", "deployed", "designed", "developed", "directed", "eliminated",
    "engineered", "established", "executed", "expanded", "founded", "implemented",
    "improved", "increased", "initiated", "integrated", "introduced", "launched",
    "led", "maintained", "managed", "mentored", "migrated", "modernized",
    "negotiated", "optimized", "orchestrated", "overhauled", "pioneered",
    "produced", "published", "reduced", "refactored", "resolved", "scaled",
    "secured", "spearheaded", "streamlined", "supervised", "trained",
    "transformed",
})

WEAK_PHRASE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\bresponsible\s+for\b", re.IGNORECASE),
    re.compile(r"\b(?:assisted|helped)\s+(?:with|in)\b", re.IGNORECASE),
    re.compile(r"\b(?:participated|involved)\s+in\b", re.IGNORECASE),
    re.compile(r"\bworked\s+(?:on|with)\b", re.IGNORECASE),
    re.compile(r"\b(?:tasked with|duties included|handled various)\b", re.IGNORECASE),
    re.compile(r"\b(?:familiar with|exposure to|knowledge of)\b", re.IGNORECASE),
)

PASSIVE_VOICE_RE = re.compile(
    r"\b(?:am|is|are|was|were|be|been|being)\s+(?:\w+ly\s+)?\w+(?:ed|en)\b",
    re.IGNORECASE,
)

SKILL_TERMS: frozenset[str] = frozenset({
    "python", "java", "javascript", "typescript", "sql", "c++", "c#", "go",
    "rust", "react", "node", "django", "flask", "fastapi", "aws", "azure",
    "gcp", "docker", "kubernetes", "terraform", "linux", "git", "excel",
    "tableau", "pandas", "spark", "machine learning", "data analysis",
    "project management", "agile", "scrum", "communication", "leadership",
    "salesforce", "seo", "photoshop", "figma",
})

EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+")
PHONE_RE = re.compile(r"(?:\+?\d[\d\s().-]{7,}\d)")
QUANTIFIED_RE = re.compile(r"\d|%|\$|€|£")

# Box drawing, dingbats and emoji ranges that applicant tracking
# parsers commonly mangle.
UNSUPPORTED_GLYPH_RE = re.compile(
    "[\u2500-\u257f\u2700-\u27bf\U0001f300-\U0001faff]"
)

BULLET_CHARS = "-*•●◦▪‣"

# Recognized headings that belong to the "other" label.
OTHER_HEADINGS: frozenset[str] = frozenset({
    "summary", "professional summary", "profile", "objective", "projects",
    "certifications", "awards", "languages", "interests", "publications",
    "contact", "volunteering", "volunteer experience", "references",
})
