# src/cache/fingerprint.py — v3
"""Deterministic content fingerprinting used as the analysis cache key.

The digest covers the normalized text followed by the layout summary, in
that fixed order. Content blocks are not hashed: two contents with the same
normalized text and layout are the same analyzable document.
"""

from __future__ import annotations

import hashlib
import re
import unicodedata
from typing import Any

from resumelens.core.models import ExtractedContent, Fingerprint

_FIELD_SEPARATOR = b"\x1f"
_LAYOUT_FIELDS = ("column_count", "has_header", "has_footer", "has_tables", "has_images")
_LAYOUT_DEFAULTS: dict[str, Any] = {
    "column_count": 1,
    "has_header": False,
    "has_footer": False,
    "has_tables": False,
    "has_images": False,
}

_HSPACE_RE = re.compile(r"[ \t\f\v\u00a0]+")


def compute_fingerprint(content: ExtractedContent | None) -> Fingerprint:
    """Compute the fingerprint of extracted content.

    Never raises: missing or malformed content hashes as the empty
    canonical form.
    """
    text = getattr(content, "text", "")
    layout = getattr(content, "layout", None)

    hasher = hashlib.sha256()
    hasher.update(b"text")
    hasher.update(_FIELD_SEPARATOR)
    hasher.update(normalize_text(text).encode("utf-8"))
    hasher.update(_FIELD_SEPARATOR)
    hasher.update(b"layout")
    hasher.update(_FIELD_SEPARATOR)
    hasher.update(_canonical_layout(layout).encode("utf-8"))
    return Fingerprint(digest=hasher.digest())


def normalize_text(text: object) -> str:
    """Canonical text form: NFC, LF newlines, collapsed horizontal whitespace."""
    if not isinstance(text, str):
        return ""
    text = unicodedata.normalize("NFC", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = [_HSPACE_RE.sub(" ", line).strip() for line in text.split("\n")]
    return "\n".join(lines).strip("\n")


def _canonical_layout(layout: object) -> str:
    """Serialize layout fields in fixed order; unknown values fall back to defaults."""
    parts: list[str] = []
    for name in _LAYOUT_FIELDS:
        value = getattr(layout, name, _LAYOUT_DEFAULTS[name])
        default = _LAYOUT_DEFAULTS[name]
        if isinstance(default, bool):
            value = value if isinstance(value, bool) else default
        elif not isinstance(value, int) or isinstance(value, bool) or value < 1:
            value = default
        parts.append(f"{name}={int(value)}")
    return ";".join(parts)
