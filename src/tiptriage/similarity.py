"""
Token-set Jaccard similarity used for duplicate detection and lead matching.
"""

from __future__ import annotations

import re
import unicodedata

TOKEN_PATTERN = re.compile(r"\w+", re.UNICODE)


def normalize_text(value: str | None) -> str:
    """Lowercase and strip accents so 'Café' and 'cafe' compare equal."""
    if not value:
        return ""
    value = unicodedata.normalize("NFD", value)
    value = "".join(ch for ch in value if unicodedata.category(ch) != "Mn")
    return value.lower()


def tokenize(text: str | None) -> set[str]:
    return set(TOKEN_PATTERN.findall(normalize_text(text)))


def jaccard_similarity(first: str | None, second: str | None) -> float:
    # identical text is a full match even when it has no word tokens
    if normalize_text(first) == normalize_text(second):
        return 1.0
    tokens_a = tokenize(first)
    tokens_b = tokenize(second)
    union = tokens_a | tokens_b
    if not union:
        return 0.0
    return len(tokens_a & tokens_b) / len(union)
