from __future__ import annotations

import re
from collections import Counter
from typing import Any, Iterable

from app.core.config.vocabulary import load_vocabulary

_CRLF_RE = re.compile(r"\r\n")
_INLINE_SPACE_RE = re.compile(r"[^\S\n]+")
_BLANK_RUN_RE = re.compile(r"\n{3,}")
_NON_TOKEN_CHAR_RE = re.compile(r"[^a-z0-9+\-./\s]")


def normalize_text(value: Any = "") -> str:
    if value is None:
        return ""
    text = _CRLF_RE.sub("\n", str(value))
    text = _INLINE_SPACE_RE.sub(" ", text)
    text = _BLANK_RUN_RE.sub("\n\n", text)
    return text.strip()


def normalize_for_match(value: Any = "") -> str:
    """Normalized, lowercased form used for every keyword comparison."""
    return normalize_text(value or "").lower().strip()


def tokenize(value: Any = "") -> list[str]:
    lowered = normalize_text(value).lower()
    return _NON_TOKEN_CHAR_RE.sub(" ", lowered).split()


def remove_stop_words(tokens: Iterable[str], stop_words: frozenset[str] | None = None) -> list[str]:
    if stop_words is None:
        stop_words = load_vocabulary().stop_words
    return [token for token in tokens if len(token) > 1 and token not in stop_words]


def frequency_map(tokens: Iterable[str]) -> Counter[str]:
    # Counter keeps first-seen order, which downstream ranking relies on for ties.
    return Counter(tokens)
