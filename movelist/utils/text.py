"""Text normalization shared by catalog matching, estimation and cache keys."""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")
_WORD_START_RE = re.compile(r"\b([a-z])")


def normalize_text(text: str) -> str:
    """Lowercase, trim and collapse internal whitespace to single spaces."""
    return _WHITESPACE_RE.sub(" ", text.strip().lower())


def split_words(text: str, min_length: int = 1) -> list[str]:
    """Normalized whitespace-delimited words with at least ``min_length`` characters."""
    return [word for word in normalize_text(text).split(" ") if len(word) >= min_length]


def title_case(text: str) -> str:
    """Uppercase the first letter of every word, leaving the rest alone.

    Unlike ``str.title`` this keeps "TV" and "4x4" intact.
    """
    collapsed = _WHITESPACE_RE.sub(" ", text.strip())
    return _WORD_START_RE.sub(lambda m: m.group(1).upper(), collapsed)


def contains_word(text: str, phrase: str) -> bool:
    """True when ``phrase`` occurs in ``text`` on word boundaries."""
    return re.search(rf"(?<!\w){re.escape(phrase)}(?!\w)", text) is not None


def contains_term(text: str, term: str) -> bool:
    """Like ``contains_word`` but also accepts a plural ("chairs", "benches")."""
    return re.search(rf"(?<!\w){re.escape(term)}(?:e?s)?(?!\w)", text) is not None
