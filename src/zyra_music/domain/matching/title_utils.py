"""Pure-function utilities for cleaning and normalizing track titles."""

from __future__ import annotations

import re
from typing import Final

# ── Precompiled patterns ────────────────────────────────────────────────

_BRACKETED_SEGMENTS: Final[list[re.Pattern[str]]] = [
    re.compile(r"\(.*?\)"),
    re.compile(r"\[.*?\]"),
]

_TRAILING_QUALIFIERS: Final[list[re.Pattern[str]]] = [
    re.compile(r"\s*-\s*remaster.*$", re.IGNORECASE),
    re.compile(r"\s*-\s*\d{4}.*$"),
]

_PUNCTUATION: Final[re.Pattern[str]] = re.compile(r"[^\w\s]")
_WHITESPACE: Final[re.Pattern[str]] = re.compile(r"\s+")
_ARTIST_SEPARATORS: Final[re.Pattern[str]] = re.compile(r"[,&\s]+")


def clean_title(title: str) -> str:
    """Strip parenthetical/bracketed segments and trailing remaster or year qualifiers.

    >>> clean_title("Bohemian Rhapsody - Remastered 2011")
    'Bohemian Rhapsody'
    >>> clean_title("Song (feat. Someone) [Live]")
    'Song'
    """
    result = title
    for pattern in _BRACKETED_SEGMENTS:
        result = pattern.sub("", result)
    for pattern in _TRAILING_QUALIFIERS:
        result = pattern.sub("", result)
    return _WHITESPACE.sub(" ", result).strip()


def normalize_text(text: str) -> str:
    """Lowercase, replace punctuation with spaces and collapse whitespace."""
    lowered = _PUNCTUATION.sub(" ", text.lower())
    return _WHITESPACE.sub(" ", lowered).strip()


def split_artists(artists: str) -> list[str]:
    """Split a combined artist string on commas, ampersands and whitespace."""
    return [token for token in _ARTIST_SEPARATORS.split(artists.lower()) if token]
