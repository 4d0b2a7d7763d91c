"""Search-query construction for cross-catalog matching."""

from __future__ import annotations

from collections.abc import Sequence

from .title_utils import clean_title


def build_search_queries(title: str, artists: Sequence[str]) -> list[str]:
    """Return search strings ordered from most to least specific.

    Duplicates and empty strings are dropped while preserving order.
    """
    title = title.strip()
    cleaned = clean_title(title) or title
    primary = artists[0].strip() if artists else ""
    all_artists = " ".join(a.strip() for a in artists if a.strip())
    first_word = title.split(" ")[0] if title else ""

    candidates = [
        f"{cleaned} {primary} official audio",
        f"{cleaned} {primary} official video",
        f"{cleaned} {primary} official",
        f"{title} {primary} lyrics",
        f"{title} {primary} music video",
        f"{title} {all_artists}",
        f"{title} {primary}",
        f"{cleaned} {primary}",
        f"{first_word} {primary}",
        f"{primary} {title}",
        title,
        primary,
    ]

    queries: list[str] = []
    seen: set[str] = set()
    for query in candidates:
        query = " ".join(query.split())
        key = query.lower()
        if not query or key in seen:
            continue
        seen.add(key)
        queries.append(query)
    return queries
