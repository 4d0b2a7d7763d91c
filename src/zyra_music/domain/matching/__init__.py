"""
Matching Bounded Context

Pure scoring and query-building logic used to find a primary-catalog item
for a metadata-only track reference.
"""

from .queries import build_search_queries
from .scoring import (
    MatchScore,
    artist_similarity,
    channel_score,
    duration_similarity,
    normalize_duration,
    score,
    score_candidate,
    select_best_match,
    title_similarity,
)
from .title_utils import clean_title, normalize_text

__all__ = [
    # Scoring
    "MatchScore",
    "artist_similarity",
    "channel_score",
    "duration_similarity",
    "normalize_duration",
    "score",
    "score_candidate",
    "select_best_match",
    "title_similarity",
    # Queries
    "build_search_queries",
    # Utilities
    "clean_title",
    "normalize_text",
]
