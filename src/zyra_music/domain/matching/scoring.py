"""Scoring of primary-catalog candidates against a metadata-only target.

Every sub-score is a float in ``[0, 1]``. The total is the weighted sum:

==========  ======
title       0.50
artist      0.35
duration    0.10
channel     0.05
==========  ======
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from .title_utils import normalize_text, split_artists

if TYPE_CHECKING:
    from ..music.entities import CatalogEntry

TITLE_WEIGHT: Final = 0.50
ARTIST_WEIGHT: Final = 0.35
DURATION_WEIGHT: Final = 0.10
CHANNEL_WEIGHT: Final = 0.05

MIN_CANDIDATE_SECONDS: Final = 10
MAX_CANDIDATE_SECONDS: Final = 1200

# Raw durations above this are taken to be milliseconds.
MILLISECOND_THRESHOLD: Final = 10_000

_CREDIBLE_CHANNEL_MARKERS: Final[tuple[str, ...]] = ("official", "vevo", "records", "music")
_AUTO_GENERATED_CHANNEL_MARKER: Final = "- topic"
_MAJOR_LABELS: Final[tuple[str, ...]] = (
    "warner",
    "sony",
    "universal",
    "atlantic",
    "columbia",
    "emi",
)


def normalize_duration(raw: float | None) -> float | None:
    """Return a duration in seconds, or None when unknown."""
    if raw is None or raw <= 0:
        return None
    if raw > MILLISECOND_THRESHOLD:
        return raw / 1000
    return float(raw)


def is_candidate_duration(seconds: float | None) -> bool:
    return seconds is not None and MIN_CANDIDATE_SECONDS <= seconds <= MAX_CANDIDATE_SECONDS


def title_similarity(candidate_title: str, target_title: str) -> float:
    candidate = normalize_text(candidate_title)
    target = normalize_text(target_title)
    if not candidate or not target:
        return 0.0

    if target in candidate or candidate in target:
        return 1.0

    candidate_words = set(candidate.split(" "))
    target_words = set(target.split(" "))
    jaccard = len(candidate_words & target_words) / len(candidate_words | target_words)

    matched = 0
    for word in target_words:
        if len(word) > 2:
            if any(word in other for other in candidate_words):
                matched += 1
        elif word in candidate_words:
            matched += 1
    partial = matched / len(target_words)

    return max(jaccard, partial * 0.9)


def artist_similarity(candidate_title: str, target_artists: str) -> float:
    artists = split_artists(target_artists)
    if not artists:
        return 0.0

    title = candidate_title.lower()
    total = 0.0
    for index, artist in enumerate(artists):
        if artist in title:
            total += 1.0 if index == 0 else 0.8
        elif len(artist) > 2:
            words = [word for word in artist.split(" ") if len(word) > 1]
            if words:
                found = sum(1 for word in words if word in title)
                total += (found / len(words)) * 0.7

    return min(total / len(artists), 1.0)


def duration_similarity(candidate_seconds: float | None, target_seconds: float | None) -> float:
    if not candidate_seconds or not target_seconds:
        return 0.5

    diff = abs(candidate_seconds - target_seconds)
    tolerance = (candidate_seconds + target_seconds) / 2 * 0.3

    # The fixed bands win over the tolerance, so short tracks keep them.
    if diff == 0:
        return 1.0
    if diff <= 10:
        return 0.9
    if diff <= 30:
        return 0.8
    if diff <= tolerance:
        return max(0.5, 1 - (diff / tolerance) * 0.4)
    return 0.3


def channel_score(uploader: str | None) -> float:
    if not uploader:
        return 0.0

    name = uploader.lower()
    if any(marker in name for marker in _CREDIBLE_CHANNEL_MARKERS):
        return 1.0
    if _AUTO_GENERATED_CHANNEL_MARKER in name:
        return 0.9
    if any(label in name for label in _MAJOR_LABELS):
        return 0.8
    return 0.3


@dataclass(frozen=True, slots=True)
class MatchScore:
    title: float
    artist: float
    duration: float
    channel: float

    @property
    def total(self) -> float:
        return (
            self.title * TITLE_WEIGHT
            + self.artist * ARTIST_WEIGHT
            + self.duration * DURATION_WEIGHT
            + self.channel * CHANNEL_WEIGHT
        )


def score_candidate(
    candidate: CatalogEntry,
    target_title: str,
    target_artists: str,
    target_duration_seconds: float | None,
) -> MatchScore:
    return MatchScore(
        title=title_similarity(candidate.title, target_title),
        artist=artist_similarity(candidate.title, target_artists),
        duration=duration_similarity(
            normalize_duration(candidate.duration), target_duration_seconds
        ),
        channel=channel_score(candidate.uploader),
    )


def score(
    candidate: CatalogEntry,
    target_title: str,
    target_artists: str,
    target_duration_seconds: float | None,
) -> float:
    """Weighted match score in ``[0, 1]``."""
    return score_candidate(candidate, target_title, target_artists, target_duration_seconds).total


def select_best_match(
    candidates: Iterable[CatalogEntry],
    target_title: str,
    target_artists: str,
    target_duration_seconds: float | None,
    *,
    threshold: float,
) -> tuple[CatalogEntry, MatchScore] | None:
    """Pick the highest-scoring candidate strictly above ``threshold``.

    Candidates without a title, or whose duration is unknown or outside
    10s-20min once normalized, are never considered.
    """
    best: tuple[CatalogEntry, MatchScore] | None = None
    best_total = threshold

    for candidate in candidates:
        if not candidate.title:
            continue
        if not is_candidate_duration(normalize_duration(candidate.duration)):
            continue

        result = score_candidate(candidate, target_title, target_artists, target_duration_seconds)
        if result.total > best_total:
            best = (candidate, result)
            best_total = result.total

    return best
