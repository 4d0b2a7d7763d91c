"""Utility functions for formatting Discord messages."""

from __future__ import annotations

from functools import cache

PROGRESS_FILLED = "█"
PROGRESS_EMPTY = "▬"
SLIDER_TRACK = "─"
SLIDER_KNOB = "o"


@cache
def format_duration(seconds: int | float | None) -> str:
    if seconds is None:
        return "–"

    total_seconds = max(0, int(seconds))
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    secs = total_seconds % 60

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def progress_position(elapsed: float, total: float, length: int = 20) -> int:
    """Number of filled cells for ``elapsed`` out of ``total`` on a bar of ``length``.

    Unknown (zero) totals render as an empty bar; overshoot is clamped to full.
    """
    if total <= 0 or length <= 0:
        return 0
    ratio = min(max(elapsed / total, 0.0), 1.0)
    return round(ratio * length)


def progress_bar(elapsed: float, total: float, length: int = 20) -> str:
    filled = progress_position(elapsed, total, length)
    return PROGRESS_FILLED * filled + PROGRESS_EMPTY * (length - filled)


def volume_slider(volume: int, length: int = 20) -> str:
    """Render a 0-100 volume as a slider with a knob, e.g. ``────o────``."""
    volume = min(max(volume, 0), 100)
    knob = min(volume * length // 100, length - 1)
    return SLIDER_TRACK * knob + SLIDER_KNOB + SLIDER_TRACK * (length - knob - 1)


def format_progress(elapsed: float, total: int, length: int = 20) -> str:
    if not total:
        return f"{format_duration(elapsed)} {PROGRESS_EMPTY * length} {format_duration(None)}"
    return f"{format_duration(elapsed)} {progress_bar(elapsed, total, length)} {format_duration(total)}"


@cache
def truncate(text: str, max_length: int = 90) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"
