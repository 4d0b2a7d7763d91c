"""Tests for reply utility functions: format_duration, progress bars, volume
slider, and truncate."""

from __future__ import annotations

import pytest

from zyra_music.utils.reply import (
    PROGRESS_EMPTY,
    PROGRESS_FILLED,
    SLIDER_KNOB,
    format_duration,
    format_progress,
    progress_bar,
    progress_position,
    truncate,
    volume_slider,
)


# =============================================================================
# format_duration
# =============================================================================


class TestFormatDuration:
    def test_none(self):
        assert format_duration(None) == "–"

    def test_zero(self):
        assert format_duration(0) == "0:00"

    def test_seconds_only(self):
        assert format_duration(45) == "0:45"

    def test_minutes(self):
        assert format_duration(200) == "3:20"

    def test_hours(self):
        assert format_duration(3725) == "1:02:05"

    def test_float_truncated(self):
        assert format_duration(59.9) == "0:59"

    def test_negative_clamped(self):
        assert format_duration(-10) == "0:00"


# =============================================================================
# Progress bar
# =============================================================================


class TestProgressBar:
    @pytest.mark.parametrize(
        ("elapsed", "total", "expected"),
        [(0, 200, 0), (100, 200, 10), (200, 200, 20), (500, 200, 20), (-5, 200, 0), (50, 0, 0)],
    )
    def test_position(self, elapsed, total, expected):
        assert progress_position(elapsed, total) == expected

    def test_zero_length(self):
        assert progress_position(10, 20, length=0) == 0

    def test_bar_has_fixed_length(self):
        bar = progress_bar(30, 120, length=8)

        assert bar == PROGRESS_FILLED * 2 + PROGRESS_EMPTY * 6

    def test_format_progress(self):
        assert format_progress(65, 200, length=4) == f"1:05 {PROGRESS_FILLED}{PROGRESS_EMPTY * 3} 3:20"

    def test_format_progress_unknown_total(self):
        assert format_progress(65, 0, length=4) == f"1:05 {PROGRESS_EMPTY * 4} –"


# =============================================================================
# volume_slider
# =============================================================================


class TestVolumeSlider:
    def test_length_is_constant(self):
        for volume in (0, 37, 100):
            assert len(volume_slider(volume, length=10)) == 10

    def test_knob_position(self):
        assert volume_slider(0, length=5).index(SLIDER_KNOB) == 0
        assert volume_slider(50, length=10).index(SLIDER_KNOB) == 5
        assert volume_slider(100, length=5).index(SLIDER_KNOB) == 4

    def test_out_of_range_clamped(self):
        assert volume_slider(150, length=5) == volume_slider(100, length=5)
        assert volume_slider(-20, length=5) == volume_slider(0, length=5)


# =============================================================================
# truncate
# =============================================================================


class TestTruncate:
    def test_short_text_unchanged(self):
        assert truncate("hello", 10) == "hello"

    def test_exact_length_unchanged(self):
        assert truncate("x" * 10, 10) == "x" * 10

    def test_long_text_gets_ellipsis(self):
        result = truncate("abcdefghijkl", 6)

        assert result == "abcde…"
        assert len(result) == 6
