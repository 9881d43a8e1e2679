"""Tests for CLI text formatting helpers."""

import pytest

from bricksorter.infrastructure.cli.formatting import format_percentage, progress_bar


class TestFormatPercentage:

    @pytest.mark.parametrize(
        "value, expected",
        [
            (0, "0%"),
            (1, "100%"),
            (0.5, "50.0%"),
            (0.1234, "12.3%"),
            (0.0004, "<0.1%"),
            (0.9996, ">99.9%"),
        ],
    )
    def test_format(self, value, expected):
        assert format_percentage(value) == expected


class TestProgressBar:

    def test_half(self):
        assert progress_bar(0.5, width=10) == "#####-----"

    def test_clamped(self):
        assert progress_bar(1.5, width=4) == "####"
        assert progress_bar(-1, width=4) == "----"
