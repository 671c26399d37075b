"""
Tests for duration options.
"""

import pytest

from simbook.domain.durations import generate_duration_options, humanize_duration
from simbook.domain.exceptions import InvalidDurationConfig
from simbook.domain.models import DurationConfig


class TestGenerateDurationOptions:
    """Tests for generate_duration_options."""

    def test_half_hour_steps(self, duration_config):
        """30..180 every 30 minutes."""
        options = generate_duration_options(duration_config)

        assert [option.value for option in options] == [30, 60, 90, 120, 150, 180]
        assert [option.label for option in options] == [
            "30 minutes",
            "1 hour",
            "1 hour 30 minutes",
            "2 hours",
            "2 hours 30 minutes",
            "3 hours",
        ]
        assert options[2].hours == 1.5

    def test_range_not_a_multiple_of_interval(self):
        """The maximum is not offered when the steps skip it."""
        options = generate_duration_options(DurationConfig(min_duration=30, max_duration=100, interval=30))

        assert [option.value for option in options] == [30, 60, 90]

    @pytest.mark.parametrize(
        ("minimum", "maximum", "interval"),
        [(30, 30, 30), (15, 240, 15), (60, 61, 45), (0, 90, 45)],
    )
    def test_options_are_increasing_and_bounded(self, minimum, maximum, interval):
        options = generate_duration_options(DurationConfig(minimum, maximum, interval))
        values = [option.value for option in options]

        assert values
        assert values[0] == minimum
        assert values[-1] <= maximum
        assert all(a < b for a, b in zip(values, values[1:]))

    @pytest.mark.parametrize("interval", [0, -15])
    def test_non_positive_interval_raises(self, interval):
        with pytest.raises(InvalidDurationConfig):
            generate_duration_options(DurationConfig(min_duration=30, max_duration=180, interval=interval))

    def test_min_above_max_raises(self):
        with pytest.raises(InvalidDurationConfig):
            generate_duration_options(DurationConfig(min_duration=120, max_duration=60, interval=30))


class TestHumanizeDuration:
    """Tests for duration labels."""

    @pytest.mark.parametrize(
        ("minutes", "label"),
        [(1, "1 minute"), (45, "45 minutes"), (60, "1 hour"), (61, "1 hour 1 minute"), (240, "4 hours")],
    )
    def test_labels(self, minutes, label):
        assert humanize_duration(minutes) == label
