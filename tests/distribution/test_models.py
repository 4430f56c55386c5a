"""Tests for distribution models, rounding and display formatting."""

import pytest
from pydantic import ValidationError

from worklog_engine.distribution.fallback import comment_length_score
from worklog_engine.distribution.formatting import format_hours_decimal, format_minutes_to_hours
from worklog_engine.distribution.models import DistributionMode, TimeEntry, Weight
from worklog_engine.distribution.rounding import hours_to_minutes, round_half_up, seconds_to_minutes


def test_time_entry_rejects_negative_duration():
    with pytest.raises(ValidationError):
        TimeEntry(id="wl-1", current_seconds=-60)


def test_time_entry_is_read_only():
    entry = TimeEntry(id="wl-1", current_seconds=60)
    with pytest.raises(ValidationError):
        entry.current_seconds = 120  # type: ignore[misc]


@pytest.mark.parametrize("value", [0, 11, -1])
def test_weight_bounds(value: int):
    with pytest.raises(ValidationError):
        Weight(entry_id="wl-1", value=value)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("equal", DistributionMode.EQUAL), ("smart", DistributionMode.SMART), ("ai", DistributionMode.SMART), ("SMART", DistributionMode.SMART)],
)
def test_mode_parsing(raw: str, expected: DistributionMode):
    assert DistributionMode(raw) == expected


def test_rounding_is_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2
    assert seconds_to_minutes(90) == 2
    assert seconds_to_minutes(89) == 1
    assert hours_to_minutes(8.05) == 483
    assert hours_to_minutes(8.07) == 484
    assert hours_to_minutes(0.01) == 1


@pytest.mark.parametrize(
    ("length", "expected"),
    [(0, 1), (1, 1), (20, 1), (21, 2), (100, 5), (199, 10), (5000, 10)],
)
def test_comment_length_score(length: int, expected: int):
    assert comment_length_score("x" * length) == expected


def test_comment_length_score_is_monotonic():
    scores = [comment_length_score("x" * n) for n in range(0, 400, 7)]
    assert scores == sorted(scores)


@pytest.mark.parametrize(
    ("minutes", "expected"),
    [(480, "8h"), (483, "8h 3m"), (45, "0h 45m"), (0, "0h"), (-90, "-1h 30m")],
)
def test_format_minutes_to_hours(minutes: int, expected: str):
    assert format_minutes_to_hours(minutes) == expected


def test_format_hours_decimal():
    assert format_hours_decimal(1.5) == "1.50h"
    assert format_hours_decimal(8.05) == "8.05h"
