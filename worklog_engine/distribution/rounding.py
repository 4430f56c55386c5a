"""Rounding helpers shared by the distribution engine.

Python's round() uses banker's rounding (round(0.5) == 0). Worklog durations
round half up everywhere, so 90 seconds is 2 minutes and 8.05h is 483 minutes.
"""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from negative infinity."""
    return math.floor(value + 0.5)


def hours_to_minutes(hours: float) -> int:
    """Convert decimal hours to whole minutes (8.05 -> 483)."""
    return round_half_up(hours * 60)


def seconds_to_minutes(seconds: int) -> int:
    """Convert a stored worklog duration to whole minutes (90 -> 2)."""
    return round_half_up(seconds / 60)
