"""Display formatting for distributed durations."""


def format_minutes_to_hours(minutes: int) -> str:
    """Format minutes as hours and minutes.

    Examples:
        480 -> "8h"
        483 -> "8h 3m"
        45  -> "0h 45m"
    """
    sign = "-" if minutes < 0 else ""
    hours, mins = divmod(abs(minutes), 60)
    if mins == 0:
        return f"{sign}{hours}h"
    return f"{sign}{hours}h {mins}m"


def format_hours_decimal(hours: float) -> str:
    """Format decimal hours with two places, e.g. 1.5 -> "1.50h"."""
    return f"{hours:.2f}h"
