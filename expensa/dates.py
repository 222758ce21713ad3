"""Date utilities for expensa.

Pure functions for period windows, recurrence arithmetic, parsing and formatting.
"""

import calendar
import re
from datetime import date, datetime, timedelta

from expensa.domain.models import Frequency, Period

# date-fns style tokens used by the settings' date format, longest first
_FORMAT_TOKENS = [
    ("yyyy", "%Y"),
    ("yy", "%y"),
    ("MMMM", "%B"),
    ("MMM", "%b"),
    ("MM", "%m"),
    ("dd", "%d"),
    ("EEEE", "%A"),
    ("EEE", "%a"),
]
_TOKEN_PATTERN = re.compile("|".join(token for token, _ in _FORMAT_TOKENS) + "|M|d")


def parse_date(value: str | date) -> date:
    """Parse an ISO date or timestamp into a calendar date.

    Args:
        value: ISO string ("2025-01-31", "2025-01-31T10:00:00.000Z") or a date.

    Returns:
        The calendar date (time component discarded).

    Raises:
        ValueError: If the string is not an ISO date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip()[:10])


def format_date(value: date, pattern: str = "MM/dd/yyyy") -> str:
    """Format a date using a date-fns style pattern.

    Args:
        value: Date to format.
        pattern: Pattern such as "MM/dd/yyyy", "dd-MM-yyyy" or "MMM d, yyyy".

    Returns:
        Formatted date string.
    """
    translations = dict(_FORMAT_TOKENS)

    def _replace(match: re.Match[str]) -> str:
        token = match.group(0)
        if token == "M":
            return str(value.month)
        if token == "d":
            return str(value.day)
        return value.strftime(translations[token])

    return _TOKEN_PATTERN.sub(_replace, pattern)


def month_range(reference: date) -> tuple[date, date]:
    """Calculate the first and last day of the reference date's month.

    Args:
        reference: Any date inside the month.

    Returns:
        Tuple of (first_day, last_day), both inclusive.
    """
    last_day = calendar.monthrange(reference.year, reference.month)[1]
    return reference.replace(day=1), reference.replace(day=last_day)


def week_range(reference: date) -> tuple[date, date]:
    """Calculate the Monday-Sunday week containing the reference date.

    Args:
        reference: Any date inside the week.

    Returns:
        Tuple of (monday, sunday), both inclusive.
    """
    monday = reference - timedelta(days=reference.weekday())
    return monday, monday + timedelta(days=6)


def period_range(period: Period, reference: date) -> tuple[date, date]:
    """Calculate the canonical window for a budget period.

    Args:
        period: "daily", "weekly" or "monthly".
        reference: Date the window must contain.

    Returns:
        Tuple of (start, end), both inclusive.
    """
    if period == "weekly":
        return week_range(reference)
    if period == "monthly":
        return month_range(reference)
    return reference, reference


def add_months(value: date, months: int) -> date:
    """Add calendar months, clamping to the last valid day of the target month.

    Args:
        value: Starting date.
        months: Number of months to add (may be negative).

    Returns:
        Shifted date, e.g. 2025-01-31 + 1 month = 2025-02-28.
    """
    month_index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def add_years(value: date, years: int) -> date:
    """Add calendar years, mapping 29 February onto 28 February when needed."""
    return add_months(value, years * 12)


def next_occurrence(anchor: date, frequency: Frequency) -> date:
    """Advance a date by one unit of a recurrence frequency.

    Args:
        anchor: Date of the last occurrence (or the template start).
        frequency: "daily", "weekly", "monthly" or "yearly".

    Returns:
        Date of the following occurrence.
    """
    if frequency == "daily":
        return anchor + timedelta(days=1)
    if frequency == "weekly":
        return anchor + timedelta(weeks=1)
    if frequency == "monthly":
        return add_months(anchor, 1)
    return add_years(anchor, 1)


def last_n_days(days: int, today: date) -> list[date]:
    """List calendar days ending today, oldest first.

    Args:
        days: How many days to include.
        today: Final day of the range.

    Returns:
        List of exactly max(days, 0) consecutive dates.
    """
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def days_until(target: date, today: date) -> int:
    """Count days from today to target (negative when target is past)."""
    return (target - today).days
