"""Calendar arithmetic over local dates.

Helpers that move away from a date return ``None`` when the result would fall
outside ``date.min``..``date.max``; day-by-day navigation stays on the bound.
"""

import calendar
from datetime import date

DAYS_PER_WEEK = 7
DECEMBER = 12

_MIN_ORDINAL = date.min.toordinal()
_MAX_ORDINAL = date.max.toordinal()


def offset_day(day: date, days: int) -> date | None:
    """Return the date ``days`` away from ``day``, or ``None`` past the bounds."""
    ordinal = day.toordinal() + days
    if not _MIN_ORDINAL <= ordinal <= _MAX_ORDINAL:
        return None
    return date.fromordinal(ordinal)


def clamp_offset_day(day: date, days: int) -> date:
    """Like ``offset_day``, but stop at ``date.min`` or ``date.max``."""
    shifted = offset_day(day, days)
    if shifted is None:
        return date.max if days > 0 else date.min
    return shifted


def next_day(day: date) -> date:
    """Return the following calendar day; ``date.max`` has no successor."""
    return clamp_offset_day(day, 1)


def previous_day(day: date) -> date:
    """Return the preceding calendar day; ``date.min`` has no predecessor."""
    return clamp_offset_day(day, -1)


def iso_weekday(day: date) -> int:
    """Return the ISO weekday, Monday is 1 and Sunday is 7."""
    return day.isoweekday()


def previous_occurrence(day: date, weekday: int) -> date | None:
    """Return the closest date strictly before ``day`` that falls on ``weekday``.

    ``weekday`` uses ``date.weekday()`` numbering (Monday is 0). Asking for the
    day's own weekday yields the same weekday one week earlier.
    """
    offset = (day.weekday() - weekday) % DAYS_PER_WEEK or DAYS_PER_WEEK
    return offset_day(day, -offset)


def nth_previous_occurrence(day: date, weekday: int, n: int) -> date | None:
    """Return the n-th date strictly before ``day`` that falls on ``weekday``."""
    if n < 1:
        raise ValueError("n must be at least 1")
    first = previous_occurrence(day, weekday)
    if first is None:
        return None
    return offset_day(first, -DAYS_PER_WEEK * (n - 1))


def first_of_month(day: date) -> date:
    return day.replace(day=1)


def shift_months(day: date, months: int) -> date | None:
    """Return the first day of the month ``months`` away from ``day``'s month."""
    index = day.year * DECEMBER + (day.month - 1) + months
    year, month_index = divmod(index, DECEMBER)
    if not date.min.year <= year <= date.max.year:
        return None
    return date(year, month_index + 1, 1)


def last_of_month(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def format_day(day: date) -> str:
    """Format a date as ``DD/MM/YYYY`` for titles."""
    return day.strftime("%d/%m/%Y")
