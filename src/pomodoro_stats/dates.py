"""
Calendar utilities for Pomodoro Stats.

PURPOSE: Parse, format and do arithmetic on local calendar dates and clock times.
AI CONTEXT: Pure functions, no I/O, no timezones, no "now" lookups.

MODEL:
- Dates are datetime.date values. There is no time-of-day and no tzinfo,
  so arithmetic through timedelta never drifts across a DST change.
- Clock times are "HH:MM" strings mapped onto minutes-of-day (0..1439).
  Converting back wraps modulo one day; callers get no overflow flag.
- Months are 0-based (0 = January) at this module's boundary, matching
  the view state. Only datetime.date itself uses 1-based months.

USAGE:
    day = parse_date("2024-03-10")
    sunday = end_of_week(day)
    end = end_time_for("23:50", 25)  # "00:15"
"""

from __future__ import annotations

import calendar
import re
from collections.abc import Iterator
from datetime import date, timedelta

from .config import Config
from .errors import ParseError

__all__ = [
    "parse_date",
    "format_date",
    "time_to_minutes",
    "minutes_to_time",
    "end_of_week",
    "add_days",
    "date_range",
    "days_in_month",
    "month_start_padding",
    "shift_month",
    "end_time_for",
    "start_time_for",
]

_DATE_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})", re.ASCII)
_TIME_RE = re.compile(r"(\d{1,2}):(\d{2})", re.ASCII)


def parse_date(value: str) -> date:
    """
    Parse a "YYYY-MM-DD" string into a calendar date.

    Splits the string on its dashes and builds a date from the three
    numeric parts. No timezone is involved, so the result is the same
    day the string names on every host.

    Business context: Session records and URL parameters carry dates as
    strings. A malformed value must surface to the caller rather than
    silently turning into "today".

    Args:
        value: Date string such as "2024-03-10".

    Returns:
        The corresponding datetime.date.

    Raises:
        ParseError: If the string does not match the pattern, a part is
            not numeric, or the date does not exist (e.g. "2023-02-29").

    Example:
        >>> parse_date("2024-02-29")
        datetime.date(2024, 2, 29)
    """
    if not isinstance(value, str):
        raise ParseError(f"Expected a YYYY-MM-DD string, got {type(value).__name__}")
    match = _DATE_RE.fullmatch(value)
    if match is None:
        raise ParseError(f"Invalid date {value!r}: expected YYYY-MM-DD")
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as e:
        raise ParseError(f"Invalid date {value!r}: {e}") from e


def format_date(value: date) -> str:
    """
    Format a date as zero-padded "YYYY-MM-DD".

    Inverse of parse_date(): parse_date(format_date(d)) == d for every
    date d.

    Args:
        value: Date to format.

    Returns:
        String such as "2024-03-10".
    """
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def time_to_minutes(value: str) -> int:
    """
    Convert an "HH:MM" clock time into minutes after midnight.

    Args:
        value: Clock time, hours 0-23 and minutes 0-59. A single-digit
            hour ("9:05") is accepted.

    Returns:
        Minutes of the day, 0..1439.

    Raises:
        ParseError: If the string is malformed or out of range.

    Example:
        >>> time_to_minutes("09:30")
        570
    """
    if not isinstance(value, str):
        raise ParseError(f"Expected an HH:MM string, got {type(value).__name__}")
    match = _TIME_RE.fullmatch(value)
    if match is None:
        raise ParseError(f"Invalid time {value!r}: expected HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ParseError(f"Invalid time {value!r}: out of range")
    return hours * 60 + minutes


def minutes_to_time(total_minutes: int) -> str:
    """
    Convert minutes after midnight into "HH:MM", wrapping around the day.

    Negative and overflowing inputs wrap modulo 1440, so editing a
    duration can push a start or end time across midnight without any
    error. The day change is dropped.

    Args:
        total_minutes: Any integer number of minutes.

    Returns:
        Zero-padded "HH:MM" string.

    Example:
        >>> minutes_to_time(-30)
        '23:30'
        >>> minutes_to_time(1450)
        '00:10'
    """
    wrapped = total_minutes % Config.MINUTES_PER_DAY
    hours, minutes = divmod(wrapped, 60)
    return f"{hours:02d}:{minutes:02d}"


def end_of_week(value: date) -> date:
    """
    Return the Sunday on or after a date.

    Weeks end on Sunday: a Sunday maps to itself, any other weekday
    maps forward to the coming Sunday.

    Example:
        >>> end_of_week(date(2024, 3, 6))  # Wednesday
        datetime.date(2024, 3, 10)
    """
    # date.weekday(): Monday=0 .. Sunday=6
    return value + timedelta(days=6 - value.weekday())


def add_days(value: date, days: int) -> date:
    """Shift a date by a (possibly negative) number of days."""
    return value + timedelta(days=days)


def date_range(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end inclusive, oldest first."""
    # Counting offsets never steps past end, which may be date.max.
    for offset in range((end - start).days + 1):
        yield start + timedelta(days=offset)


def days_in_month(year: int, month: int) -> int:
    """
    Number of days in a 0-based month, leap years included.

    Example:
        >>> days_in_month(2024, 1)
        29
    """
    return calendar.monthrange(year, month + 1)[1]


def month_start_padding(year: int, month: int) -> int:
    """
    Empty cells before day 1 in a Monday-first month grid.

    Equal to (weekday_of_first - 1) mod 7 with Sunday=0 numbering: a
    month starting on Monday needs 0 cells, Wednesday 2, Sunday 6.

    Args:
        year: Four digit year.
        month: Month index, 0 = January.

    Returns:
        Padding cell count, 0..6.
    """
    return date(year, month + 1, 1).weekday()


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """
    Move a (year, 0-based month) pair by delta months with year carry.

    Example:
        >>> shift_month(2024, 11, 1)
        (2025, 0)
        >>> shift_month(2024, 0, -1)
        (2023, 11)
    """
    carry, month = divmod(month + delta, 12)
    return year + carry, month


def end_time_for(start_time: str, duration_minutes: int) -> str:
    """
    Clock time a session ends, given its start and length.

    Wraps past midnight: end_time_for("23:50", 25) == "00:15".

    Raises:
        ParseError: If start_time is malformed.
    """
    return minutes_to_time(time_to_minutes(start_time) + duration_minutes)


def start_time_for(end_time: str, duration_minutes: int) -> str:
    """
    Clock time a session started, given its end and length.

    Wraps before midnight: start_time_for("00:10", 25) == "23:45".

    Raises:
        ParseError: If end_time is malformed.
    """
    return minutes_to_time(time_to_minutes(end_time) - duration_minutes)
