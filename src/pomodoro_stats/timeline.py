"""
Timeline layout for a single day.

PURPOSE: Convert one day's sessions into time-axis intervals with color categories.
AI CONTEXT: Pure functions; input is already filtered to one date.

COLOR RULES (checked in this order):
- HIGH: quality >= 7
- LOW: quality present and <= 3 (a missing quality is never LOW)
- NEUTRAL: everything else, including unrated sessions

MIDNIGHT:
A session whose start + duration runs past 24:00 is clamped to end at
24.0 and flagged crosses_midnight. It still yields exactly one interval
and keeps its full duration_minutes.

USAGE:
    intervals = build_timeline(sessions_on(sessions, selected_date))
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import Config
from .dates import time_to_minutes
from .models import ColorCategory, TimelineInterval

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .models import Session

__all__ = ["classify_quality", "build_interval", "build_timeline", "sorted_by_start"]

HOURS_PER_DAY = 24.0


def classify_quality(quality: int | None) -> ColorCategory:
    """
    Map a session quality to its timeline color category.

    Example:
        >>> classify_quality(3), classify_quality(None), classify_quality(7)
        (<ColorCategory.LOW: 'low'>, <ColorCategory.NEUTRAL: 'neutral'>, <ColorCategory.HIGH: 'high'>)
    """
    if quality is not None and quality >= Config.HIGH_QUALITY_THRESHOLD:
        return ColorCategory.HIGH
    if quality is not None and quality <= Config.LOW_QUALITY_THRESHOLD:
        return ColorCategory.LOW
    return ColorCategory.NEUTRAL


def build_interval(session: Session) -> TimelineInterval:
    """
    Lay out one session on the day's time axis.

    Args:
        session: Session to place.

    Returns:
        TimelineInterval with start/end in decimal hours
        (09:15 -> 9.25), clamped at 24.0.
    """
    start_hour = time_to_minutes(session.start_time) / 60
    end_hour = start_hour + session.duration_minutes / 60
    crosses_midnight = end_hour > HOURS_PER_DAY
    return TimelineInterval(
        session_id=session.id,
        start_hour=start_hour,
        end_hour=min(end_hour, HOURS_PER_DAY),
        color_category=classify_quality(session.quality),
        quality_label=str(session.quality) if session.quality is not None else "-",
        duration_minutes=session.duration_minutes,
        start_time_label=session.start_time,
        crosses_midnight=crosses_midnight,
    )


def build_timeline(sessions: Iterable[Session]) -> list[TimelineInterval]:
    """
    One interval per session, in input order.

    No chronological ordering is promised; use sorted_by_start() when the
    layout needs it.

    Args:
        sessions: Sessions of a single day.

    Returns:
        List of TimelineInterval, same length as the input.
    """
    return [build_interval(s) for s in sessions]


def sorted_by_start(intervals: Iterable[TimelineInterval]) -> list[TimelineInterval]:
    """Intervals ordered by start hour, ties by session id."""
    return sorted(intervals, key=lambda i: (i.start_hour, i.session_id))
