"""
Data models for Pomodoro Stats.

PURPOSE: Type-safe dataclasses for the session record and everything derived from it.
AI CONTEXT: Session is the only persisted entity; the rest is recomputed per view.

MODEL HIERARCHY:
- Session: One logged block of focused work (persisted)
- DailyStat / WeeklySummary: Seven-day window aggregation
- HeatmapCell / MonthlyHeatmap: Month grid with normalized intensity
- TimelineInterval: One session laid out on a day's time axis

SERIALIZATION:
Session has to_dict() for JSON persistence and from_dict() for loading.
from_dict() validates shape and types and raises ImportFormatError, so
untrusted data never reaches the aggregators unchecked. Derived records
have to_dict() for the JSON API only.

USAGE:
    session = Session.create(date(2024, 3, 10), "09:00", 25, quality=8)
    data = session.to_dict()
    same = Session.from_dict(data)
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from typing import Any

from .dates import format_date, minutes_to_time, parse_date, time_to_minutes
from .errors import ImportFormatError, ParseError

__all__ = [
    "Session",
    "ColorCategory",
    "DailyStat",
    "WeeklySummary",
    "HeatmapCell",
    "MonthlyHeatmap",
    "TimelineInterval",
]

_last_generated_id = 0


def _generate_session_id() -> int:
    """
    Generate a unique session ID from the current epoch milliseconds.

    Two sessions created within the same millisecond would collide, so
    the value is bumped past the previous one generated in this process.

    Returns:
        Positive integer ID, strictly greater than any earlier result.
    """
    global _last_generated_id
    candidate = time.time_ns() // 1_000_000
    if candidate <= _last_generated_id:
        candidate = _last_generated_id + 1
    _last_generated_id = candidate
    return candidate


def _require_int(data: dict[str, Any], key: str, *aliases: str) -> int:
    """Fetch an integer field, accepting integral floats and legacy key names."""
    for name in (key, *aliases):
        if name in data:
            value = data[name]
            break
    else:
        raise ImportFormatError(f"Missing field '{key}'")
    if isinstance(value, bool):
        raise ImportFormatError(f"Field '{key}' must be an integer, got bool")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if not isinstance(value, int):
        raise ImportFormatError(f"Field '{key}' must be an integer, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class Session:
    """
    One logged work session.

    INVARIANTS:
    - id is unique within a session list
    - date has no time-of-day and no timezone
    - start_time is normalized "HH:MM" (00:00 to 23:59)
    - duration_minutes >= 0; may exceed a day in principle
    - quality is None or an int; 1-10 is expected but not enforced

    Sessions are immutable. The stored list changes only by appending a
    new session or by replacing the whole list on import.
    """

    id: int
    date: date
    start_time: str
    duration_minutes: int
    quality: int | None = None

    @classmethod
    def create(
        cls,
        day: date,
        start_time: str,
        duration_minutes: int,
        quality: int | None = None,
    ) -> Session:
        """
        Factory method to create a new session with a generated ID.

        Business context: Every entry point that logs work (web form,
        CLI) goes through this factory so IDs stay unique and start
        times are stored in one canonical form.

        Args:
            day: Calendar date the session belongs to.
            start_time: Clock time "HH:MM" (single-digit hour accepted).
            duration_minutes: Length of the session, >= 0.
            quality: Optional rating, usually 1-10.

        Returns:
            New Session with a fresh ID.

        Raises:
            ParseError: If start_time is malformed or the duration is
                negative.

        Example:
            >>> s = Session.create(date(2024, 3, 10), "9:00", 25, 8)
            >>> s.start_time
            '09:00'
        """
        if duration_minutes < 0:
            raise ParseError(f"Duration must be non-negative, got {duration_minutes}")
        return cls(
            id=_generate_session_id(),
            date=day,
            start_time=minutes_to_time(time_to_minutes(start_time)),
            duration_minutes=duration_minutes,
            quality=quality,
        )

    @property
    def date_key(self) -> str:
        """Formatted date used for day membership comparisons."""
        return format_date(self.date)

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize session to dictionary for JSON storage.

        Returns:
            Dict with keys id, date, start_time, duration_min and quality
            (None when the session is unrated).

        Example:
            >>> Session(1, date(2024, 3, 10), "09:00", 25, 8).to_dict()
            {'id': 1, 'date': '2024-03-10', 'start_time': '09:00', 'duration_min': 25, 'quality': 8}
        """
        return {
            "id": self.id,
            "date": self.date_key,
            "start_time": self.start_time,
            "duration_min": self.duration_minutes,
            "quality": self.quality,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Session:
        """
        Deserialize and validate a session from a dictionary.

        Accepts the stored shape produced by to_dict(). The legacy key
        'duration_minutes' is read when 'duration_min' is absent. Quality
        values outside 1-10 are kept as-is; only their type is checked.

        Business context: Records come from disk and from user imports.
        Neither is trusted, so every field is checked here instead of at
        the point of use.

        Args:
            data: Decoded JSON value expected to be a session object.

        Returns:
            Session instance.

        Raises:
            ImportFormatError: If data is not a dict, a field is missing,
                a field has the wrong type, or the date/time is malformed.

        Example:
            >>> Session.from_dict({'id': 1, 'date': '2024-03-10',
            ...     'start_time': '09:00', 'duration_min': 25, 'quality': None})
            Session(id=1, date=datetime.date(2024, 3, 10), start_time='09:00', duration_minutes=25, quality=None)
        """
        if not isinstance(data, dict):
            raise ImportFormatError(f"Session record must be an object, got {type(data).__name__}")

        session_id = _require_int(data, "id")
        duration = _require_int(data, "duration_min", "duration_minutes")
        if duration < 0:
            raise ImportFormatError(f"Field 'duration_min' must be non-negative, got {duration}")

        quality = data.get("quality")
        if quality is not None:
            quality = _require_int(data, "quality")

        try:
            day = parse_date(data.get("date"))
            start_time = minutes_to_time(time_to_minutes(data.get("start_time")))
        except ParseError as e:
            raise ImportFormatError(str(e)) from e

        return cls(
            id=session_id,
            date=day,
            start_time=start_time,
            duration_minutes=duration,
            quality=quality,
        )


class ColorCategory(StrEnum):
    """Quality-derived color bucket for a timeline interval."""

    HIGH = "high"
    LOW = "low"
    NEUTRAL = "neutral"


@dataclass
class DailyStat:
    """Statistics for one day of the weekly window."""

    date: date
    weekday_label: str
    short_label: str
    session_count: int
    total_hours: float
    average_quality: float
    is_selected: bool

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the JSON API."""
        return {
            "date": format_date(self.date),
            "weekday": self.weekday_label,
            "sessions": self.session_count,
            "hours": round(self.total_hours, 2),
            "quality": round(self.average_quality, 1),
            "is_selected": self.is_selected,
        }


@dataclass
class WeeklySummary:
    """
    Seven consecutive DailyStat records plus chart-ready parallel arrays.

    stats is oldest first. labels/hours/quality/highlight line up with
    stats index by index.
    """

    start_date: date
    end_date: date
    stats: list[DailyStat] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)
    hours: list[float] = field(default_factory=list)
    quality: list[float] = field(default_factory=list)
    highlight: list[bool] = field(default_factory=list)

    @property
    def total_sessions(self) -> int:
        """Session count across the whole window."""
        return sum(s.session_count for s in self.stats)

    @property
    def total_hours(self) -> float:
        """Hours logged across the whole window."""
        return sum(s.total_hours for s in self.stats)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the JSON API."""
        return {
            "start_date": format_date(self.start_date),
            "end_date": format_date(self.end_date),
            "stats": [s.to_dict() for s in self.stats],
            "chart": {
                "labels": self.labels,
                "hours": self.hours,
                "quality": self.quality,
                "highlight": self.highlight,
            },
        }


@dataclass
class HeatmapCell:
    """One cell of the month grid; padding cells have no day."""

    day: int | None
    date: date | None
    total_hours: float = 0.0
    intensity: float = 0.0
    is_today: bool = False
    is_padding: bool = False

    @classmethod
    def padding(cls) -> HeatmapCell:
        """Empty cell placed before day 1."""
        return cls(day=None, date=None, is_padding=True)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the JSON API."""
        return {
            "day": self.day,
            "date": format_date(self.date) if self.date else None,
            "hours": round(self.total_hours, 2),
            "intensity": round(self.intensity, 3),
            "is_today": self.is_today,
            "is_padding": self.is_padding,
        }


@dataclass
class MonthlyHeatmap:
    """Padded month grid. month is 0-based."""

    year: int
    month: int
    month_label: str
    start_padding: int
    max_hours: float
    cells: list[HeatmapCell] = field(default_factory=list)

    @property
    def day_cells(self) -> list[HeatmapCell]:
        """Cells for real days, padding dropped."""
        return [c for c in self.cells if not c.is_padding]

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the JSON API."""
        return {
            "year": self.year,
            "month": self.month,
            "label": self.month_label,
            "start_padding": self.start_padding,
            "max_hours": round(self.max_hours, 2),
            "cells": [c.to_dict() for c in self.cells],
        }


@dataclass
class TimelineInterval:
    """One session laid out on the day's time axis, in decimal hours."""

    session_id: int
    start_hour: float
    end_hour: float
    color_category: ColorCategory
    quality_label: str
    duration_minutes: int
    start_time_label: str
    crosses_midnight: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the JSON API."""
        return {
            "session_id": self.session_id,
            "x": [round(self.start_hour, 2), round(self.end_hour, 2)],
            "category": self.color_category.value,
            "quality": self.quality_label,
            "duration": self.duration_minutes,
            "start_time": self.start_time_label,
            "crosses_midnight": self.crosses_midnight,
        }
