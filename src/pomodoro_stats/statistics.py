"""
Statistics engine for Pomodoro Stats.

PURPOSE: Turn an unordered session list into weekly and monthly summaries.
AI CONTEXT: Pure data processing - no visualization, no I/O, no clock reads.

AGGREGATIONS:
1. Weekly window: 7 DailyStat records ending on a window-end date
2. Monthly heatmap: padded Monday-first grid of daily hours with intensity
3. Text report: the weekly window as plain text for the CLI

ZERO GUARDS:
- A day without rated sessions has average quality 0.0, never NaN
- A month without hours normalizes against 1.0, never divides by zero
- An empty day has intensity 0.0; any logged time gets at least 0.1

USAGE:
    engine = StatisticsEngine()
    week = engine.build_weekly_summary(sessions, window_end, selected)
    month = engine.build_monthly_heatmap(sessions, 2, 2024, today)
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import TYPE_CHECKING

from .config import Config
from .dates import add_days, date_range, days_in_month, format_date, month_start_padding
from .models import DailyStat, HeatmapCell, MonthlyHeatmap, WeeklySummary

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .models import Session

__all__ = ["StatisticsEngine", "WEEKDAY_NAMES", "sessions_on"]

WEEKDAY_NAMES: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def sessions_on(sessions: Iterable[Session], day: date) -> list[Session]:
    """
    Sessions logged on one calendar day, in input order.

    Membership compares formatted "YYYY-MM-DD" strings.

    Args:
        sessions: Any iterable of sessions.
        day: Day to keep.

    Returns:
        Matching sessions.
    """
    key = format_date(day)
    return [s for s in sessions if s.date_key == key]


class StatisticsEngine:
    """
    Calculator for weekly and monthly session statistics.

    DESIGN:
    - Stateless: Each method operates on provided data
    - Pure: No side effects, only data transformation
    - Explicit: Dates that depend on the clock ("today", the selection)
      are parameters, so results are reproducible in tests

    PARAMETERS:
    - window_days: Length of the weekly window (Config.WINDOW_DAYS)
    """

    def __init__(self, window_days: int | None = None) -> None:
        """
        Initialize statistics engine.

        Args:
            window_days: Days in the rolling window, window-end inclusive.
                Default: Config.WINDOW_DAYS (7)
        """
        self.window_days = Config.WINDOW_DAYS if window_days is None else window_days

    def calculate_average_quality(self, sessions: Sequence[Session]) -> float:
        """
        Mean quality over the sessions that carry a rating.

        Sessions without a quality are left out of both the sum and the
        count. A quality of 0 counts as a rating.

        Business context: Unrated sessions are common (the rating is
        optional in the form) and must not drag the average towards 0.

        Args:
            sessions: Sessions of one day (or any group).

        Returns:
            Average quality, or 0.0 when no session is rated.

        Example:
            >>> engine.calculate_average_quality([s_q8, s_q2, s_unrated])
            5.0
        """
        rated = [s.quality for s in sessions if s.quality is not None]
        if not rated:
            return 0.0
        return sum(rated) / len(rated)

    def build_daily_stat(
        self,
        sessions: Sequence[Session],
        day: date,
        selected_date: date,
    ) -> DailyStat:
        """
        Statistics for one day from sessions already filtered to that day.

        Args:
            sessions: Sessions on day.
            day: The day described.
            selected_date: Currently selected day, for is_selected.

        Returns:
            DailyStat with count, hours and average quality.
        """
        weekday = WEEKDAY_NAMES[day.weekday()]
        return DailyStat(
            date=day,
            weekday_label=weekday,
            short_label=weekday[:3],
            session_count=len(sessions),
            total_hours=sum(s.duration_minutes for s in sessions) / 60,
            average_quality=self.calculate_average_quality(sessions),
            is_selected=format_date(day) == format_date(selected_date),
        )

    def build_weekly_summary(
        self,
        sessions: Iterable[Session],
        window_end: date,
        selected_date: date,
    ) -> WeeklySummary:
        """
        Aggregate sessions into consecutive days ending on window_end.

        Walks each date from window_end - 6 days to window_end inclusive,
        filters the sessions by formatted date and computes count, hours
        and average quality. The parallel chart arrays (labels, hours,
        quality, highlight) are filled in the same order.

        Business context: The weekly view is the main dashboard. Selecting
        a day only changes selected_date (the highlight); moving the
        window changes window_end. Both re-run this whole aggregation.

        Args:
            sessions: Full session list, any order.
            window_end: Most recent day of the window, inclusive.
            selected_date: Highlighted day; may lie outside the window.

        Returns:
            WeeklySummary with exactly window_days stats, oldest first.
            The table shows them newest first; reversing is the
            presenter's job.

        Example:
            >>> week = engine.build_weekly_summary(sessions, date(2024, 3, 10), date(2024, 3, 10))
            >>> [s.short_label for s in week.stats]
            ['Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun']
        """
        start = add_days(window_end, -(self.window_days - 1))

        by_day: dict[str, list[Session]] = defaultdict(list)
        for session in sessions:
            by_day[session.date_key].append(session)

        summary = WeeklySummary(start_date=start, end_date=window_end)
        for day in date_range(start, window_end):
            stat = self.build_daily_stat(by_day.get(format_date(day), []), day, selected_date)
            summary.stats.append(stat)
            summary.labels.append(stat.short_label)
            summary.hours.append(stat.total_hours)
            summary.quality.append(stat.average_quality)
            summary.highlight.append(stat.is_selected)
        return summary

    def calculate_daily_hours(
        self,
        sessions: Iterable[Session],
        month: int,
        year: int,
    ) -> tuple[dict[int, float], float]:
        """
        Total hours per day of month, plus the month's maximum.

        Args:
            sessions: Full session list.
            month: Month index, 0 = January.
            year: Four digit year.

        Returns:
            (hours by day-of-month, max daily hours). The maximum never
            drops below Config.MIN_MONTH_MAX_HOURS.
        """
        daily: dict[int, float] = defaultdict(float)
        max_hours = Config.MIN_MONTH_MAX_HOURS
        for session in sessions:
            if session.date.year != year or session.date.month != month + 1:
                continue
            daily[session.date.day] += session.duration_minutes / 60
            max_hours = max(max_hours, daily[session.date.day])
        return dict(daily), max_hours

    def calculate_intensity(self, hours: float, max_hours: float) -> float:
        """
        Normalized heat of a day.

        Returns:
            0.0 for no hours, otherwise 0.1 + (hours / max_hours) * 0.9,
            so the quietest logged day still stands out from an empty one.
        """
        if hours <= 0:
            return 0.0
        return Config.INTENSITY_FLOOR + (hours / max_hours) * Config.INTENSITY_SCALE

    def build_monthly_heatmap(
        self,
        sessions: Iterable[Session],
        month: int,
        year: int,
        today: date,
    ) -> MonthlyHeatmap:
        """
        Build the padded Monday-first heatmap grid for one month.

        The grid starts with start_padding empty cells (0 when the month
        starts on Monday, 6 when it starts on Sunday), followed by one
        cell per day of the month with total hours and intensity.

        Business context: The monthly view shows consistency at a glance.
        Clicking a day jumps to the weekly view for that day's week.

        Args:
            sessions: Full session list.
            month: Month index, 0 = January.
            year: Four digit year.
            today: Current local date, for the "Today" marker.

        Returns:
            MonthlyHeatmap with padding + day cells.

        Example:
            >>> grid = engine.build_monthly_heatmap(sessions, 4, 2024, today)  # May 2024
            >>> grid.start_padding  # May 1st 2024 is a Wednesday
            2
        """
        daily_hours, max_hours = self.calculate_daily_hours(sessions, month, year)
        padding = month_start_padding(year, month)
        today_key = format_date(today)

        heatmap = MonthlyHeatmap(
            year=year,
            month=month,
            month_label=Config.month_label(month, year),
            start_padding=padding,
            max_hours=max_hours,
        )
        heatmap.cells.extend(HeatmapCell.padding() for _ in range(padding))

        first = date(year, month + 1, 1)
        last = date(year, month + 1, days_in_month(year, month))
        for day in date_range(first, last):
            hours = daily_hours.get(day.day, 0.0)
            heatmap.cells.append(
                HeatmapCell(
                    day=day.day,
                    date=day,
                    total_hours=hours,
                    intensity=self.calculate_intensity(hours, max_hours),
                    is_today=format_date(day) == today_key,
                )
            )
        return heatmap

    def generate_weekly_report(self, summary: WeeklySummary) -> str:
        """
        Render a weekly summary as plain text.

        Days are listed newest first, like the dashboard table. Unrated
        days show "-" instead of 0.0.

        Args:
            summary: Result of build_weekly_summary().

        Returns:
            Multi-line report for terminal output.
        """
        lines = [
            "=" * 50,
            "POMODORO STATS - WEEKLY REPORT",
            f"{format_date(summary.start_date)} .. {format_date(summary.end_date)}",
            "=" * 50,
            "",
            f"{'Day':<10} {'Date':<11} {'Sessions':>8} {'Hours':>7} {'Quality':>8}",
        ]
        for stat in reversed(summary.stats):
            quality = f"{stat.average_quality:.1f}" if stat.average_quality > 0 else "-"
            marker = " *" if stat.is_selected else ""
            lines.append(
                f"{stat.weekday_label:<10} {format_date(stat.date):<11} "
                f"{stat.session_count:>8} {stat.total_hours:>6.2f}h {quality:>8}{marker}"
            )
        lines.extend(
            [
                "",
                f"  • Total sessions: {summary.total_sessions}",
                f"  • Total focus time: {summary.total_hours:.1f} hours",
                "",
                "=" * 50,
            ]
        )
        return "\n".join(lines)
