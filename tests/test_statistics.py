"""Tests for statistics module."""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest

# Add tests directory to path for conftest imports
sys.path.insert(0, str(Path(__file__).parent))

from conftest import make_session
from pomodoro_stats.config import Config
from pomodoro_stats.models import Session
from pomodoro_stats.statistics import StatisticsEngine, sessions_on


@pytest.fixture
def engine() -> StatisticsEngine:
    """Create StatisticsEngine with default window length."""
    return StatisticsEngine()


class TestAverageQuality:
    """Tests for calculate_average_quality."""

    def test_mean_of_rated(self, engine: StatisticsEngine) -> None:
        """Verifies unrated sessions are left out of sum and count.

        Business context: The rating is optional; unrated sessions must
        not pull the average towards zero.
        """
        sessions = [
            make_session(1, "2024-03-10", quality=8),
            make_session(2, "2024-03-10", quality=2),
            make_session(3, "2024-03-10", quality=None),
        ]
        assert engine.calculate_average_quality(sessions) == 5.0

    def test_no_rated_sessions_is_zero(self, engine: StatisticsEngine) -> None:
        """Verifies zero rated sessions gives 0.0, never NaN."""
        assert engine.calculate_average_quality([make_session(1, "2024-03-10")]) == 0.0
        assert engine.calculate_average_quality([]) == 0.0

    def test_zero_quality_counts_as_rated(self, engine: StatisticsEngine) -> None:
        """Verifies a stored quality of 0 is part of the average."""
        sessions = [make_session(1, "2024-03-10", quality=0), make_session(2, "2024-03-10", quality=6)]
        assert engine.calculate_average_quality(sessions) == 3.0


class TestWeeklySummary:
    """Tests for build_weekly_summary."""

    def test_always_seven_consecutive_days(self, engine: StatisticsEngine) -> None:
        """Verifies the window is 7 days oldest first, even with no data."""
        summary = engine.build_weekly_summary([], date(2024, 3, 10), date(2024, 3, 10))

        assert len(summary.stats) == 7
        days = [s.date for s in summary.stats]
        assert days[0] == date(2024, 3, 4)
        assert days[-1] == date(2024, 3, 10)
        assert all((b - a).days == 1 for a, b in zip(days, days[1:], strict=False))

    def test_end_to_end_example(
        self, engine: StatisticsEngine, march_sessions: list[Session]
    ) -> None:
        """Verifies the worked example for Sunday 2024-03-10.

        Arrangement:
        Two 25-minute sessions (q8, q2) on the 10th plus one unrated
        50-minute session on the 6th.

        Assertion Strategy:
        The Sunday stat has 2 sessions, ~0.83h and average 5.0; the
        Wednesday stat counts the unrated session with quality 0.0.
        """
        summary = engine.build_weekly_summary(march_sessions, date(2024, 3, 10), date(2024, 3, 10))

        sunday = summary.stats[-1]
        assert sunday.session_count == 2
        assert sunday.total_hours == pytest.approx(0.8333, abs=1e-3)
        assert sunday.average_quality == 5.0
        assert sunday.is_selected

        wednesday = summary.stats[2]
        assert wednesday.date == date(2024, 3, 6)
        assert wednesday.session_count == 1
        assert wednesday.total_hours == pytest.approx(50 / 60)
        assert wednesday.average_quality == 0.0

    def test_parallel_chart_arrays(
        self, engine: StatisticsEngine, march_sessions: list[Session]
    ) -> None:
        """Verifies labels/hours/quality/highlight line up with stats."""
        summary = engine.build_weekly_summary(march_sessions, date(2024, 3, 10), date(2024, 3, 6))

        assert summary.labels == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
        assert summary.hours == [s.total_hours for s in summary.stats]
        assert summary.quality == [s.average_quality for s in summary.stats]
        assert summary.highlight == [False, False, True, False, False, False, False]

    def test_window_not_aligned_to_week(self, engine: StatisticsEngine) -> None:
        """Verifies the window ends on any weekday, not only Sundays."""
        summary = engine.build_weekly_summary([], date(2024, 3, 6), date(2024, 3, 6))
        assert summary.start_date == date(2024, 2, 29)
        assert summary.labels[0] == "Thu"
        assert summary.labels[-1] == "Wed"

    def test_selection_outside_window(self, engine: StatisticsEngine) -> None:
        """Verifies no day is highlighted when the selection is elsewhere."""
        summary = engine.build_weekly_summary([], date(2024, 3, 10), date(2024, 1, 1))
        assert not any(summary.highlight)

    def test_ignores_sessions_outside_window(self, engine: StatisticsEngine) -> None:
        """Verifies sessions before or after the window are not counted."""
        sessions = [make_session(1, "2024-03-03"), make_session(2, "2024-03-11")]
        summary = engine.build_weekly_summary(sessions, date(2024, 3, 10), date(2024, 3, 10))
        assert summary.total_sessions == 0

    def test_input_order_does_not_matter(
        self, engine: StatisticsEngine, march_sessions: list[Session]
    ) -> None:
        """Verifies unordered input gives the same summary."""
        forward = engine.build_weekly_summary(march_sessions, date(2024, 3, 10), date(2024, 3, 10))
        backward = engine.build_weekly_summary(
            list(reversed(march_sessions)), date(2024, 3, 10), date(2024, 3, 10)
        )
        assert forward.hours == backward.hours
        assert forward.quality == backward.quality

    def test_custom_window_length(self) -> None:
        """Verifies window_days changes the number of stats."""
        summary = StatisticsEngine(window_days=3).build_weekly_summary(
            [], date(2024, 3, 10), date(2024, 3, 10)
        )
        assert len(summary.stats) == 3

    def test_zero_window_is_kept(self) -> None:
        """Verifies window_days=0 means an empty window, not the default 7."""
        engine = StatisticsEngine(window_days=0)
        summary = engine.build_weekly_summary([], date(2024, 3, 10), date(2024, 3, 10))

        assert engine.window_days == 0
        assert summary.stats == []
        assert summary.labels == []

    def test_default_window_from_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verifies an omitted window_days falls back to Config.WINDOW_DAYS."""
        monkeypatch.setattr(Config, "WINDOW_DAYS", 5)
        assert StatisticsEngine().window_days == 5


class TestMonthlyHeatmap:
    """Tests for calculate_intensity and build_monthly_heatmap."""

    def test_intensity_zero_for_empty_day(self, engine: StatisticsEngine) -> None:
        """Verifies a day without time has intensity 0."""
        assert engine.calculate_intensity(0.0, 4.0) == 0.0

    def test_intensity_floor(self, engine: StatisticsEngine) -> None:
        """Verifies the smallest logged day still gets at least 0.1."""
        assert engine.calculate_intensity(0.01, 10.0) >= 0.1

    def test_intensity_max_day_is_one(self, engine: StatisticsEngine) -> None:
        """Verifies the busiest day of the month reaches 1.0."""
        assert engine.calculate_intensity(4.0, 4.0) == pytest.approx(1.0)

    def test_max_hours_never_below_one(self, engine: StatisticsEngine) -> None:
        """Verifies a quiet month normalizes against 1.0 hour."""
        _, max_hours = engine.calculate_daily_hours(
            [make_session(1, "2024-03-10", duration_minutes=15)], 2, 2024
        )
        assert max_hours == 1.0

    @pytest.mark.parametrize(
        ("month", "year", "padding"),
        [
            (4, 2024, 2),  # May 2024 starts on Wednesday
            (0, 2024, 0),  # January 2024 starts on Monday
            (8, 2024, 6),  # September 2024 starts on Sunday
        ],
    )
    def test_start_padding(
        self, engine: StatisticsEngine, month: int, year: int, padding: int
    ) -> None:
        """Verifies Monday-first padding cells precede day 1."""
        heatmap = engine.build_monthly_heatmap([], month, year, date(2024, 1, 1))
        assert heatmap.start_padding == padding
        assert all(c.is_padding for c in heatmap.cells[:padding])
        assert heatmap.cells[padding].day == 1

    def test_one_cell_per_day(self, engine: StatisticsEngine) -> None:
        """Verifies a leap February has 29 day cells."""
        heatmap = engine.build_monthly_heatmap([], 1, 2024, date(2024, 1, 1))
        assert len(heatmap.day_cells) == 29
        assert heatmap.month_label == "February 2024"

    def test_hours_and_intensity(self, engine: StatisticsEngine) -> None:
        """Verifies per-day totals and normalization against the busiest day."""
        sessions = [
            make_session(1, "2024-03-10", duration_minutes=120),
            make_session(2, "2024-03-10", duration_minutes=120),
            make_session(3, "2024-03-11", duration_minutes=60),
            make_session(4, "2024-04-01", duration_minutes=600),
        ]
        heatmap = engine.build_monthly_heatmap(sessions, 2, 2024, date(2024, 3, 11))
        cells = {c.day: c for c in heatmap.day_cells}

        assert heatmap.max_hours == 4.0
        assert cells[10].total_hours == 4.0
        assert cells[10].intensity == pytest.approx(1.0)
        assert cells[11].intensity == pytest.approx(0.1 + 0.25 * 0.9)
        assert cells[12].intensity == 0.0
        assert cells[11].is_today
        assert not cells[10].is_today

    def test_other_years_excluded(self, engine: StatisticsEngine) -> None:
        """Verifies the same month of another year is not counted."""
        heatmap = engine.build_monthly_heatmap(
            [make_session(1, "2023-03-10", duration_minutes=60)], 2, 2024, date(2024, 3, 1)
        )
        assert all(c.total_hours == 0 for c in heatmap.day_cells)


class TestSessionsOn:
    """Tests for sessions_on helper."""

    def test_filters_by_day_keeping_order(self, march_sessions: list[Session]) -> None:
        """Verifies only the requested day's sessions remain, in order."""
        assert [s.id for s in sessions_on(march_sessions, date(2024, 3, 10))] == [1, 2]
        assert sessions_on(march_sessions, date(2024, 3, 11)) == []


class TestWeeklyReport:
    """Tests for generate_weekly_report."""

    def test_report_lists_days_newest_first(
        self, engine: StatisticsEngine, march_sessions: list[Session]
    ) -> None:
        """Verifies the header, ordering, selection marker and totals."""
        summary = engine.build_weekly_summary(march_sessions, date(2024, 3, 10), date(2024, 3, 10))
        report = engine.generate_weekly_report(summary)
        lines = report.splitlines()

        assert "POMODORO STATS - WEEKLY REPORT" in report
        day_lines = [line for line in lines if line.startswith(("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"))]
        assert day_lines[0].startswith("Sunday")
        assert day_lines[0].endswith(" *")
        assert day_lines[-1].startswith("Monday")
        assert "Total sessions: 3" in report

    def test_unrated_days_show_dash(self, engine: StatisticsEngine) -> None:
        """Verifies days without ratings print "-" instead of 0.0."""
        summary = engine.build_weekly_summary([], date(2024, 3, 10), date(2024, 3, 10))
        report = engine.generate_weekly_report(summary)
        day_lines = [line for line in report.splitlines() if line.endswith(("-", " *"))]
        assert len(day_lines) == 7
        assert all(line.rstrip(" *").endswith("-") for line in day_lines)
