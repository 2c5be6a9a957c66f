"""
Presenters for Pomodoro Stats dashboards.

PURPOSE: Testable logic layer between the aggregation engine and the UI.
AI CONTEXT: Presenters read the repository, call the pure core, return view models.

DESIGN PRINCIPLES:
1. Presenters receive state explicitly, return view models (dataclasses)
2. No dependencies on a specific UI framework
3. Display formatting (newest-first rows, badges, colors) lives here,
   not in the aggregators
4. ChartPresenter renders matplotlib PNGs for the web layer

USAGE:
    presenter = DashboardPresenter(storage, StatisticsEngine())
    weekly = presenter.get_weekly(ViewState.initial(date.today()))
    for row in weekly.rows:
        print(row.weekday, row.hours_display)
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from .config import Config
from .dates import end_time_for, format_date, parse_date, start_time_for
from .errors import ParseError
from .models import ColorCategory, Session
from .statistics import WEEKDAY_NAMES, sessions_on
from .timeline import build_timeline, sorted_by_start
from .transfer import export_filename, export_sessions, parse_import

if TYPE_CHECKING:
    from .models import DailyStat, HeatmapCell, MonthlyHeatmap, TimelineInterval, WeeklySummary
    from .state import ViewState
    from .statistics import StatisticsEngine
    from .storage import SessionRepository
    from .transfer import ImportResult

__all__ = [
    "DayRowViewModel",
    "TimelineRowViewModel",
    "WeeklyViewModel",
    "HeatmapCellViewModel",
    "MonthlyViewModel",
    "SessionFormViewModel",
    "DashboardPresenter",
    "ChartPresenter",
    "build_session_from_form",
    "long_date_display",
]

HEATMAP_RGB = (81, 144, 114)


def long_date_display(day: date) -> str:
    """
    Format a date for headings.

    Example:
        >>> long_date_display(date(2024, 3, 10))
        'Sunday, March 10, 2024'
    """
    weekday = WEEKDAY_NAMES[day.weekday()]
    month = Config.MONTH_NAMES[day.month - 1]
    return f"{weekday}, {month} {day.day}, {day.year}"


def _quality_badge(quality: float) -> str:
    """Badge class for an average quality; empty when there is none."""
    if quality <= 0:
        return ""
    if quality >= Config.HIGH_QUALITY_THRESHOLD:
        return "badge-success"
    if quality >= Config.LOW_QUALITY_THRESHOLD + 1:
        return "badge-warning"
    return "badge-danger"


@dataclass
class DayRowViewModel:
    """View model for a row of the weekly table."""

    day: date
    weekday: str
    session_count: int
    total_hours: float
    average_quality: float
    is_selected: bool

    @classmethod
    def from_stat(cls, stat: DailyStat) -> DayRowViewModel:
        """Build a row from a DailyStat."""
        return cls(
            day=stat.date,
            weekday=stat.weekday_label,
            session_count=stat.session_count,
            total_hours=stat.total_hours,
            average_quality=stat.average_quality,
            is_selected=stat.is_selected,
        )

    @property
    def date_display(self) -> str:
        """Date as YYYY-MM-DD."""
        return format_date(self.day)

    @property
    def hours_display(self) -> str:
        """
        Hours with two decimals and a unit.

        Example:
            >>> row.hours_display  # 50 minutes
            '0.83h'
        """
        return f"{self.total_hours:.2f}h"

    @property
    def quality_display(self) -> str:
        """Average quality with one decimal, or "-" for unrated days."""
        if self.average_quality <= 0:
            return "-"
        return f"{self.average_quality:.1f}"

    @property
    def quality_badge_class(self) -> str:
        """
        CSS class for the quality badge.

        Thresholds: >= 7 success, >= 4 warning, below that danger.
        Unrated days get no badge.
        """
        return _quality_badge(self.average_quality)


_CATEGORY_BADGES = {
    ColorCategory.HIGH: "badge-success",
    ColorCategory.NEUTRAL: "badge-warning",
    ColorCategory.LOW: "badge-danger",
}


@dataclass
class TimelineRowViewModel:
    """
    One session of the selected day, as listed under the timeline chart.

    Carries what a chart tooltip would: start, duration and quality.
    """

    interval: TimelineInterval

    @property
    def time_range(self) -> str:
        """Clock range such as "09:00-09:25", wrapping past midnight."""
        start = self.interval.start_time_label
        return f"{start}-{end_time_for(start, self.interval.duration_minutes)}"

    @property
    def duration_display(self) -> str:
        """Duration such as "25 min"."""
        return f"{self.interval.duration_minutes} min"

    @property
    def quality_display(self) -> str:
        """Quality as stored, "-" when unrated."""
        return self.interval.quality_label

    @property
    def category(self) -> str:
        """Color category name: high, neutral or low."""
        return self.interval.color_category.value

    @property
    def badge_class(self) -> str:
        """CSS badge class matching the chart color of the interval."""
        return _CATEGORY_BADGES[self.interval.color_category]


@dataclass
class WeeklyViewModel:
    """Everything the weekly page shows."""

    state: ViewState
    summary: WeeklySummary
    rows: list[DayRowViewModel] = field(default_factory=list)
    timeline: list[TimelineInterval] = field(default_factory=list)

    @property
    def timeline_rows(self) -> list[TimelineRowViewModel]:
        """Selected day's sessions in chronological order."""
        return [TimelineRowViewModel(interval) for interval in self.timeline]

    @property
    def selected_display(self) -> str:
        """Heading for the selected day."""
        return long_date_display(self.state.selected_date)

    @property
    def range_display(self) -> str:
        """Window as "YYYY-MM-DD – YYYY-MM-DD"."""
        return f"{format_date(self.summary.start_date)} – {format_date(self.summary.end_date)}"


@dataclass
class HeatmapCellViewModel:
    """View model for one heatmap grid cell."""

    cell: HeatmapCell

    @property
    def is_padding(self) -> bool:
        """True for the blank cells before day 1."""
        return self.cell.is_padding

    @property
    def date_display(self) -> str:
        """Cell date as YYYY-MM-DD, empty for padding."""
        return format_date(self.cell.date) if self.cell.date else ""

    @property
    def background(self) -> str:
        """
        CSS background for the cell.

        Logged days use the accent color at the cell's intensity as
        opacity; empty days are white.
        """
        if self.cell.total_hours <= 0:
            return "white"
        r, g, b = HEATMAP_RGB
        return f"rgba({r}, {g}, {b}, {self.cell.intensity:.3f})"

    @property
    def hours_display(self) -> str:
        """Hours with one decimal, empty for days without time."""
        if self.cell.total_hours <= 0:
            return ""
        return f"{self.cell.total_hours:.1f}h"


@dataclass
class MonthlyViewModel:
    """Everything the monthly page shows."""

    state: ViewState
    heatmap: MonthlyHeatmap
    cells: list[HeatmapCellViewModel] = field(default_factory=list)

    @property
    def weekday_headers(self) -> list[str]:
        """Monday-first column headers."""
        return [name[:3] for name in WEEKDAY_NAMES]


@dataclass
class SessionFormViewModel:
    """Prefilled values for the add-session form."""

    date: str
    start_time: str
    end_time: str
    duration: int
    quality: str = ""

    @classmethod
    def prefill(cls, now: datetime) -> SessionFormViewModel:
        """
        Defaults for a session that just finished.

        The session is assumed to be a standard pomodoro ending now, so
        the start is now minus Config.DEFAULT_SESSION_MINUTES.

        Args:
            now: Current local time (naive).

        Returns:
            Form values with date, start, end and duration filled and
            quality left blank.

        Example:
            >>> SessionFormViewModel.prefill(datetime(2024, 3, 10, 9, 25)).start_time
            '09:00'
        """
        minutes = Config.DEFAULT_SESSION_MINUTES
        end_time = now.strftime("%H:%M")
        return cls(
            date=format_date(now.date()),
            start_time=start_time_for(end_time, minutes),
            end_time=end_time,
            duration=minutes,
        )


def _parse_duration(value: Any) -> int:
    """Duration from a form field; must be a non-negative integer."""
    if isinstance(value, bool):
        raise ParseError("Duration must be a whole number of minutes")
    if isinstance(value, int):
        duration = value
    else:
        try:
            duration = int(str(value).strip())
        except ValueError as e:
            raise ParseError(f"Invalid duration {value!r}") from e
    if duration < 0:
        raise ParseError(f"Duration must be non-negative, got {duration}")
    return duration


def _parse_quality(value: Any) -> int | None:
    """
    Quality from a form field.

    Blank, non-numeric and zero all mean "unrated", the same as an empty
    rating input.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value or None
    try:
        return int(str(value).strip()) or None
    except ValueError:
        return None


def _is_blank(value: Any) -> bool:
    """True for a missing or whitespace-only form field."""
    return value is None or (isinstance(value, str) and not value.strip())


def build_session_from_form(fields: dict[str, Any]) -> Session:
    """
    Validate raw add-form fields into a new Session.

    Args:
        fields: Mapping with 'date', 'start_time', 'duration' and an
            optional 'quality'. Values may be strings (HTML form) or
            numbers (JSON client). A blank or missing 'start_time' is
            derived from 'end_time' minus the duration, wrapping before
            midnight; when both are given the start is kept.

    Returns:
        New Session with a generated ID.

    Raises:
        ParseError: If the date, start or end time or duration is invalid.

    Example:
        >>> build_session_from_form({'date': '2024-03-10', 'start_time': '09:00',
        ...                          'duration': '25', 'quality': ''}).quality is None
        True
        >>> build_session_from_form({'date': '2024-03-10', 'end_time': '00:10',
        ...                          'duration': 25}).start_time
        '23:45'
    """
    if "duration" not in fields:
        raise ParseError("Missing duration")
    duration = _parse_duration(fields["duration"])
    start_time = fields.get("start_time")
    end_time = fields.get("end_time")
    if _is_blank(start_time) and not _is_blank(end_time):
        start_time = start_time_for(end_time, duration)
    return Session.create(
        parse_date(fields.get("date")),
        start_time,
        duration,
        _parse_quality(fields.get("quality")),
    )


class DashboardPresenter:
    """
    Presenter assembling weekly, monthly and form view models.

    Loads the session list from the repository on every call. There is
    no cache to invalidate: an add or an import is visible on the next
    request.
    """

    def __init__(
        self,
        storage: SessionRepository,
        statistics: StatisticsEngine,
    ) -> None:
        """
        Initialize dashboard presenter with data dependencies.

        Business context: Dependency injection lets tests run the
        presenter against an in-memory filesystem or a mock repository.

        Args:
            storage: Repository providing the session list.
            statistics: Engine computing weekly and monthly aggregations.
        """
        self.storage = storage
        self.statistics = statistics

    def get_weekly(self, state: ViewState) -> WeeklyViewModel:
        """
        Build the weekly page for a view state.

        Rows come out newest first (the engine returns oldest first).
        The timeline covers the selected day, sorted by start time.

        Args:
            state: Current navigation state.

        Returns:
            WeeklyViewModel with summary, table rows and timeline.
        """
        sessions = self.storage.load_sessions()
        summary = self.statistics.build_weekly_summary(
            sessions, state.window_end_date, state.selected_date
        )
        return WeeklyViewModel(
            state=state,
            summary=summary,
            rows=[DayRowViewModel.from_stat(s) for s in reversed(summary.stats)],
            timeline=sorted_by_start(build_timeline(sessions_on(sessions, state.selected_date))),
        )

    def get_monthly(self, state: ViewState, today: date) -> MonthlyViewModel:
        """
        Build the monthly heatmap page for a view state.

        Args:
            state: Current navigation state (month and year).
            today: Current local date, for the "Today" marker.

        Returns:
            MonthlyViewModel with padded cells.
        """
        heatmap = self.statistics.build_monthly_heatmap(
            self.storage.load_sessions(), state.current_month, state.current_year, today
        )
        return MonthlyViewModel(
            state=state,
            heatmap=heatmap,
            cells=[HeatmapCellViewModel(c) for c in heatmap.cells],
        )

    def get_timeline(self, day: date) -> list[TimelineInterval]:
        """Intervals for one day, in stored order."""
        return build_timeline(sessions_on(self.storage.load_sessions(), day))

    def add_session(self, fields: dict[str, Any]) -> Session:
        """
        Validate form fields and append the session.

        Raises:
            ParseError: If the fields are invalid.
            OSError: If the repository could not save.
        """
        session = build_session_from_form(fields)
        if not self.storage.add_session(session):
            raise OSError("Could not save session")
        return session

    def export(self, today: date) -> tuple[str, str]:
        """
        Export the whole log.

        Returns:
            (download filename, JSON text).
        """
        return export_filename(today), export_sessions(self.storage.load_sessions())

    def import_sessions(self, text: str | bytes) -> ImportResult:
        """
        Validate an import document and, if accepted, replace the log.

        A rejected document leaves the stored sessions untouched.
        """
        result = parse_import(text)
        if result.success and not self.storage.replace_all(result.sessions):
            raise OSError("Could not save imported sessions")
        return result


class ChartPresenter:
    """
    Presenter for generating chart images.

    Uses matplotlib for server-side chart rendering.
    Returns PNG images as bytes for the dashboard <img> tags.
    """

    def __init__(
        self,
        storage: SessionRepository,
        statistics: StatisticsEngine,
    ) -> None:
        """
        Initialize chart presenter with data dependencies.

        matplotlib is imported lazily inside each render method so the
        rest of the package works without it.

        Args:
            storage: Repository providing the session list.
            statistics: Engine computing the weekly aggregation.
        """
        self.storage = storage
        self.statistics = statistics

    def render_weekly_chart(self, state: ViewState) -> bytes:
        """
        Render the weekly window as hour bars with a quality line.

        Bars (left axis, hours, max 8) are highlighted for the selected
        day; the average quality is a line on the right axis (max 10).

        Args:
            state: Current navigation state (window end, selection).

        Returns:
            PNG image as bytes, 800x300 pixels at 100 DPI.

        Raises:
            ImportError: If matplotlib is not installed. Caller should
                catch this and provide fallback (e.g., placeholder SVG).
        """
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        summary = self.statistics.build_weekly_summary(
            self.storage.load_sessions(), state.window_end_date, state.selected_date
        )

        fig, ax = plt.subplots(figsize=(8, 3))
        positions = range(len(summary.labels))
        colors = [
            Config.BAR_SELECTED_COLOR if selected else Config.BAR_COLOR
            for selected in summary.highlight
        ]
        ax.bar(
            positions,
            summary.hours,
            color=colors,
            edgecolor=Config.BAR_SELECTED_COLOR,
            linewidth=[2 if selected else 0 for selected in summary.highlight],
        )
        ax.set_ylim(0, max(Config.WEEKLY_HOURS_AXIS_MAX, *summary.hours))
        ax.set_ylabel("Hours")
        ax.set_xticks(list(positions))
        ax.set_xticklabels(summary.labels)

        quality_ax = ax.twinx()
        quality_ax.plot(
            list(positions), summary.quality, color=Config.QUALITY_LINE_COLOR, marker="o"
        )
        quality_ax.set_ylim(0, Config.WEEKLY_QUALITY_AXIS_MAX)
        quality_ax.set_ylabel("Quality")

        ax.set_title(
            f"{format_date(summary.start_date)} – {format_date(summary.end_date)}"
        )
        ax.spines["top"].set_visible(False)
        quality_ax.spines["top"].set_visible(False)

        return _figure_to_png(fig, plt)

    def render_timeline_chart(self, day: date) -> bytes:
        """
        Render one day's sessions as horizontal spans on a 06:00-22:00 axis.

        Spans are colored by category: green HIGH, red LOW, yellow
        NEUTRAL. Sessions outside the axis bounds widen it.

        Args:
            day: Day to draw.

        Returns:
            PNG image as bytes, 800x150 pixels at 100 DPI. Shows
            placeholder text if the day has no sessions.

        Raises:
            ImportError: If matplotlib is not installed.
        """
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        intervals = self.get_intervals(day)
        if not intervals:
            fig, _ax = self._render_empty_timeline(plt)
            return _figure_to_png(fig, plt)

        fig, ax = plt.subplots(figsize=(8, 1.5))
        ax.broken_barh(
            [(i.start_hour, i.end_hour - i.start_hour) for i in intervals],
            (0, 1),
            facecolors=[_category_color(i.color_category) for i in intervals],
            edgecolor="white",
        )
        low = min([Config.TIMELINE_MIN_HOUR, *(int(i.start_hour) for i in intervals)])
        high = max([Config.TIMELINE_MAX_HOUR, *(i.end_hour for i in intervals)])
        ax.set_xlim(low, high)
        ax.set_xticks(range(low, int(high) + 1, 2))
        ax.set_xticklabels([f"{h}:00" for h in range(low, int(high) + 1, 2)])
        ax.set_yticks([])
        for spine in ("top", "right", "left"):
            ax.spines[spine].set_visible(False)

        return _figure_to_png(fig, plt)

    def get_intervals(self, day: date) -> list[TimelineInterval]:
        """Intervals for a day, sorted by start time."""
        return sorted_by_start(build_timeline(sessions_on(self.storage.load_sessions(), day)))

    def _render_empty_timeline(self, plt: Any) -> Any:
        """
        Render placeholder chart when the day has no sessions.

        Returns:
            Matplotlib figure and axes.
        """
        fig, ax = plt.subplots(figsize=(8, 1.5))
        ax.text(0.5, 0.5, "No sessions on this day", ha="center", va="center", fontsize=12)
        ax.set_xlim(0, 1)
        ax.set_ylim(0, 1)
        ax.axis("off")
        return fig, ax


def _category_color(category: ColorCategory) -> str:
    """Hex color for a timeline category."""
    return Config.CATEGORY_COLORS[category.value]


def _figure_to_png(fig: Any, plt: Any) -> bytes:
    """Serialize a figure to PNG bytes and close it."""
    buf = io.BytesIO()
    plt.tight_layout()
    plt.savefig(buf, format="png", dpi=100, bbox_inches="tight")
    plt.close(fig)
    buf.seek(0)
    return buf.read()
