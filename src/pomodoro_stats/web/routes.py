"""
FastAPI routes for the Pomodoro Stats dashboard.

PURPOSE: Thin route handlers that delegate to presenters.
AI CONTEXT: Routes should be simple - business logic in presenters.

ROUTE STRUCTURE:
- /weekly, /monthly, /add : Full HTML pages
- /charts/* : PNG chart images
- /api/* : JSON endpoints for programmatic access

STATE:
There is no server-side session. The selected day, the weekly window
end and the heatmap month travel as query parameters, and every link on
a page is built from the ViewState it would lead to.
"""

from __future__ import annotations

import html
import logging
from datetime import MAXYEAR, MINYEAR, date, datetime
from typing import TYPE_CHECKING, Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response

from ..dates import end_of_week, format_date, parse_date
from ..errors import ParseError
from ..presenters import ChartPresenter, DashboardPresenter, SessionFormViewModel
from ..state import View, ViewState
from ..statistics import StatisticsEngine
from ..storage import SessionRepository, StorageManager

if TYPE_CHECKING:
    from ..presenters import MonthlyViewModel, WeeklyViewModel

__all__ = [
    "router",
    "get_storage",
    "get_statistics",
    "get_dashboard_presenter",
    "get_chart_presenter",
    "get_today",
    "get_now",
]

logger = logging.getLogger(__name__)

router = APIRouter()

# =============================================================================
# CSS Styles
# =============================================================================

_DASHBOARD_CSS = """
:root {
    --bg: #f8f9fa;
    --surface: #ffffff;
    --border: #dee2e6;
    --text: #212529;
    --text-muted: #6c757d;
    --primary: #519072;
    --primary-dark: #3b6853;
    --success: #198754;
    --warning: #ffc107;
    --danger: #dc3545;
}
* { box-sizing: border-box; margin: 0; padding: 0; }
body {
    font-family: system-ui, -apple-system, sans-serif;
    background: var(--bg);
    color: var(--text);
    line-height: 1.6;
    padding: 1rem;
}
a { color: var(--primary-dark); text-decoration: none; }
.container { max-width: 1000px; margin: 0 auto; }
header {
    display: flex;
    justify-content: space-between;
    align-items: center;
    margin-bottom: 1.5rem;
    padding-bottom: 1rem;
    border-bottom: 1px solid var(--border);
}
h1 { font-size: 1.5rem; font-weight: 600; }
nav a { margin-left: 1rem; }
nav a.active { font-weight: 700; text-decoration: underline; }
.panel {
    background: var(--surface);
    border: 1px solid var(--border);
    border-radius: 0.5rem;
    padding: 1rem;
    margin-bottom: 1rem;
}
.panel h2 {
    font-size: 1rem;
    font-weight: 500;
    color: var(--text-muted);
    margin-bottom: 0.75rem;
}
.pager { display: flex; justify-content: space-between; align-items: center; }
table { width: 100%; border-collapse: collapse; }
th, td { text-align: left; padding: 0.5rem 0.75rem; border-bottom: 1px solid var(--border); }
th { color: var(--text-muted); font-weight: 500; font-size: 0.875rem; }
tr.selected { background: #e8f3ee; font-weight: 600; }
.badge {
    display: inline-block;
    padding: 0.15rem 0.5rem;
    border-radius: 9999px;
    font-size: 0.75rem;
    font-weight: 600;
    color: white;
}
.badge-success { background: var(--success); }
.badge-warning { background: var(--warning); color: var(--text); }
.badge-danger { background: var(--danger); }
.chart-container { display: flex; justify-content: center; padding: 0.5rem 0; }
.chart-container img { max-width: 100%; height: auto; }
.heatmap {
    display: grid;
    grid-template-columns: repeat(7, 1fr);
    gap: 0.25rem;
}
.heatmap .header { text-align: center; color: var(--text-muted); font-size: 0.8rem; }
.heatmap .cell {
    display: block;
    min-height: 4rem;
    border: 1px solid var(--border);
    border-radius: 0.25rem;
    padding: 0.25rem;
    color: var(--text);
}
.heatmap .cell.today { border: 2px solid var(--primary-dark); }
.heatmap .cell .hours { font-size: 0.75rem; }
form label { display: block; margin-top: 0.75rem; font-size: 0.875rem; }
form input { padding: 0.35rem; border: 1px solid var(--border); border-radius: 0.25rem; }
button {
    margin-top: 1rem;
    padding: 0.4rem 1rem;
    background: var(--primary);
    color: white;
    border: none;
    border-radius: 0.25rem;
    cursor: pointer;
}
.message { margin-top: 0.75rem; }
.empty { color: var(--text-muted); text-align: center; }
.message.error { color: var(--danger); }
footer {
    margin-top: 2rem;
    padding-top: 1rem;
    border-top: 1px solid var(--border);
    color: var(--text-muted);
    font-size: 0.875rem;
    text-align: center;
}
"""

# =============================================================================
# Dependency Factory Functions
# =============================================================================


def get_storage(request: Request) -> SessionRepository:
    """
    Return the repository for this request.

    Uses the repository passed to create_app() when there is one, and a
    fresh StorageManager on the configured directory otherwise, so every
    request reads the file as it is now.

    Args:
        request: Incoming request (gives access to app.state).

    Returns:
        SessionRepository ready for load/add/replace.
    """
    storage = request.app.state.storage
    if storage is None:
        return StorageManager()
    return storage


def get_statistics() -> StatisticsEngine:
    """Create a StatisticsEngine with the configured window length."""
    return StatisticsEngine()


def get_today() -> date:
    """Current local date. Overridden in tests for stable output."""
    return date.today()


def get_now() -> datetime:
    """Current local time, for prefilling the add form."""
    return datetime.now()


def get_dashboard_presenter(
    storage: Annotated[SessionRepository, Depends(get_storage)],
    statistics: Annotated[StatisticsEngine, Depends(get_statistics)],
) -> DashboardPresenter:
    """
    Create and return a DashboardPresenter with dependencies.

    Business context: The presenter pattern keeps aggregation and
    formatting testable without an HTTP client.

    Returns:
        DashboardPresenter wired to the request's repository.
    """
    return DashboardPresenter(storage, statistics)


def get_chart_presenter(
    storage: Annotated[SessionRepository, Depends(get_storage)],
    statistics: Annotated[StatisticsEngine, Depends(get_statistics)],
) -> ChartPresenter:
    """
    Create and return a ChartPresenter with dependencies.

    Raises:
        ImportError: Deferred until render time if matplotlib is missing.
    """
    return ChartPresenter(storage, statistics)


def _parse_query_date(value: str, name: str) -> date:
    """Parse a query parameter date, turning ParseError into HTTP 400."""
    try:
        return parse_date(value)
    except ParseError as e:
        raise HTTPException(status_code=400, detail=f"Invalid '{name}': {e}") from e


def _weekly_state(today: date, end: str | None, selected: str | None) -> ViewState:
    """
    Rebuild the weekly ViewState from query parameters.

    Without parameters this is the initial state (window ending today).
    A date alone jumps to that day's Monday-Sunday week; an explicit end
    keeps the window where the user scrolled it.

    Raises:
        HTTPException: 400 if a date is malformed or its window can't be
            represented (e.g. the week of 9999-12-30).
    """
    selected_date = _parse_query_date(selected, "date") if selected else None
    end_date = _parse_query_date(end, "end") if end else None
    try:
        return ViewState.weekly(today, window_end=end_date, selected=selected_date)
    except OverflowError as e:
        raise HTTPException(status_code=400, detail=f"Date out of range: {e}") from e


def _week_url_for_day(day: date) -> str:
    """Weekly view of the Monday-Sunday week containing day, day selected."""
    try:
        week_end = end_of_week(day)
    except OverflowError:
        week_end = date.max
    return f"/weekly?end={format_date(week_end)}&date={format_date(day)}"


def _shift_link(state: ViewState, direction: int, label: str, arrow: str) -> str:
    """Pager arrow moving the window; inert at either end of the calendar."""
    try:
        shifted = state.shift_window(direction)
    except OverflowError:
        shifted = None
    if shifted is None or not shifted.window_in_range():
        return f'<span aria-hidden="true">{arrow}</span>'
    return f'<a href="{_weekly_url(shifted)}" aria-label="{label}">{arrow}</a>'


def _monthly_state(today: date, month: int | None, year: int | None) -> ViewState:
    """Rebuild the monthly ViewState; missing values default to today's month."""
    state = ViewState.initial(today).show_view(View.MONTHLY)
    if year is not None:
        state = state.change_month((year - state.current_year) * 12)
    if month is not None:
        state = state.change_month(month - state.current_month)
    return state


def _weekly_url(state: ViewState, path: str = "/weekly") -> str:
    """Link carrying the weekly window and selection."""
    return f"{path}?end={format_date(state.window_end_date)}&date={format_date(state.selected_date)}"


def _monthly_url(state: ViewState) -> str:
    """Link carrying the heatmap month."""
    return f"/monthly?month={state.current_month}&year={state.current_year}"


def _month_link(state: ViewState, direction: int, label: str, arrow: str) -> str:
    """Heatmap pager arrow; inert before year 1 and after year 9999."""
    shifted = state.change_month(direction)
    if not MINYEAR <= shifted.current_year <= MAXYEAR:
        return f'<span aria-hidden="true">{arrow}</span>'
    return f'<a href="{_monthly_url(shifted)}" aria-label="{label}">{arrow}</a>'


# ============================================================================
# Full Page Routes
# ============================================================================


@router.get("/")
async def index() -> RedirectResponse:
    """Send the bare URL to the weekly view."""
    return RedirectResponse(url="/weekly", status_code=307)


@router.get("/weekly", response_class=HTMLResponse)
async def weekly_page(
    presenter: Annotated[DashboardPresenter, Depends(get_dashboard_presenter)],
    today: Annotated[date, Depends(get_today)],
    end: str | None = None,
    selected: Annotated[str | None, Query(alias="date")] = None,
) -> HTMLResponse:
    """
    Render the weekly view: chart, newest-first table and day timeline.

    Business context: This is the main entry point. Clicking a row
    selects that day (the chart highlight and timeline follow), the
    arrows move the window one day.

    Args:
        presenter: DashboardPresenter injected via FastAPI Depends.
        today: Current date injected via FastAPI Depends.
        end: Window end date "YYYY-MM-DD" (default: today, or the end of
            the selected day's week when only date is given).
        selected: Selected day "YYYY-MM-DD", query parameter "date"
            (default: today).

    Returns:
        HTMLResponse with the full page.

    Raises:
        HTTPException: 400 if a date parameter is malformed.
    """
    state = _weekly_state(today, end, selected)
    weekly = presenter.get_weekly(state)
    return HTMLResponse(
        content=_render_page("Weekly", View.WEEKLY, state, _render_weekly(weekly)),
        media_type="text/html; charset=utf-8",
    )


@router.get("/monthly", response_class=HTMLResponse)
async def monthly_page(
    presenter: Annotated[DashboardPresenter, Depends(get_dashboard_presenter)],
    today: Annotated[date, Depends(get_today)],
    month: Annotated[int | None, Query(ge=0, le=11)] = None,
    year: Annotated[int | None, Query(ge=1, le=9999)] = None,
) -> HTMLResponse:
    """
    Render the monthly heatmap.

    Each day cell links to the weekly view of that day's week.

    Args:
        presenter: DashboardPresenter injected via FastAPI Depends.
        today: Current date injected via FastAPI Depends.
        month: Month index 0-11 (default: this month).
        year: Four digit year (default: this year).

    Returns:
        HTMLResponse with the full page.
    """
    state = _monthly_state(today, month, year)
    monthly = presenter.get_monthly(state, today)
    return HTMLResponse(
        content=_render_page("Monthly", View.MONTHLY, state, _render_monthly(monthly)),
        media_type="text/html; charset=utf-8",
    )


@router.get("/add", response_class=HTMLResponse)
async def add_page(
    today: Annotated[date, Depends(get_today)],
    now: Annotated[datetime, Depends(get_now)],
) -> HTMLResponse:
    """
    Render the add-session form prefilled for a session that just ended.

    The form posts JSON via the htmx json-enc extension to
    POST /api/sessions. The page also carries export and import.
    """
    state = ViewState.initial(today).show_view(View.ADD)
    form = SessionFormViewModel.prefill(now)
    return HTMLResponse(
        content=_render_page("Add Session", View.ADD, state, _render_add(form)),
        media_type="text/html; charset=utf-8",
    )


# ============================================================================
# Chart Routes (PNG images)
# ============================================================================


@router.get("/charts/weekly.png")
async def weekly_chart(
    presenter: Annotated[ChartPresenter, Depends(get_chart_presenter)],
    today: Annotated[date, Depends(get_today)],
    end: str | None = None,
    selected: Annotated[str | None, Query(alias="date")] = None,
) -> Response:
    """
    Serve the weekly bar/line chart as PNG.

    Falls back to an SVG placeholder if matplotlib is not installed.
    """
    state = _weekly_state(today, end, selected)
    try:
        png_bytes = presenter.render_weekly_chart(state)
        return Response(content=png_bytes, media_type="image/png")
    except ImportError:
        return Response(
            content=_placeholder_chart_svg("Weekly"),
            media_type="image/svg+xml",
        )


@router.get("/charts/timeline.png")
async def timeline_chart(
    presenter: Annotated[ChartPresenter, Depends(get_chart_presenter)],
    today: Annotated[date, Depends(get_today)],
    selected: Annotated[str | None, Query(alias="date")] = None,
) -> Response:
    """
    Serve the selected day's timeline as PNG.

    Falls back to an SVG placeholder if matplotlib is not installed.
    """
    day = _parse_query_date(selected, "date") if selected else today
    try:
        png_bytes = presenter.render_timeline_chart(day)
        return Response(content=png_bytes, media_type="image/png")
    except ImportError:
        return Response(
            content=_placeholder_chart_svg("Timeline"),
            media_type="image/svg+xml",
        )


# ============================================================================
# API Routes (JSON)
# ============================================================================


@router.get("/api/weekly")
async def api_weekly(
    presenter: Annotated[DashboardPresenter, Depends(get_dashboard_presenter)],
    today: Annotated[date, Depends(get_today)],
    end: str | None = None,
    selected: Annotated[str | None, Query(alias="date")] = None,
) -> dict[str, Any]:
    """
    Weekly window as JSON.

    Returns:
        WeeklySummary.to_dict() plus 'selected_date'. Stats are oldest
        first, matching the chart arrays.
    """
    state = _weekly_state(today, end, selected)
    weekly = presenter.get_weekly(state)
    return {"selected_date": format_date(state.selected_date), **weekly.summary.to_dict()}


@router.get("/api/monthly")
async def api_monthly(
    presenter: Annotated[DashboardPresenter, Depends(get_dashboard_presenter)],
    today: Annotated[date, Depends(get_today)],
    month: Annotated[int | None, Query(ge=0, le=11)] = None,
    year: Annotated[int | None, Query(ge=1, le=9999)] = None,
) -> dict[str, Any]:
    """Monthly heatmap as JSON (MonthlyHeatmap.to_dict())."""
    state = _monthly_state(today, month, year)
    return presenter.get_monthly(state, today).heatmap.to_dict()


@router.get("/api/timeline")
async def api_timeline(
    presenter: Annotated[DashboardPresenter, Depends(get_dashboard_presenter)],
    today: Annotated[date, Depends(get_today)],
    selected: Annotated[str | None, Query(alias="date")] = None,
) -> dict[str, Any]:
    """
    One day's timeline intervals as JSON, in stored order.

    Example:
        >>> # GET /api/timeline?date=2024-03-10
        >>> {"date": "2024-03-10", "intervals": [{"x": [9.0, 9.42], "category": "high", ...}]}
    """
    day = _parse_query_date(selected, "date") if selected else today
    return {
        "date": format_date(day),
        "intervals": [i.to_dict() for i in presenter.get_timeline(day)],
    }


@router.post("/api/sessions", status_code=201)
async def api_add_session(
    request: Request,
    presenter: Annotated[DashboardPresenter, Depends(get_dashboard_presenter)],
    fields: Annotated[dict[str, Any], Body()],
) -> Response:
    """
    Validate and append one session.

    Accepts the add form's fields as JSON: date, start_time, duration and
    an optional quality. end_time stands in for a blank start_time.
    htmx requests get an HTML message fragment for the form's result
    area (errors included, since htmx only swaps 2xx responses); other
    clients get the stored session as JSON.

    Raises:
        HTTPException: 400 if a field is invalid, 500 if saving failed.
    """
    try:
        session = presenter.add_session(fields)
    except ParseError as e:
        if request.headers.get("HX-Request"):
            return HTMLResponse(_render_message(str(e), error=True), status_code=200)
        raise HTTPException(status_code=400, detail=str(e)) from e
    except OSError as e:
        logger.error(f"Failed to save session: {e}")
        raise HTTPException(status_code=500, detail=str(e)) from e

    if request.headers.get("HX-Request"):
        week_link = _week_url_for_day(session.date)
        return HTMLResponse(
            _render_message(
                f'Session saved on <a href="{week_link}">{session.date_key}</a>', escape=False
            ),
            status_code=201,
        )
    return JSONResponse(session.to_dict(), status_code=201)


@router.get("/api/export")
async def api_export(
    presenter: Annotated[DashboardPresenter, Depends(get_dashboard_presenter)],
    today: Annotated[date, Depends(get_today)],
) -> Response:
    """Download every session as pretty-printed JSON."""
    filename, text = presenter.export(today)
    return Response(
        content=text,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/api/import")
async def api_import(
    request: Request,
    presenter: Annotated[DashboardPresenter, Depends(get_dashboard_presenter)],
) -> JSONResponse:
    """
    Replace all sessions with an uploaded export.

    The request body is the raw JSON document. A rejected document
    answers 400 and leaves stored data untouched.
    """
    body = await request.body()
    try:
        result = presenter.import_sessions(body)
    except OSError as e:
        logger.error(f"Failed to save imported sessions: {e}")
        raise HTTPException(status_code=500, detail=str(e)) from e
    return JSONResponse(result.to_dict(), status_code=200 if result.success else 400)


# ============================================================================
# Template Rendering Helpers
# ============================================================================


def _placeholder_chart_svg(title: str) -> bytes:
    """
    Generate a placeholder SVG when matplotlib is unavailable.

    Args:
        title: Chart title to display in the placeholder.

    Returns:
        UTF-8 encoded bytes of an SVG image with centered text:
        "{title} Chart (install matplotlib)".

    Example:
        >>> b'Weekly Chart' in _placeholder_chart_svg('Weekly')
        True
    """
    svg = f"""<svg xmlns="http://www.w3.org/2000/svg" width="400" height="200">
        <rect width="100%" height="100%" fill="#f1f5f9"/>
        <text x="50%" y="50%" text-anchor="middle" fill="#64748b" font-size="16">
            {title} Chart (install matplotlib)
        </text>
    </svg>"""
    return svg.encode("utf-8")


def _render_message(text: str, *, error: bool = False, escape: bool = True) -> str:
    """Result line shown under a form."""
    css = "message error" if error else "message"
    body = html.escape(text) if escape else text
    return f'<div class="{css}">{body}</div>'


def _render_page(title: str, view: View, state: ViewState, body: str) -> str:
    """
    Wrap a view body in the shared page chrome.

    Navigation links carry the current state: the weekly link keeps the
    window and selection, the monthly link keeps the month.
    """
    links = [
        (View.WEEKLY, "Weekly", _weekly_url(state)),
        (View.MONTHLY, "Monthly", _monthly_url(state)),
        (View.ADD, "Add Session", "/add"),
    ]
    nav = "".join(
        f'<a href="{href}" class="{"active" if v == view else ""}">{label}</a>'
        for v, label, href in links
    )
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Pomodoro Stats - {title}</title>
    <script src="https://unpkg.com/htmx.org@1.9.10"></script>
    <script src="https://unpkg.com/htmx.org@1.9.10/dist/ext/json-enc.js"></script>
    <style>
        {_DASHBOARD_CSS}
    </style>
</head>
<body hx-boost="true">
    <div class="container">
        <header>
            <h1>🍅 Pomodoro Stats</h1>
            <nav>{nav}</nav>
        </header>
        {body}
        <footer>
            Pomodoro Stats &bull; Powered by FastAPI + htmx
        </footer>
    </div>
</body>
</html>"""


def _render_weekly(weekly: WeeklyViewModel) -> str:
    """
    Render the weekly view body: pager, chart, table and timeline.

    Args:
        weekly: WeeklyViewModel from DashboardPresenter.get_weekly().

    Returns:
        HTML fragment.
    """
    state = weekly.state
    prev_link = _shift_link(state, -1, "Previous day", "&larr;")
    next_link = _shift_link(state, 1, "Next day", "&rarr;")

    rows = ""
    for row in weekly.rows:
        link = _weekly_url(state.select_date(row.day))
        badge = (
            f'<span class="badge {row.quality_badge_class}">{row.quality_display}</span>'
            if row.quality_badge_class
            else row.quality_display
        )
        rows += f"""<tr class="{"selected" if row.is_selected else ""}">
            <td><a href="{link}">{row.weekday}</a></td>
            <td>{row.date_display}</td>
            <td>{row.session_count}</td>
            <td>{row.hours_display}</td>
            <td>{badge}</td>
        </tr>"""

    return f"""<div class="panel">
            <div class="pager">
                {prev_link}
                <strong>{weekly.range_display}</strong>
                {next_link}
            </div>
            <div class="chart-container">
                <img src="{_weekly_url(state, "/charts/weekly.png")}" alt="Weekly Chart">
            </div>
        </div>

        <div class="panel">
            <h2>Days</h2>
            <table>
                <thead>
                    <tr>
                        <th>Day</th>
                        <th>Date</th>
                        <th>Sessions</th>
                        <th>Hours</th>
                        <th>Quality</th>
                    </tr>
                </thead>
                <tbody>
                    {rows}
                </tbody>
            </table>
        </div>

        <div class="panel">
            <h2>{weekly.selected_display}</h2>
            <div class="chart-container">
                <img src="/charts/timeline.png?date={format_date(state.selected_date)}"
                     alt="Timeline Chart">
            </div>
            {_render_timeline_rows(weekly)}
        </div>"""


def _render_timeline_rows(weekly: WeeklyViewModel) -> str:
    """Session list under the timeline chart, one row per interval."""
    if not weekly.timeline_rows:
        return '<p class="empty">No sessions logged on this day.</p>'

    rows = "".join(
        f"""<tr class="session {row.category}">
                <td>{row.time_range}</td>
                <td>{row.duration_display}</td>
                <td>{row.quality_display}</td>
                <td><span class="badge {row.badge_class}">{row.category}</span></td>
            </tr>"""
        for row in weekly.timeline_rows
    )
    return f"""<table class="timeline">
                <thead>
                    <tr><th>Time</th><th>Duration</th><th>Quality</th><th>Category</th></tr>
                </thead>
                <tbody>{rows}</tbody>
            </table>"""


def _render_monthly(monthly: MonthlyViewModel) -> str:
    """
    Render the heatmap grid with month navigation.

    Args:
        monthly: MonthlyViewModel from DashboardPresenter.get_monthly().

    Returns:
        HTML fragment.
    """
    state = monthly.state
    headers = "".join(f'<div class="header">{name}</div>' for name in monthly.weekday_headers)

    cells = ""
    for cell in monthly.cells:
        if cell.is_padding:
            cells += '<div class="padding"></div>'
            continue
        day = cell.cell.date
        link = _week_url_for_day(day)
        today = " today" if cell.cell.is_today else ""
        title = f"{cell.date_display}: {cell.cell.total_hours:.1f} hours"
        cells += f"""<a class="cell{today}" href="{link}" title="{title}"
               style="background: {cell.background};">
                <div>{cell.cell.day}{" (Today)" if cell.cell.is_today else ""}</div>
                <div class="hours">{cell.hours_display}</div>
            </a>"""

    return f"""<div class="panel">
            <div class="pager">
                {_month_link(state, -1, "Previous month", "&larr;")}
                <strong>{monthly.heatmap.month_label}</strong>
                {_month_link(state, 1, "Next month", "&rarr;")}
            </div>
            <div class="heatmap" style="margin-top: 1rem;">
                {headers}
                {cells}
            </div>
        </div>"""


def _render_add(form: SessionFormViewModel) -> str:
    """
    Render the add-session form and the export/import panel.

    Start and End are kept in step in the browser: editing Start moves
    End, editing End or Duration moves Start.

    The import control reads the chosen file and posts its raw text to
    /api/import, so no multipart parsing is needed server-side.
    """
    return f"""<div class="panel">
            <h2>Log a Session</h2>
            <form hx-post="/api/sessions" hx-ext="json-enc" hx-target="#add-result">
                <label>Date <input type="date" name="date" value="{form.date}" required></label>
                <label>Start <input type="time" id="form-start" name="start_time" value="{form.start_time}"
                    onchange="syncEnd()" required></label>
                <label>End <input type="time" id="form-end" name="end_time" value="{form.end_time}"
                    onchange="syncStart()"></label>
                <label>Duration (min)
                    <input type="number" id="form-duration" name="duration" min="0" value="{form.duration}"
                        oninput="syncStart()" required>
                </label>
                <label>Quality (1-10)
                    <input type="number" name="quality" min="1" max="10" value="{form.quality}">
                </label>
                <button type="submit">Save</button>
            </form>
            <div id="add-result"></div>
        </div>

        <div class="panel">
            <h2>Data</h2>
            <a href="/api/export" hx-boost="false" download>Export sessions</a>
            <div style="margin-top: 1rem;">
                <input type="file" id="import-file" accept="application/json">
                <button type="button" onclick="importSessions()">Import</button>
            </div>
            <div id="import-result" class="message"></div>
        </div>
        <script>
            // End stays fixed when the duration changes; times wrap at midnight.
            function toMinutes(value) {{
                const [h, m] = value.split(":").map(Number);
                return h * 60 + m;
            }}
            function toClock(minutes) {{
                const wrapped = ((minutes % 1440) + 1440) % 1440;
                const pad = (n) => String(n).padStart(2, "0");
                return pad(Math.floor(wrapped / 60)) + ":" + pad(wrapped % 60);
            }}
            function formDuration() {{
                return parseInt(document.getElementById("form-duration").value) || 0;
            }}
            function syncEnd() {{
                const start = document.getElementById("form-start").value;
                if (!start) return;
                document.getElementById("form-end").value = toClock(toMinutes(start) + formDuration());
            }}
            function syncStart() {{
                const end = document.getElementById("form-end").value;
                if (!end) return;
                document.getElementById("form-start").value = toClock(toMinutes(end) - formDuration());
            }}
            async function importSessions() {{
                const file = document.getElementById("import-file").files[0];
                if (!file) return;
                const response = await fetch("/api/import", {{
                    method: "POST",
                    headers: {{"Content-Type": "application/json"}},
                    body: await file.text(),
                }});
                const result = await response.json();
                document.getElementById("import-result").textContent = result.message;
            }}
        </script>"""

