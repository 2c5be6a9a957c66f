"""
Web dashboard module for Pomodoro Stats.

PURPOSE: FastAPI-based web UI with htmx for navigation without page reloads.
AI CONTEXT: Thin routes over presenters; all view state lives in query parameters.

FEATURES:
- Weekly window chart, table and day timeline
- Monthly heatmap with click-through to the week of a day
- Add-session form, export download and import upload
- JSON endpoints mirroring each view

USAGE:
    # Via CLI
    pomodoro-stats dashboard

    # Programmatically
    from pomodoro_stats.web import create_app
    app = create_app()
"""

from .app import create_app, run_dashboard

__all__ = ["create_app", "run_dashboard"]
