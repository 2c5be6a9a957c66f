"""
Pomodoro Stats.

PURPOSE: Record focused work sessions and summarise them over time.
AI CONTEXT: The core is a pure aggregation engine; storage, web and CLI wrap it.

PACKAGE STRUCTURE:
- dates.py: Calendar parsing, formatting and arithmetic (no timezones)
- errors.py: ParseError and ImportFormatError
- models.py: Session record and derived view records
- storage.py: JSON file repository for sessions
- transfer.py: Export to / validated import from JSON
- statistics.py: Weekly window and monthly heatmap aggregation
- timeline.py: Per-day interval layout with quality colouring
- state.py: Selection and navigation state
- presenters.py: View models and matplotlib charts
- web/: FastAPI + htmx dashboard
- cli.py: Command-line entry point
- config.py: Configuration constants

QUICK START:
    # Launch dashboard
    python -m pomodoro_stats dashboard

    # Log a session
    pomodoro-stats add --date 2024-03-10 --start 09:00 --duration 25 --quality 8

    # Print the last seven days
    pomodoro-stats report
"""

from pomodoro_stats.__version__ import (
    __author__,
    __copyright__,
    __description__,
    __license__,
    __title__,
    __url__,
    __version__,
    __version_date__,
)

__all__ = [
    "__version__",
    "__version_date__",
    "__title__",
    "__description__",
    "__url__",
    "__author__",
    "__license__",
    "__copyright__",
]
