"""Version information for pomodoro-stats."""

__version__ = "1.0.0"
__version_date__ = "2026-10-17"

__title__ = "pomodoro_stats"
__description__ = "Session log with weekly, monthly and timeline summaries of focused work"
__url__ = "https://github.com/pomodoro-stats/pomodoro-stats"

__author__ = "Pomodoro Stats Contributors"

__license__ = "MIT"
__copyright__ = "Copyright 2026 Pomodoro Stats Contributors"

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
