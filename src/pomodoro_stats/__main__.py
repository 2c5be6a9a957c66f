"""
Package entry point for python -m execution.

USAGE:
    python -m pomodoro_stats dashboard  # Launch web dashboard
    python -m pomodoro_stats report     # Print weekly report
    python -m pomodoro_stats export     # Write a JSON backup
"""

import sys

from pomodoro_stats.cli import main

if __name__ == "__main__":
    sys.exit(main())
