"""
Configuration for Pomodoro Stats.

PURPOSE: Centralized configuration constants and runtime settings.
AI CONTEXT: All configurable values live here - modify this file to change behavior.

CONFIGURATION CATEGORIES:
- Storage: File paths and directory structure
- Aggregation: Window length, quality thresholds, heatmap scaling
- Presentation: Timeline axis bounds and chart colors

ENVIRONMENT VARIABLES:
- POMODORO_STATS_DIR: Storage directory (default: .pomodoro_stats)

USAGE:
    from pomodoro_stats.config import Config
    storage_dir = Config.get_storage_dir()
    threshold = Config.HIGH_QUALITY_THRESHOLD
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class Config:
    """
    Immutable configuration container for Pomodoro Stats.

    DESIGN: Frozen dataclass ensures configuration immutability at runtime.
    All values are class-level constants - no instance creation needed.

    STORAGE STRUCTURE:
        .pomodoro_stats/
        └── pomodoro_sessions.json   # List of session records
    """

    # =========================================================================
    # STORAGE CONFIGURATION
    # =========================================================================
    STORAGE_DIR: ClassVar[str] = ".pomodoro_stats"
    STORAGE_DIR_ENV: ClassVar[str] = "POMODORO_STATS_DIR"
    SESSIONS_FILE: ClassVar[str] = "pomodoro_sessions.json"
    EXPORT_FILENAME_TEMPLATE: ClassVar[str] = "pomodoro_sessions_{date}.json"

    # =========================================================================
    # AGGREGATION PARAMETERS
    # =========================================================================
    WINDOW_DAYS: ClassVar[int] = 7
    """Length of the rolling weekly window, window-end date inclusive."""

    HIGH_QUALITY_THRESHOLD: ClassVar[int] = 7
    """Quality at or above this value is drawn as a HIGH interval."""

    LOW_QUALITY_THRESHOLD: ClassVar[int] = 3
    """Quality at or below this value (when present) is drawn as LOW."""

    INTENSITY_FLOOR: ClassVar[float] = 0.1
    INTENSITY_SCALE: ClassVar[float] = 0.9
    MIN_MONTH_MAX_HOURS: ClassVar[float] = 1.0
    """Lower bound of the heatmap normaliser, keeps empty months off zero."""

    MINUTES_PER_DAY: ClassVar[int] = 1440
    DEFAULT_SESSION_MINUTES: ClassVar[int] = 25

    # =========================================================================
    # PRESENTATION
    # =========================================================================
    TIMELINE_MIN_HOUR: ClassVar[int] = 6
    TIMELINE_MAX_HOUR: ClassVar[int] = 22
    WEEKLY_HOURS_AXIS_MAX: ClassVar[float] = 8.0
    WEEKLY_QUALITY_AXIS_MAX: ClassVar[float] = 10.0

    CATEGORY_COLORS: ClassVar[dict[str, str]] = {
        "high": "#198754",
        "low": "#dc3545",
        "neutral": "#ffc107",
    }
    BAR_COLOR: ClassVar[str] = "#519072"
    BAR_SELECTED_COLOR: ClassVar[str] = "#3b6853"
    QUALITY_LINE_COLOR: ClassVar[str] = "#55828b"

    MONTH_NAMES: ClassVar[tuple[str, ...]] = (
        "January",
        "February",
        "March",
        "April",
        "May",
        "June",
        "July",
        "August",
        "September",
        "October",
        "November",
        "December",
    )

    # =========================================================================
    # ENVIRONMENT-BASED SETTINGS (runtime configurable)
    # =========================================================================
    _storage_dir_override: ClassVar[str | None] = None

    @classmethod
    def get_storage_dir(cls) -> str:
        """
        Get the directory holding the sessions file.

        Uses a priority system: test override first, then the
        POMODORO_STATS_DIR environment variable, then STORAGE_DIR
        relative to the working directory.

        Business context: Lets users keep one log in their home directory
        while tests and throwaway runs point somewhere else.

        Returns:
            Directory path string.

        Example:
            >>> # With env var: POMODORO_STATS_DIR=/home/me/.focus
            >>> Config.get_storage_dir()
            '/home/me/.focus'
        """
        if cls._storage_dir_override is not None:
            return cls._storage_dir_override
        return os.environ.get(cls.STORAGE_DIR_ENV, cls.STORAGE_DIR)

    @classmethod
    def set_test_overrides(cls, storage_dir: str | None = None) -> None:
        """
        Set test overrides for environment-based settings.

        Must call reset_test_overrides() in test teardown to avoid
        affecting other tests.

        Args:
            storage_dir: Override for the storage directory. None to clear.
        """
        cls._storage_dir_override = storage_dir

    @classmethod
    def reset_test_overrides(cls) -> None:
        """Clear overrides set via set_test_overrides()."""
        cls._storage_dir_override = None

    @classmethod
    def month_label(cls, month: int, year: int) -> str:
        """
        Format a 0-based month and a year for headings.

        Args:
            month: Month index, 0 = January.
            year: Four digit year.

        Returns:
            Label such as "March 2024".

        Example:
            >>> Config.month_label(2, 2024)
            'March 2024'
        """
        return f"{cls.MONTH_NAMES[month]} {year}"
