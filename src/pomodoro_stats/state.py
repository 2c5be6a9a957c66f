"""
Selection and view state for Pomodoro Stats.

PURPOSE: Hold what the user is looking at: selected day, window, month, view.
AI CONTEXT: Explicit value passed around by the presentation layer - no globals.

FIELDS:
- selected_date: Highlighted day; feeds the timeline
- window_end_date: Last day of the weekly window
- current_month / current_year: Heatmap month (month is 0-based)
- current_view: weekly | monthly | add

Every navigation method returns a new ViewState, so the web layer can
rebuild state from query parameters and render links for the next state.
Any field may be set directly; there are no enforced transitions.

USAGE:
    state = ViewState.initial(date.today())
    state = state.shift_window(-1)
    state = state.show_view(View.WEEKLY, target_date=date(2024, 3, 6))
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, timedelta
from enum import StrEnum

from .config import Config
from .dates import add_days, end_of_week, shift_month

__all__ = ["View", "ViewState"]


class View(StrEnum):
    """Dashboard views."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ADD = "add"


@dataclass(frozen=True)
class ViewState:
    """Immutable snapshot of the dashboard's navigation state."""

    selected_date: date
    window_end_date: date
    current_month: int
    current_year: int
    current_view: View = View.WEEKLY

    @classmethod
    def initial(cls, today: date) -> ViewState:
        """
        State on first load: the seven days ending today, today selected.

        Args:
            today: Current local date.

        Returns:
            Weekly view over the window ending today, month of today.
        """
        return cls(
            selected_date=today,
            window_end_date=today,
            current_month=today.month - 1,
            current_year=today.year,
        )

    def select_date(self, day: date) -> ViewState:
        """Highlight another day. The window does not move."""
        return replace(self, selected_date=day)

    def shift_window(self, direction: int) -> ViewState:
        """
        Move the weekly window by direction days (usually +1 or -1).

        The selection stays where it is, even if it leaves the window.
        """
        return replace(self, window_end_date=add_days(self.window_end_date, direction))

    def change_month(self, direction: int) -> ViewState:
        """
        Move the heatmap by direction months, carrying into the year.

        Example:
            >>> ViewState(d, d, 11, 2024).change_month(1).current_month
            0
        """
        year, month = shift_month(self.current_year, self.current_month, direction)
        return replace(self, current_month=month, current_year=year)

    def show_view(self, view: View, target_date: date | None = None) -> ViewState:
        """
        Switch views, optionally jumping to a specific day.

        With a target date the day becomes selected and the window snaps
        to the Sunday-ending week that contains it. Switching to ADD only
        changes the view; aggregation fields are left alone.

        Args:
            view: View to show.
            target_date: Day to focus, e.g. a heatmap cell that was clicked.

        Returns:
            New ViewState.
        """
        if target_date is None:
            return replace(self, current_view=view)
        return replace(
            self,
            current_view=view,
            selected_date=target_date,
            window_end_date=end_of_week(target_date),
        )

    def window_in_range(self, window_days: int | None = None) -> bool:
        """
        Whether every day of the window ending at window_end_date exists.

        Windows reaching before 0001-01-01 can't be aggregated.
        """
        days = Config.WINDOW_DAYS if window_days is None else window_days
        return self.window_end_date >= date.min + timedelta(days=max(days - 1, 0))

    @classmethod
    def weekly(
        cls,
        today: date,
        *,
        window_end: date | None = None,
        selected: date | None = None,
        window_days: int | None = None,
    ) -> ViewState:
        """
        Weekly state for a requested window end and selection.

        Without either value this is initial(today). A selected day alone
        jumps to its Monday-Sunday week; an explicit window_end keeps the
        window where the user scrolled it.

        Args:
            today: Current local date.
            window_end: Last day of the window, if requested.
            selected: Day to highlight, if requested.
            window_days: Window length for the range check.

        Returns:
            Weekly ViewState.

        Raises:
            OverflowError: If the week of selected or the window itself
                falls outside the representable date range.

        Example:
            >>> ViewState.weekly(today, selected=date(2024, 3, 6)).window_end_date
            datetime.date(2024, 3, 10)
        """
        state = cls.initial(today)
        if selected is not None and window_end is None:
            state = state.show_view(View.WEEKLY, selected)
        elif selected is not None:
            state = state.select_date(selected)
        if window_end is not None:
            state = replace(state, window_end_date=window_end)
        if not state.window_in_range(window_days):
            raise OverflowError(f"window ending {state.window_end_date} starts before {date.min}")
        return state
