"""
Error types for Pomodoro Stats.

PURPOSE: Distinguish malformed input from rejected imports.
AI CONTEXT: Degenerate data (empty windows, unrated days) is never an error.

TAXONOMY:
- ParseError: malformed date/time string, propagated to the caller
- ImportFormatError: imported data is not a list of session records
"""

from __future__ import annotations

__all__ = ["ParseError", "ImportFormatError"]


class ParseError(ValueError):
    """Raised when a date or time string does not match its format."""


class ImportFormatError(ValueError):
    """
    Raised when imported data is not a sequence of session-shaped records.

    Attributes:
        index: Position of the offending record, or None when the
            document itself is unusable (bad JSON, not a list).
    """

    def __init__(self, message: str, index: int | None = None) -> None:
        super().__init__(message)
        self.index = index
