"""
Export and import of the session log.

PURPOSE: Serialize sessions for download and validate uploaded backups.
AI CONTEXT: parse_import() never raises; it returns a tagged ImportResult.

FORMAT:
    Pretty-printed JSON list (2-space indent) of session objects, the same
    shape as the sessions file:
    [{"id": 1710061200000, "date": "2024-03-10", "start_time": "09:00",
      "duration_min": 25, "quality": 8}]

IMPORT RULES:
- The document must be JSON whose top level is a list
- Every element must be a session-shaped object (see Session.from_dict)
- Any failure rejects the whole import; stored data stays untouched
- Success replaces the stored list, it does not merge

USAGE:
    text = export_sessions(storage.load_sessions())
    result = parse_import(uploaded_text)
    if result.success:
        storage.replace_all(result.sessions)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .config import Config
from .dates import format_date
from .errors import ImportFormatError
from .models import Session

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

__all__ = ["ImportResult", "export_sessions", "export_filename", "parse_import"]

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """
    Result of validating an import document.

    Either success is True and sessions holds the parsed list, or success
    is False and error holds the ImportFormatError describing the first
    problem found.

    Attributes:
        success: Whether the document was accepted.
        sessions: Parsed sessions (empty on failure).
        error: Rejection reason when success is False.
    """

    success: bool
    sessions: list[Session] = field(default_factory=list)
    error: ImportFormatError | None = None

    @classmethod
    def ok(cls, sessions: list[Session]) -> ImportResult:
        """Accepted import."""
        return cls(success=True, sessions=sessions)

    @classmethod
    def rejected(cls, error: ImportFormatError) -> ImportResult:
        """Rejected import."""
        return cls(success=False, error=error)

    @property
    def message(self) -> str:
        """Human-readable outcome for the CLI and the dashboard."""
        if self.success:
            return f"Imported {len(self.sessions)} sessions"
        return f"Invalid import file: {self.error}"

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to a JSON-serializable dictionary.

        Returns:
            Dict with 'success' and 'message', plus 'count' on success or
            'error' on failure.
        """
        result: dict[str, Any] = {"success": self.success, "message": self.message}
        if self.success:
            result["count"] = len(self.sessions)
        else:
            result["error"] = str(self.error)
        return result


def export_sessions(sessions: Iterable[Session]) -> str:
    """
    Serialize sessions as pretty-printed JSON.

    Args:
        sessions: Sessions to export, in stored order.

    Returns:
        JSON text with a 2-space indent.
    """
    return json.dumps([s.to_dict() for s in sessions], indent=2)


def export_filename(today: date) -> str:
    """
    Download name for an export made on a given day.

    Example:
        >>> export_filename(date(2024, 3, 10))
        'pomodoro_sessions_2024-03-10.json'
    """
    return Config.EXPORT_FILENAME_TEMPLATE.format(date=format_date(today))


def parse_import(text: str | bytes) -> ImportResult:
    """
    Validate an import document into sessions.

    Business context: Imports replace the user's whole history, so the
    document is checked in full before anything is written. A bad file
    must leave existing data exactly as it was.

    Args:
        text: Raw document contents.

    Returns:
        ImportResult.ok with every session, or ImportResult.rejected with
        an ImportFormatError naming the problem. Never raises.

    Example:
        >>> parse_import('{"not": "a list"}').success
        False
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Rejected import: invalid JSON ({e})")
        return ImportResult.rejected(ImportFormatError(f"not valid JSON ({e})"))

    if not isinstance(data, list):
        logger.warning("Rejected import: top level is not a list")
        return ImportResult.rejected(
            ImportFormatError(f"expected a list of sessions, got {type(data).__name__}")
        )

    sessions: list[Session] = []
    seen_ids: set[int] = set()
    for index, record in enumerate(data):
        try:
            session = Session.from_dict(record)
        except ImportFormatError as e:
            logger.warning(f"Rejected import: record {index}: {e}")
            return ImportResult.rejected(ImportFormatError(f"record {index}: {e}", index=index))
        if session.id in seen_ids:
            logger.warning(f"Rejected import: duplicate id {session.id}")
            return ImportResult.rejected(
                ImportFormatError(f"record {index}: duplicate id {session.id}", index=index)
            )
        seen_ids.add(session.id)
        sessions.append(session)

    return ImportResult.ok(sessions)
