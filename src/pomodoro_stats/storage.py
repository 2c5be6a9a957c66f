"""
Storage management for Pomodoro Stats.

PURPOSE: JSON file repository for session records.
AI CONTEXT: All persistence operations go through this module.

STORAGE STRUCTURE:
    .pomodoro_stats/
    └── pomodoro_sessions.json   # List: session records

ERROR HANDLING STRATEGY:
- File not found: Return empty list
- JSON corruption or non-list top level: Log error, keep a .corrupt copy,
  return empty list
- Malformed record: Log warning, skip it on load, keep it on disk
- Write failure: Log error, return False

USAGE:
    # Production
    storage = StorageManager()

    # Testing with MockFileSystem
    storage = StorageManager(storage_dir="/test", filesystem=mock_fs)
"""

from __future__ import annotations

import json
import logging
import os
from typing import TYPE_CHECKING, Any, Protocol

from .config import Config
from .errors import ImportFormatError
from .filesystem import RealFileSystem
from .models import Session

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .filesystem import FileSystem

__all__ = ["SessionRepository", "StorageManager"]

logger = logging.getLogger(__name__)


class SessionRepository(Protocol):
    """
    Contract the rest of the application uses to reach stored sessions.

    load_sessions() returns an empty list when nothing is stored; absent
    data is never an error. add_session() appends, replace_all() swaps
    the whole list (import). Both return True on success.
    """

    def load_sessions(self) -> list[Session]: ...

    def save_sessions(self, sessions: Iterable[Session]) -> bool: ...

    def add_session(self, session: Session) -> bool: ...

    def replace_all(self, sessions: Iterable[Session]) -> bool: ...


class StorageManager:
    """
    JSON file repository with comprehensive error handling.

    DESIGN PRINCIPLES:
    1. Fail-safe: Never crash the dashboard on I/O errors
    2. Predictable: Always return a list of validated Session objects
    3. Idempotent: Safe to initialize multiple times
    4. Logged: All errors recorded for debugging
    5. Testable: FileSystem can be injected for mocking

    THREAD SAFETY:
    Not thread-safe. Single writer assumed; every add or import rewrites
    the whole file.
    """

    def __init__(
        self,
        storage_dir: str | None = None,
        filesystem: FileSystem | None = None,
    ) -> None:
        """
        Initialize storage with directory structure.

        Args:
            storage_dir: Custom storage path. Default: Config.get_storage_dir()
            filesystem: FileSystem implementation. Default: RealFileSystem

        Creates:
            - Storage directory
            - Empty sessions file ([])
        """
        self.storage_dir = storage_dir or Config.get_storage_dir()
        self._fs: FileSystem = filesystem or RealFileSystem()
        self.sessions_file = os.path.join(self.storage_dir, Config.SESSIONS_FILE)

        self._initialize_storage()

    def _initialize_storage(self) -> None:
        """
        Create the storage directory and an empty sessions file.

        ERROR HANDLING:
        Logs errors but doesn't raise - allows degraded operation.
        """
        try:
            self._fs.makedirs(self.storage_dir, exist_ok=True)
            if not self._fs.exists(self.sessions_file):
                self._write_json(self.sessions_file, [])
            logger.info(f"Storage initialized: {self.storage_dir}")
        except OSError as e:
            logger.error(f"Failed to initialize storage: {e}")

    def _read_json(self, file_path: str, default: Any, *, strict: bool = False) -> Any:
        """
        Read JSON file with error handling.

        Args:
            file_path: Path to JSON file
            default: Value to return on any error
            strict: Re-raise read errors other than a missing file, for
                callers that would otherwise overwrite data they could
                not see.

        Returns:
            Parsed JSON data or default value.

        Raises:
            OSError: Only when strict is set and the file is unreadable.
        """
        try:
            content = self._fs.read_text(file_path)
            return json.loads(content)
        except FileNotFoundError:
            return default
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Invalid JSON in {file_path}: {e}")
            self._set_aside(file_path)
            return default
        except OSError as e:
            logger.error(f"Error reading {file_path}: {e}")
            if strict:
                raise
            return default

    def _set_aside(self, file_path: str) -> None:
        """Keep an unreadable file as <name>.corrupt so a later save can't destroy it."""
        backup_path = f"{file_path}.corrupt"
        try:
            self._fs.rename(file_path, backup_path)
            logger.warning(f"Moved unreadable data to {backup_path}")
        except OSError as e:
            logger.error(f"Could not back up {file_path}: {e}")

    def _write_json(self, file_path: str, data: Any) -> bool:
        """
        Write JSON file with error handling.

        Args:
            file_path: Path to JSON file
            data: Data to serialize

        Returns:
            True on success, False on failure.

        FORMATTING:
        - 2-space indent for readability
        - UTF-8 encoding
        """
        try:
            content = json.dumps(data, indent=2)
            self._fs.write_text(file_path, content)
            return True
        except (OSError, PermissionError) as e:
            logger.error(f"Error writing {file_path}: {e}")
            return False

    def _read_records(self, *, strict: bool = False) -> list[Any]:
        """
        Raw stored records, unvalidated.

        A top level that isn't a list is set aside like corrupt JSON, so
        the next write can't replace it.

        Raises:
            OSError: Only when strict is set and the file is unreadable.
        """
        raw = self._read_json(self.sessions_file, [], strict=strict)
        if not isinstance(raw, list):
            logger.error(f"Expected a list in {self.sessions_file}, got {type(raw).__name__}")
            self._set_aside(self.sessions_file)
            return []
        return raw

    # =========================================================================
    # SESSION OPERATIONS
    # =========================================================================

    def load_sessions(self) -> list[Session]:
        """
        Load all sessions.

        Records that fail validation are skipped with a warning so one
        bad entry can't hide the rest of the log.

        Returns:
            List of Session in stored order. Empty list if unavailable.
        """
        sessions: list[Session] = []
        for index, record in enumerate(self._read_records()):
            try:
                sessions.append(Session.from_dict(record))
            except ImportFormatError as e:
                logger.warning(f"Skipping stored record {index}: {e}")
        return sessions

    def save_sessions(self, sessions: Iterable[Session]) -> bool:
        """
        Save sessions to disk, replacing the file.

        Args:
            sessions: Sessions to store, in order.

        Returns:
            True on success.
        """
        return self._write_json(self.sessions_file, [s.to_dict() for s in sessions])

    def add_session(self, session: Session) -> bool:
        """
        Append a single session.

        Works on the raw stored list, so records that load_sessions()
        skips are written back untouched rather than dropped.

        Args:
            session: Session to add.

        Returns:
            True on success. False if the file could not be read or
            written; an unreadable file is left as it is.
        """
        try:
            records = self._read_records(strict=True)
        except OSError:
            logger.error(f"Not adding session {session.id}: existing data is unreadable")
            return False
        records.append(session.to_dict())
        saved = self._write_json(self.sessions_file, records)
        if saved:
            logger.info(f"Added session {session.id} on {session.date_key}")
        return saved

    def replace_all(self, sessions: Iterable[Session]) -> bool:
        """
        Replace the stored list with sessions (import semantics, no merge).

        Args:
            sessions: New complete session list.

        Returns:
            True on success.
        """
        sessions = list(sessions)
        saved = self.save_sessions(sessions)
        if saved:
            logger.info(f"Replaced session log with {len(sessions)} sessions")
        return saved
