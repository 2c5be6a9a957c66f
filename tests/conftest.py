"""
Pytest configuration and shared fixtures for Pomodoro Stats tests.

This module contains:
- MockFileSystem: In-memory filesystem for testing without actual I/O
- make_session: Builder for Session records with fixed IDs
- Shared fixtures available to all test modules
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from datetime import date

import pytest

from pomodoro_stats.config import Config
from pomodoro_stats.models import Session
from pomodoro_stats.storage import StorageManager

STORAGE_DIR = "/test/storage"
SESSIONS_PATH = os.path.join(STORAGE_DIR, Config.SESSIONS_FILE)


class MockFileSystem:
    """
    In-memory file system for testing.

    Simulates a file system using dictionaries:
    - _files: dict mapping path -> content (str)
    - _dirs: set of directory paths
    - _read_only: paths whose writes raise PermissionError

    FEATURES:
    - No actual I/O operations
    - Fast test execution
    - Easy to inspect state
    - Supports permission simulation
    """

    def __init__(self) -> None:
        """
        Initialize empty mock file system.

        Business context: Mock filesystem enables testing storage
        operations without actual disk I/O, making tests fast and
        deterministic.

        Example:
            >>> fs = MockFileSystem()
            >>> fs.list_files()
            []
        """
        self._files: dict[str, str] = {}
        self._dirs: set[str] = set()
        self._modes: dict[str, int] = {}
        self._read_only: set[str] = set()

    def exists(self, path: str) -> bool:
        """
        Check if path exists in mock filesystem.

        Args:
            path: Absolute path to check.

        Returns:
            True if path is in _files dict or _dirs set.
        """
        return path in self._files or path in self._dirs

    def is_dir(self, path: str) -> bool:
        """Check if path is a mock directory."""
        return path in self._dirs

    def makedirs(self, path: str, exist_ok: bool = False) -> None:
        """
        Create mock directory and parent directories.

        Args:
            path: Absolute path of directory to create.
            exist_ok: If True, don't raise if directory exists.

        Raises:
            OSError: If directory exists and exist_ok is False,
                or if path is an existing file.

        Example:
            >>> fs = MockFileSystem()
            >>> fs.makedirs('/data/backup', exist_ok=True)
            >>> fs.is_dir('/data')
            True
        """
        if path in self._dirs:
            if not exist_ok:
                raise OSError(f"Directory exists: {path}")
            return

        if path in self._files:
            raise OSError(f"Path is a file, not directory: {path}")

        parts = path.rstrip("/").split("/")
        for i in range(1, len(parts) + 1):
            parent = "/".join(parts[:i])
            if parent:
                self._dirs.add(parent)

    def read_text(self, path: str, _encoding: str = "utf-8") -> str:
        """
        Read mock file contents.

        Args:
            path: Absolute path to file to read.
            _encoding: Ignored (mock stores strings directly).

        Returns:
            File contents as stored in _files dict.

        Raises:
            FileNotFoundError: If path not in _files.
        """
        if path not in self._files:
            raise FileNotFoundError(f"No such file: {path}")
        return self._files[path]

    def write_text(self, path: str, content: str, _encoding: str = "utf-8") -> None:
        """
        Write text to mock file, creating parent directories.

        Raises:
            PermissionError: If path is in _read_only set.

        Example:
            >>> fs = MockFileSystem()
            >>> fs.write_text('/data/sessions.json', '[]')
            >>> fs.get_file('/data/sessions.json')
            '[]'
        """
        if path in self._read_only:
            raise PermissionError(f"Permission denied: {path}")

        parent = "/".join(path.rstrip("/").split("/")[:-1])
        if parent and parent not in self._dirs:
            self.makedirs(parent, exist_ok=True)

        self._files[path] = content

    def chmod(self, path: str, mode: int) -> None:
        """
        Change mock file permissions.

        A mode without the owner write bit (0o200) makes the path
        read-only, so later writes raise PermissionError.

        Raises:
            FileNotFoundError: If path not in _files or _dirs.
        """
        if path not in self._files and path not in self._dirs:
            raise FileNotFoundError(f"No such file or directory: {path}")

        self._modes[path] = mode
        if mode & 0o200 == 0:
            self._read_only.add(path)
        else:
            self._read_only.discard(path)

    def rename(self, src: str, dst: str) -> None:
        """
        Rename/move a mock file.

        Business context: Used to set aside a corrupt sessions file.

        Raises:
            FileNotFoundError: If source doesn't exist.
        """
        if src not in self._files:
            raise FileNotFoundError(f"No such file: {src}")
        self._files[dst] = self._files.pop(src)
        if src in self._modes:
            self._modes[dst] = self._modes.pop(src)
        if src in self._read_only:
            self._read_only.discard(src)
            self._read_only.add(dst)

    # =========================================================================
    # TEST HELPERS
    # =========================================================================

    def get_file(self, path: str) -> str | None:
        """File content or None if it doesn't exist. Never raises."""
        return self._files.get(path)

    def set_file(self, path: str, content: str) -> None:
        """Set file content directly (delegates to write_text)."""
        self.write_text(path, content)

    def list_files(self) -> list[str]:
        """Sorted list of all file paths."""
        return sorted(self._files.keys())

    def list_dirs(self) -> list[str]:
        """Sorted list of all directory paths."""
        return sorted(self._dirs)

    def clear(self) -> None:
        """Reset all internal state."""
        self._files.clear()
        self._dirs.clear()
        self._modes.clear()
        self._read_only.clear()


def make_session(
    session_id: int,
    day: date | str,
    start_time: str = "09:00",
    duration_minutes: int = 25,
    quality: int | None = None,
) -> Session:
    """
    Build a Session with a fixed ID.

    Example:
        >>> make_session(1, "2024-03-10", "09:00", 25, 8).date_key
        '2024-03-10'
    """
    if isinstance(day, str):
        day = date.fromisoformat(day)
    return Session(
        id=session_id,
        date=day,
        start_time=start_time,
        duration_minutes=duration_minutes,
        quality=quality,
    )


@pytest.fixture
def mock_fs() -> MockFileSystem:
    """
    Create a MockFileSystem for testing.

    Provides a fresh in-memory filesystem instance for each test,
    ensuring test isolation without actual disk I/O.

    Example:
        >>> def test_storage(mock_fs):
        ...     mock_fs.set_file('/data/pomodoro_sessions.json', '[]')
    """
    return MockFileSystem()


@pytest.fixture
def storage(mock_fs: MockFileSystem) -> StorageManager:
    """StorageManager backed by the mock filesystem at /test/storage."""
    return StorageManager(storage_dir=STORAGE_DIR, filesystem=mock_fs)


@pytest.fixture
def march_sessions() -> list[Session]:
    """
    Two sessions on Sunday 2024-03-10 plus one earlier in the week.

    - 09:00, 25 min, quality 8 (HIGH)
    - 10:00, 25 min, quality 2 (LOW)
    - 2024-03-06 14:00, 50 min, unrated
    """
    return [
        make_session(1, "2024-03-10", "09:00", 25, 8),
        make_session(2, "2024-03-10", "10:00", 25, 2),
        make_session(3, "2024-03-06", "14:00", 50, None),
    ]


@pytest.fixture(autouse=True)
def reset_config() -> Iterator[None]:
    """Clear Config overrides after every test."""
    yield
    Config.reset_test_overrides()
