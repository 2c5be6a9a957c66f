"""
FileSystem abstraction for Pomodoro Stats.

PURPOSE: Injectable file system interface for testability.
AI CONTEXT: Allows mocking file operations in unit tests without temp directories.

DESIGN:
- Protocol defines the interface
- RealFileSystem uses actual os operations
- MockFileSystem in tests/conftest.py stores data in memory for tests

USAGE:
    # Production
    fs = RealFileSystem()
    storage = StorageManager(filesystem=fs)

    # Tests (MockFileSystem from conftest.py)
    storage = StorageManager(filesystem=mock_fs)  # pytest fixture
"""

from __future__ import annotations

import os
from typing import Protocol

__all__ = ["FileSystem", "RealFileSystem"]


class FileSystem(Protocol):
    """
    Protocol for file system operations.

    Covers exactly what the session repository and the CLI need: existence
    checks, directory creation, whole-file text reads and writes, and a
    rename used to set corrupt data aside.
    """

    def exists(self, path: str) -> bool:
        """
        Check if path exists (file or directory).

        Args:
            path: Path to check.

        Returns:
            True if the path exists. Never raises.
        """
        ...

    def makedirs(self, path: str, exist_ok: bool = False) -> None:
        """
        Create directory and all parent directories.

        Args:
            path: Directory to create.
            exist_ok: If True, don't raise if directory exists.

        Raises:
            OSError: If directory exists and exist_ok is False.
        """
        ...

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """
        Read file contents as text.

        Raises:
            FileNotFoundError: If file doesn't exist.
        """
        ...

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """
        Write text to file, replacing existing content.

        Raises:
            PermissionError: If file is read-only.
        """
        ...

    def rename(self, src: str, dst: str) -> None:
        """
        Rename/move a file.

        Business context: Used to keep a copy of an unreadable sessions
        file before the next save replaces it.

        Raises:
            FileNotFoundError: If source doesn't exist.
        """
        ...


class RealFileSystem:
    """
    Real file system implementation using os.

    Business context: Used in production to keep the session log on
    disk. Each method delegates directly to the corresponding os or
    built-in function.
    """

    def exists(self, path: str) -> bool:  # pragma: no cover
        """Delegate to os.path.exists()."""
        return os.path.exists(path)

    def makedirs(self, path: str, exist_ok: bool = False) -> None:  # pragma: no cover
        """Delegate to os.makedirs()."""
        os.makedirs(path, exist_ok=exist_ok)

    def read_text(self, path: str, encoding: str = "utf-8") -> str:  # pragma: no cover
        """
        Read file contents from disk as text.

        Args:
            path: File to read.
            encoding: Text encoding (default utf-8).

        Returns:
            File contents as a string.

        Raises:
            FileNotFoundError: If file doesn't exist.
        """
        with open(path, encoding=encoding) as f:
            return f.read()

    def write_text(
        self, path: str, content: str, encoding: str = "utf-8"
    ) -> None:  # pragma: no cover
        """
        Write text content to file on disk.

        Args:
            path: File to write.
            content: String content to write.
            encoding: Text encoding (default utf-8).

        Raises:
            PermissionError: If file is read-only.
            OSError: If parent directory doesn't exist.
        """
        with open(path, "w", encoding=encoding) as f:
            f.write(content)

    def rename(self, src: str, dst: str) -> None:  # pragma: no cover
        """Delegate to os.replace() so an older backup is overwritten."""
        os.replace(src, dst)
