"""Tests for storage module."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pytest

# Add tests directory to path for conftest imports
sys.path.insert(0, str(Path(__file__).parent))

from conftest import SESSIONS_PATH, STORAGE_DIR, MockFileSystem, make_session
from pomodoro_stats.config import Config
from pomodoro_stats.models import Session
from pomodoro_stats.storage import StorageManager


class TestStorageManagerInit:
    """Test suite for StorageManager initialization behavior."""

    def test_creates_storage_directory(self, mock_fs: MockFileSystem) -> None:
        """Verifies StorageManager creates the storage directory.

        Business context:
        First-run experience must be seamless. Users shouldn't need to
        manually create directories before logging a session.
        """
        StorageManager(storage_dir=STORAGE_DIR, filesystem=mock_fs)
        assert mock_fs.is_dir(STORAGE_DIR)

    def test_creates_empty_sessions_file(self, mock_fs: MockFileSystem) -> None:
        """Verifies initialization writes an empty JSON list."""
        StorageManager(storage_dir=STORAGE_DIR, filesystem=mock_fs)
        assert json.loads(mock_fs.get_file(SESSIONS_PATH) or "") == []

    def test_preserves_existing_data(self, mock_fs: MockFileSystem) -> None:
        """Verifies initialization never overwrites an existing log."""
        existing = json.dumps([make_session(1, "2024-03-10").to_dict()])
        mock_fs.set_file(SESSIONS_PATH, existing)

        StorageManager(storage_dir=STORAGE_DIR, filesystem=mock_fs)

        assert mock_fs.get_file(SESSIONS_PATH) == existing

    def test_uses_configured_directory(self, mock_fs: MockFileSystem) -> None:
        """Verifies the default directory comes from Config."""
        Config.set_test_overrides(storage_dir="/configured")
        storage = StorageManager(filesystem=mock_fs)
        assert storage.storage_dir == "/configured"
        assert mock_fs.is_dir("/configured")

    def test_survives_read_only_file(self, mock_fs: MockFileSystem) -> None:
        """Verifies a failed initial write is logged, not raised."""
        mock_fs.makedirs(STORAGE_DIR, exist_ok=True)
        mock_fs._read_only.add(SESSIONS_PATH)

        storage = StorageManager(storage_dir=STORAGE_DIR, filesystem=mock_fs)

        assert storage.load_sessions() == []


class TestLoadSessions:
    """Tests for load_sessions()."""

    def test_empty_log(self, storage: StorageManager) -> None:
        """Verifies a fresh store has no sessions."""
        assert storage.load_sessions() == []

    def test_missing_file_returns_empty(self, mock_fs: MockFileSystem) -> None:
        """Verifies a file deleted after init reads as empty, not an error."""
        storage = StorageManager(storage_dir=STORAGE_DIR, filesystem=mock_fs)
        mock_fs.clear()
        assert storage.load_sessions() == []

    def test_preserves_stored_order(
        self, storage: StorageManager, mock_fs: MockFileSystem
    ) -> None:
        """Verifies sessions come back in file order, not sorted."""
        records = [
            make_session(2, "2024-03-10", "10:00").to_dict(),
            make_session(1, "2024-03-09", "09:00").to_dict(),
        ]
        mock_fs.set_file(SESSIONS_PATH, json.dumps(records))

        assert [s.id for s in storage.load_sessions()] == [2, 1]

    def test_corrupt_json_is_set_aside(
        self,
        storage: StorageManager,
        mock_fs: MockFileSystem,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Verifies unreadable JSON is logged, renamed and treated as empty.

        Business context:
        The next save would otherwise overwrite the user's only copy of
        their history. Moving it to .corrupt keeps it recoverable.
        """
        mock_fs.set_file(SESSIONS_PATH, "{not json")

        with caplog.at_level(logging.ERROR, logger="pomodoro_stats.storage"):
            assert storage.load_sessions() == []

        assert "Invalid JSON" in caplog.text
        assert mock_fs.get_file(f"{SESSIONS_PATH}.corrupt") == "{not json"
        assert not mock_fs.exists(SESSIONS_PATH)

    def test_non_list_top_level(self, storage: StorageManager, mock_fs: MockFileSystem) -> None:
        """Verifies a JSON object instead of a list reads as empty."""
        mock_fs.set_file(SESSIONS_PATH, json.dumps({"sessions": []}))
        assert storage.load_sessions() == []

    def test_skips_bad_records(
        self,
        storage: StorageManager,
        mock_fs: MockFileSystem,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Verifies one malformed record doesn't hide the others."""
        records = [
            make_session(1, "2024-03-10").to_dict(),
            {"id": 2, "date": "garbage"},
            make_session(3, "2024-03-11").to_dict(),
        ]
        mock_fs.set_file(SESSIONS_PATH, json.dumps(records))

        with caplog.at_level(logging.WARNING, logger="pomodoro_stats.storage"):
            sessions = storage.load_sessions()

        assert [s.id for s in sessions] == [1, 3]
        assert "Skipping stored record 1" in caplog.text


class TestWriteOperations:
    """Tests for save_sessions(), add_session() and replace_all()."""

    def test_save_writes_indented_json(
        self, storage: StorageManager, mock_fs: MockFileSystem
    ) -> None:
        """Verifies the file is a pretty-printed list of session dicts."""
        session = make_session(1, "2024-03-10", "09:00", 25, 8)
        assert storage.save_sessions([session]) is True

        content = mock_fs.get_file(SESSIONS_PATH) or ""
        assert json.loads(content) == [session.to_dict()]
        assert '\n  {' in content

    def test_add_appends(self, storage: StorageManager) -> None:
        """Verifies add_session keeps existing sessions and appends."""
        storage.add_session(make_session(1, "2024-03-10"))
        storage.add_session(make_session(2, "2024-03-11"))

        assert [s.id for s in storage.load_sessions()] == [1, 2]

    def test_add_roundtrips_fields(self, storage: StorageManager) -> None:
        """Verifies every field survives a save and load."""
        session = make_session(5, "2024-03-10", "23:30", 50, None)
        storage.add_session(session)
        assert storage.load_sessions() == [session]

    def test_replace_all_discards_previous(self, storage: StorageManager) -> None:
        """Verifies replace_all does not merge with existing data."""
        storage.add_session(make_session(1, "2024-03-10"))

        replacement: list[Session] = [make_session(9, "2024-01-01"), make_session(8, "2024-01-02")]
        assert storage.replace_all(replacement) is True

        assert [s.id for s in storage.load_sessions()] == [9, 8]

    def test_replace_all_with_empty_list(self, storage: StorageManager) -> None:
        """Verifies importing an empty list clears the log."""
        storage.add_session(make_session(1, "2024-03-10"))
        storage.replace_all([])
        assert storage.load_sessions() == []

    def test_write_failure_returns_false(
        self,
        storage: StorageManager,
        mock_fs: MockFileSystem,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Verifies a permission error is logged and reported as False."""
        mock_fs.chmod(SESSIONS_PATH, 0o444)

        with caplog.at_level(logging.ERROR, logger="pomodoro_stats.storage"):
            assert storage.add_session(make_session(1, "2024-03-10")) is False

        assert "Error writing" in caplog.text
        assert storage.load_sessions() == []


class TestAddPreservesStoredData:
    """Tests that appending never removes what is already on disk."""

    def test_add_keeps_records_that_fail_validation(
        self, storage: StorageManager, mock_fs: MockFileSystem
    ) -> None:
        """Verifies a record load_sessions() skips is still on disk after an add.

        Business context:
        A hand-edited or older record may not validate today. Logging a
        new session must not silently delete it.
        """
        bad_record = {"id": 2, "date": "2024-3-10", "start_time": "09:00", "duration_min": 25}
        records = [make_session(1, "2024-03-10").to_dict(), bad_record]
        mock_fs.set_file(SESSIONS_PATH, json.dumps(records))

        assert storage.add_session(make_session(3, "2024-03-11")) is True

        stored = json.loads(mock_fs.get_file(SESSIONS_PATH) or "")
        assert [r["id"] for r in stored] == [1, 2, 3]
        assert stored[1] == bad_record
        assert [s.id for s in storage.load_sessions()] == [1, 3]

    def test_non_list_file_is_set_aside_before_add(
        self, storage: StorageManager, mock_fs: MockFileSystem
    ) -> None:
        """Verifies a JSON object top level is backed up, not overwritten."""
        original = json.dumps({"sessions": [make_session(1, "2024-03-10").to_dict()]})
        mock_fs.set_file(SESSIONS_PATH, original)

        assert storage.add_session(make_session(3, "2024-03-11")) is True

        assert mock_fs.get_file(f"{SESSIONS_PATH}.corrupt") == original
        assert [s.id for s in storage.load_sessions()] == [3]

    def test_non_list_file_is_set_aside_on_load(
        self, storage: StorageManager, mock_fs: MockFileSystem
    ) -> None:
        """Verifies reading a non-list file also moves it out of the way."""
        mock_fs.set_file(SESSIONS_PATH, "42")

        assert storage.load_sessions() == []

        assert mock_fs.get_file(f"{SESSIONS_PATH}.corrupt") == "42"

    def test_unreadable_file_is_not_overwritten(
        self,
        storage: StorageManager,
        mock_fs: MockFileSystem,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Verifies a read error makes add fail instead of replacing the file."""
        existing = json.dumps([make_session(1, "2024-03-10").to_dict()])
        mock_fs.set_file(SESSIONS_PATH, existing)

        def denied(path: str, _encoding: str = "utf-8") -> str:
            raise PermissionError(f"Permission denied: {path}")

        monkeypatch.setattr(mock_fs, "read_text", denied)

        assert storage.add_session(make_session(3, "2024-03-11")) is False
        assert mock_fs.get_file(SESSIONS_PATH) == existing
