"""
CLI entry point for Pomodoro Stats.

PURPOSE: Command-line interface for the dashboard, reports and data transfer.
AI CONTEXT: Main entry points for package execution.

USAGE:
    # Print help
    python -m pomodoro_stats

    # Or via CLI command (after install)
    pomodoro-stats dashboard                  # Launch web dashboard
    pomodoro-stats report --end 2024-03-10    # Print weekly text report
    pomodoro-stats add --date 2024-03-10 --start 09:00 --duration 25 --quality 8
    pomodoro-stats export --output backup.json
    pomodoro-stats import backup.json

    # Use another data directory
    pomodoro-stats --storage-dir ~/.focus report
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import date
from functools import lru_cache
from typing import TYPE_CHECKING

from .config import Config
from .dates import end_time_for, parse_date
from .errors import ParseError

if TYPE_CHECKING:
    from .filesystem import FileSystem
    from .statistics import StatisticsEngine
    from .storage import SessionRepository

# Constants
PROG_NAME = "pomodoro-stats"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


@lru_cache(maxsize=1)
def _get_logger() -> logging.Logger:
    """Get module logger (cached for thread safety)."""
    logging.basicConfig(level=logging.INFO)
    return logging.getLogger(__name__)


def _log(message: str, *, emoji: str = "") -> None:
    """Log message with optional emoji prefix for CLI output.

    Args:
        message: The message to log.
        emoji: Optional emoji prefix for visual CLI feedback.
    """
    prefix = f"{emoji} " if emoji else ""
    _get_logger().info(f"{prefix}{message}")


def _default_storage() -> SessionRepository:
    """StorageManager on the configured directory."""
    from .storage import StorageManager

    return StorageManager()


def run_dashboard(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
    """
    Launch the web dashboard.

    Starts a FastAPI server hosting the weekly, monthly and add views.

    Args:
        host: Network interface to bind to. Default '127.0.0.1' for
            local-only access. Use '0.0.0.0' for network access.
        port: TCP port for the HTTP server. Default 8000.

    Returns:
        None. Blocks until server shutdown (Ctrl+C).

    Raises:
        OSError: If port is already in use.

    Example:
        >>> # From command line:
        >>> # pomodoro-stats dashboard --port 3000
        >>> run_dashboard(port=3000)
        🚀 Starting dashboard at http://127.0.0.1:3000
    """
    from .web import run_dashboard as start_web

    _log(f"Starting dashboard at http://{host}:{port}", emoji="🚀")
    _log("Press Ctrl+C to stop")
    start_web(host=host, port=port)


def run_report(
    storage: SessionRepository | None = None,
    engine: StatisticsEngine | None = None,
    *,
    end: date | None = None,
    selected: date | None = None,
    today: date | None = None,
) -> int:
    """
    Print the weekly text report to stdout.

    Uses the same window rules as the dashboard: without arguments the
    window ends today with today selected; a selected date alone moves
    the window to that day's Monday-Sunday week.

    Args:
        storage: Optional repository for testability. Defaults to a new
            StorageManager.
        engine: Optional StatisticsEngine for testability.
        end: Window end date.
        selected: Day to mark in the report.
        today: Current date (defaults to date.today()).

    Returns:
        Exit code: 0 when the report was printed, 1 if the requested
        window falls outside the calendar (e.g. the week of 9999-12-30).

    Example:
        >>> # From command line:
        >>> # pomodoro-stats report --date 2024-03-06 > week.txt
        >>> run_report(selected=date(2024, 3, 6))
        ==================================================
        POMODORO STATS - WEEKLY REPORT
        ...
    """
    from .state import ViewState
    from .statistics import StatisticsEngine as StatsEngine

    storage = storage or _default_storage()
    engine = engine or StatsEngine()

    try:
        state = ViewState.weekly(
            today or date.today(),
            window_end=end,
            selected=selected,
            window_days=engine.window_days,
        )
    except OverflowError as e:
        _log(f"Date out of range: {e}", emoji="❌")
        return 1

    summary = engine.build_weekly_summary(
        storage.load_sessions(), state.window_end_date, state.selected_date
    )
    # Note: Using print() intentionally for stdout piping support
    print(engine.generate_weekly_report(summary))
    return 0


def run_add(
    day: str,
    start: str,
    duration: int,
    quality: int | None = None,
    storage: SessionRepository | None = None,
) -> int:
    """
    Log one session from the command line.

    Args:
        day: Date "YYYY-MM-DD".
        start: Start time "HH:MM".
        duration: Minutes, >= 0.
        quality: Optional rating.
        storage: Optional repository for testability.

    Returns:
        0 on success, 1 on invalid input or a failed save.
    """
    from .presenters import build_session_from_form

    storage = storage or _default_storage()
    try:
        session = build_session_from_form(
            {"date": day, "start_time": start, "duration": duration, "quality": quality}
        )
    except ParseError as e:
        _log(f"Invalid session: {e}", emoji="❌")
        return 1

    if not storage.add_session(session):
        _log("Could not save session", emoji="❌")
        return 1
    _log(
        f"Logged {session.duration_minutes} min on {session.date_key} "
        f"({session.start_time}-{end_time_for(session.start_time, session.duration_minutes)})",
        emoji="✅",
    )
    return 0


def run_export(
    output: str | None = None,
    storage: SessionRepository | None = None,
    filesystem: FileSystem | None = None,
    today: date | None = None,
) -> int:
    """
    Export every session as JSON.

    Args:
        output: Target file. None prints to stdout; a path ending in a
            separator is a directory and gets the dated default filename.
        storage: Optional repository for testability.
        filesystem: Optional FileSystem for testability.
        today: Date used in the default filename.

    Returns:
        0 on success, 1 if the file could not be written.
    """
    from .filesystem import RealFileSystem
    from .transfer import export_filename, export_sessions

    storage = storage or _default_storage()
    fs = filesystem or RealFileSystem()
    sessions = storage.load_sessions()
    text = export_sessions(sessions)

    if output is None:
        print(text)
        return 0

    path = output
    if output.endswith(("/", os.sep)):
        path = os.path.join(output, export_filename(today or date.today()))
    try:
        fs.write_text(path, text)
    except OSError as e:
        _log(f"Could not write {path}: {e}", emoji="❌")
        return 1
    _log(f"Exported {len(sessions)} sessions to {path}", emoji="📦")
    return 0


def run_import(
    path: str,
    storage: SessionRepository | None = None,
    filesystem: FileSystem | None = None,
) -> int:
    """
    Replace all stored sessions with the contents of an export file.

    A rejected file leaves existing data untouched.

    Args:
        path: Export file to read.
        storage: Optional repository for testability.
        filesystem: Optional FileSystem for testability.

    Returns:
        0 when the import was applied, 1 when the file could not be
        read, was rejected, or could not be saved.
    """
    from .filesystem import RealFileSystem
    from .transfer import parse_import

    storage = storage or _default_storage()
    fs = filesystem or RealFileSystem()
    try:
        text = fs.read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        _log(f"Could not read {path}: {e}", emoji="❌")
        return 1

    result = parse_import(text)
    if not result.success:
        _log(result.message, emoji="❌")
        return 1
    if not storage.replace_all(result.sessions):
        _log("Could not save imported sessions", emoji="❌")
        return 1
    _log(result.message, emoji="✅")
    return 0


def _date_arg(value: str) -> date:
    """argparse type for YYYY-MM-DD values."""
    try:
        return parse_date(value)
    except ParseError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argument parser with all subcommands.

    Returns:
        Configured ArgumentParser.
    """
    from .__version__ import __version__

    parser = argparse.ArgumentParser(
        prog=PROG_NAME,
        description="Pomodoro Stats - weekly and monthly statistics for focus sessions",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--storage-dir",
        default=None,
        help=f"Data directory (default: ${Config.STORAGE_DIR_ENV} or {Config.STORAGE_DIR})",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Dashboard command
    dashboard_parser = subparsers.add_parser(
        "dashboard",
        help="Launch web dashboard",
    )
    dashboard_parser.add_argument(
        "--host",
        default=DEFAULT_HOST,
        help=f"Bind address (default: {DEFAULT_HOST})",
    )
    dashboard_parser.add_argument(
        "--port",
        type=int,
        default=DEFAULT_PORT,
        help=f"Port number (default: {DEFAULT_PORT})",
    )

    # Report command
    report_parser = subparsers.add_parser(
        "report",
        help="Print weekly report to stdout",
    )
    report_parser.add_argument("--end", type=_date_arg, default=None, help="Window end date")
    report_parser.add_argument("--date", type=_date_arg, default=None, help="Selected day")

    # Add command
    add_parser = subparsers.add_parser("add", help="Log a session")
    add_parser.add_argument("--date", required=True, help="Session date (YYYY-MM-DD)")
    add_parser.add_argument("--start", required=True, help="Start time (HH:MM)")
    add_parser.add_argument(
        "--duration",
        type=int,
        default=Config.DEFAULT_SESSION_MINUTES,
        help=f"Minutes (default: {Config.DEFAULT_SESSION_MINUTES})",
    )
    add_parser.add_argument("--quality", type=int, default=None, help="Rating 1-10")

    # Export command
    export_parser = subparsers.add_parser("export", help="Write all sessions as JSON")
    export_parser.add_argument(
        "--output",
        default=None,
        help="File or directory to write (default: stdout)",
    )

    # Import command
    import_parser = subparsers.add_parser("import", help="Replace all sessions from a file")
    import_parser.add_argument("file", help="Export file to import")

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main CLI entry point for Pomodoro Stats.

    Parses command-line arguments and dispatches to the appropriate
    subcommand handler. Without a subcommand it prints help.

    Business context: This is the entry point installed as the
    'pomodoro-stats' console script.

    Args:
        argv: Arguments without the program name. Defaults to sys.argv.

    Returns:
        Exit code 0 for success, 1 for invalid input or a rejected import.

    Raises:
        SystemExit: On --help, --version or argument parsing errors.

    Example:
        >>> # From command line:
        >>> # pomodoro-stats dashboard --port 8080
        >>> sys.exit(main())  # Typical usage pattern
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.storage_dir:
        os.environ[Config.STORAGE_DIR_ENV] = args.storage_dir

    if args.command == "dashboard":
        run_dashboard(host=args.host, port=args.port)
    elif args.command == "report":
        return run_report(end=args.end, selected=args.date)
    elif args.command == "add":
        return run_add(args.date, args.start, args.duration, args.quality)
    elif args.command == "export":
        return run_export(args.output)
    elif args.command == "import":
        return run_import(args.file)
    else:
        parser.print_help()

    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
