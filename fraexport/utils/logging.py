"""
Unified logging for the exporter.

Mirrors console output into export.log and keeps track of every warning
and error raised during an export so the CLI can print a summary at the end.

Usage:
    from fraexport.utils import log, logWarning, logError, logDebug, init_logging, print_summary

    init_logging()                            # Once, before the export starts

    log("Writing spritesheets...")            # Info - phase headers, progress notes
    logWarning("missing layer id: abc")       # Recoverable, output may be degraded
    logError("decode timed out: hero.png")    # Asset lost, export still continues
    logDebug("placing frame 12 on sheet 0")   # File only

    print_summary()                           # Warning/error counts
"""

import sys
import atexit
from pathlib import Path
from datetime import datetime
from typing import List, Optional

# ANSI color codes
class Colors:
    YELLOW = '\033[93m'
    RED = '\033[91m'
    GREEN = '\033[92m'
    BOLD = '\033[1m'
    RESET = '\033[0m'


# Module state
_log_file = None
_log_path: Optional[Path] = None
_initialized = False
_quiet = False
_warnings: List[str] = []
_errors: List[str] = []


def init_logging(log_path: Path = None, quiet: bool = False):
    """
    Open the export log and reset warning/error tracking.

    Args:
        log_path: Log file location. Defaults to ./export.log
        quiet: Suppress console output (the log file is still written)
    """
    global _log_file, _log_path, _initialized, _quiet

    if _initialized:
        return

    reset_counts()
    _quiet = quiet

    if log_path is None:
        log_path = Path.cwd() / "export.log"

    _log_path = Path(log_path)

    try:
        _log_path.parent.mkdir(parents=True, exist_ok=True)
        _log_file = open(_log_path, 'w', encoding='utf-8')
        _initialized = True

        timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
        _log_file.write(f"Export started: {timestamp}\n")
        _log_file.write("=" * 70 + "\n\n")
        _log_file.flush()

        atexit.register(close_logging)

    except OSError as e:
        print(f"Warning: Could not open log file {_log_path}: {e}", file=sys.stderr)
        _log_file = None
        _initialized = True


def close_logging():
    """Close the log file."""
    global _log_file, _initialized

    if _log_file is not None:
        try:
            timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
            _log_file.write(f"\n{'=' * 70}\n")
            _log_file.write(f"Export finished: {timestamp}\n")
            _log_file.close()
        except OSError:
            pass
        _log_file = None

    _initialized = False


def reset_counts():
    """Forget all tracked warnings and errors."""
    global _warnings, _errors
    _warnings = []
    _errors = []


def _print_messages(title: str, messages: List[str], color: str):
    if not messages:
        return
    _echo(f"\n{color}{Colors.BOLD}{title} ({len(messages)}):{Colors.RESET}")
    _write_to_file(f"\n{title} ({len(messages)}):")
    for message in messages:
        _echo(f"  {color}- {message}{Colors.RESET}")
        _write_to_file(f"  - {message}")


def _count_text(count: int, noun: str, color: str) -> str:
    if count:
        return f"{color}{Colors.BOLD}{count} {noun}(s){Colors.RESET}"
    return f"{Colors.GREEN}0 {noun}s{Colors.RESET}"


def print_summary():
    """
    Print every tracked error and warning, then the totals.
    Console output is colored; the log file gets the plain text.
    """
    log("\n" + "=" * 70)
    log("EXPORT SUMMARY")
    log("=" * 70)

    _print_messages("Errors", _errors, Colors.RED)
    _print_messages("Warnings", _warnings, Colors.YELLOW)

    _echo("")
    _echo(f"{_count_text(len(_errors), 'Error', Colors.RED)} | "
          f"{_count_text(len(_warnings), 'Warning', Colors.YELLOW)}")
    _write_to_file(f"\n{len(_errors)} Error(s) | {len(_warnings)} Warning(s)")


def get_warnings() -> List[str]:
    """Return a copy of the tracked warning messages."""
    return list(_warnings)


def get_errors() -> List[str]:
    """Return a copy of the tracked error messages."""
    return list(_errors)


def _echo(msg: str, end: str = "\n", stream=None):
    if not _quiet:
        print(msg, end=end, file=stream or sys.stdout)


def _write_to_file(msg: str, end: str = "\n"):
    """Write message to log file."""
    if _log_file is not None:
        try:
            _log_file.write(msg + end)
            _log_file.flush()
        except OSError:
            pass


def log(msg: str = "", end: str = "\n"):
    """
    Log an info message to both console and file.
    Use for phase headers and major points in the export.
    """
    if not _initialized:
        init_logging()

    _echo(msg, end=end)
    _write_to_file(msg, end)


def logWarning(msg: str, end: str = "\n"):
    """
    Log a warning. Warnings mean the export continues with degraded output
    (skipped construct, placeholder image, cropped sprite).
    Displayed in yellow. Tracked for the summary.
    """
    if not _initialized:
        init_logging()

    formatted = f"Warning: {msg}"
    _echo(f"{Colors.YELLOW}{formatted}{Colors.RESET}", end=end)
    _write_to_file(formatted, end)
    _warnings.append(msg)


def logError(msg: str, end: str = "\n"):
    """
    Log an error. Used for lost assets and for the fatal failure that ends
    an export. Displayed in red. Tracked for the summary.
    """
    if not _initialized:
        init_logging()

    formatted = f"ERROR: {msg}"
    _echo(f"{Colors.RED}{formatted}{Colors.RESET}", end=end, stream=sys.stderr)
    _write_to_file(formatted, end)
    _errors.append(msg)


def logDebug(msg: str, end: str = "\n"):
    """
    Log a debug message. Only written to the log file, never to the console.
    """
    if not _initialized:
        init_logging()

    _write_to_file(f"[DEBUG] {msg}", end)
