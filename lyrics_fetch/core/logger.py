"""
Logging configuration for lyrics-fetch.

This module sets up the logging system with multiple outputs:
    - Console: Real-time messages with tqdm-compatible, colored formatting
    - log_full_<timestamp>.log: Complete log of all events (DEBUG and above)
    - log_errors_<timestamp>.log: Only ERROR and CRITICAL level messages
    - lyrics_failures_<timestamp>.log: Files whose lyrics could not be fetched

Log files are only written when a log directory is configured; otherwise
the console is the only output.

Usage:
    from lyrics_fetch.core.logger import setup_logging, get_logger

    setup_logging(log_dir=None, debug=False)  # Call once at startup
    logger = get_logger(__name__)             # Get logger for each module

    logger.info("starting music lyrics fetcher")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

import colorama
from colorama import Fore, Style
from tqdm import tqdm


LOG_FULL_FILENAME = "log_full"
LOG_ERRORS_FILENAME = "log_errors"
LYRICS_FAILURES_FILENAME = "lyrics_failures"

# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are too chatty at DEBUG/INFO
NOISY_LOGGERS = ("urllib3", "urllib3.connectionpool", "requests", "charset_normalizer")


class ColoredConsoleFormatter(logging.Formatter):
    """
    Formatter that colors the level name for console output.

    Colors:
        - DEBUG: Blue
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bold Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Fore.BLUE,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Style.BRIGHT + Fore.RED,
    }

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record as "LEVEL: message".

        When colors are enabled the level name is wrapped in ANSI codes.
        """
        levelname = record.levelname
        if self.use_colors:
            color = self.LEVEL_COLORS.get(record.levelno, Fore.WHITE)
            levelname = f"{color}{levelname}{Style.RESET_ALL}"

        message = f"{levelname}: {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes to the console without breaking progress bars.

    Uses tqdm.write(), which prints above any active bar instead of
    through it.

    Attributes:
        stream: The output stream. When None, sys.stderr is looked up at
                emit time so redirected streams are honored.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream or sys.stderr)
        except Exception:
            self.handleError(record)


class LyricsFailureReportHandler(logging.Handler):
    """
    Handler that captures per-file lyrics failures into a report file.

    Only records carrying the 'lyrics_failed_file' extra field are written,
    in a simple human-readable format:

        /music/Artist/Album/01 Song.flac
        not_found: no lyrics found for song 'Artist - Song (Album)'

    Records are produced by log_lyrics_failure().

    Attributes:
        report_path: Path to the report file.
        report_file: Open file handle (set by open()).
    """

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        """Open the report file for writing (overwrites existing content)."""
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        if not hasattr(record, "lyrics_failed_file"):
            return

        if self.report_file is None:
            return

        try:
            path = getattr(record, "lyrics_failed_file")
            kind = getattr(record, "lyrics_failed_kind", "error")
            reason = getattr(record, "lyrics_failed_reason", "")

            self.report_file.write(f"{path}\n")
            self.report_file.write(f"{kind}: {reason}\n\n")
            self.report_file.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """Close the report file handle. Safe to call multiple times."""
        if self.report_file is not None:
            try:
                self.report_file.close()
            except OSError:
                pass
            self.report_file = None
        super().close()


class ErrorOnlyFilter(logging.Filter):
    """Filter that only allows ERROR and CRITICAL level records."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(
    log_dir: Path | None = None,
    debug: bool = False,
    colored: bool | None = None
) -> None:
    """
    Configure the logging system for the application.

    This function should be called ONCE at application startup, after
    the configuration is loaded.

    Args:
        log_dir: Directory where run log files are created, or None to
                 log to the console only.
        debug: Show DEBUG messages on the console.
        colored: Force console colors on or off. By default colors are
                 used when stderr is a terminal.

    Behavior:
        1. Configure root logger level to DEBUG and drop old handlers
        2. Add console handler (TqdmLoggingHandler), INFO or DEBUG
        3. If log_dir is set, create it and add:
           - full log file handler (DEBUG)
           - error log file handler (ERROR+)
           - lyrics failures report handler
        4. Quiet noisy third-party loggers
    """
    if colored is None:
        colored = sys.stderr.isatty()
    if colored:
        colorama.just_fix_windows_console()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Remove any existing handlers
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    console_handler.setFormatter(ColoredConsoleFormatter(use_colors=colored))
    root_logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

        full_handler = logging.FileHandler(
            log_dir / f"{LOG_FULL_FILENAME}_{timestamp}.log", mode="w", encoding="utf-8"
        )
        full_handler.setLevel(logging.DEBUG)
        full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
        root_logger.addHandler(full_handler)

        error_handler = logging.FileHandler(
            log_dir / f"{LOG_ERRORS_FILENAME}_{timestamp}.log", mode="w", encoding="utf-8"
        )
        error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
        error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
        error_handler.addFilter(ErrorOnlyFilter())
        root_logger.addHandler(error_handler)

        failures_handler = LyricsFailureReportHandler(
            log_dir / f"{LYRICS_FAILURES_FILENAME}_{timestamp}.log"
        )
        failures_handler.open()
        root_logger.addHandler(failures_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.

    Returns:
        logging.Logger: A logger configured by setup_logging().
    """
    return logging.getLogger(name)


def log_lyrics_failure(
    logger: logging.Logger,
    file_path: Path,
    kind: str,
    reason: str
) -> None:
    """
    Log a file whose lyrics could not be fetched or written.

    Emits one ERROR line identifying the file and the error kind, with the
    extra fields LyricsFailureReportHandler uses for the failures report.

    Args:
        logger: The logger to use for the message.
        file_path: Path of the audio file.
        kind: Short error kind (see LyricsFetchError.kind).
        reason: Human-readable failure description.

    Example:
        log_lyrics_failure(
            logger,
            Path("/music/Queen/01 Bohemian Rhapsody.flac"),
            kind="not_found",
            reason="no lyrics found for song 'Queen - Bohemian Rhapsody'"
        )
    """
    logger.error(
        f"failed to fetch lyrics [{kind}] {file_path}: {reason}",
        extra={
            "lyrics_failed_file": str(file_path),
            "lyrics_failed_kind": kind,
            "lyrics_failed_reason": reason,
        }
    )


def shutdown_logging() -> None:
    """
    Flush, close and remove every handler of the root logger.

    Typically called in a finally block at application exit.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        try:
            handler.flush()
            handler.close()
        except (OSError, ValueError):
            pass
        root_logger.removeHandler(handler)
