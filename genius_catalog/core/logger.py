"""
Logging configuration for genius-catalog.

Every CLI run logs to four places:
    - Console: Colored, tqdm-compatible messages (INFO and above)
    - log_full_{timestamp}.log: Complete log of all events (DEBUG and above)
    - log_errors_{timestamp}.log: Only ERROR and CRITICAL level messages
    - lyrics_failures_{timestamp}.log: Songs whose lyrics could not be fetched

Log File Locations:
    All log files are created in a 'logs' subdirectory of the log directory
    configured in config.yaml (storage.log_directory).

Usage:
    from genius_catalog.core.logger import setup_logging, get_logger

    setup_logging(config.storage.log_directory)
    logger = get_logger(__name__)

    logger.info("Importing songs")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

import colorama
from colorama import Fore, Style
from tqdm import tqdm


# File records carry timestamp, level and module
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Formatter that colors the level name for console output.

    Colors:
        - DEBUG: Cyan
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bright Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Fore.CYAN,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED + Style.BRIGHT,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, Fore.WHITE)
        colored_levelname = f"{color}{record.levelname}{Style.RESET_ALL}"
        return f"{colored_levelname}: {record.getMessage()}"


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes to console without breaking tqdm progress bars.

    The import command shows a progress bar while background lyrics fetches
    finish; worker threads log at the same time. tqdm.write() prints the
    message above any active bar instead of tearing it.
    """

    def __init__(self, stream: TextIO = sys.stderr) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream)
        except Exception:
            self.handleError(record)


class LyricsFailedSongHandler(logging.Handler):
    """
    Handler that captures lyrics fetch failures for the lyrics report file.

    Writes records carrying lyrics failure fields to lyrics_failures.log in
    a simple, human-readable format:

        Blinding Lights - The Weeknd
        /The-weeknd-blinding-lights-lyrics

    Fields read from the record (set through `extra=`):
        - 'lyrics_failed_song_title': The song title
        - 'lyrics_failed_song_artist': The artist name
        - 'lyrics_failed_song_path': The Genius path that was requested

    Records without them are ignored; log_lyrics_failure() sets all three.
    """

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        """Open the report file for writing (overwrites existing content)."""
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        if not hasattr(record, "lyrics_failed_song_title"):
            return

        if self.report_file is None:
            return

        try:
            title = getattr(record, "lyrics_failed_song_title", "Unknown")
            artist = getattr(record, "lyrics_failed_song_artist", "Unknown")
            path = getattr(record, "lyrics_failed_song_path", "") or ""

            # Worker threads log concurrently
            self.acquire()
            try:
                self.report_file.write(f"{title} - {artist}\n")
                self.report_file.write(f"{path}\n\n")
                self.report_file.flush()
            finally:
                self.release()
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
    """Filter that only passes ERROR and CRITICAL records."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(log_directory: Path, verbose: bool = False) -> None:
    """
    Install the console and file handlers on the root logger.

    The CLI calls this once per command, right after loading config.yaml
    and before the catalog snapshot is opened.

    Args:
        log_directory: Directory where a 'logs' subdirectory is created.
        verbose: Show DEBUG messages on the console as well.

    Behavior:
        1. Create log_directory/logs if it doesn't exist
        2. Configure root logger level to DEBUG
        3. Console handler (TqdmLoggingHandler, colored), INFO or DEBUG
        4. Full log file handler (DEBUG)
        5. Error log file handler (ERROR+ via ErrorOnlyFilter)
        6. Lyrics failures report handler

    Thread Safety:
        Not thread-safe. Lyrics workers must not be running yet.
    """
    colorama.just_fix_windows_console()

    logs_dir = log_directory / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    full_handler = logging.FileHandler(
        logs_dir / f"log_full_{timestamp}.log", mode="w", encoding="utf-8"
    )
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    root_logger.addHandler(full_handler)

    error_handler = logging.FileHandler(
        logs_dir / f"log_errors_{timestamp}.log", mode="w", encoding="utf-8"
    )
    error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)

    lyrics_handler = LyricsFailedSongHandler(logs_dir / f"lyrics_failures_{timestamp}.log")
    lyrics_handler.open()
    root_logger.addHandler(lyrics_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.
              This creates a hierarchy like 'genius_catalog.services.catalog'.

    Note:
        Loggers obtained before setup_logging() is called propagate to an
        unconfigured root logger. Tests rely on this together with caplog.
    """
    return logging.getLogger(name)


def log_lyrics_failure(
    logger: logging.Logger,
    song_title: str,
    artist: str,
    path: str | None,
    reason: str
) -> None:
    """
    Log a song whose lyrics could not be retrieved.

    Logs a WARNING and attaches the extra fields LyricsFailedSongHandler
    uses to write lyrics_failures.log.

    Example:
        log_lyrics_failure(
            logger,
            song_title="Blinding Lights",
            artist="The Weeknd",
            path="/The-weeknd-blinding-lights-lyrics",
            reason="timed out"
        )
    """
    logger.warning(
        f"No lyrics for: {artist} - {song_title} ({reason})",
        extra={
            "lyrics_failed_song_title": song_title,
            "lyrics_failed_song_artist": artist,
            "lyrics_failed_song_path": path,
        }
    )


def shutdown_logging() -> None:
    """
    Flush and close all handlers on the root logger.

    Called from the CLI's finally block. After this, logging produces
    no output until setup_logging() is called again.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        try:
            handler.flush()
            handler.close()
        except (OSError, ValueError):
            pass
        root_logger.removeHandler(handler)
