"""
Logging configuration for spot-tube.

setup_logging() attaches four handlers to the root logger:

    console                    INFO+ (configurable), coloured level names,
                               printed through tqdm so bars are not torn
    log_full_<ts>.log          DEBUG+
    log_errors_<ts>.log        ERROR+
    search_failures_<ts>.log   one block per track whose search failed

The search failure report only receives records logged through
log_search_failure(), which attaches the track to the record.

Usage:
    setup_logging(Path("logs"))
    logger = get_logger(__name__)
    ...
    shutdown_logging()
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

from tqdm import tqdm


FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attribute set on records by log_search_failure()
SEARCH_FAILURE_ATTR = "search_failure"

_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[34m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}


class ColoredConsoleFormatter(logging.Formatter):
    """
    'LEVEL: message' with the level name coloured by severity.

    Tracebacks are left to the log files.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        color = LEVEL_COLORS.get(record.levelno)
        if color is None:
            return f"{record.levelname}: {message}"
        return f"{color}{record.levelname}{_RESET}: {message}"


class TqdmLoggingHandler(logging.StreamHandler):
    """
    Console handler that prints through tqdm.write().

    Rich and tqdm bars redraw the last line; writing through tqdm puts
    the message above the bar instead of inside it.
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        super().__init__(stream if stream is not None else sys.stderr)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record), file=self.stream)
        except Exception:
            self.handleError(record)


class ErrorOnlyFilter(logging.Filter):
    """Pass ERROR and CRITICAL records only."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


class SearchFailureFilter(logging.Filter):
    """Pass only records produced by log_search_failure()."""

    def filter(self, record: logging.LogRecord) -> bool:
        return hasattr(record, SEARCH_FAILURE_ATTR)


class SearchFailureFormatter(logging.Formatter):
    """
    Render a failed search as a report block:

        Imagine - John Lennon
        query: Imagine John Lennon
        reason: no results found for query: Imagine John Lennon
    """

    def format(self, record: logging.LogRecord) -> str:
        failure = getattr(record, SEARCH_FAILURE_ATTR)
        return (
            f"{failure['title']} - {failure['artist']}\n"
            f"query: {failure['query']}\n"
            f"reason: {failure['reason']}"
        )


def _file_handler(
    path: Path,
    formatter: logging.Formatter,
    log_filter: Optional[logging.Filter] = None
) -> logging.FileHandler:
    handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    if log_filter is not None:
        handler.addFilter(log_filter)
    return handler


def setup_logging(log_dir: Path, console_level: int = logging.INFO) -> None:
    """
    Configure the root logger for one run.

    Call once, after the configuration is loaded. Any handlers already
    on the root logger are removed. All files of a run share the same
    timestamp suffix.

    Args:
        log_dir: Directory for the log files. Created if missing.
        console_level: Minimum level shown on the console.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.handlers.clear()

    console = TqdmLoggingHandler()
    console.setLevel(console_level)
    console.setFormatter(ColoredConsoleFormatter())
    root.addHandler(console)

    file_formatter = logging.Formatter(FILE_FORMAT, DATE_FORMAT)
    root.addHandler(_file_handler(log_dir / f"log_full_{stamp}.log", file_formatter))
    root.addHandler(_file_handler(
        log_dir / f"log_errors_{stamp}.log", file_formatter, ErrorOnlyFilter()
    ))

    report = _file_handler(
        log_dir / f"search_failures_{stamp}.log",
        SearchFailureFormatter(),
        SearchFailureFilter(),
    )
    report.terminator = "\n\n"
    root.addHandler(report)

    # googleapiclient warns on every discovery-cache miss
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)


def get_logger(name: str) -> logging.Logger:
    """Module logger. Silent until setup_logging() has run."""
    return logging.getLogger(name)


def log_search_failure(
    logger: logging.Logger,
    title: str,
    artist: str,
    query: str,
    reason: str
) -> None:
    """
    Log a track whose YouTube search failed, at ERROR level.

    Besides the regular log line, the record is written to the search
    failure report.
    """
    logger.error(
        f"Error searching YouTube for {title} by {artist}: {reason}",
        extra={
            SEARCH_FAILURE_ATTR: {
                "title": title,
                "artist": artist,
                "query": query,
                "reason": reason,
            }
        }
    )


def shutdown_logging() -> None:
    """Flush, close and detach every root handler."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
