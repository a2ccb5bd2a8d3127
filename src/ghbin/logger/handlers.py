"""Handler construction for the ghbin logging system.

The ``ghbin`` logger owns exactly one QueueHandler. A QueueListener thread
drains the queue into a stdout console handler and, optionally, a rotating
log file, so coroutines never block on log I/O.
"""

import logging
import queue
import sys
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path

from ghbin.constants import (
    LOG_BACKUP_COUNT,
    LOG_CONSOLE_DATE_FORMAT,
    LOG_CONSOLE_FORMAT,
    LOG_FILE_DATE_FORMAT,
    LOG_FILE_FORMAT,
    LOG_ROTATION_THRESHOLD_BYTES,
)
from ghbin.exceptions import ConfigurationError
from ghbin.logger.formatters import HybridConsoleFormatter
from ghbin.logger.state import LoggerState

ROOT_LOGGER_NAME = "ghbin"


def create_console_handler(console_level: str) -> logging.StreamHandler:
    """Create the stdout handler.

    Args:
        console_level: Level name such as "INFO" or "WARNING"

    Returns:
        StreamHandler using HybridConsoleFormatter

    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        HybridConsoleFormatter(
            LOG_CONSOLE_FORMAT, datefmt=LOG_CONSOLE_DATE_FORMAT
        )
    )
    handler.setLevel(getattr(logging, console_level, logging.WARNING))
    return handler


def create_file_handler(
    log_file: Path, file_level: str
) -> RotatingFileHandler:
    """Create the rotating file handler, rolling over an oversized log.

    Args:
        log_file: Destination log file
        file_level: Level name for the file

    Returns:
        Configured RotatingFileHandler

    Raises:
        ConfigurationError: If the log directory or file cannot be opened

    """
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            filename=str(log_file),
            maxBytes=LOG_ROTATION_THRESHOLD_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        if log_file.stat().st_size >= LOG_ROTATION_THRESHOLD_BYTES:
            handler.doRollover()
    except OSError as e:
        msg = f"cannot open log file {log_file}: {e}"
        raise ConfigurationError(msg) from e

    handler.setFormatter(
        logging.Formatter(LOG_FILE_FORMAT, datefmt=LOG_FILE_DATE_FORMAT)
    )
    handler.setLevel(getattr(logging, file_level, logging.INFO))
    return handler


def setup_root_logger(
    state: LoggerState,
    console_level: str,
    file_level: str,
    log_file: Path,
    enable_file_logging: bool,  # noqa: FBT001
) -> None:
    """Attach the queue-based handler chain to the ``ghbin`` logger.

    Called once per process (or once per ``clear_logger_state`` in tests).

    Args:
        state: Shared logger state to populate
        console_level: Console level name
        file_level: File level name
        log_file: Path of the rotating log file
        enable_file_logging: Whether to write the log file at all

    Raises:
        ConfigurationError: If the file handler cannot be created

    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(logging.DEBUG)
    root.propagate = False

    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)

    handlers: list[logging.Handler] = [create_console_handler(console_level)]
    if enable_file_logging:
        handlers.append(create_file_handler(log_file, file_level))

    state.log_queue = queue.Queue(-1)
    state.queue_listener = QueueListener(
        state.log_queue, *handlers, respect_handler_level=True
    )
    state.queue_listener.start()
    root.addHandler(QueueHandler(state.log_queue))
    state.root_initialized = True
