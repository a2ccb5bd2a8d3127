"""Public logging API for ghbin.

- setup_logging(): initialize the ``ghbin`` root logger once
- get_logger(): module-level logger accessor
- update_logger_from_config(): apply levels from settings.conf
- set_console_level(): raise or lower console verbosity (``--verbose``)
- flush_all_handlers(): drain the queue so files are complete on disk
- clear_logger_state(): reset everything between tests
"""

import atexit
import contextlib
import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING

from ghbin.logger.config import apply_levels, load_log_settings
from ghbin.logger.handlers import ROOT_LOGGER_NAME, setup_root_logger
from ghbin.logger.state import get_state

if TYPE_CHECKING:
    from ghbin.types import GlobalConfig

FLUSH_TIMEOUT_SECONDS = 5.0


def flush_all_handlers() -> None:
    """Wait for the log queue to drain, then flush every handler."""
    state = get_state()
    if state.queue_listener is None or state.log_queue is None:
        return

    # QueueListener does not call task_done(), so poll for an empty queue
    deadline = time.monotonic() + FLUSH_TIMEOUT_SECONDS
    while not state.log_queue.empty() and time.monotonic() < deadline:
        time.sleep(0.01)
    time.sleep(0.05)

    for handler in state.queue_listener.handlers:
        with contextlib.suppress(OSError, ValueError):
            handler.flush()


def _shutdown_listener() -> None:
    state = get_state()
    if state.queue_listener is not None:
        flush_all_handlers()
        state.queue_listener.stop()
        state.queue_listener = None


atexit.register(_shutdown_listener)


def setup_logging(
    name: str = ROOT_LOGGER_NAME,
    console_level: str | None = None,
    file_level: str | None = None,
    log_file: Path | None = None,
    enable_file_logging: bool = True,  # noqa: FBT001, FBT002
) -> logging.Logger:
    """Initialize the root logger if needed and return ``name``'s logger.

    Child loggers such as ``ghbin.core.install`` carry no handlers of their
    own; records propagate to ``ghbin`` and go through its queue.

    Args:
        name: Logger name, normally ``__name__``
        console_level: Console level name (bootstrap default: WARNING)
        file_level: File level name (bootstrap default: INFO)
        log_file: Log file path (default: ~/.config/ghbin/logs/ghbin.log)
        enable_file_logging: Whether to write the log file

    Returns:
        The requested logger

    Raises:
        ConfigurationError: If the log file cannot be opened

    """
    state = get_state()
    with state.lock:
        if not state.root_initialized:
            default_console, default_file, default_path = load_log_settings()
            setup_root_logger(
                state,
                console_level or default_console,
                file_level or default_file,
                log_file or default_path,
                enable_file_logging,
            )
    return logging.getLogger(name)


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Return a logger, initializing the logging system on first use.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Uploading %s", asset_name)

    """
    return setup_logging(name=name)


def update_logger_from_config(config: "GlobalConfig") -> None:
    """Apply ``log_level`` and ``console_log_level`` from loaded settings.

    Args:
        config: Loaded global configuration

    """
    state = get_state()
    apply_levels(
        state,
        console_level=config.get("console_log_level"),
        file_level=config.get("log_level"),
    )
    state.config_applied = True


def set_console_level(level: str) -> None:
    """Change only the console handler level."""
    apply_levels(get_state(), console_level=level)


def clear_logger_state() -> None:
    """Stop the listener and detach handlers from ``ghbin`` loggers.

    Logger objects stay registered, so module-level loggers keep working;
    the next ``get_logger`` call initializes the handlers again. Intended
    for tests; production code never calls this.
    """
    state = get_state()
    with state.lock:
        if state.queue_listener is not None:
            flush_all_handlers()
            state.queue_listener.stop()
            for handler in state.queue_listener.handlers:
                handler.close()
            state.queue_listener = None
        state.log_queue = None
        state.root_initialized = False
        state.config_applied = False

        for logger_name in list(logging.Logger.manager.loggerDict):
            if logger_name == ROOT_LOGGER_NAME or logger_name.startswith(
                f"{ROOT_LOGGER_NAME}."
            ):
                instance = logging.getLogger(logger_name)
                for handler in instance.handlers[:]:
                    handler.close()
                    instance.removeHandler(handler)
