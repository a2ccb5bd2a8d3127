"""Log level configuration for ghbin.

Bootstrap levels are hardcoded so the logger works before settings.conf is
read; :func:`apply_levels` later moves the handlers to configured levels.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

from ghbin.constants import (
    DEFAULT_CONFIG_SUBDIR,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    LOG_DIR_ENV_VAR,
    LOG_FILE_NAME,
)
from ghbin.logger.state import LoggerState


def default_log_file() -> Path:
    """Return the log file path.

    ``GHBIN_LOG_DIR`` overrides the directory; the test suite points it at
    a temporary directory so runs never touch ``~/.config/ghbin/logs``.
    """
    env_log_dir = os.getenv(LOG_DIR_ENV_VAR)
    if env_log_dir:
        return Path(env_log_dir).expanduser() / LOG_FILE_NAME
    return Path.home() / ".config" / DEFAULT_CONFIG_SUBDIR / "logs" / (
        LOG_FILE_NAME
    )


def load_log_settings() -> tuple[str, str, Path]:
    """Return bootstrap (console_level, file_level, log_file)."""
    return DEFAULT_CONSOLE_LOG_LEVEL, DEFAULT_LOG_LEVEL, default_log_file()


def apply_levels(
    state: LoggerState,
    console_level: str | None = None,
    file_level: str | None = None,
) -> None:
    """Update handler levels on the running queue listener.

    Only levels change; handlers are never added or removed here. A level
    of None leaves that handler untouched.

    Args:
        state: Shared logger state
        console_level: New console level name
        file_level: New file level name

    """
    if state.queue_listener is None:
        return

    for handler in state.queue_listener.handlers:
        if isinstance(handler, RotatingFileHandler):
            if file_level:
                handler.setLevel(getattr(logging, file_level, logging.INFO))
        elif isinstance(handler, logging.StreamHandler) and console_level:
            handler.setLevel(getattr(logging, console_level, logging.WARNING))
