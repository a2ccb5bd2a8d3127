"""Logging utilities for ghbin.

Architecture:
    Application → QueueHandler → Queue → QueueListener Thread
                                              ↓
                                    Console + File Handlers

Usage:
    >>> from ghbin.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Building %s", target)  # %-style, never f-strings

Rules:
    1. Always use ``logger = get_logger(__name__)``
    2. Never call ``logging.basicConfig()``
    3. Handlers live only on the ``ghbin`` logger
"""

from ghbin.logger.formatters import (
    ColoredConsoleFormatter,
    HybridConsoleFormatter,
    SimpleConsoleFormatter,
)
from ghbin.logger.logger import (
    clear_logger_state,
    flush_all_handlers,
    get_logger,
    set_console_level,
    setup_logging,
    update_logger_from_config,
)
from ghbin.logger.state import get_state

__all__ = [
    "ColoredConsoleFormatter",
    "HybridConsoleFormatter",
    "SimpleConsoleFormatter",
    "clear_logger_state",
    "flush_all_handlers",
    "get_logger",
    "get_state",
    "set_console_level",
    "setup_logging",
    "update_logger_from_config",
]
