"""Console formatters for ghbin.

INFO records are user-facing progress lines and print as the bare message.
Everything else prints with a timestamp, logger name and a colored level.
"""

import logging

from ghbin.constants import LOG_COLORS


class ColoredConsoleFormatter(logging.Formatter):
    """Formatter that wraps the level name in ANSI color codes."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the record with a colored level name.

        The record's ``levelname`` is swapped only for the duration of the
        call so other handlers see the original value.

        Args:
            record: The log record to format

        Returns:
            Formatted log line

        """
        color = LOG_COLORS.get(record.levelname)
        if color is None:
            return super().format(record)

        original = record.levelname
        record.levelname = f"{color}{original}{LOG_COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


class SimpleConsoleFormatter(logging.Formatter):
    """Formatter that renders only the message text."""

    def format(self, record: logging.LogRecord) -> str:
        """Return the interpolated message without metadata."""
        return record.getMessage()


class HybridConsoleFormatter(logging.Formatter):
    """Plain message for INFO, colored structured line for other levels.

    Example Output:
        INFO:     "📦 Uploaded ghbin-x86_64-unknown-linux-gnu-v1.0.tar.gz"
        WARNING:  "12:30:45 - ghbin.core.retry - WARNING - Attempt 1/4 ..."

    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
    ) -> None:
        """Initialize with the structured format used for non-INFO levels.

        Args:
            fmt: Format string for structured messages
            datefmt: Date format string for timestamps

        """
        super().__init__(fmt, datefmt)
        self._simple = SimpleConsoleFormatter()
        self._structured = ColoredConsoleFormatter(fmt, datefmt)

    def format(self, record: logging.LogRecord) -> str:
        """Pick the simple or structured formatter based on level."""
        if record.levelno == logging.INFO:
            return self._simple.format(record)
        return self._structured.format(record)
