"""Shared state for the ghbin logging system.

A single module-level instance tracks whether the ``ghbin`` root logger has
been wired to its queue listener, so repeated ``get_logger`` calls never
attach handlers twice.
"""

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import queue
    from logging.handlers import QueueListener


@dataclass
class LoggerState:
    """Mutable logging state guarded by ``lock``.

    Attributes:
        lock: Serializes root logger initialization and teardown
        root_initialized: Whether handlers are attached to ``ghbin``
        config_applied: Whether levels from settings.conf were applied
        queue_listener: Thread draining ``log_queue`` into the handlers
        log_queue: Queue fed by the root logger's QueueHandler

    """

    lock: threading.Lock = field(default_factory=threading.Lock)
    root_initialized: bool = False
    config_applied: bool = False
    queue_listener: "QueueListener | None" = None
    log_queue: "queue.Queue | None" = None


_state = LoggerState()


def get_state() -> LoggerState:
    """Return the process-wide logger state."""
    return _state
