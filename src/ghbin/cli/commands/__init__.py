"""Command handlers for ghbin CLI.

This module contains all command handler implementations that provide
the core functionality for each CLI command.
"""

from .base import BaseCommandHandler
from .install import InstallHandler
from .publish import PublishHandler
from .token import TokenHandler

__all__ = [
    "BaseCommandHandler",
    "InstallHandler",
    "PublishHandler",
    "TokenHandler",
]
