"""Base command handler for ghbin CLI commands.

This module provides the abstract base class that all command handlers
inherit from, ensuring consistent interface and shared functionality
across commands.
"""

from abc import ABC, abstractmethod
from argparse import Namespace
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from ghbin.config import GlobalConfig, GlobalConfigManager
from ghbin.core.auth import KeyringTokenStore
from ghbin.core.github import ReleaseClient
from ghbin.core.http_session import create_http_session
from ghbin.core.retry import RetryPolicy
from ghbin.logger import get_logger

logger = get_logger(__name__)


class BaseCommandHandler(ABC):
    """Abstract base class for all command handlers.

    CLIRunner acts as the composition root: it loads the configuration,
    resolves the token once and builds the retry policy, then injects them
    here. Handlers build their own orchestrators from these.

    Usage:
        config_manager = GlobalConfigManager()
        handler = ConcreteHandler(
            config_manager=config_manager,
            global_config=config_manager.load_global_config(),
            token=None,
            retry_policy=RetryPolicy(),
        )
        await handler.execute(args)

    """

    def __init__(
        self,
        config_manager: GlobalConfigManager,
        global_config: GlobalConfig,
        token: str | None,
        retry_policy: RetryPolicy,
        token_store: KeyringTokenStore | None = None,
    ) -> None:
        """Initialize the command handler with shared dependencies.

        Args:
            config_manager: Configuration management instance
            global_config: Loaded global configuration
            token: GitHub token for this run, or None
            retry_policy: Backoff policy for every request
            token_store: Keyring store (default: the ghbin service entry)

        """
        self.config_manager = config_manager
        self.global_config = global_config
        self.token = token
        self.retry_policy = retry_policy
        self.token_store = token_store or KeyringTokenStore()

    @abstractmethod
    async def execute(self, args: Namespace) -> None:
        """Execute the command with the given arguments.

        Args:
            args: Parsed command-line arguments

        This method must be implemented by all concrete command handlers.

        """

    @asynccontextmanager
    async def release_client(self) -> AsyncIterator[ReleaseClient]:
        """Open an HTTP session and yield a client bound to it."""
        async with create_http_session(self.global_config["network"]) as s:
            yield ReleaseClient(
                s, token=self.token, retry_policy=self.retry_policy
            )
