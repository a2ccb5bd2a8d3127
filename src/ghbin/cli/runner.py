"""CLI runner for ghbin.

Composition root: loads the settings, resolves the token once, builds the
retry policy and routes parsed arguments to the matching command handler.
"""

import sys
from argparse import Namespace
from collections.abc import Sequence

from ghbin import __version__
from ghbin.config import GlobalConfig, GlobalConfigManager
from ghbin.core.auth import KeyringTokenStore, resolve_token
from ghbin.core.retry import RetryPolicy
from ghbin.exceptions import GhbinError
from ghbin.logger import (
    get_logger,
    set_console_level,
    update_logger_from_config,
)

from .commands import (
    BaseCommandHandler,
    InstallHandler,
    PublishHandler,
    TokenHandler,
)
from .parser import CLIParser

logger = get_logger(__name__)

COMMAND_HANDLERS: dict[str, type[BaseCommandHandler]] = {
    "publish": PublishHandler,
    "install": InstallHandler,
    "token": TokenHandler,
}


def build_retry_policy(args: Namespace, config: GlobalConfig) -> RetryPolicy:
    """Return the policy from ``[network]``, adjusted by retry flags."""
    if args.no_retry:
        return RetryPolicy.disabled()
    policy = RetryPolicy.from_config(config["network"])
    if args.max_retries is not None:
        return RetryPolicy(
            max_retries=args.max_retries,
            initial_interval=policy.initial_interval,
            max_interval=policy.max_interval,
            multiplier=policy.multiplier,
            max_elapsed=policy.max_elapsed,
        )
    return policy


class CLIRunner:
    """CLI command runner and orchestrator."""

    def __init__(self, token_store: KeyringTokenStore | None = None) -> None:
        """Initialize CLI runner.

        Args:
            token_store: Keyring store shared by token resolution and the
                token command

        """
        self.token_store = token_store or KeyringTokenStore()

    async def run(self, argv: Sequence[str] | None = None) -> None:
        """Run the CLI application.

        Parses arguments, handles global flags and routes to the
        appropriate handler. A GhbinError is printed as ``❌ message``
        and exits with status 1.
        """
        args = CLIParser().parse_args(argv)

        if args.version:
            print(__version__)
            return

        if not args.command:
            print("❌ No command specified. Use --help.")
            sys.exit(1)

        try:
            await self._execute_command(args)
        except KeyboardInterrupt:
            print("\n⏹️  Operation cancelled by user")
            sys.exit(1)
        except GhbinError as e:
            logger.debug("Command %s failed", args.command, exc_info=True)
            print(f"❌ {e}")
            sys.exit(1)

    def _create_handler(
        self,
        args: Namespace,
        config_manager: GlobalConfigManager,
        global_config: GlobalConfig,
    ) -> BaseCommandHandler:
        """Build the handler for ``args.command`` with its dependencies."""
        handler_class = COMMAND_HANDLERS[args.command]
        token = resolve_token(args.token, store=self.token_store)
        return handler_class(
            config_manager=config_manager,
            global_config=global_config,
            token=token,
            retry_policy=build_retry_policy(args, global_config),
            token_store=self.token_store,
        )

    async def _execute_command(self, args: Namespace) -> None:
        """Load settings and execute the specified command."""
        config_manager = GlobalConfigManager(settings_file=args.config)
        global_config = config_manager.load_global_config()
        update_logger_from_config(global_config)

        if args.verbose:
            set_console_level("DEBUG")

        handler = self._create_handler(args, config_manager, global_config)
        logger.debug("Running %s", args.command)
        await handler.execute(args)
