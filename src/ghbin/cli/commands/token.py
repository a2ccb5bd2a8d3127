"""Token command handler for ghbin CLI.

Saves, removes and reports the GitHub token kept in the system keyring.
"""

import getpass
import os
import sys
from argparse import Namespace

from ghbin.constants import TOKEN_ENV_VAR
from ghbin.core.auth import MAX_TOKEN_LENGTH, validate_github_token
from ghbin.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


class TokenHandler(BaseCommandHandler):
    """Handler for token command operations."""

    async def execute(self, args: Namespace) -> None:
        """Execute the token command."""
        if args.save:
            logger.info("Saving GitHub token...")
            self._save_token()
        elif args.remove:
            logger.info("Removing GitHub token...")
            self._remove_token()
        elif args.status:
            self._show_status()

    def _save_token(self) -> None:
        """Prompt for a token twice, validate it and store it.

        Raises:
            KeyringUnavailableError: If no keyring backend exists
            KeyringAccessError: If the keyring rejects the write

        """
        try:
            token, confirm_token = self._prompt_for_token()
            self._validate_token_confirmation(token, confirm_token)
        except (EOFError, KeyboardInterrupt):
            logger.error("Token input aborted by user")  # noqa: TRY400
            sys.exit(1)
        except ValueError as e:
            print(f"❌ {e}")
            sys.exit(1)

        self.token_store.set(token)
        print("✅ GitHub token saved to the keyring")

    def _remove_token(self) -> None:
        """Delete the stored token; a missing token is reported, not fatal."""
        if self.token_store.delete():
            print("✅ GitHub token removed from the keyring")
        else:
            print("ℹ️  No GitHub token found in the keyring")
            print("   Tip: use 'ghbin token --save' to save one first.")

    def _show_status(self) -> None:
        if not self.token_store.is_available():
            keyring_state = "unavailable"
        elif self.token_store.get():
            keyring_state = "token stored"
        else:
            keyring_state = "no token stored"

        print(f"Keyring: {keyring_state}")
        print(
            f"{TOKEN_ENV_VAR}: "
            + ("set" if os.environ.get(TOKEN_ENV_VAR) else "not set")
        )
        print(
            "Active token: "
            + ("configured" if self.token else "none (anonymous requests)")
        )

    @staticmethod
    def _prompt_for_token() -> tuple[str, str]:
        """Prompt user for token input and confirmation.

        Raises:
            ValueError: If the input is empty or too long.

        """
        token = getpass.getpass(
            prompt="Enter your GitHub token (input hidden): "
        ).strip()
        if not token:
            msg = "Token cannot be empty"
            raise ValueError(msg)
        if len(token) > MAX_TOKEN_LENGTH:
            msg = (
                f"Token exceeds maximum allowed length "
                f"({MAX_TOKEN_LENGTH} characters)"
            )
            raise ValueError(msg)

        confirm_token = getpass.getpass(
            prompt="Confirm your GitHub token: "
        ).strip()
        return token, confirm_token

    @staticmethod
    def _validate_token_confirmation(token: str, confirm_token: str) -> None:
        """Validate token confirmation matches original token.

        Raises:
            ValueError: If tokens don't match or the format is invalid.

        """
        if token != confirm_token:
            msg = "Token confirmation does not match"
            raise ValueError(msg)

        if not validate_github_token(token):
            msg = (
                "Invalid GitHub token format. "
                "Must be a valid GitHub token (classic or fine-grained PAT)."
            )
            raise ValueError(msg)
