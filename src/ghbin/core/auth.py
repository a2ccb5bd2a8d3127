"""GitHub token handling and rate-limit tracking.

The token is resolved exactly once at startup (``--token`` flag, then the
``GITHUB_TOKEN`` environment variable, then the system keyring) and handed
to the release client. Nothing below the CLI reads the environment.
"""

import os
import re
import time
from collections.abc import Mapping

import keyring
import keyring.errors
from keyring.backends import fail

from ghbin.constants import (
    KEYRING_SERVICE,
    RATE_LIMIT_WARNING_THRESHOLD,
    TOKEN_ENV_VAR,
)
from ghbin.exceptions import GhbinError
from ghbin.logger import get_logger

logger = get_logger(__name__)

# GitHub token security constraints
MAX_TOKEN_LENGTH: int = 255

_PREFIXED_TOKEN_PATTERNS = (
    r"^ghp_[A-Za-z0-9_]{36,251}$",  # Personal Access Tokens
    r"^gho_[A-Za-z0-9_]{36,251}$",  # OAuth Access tokens
    r"^ghu_[A-Za-z0-9_]{36,251}$",  # GitHub App user-to-server tokens
    r"^ghs_[A-Za-z0-9_]{36,251}$",  # GitHub App server-to-server tokens
    r"^ghr_[A-Za-z0-9_]{36,251}$",  # GitHub App refresh tokens
    r"^github_pat_[A-Za-z0-9_]{36,243}$",  # Fine-grained PATs
)


class KeyringUnavailableError(GhbinError):
    """Raised when no usable keyring backend exists."""

    error_prefix = "Keyring unavailable"


class KeyringAccessError(GhbinError):
    """Raised when the keyring rejects a read or write."""

    error_prefix = "Keyring access failed"


def validate_github_token(token: str | None) -> bool:
    """Validate GitHub token format.

    Accepts classic 40-hex tokens and the prefixed formats (``ghp_``,
    ``gho_``, ``ghu_``, ``ghs_``, ``ghr_``, ``github_pat_``).

    Args:
        token: The token to validate. ``None`` is invalid.

    Returns:
        True if the token format is valid, False otherwise.

    """
    if not token:
        return False

    token = token.strip()
    if not token or len(token) > MAX_TOKEN_LENGTH:
        return False

    if re.match(r"^[a-f0-9]{40}$", token):
        return True

    return any(
        re.match(pattern, token) for pattern in _PREFIXED_TOKEN_PATTERNS
    )


class KeyringTokenStore:
    """Token storage in the system keyring.

    Uses whatever backend :mod:`keyring` selects (SecretService on Linux,
    Keychain on macOS, Credential Manager on Windows).
    """

    def __init__(
        self, service: str = KEYRING_SERVICE, username: str = "token"
    ) -> None:
        """Initialize the store.

        Args:
            service: The service name for keyring storage.
            username: The username for keyring storage.

        """
        self.service = service
        self.username = username

    def is_available(self) -> bool:
        """Return False when keyring fell back to its failing backend."""
        return not isinstance(keyring.get_keyring(), fail.Keyring)

    def get(self) -> str | None:
        """Return the stored token, or None if absent or unreadable."""
        if not self.is_available():
            logger.debug("No keyring backend available")
            return None
        try:
            token = keyring.get_password(self.service, self.username)
        except Exception:  # noqa: BLE001
            # Backends raise their own errors in headless sessions.
            # Security: don't log exception details
            logger.debug("Keyring access failed")
            return None
        if token:
            logger.debug("GitHub token retrieved from keyring (value hidden)")
        return token or None

    def set(self, token: str) -> None:
        """Store ``token``.

        Raises:
            KeyringUnavailableError: If no keyring backend exists
            KeyringAccessError: If the backend rejects the write

        """
        if not self.is_available():
            msg = "no keyring backend; use the GITHUB_TOKEN variable instead"
            raise KeyringUnavailableError(msg)
        try:
            keyring.set_password(self.service, self.username, token)
        except keyring.errors.KeyringError as e:
            raise KeyringAccessError(str(e)) from e
        logger.debug("Token saved to keyring")

    def delete(self) -> bool:
        """Remove the stored token.

        Returns:
            True if a token was removed, False if none was stored

        Raises:
            KeyringAccessError: If the backend rejects the deletion

        """
        try:
            keyring.delete_password(self.service, self.username)
        except keyring.errors.PasswordDeleteError:
            logger.debug("No token found in keyring to delete")
            return False
        except keyring.errors.KeyringError as e:
            raise KeyringAccessError(str(e)) from e
        logger.debug("Token removed from keyring")
        return True


def resolve_token(
    explicit: str | None = None,
    environ: Mapping[str, str] | None = None,
    store: KeyringTokenStore | None = None,
) -> str | None:
    """Return the token to use for this run, or None.

    Order: explicit value, ``GITHUB_TOKEN``, keyring. A token whose format
    looks wrong is still used but logged as a warning, since GitHub has
    changed token formats before.

    Args:
        explicit: Value of ``--token``
        environ: Environment mapping (default: ``os.environ``)
        store: Keyring store consulted last

    Returns:
        The token, or None when unauthenticated

    """
    environ = os.environ if environ is None else environ

    candidates = (
        ("--token", explicit),
        (TOKEN_ENV_VAR, environ.get(TOKEN_ENV_VAR)),
    )
    for source, value in candidates:
        if value and value.strip():
            token = value.strip()
            break
    else:
        source = "keyring"
        token = (store or KeyringTokenStore()).get()

    if token is None:
        logger.debug("No GitHub token configured")
        return None

    if not validate_github_token(token):
        logger.warning("GitHub token from %s has an unexpected format", source)
    logger.debug("Using GitHub token from %s", source)
    return token


class RateLimitTracker:
    """Remembers GitHub's rate-limit headers from the latest response."""

    def __init__(self) -> None:
        """Initialize with nothing known."""
        self.remaining: int | None = None
        self.reset_time: int | None = None

    def update(self, headers: Mapping[str, str]) -> None:
        """Record ``X-RateLimit-Remaining`` and ``X-RateLimit-Reset``."""
        remaining = headers.get("X-RateLimit-Remaining")
        reset = headers.get("X-RateLimit-Reset")
        if remaining is None:
            return
        try:
            self.remaining = int(remaining)
            self.reset_time = int(reset) if reset is not None else None
        except ValueError:
            logger.warning("Invalid rate limit headers received")
            return

        if self.remaining < RATE_LIMIT_WARNING_THRESHOLD:
            logger.warning(
                "GitHub API rate limit low: %d requests left, resets in %ds",
                self.remaining,
                self.reset_in_seconds(),
            )

    def is_exhausted(self) -> bool:
        """Return True when the last response reported zero remaining."""
        return self.remaining == 0

    def reset_in_seconds(self) -> int:
        """Seconds until the quota resets (0 when unknown or past)."""
        if self.reset_time is None:
            return 0
        return max(self.reset_time - int(time.time()), 0)
