"""Retry policy and exponential backoff for HTTP operations.

Every request primitive in :mod:`ghbin.core.github.client` reports failures
as :class:`~ghbin.exceptions.TransportError`, which carries its own
``retryable`` flag. :func:`with_retry` only looks at that flag; it never
inspects library-specific exception types.

Retryable:
    - connection errors and timeouts (no response received)
    - HTTP 5xx and 429

Terminal:
    - any other 4xx (bad request, auth failure, not found, ...)
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import aiohttp

from ghbin.constants import (
    DEFAULT_BACKOFF_MULTIPLIER,
    DEFAULT_INITIAL_INTERVAL,
    DEFAULT_MAX_ELAPSED,
    DEFAULT_MAX_INTERVAL,
    DEFAULT_RETRY_ATTEMPTS,
    HTTP_SERVER_ERROR,
    HTTP_TOO_MANY_REQUESTS,
)
from ghbin.exceptions import RetryExhaustedError, TransportError
from ghbin.logger import get_logger
from ghbin.types import NetworkConfig

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Backoff schedule for transient failures.

    Attributes:
        max_retries: Retries after the first attempt (total = 1 + this)
        initial_interval: Delay in seconds before the first retry
        max_interval: Cap on any single delay
        multiplier: Growth factor between consecutive delays
        max_elapsed: Overall deadline in seconds, or None for no deadline

    """

    max_retries: int = DEFAULT_RETRY_ATTEMPTS
    initial_interval: float = DEFAULT_INITIAL_INTERVAL
    max_interval: float = DEFAULT_MAX_INTERVAL
    multiplier: float = DEFAULT_BACKOFF_MULTIPLIER
    max_elapsed: float | None = DEFAULT_MAX_ELAPSED

    @classmethod
    def disabled(cls) -> "RetryPolicy":
        """Return a policy that makes exactly one attempt."""
        return cls(
            max_retries=0,
            initial_interval=0.0,
            max_interval=0.0,
            max_elapsed=0.0,
        )

    @classmethod
    def from_config(cls, network: NetworkConfig) -> "RetryPolicy":
        """Build a policy from the ``[network]`` config section.

        A ``max_elapsed`` of 0 means no overall deadline.
        """
        max_elapsed = network["max_elapsed"]
        return cls(
            max_retries=network["retry_attempts"],
            initial_interval=network["initial_interval"],
            max_interval=network["max_interval"],
            max_elapsed=max_elapsed if max_elapsed > 0 else None,
        )

    @property
    def max_attempts(self) -> int:
        """Total number of attempts, including the first."""
        return self.max_retries + 1

    def delay_for(self, retry_number: int) -> float:
        """Return the delay before retry ``retry_number`` (1-based)."""
        delay = self.initial_interval * self.multiplier ** (retry_number - 1)
        return min(delay, self.max_interval)


def is_retryable_status(status: int) -> bool:
    """Return True for server errors and rate limiting."""
    return status >= HTTP_SERVER_ERROR or status == HTTP_TOO_MANY_REQUESTS


def error_from_status(status: int, message: str) -> TransportError:
    """Classify an HTTP error response."""
    return TransportError(
        f"HTTP {status}: {message}",
        status=status,
        retryable=is_retryable_status(status),
    )


def error_from_exception(exc: BaseException) -> TransportError:
    """Classify a failure where no usable response was received.

    aiohttp raises ``ClientResponseError`` for ``raise_for_status``; those
    keep their status. Connection problems, payload errors and timeouts
    are transient.
    """
    if isinstance(exc, aiohttp.ClientResponseError):
        return error_from_status(exc.status, exc.message)
    if isinstance(exc, TimeoutError):
        return TransportError("request timed out", retryable=True)
    return TransportError(
        f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__,
        retryable=True,
    )


async def with_retry(
    operation_name: str,
    policy: RetryPolicy,
    operation: Callable[[], Awaitable[T]],
) -> T:
    """Run ``operation`` until it succeeds or the policy gives up.

    Args:
        operation_name: Name used in logs and in the raised error
        policy: Attempt budget and backoff schedule
        operation: Zero-argument coroutine factory; called once per attempt

    Returns:
        The operation's result

    Raises:
        RetryExhaustedError: On a terminal failure, or when retryable
            failures exhaust the attempt budget or the deadline
        Exception: Anything that is not a TransportError propagates
            unchanged on the first occurrence

    """
    started = time.monotonic()
    attempt = 0

    while True:
        attempt += 1
        try:
            result = await operation()
        except TransportError as e:
            if not e.retryable:
                logger.debug(
                    "%s failed with terminal error: %s", operation_name, e
                )
                raise RetryExhaustedError(operation_name, e, attempt) from e

            if attempt >= policy.max_attempts:
                logger.warning(
                    "%s failed after %d attempts: %s",
                    operation_name,
                    attempt,
                    e.message,
                )
                raise RetryExhaustedError(operation_name, e, attempt) from e

            delay = policy.delay_for(attempt)
            elapsed = time.monotonic() - started
            if (
                policy.max_elapsed is not None
                and elapsed + delay > policy.max_elapsed
            ):
                logger.warning(
                    "%s gave up after %.1fs (deadline %.1fs): %s",
                    operation_name,
                    elapsed,
                    policy.max_elapsed,
                    e.message,
                )
                raise RetryExhaustedError(operation_name, e, attempt) from e

            logger.warning(
                "Attempt %d/%d for %s failed: %s. Retrying in %.1fs",
                attempt,
                policy.max_attempts,
                operation_name,
                e.message,
                delay,
            )
            await asyncio.sleep(delay)
        else:
            if attempt > 1:
                logger.info(
                    "%s succeeded on attempt %d", operation_name, attempt
                )
            return result
