"""HTTP session utilities for ghbin.

This module provides utilities for creating configured HTTP sessions
with proper timeout and connection settings.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiohttp

from ghbin.constants import (
    DEFAULT_CONNECTION_LIMIT,
    DEFAULT_TIMEOUT_SECONDS,
    USER_AGENT,
)
from ghbin.types import NetworkConfig


def build_timeout(timeout_seconds: int) -> aiohttp.ClientTimeout:
    """Derive per-request timeouts from the configured base value.

    The total budget is generous because release assets can be large;
    the retry deadline in :class:`~ghbin.core.retry.RetryPolicy` bounds
    the overall wall-clock time.
    """
    return aiohttp.ClientTimeout(
        total=timeout_seconds * 60,
        sock_read=timeout_seconds * 3,
        sock_connect=timeout_seconds,
    )


@asynccontextmanager
async def create_http_session(
    network_config: NetworkConfig | None = None,
) -> AsyncIterator[aiohttp.ClientSession]:
    """Create configured HTTP session.

    Args:
        network_config: The ``[network]`` config section

    Yields:
        Configured aiohttp.ClientSession

    """
    timeout_seconds = (
        network_config["timeout_seconds"]
        if network_config
        else DEFAULT_TIMEOUT_SECONDS
    )
    connector = aiohttp.TCPConnector(limit=DEFAULT_CONNECTION_LIMIT)

    async with aiohttp.ClientSession(
        timeout=build_timeout(timeout_seconds),
        connector=connector,
        headers={"User-Agent": USER_AGENT},
    ) as session:
        yield session
