"""Shared fixtures for core tests.

Provides aiohttp response doubles and sample releases used by the client
and orchestrator tests.
"""

from collections.abc import AsyncIterator, Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import orjson
import pytest

from ghbin.core.github import Asset, Release
from ghbin.core.retry import RetryPolicy

DOWNLOAD_BASE = "https://github.com/o/r/releases/download/v1"
API_ASSETS = "https://api.github.com/repos/o/r/releases/assets"


async def _chunks(chunks: list[bytes]) -> AsyncIterator[bytes]:
    for chunk in chunks:
        yield chunk


@pytest.fixture
def async_chunk_gen() -> Callable[[list[bytes]], AsyncIterator[bytes]]:
    """Return a helper that turns a list of chunks into an async iterator."""
    return _chunks


@pytest.fixture
def make_response() -> Callable[..., AsyncMock]:
    """Return a factory for aiohttp response doubles.

    The double works as ``async with session.request(...) as response``.
    ``json`` is encoded with orjson; ``body`` is used verbatim; ``chunks``
    feed ``content.iter_chunked``.
    """

    def factory(
        status: int = 200,
        json: Any = None,
        body: bytes = b"",
        chunks: list[bytes] | None = None,
        headers: dict[str, str] | None = None,
        reason: str = "",
    ) -> AsyncMock:
        response = AsyncMock()
        response.__aenter__.return_value = response
        response.__aexit__.return_value = None
        response.status = status
        response.reason = reason
        response.headers = headers or {}
        raw = orjson.dumps(json) if json is not None else body
        response.read = AsyncMock(return_value=raw)
        response.content.iter_chunked = lambda size: _chunks(
            chunks if chunks is not None else [raw]
        )
        return response

    return factory


@pytest.fixture
def mock_session() -> MagicMock:
    """Provide a mock aiohttp.ClientSession.

    Tests set ``mock_session.request.return_value`` or ``side_effect``.
    """
    return MagicMock()


@pytest.fixture
def fast_policy() -> RetryPolicy:
    """Retry policy with three retries and no waiting."""
    return RetryPolicy(
        max_retries=3,
        initial_interval=0.0,
        max_interval=0.0,
        max_elapsed=None,
    )


@pytest.fixture
def make_asset() -> Callable[..., Asset]:
    """Return a factory for assets with predictable ids and URLs."""

    def factory(name: str, asset_id: int = 1, size: int = 10) -> Asset:
        return Asset(
            id=asset_id,
            name=name,
            size=size,
            browser_download_url=f"{DOWNLOAD_BASE}/{name}",
            url=f"{API_ASSETS}/{asset_id}",
        )

    return factory


@pytest.fixture
def sample_release(make_asset: Callable[..., Asset]) -> Release:
    """Release v1.0.0 with two platform archives and a manifest."""
    return Release(
        id=42,
        tag_name="v1.0.0",
        name="v1.0.0",
        body="Notes for v1.0.0",
        html_url="https://github.com/o/r/releases/tag/v1.0.0",
        assets=[
            make_asset("r-x86_64-unknown-linux-gnu-v1.0.0.tar.gz", 1),
            make_asset("r-aarch64-apple-darwin-v1.0.0.tar.gz", 2),
            make_asset("SHA256SUMS", 3),
        ],
    )
