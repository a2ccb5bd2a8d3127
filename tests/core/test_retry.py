"""Tests for the retry policy and the with_retry wrapper."""

from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from ghbin.core.retry import (
    RetryPolicy,
    error_from_exception,
    error_from_status,
    is_retryable_status,
    with_retry,
)
from ghbin.exceptions import RetryExhaustedError, TransportError


def test_delay_schedule_is_capped() -> None:
    """Test delays grow geometrically and never exceed max_interval."""
    policy = RetryPolicy(
        max_retries=5, initial_interval=1.0, max_interval=5.0, multiplier=2.0
    )

    assert [policy.delay_for(n) for n in range(1, 6)] == [
        1.0,
        2.0,
        4.0,
        5.0,
        5.0,
    ]


def test_disabled_policy_makes_one_attempt() -> None:
    """Test the disabled policy allows exactly one attempt."""
    assert RetryPolicy.disabled().max_attempts == 1


def test_from_config_zero_elapsed_means_no_deadline() -> None:
    """Test max_elapsed 0 in settings disables the overall deadline."""
    policy = RetryPolicy.from_config(
        {
            "retry_attempts": 2,
            "initial_interval": 0.5,
            "max_interval": 4.0,
            "max_elapsed": 0.0,
            "timeout_seconds": 30,
        }
    )

    assert policy.max_attempts == 3
    assert policy.initial_interval == 0.5
    assert policy.max_elapsed is None


@pytest.mark.parametrize(
    ("status", "retryable"),
    [(500, True), (502, True), (503, True), (429, True), (404, False),
     (403, False), (422, False)],
)
def test_is_retryable_status(status: int, retryable: bool) -> None:
    """Test 5xx and 429 are transient, other client errors are not."""
    assert is_retryable_status(status) is retryable


def test_error_from_status_message() -> None:
    """Test the status and message end up in the TransportError."""
    error = error_from_status(503, "Service Unavailable")

    assert error.status == 503
    assert error.retryable
    assert "HTTP 503: Service Unavailable" in error.message


def test_error_from_exception_classification() -> None:
    """Test timeouts and connection errors are retryable."""
    timeout = error_from_exception(TimeoutError())
    connection = error_from_exception(
        aiohttp.ClientConnectionError("connection reset")
    )

    assert timeout.retryable
    assert timeout.status is None
    assert connection.retryable
    assert "connection reset" in connection.message


@pytest.mark.asyncio
async def test_with_retry_success_first_attempt(
    fast_policy: RetryPolicy,
) -> None:
    """Test a successful operation runs once."""
    operation = AsyncMock(return_value="ok")

    assert await with_retry("op", fast_policy, operation) == "ok"
    assert operation.await_count == 1


@pytest.mark.asyncio
async def test_with_retry_recovers_from_transient_errors(
    fast_policy: RetryPolicy,
) -> None:
    """Test transient failures are retried until success."""
    operation = AsyncMock(
        side_effect=[
            TransportError("HTTP 502", 502, retryable=True),
            TransportError("reset", retryable=True),
            "done",
        ]
    )

    assert await with_retry("op", fast_policy, operation) == "done"
    assert operation.await_count == 3


@pytest.mark.asyncio
async def test_with_retry_terminal_error_is_not_retried(
    fast_policy: RetryPolicy,
) -> None:
    """Test a non-retryable failure stops after one attempt."""
    operation = AsyncMock(side_effect=TransportError("HTTP 404", 404))

    with pytest.raises(RetryExhaustedError) as exc_info:
        await with_retry("get release", fast_policy, operation)

    assert operation.await_count == 1
    assert exc_info.value.status == 404
    assert exc_info.value.attempts == 1
    assert exc_info.value.target == "get release"


@pytest.mark.asyncio
async def test_with_retry_exhausts_attempt_budget(
    fast_policy: RetryPolicy,
) -> None:
    """Test retries stop after max_retries + 1 attempts."""
    operation = AsyncMock(
        side_effect=TransportError("HTTP 500", 500, retryable=True)
    )

    with pytest.raises(RetryExhaustedError, match="after 4 attempts"):
        await with_retry("upload", fast_policy, operation)

    assert operation.await_count == 4


@pytest.mark.asyncio
async def test_with_retry_respects_deadline() -> None:
    """Test no retry is scheduled past the overall deadline."""
    policy = RetryPolicy(
        max_retries=10,
        initial_interval=5.0,
        max_interval=5.0,
        max_elapsed=1.0,
    )
    operation = AsyncMock(
        side_effect=TransportError("HTTP 503", 503, retryable=True)
    )

    with patch("ghbin.core.retry.asyncio.sleep") as mock_sleep:
        with pytest.raises(RetryExhaustedError):
            await with_retry("op", policy, operation)

    assert operation.await_count == 1
    mock_sleep.assert_not_called()


@pytest.mark.asyncio
async def test_with_retry_sleeps_between_attempts() -> None:
    """Test the backoff delays are awaited in order."""
    policy = RetryPolicy(
        max_retries=2,
        initial_interval=1.0,
        max_interval=10.0,
        multiplier=3.0,
        max_elapsed=None,
    )
    operation = AsyncMock(
        side_effect=TransportError("HTTP 500", 500, retryable=True)
    )

    with patch(
        "ghbin.core.retry.asyncio.sleep", new_callable=AsyncMock
    ) as mock_sleep:
        with pytest.raises(RetryExhaustedError):
            await with_retry("op", policy, operation)

    assert operation.await_count == 3
    assert [c.args[0] for c in mock_sleep.await_args_list] == [1.0, 3.0]


@pytest.mark.asyncio
async def test_with_retry_propagates_other_exceptions(
    fast_policy: RetryPolicy,
) -> None:
    """Test exceptions that are not TransportError pass through unchanged."""
    operation = AsyncMock(side_effect=ValueError("bug"))

    with pytest.raises(ValueError, match="bug"):
        await with_retry("op", fast_policy, operation)

    assert operation.await_count == 1


@pytest.mark.asyncio
async def test_with_retry_logs_each_retry(
    fast_policy: RetryPolicy, caplog: pytest.LogCaptureFixture
) -> None:
    """Test a warning is logged for every retried attempt."""
    operation = AsyncMock(
        side_effect=[TransportError("HTTP 502", 502, retryable=True), 1]
    )

    await with_retry("list assets", fast_policy, operation)

    assert "Attempt 1/4 for list assets failed" in caplog.text
