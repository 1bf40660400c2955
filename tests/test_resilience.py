"""Tests for request retry with backoff."""

from __future__ import annotations

import asyncio

import aiohttp
import pytest

from chain_reader.source.resilience import RetryConfig, is_retryable, retry_with_backoff

NO_WAIT = RetryConfig(max_retries=3, backoff_base=0.0, backoff_max=0.0)


class StatusError(Exception):
    def __init__(self, status: int) -> None:
        super().__init__(f"HTTP {status}")
        self.status = status


class TestRetryWithBackoff:
    """Tests for retry_with_backoff."""

    async def test_succeeds_after_transient_failures(self) -> None:
        """Test transient errors are retried."""
        attempts = []

        async def flaky() -> str:
            attempts.append(1)
            if len(attempts) < 3:
                raise aiohttp.ClientConnectionError("reset")
            return "ok"

        assert await retry_with_backoff(flaky, config=NO_WAIT) == "ok"
        assert len(attempts) == 3

    async def test_gives_up_after_max_retries(self) -> None:
        """Test the last error is raised once retries run out."""
        attempts = []

        async def down() -> None:
            attempts.append(1)
            raise asyncio.TimeoutError()

        with pytest.raises(asyncio.TimeoutError):
            await retry_with_backoff(down, config=NO_WAIT)

        assert len(attempts) == 4

    async def test_non_retryable_raises_immediately(self) -> None:
        """Test permanent errors are not retried."""
        attempts = []

        async def bad_request() -> None:
            attempts.append(1)
            raise StatusError(400)

        with pytest.raises(StatusError):
            await retry_with_backoff(bad_request, config=NO_WAIT)

        assert len(attempts) == 1

    async def test_passes_arguments(self) -> None:
        """Test positional and keyword arguments reach the function."""

        async def add(a: int, b: int = 0) -> int:
            return a + b

        assert await retry_with_backoff(add, 2, b=3, config=NO_WAIT) == 5

    def test_is_retryable(self) -> None:
        """Test classification by exception type and status."""
        config = RetryConfig()

        assert is_retryable(StatusError(429), config)
        assert is_retryable(StatusError(503), config)
        assert not is_retryable(StatusError(404), config)
        assert is_retryable(aiohttp.ClientConnectionError(), config)
        assert not is_retryable(ValueError("bad"), config)
