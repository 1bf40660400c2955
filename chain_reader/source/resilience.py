"""Retry utilities for node requests.

Retries transient transport failures (connection errors, timeouts,
429 and 5xx responses) with exponential backoff. Only block sources
use this; traversal code propagates TransportError untouched.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from typing import Any, TypeVar

import aiohttp

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryConfig:
    """Configuration for retry with exponential backoff."""

    max_retries: int = 3
    backoff_base: float = 0.5  # seconds
    backoff_max: float = 10.0  # cap
    backoff_multiplier: float = 2.0
    retryable_status_codes: tuple[int, ...] = (429, 500, 502, 503, 504)
    retryable_exceptions: tuple[type[Exception], ...] = (
        aiohttp.ClientConnectionError,
        asyncio.TimeoutError,
        ConnectionError,
    )


def _extract_status_code(exc: Exception) -> int | None:
    """Try to extract an HTTP status code from an aiohttp exception."""
    status = getattr(exc, "status", None)
    if isinstance(status, int):
        return status
    return None


def _get_retry_after(exc: Exception) -> float | None:
    """Extract Retry-After header value from an exception if present."""
    headers = getattr(exc, "headers", None)
    if not headers:
        return None
    retry_after = headers.get("Retry-After") or headers.get("retry-after")
    if retry_after is None:
        return None
    try:
        return float(retry_after)
    except (ValueError, TypeError):
        return None


def is_retryable(exc: Exception, config: RetryConfig) -> bool:
    status_code = _extract_status_code(exc)
    return isinstance(exc, config.retryable_exceptions) or (
        status_code is not None and status_code in config.retryable_status_codes
    )


async def retry_with_backoff(
    fn: Callable[..., Coroutine[Any, Any, T]],
    *args: Any,
    config: RetryConfig | None = None,
    context_msg: str = "",
    **kwargs: Any,
) -> T:
    """Execute an async function with retry and backoff.

    Args:
        fn: Async callable to execute
        *args: Positional args for fn
        config: Retry configuration (uses defaults if None)
        context_msg: Extra context for log messages (e.g. RPC method)
        **kwargs: Keyword args for fn

    Returns:
        Result of fn

    Raises:
        Exception: Last exception after all retries exhausted, or the
            first non-retryable one
    """
    cfg = config or RetryConfig()
    ctx = f" [{context_msg}]" if context_msg else ""

    for attempt in range(cfg.max_retries + 1):
        try:
            result = await fn(*args, **kwargs)
        except Exception as exc:
            status_code = _extract_status_code(exc)
            retryable = is_retryable(exc, cfg)

            if not retryable or attempt >= cfg.max_retries:
                if retryable:
                    logger.error(
                        "RETRY_EXHAUSTED: attempt=%d/%d status=%s%s: %s",
                        attempt + 1,
                        cfg.max_retries + 1,
                        status_code,
                        ctx,
                        exc,
                    )
                raise

            retry_after = _get_retry_after(exc)
            if retry_after is not None:
                delay = min(retry_after, cfg.backoff_max)
            else:
                delay = min(
                    cfg.backoff_base * (cfg.backoff_multiplier**attempt),
                    cfg.backoff_max,
                )

            if status_code == 429:
                logger.warning(
                    "THROTTLED: 429 Too Many Requests, attempt=%d/%d, retry_after=%.1fs%s",
                    attempt + 1,
                    cfg.max_retries + 1,
                    delay,
                    ctx,
                )
            else:
                logger.warning(
                    "RETRYING: attempt=%d/%d status=%s delay=%.1fs%s: %s",
                    attempt + 1,
                    cfg.max_retries + 1,
                    status_code,
                    delay,
                    ctx,
                    exc,
                )
            await asyncio.sleep(delay)
        else:
            if attempt > 0:
                logger.info(
                    "RETRY_RECOVERED: succeeded on attempt %d/%d%s",
                    attempt + 1,
                    cfg.max_retries + 1,
                    ctx,
                )
            return result

    raise RuntimeError("retry_with_backoff exhausted without raising")  # pragma: no cover
