"""
Configuration for chain traversal and the factomd block source.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_FACTOMD_URL = "http://localhost:8088/v2"

# Entry fetches issued concurrently for one block. Keeps a single
# large block from flooding the node's rate limiter.
DEFAULT_FETCH_CONCURRENCY = 16

DEFAULT_MAX_DEPTH = 100_000


@dataclass
class ReaderConfig:
    """Configuration for chain traversal."""

    max_depth: int = DEFAULT_MAX_DEPTH
    fetch_concurrency: int = DEFAULT_FETCH_CONCURRENCY

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if self.fetch_concurrency < 1:
            raise ValueError(
                f"fetch_concurrency must be positive, got {self.fetch_concurrency}"
            )

    @classmethod
    def from_env(cls) -> ReaderConfig:
        """Create config from environment variables."""
        max_depth = os.environ.get("CHAIN_READER_MAX_DEPTH", str(DEFAULT_MAX_DEPTH))
        concurrency = os.environ.get(
            "CHAIN_READER_FETCH_CONCURRENCY", str(DEFAULT_FETCH_CONCURRENCY)
        )

        return cls(
            max_depth=int(max_depth),
            fetch_concurrency=int(concurrency),
        )


@dataclass
class FactomdConfig:
    """Configuration for the factomd JSON-RPC source."""

    url: str = DEFAULT_FACTOMD_URL
    timeout: float = 30.0  # seconds, per request
    max_retries: int = 3

    @classmethod
    def from_env(cls) -> FactomdConfig:
        """Create config from environment variables."""
        return cls(
            url=os.environ.get("FACTOMD_URL", DEFAULT_FACTOMD_URL),
            timeout=float(os.environ.get("FACTOMD_TIMEOUT", "30")),
            max_retries=int(os.environ.get("FACTOMD_MAX_RETRIES", "3")),
        )
