"""
Block sources: where raw chain heads, entry blocks and entries come from.
"""

from .base import BlockSource
from .factomd import FactomdSource, RpcError
from .memory import InMemoryBlockSource
from .resilience import RetryConfig, retry_with_backoff

__all__ = [
    "BlockSource",
    "FactomdSource",
    "InMemoryBlockSource",
    "RetryConfig",
    "RpcError",
    "retry_with_backoff",
]
