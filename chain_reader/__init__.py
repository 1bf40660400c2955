"""
Chain Reader

Read-side client for Factom-style chains: resolves a chain head, walks
the backward-linked entry blocks to the chain origin and rebuilds the
chain's entries in append order.

Usage:

    >>> from chain_reader import ChainReader, FactomdSource
    >>> async with ChainReader(FactomdSource.from_env()) as reader:
    ...     entries = await reader.get_full_history(chain_id)
    ...     first = await reader.get_first_record(chain_id)

Sources:

    # factomd JSON-RPC over HTTP
    from chain_reader.source import FactomdSource

    # In-process dictionaries (tests, exported chains)
    from chain_reader.source import InMemoryBlockSource
"""

# Block model
from .blocks import (
    NULL_HASH,
    BlockEntries,
    ChainHead,
    ChainHeadState,
    Entry,
    EntryBlock,
    HistoryAccumulator,
)

# Configuration
from .config import FactomdConfig, ReaderConfig

# Exceptions
from .exceptions import (
    BlockNotFoundError,
    ChainNotFoundError,
    ChainPendingError,
    ChainReaderError,
    DecodeError,
    EntryNotFoundError,
    MalformedChainError,
    TransportError,
    TraversalCancelledError,
)

# Sources
from .source import BlockSource, FactomdSource, InMemoryBlockSource

# Traversal
from .traversal import BlockEntryFetcher, BlockWalker, ChainHeadResolver, ChainReader

__all__ = [
    # Core
    "ChainReader",
    "ChainHeadResolver",
    "BlockWalker",
    "BlockEntryFetcher",
    "HistoryAccumulator",
    # Types
    "NULL_HASH",
    "BlockEntries",
    "ChainHead",
    "ChainHeadState",
    "Entry",
    "EntryBlock",
    # Sources
    "BlockSource",
    "FactomdSource",
    "InMemoryBlockSource",
    # Config
    "FactomdConfig",
    "ReaderConfig",
    # Exceptions
    "ChainReaderError",
    "TransportError",
    "ChainNotFoundError",
    "BlockNotFoundError",
    "EntryNotFoundError",
    "ChainPendingError",
    "MalformedChainError",
    "DecodeError",
    "TraversalCancelledError",
]

__version__ = "0.1.0"
