"""
Abstract base class for block sources.

A block source answers three read requests against a node:
- chain head by chain id
- entry block by key Merkle root
- entry by entry hash

Responses are raw wire objects; decoding happens in blocks.codec.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BlockSource(ABC):
    """Abstract base for raw block reads.

    Implementations raise TransportError (or one of its not-found
    subclasses) on failure and never retry at the traversal level.
    """

    @abstractmethod
    async def get_chain_head(self, chain_id: str) -> dict[str, Any]:
        """
        Get the raw chain head for a chain.

        Args:
            chain_id: Hex chain id

        Returns:
            Object with ``chainhead`` and ``chaininprocesslist``

        Raises:
            ChainNotFoundError: If the node does not know the chain
            TransportError: If the node cannot be reached
        """
        pass

    @abstractmethod
    async def get_entry_block(self, key_mr: str) -> dict[str, Any]:
        """
        Get a raw entry block.

        Args:
            key_mr: Key Merkle root of the block

        Returns:
            Object with ``header`` and ``entrylist``

        Raises:
            BlockNotFoundError: If no block has this key Merkle root
            TransportError: If the node cannot be reached
        """
        pass

    @abstractmethod
    async def get_entry(self, entry_hash: str) -> dict[str, Any]:
        """
        Get a raw entry.

        Args:
            entry_hash: Hash of the entry

        Returns:
            Object with hex ``chainid``, ``extids`` and ``content``

        Raises:
            EntryNotFoundError: If no entry has this hash
            TransportError: If the node cannot be reached
        """
        pass

    async def close(self) -> None:
        """Release any held resources."""
        pass

    async def __aenter__(self) -> BlockSource:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
