"""
Backward traversal over linked entry blocks.

Each block names its predecessor, so the walk is inherently sequential:
exactly one block fetch is outstanding at any time. The loop is
iterative to keep stack depth flat on long chains.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

from ..blocks.codec import decode_entry_block
from ..blocks.types import EntryBlock, is_null_hash
from ..config import ReaderConfig
from ..exceptions import (
    BlockNotFoundError,
    ChainReaderError,
    MalformedChainError,
    TraversalCancelledError,
)
from ..logging_utils import ChainLoggerAdapter
from ..source.base import BlockSource

logger = logging.getLogger(__name__)


class BlockWalker:
    """Walks entry blocks from a starting key_mr back to the chain origin.

    Guards against corrupted or hostile sources: a revisited key_mr is a
    cycle, and the walk stops with MalformedChainError once
    ``config.max_depth`` blocks have been visited.
    """

    def __init__(self, source: BlockSource, config: ReaderConfig | None = None) -> None:
        self.source = source
        self.config = config or ReaderConfig()

    async def fetch_block(
        self,
        key_mr: str,
        chain_id: str | None = None,
        depth: int = 0,
    ) -> EntryBlock:
        """Fetch and decode one entry block.

        A missing block at depth 0 is reported as BlockNotFoundError; deeper
        in the walk it means a dangling previous pointer.
        """
        try:
            raw = await self.source.get_entry_block(key_mr)
            return decode_entry_block(raw, key_mr)
        except BlockNotFoundError as e:
            if depth == 0:
                raise e.add_context(chain_id=chain_id, depth=depth)
            raise MalformedChainError(
                chain_id,
                key_mr,
                "dangling",
                depth,
                "previous block pointer does not resolve",
            ) from e
        except ChainReaderError as e:
            raise e.add_context(chain_id=chain_id, key_mr=key_mr, depth=depth)

    async def walk_backward(
        self,
        start_key_mr: str,
        chain_id: str | None = None,
        cancel: asyncio.Event | None = None,
    ) -> AsyncIterator[EntryBlock]:
        """Yield blocks from ``start_key_mr`` back to the oldest block.

        Not restartable: each step is a remote read. Call again from the
        same start to replay.

        Args:
            start_key_mr: Key Merkle root of the newest block to visit
            chain_id: Chain being walked, for error context and logs
            cancel: Optional signal checked before every block fetch

        Yields:
            Entry blocks, newest first

        Raises:
            MalformedChainError: On a cycle, dangling pointer or depth overrun
            TraversalCancelledError: If ``cancel`` is set
            TransportError: If the source fails
        """
        log = ChainLoggerAdapter(logger, {"chain_id": chain_id})
        visited: set[str] = set()
        cursor = start_key_mr
        depth = 0

        while not is_null_hash(cursor):
            if cancel is not None and cancel.is_set():
                raise TraversalCancelledError(chain_id, cursor)
            if cursor in visited:
                raise MalformedChainError(
                    chain_id, cursor, "cycle", depth, "block already visited in this walk"
                )
            if depth >= self.config.max_depth:
                raise MalformedChainError(
                    chain_id,
                    cursor,
                    "depth",
                    depth,
                    f"walk exceeded max_depth={self.config.max_depth}",
                )

            block = await self.fetch_block(cursor, chain_id, depth)
            visited.add(cursor)
            log.debug(
                f"Visited block {cursor} at depth {depth} with {len(block.entry_hashes)} entries",
                extra={"key_mr": cursor, "depth": depth},
            )
            yield block

            cursor = block.previous_key_mr
            depth += 1

        log.debug(f"Reached chain origin after {depth} blocks", extra={"depth": depth})

    async def find_oldest(
        self,
        start_key_mr: str,
        chain_id: str | None = None,
        cancel: asyncio.Event | None = None,
    ) -> tuple[EntryBlock, int] | None:
        """Walk the whole chain and return its oldest block with that block's depth.

        There is no forward index from the origin, so this still costs one
        round trip per block. Returns None when ``start_key_mr`` is already
        the origin sentinel.
        """
        oldest: tuple[EntryBlock, int] | None = None
        depth = 0
        async for block in self.walk_backward(start_key_mr, chain_id, cancel):
            oldest = (block, depth)
            depth += 1
        return oldest
