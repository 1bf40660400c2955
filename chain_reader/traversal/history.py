"""
Chain history reader.

Ties head resolution, backward walking, per-block entry fetching and
chronological reassembly together behind two main reads:

    >>> async with ChainReader(FactomdSource.from_env()) as reader:
    ...     entries = await reader.get_full_history(chain_id)
    ...     first = await reader.get_first_record(chain_id)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Any

from ..blocks.reader import HistoryAccumulator
from ..blocks.types import BlockEntries, ChainHead, Entry
from ..config import ReaderConfig
from ..exceptions import ChainReaderError, MalformedChainError
from ..logging_utils import ChainLoggerAdapter
from ..source.base import BlockSource
from .fetcher import BlockEntryFetcher
from .head import ChainHeadResolver
from .walker import BlockWalker

logger = logging.getLogger(__name__)


class ChainReader:
    """Reads the history of a chain from a block source."""

    def __init__(self, source: BlockSource, config: ReaderConfig | None = None) -> None:
        self.source = source
        self.config = config or ReaderConfig()
        self.heads = ChainHeadResolver(source)
        self.walker = BlockWalker(source, self.config)
        self.fetcher = BlockEntryFetcher(source, self.config)

    @classmethod
    def from_env(cls) -> ChainReader:
        """Create a reader against the factomd node configured in the environment."""
        from ..source.factomd import FactomdSource

        return cls(FactomdSource.from_env(), ReaderConfig.from_env())

    async def close(self) -> None:
        await self.source.close()

    async def __aenter__(self) -> ChainReader:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def get_chain_head(self, chain_id: str) -> ChainHead:
        """Resolve the current head of a chain, whatever its state."""
        return await self.heads.resolve(chain_id)

    async def get_entry(self, entry_hash: str) -> Entry:
        """Fetch a single entry by hash."""
        return await self.fetcher.fetch_entry(entry_hash)

    async def get_block_entries(self, key_mr: str) -> BlockEntries:
        """Fetch one entry block's entries and its previous pointer."""
        block = await self.walker.fetch_block(key_mr)
        return await self.fetcher.fetch_block_entries(block)

    async def iter_history_blocks(
        self,
        chain_id: str,
        cancel: asyncio.Event | None = None,
    ) -> AsyncIterator[BlockEntries]:
        """Yield every block's entries, newest block first.

        Raises:
            ChainPendingError: If the chain is not yet in a confirmed block
            ChainNotFoundError: If the chain does not exist
            MalformedChainError: If the walk cannot terminate cleanly
        """
        start = await self.heads.resolve_settled(chain_id)

        depth = 0
        async for block in self.walker.walk_backward(start, chain_id, cancel):
            try:
                yield await self.fetcher.fetch_block_entries(block, cancel)
            except ChainReaderError as e:
                raise e.add_context(chain_id=chain_id, depth=depth)
            depth += 1

    async def get_full_history(
        self,
        chain_id: str,
        cancel: asyncio.Event | None = None,
    ) -> list[Entry]:
        """Get every entry of a chain, oldest first.

        Args:
            chain_id: Hex chain id
            cancel: Optional signal aborting the traversal at the next fetch

        Returns:
            All entries in append order
        """
        log = ChainLoggerAdapter(logger, {"chain_id": chain_id})
        history = HistoryAccumulator()

        async for block_entries in self.iter_history_blocks(chain_id, cancel):
            history.add_block(block_entries)

        entries = list(history.finish())
        log.info(f"Read {len(entries)} entries from {history.block_count} blocks")
        return entries

    async def get_first_record(
        self,
        chain_id: str,
        cancel: asyncio.Event | None = None,
    ) -> Entry:
        """Get the first entry ever appended to a chain.

        Walks every block (there is no forward index) but fetches only
        one entry, the first of the oldest block.
        """
        start = await self.heads.resolve_settled(chain_id)

        found = await self.walker.find_oldest(start, chain_id, cancel)
        if found is None:
            raise MalformedChainError(
                chain_id, start, "empty_chain", 0, "head is the origin sentinel"
            )
        oldest, depth = found
        if not oldest.entry_hashes:
            raise MalformedChainError(
                chain_id,
                oldest.key_mr,
                "empty_block",
                depth,
                "oldest block has no entries",
            )

        try:
            return await self.fetcher.fetch_entry(oldest.entry_hashes[0])
        except ChainReaderError as e:
            raise e.add_context(chain_id=chain_id, key_mr=oldest.key_mr)
