"""
Concurrent retrieval of the entries of one entry block.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from ..blocks.codec import decode_entry
from ..blocks.types import BlockEntries, Entry, EntryBlock
from ..config import ReaderConfig
from ..exceptions import ChainReaderError, TraversalCancelledError
from ..source.base import BlockSource

logger = logging.getLogger(__name__)


class BlockEntryFetcher:
    """Fetches every entry of a block, all or nothing.

    Entry fetches run concurrently, bounded by
    ``config.fetch_concurrency``. Results are reassembled in the block's
    declared order whatever order the fetches complete in. If any fetch
    fails the remaining ones are cancelled and the whole block fails:
    a history with gaps is not a valid result.
    """

    def __init__(self, source: BlockSource, config: ReaderConfig | None = None) -> None:
        self.source = source
        self.config = config or ReaderConfig()

    async def fetch_entry(self, entry_hash: str) -> Entry:
        """Fetch and decode a single entry.

        Raises:
            EntryNotFoundError: If the source has no such entry
            TransportError: If the source fails
            DecodeError: If the entry's fields are malformed
        """
        raw = await self.source.get_entry(entry_hash)
        try:
            return decode_entry(raw, entry_hash)
        except ChainReaderError as e:
            raise e.add_context(entry_hash=entry_hash)

    async def fetch_block_entries(
        self,
        block: EntryBlock,
        cancel: asyncio.Event | None = None,
    ) -> BlockEntries:
        """Fetch all entries of ``block``.

        Args:
            block: Decoded entry block
            cancel: Optional signal that aborts the in-flight fetches

        Returns:
            The block's entries in declared order plus its previous pointer

        Raises:
            TransportError: If any entry fetch fails
            DecodeError: If any entry is malformed
            TraversalCancelledError: If ``cancel`` is set
        """
        semaphore = asyncio.Semaphore(self.config.fetch_concurrency)

        async def fetch(entry_hash: str) -> Entry:
            async with semaphore:
                return await self.fetch_entry(entry_hash)

        tasks = [asyncio.ensure_future(fetch(h)) for h in block.entry_hashes]
        try:
            entries = await self._gather(tasks, block, cancel)
        except TraversalCancelledError:
            logger.info(f"Entry fetches for block {block.key_mr} cancelled")
            raise
        except ChainReaderError as e:
            logger.error(f"Failed to fetch entries of block {block.key_mr}: {e}")
            raise e.add_context(chain_id=block.chain_id or None, key_mr=block.key_mr)
        finally:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        return BlockEntries(
            key_mr=block.key_mr,
            entries=tuple(entries),
            previous_key_mr=block.previous_key_mr,
        )

    async def _gather(
        self,
        tasks: Sequence[asyncio.Future[Entry]],
        block: EntryBlock,
        cancel: asyncio.Event | None,
    ) -> list[Entry]:
        gathered = asyncio.gather(*tasks)
        if cancel is None:
            return await gathered

        if cancel.is_set():
            gathered.cancel()
            raise TraversalCancelledError(block.chain_id or None, block.key_mr)

        waiter = asyncio.ensure_future(cancel.wait())
        try:
            done, _ = await asyncio.wait(
                {gathered, waiter}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            if not waiter.done():
                waiter.cancel()
                await asyncio.gather(waiter, return_exceptions=True)

        if gathered in done:
            return gathered.result()

        gathered.cancel()
        raise TraversalCancelledError(block.chain_id or None, block.key_mr)
