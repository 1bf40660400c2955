"""
Chain head resolution.
"""

from __future__ import annotations

import logging

from ..blocks.codec import decode_chain_head
from ..blocks.types import ChainHead, ChainHeadState
from ..exceptions import ChainNotFoundError, ChainPendingError
from ..source.base import BlockSource

logger = logging.getLogger(__name__)


class ChainHeadResolver:
    """Resolves and classifies the current head of a chain.

    Heads are never cached: every call asks the source again, since
    the head moves whenever a new entry block is confirmed.
    """

    def __init__(self, source: BlockSource) -> None:
        self.source = source

    async def resolve(self, chain_id: str) -> ChainHead:
        """Get the current head of a chain.

        Raises:
            TransportError: If the source cannot answer
            ChainNotFoundError: If the source does not know the chain
        """
        raw = await self.source.get_chain_head(chain_id)
        head = decode_chain_head(raw, chain_id)
        logger.debug(f"Resolved head of {chain_id}: {head.key_mr or '<empty>'} ({head.state.value})")
        return head

    @staticmethod
    def require_settled(head: ChainHead) -> str:
        """Return the head key_mr, failing when there is nothing to walk.

        Raises:
            ChainPendingError: If the chain is not yet in a confirmed block
            ChainNotFoundError: If the head is empty and nothing is pending
        """
        state = head.state
        if state == ChainHeadState.PENDING:
            raise ChainPendingError(head.chain_id)
        if state == ChainHeadState.NONEXISTENT:
            raise ChainNotFoundError(head.chain_id)
        return head.key_mr

    async def resolve_settled(self, chain_id: str) -> str:
        """Resolve the head and return its key_mr, or fail per require_settled."""
        return self.require_settled(await self.resolve(chain_id))
