"""
Chain block model.

Value types for chain heads, entry blocks and entries, the wire codec,
and the accumulator that rebuilds chronological history.
"""

from .codec import decode_chain_head, decode_entry, decode_entry_block
from .reader import HistoryAccumulator
from .types import (
    NULL_HASH,
    BlockEntries,
    ChainHead,
    ChainHeadState,
    Entry,
    EntryBlock,
    is_null_hash,
)

__all__ = [
    # Types
    "NULL_HASH",
    "BlockEntries",
    "ChainHead",
    "ChainHeadState",
    "Entry",
    "EntryBlock",
    "is_null_hash",
    # Codec
    "decode_chain_head",
    "decode_entry",
    "decode_entry_block",
    # Ordering
    "HistoryAccumulator",
]
