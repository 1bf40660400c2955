"""
Value types for chains, entry blocks and entries.

An entry block is immutable once written and content-addressed by its
key Merkle root (key_mr). Each block points at its predecessor; the
oldest block of a chain points at NULL_HASH.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# 32 zero bytes, hex encoded. Marks the oldest block of a chain.
NULL_HASH = "0" * 64


def is_null_hash(key_mr: str) -> bool:
    """Check whether a block pointer is the chain origin sentinel."""
    return key_mr == NULL_HASH


class ChainHeadState(Enum):
    """Observed state of a chain head."""

    SETTLED = "settled"  # At least one confirmed entry block
    PENDING = "pending"  # Known to the node, not yet in a confirmed block
    NONEXISTENT = "nonexistent"


@dataclass(frozen=True)
class ChainHead:
    """Snapshot of a chain head pointer.

    Attributes:
        chain_id: Chain the head belongs to
        key_mr: Key Merkle root of the newest entry block, "" when none
        in_process_list: Whether the node holds unconfirmed entries for the chain
    """

    chain_id: str
    key_mr: str
    in_process_list: bool = False

    @property
    def state(self) -> ChainHeadState:
        if self.key_mr:
            return ChainHeadState.SETTLED
        if self.in_process_list:
            return ChainHeadState.PENDING
        return ChainHeadState.NONEXISTENT

    def to_dict(self) -> dict[str, Any]:
        return {
            "chain_id": self.chain_id,
            "key_mr": self.key_mr,
            "in_process_list": self.in_process_list,
            "state": self.state.value,
        }


@dataclass(frozen=True)
class EntryBlock:
    """A single entry block of a chain.

    Attributes:
        key_mr: Key Merkle root identifying this block
        previous_key_mr: Key Merkle root of the preceding block, NULL_HASH for the first
        chain_id: Chain the block belongs to
        sequence_number: Position of the block within its chain (0 for the first)
        timestamp: Block timestamp as reported by the node, in seconds
        entry_hashes: Member entry hashes, oldest first
    """

    key_mr: str
    previous_key_mr: str
    chain_id: str
    sequence_number: int = 0
    timestamp: int = 0
    entry_hashes: tuple[str, ...] = ()

    @property
    def is_first(self) -> bool:
        """Whether this is the oldest block of its chain."""
        return is_null_hash(self.previous_key_mr)


@dataclass(frozen=True)
class Entry:
    """A decoded chain entry.

    Attributes:
        chain_id: Raw bytes of the owning chain id
        ext_ids: External ids, in order
        content: Entry payload
        entry_hash: Hash the entry was fetched by, when known
    """

    chain_id: bytes
    ext_ids: tuple[bytes, ...] = ()
    content: bytes = b""
    entry_hash: str | None = field(default=None, compare=False)

    @property
    def chain_id_hex(self) -> str:
        return self.chain_id.hex()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-ready dictionary with hex-encoded fields."""
        return {
            "entry_hash": self.entry_hash,
            "chain_id": self.chain_id.hex(),
            "ext_ids": [ext_id.hex() for ext_id in self.ext_ids],
            "content": self.content.hex(),
        }


@dataclass(frozen=True)
class BlockEntries:
    """All entries of one entry block, plus the link to the previous block."""

    key_mr: str
    entries: tuple[Entry, ...]
    previous_key_mr: str

    def __len__(self) -> int:
        return len(self.entries)
