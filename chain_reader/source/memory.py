"""
In-process block source.

Serves chain heads, entry blocks and entries from dictionaries in the
same wire shapes factomd returns. Useful for tests, fixtures and
replaying exported chains without a node.
"""

from __future__ import annotations

import asyncio
import hashlib
from collections import Counter
from typing import Any

from ..blocks.types import NULL_HASH
from ..exceptions import BlockNotFoundError, ChainNotFoundError, EntryNotFoundError
from .base import BlockSource


class InMemoryBlockSource(BlockSource):
    """Block source backed by plain dictionaries.

    Example:
        >>> source = InMemoryBlockSource()
        >>> source.add_entry("aa" * 32, chain_id, [b"name"], b"hello")
        >>> source.add_entry_block("bb" * 32, chain_id, NULL_HASH, ["aa" * 32])
        >>> source.set_chain_head(chain_id, "bb" * 32)
    """

    def __init__(self) -> None:
        self.chain_heads: dict[str, dict[str, Any]] = {}
        self.entry_blocks: dict[str, dict[str, Any]] = {}
        self.entries: dict[str, dict[str, Any]] = {}

        # Artificial per-entry latency in seconds
        self.entry_delays: dict[str, float] = {}

        # Hashes that fail with a transport error when fetched
        self.failing: dict[str, Exception] = {}

        self.calls: Counter[str] = Counter()

    def set_chain_head(
        self,
        chain_id: str,
        key_mr: str,
        in_process_list: bool = False,
    ) -> None:
        self.chain_heads[chain_id] = {
            "chainhead": key_mr,
            "chaininprocesslist": in_process_list,
        }

    def add_entry_block(
        self,
        key_mr: str,
        chain_id: str,
        prev_key_mr: str,
        entry_hashes: list[str],
        sequence_number: int = 0,
        timestamp: int = 0,
    ) -> None:
        self.entry_blocks[key_mr] = {
            "header": {
                "blocksequencenumber": sequence_number,
                "chainid": chain_id,
                "prevkeymr": prev_key_mr,
                "timestamp": timestamp,
            },
            "entrylist": [
                {"entryhash": entry_hash, "timestamp": timestamp} for entry_hash in entry_hashes
            ],
        }

    def add_entry(
        self,
        entry_hash: str,
        chain_id: str,
        ext_ids: list[bytes],
        content: bytes,
    ) -> None:
        self.entries[entry_hash] = {
            "chainid": chain_id,
            "extids": [ext_id.hex() for ext_id in ext_ids],
            "content": content.hex(),
        }

    def add_chain(
        self,
        chain_id: str,
        blocks: list[list[tuple[list[bytes], bytes]]],
    ) -> list[str]:
        """Add a whole chain, blocks given oldest first.

        Each block is a list of ``(ext_ids, content)`` pairs. Block and
        entry hashes are derived deterministically from the chain id
        and positions.

        Returns:
            Key Merkle roots of the added blocks, oldest first
        """
        key_mrs: list[str] = []
        prev = NULL_HASH
        for block_index, block in enumerate(blocks):
            entry_hashes = []
            for entry_index, (ext_ids, content) in enumerate(block):
                entry_hash = _derive_hash(chain_id, "e", block_index, entry_index)
                self.add_entry(entry_hash, chain_id, ext_ids, content)
                entry_hashes.append(entry_hash)
            key_mr = _derive_hash(chain_id, "b", block_index, 0)
            self.add_entry_block(key_mr, chain_id, prev, entry_hashes, sequence_number=block_index)
            key_mrs.append(key_mr)
            prev = key_mr

        if key_mrs:
            self.set_chain_head(chain_id, key_mrs[-1])
        return key_mrs

    async def get_chain_head(self, chain_id: str) -> dict[str, Any]:
        self.calls["chain-head"] += 1
        await asyncio.sleep(0)
        if chain_id not in self.chain_heads:
            raise ChainNotFoundError(chain_id)
        return dict(self.chain_heads[chain_id])

    async def get_entry_block(self, key_mr: str) -> dict[str, Any]:
        self.calls["entry-block"] += 1
        await asyncio.sleep(0)
        if key_mr in self.failing:
            raise self.failing[key_mr]
        if key_mr not in self.entry_blocks:
            raise BlockNotFoundError(key_mr)
        return self.entry_blocks[key_mr]

    async def get_entry(self, entry_hash: str) -> dict[str, Any]:
        self.calls["entry"] += 1
        await asyncio.sleep(self.entry_delays.get(entry_hash, 0))
        if entry_hash in self.failing:
            raise self.failing[entry_hash]
        if entry_hash not in self.entries:
            raise EntryNotFoundError(entry_hash)
        return self.entries[entry_hash]


def _derive_hash(chain_id: str, kind: str, block_index: int, entry_index: int) -> str:
    seed = f"{chain_id}:{kind}:{block_index}:{entry_index}"
    return hashlib.sha256(seed.encode()).hexdigest()
