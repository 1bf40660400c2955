"""
Shared test configuration and fixtures.

Chains are built in an InMemoryBlockSource. Block and entry hashes are
derived deterministically from the chain id, so tests can refer to them
through the key_mr lists returned by ``add_chain``.
"""

from __future__ import annotations

import pytest

from chain_reader import ChainReader, ReaderConfig
from chain_reader.source import InMemoryBlockSource

CHAIN_ID = "f48d2160c5d8178720d8c83b89a62599ab6a8b9dbec9fbece5229f787d1e8b44"
OTHER_CHAIN_ID = "954d5a49fd70d9b8bcdb35d252267829957f7ef7fa6c74f88419bdc5e82209f4"


def make_blocks(counts: list[int]) -> list[list[tuple[list[bytes], bytes]]]:
    """Build block contents for ``add_chain`` from per-block entry counts.

    Entry content is ``block{n}.rec{i}`` with blocks numbered from 1,
    oldest first.
    """
    return [
        [
            ([f"block{b}".encode()], f"block{b}.rec{i}".encode())
            for i in range(count)
        ]
        for b, count in enumerate(counts, start=1)
    ]


@pytest.fixture
def source() -> InMemoryBlockSource:
    """Empty in-memory block source."""
    return InMemoryBlockSource()


@pytest.fixture
def reader(source: InMemoryBlockSource) -> ChainReader:
    """Reader over the in-memory source with a small fan-out."""
    return ChainReader(source, ReaderConfig(fetch_concurrency=4))
