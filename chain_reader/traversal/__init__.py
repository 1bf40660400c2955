"""
Chain traversal: head resolution, backward walk, entry fetching.
"""

from .fetcher import BlockEntryFetcher
from .head import ChainHeadResolver
from .history import ChainReader
from .walker import BlockWalker

__all__ = [
    "BlockEntryFetcher",
    "BlockWalker",
    "ChainHeadResolver",
    "ChainReader",
]
