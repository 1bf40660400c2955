"""
Chronological reconstruction of chain history.

Blocks arrive newest first (the walk goes backward), while each block
lists its own entries oldest first. HistoryAccumulator turns that into
one oldest-first sequence without knowing the chain length up front.
"""

from __future__ import annotations

from collections.abc import Iterable

from .types import BlockEntries, Entry


class HistoryAccumulator:
    """Accumulates per-block entry batches in visitation order.

    Each batch is appended reversed; finish() reverses the whole
    accumulator once. The second reversal restores every block's
    internal order and flips block order from newest-first to
    oldest-first at the same time.

    Example:
        blocks visited: [e4, e5, e6], [e3], [e1, e2]
        accumulated:    e6 e5 e4 e3 e2 e1
        finished:       e1 e2 e3 e4 e5 e6
    """

    def __init__(self) -> None:
        self._entries: list[Entry] = []
        self._block_count = 0
        self._finished = False

    def add_block(self, entries: Iterable[Entry] | BlockEntries) -> None:
        """Add the entries of the next visited (older) block."""
        if self._finished:
            raise RuntimeError("Cannot add blocks after finish()")
        if isinstance(entries, BlockEntries):
            entries = entries.entries
        self._entries.extend(reversed(list(entries)))
        self._block_count += 1

    def finish(self) -> tuple[Entry, ...]:
        """Return the history, oldest entry first."""
        if not self._finished:
            self._entries.reverse()
            self._finished = True
        return tuple(self._entries)

    @property
    def block_count(self) -> int:
        return self._block_count

    def __len__(self) -> int:
        return len(self._entries)
