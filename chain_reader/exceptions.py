"""
Custom exceptions for chain reading.

Every block source and traversal step raises these exceptions
so callers can tell transport problems from chain-level faults.
"""

from __future__ import annotations

from typing import Any


class ChainReaderError(Exception):
    """Base exception for all chain reader errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def add_context(self, **context: Any) -> ChainReaderError:
        """Attach traversal context without overwriting what is already known."""
        for key, value in context.items():
            if value is not None:
                self.details.setdefault(key, value)
        return self

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({context})"


class TransportError(ChainReaderError):
    """Raised when the block source cannot be reached or answers garbage."""

    def __init__(
        self,
        operation: str,
        reason: str,
        cause: Exception | None = None,
        details: dict | None = None,
    ):
        merged: dict[str, Any] = {"operation": operation}
        if details:
            merged.update(details)
        if cause:
            merged["cause"] = str(cause)
        super().__init__(f"Transport error during {operation}: {reason}", merged)
        self.operation = operation
        self.reason = reason
        self.cause = cause


class ChainNotFoundError(TransportError):
    """Raised when the source has no chain head for the chain."""

    def __init__(self, chain_id: str, cause: Exception | None = None):
        super().__init__(
            "chain-head",
            f"chain not found: {chain_id}",
            cause=cause,
            details={"chain_id": chain_id},
        )
        self.chain_id = chain_id


class BlockNotFoundError(TransportError):
    """Raised when an entry block cannot be found by its key Merkle root."""

    def __init__(self, key_mr: str, cause: Exception | None = None):
        super().__init__(
            "entry-block",
            f"entry block not found: {key_mr}",
            cause=cause,
            details={"key_mr": key_mr},
        )
        self.key_mr = key_mr


class EntryNotFoundError(TransportError):
    """Raised when an entry cannot be found by its hash."""

    def __init__(self, entry_hash: str, cause: Exception | None = None):
        super().__init__(
            "entry",
            f"entry not found: {entry_hash}",
            cause=cause,
            details={"entry_hash": entry_hash},
        )
        self.entry_hash = entry_hash


class ChainPendingError(ChainReaderError):
    """Raised when a chain exists but is not yet included in a confirmed block.

    This is an expected condition, not a bug: the chain will become
    readable once its first entry block is confirmed.
    """

    def __init__(self, chain_id: str):
        super().__init__(
            f"Chain {chain_id} exists but is not yet included in a confirmed block",
            {"chain_id": chain_id},
        )
        self.chain_id = chain_id


class MalformedChainError(ChainReaderError):
    """Raised when backward traversal hits a cycle, a depth bound, or a dangling link."""

    def __init__(
        self,
        chain_id: str | None,
        key_mr: str,
        reason: str,
        depth: int,
        detail: str | None = None,
    ):
        details: dict[str, Any] = {"key_mr": key_mr, "reason": reason, "depth": depth}
        if chain_id:
            details["chain_id"] = chain_id
        message = f"Malformed chain at block {key_mr} (depth {depth}): {reason}"
        if detail:
            message += f" - {detail}"
        super().__init__(message, details)
        self.chain_id = chain_id
        self.key_mr = key_mr
        self.reason = reason
        self.depth = depth


class DecodeError(ChainReaderError):
    """Raised when a raw wire field cannot be normalized."""

    def __init__(self, field: str, reason: str, value: str | None = None):
        details = {"field": field, "reason": reason}
        if value is not None:
            details["value"] = value
        super().__init__(f"Decode failed for {field}: {reason}", details)
        self.field = field
        self.reason = reason
        self.value = value


class TraversalCancelledError(ChainReaderError):
    """Raised when the caller's cancel signal fires during a traversal."""

    def __init__(self, chain_id: str | None = None, key_mr: str | None = None):
        details: dict[str, Any] = {}
        if chain_id:
            details["chain_id"] = chain_id
        if key_mr:
            details["key_mr"] = key_mr
        super().__init__("Traversal cancelled by caller", details)
        self.chain_id = chain_id
        self.key_mr = key_mr
