"""
factomd JSON-RPC block source.

Talks to a factomd node's v2 API over HTTP using aiohttp. Request-level
timeouts and transient failures are handled here; everything that still
fails surfaces as TransportError or one of its not-found subclasses.
"""

from __future__ import annotations

import asyncio
import itertools
import json
import logging
from typing import Any

import aiohttp

from ..config import FactomdConfig
from ..exceptions import (
    BlockNotFoundError,
    ChainNotFoundError,
    EntryNotFoundError,
    TransportError,
)
from .base import BlockSource
from .resilience import RetryConfig, retry_with_backoff

logger = logging.getLogger(__name__)

# factomd JSON-RPC error codes
RPC_OBJECT_NOT_FOUND = -32008
RPC_MISSING_CHAIN_HEAD = -32009


class RpcError(Exception):
    """A JSON-RPC error object returned by the node."""

    def __init__(self, code: int, message: str, data: Any = None):
        super().__init__(f"RPC error {code}: {message}")
        self.code = code
        self.rpc_message = message
        self.data = data


class FactomdSource(BlockSource):
    """Block source reading from a factomd node.

    Example:
        >>> async with FactomdSource(FactomdConfig(url="http://localhost:8088/v2")) as source:
        ...     head = await source.get_chain_head(chain_id)
    """

    def __init__(
        self,
        config: FactomdConfig | None = None,
        session: aiohttp.ClientSession | None = None,
        retry: RetryConfig | None = None,
    ) -> None:
        """Initialize the source.

        Args:
            config: Node configuration (defaults to FactomdConfig.from_env())
            session: Optional externally owned aiohttp session
            retry: Retry policy (defaults to config.max_retries with standard backoff)
        """
        self.config = config or FactomdConfig.from_env()
        self._session = session
        self._owns_session = session is None
        self._retry = retry or RetryConfig(max_retries=self.config.max_retries)
        self._ids = itertools.count(1)

    @classmethod
    def from_env(cls) -> FactomdSource:
        return cls(FactomdConfig.from_env())

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def get_chain_head(self, chain_id: str) -> dict[str, Any]:
        try:
            return await self._call("chain-head", {"chainid": chain_id})
        except RpcError as e:
            if e.code == RPC_MISSING_CHAIN_HEAD:
                raise ChainNotFoundError(chain_id, cause=e) from e
            raise self._rpc_failure("chain-head", e, chain_id=chain_id) from e

    async def get_entry_block(self, key_mr: str) -> dict[str, Any]:
        try:
            return await self._call("entry-block", {"keymr": key_mr})
        except RpcError as e:
            if e.code == RPC_OBJECT_NOT_FOUND:
                raise BlockNotFoundError(key_mr, cause=e) from e
            raise self._rpc_failure("entry-block", e, key_mr=key_mr) from e

    async def get_entry(self, entry_hash: str) -> dict[str, Any]:
        try:
            return await self._call("entry", {"hash": entry_hash})
        except RpcError as e:
            if e.code == RPC_OBJECT_NOT_FOUND:
                raise EntryNotFoundError(entry_hash, cause=e) from e
            raise self._rpc_failure("entry", e, entry_hash=entry_hash) from e

    def _rpc_failure(self, method: str, error: RpcError, **details: Any) -> TransportError:
        details["rpc_code"] = error.code
        return TransportError(method, error.rpc_message, cause=error, details=details)

    async def _call(self, method: str, params: dict[str, Any]) -> Any:
        """Invoke a JSON-RPC method with retries.

        Raises:
            RpcError: If the node answered with a JSON-RPC error
            TransportError: On HTTP, connection, timeout or parse failures
        """
        try:
            return await retry_with_backoff(
                self._call_once,
                method,
                params,
                config=self._retry,
                context_msg=method,
            )
        except RpcError:
            raise
        except aiohttp.ClientResponseError as e:
            raise TransportError(
                method, f"HTTP {e.status}", cause=e, details={"url": self.config.url}
            ) from e
        except asyncio.TimeoutError as e:
            raise TransportError(
                method, "request timed out", cause=e, details={"url": self.config.url}
            ) from e
        except aiohttp.ClientError as e:
            raise TransportError(
                method, "node unreachable", cause=e, details={"url": self.config.url}
            ) from e

    async def _call_once(self, method: str, params: dict[str, Any]) -> Any:
        request_id = next(self._ids)
        payload = {
            "jsonrpc": "2.0",
            "id": request_id,
            "method": method,
            "params": params,
        }
        logger.debug(f"RPC {method} id={request_id} params={params}")

        session = self._get_session()
        async with session.post(self.config.url, json=payload) as response:
            text = await response.text()
            try:
                body = json.loads(text)
            except json.JSONDecodeError as e:
                response.raise_for_status()
                raise TransportError(method, "response is not valid JSON", cause=e) from e

            # factomd answers JSON-RPC errors with HTTP 400
            error = body.get("error") if isinstance(body, dict) else None
            if isinstance(error, dict):
                raise RpcError(
                    int(error.get("code", 0)),
                    str(error.get("message", "")),
                    error.get("data"),
                )
            response.raise_for_status()

        if not isinstance(body, dict):
            raise TransportError(method, "response is not a JSON-RPC object")

        if "result" not in body:
            raise TransportError(method, "response has neither result nor error")
        return body["result"]
