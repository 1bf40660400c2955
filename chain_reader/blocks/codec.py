"""
Decoding of raw factomd wire objects into value types.

All functions are pure. Hex-encoded fields are validated and decoded
here so nothing downstream ever sees wire-format strings for byte data.
"""

from __future__ import annotations

from typing import Any

from ..exceptions import DecodeError
from .types import ChainHead, Entry, EntryBlock

HASH_HEX_LENGTH = 64


def _decode_hex(value: Any, field: str) -> bytes:
    if not isinstance(value, str):
        raise DecodeError(field, f"expected hex string, got {type(value).__name__}")
    try:
        return bytes.fromhex(value)
    except ValueError as e:
        raise DecodeError(field, "invalid hex", value=value[:80]) from e


def _check_hash(value: Any, field: str) -> str:
    raw = _decode_hex(value, field)
    if len(raw) * 2 != HASH_HEX_LENGTH:
        raise DecodeError(field, f"expected 32-byte hash, got {len(raw)} bytes", value=value)
    return value.lower()


def decode_entry(raw: dict[str, Any], entry_hash: str | None = None) -> Entry:
    """Decode a raw ``entry`` response.

    Args:
        raw: Wire object with hex ``chainid``, ``extids`` and ``content``
        entry_hash: Hash the entry was requested by, kept for reference

    Returns:
        The decoded entry

    Raises:
        DecodeError: If a required field is missing or not valid hex
    """
    if not isinstance(raw, dict):
        raise DecodeError("entry", f"expected object, got {type(raw).__name__}")
    if "chainid" not in raw:
        raise DecodeError("chainid", "missing")

    ext_ids_raw = raw.get("extids") or []
    if not isinstance(ext_ids_raw, list):
        raise DecodeError("extids", f"expected list, got {type(ext_ids_raw).__name__}")

    return Entry(
        chain_id=_decode_hex(raw["chainid"], "chainid"),
        ext_ids=tuple(
            _decode_hex(ext_id, f"extids[{i}]") for i, ext_id in enumerate(ext_ids_raw)
        ),
        content=_decode_hex(raw.get("content", ""), "content"),
        entry_hash=entry_hash,
    )


def decode_entry_block(raw: dict[str, Any], key_mr: str) -> EntryBlock:
    """Decode a raw ``entry-block`` response fetched by ``key_mr``."""
    if not isinstance(raw, dict):
        raise DecodeError("entry-block", f"expected object, got {type(raw).__name__}")

    header = raw.get("header")
    if not isinstance(header, dict):
        raise DecodeError("header", "missing")
    if "prevkeymr" not in header:
        raise DecodeError("header.prevkeymr", "missing")

    entry_list = raw.get("entrylist") or []
    if not isinstance(entry_list, list):
        raise DecodeError("entrylist", f"expected list, got {type(entry_list).__name__}")

    entry_hashes = []
    for i, item in enumerate(entry_list):
        if not isinstance(item, dict) or "entryhash" not in item:
            raise DecodeError(f"entrylist[{i}].entryhash", "missing")
        entry_hashes.append(_check_hash(item["entryhash"], f"entrylist[{i}].entryhash"))

    return EntryBlock(
        key_mr=key_mr,
        previous_key_mr=_check_hash(header["prevkeymr"], "header.prevkeymr"),
        chain_id=header.get("chainid", ""),
        sequence_number=int(header.get("blocksequencenumber", 0)),
        timestamp=int(header.get("timestamp", 0)),
        entry_hashes=tuple(entry_hashes),
    )


def decode_chain_head(raw: dict[str, Any], chain_id: str) -> ChainHead:
    """Decode a raw ``chain-head`` response."""
    if not isinstance(raw, dict):
        raise DecodeError("chain-head", f"expected object, got {type(raw).__name__}")

    key_mr = raw.get("chainhead") or ""
    if key_mr:
        key_mr = _check_hash(key_mr, "chainhead")

    return ChainHead(
        chain_id=chain_id,
        key_mr=key_mr,
        in_process_list=bool(raw.get("chaininprocesslist", False)),
    )
