"""
packed_encoding.py — Solidity-style packed encoding for invoice hashing

Byte-exact equivalent of web3's ``soliditySha3`` (``abi.encodePacked`` followed
by Keccak-256). Every producer and verifier of invoice fingerprints MUST pack
values with these rules, otherwise nonces stop matching across
implementations:

- ``uintN``    big-endian, left-zero-padded to N/8 bytes
- ``address``  20 raw bytes (hex casing ignored)
- ``bytesN``   raw bytes, right-zero-padded to N bytes
- ``string``   UTF-8 bytes, no padding

Values are concatenated with no separators or length prefixes.

``uintN`` accepts a Python int or a base-10 digit string, matching web3
callers that pass amounts as ``toFixed(0)`` strings; both pack identically.
"""

from __future__ import annotations
import re
from typing import Sequence, Union

from eth_utils import decode_hex, encode_hex, keccak, to_canonical_address

PackableValue = Union[int, str, bytes]

_UINT_RE = re.compile(r"^uint(\d{1,3})$")
_BYTES_RE = re.compile(r"^bytes(\d{1,2})$")


def _pack_uint(bits: int, value: PackableValue) -> bytes:
    if isinstance(value, bool):
        raise ValueError(f"Invalid uint{bits} value: {value!r}")
    if isinstance(value, str):
        if not value.isdigit():
            raise ValueError(f"Invalid uint{bits} value: {value!r}")
        value = int(value, 10)
    if not isinstance(value, int):
        raise ValueError(f"Invalid uint{bits} value: {value!r}")
    if value < 0 or value >= 2 ** bits:
        raise ValueError(f"Value {value} out of range for uint{bits}")
    return value.to_bytes(bits // 8, "big")


def _pack_bytes(size: int, value: PackableValue) -> bytes:
    raw = value if isinstance(value, bytes) else decode_hex(str(value))
    if len(raw) > size:
        raise ValueError(f"Invalid bytes{size} for {value!r}: {len(raw)} bytes")
    return raw.ljust(size, b"\x00")


def pack_value(type_name: str, value: PackableValue) -> bytes:
    """Pack a single typed value.

    Raises:
        ValueError: For unsupported types, out-of-range integers, oversized
            byte strings, and malformed addresses.
    """
    m = _UINT_RE.match(type_name)
    if m:
        bits = int(m.group(1))
        if bits == 0 or bits > 256 or bits % 8:
            raise ValueError(f"Unsupported type: {type_name}")
        return _pack_uint(bits, value)

    m = _BYTES_RE.match(type_name)
    if m:
        size = int(m.group(1))
        if size < 1 or size > 32:
            raise ValueError(f"Unsupported type: {type_name}")
        return _pack_bytes(size, value)

    if type_name == "address":
        return to_canonical_address(value)

    if type_name == "string":
        if not isinstance(value, str):
            raise ValueError(f"Invalid string value: {value!r}")
        return value.encode("utf-8")

    raise ValueError(f"Unsupported type: {type_name}")


def solidity_pack(types: Sequence[str], values: Sequence[PackableValue]) -> bytes:
    """Return the packed encoding of ``values`` typed by ``types``."""
    if len(types) != len(values):
        raise ValueError(
            f"Type/value count mismatch: {len(types)} types, {len(values)} values"
        )
    return b"".join(pack_value(t, v) for t, v in zip(types, values))


def solidity_keccak(types: Sequence[str], values: Sequence[PackableValue]) -> str:
    """Return the 0x-prefixed Keccak-256 hex digest of the packed values."""
    return encode_hex(keccak(solidity_pack(types, values)))


def keccak_text(text: str) -> str:
    """Return the 0x-prefixed Keccak-256 hex digest of UTF-8 text."""
    return solidity_keccak(["string"], [text])
