"""
transport.py — Optional carriage wrappers around the canonical invoice line

The canonical line from ``codec.encode_invoice`` is already URL-safe. These
wrappers exist for channels that prefer an opaque token (QR payloads, query
parameters). They never touch the fingerprint: unwrapping yields the exact
canonical line, which is then decoded and re-fingerprinted as usual.

Token forms:
  <urlsafe-base64 of line>          plain
  z.<urlsafe-base64 of zlib(line)>  compressed
Base64 padding is stripped.
"""

from __future__ import annotations
import base64
import binascii
import zlib

from .codec import decode_invoice, encode_invoice
from .errors import MalformedInvoiceError
from .models import Invoice

COMPRESSED_PREFIX = "z."


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64decode(token: str) -> bytes:
    padded = token + "=" * (-len(token) % 4)
    try:
        return base64.urlsafe_b64decode(padded.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise MalformedInvoiceError(f"invalid base64 token: {exc}") from exc


def wrap(encoded: str, compress: bool = False) -> str:
    """Wrap a canonical invoice line into a transport token."""
    data = encoded.encode("utf-8")
    if compress:
        return COMPRESSED_PREFIX + _b64encode(zlib.compress(data, 9))
    return _b64encode(data)


def unwrap(token: str) -> str:
    """Recover the canonical invoice line from a transport token.

    Raises:
        MalformedInvoiceError: If the token is not valid base64, fails to
            decompress, or is not UTF-8.
    """
    if token.startswith(COMPRESSED_PREFIX):
        raw = _b64decode(token[len(COMPRESSED_PREFIX):])
        try:
            raw = zlib.decompress(raw)
        except zlib.error as exc:
            raise MalformedInvoiceError(f"invalid compressed token: {exc}") from exc
    else:
        raw = _b64decode(token)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedInvoiceError(f"token is not UTF-8: {exc}") from exc


def encode_invoice_token(invoice: Invoice, compress: bool = False) -> str:
    return wrap(encode_invoice(invoice), compress=compress)


def decode_invoice_token(token: str) -> Invoice:
    return decode_invoice(unwrap(token))
