"""
invoice_json.py — JSON document form of an invoice

A structured alternative to the canonical line for APIs that exchange JSON.
Amounts travel as decimal strings so no precision is lost to JSON numbers.
Documents are validated against ``INVOICE_SCHEMA`` (JSON Schema draft 7) and
the nonce is always re-derived; a transmitted nonce is only compared.
"""

from __future__ import annotations
from typing import Any, Dict

from eth_utils import to_checksum_address
from jsonschema import Draft7Validator, validators
from jsonschema.exceptions import best_match

from .codec import format_amount, seal
from .errors import MalformedInvoiceError, NonceMismatchError
from .models import Destination, Invoice, to_amount

_ADDRESS = {"type": "string", "pattern": "^0x[0-9a-fA-F]{40}$"}

INVOICE_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Invoice",
    "type": "object",
    "required": ["uuid", "destinations", "amount", "tokenAddress", "details"],
    "additionalProperties": False,
    "properties": {
        "uuid": {"type": "string", "pattern": "^[0-9a-f]{32}$"},
        "destinations": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "required": ["networkId", "contractAddress", "walletAddresses"],
                "additionalProperties": False,
                "properties": {
                    "networkId": {"type": "integer", "minimum": 0, "maximum": 2 ** 256 - 1},
                    "contractAddress": _ADDRESS,
                    "walletAddresses": {"type": "array", "items": _ADDRESS},
                },
            },
        },
        "amount": {"type": "string", "pattern": "^[0-9]+(\\.[0-9]+)?$"},
        "tokenAddress": _ADDRESS,
        "details": {"type": "string", "pattern": "^0x[0-9a-fA-F]{64}$"},
        "nonce": {"type": "integer", "minimum": 0, "maximum": 4294967295},
    },
}

# JSON integers only: draft 7 would otherwise accept 1.0
_StrictDraft7Validator = validators.extend(
    Draft7Validator,
    type_checker=Draft7Validator.TYPE_CHECKER.redefine(
        "integer",
        lambda checker, instance: isinstance(instance, int) and not isinstance(instance, bool),
    ),
)
_validator = _StrictDraft7Validator(INVOICE_SCHEMA)


def invoice_to_dict(invoice: Invoice) -> Dict[str, Any]:
    """Return the JSON-ready document for ``invoice``."""
    doc: Dict[str, Any] = {
        "uuid": invoice.uuid,
        "destinations": [
            {
                "networkId": d.network_id,
                "contractAddress": d.contract_address,
                "walletAddresses": list(d.wallet_addresses),
            }
            for d in invoice.destinations
        ],
        "amount": format_amount(invoice.amount),
        "tokenAddress": invoice.token_address,
        "details": invoice.details,
    }
    if invoice.nonce is not None:
        doc["nonce"] = invoice.nonce
    return doc


def validate_invoice_dict(data: Any) -> None:
    """Raise ``MalformedInvoiceError`` describing the most relevant schema violation."""
    error = best_match(_validator.iter_errors(data))
    if error is not None:
        where = "/".join(str(p) for p in error.path) or "<root>"
        raise MalformedInvoiceError(f"{where}: {error.message}")


def invoice_from_dict(data: Dict[str, Any], verify: bool = True) -> Invoice:
    """Build an invoice from its JSON document form.

    Args:
        data: Document as produced by ``invoice_to_dict``.
        verify: Compare a supplied ``nonce`` against the derived one.

    Returns:
        Invoice: Invoice with its nonce re-derived.

    Raises:
        MalformedInvoiceError: If the document violates ``INVOICE_SCHEMA``.
        NonceMismatchError: If ``verify`` is set and the supplied nonce is
            stale or forged.
    """
    validate_invoice_dict(data)
    invoice = seal(Invoice(
        uuid=data["uuid"],
        destinations=tuple(
            Destination(
                network_id=d["networkId"],
                contract_address=to_checksum_address(d["contractAddress"]),
                wallet_addresses=tuple(to_checksum_address(w) for w in d["walletAddresses"]),
            )
            for d in data["destinations"]
        ),
        amount=to_amount(data["amount"]),
        token_address=data["tokenAddress"],
        details=data["details"],
    ))
    supplied = data.get("nonce")
    if verify and supplied is not None and supplied != invoice.nonce:
        raise NonceMismatchError(
            f"invoice {invoice.uuid}: supplied {supplied}, derived {invoice.nonce}"
        )
    return invoice
