"""
codec.py — Invoice creation and canonical line encoding

Wire format (one line, five ``|``-separated fields, nonce excluded):

    uuid|destination[&destination...]|amount|token_address|details

with each destination written ``network_id@contract_address@wallet[#wallet...]``.
The nonce is re-derived on decode and never transmitted.
"""

from __future__ import annotations
import logging
import uuid as uuid_lib
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Union

from eth_utils import to_checksum_address

from .errors import MalformedInvoiceError
from .fingerprint import UINT256_MAX, derive_reference_nonce
from .models import AmountLike, Destination, Invoice, Receiver, to_amount
from .packed_encoding import keccak_text

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "|"
DESTINATION_SEPARATOR = "&"
PART_SEPARATOR = "@"
WALLET_SEPARATOR = "#"
FIELD_COUNT = 5
UINT256_DIGITS = len(str(UINT256_MAX))


def seal(invoice: Invoice) -> Invoice:
    """Return ``invoice`` completed with its derived nonce."""
    return invoice.with_nonce(derive_reference_nonce(invoice.without_nonce()))


def create_invoice(
    receiver: Union[Receiver, Mapping[str, Any]],
    amount: AmountLike,
    details: str = "",
    token_address: Optional[str] = None,
) -> Invoice:
    """Create a proper invoice and its nonce.

    Args:
        receiver: Network id, hub address and public key of the receiver.
        amount: Amount to be paid in the smallest division supported by the
            token.
        details: Free-text description; only its Keccak-256 digest is kept.
        token_address: Token to be used for the payment. Defaults to the
            receiver's hub address.

    Returns:
        Invoice: New invoice with a fresh uuid and its nonce attached.

    Raises:
        InvalidAmountError: If the amount is not a non-negative number, or is
            not integral.
        ValueError: If an address is malformed.
    """
    receiver = Receiver.coerce(receiver)
    hub_address = to_checksum_address(receiver.hub_address)
    if token_address is None:
        token_address = hub_address
    else:
        token_address = to_checksum_address(token_address)

    invoice = seal(Invoice(
        uuid=uuid_lib.uuid4().hex,
        destinations=(
            Destination(
                network_id=receiver.network_id,
                contract_address=hub_address,
                wallet_addresses=(to_checksum_address(receiver.public_key),),
            ),
        ),
        amount=to_amount(amount),
        token_address=token_address,
        details=keccak_text(details),
    ))
    logger.debug("Created invoice %s with nonce %d", invoice.uuid, invoice.nonce)
    return invoice


def format_amount(amount: Decimal) -> str:
    # fixed-point, never exponent notation
    return format(amount, "f")


def encode_destination(destination: Destination) -> str:
    return PART_SEPARATOR.join([
        str(destination.network_id),
        destination.contract_address,
        WALLET_SEPARATOR.join(destination.wallet_addresses),
    ])


def encode_invoice(invoice: Invoice) -> str:
    """Encode invoice for web use.

    Field values must not contain any of ``|&@#``; addresses and hex digests
    never do.
    """
    return FIELD_SEPARATOR.join([
        invoice.uuid,
        DESTINATION_SEPARATOR.join(encode_destination(d) for d in invoice.destinations),
        format_amount(invoice.amount),
        invoice.token_address,
        invoice.details,
    ])


def _malformed(context: str) -> MalformedInvoiceError:
    logger.debug("Rejecting encoded invoice: %s", context)
    return MalformedInvoiceError(context)


def decode_destination(encoded: str) -> Destination:
    parts = encoded.split(PART_SEPARATOR)
    if len(parts) != 3:
        raise _malformed(
            f"destination {encoded!r} has {len(parts)} '@' parts, expected 3"
        )
    network_id, contract_address, wallet_block = parts
    if not (network_id.isascii() and network_id.isdigit()):
        raise _malformed(f"network id {network_id!r} is not a base-10 integer")
    digits = network_id.lstrip("0") or "0"
    if len(digits) > UINT256_DIGITS or int(digits, 10) > UINT256_MAX:
        raise _malformed(f"network id {network_id[:80]!r} does not fit in uint256")

    wallets: List[str] = []
    if wallet_block:
        wallets = [to_checksum_address(w) for w in wallet_block.split(WALLET_SEPARATOR)]
    return Destination(
        network_id=int(digits, 10),
        contract_address=to_checksum_address(contract_address),
        wallet_addresses=tuple(wallets),
    )


def decode_invoice(encoded: str) -> Invoice:
    """Decode invoice after web use.

    Args:
        encoded: Line produced by ``encode_invoice``.

    Returns:
        Invoice: Reconstructed invoice with its nonce re-derived.

    Raises:
        MalformedInvoiceError: On a wrong field count or an unparsable
            destination block or network id.
        InvalidAmountError: If the amount field is not a non-negative number.
        ValueError: If an address is malformed.
    """
    data = encoded.split(FIELD_SEPARATOR)
    if len(data) != FIELD_COUNT:
        raise _malformed(f"expected {FIELD_COUNT} '|' fields, found {len(data)}")
    uuid, destinations_block, amount, token_address, details = data

    if not destinations_block:
        raise _malformed("destination block is empty")
    destinations = tuple(
        decode_destination(d) for d in destinations_block.split(DESTINATION_SEPARATOR)
    )

    invoice = seal(Invoice(
        uuid=uuid,
        destinations=destinations,
        amount=to_amount(amount),
        token_address=token_address,
        details=details,
    ))
    logger.debug("Decoded invoice %s with nonce %d", invoice.uuid, invoice.nonce)
    return invoice
