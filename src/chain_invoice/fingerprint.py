"""
fingerprint.py — Invoice reference nonce derivation

Computes the 32-bit reference nonce of an invoice from its content fields.
Interoperable producers MUST follow this layout (see packed_encoding.py for
the per-type packing):

  destination_i = keccak(uint256 network_id,
                         bytes32 keccak(address contract_address),
                         bytes32 keccak(address wallet_1), ...,
                         bytes32 keccak(address wallet_n))
  destinations  = keccak(bytes32 destination_1, ..., bytes32 destination_k)
  invoice       = keccak(bytes16 uuid,
                         bytes32 destinations,
                         uint256 amount,
                         bytes32 token_address,
                         bytes32 details)
  nonce         = int(invoice) mod 2**32

``bytesN`` fields are right-padded, so the 20-byte token address occupies the
leading 20 bytes of its 32-byte field.
"""

from __future__ import annotations
import logging
from decimal import Decimal

from .errors import InvalidAmountError, InvalidInvoiceError
from .models import Destination, Invoice
from .packed_encoding import solidity_keccak

logger = logging.getLogger(__name__)

NONCE_MODULUS = 2 ** 32
UINT256_MAX = 2 ** 256 - 1


def address_digest(address: str) -> str:
    return solidity_keccak(["address"], [address])


def destination_digest(destination: Destination) -> str:
    """Keccak digest of one destination.

    Malformed addresses raise the address collaborator's ``ValueError``.
    """
    network_id = destination.network_id
    if (
        isinstance(network_id, bool)
        or not isinstance(network_id, int)
        or not 0 <= network_id <= UINT256_MAX
    ):
        raise InvalidInvoiceError(f"network_id={network_id!r} is not a uint256")

    wallets = destination.wallet_addresses
    types = ["uint256", "bytes32"] + ["bytes32"] * len(wallets)
    values = [network_id, address_digest(destination.contract_address)]
    values.extend(address_digest(w) for w in wallets)
    return solidity_keccak(types, values)


def integral_amount(invoice: Invoice) -> int:
    """Return the amount as an exact uint256 integer."""
    amount = invoice.amount
    if isinstance(amount, int) and not isinstance(amount, bool):
        amount = Decimal(amount)
    if not isinstance(amount, Decimal) or not amount.is_finite():
        raise InvalidAmountError(f"amount={amount!r}")
    # bounded to 78 digits before any int() conversion
    if amount < 0 or amount > UINT256_MAX:
        raise InvalidAmountError(f"amount={amount} does not fit in uint256")
    if amount != amount.to_integral_value():
        raise InvalidAmountError(f"amount={amount} has a fractional part")
    return int(amount)


def derive_reference_nonce(invoice: Invoice) -> int:
    """From an invoice computes its nonce, ignoring any attached nonce.

    Args:
        invoice: Invoice whose content fields are fingerprinted.

    Returns:
        int: Nonce in ``[0, 2**32)``.

    Raises:
        InvalidAmountError: If the amount is negative, fractional or wider
            than uint256.
        InvalidInvoiceError: If there are no destinations, or uuid, token
            address or details do not fit their packed field widths.
    """
    if not invoice.destinations:
        raise InvalidInvoiceError(f"invoice {invoice.uuid} has no destinations")

    digests = [destination_digest(d) for d in invoice.destinations]
    destinations_checksum = solidity_keccak(["bytes32"] * len(digests), digests)
    amount = integral_amount(invoice)

    try:
        invoice_checksum = solidity_keccak(
            ["bytes16", "bytes32", "uint256", "bytes32", "bytes32"],
            [
                invoice.uuid,
                destinations_checksum,
                amount,
                invoice.token_address,
                invoice.details,
            ],
        )
    except ValueError as exc:
        raise InvalidInvoiceError(f"invoice {invoice.uuid!r}: {exc}") from exc

    nonce = int(invoice_checksum, 16) % NONCE_MODULUS
    logger.debug("Derived nonce %d for invoice %s", nonce, invoice.uuid)
    return nonce


def verify_nonce(invoice: Invoice) -> bool:
    """Return True when the attached nonce matches the invoice content."""
    if invoice.nonce is None:
        return False
    return invoice.nonce == derive_reference_nonce(invoice)
