"""chain-invoice public API.

Create, fingerprint and serialize invoices requesting on-chain token payments
across one or more networks and wallets.

Example:
    from chain_invoice import create_invoice, encode_invoice, decode_invoice

    invoice = create_invoice(
        {"networkId": 1, "hubAddress": hub, "publicKey": wallet},
        amount=1000,
        details="order #42",
    )
    line = encode_invoice(invoice)
    assert decode_invoice(line) == invoice
"""

from .codec import (
    DESTINATION_SEPARATOR,
    FIELD_COUNT,
    FIELD_SEPARATOR,
    PART_SEPARATOR,
    WALLET_SEPARATOR,
    create_invoice,
    decode_invoice,
    encode_invoice,
)
from .errors import (
    InvoiceError,
    InvalidAmountError,
    InvalidInvoiceError,
    MalformedInvoiceError,
    NonceMismatchError,
)
from .fingerprint import NONCE_MODULUS, derive_reference_nonce, verify_nonce
from .invoice_json import INVOICE_SCHEMA, invoice_from_dict, invoice_to_dict
from .models import Destination, Invoice, Receiver
from .packed_encoding import keccak_text, solidity_keccak, solidity_pack
from .transport import decode_invoice_token, encode_invoice_token, unwrap, wrap

__version__ = "0.3.0"
__all__ = [
    "Destination",
    "Invoice",
    "Receiver",
    "create_invoice",
    "encode_invoice",
    "decode_invoice",
    "derive_reference_nonce",
    "verify_nonce",
    "encode_invoice_token",
    "decode_invoice_token",
    "wrap",
    "unwrap",
    "invoice_to_dict",
    "invoice_from_dict",
    "INVOICE_SCHEMA",
    "solidity_pack",
    "solidity_keccak",
    "keccak_text",
    "NONCE_MODULUS",
    "FIELD_SEPARATOR",
    "DESTINATION_SEPARATOR",
    "PART_SEPARATOR",
    "WALLET_SEPARATOR",
    "FIELD_COUNT",
    "InvoiceError",
    "InvalidAmountError",
    "InvalidInvoiceError",
    "MalformedInvoiceError",
    "NonceMismatchError",
]
