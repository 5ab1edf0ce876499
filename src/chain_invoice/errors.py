"""
errors.py — Invoice Error Taxonomy

Standardized error codes and messages for invoice creation, fingerprinting
and decoding, with links to the documentation of each code.
"""

from typing import Optional

__all__ = [
    "InvoiceError",
    "InvalidAmountError",
    "InvalidInvoiceError",
    "MalformedInvoiceError",
    "NonceMismatchError",
]

class InvoiceError(ValueError):
    """Base class for all invoice errors."""
    def __init__(
        self,
        code: str,
        message: str,
        context: Optional[str] = None,
    ):
        self.code = code
        self.message = message
        self.context = context

        full_msg = f"[{code}] {message}"
        if context:
            full_msg += f" Context: {context}"

        super().__init__(full_msg)

    @property
    def doc_url(self) -> str:
        """Link to the human-readable documentation for this error."""
        return f"https://chain-invoice.readthedocs.io/errors/{self.code}"

# Value Errors (E0xx)
class InvalidAmountError(InvoiceError):
    def __init__(self, context: Optional[str] = None):
        super().__init__("INVOICE_E001", "The amount is not a non-negative number with an integral smallest-unit value.", context)

class InvalidInvoiceError(InvoiceError):
    def __init__(self, context: Optional[str] = None):
        super().__init__("INVOICE_E002", "The invoice is structurally invalid and cannot be fingerprinted.", context)

# Format Errors (E1xx)
class MalformedInvoiceError(InvoiceError):
    def __init__(self, context: Optional[str] = None):
        super().__init__("INVOICE_E100", "The encoded invoice could not be parsed.", context)

# Integrity Errors (E2xx)
class NonceMismatchError(InvoiceError):
    def __init__(self, context: Optional[str] = None):
        super().__init__("INVOICE_E200", "A supplied nonce does not equal the nonce derived from the invoice content.", context)
