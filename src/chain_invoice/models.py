"""
models.py — Invoice value types

Immutable records for payment destinations and invoices. An ``Invoice`` is
assembled once from its five content fields and then completed with its
derived nonce via ``dataclasses.replace``; nothing mutates it afterwards.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Tuple, Union

from .errors import InvalidAmountError

AmountLike = Union[str, int, float, Decimal]


@dataclass(frozen=True)
class Receiver:
    """The party an invoice is created for."""

    network_id: int
    hub_address: str
    public_key: str

    @classmethod
    def coerce(cls, value: Union["Receiver", Mapping[str, Any]]) -> "Receiver":
        """Accept a ``Receiver`` or a mapping in camelCase or snake_case."""
        if isinstance(value, cls):
            return value

        def pick(camel: str, snake: str) -> Any:
            if camel in value:
                return value[camel]
            if snake in value:
                return value[snake]
            raise KeyError(f"Receiver is missing '{camel}'")

        return cls(
            network_id=pick("networkId", "network_id"),
            hub_address=pick("hubAddress", "hub_address"),
            public_key=pick("publicKey", "public_key"),
        )


@dataclass(frozen=True)
class Destination:
    network_id: int
    contract_address: str
    wallet_addresses: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.wallet_addresses, tuple):
            object.__setattr__(self, "wallet_addresses", tuple(self.wallet_addresses))


@dataclass(frozen=True)
class Invoice:
    """A payment request.

    ``nonce`` is ``None`` only on the intermediate value handed to the
    fingerprint engine; public constructors always return it populated.
    """

    uuid: str
    destinations: Tuple[Destination, ...]
    amount: Decimal
    token_address: str
    details: str
    nonce: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.destinations, tuple):
            object.__setattr__(self, "destinations", tuple(self.destinations))

    def without_nonce(self) -> "Invoice":
        return replace(self, nonce=None)

    def with_nonce(self, nonce: int) -> "Invoice":
        return replace(self, nonce=nonce)


def to_amount(value: AmountLike) -> Decimal:
    """Normalize an amount to a finite, non-negative ``Decimal``.

    Raises:
        InvalidAmountError: For booleans, unparsable strings, NaN, infinities
            and negative values.
    """
    if isinstance(value, bool):
        raise InvalidAmountError(f"amount={value!r}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, str)):
        try:
            amount = Decimal(value.strip() if isinstance(value, str) else value)
        except InvalidOperation:
            raise InvalidAmountError(f"amount={value!r}") from None
    elif isinstance(value, float):
        amount = Decimal(repr(value))
    else:
        raise InvalidAmountError(f"unsupported amount type {type(value).__name__}")

    if not amount.is_finite() or amount < 0:
        raise InvalidAmountError(f"amount={value!r}")
    return amount
