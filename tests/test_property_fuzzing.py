"""
test_property_fuzzing.py — Property-based checks for invoice fingerprinting

Properties tested:
  A. derive_reference_nonce
       A1. Determinism: same content → same nonce, always
       A2. Range: nonce is always in [0, 2**32)
       A3. Sensitivity: changing any content field changes the nonce
  B. encode_invoice / decode_invoice
       B1. Round-trip: decode(encode(I)) == I, nonce included
       B2. Arbitrary text never crashes the decoder with an unexpected type
"""

from dataclasses import replace
from decimal import Decimal

import pytest

try:
    from hypothesis import given, settings, assume, HealthCheck
    from hypothesis import strategies as st
    from hypothesis.strategies import composite
except ImportError:
    pytest.skip("hypothesis not installed", allow_module_level=True)

from eth_utils import to_checksum_address

from chain_invoice.codec import decode_invoice, encode_invoice, seal
from chain_invoice.errors import InvoiceError
from chain_invoice.fingerprint import NONCE_MODULUS, derive_reference_nonce
from chain_invoice.models import Destination, Invoice
from chain_invoice.packed_encoding import keccak_text


# ---------------------------------------------------------------------------
# Shared Hypothesis strategies
# ---------------------------------------------------------------------------

_address = st.binary(min_size=20, max_size=20).map(lambda b: to_checksum_address("0x" + b.hex()))

_destination = st.builds(
    Destination,
    network_id=st.integers(min_value=0, max_value=2 ** 64),
    contract_address=_address,
    wallet_addresses=st.lists(_address, max_size=4).map(tuple),
)


@composite
def invoices(draw):
    return seal(Invoice(
        uuid=draw(st.binary(min_size=16, max_size=16)).hex(),
        destinations=tuple(draw(st.lists(_destination, min_size=1, max_size=3))),
        amount=Decimal(draw(st.integers(min_value=0, max_value=2 ** 256 - 1))),
        token_address=draw(_address),
        details=keccak_text(draw(st.text(max_size=40))),
    ))


_settings = settings(deadline=None, max_examples=150, suppress_health_check=[HealthCheck.too_slow])


# ---------------------------------------------------------------------------
# A. Fingerprint
# ---------------------------------------------------------------------------

@given(invoices())
@_settings
def test_nonce_deterministic(invoice):
    assert derive_reference_nonce(invoice) == derive_reference_nonce(invoice)
    assert derive_reference_nonce(invoice) == invoice.nonce


@given(invoices())
@_settings
def test_nonce_range(invoice):
    assert 0 <= invoice.nonce < NONCE_MODULUS


@given(invoices(), st.integers(min_value=1, max_value=10 ** 6))
@_settings
def test_amount_change_changes_nonce(invoice, delta):
    changed = replace(invoice, amount=Decimal(int(invoice.amount) + delta))
    assume(changed.amount <= 2 ** 256 - 1)
    assert derive_reference_nonce(changed) != invoice.nonce


@given(invoices(), _address)
@_settings
def test_token_change_changes_nonce(invoice, token):
    assume(token != invoice.token_address)
    assert derive_reference_nonce(replace(invoice, token_address=token)) != invoice.nonce


@given(invoices(), st.integers(min_value=1, max_value=1000))
@_settings
def test_network_change_changes_nonce(invoice, delta):
    first = invoice.destinations[0]
    moved = replace(first, network_id=first.network_id + delta)
    changed = replace(invoice, destinations=(moved,) + invoice.destinations[1:])
    assert derive_reference_nonce(changed) != invoice.nonce


# ---------------------------------------------------------------------------
# B. Codec
# ---------------------------------------------------------------------------

@given(invoices())
@_settings
def test_roundtrip(invoice):
    decoded = decode_invoice(encode_invoice(invoice))
    assert decoded == invoice
    assert decoded.nonce == invoice.nonce


@given(st.text(max_size=200))
@settings(deadline=None, max_examples=300)
def test_decoder_fails_cleanly(text):
    try:
        decode_invoice(text)
    except (InvoiceError, ValueError):
        pass
