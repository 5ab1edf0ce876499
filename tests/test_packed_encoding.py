"""
test_packed_encoding.py — Packed encoding byte layout

Pins the soliditySha3-compatible packing against known Keccak-256 vectors.

Run:
  pytest tests/test_packed_encoding.py -v
"""

import unittest

import pytest

from chain_invoice.packed_encoding import (
    keccak_text,
    pack_value,
    solidity_keccak,
    solidity_pack,
)

ADDRESS = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


class TestPackedLayout(unittest.TestCase):

    def test_uint256_is_left_padded(self):
        self.assertEqual(pack_value("uint256", 1), b"\x00" * 31 + b"\x01")

    def test_uint_accepts_decimal_string(self):
        self.assertEqual(pack_value("uint256", "258"), pack_value("uint256", 258))

    def test_smaller_uint_widths(self):
        self.assertEqual(pack_value("uint8", 255), b"\xff")
        self.assertEqual(pack_value("uint32", 1), b"\x00\x00\x00\x01")

    def test_bytes_are_right_padded(self):
        self.assertEqual(pack_value("bytes32", "0x1234"), b"\x12\x34" + b"\x00" * 30)

    def test_bytes_without_prefix(self):
        uuid_hex = "0123456789abcdef0123456789abcdef"
        self.assertEqual(pack_value("bytes16", uuid_hex), bytes.fromhex(uuid_hex))

    def test_bytes_accepts_raw_bytes(self):
        self.assertEqual(pack_value("bytes4", b"\x01"), b"\x01\x00\x00\x00")

    def test_address_is_twenty_bytes_case_insensitive(self):
        packed = pack_value("address", ADDRESS)
        self.assertEqual(len(packed), 20)
        self.assertEqual(packed, pack_value("address", ADDRESS.lower()))

    def test_string_is_utf8_unpadded(self):
        self.assertEqual(pack_value("string", "é"), "é".encode("utf-8"))

    def test_values_concatenate_without_separators(self):
        packed = solidity_pack(["uint8", "bytes2", "string"], [1, "0xabcd", "x"])
        self.assertEqual(packed, b"\x01\xab\xcdx")


class TestPackedErrors(unittest.TestCase):

    def test_negative_uint(self):
        with self.assertRaises(ValueError):
            pack_value("uint256", -1)

    def test_uint_overflow(self):
        with self.assertRaises(ValueError):
            pack_value("uint8", 256)

    def test_uint_rejects_bool_and_junk(self):
        for bad in (True, "1.5", "abc", 1.0):
            with self.assertRaises(ValueError):
                pack_value("uint256", bad)

    def test_oversized_bytes(self):
        with self.assertRaises(ValueError):
            pack_value("bytes16", "0x" + "ab" * 17)

    def test_unsupported_types(self):
        for type_name in ("int256", "uint7", "uint264", "bytes0", "bytes33", "bool"):
            with self.assertRaises(ValueError):
                pack_value(type_name, 1)

    def test_malformed_address(self):
        with self.assertRaises(ValueError):
            pack_value("address", "0x1234")

    def test_count_mismatch(self):
        with self.assertRaises(ValueError):
            solidity_pack(["uint256", "uint256"], [1])


@pytest.mark.parametrize("types, values, digest", [
    (["uint256"], [0], "0x290decd9548b62a8d60345a988386fc84ba6bc95484008f6362f93160ef3e563"),
    (["uint256"], [1], "0xb10e2d527612073b26eecdfd717e6a320cf44b4afac2b0732d9fcbe2b7fa0cf6"),
    (["string"], [""], "0xc5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"),
])
def test_known_keccak_vectors(types, values, digest):
    assert solidity_keccak(types, values) == digest


def test_keccak_text():
    assert keccak_text("hello") == "0x1c8aff950685c2ed4bc3174f3472287b56d9517b9c948127319a09a7a36deac8"
    assert keccak_text("") == solidity_keccak(["string"], [""])


def test_digest_format():
    digest = solidity_keccak(["address"], [ADDRESS])
    assert digest.startswith("0x")
    assert len(digest) == 66
    assert digest == digest.lower()
