"""
Test suite for rkeys_core.crypto_utils.

Covers:
  - SHA-256 / double-SHA-256 / SHA-512-half / RIPEMD-160 / Hash160
  - Base58 encode / decode (ledger alphabet)
  - Base58Check encode / decode with checksum verification
"""

import hashlib
import unittest

from rkeys_core.crypto_utils import (
    LEDGER_ALPHABET,
    base58_decode,
    base58_encode,
    base58check_decode,
    base58check_encode,
    checksum,
    hash160,
    ripemd160,
    sha256,
    sha256d,
    sha512_half,
)
from rkeys_core.exceptions import ChecksumError


class TestHashFunctions(unittest.TestCase):

    def test_sha256_known_vector(self):
        self.assertEqual(sha256(b"hello"), hashlib.sha256(b"hello").digest())

    def test_sha256d_double_hash(self):
        single = hashlib.sha256(b"data").digest()
        self.assertEqual(sha256d(b"data"), hashlib.sha256(single).digest())

    def test_sha512_half_is_first_half(self):
        full = hashlib.sha512(b"payload").digest()
        self.assertEqual(sha512_half(b"payload"), full[:32])

    def test_ripemd160_empty_vector(self):
        self.assertEqual(ripemd160(b"").hex(), "9c1185a5c5e9fc54612808977ee8f548b2258d31")

    def test_ripemd160_abc_vector(self):
        self.assertEqual(ripemd160(b"abc").hex(), "8eb208f7e05d987a9b044a8e98c6b087f15a0bfc")

    def test_hash160_composition(self):
        data = b"public_key_bytes"
        self.assertEqual(hash160(data), ripemd160(hashlib.sha256(data).digest()))
        self.assertEqual(len(hash160(data)), 20)

    def test_checksum_is_four_bytes_of_sha256d(self):
        self.assertEqual(checksum(b"abc"), sha256d(b"abc")[:4])


class TestBase58(unittest.TestCase):

    def test_alphabet_is_58_unique_chars(self):
        self.assertEqual(len(LEDGER_ALPHABET), 58)
        self.assertEqual(len(set(LEDGER_ALPHABET)), 58)

    def test_zero_byte_encodes_to_r(self):
        self.assertEqual(base58_encode(b"\x00"), "r")

    def test_encode_preserves_leading_zeros(self):
        self.assertTrue(base58_encode(b"\x00\x00\x01").startswith("rr"))

    def test_decode_then_encode_roundtrip(self):
        original = b"\x00\x05\x10\x20\x40"
        self.assertEqual(base58_decode(base58_encode(original)), original)

    def test_empty(self):
        self.assertEqual(base58_encode(b""), "")
        self.assertEqual(base58_decode(""), b"")

    def test_decode_rejects_bitcoin_only_characters(self):
        # '0', 'O', 'I' and 'l' are in neither alphabet
        for bad in ("r0", "rO", "rI", "rl"):
            with self.assertRaises(ValueError):
                base58_decode(bad)

    def test_base58check_roundtrip(self):
        payload = b"\xab\xcd\xef" * 5
        encoded = base58check_encode(b"\x00", payload)
        self.assertEqual(base58check_decode(encoded), b"\x00" + payload)

    def test_base58check_multibyte_version(self):
        encoded = base58check_encode(b"\x01\xe1\x4b", bytes(16))
        self.assertEqual(base58check_decode(encoded)[:3], b"\x01\xe1\x4b")

    def test_base58check_bad_checksum_raises(self):
        raw = bytearray(base58_decode(base58check_encode(b"\x00", b"\x01\x02\x03")))
        raw[-1] ^= 0x01
        with self.assertRaises(ChecksumError):
            base58check_decode(base58_encode(bytes(raw)))

    def test_base58check_too_short(self):
        with self.assertRaises(ValueError):
            base58check_decode("rrr")


if __name__ == "__main__":
    unittest.main()
