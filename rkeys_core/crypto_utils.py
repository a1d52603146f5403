"""
Hashing and base-58 primitives shared by the address and seed codecs.

Everything here is a pure function over ``bytes``/``str``:
  - SHA-256, double SHA-256, SHA-512-half
  - RIPEMD-160 and Hash160 (RIPEMD-160 of SHA-256)
  - Base58 with the ledger alphabet (``r`` encodes the zero digit)
  - Base58Check: payload plus the first 4 bytes of double SHA-256
"""

from __future__ import annotations

import hashlib
import hmac

from Crypto.Hash import RIPEMD160

from rkeys_core.exceptions import ChecksumError

LEDGER_ALPHABET = "rpshnaf39wBUDNEGHJKLM4PQRST7VWXYZ2bcdeCg65jkm8oFqi1tuvAxyz"
CHECKSUM_LENGTH = 4

_ALPHABET_INDEX = {ch: i for i, ch in enumerate(LEDGER_ALPHABET)}


# ===================================================================
#  Hashes
# ===================================================================

def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def sha256d(data: bytes) -> bytes:
    """Double SHA-256."""
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def sha512_half(data: bytes) -> bytes:
    """First 32 bytes of SHA-512."""
    return hashlib.sha512(data).digest()[:32]


def ripemd160(data: bytes) -> bytes:
    # hashlib only exposes ripemd160 when the OpenSSL build still ships it
    return RIPEMD160.new(data).digest()


def hash160(data: bytes) -> bytes:
    """RIPEMD-160 of SHA-256."""
    return ripemd160(sha256(data))


def checksum(data: bytes) -> bytes:
    """The 4-byte Base58Check checksum of *data*."""
    return sha256d(data)[:CHECKSUM_LENGTH]


# ===================================================================
#  Base58 (ledger alphabet)
# ===================================================================

def base58_encode(data: bytes) -> str:
    """Encode bytes with the ledger alphabet, one ``r`` per leading zero byte."""
    n = int.from_bytes(data, "big")
    chars = []
    while n > 0:
        n, rem = divmod(n, 58)
        chars.append(LEDGER_ALPHABET[rem])
    pad = len(data) - len(data.lstrip(b"\x00"))
    return LEDGER_ALPHABET[0] * pad + "".join(reversed(chars))


def base58_decode(encoded: str) -> bytes:
    """
    Decode a ledger-alphabet base-58 string.

    Raises ValueError on characters outside the alphabet.
    """
    n = 0
    for ch in encoded:
        digit = _ALPHABET_INDEX.get(ch)
        if digit is None:
            raise ValueError("Invalid base58 character")
        n = n * 58 + digit
    pad = len(encoded) - len(encoded.lstrip(LEDGER_ALPHABET[0]))
    body = n.to_bytes((n.bit_length() + 7) // 8, "big") if n else b""
    return b"\x00" * pad + body


def base58check_encode(version: bytes, payload: bytes) -> str:
    """Encode ``version || payload || checksum``."""
    body = bytes(version) + payload
    return base58_encode(body + checksum(body))


def base58check_decode(encoded: str) -> bytes:
    """
    Decode a Base58Check string and return ``version || payload``.

    The version prefix is left in place because its length depends on the
    kind of value encoded; callers split it off.

    Raises ValueError on bad characters or a too-short body and
    ChecksumError when the trailing checksum does not match.
    """
    raw = base58_decode(encoded)
    if len(raw) <= CHECKSUM_LENGTH:
        raise ValueError("Base58Check data too short")
    body, check = raw[:-CHECKSUM_LENGTH], raw[-CHECKSUM_LENGTH:]
    if not hmac.compare_digest(checksum(body), check):
        raise ChecksumError("Base58Check checksum mismatch")
    return body
