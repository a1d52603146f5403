"""
Account identifiers, classic addresses and X-addresses.

  account id   = RIPEMD160(SHA256(public key)), 20 bytes
  classic      = base58check(0x00 || account id), always starts with ``r``
  X-address    = base58check(prefix(2) || account id || flag(1) || tag(8))

The X-address tag field holds the destination tag as a 32-bit little-endian
word followed by four zero bytes; flag 0x01 marks a tag as present.
"""

from __future__ import annotations

from typing import NamedTuple, Optional

from rkeys_core.crypto_utils import base58check_decode, base58check_encode, hash160
from rkeys_core.exceptions import (
    ChecksumError,
    InvalidAddressError,
    UnknownNetworkPrefixError,
)

ACCOUNT_ID_LENGTH = 20
CLASSIC_ADDRESS_VERSION = b"\x00"
CLASSIC_ADDRESS_MIN_LENGTH = 25
CLASSIC_ADDRESS_MAX_LENGTH = 35

MAIN_NETWORK_PREFIX = b"\x05\x44"
TEST_NETWORK_PREFIX = b"\x04\x93"
FLAG_NO_TAG = 0x00
FLAG_TAG = 0x01
MAX_TAG = 0xFFFFFFFF
_XADDRESS_BODY_LENGTH = 2 + ACCOUNT_ID_LENGTH + 1 + 8


class DecodedXAddress(NamedTuple):
    """Classic address, destination tag and network flag of an X-address."""
    classic_address: str
    tag: Optional[int]
    is_test: bool

    @property
    def account_id(self) -> bytes:
        return decode_classic_address(self.classic_address)


# ===================================================================
#  Account id / classic address
# ===================================================================

def compute_account_id(public_key: bytes) -> bytes:
    """20-byte account identifier of a public key."""
    return hash160(public_key)


def encode_classic_address(account_id: bytes) -> str:
    if len(account_id) != ACCOUNT_ID_LENGTH:
        raise ValueError(f"Account id must be {ACCOUNT_ID_LENGTH} bytes, got {len(account_id)}")
    return base58check_encode(CLASSIC_ADDRESS_VERSION, account_id)


def derive_classic_address(public_key: bytes) -> str:
    """Classic address of a public key."""
    return encode_classic_address(compute_account_id(public_key))


def decode_classic_address(address: str) -> bytes:
    """
    Return the account id encoded in a classic address.

    Raises InvalidAddressError for a malformed address and ChecksumError
    when the checksum does not match.
    """
    if not address.startswith("r"):
        raise InvalidAddressError("Classic address must start with 'r'")
    if not CLASSIC_ADDRESS_MIN_LENGTH <= len(address) <= CLASSIC_ADDRESS_MAX_LENGTH:
        raise InvalidAddressError(
            f"Classic address length {len(address)} outside "
            f"[{CLASSIC_ADDRESS_MIN_LENGTH}, {CLASSIC_ADDRESS_MAX_LENGTH}]"
        )
    try:
        body = base58check_decode(address)
    except ChecksumError:
        raise
    except ValueError as exc:
        raise InvalidAddressError(f"Classic address is not valid base58: {exc}") from exc
    if len(body) != 1 + ACCOUNT_ID_LENGTH or body[:1] != CLASSIC_ADDRESS_VERSION:
        raise InvalidAddressError("Classic address payload has the wrong shape")
    return body[1:]


def is_valid_classic_address(address: str) -> bool:
    if not isinstance(address, str):
        return False
    try:
        decode_classic_address(address)
    except (InvalidAddressError, ChecksumError):
        return False
    return True


# ===================================================================
#  X-address
# ===================================================================

def encode_xaddress(account_id: bytes, tag: int | None = None, is_test: bool = False) -> str:
    """Pack an account id, optional destination tag and network flag."""
    if len(account_id) != ACCOUNT_ID_LENGTH:
        raise ValueError(f"Account id must be {ACCOUNT_ID_LENGTH} bytes, got {len(account_id)}")
    if tag is not None and not 0 <= tag <= MAX_TAG:
        raise ValueError(f"Destination tag {tag} does not fit in 32 bits")

    prefix = TEST_NETWORK_PREFIX if is_test else MAIN_NETWORK_PREFIX
    if tag is None:
        flag, tag_field = FLAG_NO_TAG, bytes(8)
    else:
        flag, tag_field = FLAG_TAG, tag.to_bytes(4, "little") + bytes(4)
    return base58check_encode(prefix, account_id + bytes([flag]) + tag_field)


def decode_xaddress(xaddress: str) -> DecodedXAddress:
    """
    Unpack an X-address.

    Raises ChecksumError on a checksum mismatch, UnknownNetworkPrefixError
    for a prefix that is neither main nor test, and InvalidAddressError for
    any other malformation.
    """
    try:
        body = base58check_decode(xaddress)
    except ChecksumError:
        raise
    except ValueError as exc:
        raise InvalidAddressError(f"X-address is not valid base58: {exc}") from exc
    if len(body) != _XADDRESS_BODY_LENGTH:
        raise InvalidAddressError(f"X-address payload must be {_XADDRESS_BODY_LENGTH} bytes")

    prefix = body[:2]
    if prefix == MAIN_NETWORK_PREFIX:
        is_test = False
    elif prefix == TEST_NETWORK_PREFIX:
        is_test = True
    else:
        raise UnknownNetworkPrefixError(f"Unknown X-address network prefix {prefix.hex()}")

    account_id = body[2:22]
    flag = body[22]
    tag_field = body[23:]
    if flag == FLAG_NO_TAG:
        tag = None
    elif flag == FLAG_TAG:
        if tag_field[4:] != bytes(4):
            raise InvalidAddressError("64-bit destination tags are not supported")
        tag = int.from_bytes(tag_field[:4], "little")
    else:
        raise InvalidAddressError(f"Unknown X-address flag 0x{flag:02x}")

    return DecodedXAddress(encode_classic_address(account_id), tag, is_test)


def classic_address_to_xaddress(classic_address: str, tag: int | None = None,
                                is_test: bool = False) -> str:
    return encode_xaddress(decode_classic_address(classic_address), tag, is_test)


def xaddress_to_classic_address(xaddress: str) -> tuple[str, int | None, bool]:
    decoded = decode_xaddress(xaddress)
    return decoded.classic_address, decoded.tag, decoded.is_test


def is_valid_xaddress(xaddress: str) -> bool:
    if not isinstance(xaddress, str):
        return False
    try:
        decode_xaddress(xaddress)
    except (InvalidAddressError, ChecksumError):
        return False
    return True
