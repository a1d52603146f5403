"""
Payment-channel claim encoding.

A claim authorises the channel destination to collect up to *drops* from
the channel off-ledger.  The signed preimage is

    b"CLM\\0" || channel id || uint64 big-endian drops
"""

from __future__ import annotations

import logging
import struct

from rkeys_core.exceptions import SignatureSelfVerificationError
from rkeys_core.keypairs import KeyPair, KeyType, get_signer

logger = logging.getLogger("rkeys.claims")

CLAIM_PREFIX = b"CLM\x00"
MAX_DROPS = 0xFFFFFFFFFFFFFFFF


def _channel_bytes(channel_id: bytes | str) -> bytes:
    if isinstance(channel_id, str):
        try:
            return bytes.fromhex(channel_id)
        except ValueError as exc:
            raise ValueError("Channel id is not valid hex") from exc
    return bytes(channel_id)


def encode_claim(channel_id: bytes | str, drops: int) -> bytes:
    """Build the domain-separated claim preimage."""
    if not 0 <= drops <= MAX_DROPS:
        raise ValueError(f"Claim amount {drops} does not fit in uint64")
    return CLAIM_PREFIX + _channel_bytes(channel_id) + struct.pack(">Q", drops)


def sign_claim(keypair: KeyPair, channel_id: bytes | str, drops: int) -> bytes:
    """
    Sign a claim with *keypair*.

    The signature is checked against the key pair's public key before it is
    returned; a mismatch raises SignatureSelfVerificationError.
    """
    signer = get_signer(keypair.key_type)
    message = encode_claim(channel_id, drops)
    signature = signer.sign(message, keypair.private_key)
    if not signer.verify(signature, message, keypair.public_key):
        logger.critical(f"{keypair.key_type.value} claim signature failed self-verification")
        raise SignatureSelfVerificationError(
            f"{keypair.key_type.value} claim signature did not verify against its own public key"
        )
    return signature


def verify_claim(channel_id: bytes | str, drops: int, signature: bytes,
                 public_key: bytes, key_type: KeyType | str) -> bool:
    """Check a claim signature; malformed input simply fails verification."""
    try:
        message = encode_claim(channel_id, drops)
    except ValueError:
        return False
    return get_signer(key_type).verify(signature, message, public_key)
