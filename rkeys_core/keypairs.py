"""
Key-pair derivation, signing and verification.

Two signing algorithms sit behind the ``Signer`` interface:
  - secp256k1 ECDSA (``ecdsa``), deterministic RFC 6979 signatures over the
    SHA-512-half of the message, DER-encoded with a canonical low S
  - Ed25519 (``pynacl``), signing the message directly

The algorithm is always chosen explicitly through ``KeyType``; nothing here
guesses it from the shape of a key.
"""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

from ecdsa import (
    SECP256k1,
    BadDigestError,
    BadSignatureError,
    MalformedPointError,
    SigningKey,
    VerifyingKey,
)
from ecdsa.der import UnexpectedDER
from ecdsa.util import sigdecode_der, sigencode_der_canonize
from nacl.exceptions import BadSignatureError as NaclBadSignatureError
from nacl.signing import SigningKey as NaclSigningKey
from nacl.signing import VerifyKey as NaclVerifyKey

from rkeys_core.crypto_utils import sha512_half
from rkeys_core.exceptions import InvalidPrivateKeyError

ED25519_PREFIX = b"\xed"
SECP256K1_ORDER = SECP256k1.order
PRIVATE_KEY_LENGTH = 32


class KeyType(str, Enum):
    """Signing algorithm tag stored alongside every key pair."""
    SECP256K1 = "secp256k1"
    ED25519 = "ed25519"

    @property
    def hex_prefix(self) -> str:
        """Prefix used when a private key is rendered as hex."""
        return "ED" if self is KeyType.ED25519 else "00"


@dataclass(frozen=True)
class KeyPair:
    """Raw private key, public key and the algorithm that links them."""
    private_key: bytes = field(repr=False)
    public_key: bytes
    key_type: KeyType

    def __post_init__(self):
        object.__setattr__(self, "private_key", bytes(memoryview(self.private_key)))
        object.__setattr__(self, "public_key", bytes(memoryview(self.public_key)))
        object.__setattr__(self, "key_type", KeyType(self.key_type))

    @property
    def public_key_hex(self) -> str:
        return self.public_key.hex().upper()

    @property
    def private_key_hex(self) -> str:
        return self.key_type.hex_prefix + self.private_key.hex().upper()


class Signer(ABC):
    """Capability interface implemented once per signing algorithm."""

    key_type: KeyType

    @abstractmethod
    def derive_keypair(self, seed: bytes) -> KeyPair:
        """Deterministically derive a key pair from seed bytes."""

    @abstractmethod
    def keypair_from_private(self, private_key: bytes) -> KeyPair:
        """Rebuild the key pair belonging to raw private key bytes."""

    @abstractmethod
    def sign(self, message: bytes, private_key: bytes) -> bytes:
        ...

    @abstractmethod
    def verify(self, signature: bytes, message: bytes, public_key: bytes) -> bool:
        ...


# ===================================================================
#  secp256k1
# ===================================================================

def _first_valid_scalar(data: bytes) -> int:
    """SHA-512-half of ``data || seq`` for the first seq giving 0 < k < n."""
    for seq in range(2**32):
        k = int.from_bytes(sha512_half(data + seq.to_bytes(4, "big")), "big")
        if 0 < k < SECP256K1_ORDER:
            return k
    raise InvalidPrivateKeyError("No valid secp256k1 scalar found")


def compressed_public_key(private_key: bytes) -> bytes:
    """33-byte compressed secp256k1 public key for a 32-byte private key."""
    sk = SigningKey.from_string(private_key, curve=SECP256k1)
    return sk.get_verifying_key().to_string("compressed")


class Secp256k1Signer(Signer):
    """ECDSA over secp256k1 using the family-seed derivation scheme."""

    key_type = KeyType.SECP256K1

    def derive_keypair(self, seed: bytes) -> KeyPair:
        root = _first_valid_scalar(seed)
        root_pub = compressed_public_key(root.to_bytes(32, "big"))
        # account index 0 is the only one family seeds ever use
        intermediate = _first_valid_scalar(root_pub + (0).to_bytes(4, "big"))
        private = ((root + intermediate) % SECP256K1_ORDER).to_bytes(32, "big")
        return KeyPair(private, compressed_public_key(private), self.key_type)

    def keypair_from_private(self, private_key: bytes) -> KeyPair:
        if len(private_key) != PRIVATE_KEY_LENGTH:
            raise InvalidPrivateKeyError(
                f"secp256k1 private key must be {PRIVATE_KEY_LENGTH} bytes"
            )
        k = int.from_bytes(private_key, "big")
        if not 0 < k < SECP256K1_ORDER:
            raise InvalidPrivateKeyError("secp256k1 private key out of range")
        return KeyPair(bytes(private_key), compressed_public_key(private_key), self.key_type)

    def sign(self, message: bytes, private_key: bytes) -> bytes:
        sk = SigningKey.from_string(private_key, curve=SECP256k1)
        return sk.sign_digest_deterministic(
            sha512_half(message),
            hashfunc=hashlib.sha256,
            sigencode=sigencode_der_canonize,
        )

    def verify(self, signature: bytes, message: bytes, public_key: bytes) -> bool:
        try:
            vk = VerifyingKey.from_string(public_key, curve=SECP256k1)
            return vk.verify_digest(signature, sha512_half(message), sigdecode=sigdecode_der)
        except (BadSignatureError, BadDigestError, MalformedPointError, UnexpectedDER, ValueError):
            return False


# ===================================================================
#  Ed25519
# ===================================================================

class Ed25519Signer(Signer):
    """Ed25519; public keys carry a leading ``0xED`` marker byte."""

    key_type = KeyType.ED25519

    def derive_keypair(self, seed: bytes) -> KeyPair:
        return self.keypair_from_private(sha512_half(seed))

    def keypair_from_private(self, private_key: bytes) -> KeyPair:
        if len(private_key) != PRIVATE_KEY_LENGTH:
            raise InvalidPrivateKeyError(
                f"Ed25519 private key must be {PRIVATE_KEY_LENGTH} bytes"
            )
        sk = NaclSigningKey(bytes(private_key))
        return KeyPair(bytes(private_key), ED25519_PREFIX + bytes(sk.verify_key), self.key_type)

    def sign(self, message: bytes, private_key: bytes) -> bytes:
        sk = NaclSigningKey(bytes(private_key))
        return bytes(sk.sign(message).signature)

    def verify(self, signature: bytes, message: bytes, public_key: bytes) -> bool:
        if len(public_key) != 33 or public_key[:1] != ED25519_PREFIX:
            return False
        try:
            NaclVerifyKey(public_key[1:]).verify(message, signature)
            return True
        except (NaclBadSignatureError, ValueError, TypeError):
            return False


_SIGNERS: dict[KeyType, Signer] = {
    KeyType.SECP256K1: Secp256k1Signer(),
    KeyType.ED25519: Ed25519Signer(),
}


def get_signer(key_type: KeyType | str) -> Signer:
    """Return the signer for an explicit key type tag."""
    return _SIGNERS[KeyType(key_type)]
