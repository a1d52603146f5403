"""
Entropy and family-seed encoding.

A family seed is ``base58check(version || entropy)`` where the version
prefix records the signing algorithm:
  - ``0x21``              secp256k1, renders as ``s...``
  - ``0x01 0xE1 0x4B``    Ed25519, renders as ``sEd...``
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from rkeys_core.crypto_utils import base58check_decode, base58check_encode
from rkeys_core.exceptions import InvalidSeedError
from rkeys_core.keypairs import KeyType

ENTROPY_LENGTH = 16
SEED_MIN_LENGTH = 10

SEED_VERSIONS: dict[KeyType, bytes] = {
    KeyType.SECP256K1: b"\x21",
    KeyType.ED25519: b"\x01\xe1\x4b",
}


@dataclass(frozen=True)
class Entropy:
    """Immutable 16-byte buffer of seed entropy."""
    data: bytes = field(repr=False)

    def __post_init__(self):
        object.__setattr__(self, "data", bytes(memoryview(self.data)))
        if len(self.data) != ENTROPY_LENGTH:
            raise ValueError(f"Entropy must be {ENTROPY_LENGTH} bytes, got {len(self.data)}")

    @classmethod
    def generate(cls) -> Entropy:
        """Fresh entropy from the operating system CSPRNG."""
        return cls(os.urandom(ENTROPY_LENGTH))


def encode_seed(entropy: bytes | Entropy, key_type: KeyType | str = KeyType.SECP256K1) -> str:
    """Encode entropy and its key type as a family seed string."""
    raw = entropy.data if isinstance(entropy, Entropy) else bytes(entropy)
    if len(raw) != ENTROPY_LENGTH:
        raise ValueError(f"Entropy must be {ENTROPY_LENGTH} bytes, got {len(raw)}")
    return base58check_encode(SEED_VERSIONS[KeyType(key_type)], raw)


def decode_seed(seed: str) -> tuple[bytes, KeyType]:
    """
    Return ``(entropy, key_type)`` for a family seed.

    Every failure is reported as InvalidSeedError; messages never echo the
    seed itself.
    """
    if len(seed) < SEED_MIN_LENGTH:
        raise InvalidSeedError("Seed is too short")
    if not seed.startswith("s"):
        raise InvalidSeedError("Seed must start with 's'")
    try:
        body = base58check_decode(seed)
    except ValueError as exc:
        # ChecksumError is a ValueError too
        raise InvalidSeedError(f"Seed does not decode: {exc}") from exc

    for key_type, version in SEED_VERSIONS.items():
        if len(body) == len(version) + ENTROPY_LENGTH and body.startswith(version):
            return body[len(version):], key_type
    raise InvalidSeedError("Seed has an unknown version prefix or wrong length")


def is_valid_seed(seed: str) -> bool:
    if not isinstance(seed, str):
        return False
    try:
        decode_seed(seed)
    except InvalidSeedError:
        return False
    return True


def generate_seed(key_type: KeyType | str = KeyType.SECP256K1,
                  entropy: bytes | Entropy | None = None) -> str:
    """Encode fresh (or the given) entropy as a family seed."""
    if entropy is None:
        entropy = Entropy.generate()
    return encode_seed(entropy, key_type)
