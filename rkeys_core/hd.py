"""
Hierarchical deterministic key derivation (BIP-32 / BIP-44).

Wallets restored from a mnemonic use the path
``m/44'/144'/account'/change/address_index`` (144 is the ledger's SLIP-44
coin type) over secp256k1.
"""

from __future__ import annotations

import hashlib
import hmac
import struct
from typing import TYPE_CHECKING

from rkeys_core.crypto_utils import hash160
from rkeys_core.exceptions import InvalidPrivateKeyError
from rkeys_core.keypairs import SECP256K1_ORDER, KeyPair, KeyType, compressed_public_key

if TYPE_CHECKING:
    from rkeys_core.wallet import Wallet

BIP32_SEED_KEY = b"Bitcoin seed"
BIP44_PURPOSE = 44
COIN_TYPE = 144


def bip44_path(account: int = 0, change: int = 0, address_index: int = 0) -> str:
    """Render the fixed BIP-44 path for the given indices."""
    for name, value in (("account", account), ("change", change),
                        ("address_index", address_index)):
        if not 0 <= value < HDNode.HARDENED:
            raise ValueError(f"{name} must be in [0, 2**31), got {value}")
    return f"m/{BIP44_PURPOSE}'/{COIN_TYPE}'/{account}'/{change}/{address_index}"


class HDNode:
    """
    Hierarchical Deterministic key derivation node.

    Implements BIP-32 private derivation with HMAC-SHA512.  Hardened
    indices are written with a trailing ``'`` in paths.
    """

    HARDENED = 0x80000000

    def __init__(self, private_key: bytes, chain_code: bytes, depth: int = 0,
                 index: int = 0, parent_fingerprint: bytes = b"\x00" * 4):
        self.private_key = private_key
        self.chain_code = chain_code
        self.depth = depth
        self.index = index
        self.parent_fingerprint = parent_fingerprint

    @classmethod
    def from_seed(cls, seed: bytes) -> HDNode:
        """Create the master node from a BIP-39 seed (16 to 64 bytes)."""
        if not 16 <= len(seed) <= 64:
            raise ValueError("HD seed must be between 16 and 64 bytes")
        I = hmac.new(BIP32_SEED_KEY, seed, hashlib.sha512).digest()
        key = int.from_bytes(I[:32], "big")
        if not 0 < key < SECP256K1_ORDER:
            raise InvalidPrivateKeyError("Seed produces an invalid master key")
        return cls(private_key=I[:32], chain_code=I[32:])

    @property
    def public_key(self) -> bytes:
        """Compressed (33-byte) public key."""
        return compressed_public_key(self.private_key)

    @property
    def fingerprint(self) -> bytes:
        """First 4 bytes of Hash160 of the public key."""
        return hash160(self.public_key)[:4]

    def derive_child(self, index: int) -> HDNode:
        """Derive a child node at the given index."""
        if not 0 <= index <= 0xFFFFFFFF:
            raise ValueError(f"Child index out of range: {index}")
        if index >= self.HARDENED:
            data = b"\x00" + self.private_key + struct.pack(">I", index)
        else:
            data = self.public_key + struct.pack(">I", index)

        I = hmac.new(self.chain_code, data, hashlib.sha512).digest()
        tweak = int.from_bytes(I[:32], "big")
        child_key_int = (tweak + int.from_bytes(self.private_key, "big")) % SECP256K1_ORDER
        # BIP-32 says to move on to the next index; odds are below 2**-127
        if tweak >= SECP256K1_ORDER or child_key_int == 0:
            raise InvalidPrivateKeyError(f"Index {index} yields an invalid child key")

        return HDNode(
            private_key=child_key_int.to_bytes(32, "big"),
            chain_code=I[32:],
            depth=self.depth + 1,
            index=index,
            parent_fingerprint=self.fingerprint,
        )

    def derive_path(self, path: str) -> HDNode:
        """
        Derive from a BIP-44 path string like "m/44'/144'/0'/0/0".
        """
        if path == "m":
            return self
        if path.startswith("m/"):
            path = path[2:]

        node = self
        for component in path.split("/"):
            hardened = component.endswith("'")
            digits = component[:-1] if hardened else component
            if not digits.isdigit():
                raise ValueError(f"Invalid path component: {component!r}")
            index = int(digits)
            if index >= self.HARDENED:
                raise ValueError(f"Path index too large: {component!r}")
            node = node.derive_child(index + self.HARDENED if hardened else index)
        return node

    def to_keypair(self) -> KeyPair:
        return KeyPair(self.private_key, self.public_key, KeyType.SECP256K1)

    def to_wallet(self, mnemonic: str | None = None, path: str | None = None) -> Wallet:
        """Convert this HD node into a Wallet instance."""
        from rkeys_core.wallet import Wallet
        return Wallet(self.to_keypair(), mnemonic=mnemonic, derivation_path=path)

    def __repr__(self) -> str:
        return f"HDNode(depth={self.depth}, index={self.index})"
