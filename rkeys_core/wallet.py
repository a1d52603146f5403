"""
Wallet management.

A wallet wraps a key pair tagged with its signing algorithm and provides:
  - Address derivation (classic and X-address)
  - Message, transaction-blob and payment-channel-claim signing
  - Creation from fresh entropy, a family seed, or a BIP-39 mnemonic
    (BIP-44 path m/44'/144'/account'/change/index)
  - Encrypted import / export of the private key (AES-256-GCM)

Wallets are immutable; the address is always computed from the public key.
"""

from __future__ import annotations

import hashlib
import logging
import os
from dataclasses import dataclass, field
from functools import cached_property
from typing import TYPE_CHECKING, Any

from Crypto.Cipher import AES

from rkeys_core import claims
from rkeys_core.address import compute_account_id, derive_classic_address, encode_xaddress
from rkeys_core.bip39 import default_provider, generate_mnemonic
from rkeys_core.exceptions import InvalidPrivateKeyError, SignatureSelfVerificationError
from rkeys_core.hd import HDNode, bip44_path
from rkeys_core.interfaces import MnemonicProvider
from rkeys_core.keypairs import KeyPair, KeyType, get_signer
from rkeys_core.seed import Entropy, decode_seed, encode_seed

if TYPE_CHECKING:
    from rkeys_core.config import KeyCoreConfig

logger = logging.getLogger("rkeys.wallet")

EXPORT_VERSION = 3
KDF_ITERATIONS = 600_000
_PRIVATE_KEY_PREFIXES = {0x00: KeyType.SECP256K1, 0xED: KeyType.ED25519}


@dataclass(frozen=True, repr=False)
class Wallet:
    """User-facing wallet: a tagged key pair plus where it came from."""

    keypair: KeyPair
    seed: str | None = field(default=None, compare=False)
    mnemonic: str | None = field(default=None, compare=False)
    derivation_path: str | None = field(default=None, compare=False)

    def __post_init__(self):
        if self.seed is not None and self.mnemonic is not None:
            raise ValueError("A wallet comes from a seed or a mnemonic, not both")

    # ---- key material ----

    @property
    def key_type(self) -> KeyType:
        return self.keypair.key_type

    @property
    def private_key(self) -> bytes:
        return self.keypair.private_key

    @property
    def public_key(self) -> bytes:
        return self.keypair.public_key

    @property
    def public_key_hex(self) -> str:
        return self.keypair.public_key_hex

    @property
    def private_key_hex(self) -> str:
        return self.keypair.private_key_hex

    @cached_property
    def account_id(self) -> bytes:
        return compute_account_id(self.public_key)

    @cached_property
    def address(self) -> str:
        return derive_classic_address(self.public_key)

    def get_xaddress(self, tag: int | None = None, is_test: bool = False) -> str:
        return encode_xaddress(self.account_id, tag, is_test)

    # ---- factory methods ----

    @classmethod
    def create(cls, key_type: KeyType | str = KeyType.SECP256K1) -> Wallet:
        """Generate a brand-new wallet from fresh entropy.

        Args:
            key_type: "secp256k1" (default) or "ed25519".
        """
        return cls.from_entropy(Entropy.generate(), key_type)

    @classmethod
    def from_entropy(cls, entropy: Entropy | bytes,
                     key_type: KeyType | str = KeyType.SECP256K1) -> Wallet:
        if not isinstance(entropy, Entropy):
            entropy = Entropy(entropy)
        key_type = KeyType(key_type)
        keypair = get_signer(key_type).derive_keypair(entropy.data)
        wallet = cls(keypair, seed=encode_seed(entropy, key_type))
        logger.debug(f"Derived {key_type.value} wallet {wallet.address}")
        return wallet

    @classmethod
    def from_seed(cls, seed: str) -> Wallet:
        """
        Restore a wallet from a family seed.

        The key type comes from the seed's version prefix.  Raises
        InvalidSeedError when the seed does not decode.
        """
        entropy, key_type = decode_seed(seed)
        return cls.from_entropy(entropy, key_type)

    @classmethod
    def from_mnemonic(cls, mnemonic: str, passphrase: str = "", account: int = 0,
                      change: int = 0, address_index: int = 0,
                      provider: MnemonicProvider | None = None) -> Wallet:
        """
        Create a wallet from a BIP-39 mnemonic phrase using HD derivation.

        Path: m/44'/144'/account'/change/address_index
        """
        provider = provider or default_provider()
        if not provider.validate(mnemonic):
            raise ValueError("Invalid mnemonic phrase")
        path = bip44_path(account, change, address_index)
        seed = provider.mnemonic_to_seed_bytes(mnemonic, passphrase)
        wallet = HDNode.from_seed(seed).derive_path(path).to_wallet(mnemonic, path)
        logger.debug(f"Derived HD wallet {wallet.address} at {path}")
        return wallet

    @classmethod
    def create_hd(cls, mnemonic: str | None = None, strength: int = 128,
                  provider: MnemonicProvider | None = None) -> tuple[str, Wallet]:
        """
        Create an HD wallet, optionally generating a new mnemonic.
        Returns (mnemonic_phrase, wallet).
        """
        if mnemonic is None:
            if provider is None:
                mnemonic = generate_mnemonic(strength)
            else:
                mnemonic = provider.create_mnemonic()
        return mnemonic, cls.from_mnemonic(mnemonic, provider=provider)

    @classmethod
    def from_private_key(cls, private_key: str | bytes,
                         key_type: KeyType | str | None = None) -> Wallet:
        """
        Rebuild a wallet from a private key.

        A 33-byte key carries its key type in the first byte (``00`` or
        ``ED``); a bare 32-byte key needs *key_type*.
        """
        if isinstance(private_key, str):
            try:
                raw = bytes.fromhex(private_key)
            except ValueError as exc:
                raise InvalidPrivateKeyError("Private key is not valid hex") from exc
        else:
            raw = bytes(private_key)

        if len(raw) == 33:
            tagged = _PRIVATE_KEY_PREFIXES.get(raw[0])
            if tagged is None:
                raise InvalidPrivateKeyError("Unknown private key type prefix")
            if key_type is not None and KeyType(key_type) is not tagged:
                raise InvalidPrivateKeyError("Private key prefix contradicts key_type")
            key_type, raw = tagged, raw[1:]
        elif key_type is None:
            raise InvalidPrivateKeyError("key_type is required for an untagged private key")
        return cls(get_signer(key_type).keypair_from_private(raw))

    @classmethod
    def from_config(cls, config: KeyCoreConfig, mnemonic: str | None = None) -> Wallet:
        """Create a wallet the way *config* asks for."""
        wc = config.wallet
        if wc.use_hd or mnemonic is not None:
            if mnemonic is None:
                mnemonic = default_provider().create_mnemonic()
            return cls.from_mnemonic(mnemonic, account=wc.hd_account, change=wc.hd_change,
                                     address_index=wc.hd_address_index)
        return cls.create(wc.key_type)

    # ---- signing ----

    def sign(self, message: bytes) -> bytes:
        """
        Sign *message* and check the signature against our own public key.

        A signature that does not verify means the signing primitive is
        broken; that raises SignatureSelfVerificationError and no signature
        is returned.
        """
        signer = get_signer(self.key_type)
        signature = signer.sign(message, self.private_key)
        if not signer.verify(signature, message, self.public_key):
            logger.critical(
                f"{self.key_type.value} signature failed self-verification for {self.address}"
            )
            raise SignatureSelfVerificationError(
                f"{self.key_type.value} signature did not verify against its own public key"
            )
        return signature

    def verify(self, message: bytes, signature: bytes) -> bool:
        return get_signer(self.key_type).verify(signature, message, self.public_key)

    def sign_blob(self, tx_blob: str) -> str:
        """Sign a hex transaction blob, returning the signature as uppercase hex."""
        try:
            blob = bytes.fromhex(tx_blob)
        except ValueError as exc:
            raise ValueError("Transaction blob is not valid hex") from exc
        return self.sign(blob).hex().upper()

    def encode_claim(self, channel_id: bytes | str, drops: int) -> bytes:
        """Preimage authorising *drops* from payment channel *channel_id*."""
        return claims.encode_claim(channel_id, drops)

    def sign_claim(self, channel_id: bytes | str, drops: int) -> str:
        return self.sign(self.encode_claim(channel_id, drops)).hex().upper()

    def verify_claim(self, channel_id: bytes | str, drops: int, signature: bytes | str) -> bool:
        if isinstance(signature, str):
            try:
                signature = bytes.fromhex(signature)
            except ValueError:
                return False
        return claims.verify_claim(channel_id, drops, signature, self.public_key, self.key_type)

    # ---- serialisation ----

    def to_dict(self) -> dict:
        """Public view of the wallet; never includes secrets."""
        return {
            "address": self.address,
            "public_key": self.public_key_hex,
            "key_type": self.key_type.value,
            "derivation_path": self.derivation_path,
        }

    def export_encrypted(self, passphrase: str) -> dict:
        """
        Export wallet as an encrypted JSON-compatible dict.

        AES-256-GCM authenticated encryption with a unique nonce per field.
        PBKDF2-HMAC-SHA256 with 600 000 iterations.  The seed or mnemonic,
        when known, is encrypted alongside the private key.
        """
        salt = os.urandom(16)
        key = hashlib.pbkdf2_hmac("sha256", passphrase.encode("utf-8"), salt, KDF_ITERATIONS)

        enc_priv, nonce_priv, tag_priv = self._aes_gcm_encrypt(key, self.private_key)
        data: dict[str, Any] = {
            "version": EXPORT_VERSION,
            "address": self.address,
            "public_key": self.public_key_hex,
            "key_type": self.key_type.value,
            "encrypted_private_key": enc_priv.hex(),
            "nonce": nonce_priv.hex(),
            "tag": tag_priv.hex(),
            "provenance": None,
            "derivation_path": self.derivation_path,
            "salt": salt.hex(),
            "kdf": "pbkdf2-hmac-sha256",
            "kdf_iterations": KDF_ITERATIONS,
        }
        secret = self.seed if self.seed is not None else self.mnemonic
        if secret is not None:
            enc, nonce, tag = self._aes_gcm_encrypt(key, secret.encode("utf-8"))
            data["provenance"] = "seed" if self.seed is not None else "mnemonic"
            data["encrypted_secret"] = enc.hex()
            data["nonce_secret"] = nonce.hex()
            data["tag_secret"] = tag.hex()
        return data

    @classmethod
    def import_encrypted(cls, data: dict, passphrase: str) -> Wallet:
        """
        Import from an encrypted export.

        Raises ValueError on a wrong passphrase or tampered data, and
        InvalidPrivateKeyError when the decrypted key does not match the
        exported public key.
        """
        if data.get("version") != EXPORT_VERSION:
            raise ValueError(f"Unsupported export version: {data.get('version')}")
        salt = bytes.fromhex(data["salt"])
        iterations = data.get("kdf_iterations", KDF_ITERATIONS)
        key = hashlib.pbkdf2_hmac("sha256", passphrase.encode("utf-8"), salt, iterations)

        priv = cls._aes_gcm_decrypt(
            key,
            bytes.fromhex(data["nonce"]),
            bytes.fromhex(data["encrypted_private_key"]),
            bytes.fromhex(data["tag"]),
        )
        keypair = get_signer(data["key_type"]).keypair_from_private(priv)
        if keypair.public_key_hex != data["public_key"].upper():
            raise InvalidPrivateKeyError("Decrypted private key does not match the public key")

        seed = mnemonic = None
        if data.get("provenance"):
            secret = cls._aes_gcm_decrypt(
                key,
                bytes.fromhex(data["nonce_secret"]),
                bytes.fromhex(data["encrypted_secret"]),
                bytes.fromhex(data["tag_secret"]),
            ).decode("utf-8")
            if data["provenance"] == "seed":
                seed = secret
            else:
                mnemonic = secret
        return cls(keypair, seed=seed, mnemonic=mnemonic,
                   derivation_path=data.get("derivation_path"))

    # ---- AES-256-GCM authenticated encryption ----

    @staticmethod
    def _aes_gcm_encrypt(key: bytes, data: bytes) -> tuple[bytes, bytes, bytes]:
        """Encrypt *data* with AES-256-GCM. Returns (ciphertext, nonce, tag)."""
        nonce = os.urandom(12)
        cipher = AES.new(key, AES.MODE_GCM, nonce=nonce)
        ciphertext, tag = cipher.encrypt_and_digest(data)
        return ciphertext, nonce, tag

    @staticmethod
    def _aes_gcm_decrypt(key: bytes, nonce: bytes, ciphertext: bytes, tag: bytes) -> bytes:
        """Decrypt and verify AES-256-GCM ciphertext. Raises ValueError on tamper."""
        cipher = AES.new(key, AES.MODE_GCM, nonce=nonce)
        return cipher.decrypt_and_verify(ciphertext, tag)

    def __repr__(self) -> str:
        return f"Wallet({self.address})"
