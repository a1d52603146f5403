"""
BIP-39 mnemonic support, backed by the ``mnemonic`` reference library.
"""

from __future__ import annotations

from mnemonic import Mnemonic

VALID_STRENGTHS = (128, 160, 192, 224, 256)


class Bip39Provider:
    """``MnemonicProvider`` over the English BIP-39 wordlist."""

    def __init__(self, language: str = "english", strength: int = 128):
        if strength not in VALID_STRENGTHS:
            raise ValueError("Strength must be 128/160/192/224/256")
        self.language = language
        self.strength = strength
        self._mnemo = Mnemonic(language)

    def create_mnemonic(self) -> str:
        return self._mnemo.generate(strength=self.strength)

    def entropy_to_mnemonic(self, entropy: bytes) -> str:
        return self._mnemo.to_mnemonic(entropy)

    def validate(self, mnemonic: str) -> bool:
        """Word count, wordlist membership and checksum."""
        try:
            return self._mnemo.check(mnemonic)
        except (ValueError, LookupError):
            return False

    def mnemonic_to_seed_bytes(self, mnemonic: str, passphrase: str = "") -> bytes:
        """64-byte PBKDF2-HMAC-SHA512 stretch of the phrase."""
        return Mnemonic.to_seed(mnemonic, passphrase)


_DEFAULT = Bip39Provider()


def generate_mnemonic(strength: int = 128) -> str:
    """Generate a new BIP-39 mnemonic phrase."""
    if strength == _DEFAULT.strength:
        return _DEFAULT.create_mnemonic()
    return Bip39Provider(strength=strength).create_mnemonic()


def entropy_to_mnemonic(entropy: bytes) -> str:
    return _DEFAULT.entropy_to_mnemonic(entropy)


def validate_mnemonic(mnemonic: str) -> bool:
    return _DEFAULT.validate(mnemonic)


def mnemonic_to_seed(mnemonic: str, passphrase: str = "") -> bytes:
    """Convert a mnemonic phrase to a 64-byte seed."""
    return _DEFAULT.mnemonic_to_seed_bytes(mnemonic, passphrase)


def default_provider() -> Bip39Provider:
    return _DEFAULT
