"""
Error kinds raised by the rkeys core.

Decoders raise the ``ValueError`` subclasses below for malformed external
input.  ``SignatureSelfVerificationError`` is different: it signals that a
cryptographic primitive produced a signature that does not verify, and is
never meant to be caught and retried.
"""

from __future__ import annotations

__all__ = [
    "KeyCoreError",
    "InvalidAddressError",
    "UnknownNetworkPrefixError",
    "ChecksumError",
    "InvalidSeedError",
    "InvalidPrivateKeyError",
    "SignatureSelfVerificationError",
]


class KeyCoreError(Exception):
    """Base class for every error raised by rkeys_core."""


class InvalidAddressError(KeyCoreError, ValueError):
    """A classic address or X-address is malformed."""


class UnknownNetworkPrefixError(InvalidAddressError):
    """An X-address carries a network prefix that is neither main nor test."""


class ChecksumError(KeyCoreError, ValueError):
    """The trailing 4-byte checksum does not match the payload."""


class InvalidSeedError(KeyCoreError, ValueError):
    """A family seed string cannot be decoded."""


class InvalidPrivateKeyError(KeyCoreError, ValueError):
    """Private key bytes are the wrong length or outside the curve order."""


class SignatureSelfVerificationError(KeyCoreError, RuntimeError):
    """A freshly produced signature failed to verify against its own key."""
