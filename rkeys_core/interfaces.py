"""
Boundaries to collaborators that live outside this package.

``MnemonicProvider`` supplies BIP-39 phrases and stretches them to seed
bytes.  ``LedgerClient`` is the network query / submission layer; the core
only ever hands it signed blobs and addresses, and passes its errors through
untouched.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger("rkeys.interfaces")


@runtime_checkable
class MnemonicProvider(Protocol):
    """Source of BIP-39 phrases and their stretched seeds."""

    def create_mnemonic(self) -> str:
        ...

    def mnemonic_to_seed_bytes(self, mnemonic: str, passphrase: str = "") -> bytes:
        ...

    def validate(self, mnemonic: str) -> bool:
        ...


@runtime_checkable
class LedgerClient(Protocol):
    """Query and submission client for a ledger node.

    The endpoint a client talks to is part of the client's own
    configuration; nothing in this package keeps a default.
    """

    def account_info(self, address: str) -> dict[str, Any]:
        """Balance, sequence number and flags of *address*."""
        ...

    def fee(self) -> dict[str, Any]:
        """Current fee estimates in drops."""
        ...

    def submit(self, tx_blob: str) -> dict[str, Any]:
        """Submit a signed transaction blob given as uppercase hex."""
        ...


def submit_signed_blob(client: LedgerClient, tx_blob: str | bytes) -> dict[str, Any]:
    """
    Hand a signed transaction blob to *client*.

    The blob is normalised to uppercase hex.  Whatever the client returns or
    raises is passed back unchanged.
    """
    if isinstance(tx_blob, (bytes, bytearray)):
        blob_hex = bytes(tx_blob).hex().upper()
    else:
        try:
            blob_hex = bytes.fromhex(tx_blob).hex().upper()
        except ValueError as exc:
            raise ValueError("Transaction blob is not valid hex") from exc
    if not blob_hex:
        raise ValueError("Transaction blob is empty")
    logger.debug(f"Submitting signed blob ({len(blob_hex) // 2} bytes)")
    return client.submit(blob_hex)
