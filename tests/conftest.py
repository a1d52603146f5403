"""
Shared pytest fixtures for the rkeys test suite.
"""

import pytest

from rkeys_core.keypairs import KeyType
from rkeys_core.wallet import Wallet

# wallet_propose example for the passphrase "masterpassphrase"
GENESIS_SEED = "snoPBrXtMeMyMHUVTgbuqAfg1SUTb"
GENESIS_ADDRESS = "rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh"
GENESIS_PUBLIC_KEY = "0330E7FC9D56BB25D6893BA3F317AE5BCF33B3291BD63DB32654A313222F7FD020"

TEST_MNEMONIC = "abandon " * 11 + "about"


@pytest.fixture
def wallet():
    """Fresh secp256k1 wallet."""
    return Wallet.create()


@pytest.fixture
def ed_wallet():
    """Fresh Ed25519 wallet."""
    return Wallet.create(KeyType.ED25519)


@pytest.fixture
def genesis_wallet():
    """Deterministic wallet from the well-known genesis seed."""
    return Wallet.from_seed(GENESIS_SEED)


@pytest.fixture
def hd_wallet():
    """Deterministic HD wallet at m/44'/144'/0'/0/0."""
    return Wallet.from_mnemonic(TEST_MNEMONIC)
