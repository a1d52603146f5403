"""
rkeys - identity and address-codec core for a ledger client.

Key features:
- secp256k1 and Ed25519 key pairs behind one Signer interface
- Classic (``r...``) addresses and X-addresses with destination tags
- Family seeds (``s...`` / ``sEd...``) and BIP-39 / BIP-44 HD wallets
- Payment-channel claim encoding and signing
"""

from rkeys_core.address import (
    classic_address_to_xaddress,
    compute_account_id,
    decode_classic_address,
    decode_xaddress,
    derive_classic_address,
    encode_classic_address,
    encode_xaddress,
    is_valid_classic_address,
    is_valid_xaddress,
    xaddress_to_classic_address,
)
from rkeys_core.exceptions import (
    ChecksumError,
    InvalidAddressError,
    InvalidPrivateKeyError,
    InvalidSeedError,
    KeyCoreError,
    SignatureSelfVerificationError,
    UnknownNetworkPrefixError,
)
from rkeys_core.keypairs import KeyPair, KeyType, get_signer
from rkeys_core.seed import Entropy, decode_seed, encode_seed, generate_seed, is_valid_seed
from rkeys_core.wallet import Wallet

__version__ = "1.0.0"
__all__ = [
    "ChecksumError",
    "Entropy",
    "InvalidAddressError",
    "InvalidPrivateKeyError",
    "InvalidSeedError",
    "KeyCoreError",
    "KeyPair",
    "KeyType",
    "SignatureSelfVerificationError",
    "UnknownNetworkPrefixError",
    "Wallet",
    "classic_address_to_xaddress",
    "compute_account_id",
    "decode_classic_address",
    "decode_seed",
    "decode_xaddress",
    "derive_classic_address",
    "encode_classic_address",
    "encode_seed",
    "encode_xaddress",
    "generate_seed",
    "get_signer",
    "is_valid_classic_address",
    "is_valid_seed",
    "is_valid_xaddress",
    "xaddress_to_classic_address",
]
