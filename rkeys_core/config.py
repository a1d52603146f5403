"""
TOML-based configuration for rkeys.

Loads settings from a TOML file and/or environment variables.
Environment variables take precedence over file values.

Usage:
    from rkeys_core.config import load_config
    cfg = load_config("rkeys.toml")
    wallet = Wallet.from_config(cfg)
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import,no-redef]

from rkeys_core.address import classic_address_to_xaddress
from rkeys_core.keypairs import KeyType

_TRUE = {"1", "true", "yes", "on"}


@dataclass
class WalletConfig:
    """How new wallets are created.

    With ``use_hd`` a mnemonic wallet is derived at
    m/44'/144'/hd_account'/hd_change/hd_address_index (always secp256k1);
    otherwise a family-seed wallet of ``key_type`` is generated.
    """
    key_type: str = KeyType.SECP256K1.value
    use_hd: bool = False
    hd_account: int = 0
    hd_change: int = 0
    hd_address_index: int = 0


@dataclass
class NetworkConfig:
    """Values handed to the external query/submission client."""
    is_test: bool = False      # X-address network flag
    endpoint: str = ""         # opaque to this package

    def xaddress(self, classic_address: str, tag: int | None = None) -> str:
        """X-address of *classic_address* on the configured network."""
        return classic_address_to_xaddress(classic_address, tag, self.is_test)


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    format: str = "human"   # "human" or "json"
    file: str | None = None


@dataclass
class KeyCoreConfig:
    """Top-level configuration container."""
    wallet: WalletConfig = field(default_factory=WalletConfig)
    network: NetworkConfig = field(default_factory=NetworkConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> None:
        """Raise ValueError for values no component can use."""
        KeyType(self.wallet.key_type)
        for name in ("hd_account", "hd_change", "hd_address_index"):
            value = getattr(self.wallet, name)
            if not isinstance(value, int) or not 0 <= value < 0x80000000:
                raise ValueError(f"wallet.{name} must be in [0, 2**31), got {value!r}")
        if self.logging.format not in ("human", "json"):
            raise ValueError(f"logging.format must be 'human' or 'json', got {self.logging.format!r}")


def _merge(dc: Any, raw: dict[str, Any]) -> None:
    """Merge a raw dict into a dataclass instance (in-place)."""
    for key, value in raw.items():
        key_under = key.replace("-", "_")
        if hasattr(dc, key_under):
            setattr(dc, key_under, value)


def load_config(path: str | None = None) -> KeyCoreConfig:
    """
    Load configuration from a TOML file, then overlay environment variables.

    Env-var mapping:
        RKEYS_KEY_TYPE      -> wallet.key_type
        RKEYS_USE_HD        -> wallet.use_hd
        RKEYS_HD_ACCOUNT    -> wallet.hd_account
        RKEYS_HD_CHANGE     -> wallet.hd_change
        RKEYS_HD_ADDRESS_INDEX -> wallet.hd_address_index
        RKEYS_TEST_NETWORK  -> network.is_test
        RKEYS_ENDPOINT      -> network.endpoint
        RKEYS_LOG_LEVEL     -> logging.level
        RKEYS_LOG_FMT       -> logging.format
    """
    cfg = KeyCoreConfig()

    # ── TOML file ────────────────────────────────────────────────
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p, "rb") as f:
                data = tomllib.load(f)
            for section_name, section_dc in [
                ("wallet", cfg.wallet),
                ("network", cfg.network),
                ("logging", cfg.logging),
            ]:
                if section_name in data:
                    _merge(section_dc, data[section_name])

    # ── Environment variable overrides ───────────────────────────
    if v := os.environ.get("RKEYS_KEY_TYPE"):
        cfg.wallet.key_type = v.lower()
    if v := os.environ.get("RKEYS_USE_HD"):
        cfg.wallet.use_hd = v.lower() in _TRUE
    if v := os.environ.get("RKEYS_HD_ACCOUNT"):
        cfg.wallet.hd_account = int(v)
    if v := os.environ.get("RKEYS_HD_CHANGE"):
        cfg.wallet.hd_change = int(v)
    if v := os.environ.get("RKEYS_HD_ADDRESS_INDEX"):
        cfg.wallet.hd_address_index = int(v)
    if v := os.environ.get("RKEYS_TEST_NETWORK"):
        cfg.network.is_test = v.lower() in _TRUE
    if v := os.environ.get("RKEYS_ENDPOINT"):
        cfg.network.endpoint = v
    if v := os.environ.get("RKEYS_LOG_LEVEL"):
        cfg.logging.level = v.upper()
    if v := os.environ.get("RKEYS_LOG_FMT"):
        cfg.logging.format = v

    cfg.validate()
    return cfg
