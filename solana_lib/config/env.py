"""
Environment variable loading for solana-lib.

- SOLANA_NETWORK: default network for the CLI (main | testnet, default: testnet)
- SOLANA_MAIN_RPC_URL / SOLANA_TESTNET_RPC_URL: per-network RPC endpoint overrides
- HELIUS_API_KEY: Helius RPC used when no explicit override is set
- SOLANA_STRICT_NETWORK: reject unknown network identifiers instead of falling back
- SOLANA_REUSE_CLIENTS: keep one RPC client per network for the whole process
- SOLANA_PRIVATE_KEY: default sender key for the CLI send command
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is solana_lib/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

MAINNET_RPC_URL = "https://api.mainnet-beta.solana.com"
DEVNET_RPC_URL = "https://api.devnet.solana.com"
HELIUS_MAINNET_URL_TEMPLATE = "https://mainnet.helius-rpc.com/?api-key={key}"
HELIUS_DEVNET_URL_TEMPLATE = "https://devnet.helius-rpc.com/?api-key={key}"

_TRUTHY = ("1", "true", "yes", "on")


_env_loaded = False


def load_solana_lib_env() -> None:
    """Load .env from project root once per process; never overrides variables already set."""
    global _env_loaded
    if _env_loaded:
        return
    load_dotenv(_ENV_PATH, override=False)
    _env_loaded = True


def _parse_bool_env(name: str, default: bool = False) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if raw in _TRUTHY:
        return True
    if raw in ("0", "false", "no", "off"):
        return False
    return default


def get_default_network() -> str:
    """Return SOLANA_NETWORK from env. Default: testnet."""
    load_solana_lib_env()
    return (os.getenv("SOLANA_NETWORK") or "testnet").strip().lower() or "testnet"


def get_rpc_url(network: str, default: str) -> str:
    """
    Resolve the RPC URL for a canonical network name ("main" or "testnet").
    Order: SOLANA_<NETWORK>_RPC_URL > HELIUS_API_KEY > default.
    """
    load_solana_lib_env()
    url = (os.getenv(f"SOLANA_{network.upper()}_RPC_URL") or "").strip()
    if url:
        return url
    key = (os.getenv("HELIUS_API_KEY") or "").strip()
    if key:
        template = HELIUS_MAINNET_URL_TEMPLATE if network == "main" else HELIUS_DEVNET_URL_TEMPLATE
        return template.format(key=key)
    return default


def is_strict_network() -> bool:
    """Return True if unknown network identifiers must raise instead of falling back."""
    load_solana_lib_env()
    return _parse_bool_env("SOLANA_STRICT_NETWORK", False)


def reuse_clients() -> bool:
    """Return True if one RPC client per network should be cached for the process."""
    load_solana_lib_env()
    return _parse_bool_env("SOLANA_REUSE_CLIENTS", False)


def get_default_private_key() -> str:
    """Return SOLANA_PRIVATE_KEY from env, or empty string."""
    load_solana_lib_env()
    return (os.getenv("SOLANA_PRIVATE_KEY") or "").strip()

