"""Wallet address validation and keypair loading."""

from __future__ import annotations

import json

import base58
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from solana_lib.core.exceptions import InvalidAddressError, InvalidKeyError
from solana_lib.logging import get_logger

logger = get_logger(__name__)


def is_valid_wallet_address(address: str) -> bool:
    """
    Return True if address is a Solana public key on the ed25519 curve.

    Program-derived addresses decode fine but are off-curve, so they cannot
    sign and are rejected.
    """
    try:
        key = Pubkey.from_string(address)
    except Exception:
        return False
    return key.is_on_curve()


def parse_pubkey(value: str, field: str = "address") -> Pubkey:
    """Parse a base58 public key or raise InvalidAddressError naming the field."""
    try:
        return Pubkey.from_string(value)
    except Exception as e:
        raise InvalidAddressError(f"Invalid {field}: {value!r}") from e


def load_keypair(private_key: str) -> Keypair:
    """Load Keypair from a base58 secret key or a JSON array of 64 bytes (solana-keygen file format)."""
    raw = (private_key or "").strip()
    if not raw:
        raise InvalidKeyError("Empty private key")
    if raw.startswith("["):
        try:
            arr = json.loads(raw)
            return Keypair.from_bytes(bytes(arr[:64]))
        except Exception as e:
            logger.warning("keypair_load_failed", format="json", error=type(e).__name__)
            raise InvalidKeyError("Invalid private key: not a 64-byte JSON array") from e
    try:
        secret = base58.b58decode(raw)
        return Keypair.from_bytes(secret)
    except Exception as e:
        logger.warning("keypair_load_failed", format="base58", error=type(e).__name__)
        raise InvalidKeyError("Invalid private key: not a base58 64-byte secret") from e
