"""
Explorer links for transactions and wallets.

Pure string formatting: no environment or RPC access. Unknown identifiers
always map to the test network here, whatever SOLANA_STRICT_NETWORK says.
"""

from __future__ import annotations

from typing import Union

from solana_lib.config.networks import NETWORKS, Network, NetworkConfig, resolve_network


def _explorer(network: Union[str, Network]) -> NetworkConfig:
    return NETWORKS[resolve_network(network, strict=False)]


def get_transaction_link(txn_id: str, network: Union[str, Network]) -> str:
    """Solscan URL for a transaction; non-main networks get ``?cluster=devnet``."""
    return _explorer(network).transaction_link(txn_id)


def get_wallet_link(wallet_address: str, network: Union[str, Network]) -> str:
    """Solscan URL for a wallet address."""
    return _explorer(network).wallet_link(wallet_address)
