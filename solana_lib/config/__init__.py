"""
Configuration for solana-lib.

Static network registry plus environment overrides loaded from .env.
"""

from solana_lib.config.networks import (  # noqa: F401
    NETWORKS,
    Network,
    NetworkConfig,
    get_network,
    list_networks,
    network_id,
    resolve_network,
)

__all__ = [
    "NETWORKS",
    "Network",
    "NetworkConfig",
    "get_network",
    "list_networks",
    "network_id",
    "resolve_network",
]
