"""
Solana network configuration.

Exactly two networks are known: ``main`` (mainnet-beta) and ``testnet``
(served by the devnet cluster). Explorer links point at solscan; the test
network adds ``?cluster=devnet``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional, Union

from solana_lib.config.env import DEVNET_RPC_URL, MAINNET_RPC_URL, get_rpc_url, is_strict_network
from solana_lib.core.exceptions import UnknownNetworkError
from solana_lib.logging import get_logger

logger = get_logger(__name__)

SOLSCAN_URL = "https://solscan.io"


class Network(str, Enum):
    MAIN = "main"
    TESTNET = "testnet"


@dataclass(frozen=True)
class NetworkConfig:
    """Configuration for a Solana network."""
    network: Network
    network_name: str
    rpc_url: str
    explorer_url: str = SOLSCAN_URL
    cluster: Optional[str] = None

    def _suffix(self) -> str:
        return f"?cluster={self.cluster}" if self.cluster else ""

    def transaction_link(self, signature: str) -> str:
        """Explorer URL for a transaction signature."""
        return f"{self.explorer_url}/tx/{signature}{self._suffix()}"

    def wallet_link(self, address: str) -> str:
        """Explorer URL for a wallet address."""
        return f"{self.explorer_url}/account/{address}{self._suffix()}"


NETWORKS: Dict[Network, NetworkConfig] = {
    Network.MAIN: NetworkConfig(
        network=Network.MAIN,
        network_name="mainnet",
        rpc_url=MAINNET_RPC_URL,
    ),
    Network.TESTNET: NetworkConfig(
        network=Network.TESTNET,
        network_name="testnet",
        rpc_url=DEVNET_RPC_URL,
        cluster="devnet",
    ),
}


def network_id(network: Union[str, Network]) -> str:
    """Identifier as the caller gave it; Network members render as their value."""
    return network.value if isinstance(network, Network) else str(network)


def resolve_network(identifier: Union[str, Network], strict: Optional[bool] = None) -> Network:
    """
    Map an identifier to a Network.

    ``"main"`` is production; anything else is the test network unless strict
    resolution is on (argument, or SOLANA_STRICT_NETWORK), in which case only
    the exact enum values are accepted.

    Raises:
        UnknownNetworkError: strict resolution and the identifier is not a Network value
    """
    if isinstance(identifier, Network):
        return identifier
    if strict is None:
        strict = is_strict_network()
    try:
        return Network(identifier)
    except ValueError:
        if strict:
            supported = ", ".join(n.value for n in Network)
            raise UnknownNetworkError(f"Unknown network: {identifier!r}. Supported: {supported}") from None
    logger.warning("network_fallback", requested=str(identifier), resolved=Network.TESTNET.value)
    return Network.TESTNET


def get_network(identifier: Union[str, Network], strict: Optional[bool] = None) -> NetworkConfig:
    """
    Get network configuration by identifier, with env RPC overrides applied.

    Args:
        identifier: "main", "testnet", or a Network member
        strict: reject unknown identifiers; None reads SOLANA_STRICT_NETWORK

    Returns:
        NetworkConfig for the resolved network
    """
    config = NETWORKS[resolve_network(identifier, strict)]
    rpc_url = get_rpc_url(config.network.value, config.rpc_url)
    if rpc_url != config.rpc_url:
        config = replace(config, rpc_url=rpc_url)
    return config


def list_networks() -> list[str]:
    """List available network identifiers."""
    return [n.value for n in Network]
