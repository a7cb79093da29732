"""
RPC connection factory.

A fresh AsyncClient per operation by default. With SOLANA_REUSE_CLIENTS=1 one
client per network is created lazily and kept for the life of the process;
such clients must only be used from a single event loop.
"""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Union

from solana.rpc.async_api import AsyncClient

from solana_lib.config.env import reuse_clients
from solana_lib.config.networks import Network, get_network
from solana_lib.core.exceptions import TransportError
from solana_lib.logging import get_logger

logger = get_logger(__name__)

_client_cache: Dict[Network, AsyncClient] = {}


async def get_connection(network: Union[str, Network]) -> AsyncClient:
    """Create a client bound to the network's RPC endpoint."""
    config = get_network(network)
    if reuse_clients():
        client = _client_cache.get(config.network)
        if client is None:
            client = AsyncClient(config.rpc_url)
            _client_cache[config.network] = client
            logger.debug("rpc_client_cached", network=config.network.value, rpc_url=config.rpc_url)
        return client
    logger.debug("rpc_client_created", network=config.network.value, rpc_url=config.rpc_url)
    return AsyncClient(config.rpc_url)


@asynccontextmanager
async def open_connection(network: Union[str, Network]) -> AsyncIterator[AsyncClient]:
    """Yield a client for one operation; close it afterwards unless it is cached."""
    client = await get_connection(network)
    try:
        yield client
    finally:
        if client not in _client_cache.values():
            await client.close()


async def close_cached_connections() -> None:
    """Close and forget every cached client."""
    while _client_cache:
        _, client = _client_cache.popitem()
        await client.close()


def get_resp_value(resp: Any, method: str) -> Any:
    """
    Return ``resp.value`` from an SDK response.

    RPC error payloads come back as error objects without ``value``; those are
    a transport-level failure for our purposes.
    """
    if resp is None or not hasattr(resp, "value"):
        raise TransportError(f"{method}: malformed RPC response {str(resp)[:200]}")
    return resp.value


def to_plain(obj: Any) -> Any:
    """Convert a solders response object to plain JSON data (dict/list); dicts pass through."""
    if obj is None or isinstance(obj, (dict, list, str, int, float, bool)):
        return obj
    to_json = getattr(obj, "to_json", None)
    if callable(to_json):
        return json.loads(to_json())
    return str(obj)
