"""RPC client construction and response helpers."""

from solana_lib.rpc.connection import (  # noqa: F401
    close_cached_connections,
    get_connection,
    open_connection,
)

__all__ = ["close_cached_connections", "get_connection", "open_connection"]
