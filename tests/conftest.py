"""
Pytest fixtures for solana-lib tests. RPC is never hit: AsyncClient is replaced
by a MagicMock whose RPC methods are AsyncMocks returning MagicMock(value=...).
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import base58
import pytest
from solders.keypair import Keypair

RPC_METHODS = (
    "get_balance",
    "get_token_accounts_by_owner_json_parsed",
    "get_transaction",
    "get_signature_statuses",
    "get_account_info",
    "get_latest_blockhash",
    "send_raw_transaction",
    "confirm_transaction",
    "close",
)

ENV_VARS = (
    "SOLANA_NETWORK",
    "SOLANA_MAIN_RPC_URL",
    "SOLANA_TESTNET_RPC_URL",
    "HELIUS_API_KEY",
    "SOLANA_STRICT_NETWORK",
    "SOLANA_REUSE_CLIENTS",
    "SOLANA_PRIVATE_KEY",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test from default network config and an empty client cache."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    import solana_lib.rpc.connection as connection

    connection._client_cache.clear()
    yield
    connection._client_cache.clear()


def _make_client() -> MagicMock:
    client = MagicMock()
    for name in RPC_METHODS:
        setattr(client, name, AsyncMock())
    return client


@pytest.fixture
def client_factory(monkeypatch):
    """Patch AsyncClient; the returned factory records the RPC URL each client was built with."""
    factory = MagicMock(return_value=_make_client())
    monkeypatch.setattr("solana_lib.rpc.connection.AsyncClient", factory)
    return factory


@pytest.fixture
def rpc_client(client_factory):
    """The mocked client handed out by every get_connection call."""
    return client_factory.return_value


@pytest.fixture
def sender() -> Keypair:
    return Keypair()


@pytest.fixture
def sender_key(sender) -> str:
    """Sender secret key as base58, the format wallets export."""
    return base58.b58encode(bytes(sender)).decode()


@pytest.fixture
def recipient() -> str:
    return str(Keypair().pubkey())


@pytest.fixture
def signature() -> str:
    return str(Keypair().sign_message(b"solana-lib-test"))
