"""
Balance lookups: native SOL and SPL tokens.

Token balances read the owner's token accounts for a mint via
get_token_accounts_by_owner_json_parsed and use the FIRST account returned.
Owners with several accounts for one mint are not summed.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional, Union

from solana.rpc.types import TokenAccountOpts

from solana_lib.config.networks import Network, network_id
from solana_lib.core.exceptions import AccountNotFoundError, TransportError
from solana_lib.logging import get_logger
from solana_lib.rpc.connection import get_resp_value, open_connection, to_plain
from solana_lib.utils.amounts import from_smallest_units, lamports_to_sol
from solana_lib.utils.wallet_utils import parse_pubkey

logger = get_logger(__name__)


def _token_amount(account: Any) -> tuple[int, int]:
    """Return (raw amount, decimals) from a jsonParsed token account entry."""
    entry = to_plain(account)
    try:
        token_amount = entry["account"]["data"]["parsed"]["info"]["tokenAmount"]
        return int(token_amount["amount"]), int(token_amount["decimals"])
    except (KeyError, TypeError, ValueError) as e:
        raise TransportError(f"Unexpected token account layout: {str(entry)[:200]}") from e


async def get_balance(
    network: Union[str, Network],
    public_key: str,
    token_address: Optional[str] = None,
) -> Decimal:
    """
    Get the balance of a wallet in display units.

    Args:
        network: "main" or any other identifier for the test network
        public_key: owner wallet address
        token_address: SPL mint; omit for the SOL balance

    Returns:
        Balance as Decimal (SOL, or token units using the account's decimals)

    Raises:
        InvalidAddressError: owner or mint is not a valid address
        AccountNotFoundError: owner has no token account for the mint
    """
    owner = parse_pubkey(public_key, "wallet address")
    mint = parse_pubkey(token_address, "token address") if token_address else None

    async with open_connection(network) as client:
        if mint is not None:
            resp = await client.get_token_accounts_by_owner_json_parsed(owner, TokenAccountOpts(mint=mint))
            accounts = get_resp_value(resp, "getTokenAccountsByOwner") or []
            if not accounts:
                logger.info("token_account_not_found", network=network_id(network), owner=str(owner), mint=str(mint))
                raise AccountNotFoundError(str(owner), str(mint))
            if len(accounts) > 1:
                logger.debug("token_accounts_multiple", owner=str(owner), mint=str(mint), count=len(accounts))
            amount, decimals = _token_amount(accounts[0])
            return from_smallest_units(amount, decimals)

        resp = await client.get_balance(owner)
        lamports = get_resp_value(resp, "getBalance")
        return lamports_to_sol(lamports)
