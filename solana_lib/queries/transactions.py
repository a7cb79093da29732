"""
Transaction lookup and receipt shaping.

Lookups run at 'confirmed' commitment with max_supported_transaction_version=0.
"Not found" is an absent result (None); transport and RPC failures raise
TransportError so callers can tell the two apart.
"""

from __future__ import annotations

from typing import Any, Optional, Union

import httpx
from solana.exceptions import SolanaRpcException
from solana.rpc.commitment import Confirmed
from solana.rpc.core import RPCException
from solders.signature import Signature

from solana_lib.config.networks import Network, network_id
from solana_lib.core.exceptions import TransportError
from solana_lib.links import get_transaction_link
from solana_lib.logging import get_logger
from solana_lib.models import GetTransactionResult, TransactionReceipt, block_time_to_datetime
from solana_lib.rpc.connection import get_resp_value, open_connection, to_plain
from solana_lib.utils.amounts import lamports_to_sol

logger = get_logger(__name__)

MAX_SUPPORTED_TRANSACTION_VERSION = 0

# Errors raised by solana-py / httpx when the node cannot be reached or answers with an error.
RPC_ERRORS = (SolanaRpcException, RPCException, httpx.HTTPError)


def _parse_signature(txn_id: str) -> Optional[Signature]:
    try:
        return Signature.from_string(txn_id.strip())
    except Exception:
        return None


def _split_transaction(data: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """Return (transaction, meta) for both flat RPC JSON and nested (transaction.transaction) layouts."""
    tx = data.get("transaction") or {}
    meta = data.get("meta")
    if meta is None and isinstance(tx, dict) and "meta" in tx:
        meta = tx.get("meta")
        tx = tx.get("transaction") or {}
    return tx, meta or {}


def _first_account_key(tx: dict[str, Any]) -> str:
    keys = (tx.get("message") or {}).get("accountKeys") or []
    if not keys:
        return ""
    first = keys[0]
    # jsonParsed encoding returns {"pubkey": ..., "signer": ...} entries
    if isinstance(first, dict):
        return str(first.get("pubkey") or "")
    return str(first)


def _status_flags(meta: dict[str, Any]) -> tuple[bool, bool]:
    """(is_successful, is_failed) from the Ok/Err tag of meta.status; meta.err when status is absent."""
    status = meta.get("status")
    if isinstance(status, dict) and ("Ok" in status or "Err" in status):
        return "Ok" in status, "Err" in status
    failed = meta.get("err") is not None
    return not failed, failed


def build_transaction_receipt(
    data: dict[str, Any],
    txn_id: str,
    network: Union[str, Network],
) -> TransactionReceipt:
    """Shape raw getTransaction JSON into a TransactionReceipt."""
    tx, meta = _split_transaction(data)
    is_successful, is_failed = _status_flags(meta)
    fee = int(meta.get("fee") or 0)
    return TransactionReceipt(
        from_address=_first_account_key(tx),
        date=block_time_to_datetime(data.get("blockTime")),
        gas_cost_in_crypto=lamports_to_sol(fee),
        fee_lamports=fee,
        gas_limit=meta.get("computeUnitsConsumed"),
        is_successful=is_successful,
        is_failed=is_failed,
        network=network_id(network),
        transaction_hash=txn_id,
        transaction_link=get_transaction_link(txn_id, network),
    )


async def get_transaction(txn_id: str, network: Union[str, Network]) -> Optional[GetTransactionResult]:
    """
    Get transaction details by signature.

    Returns:
        GetTransactionResult, or None when the node does not know the
        transaction (including ids that are not valid signatures)

    Raises:
        TransportError: node unreachable, RPC error, or malformed response
    """
    signature = _parse_signature(txn_id)
    if signature is None:
        logger.info("transaction_id_invalid", network=network_id(network), txn_id=str(txn_id)[:88])
        return None

    try:
        async with open_connection(network) as client:
            resp = await client.get_transaction(
                signature,
                encoding="json",
                commitment=Confirmed,
                max_supported_transaction_version=MAX_SUPPORTED_TRANSACTION_VERSION,
            )
    except RPC_ERRORS as e:
        logger.warning("transaction_fetch_failed", network=network_id(network), signature=txn_id, error=str(e))
        raise TransportError(f"getTransaction failed for {txn_id}: {e}") from e

    value = get_resp_value(resp, "getTransaction")
    if value is None:
        logger.info("transaction_not_found", network=network_id(network), signature=txn_id)
        return None

    data = to_plain(value)
    if not isinstance(data, dict):
        raise TransportError(f"getTransaction returned unexpected payload for {txn_id}")
    receipt = build_transaction_receipt(data, txn_id, network)
    logger.debug("transaction_fetched", network=network_id(network), signature=txn_id, successful=receipt.is_successful)
    return GetTransactionResult(transaction_data=data, receipt=receipt)


async def get_signature_status(txn_id: str, network: Union[str, Network]) -> Optional[str]:
    """
    Return the confirmation status of a signature: processed | confirmed | finalized | failed.

    None when the node has no record of it yet. Use this to poll a submitted
    transfer instead of resubmitting it.

    Raises:
        TransportError: node unreachable, RPC error, or malformed response
    """
    signature = _parse_signature(txn_id)
    if signature is None:
        return None
    try:
        async with open_connection(network) as client:
            resp = await client.get_signature_statuses([signature], search_transaction_history=True)
    except RPC_ERRORS as e:
        logger.warning("signature_status_failed", network=network_id(network), signature=txn_id, error=str(e))
        raise TransportError(f"getSignatureStatuses failed for {txn_id}: {e}") from e

    statuses = get_resp_value(resp, "getSignatureStatuses") or []
    status = to_plain(statuses[0]) if statuses else None
    if not status:
        return None
    if status.get("err") is not None:
        return "failed"
    return status.get("confirmationStatus")
