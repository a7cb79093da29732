"""
SOL and SPL token transfers.

One call walks BUILD -> SIGN -> SUBMIT -> CONFIRM. submit_transfer and
wait_for_confirmation expose the two halves separately; send_transaction runs
both. Nothing is retried: a sent transaction cannot be unsent, and retrying a
submit can move funds twice. If the confirmation wait fails after a submit, or
the node never answers the submit itself, UnconfirmedSubmissionError carries
the signature so the caller can poll it
(queries.get_signature_status) instead.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed
from solana.rpc.core import TransactionExpiredBlockheightExceededError, UnconfirmedTxError
from solana.rpc.types import TxOpts
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import (
    TransferCheckedParams,
    create_associated_token_account,
    get_associated_token_address,
    transfer_checked,
)

from solana_lib.config.networks import network_id
from solana_lib.core.exceptions import InvalidAmountError, UnconfirmedSubmissionError
from solana_lib.links import get_transaction_link
from solana_lib.logging import get_logger
from solana_lib.models import PendingTransfer, SendTransactionResult, TransferReceipt, TransferRequest
from solana_lib.queries.transactions import RPC_ERRORS
from solana_lib.rpc.connection import get_resp_value, open_connection, to_plain
from solana_lib.utils.amounts import sol_to_lamports, to_smallest_units
from solana_lib.utils.wallet_utils import load_keypair, parse_pubkey

logger = get_logger(__name__)

CONFIRM_ERRORS = (UnconfirmedTxError, TransactionExpiredBlockheightExceededError) + RPC_ERRORS

# The request may have reached the node before these fired, so the transaction can still land.
UNANSWERED_SEND_ERRORS = (httpx.ReadTimeout, httpx.WriteTimeout, httpx.ReadError, httpx.RemoteProtocolError)


async def _account_exists(client: AsyncClient, address: Pubkey) -> bool:
    resp = await client.get_account_info(address, commitment=Confirmed)
    return get_resp_value(resp, "getAccountInfo") is not None


async def build_token_transfer_instructions(
    client: AsyncClient,
    sender: Pubkey,
    recipient: Pubkey,
    mint: Pubkey,
    amount: int,
    decimals: int,
) -> list[Instruction]:
    """
    Instructions for an SPL transfer of ``amount`` base units.

    Associated token accounts that do not exist yet are created first, paid
    for by the sender.
    """
    sender_ata = get_associated_token_address(sender, mint)
    recipient_ata = get_associated_token_address(recipient, mint)
    instructions: list[Instruction] = []
    checked: set[Pubkey] = set()
    for owner, ata in ((sender, sender_ata), (recipient, recipient_ata)):
        if ata in checked:
            continue
        checked.add(ata)
        if not await _account_exists(client, ata):
            logger.info("token_account_create", owner=str(owner), mint=str(mint), account=str(ata))
            instructions.append(create_associated_token_account(sender, owner, mint))
    instructions.append(
        transfer_checked(
            TransferCheckedParams(
                program_id=TOKEN_PROGRAM_ID,
                source=sender_ata,
                mint=mint,
                dest=recipient_ata,
                owner=sender,
                amount=amount,
                decimals=decimals,
                signers=[],
            )
        )
    )
    return instructions


def _may_have_landed(error: BaseException) -> bool:
    """solana-py wraps httpx errors in SolanaRpcException; look at the cause too."""
    return isinstance(error, UNANSWERED_SEND_ERRORS) or isinstance(error.__cause__, UNANSWERED_SEND_ERRORS)


def build_native_transfer_instruction(sender: Pubkey, recipient: Pubkey, lamports: int) -> Instruction:
    return transfer(TransferParams(from_pubkey=sender, to_pubkey=recipient, lamports=lamports))


def _smallest_units(request: TransferRequest) -> int:
    if request.is_token_transfer:
        if request.decimals is None:
            raise InvalidAmountError("decimals is required for token transfers")
        return to_smallest_units(request.amount, request.decimals)
    return sol_to_lamports(request.amount)


async def submit_transfer(request: TransferRequest) -> PendingTransfer:
    """
    Build, sign and submit a transfer. Returns as soon as the node accepts it.

    Raises:
        InvalidKeyError: private key cannot be decoded
        InvalidAddressError: recipient or mint is not a valid address
        InvalidAmountError: amount not positive or too precise; decimals missing for a token
        UnconfirmedSubmissionError: the node did not answer after the request was sent
        Other SDK errors from submission propagate unchanged
    """
    keypair: Keypair = load_keypair(request.private_key)
    sender = keypair.pubkey()
    recipient = parse_pubkey(request.to, "recipient address")
    mint = parse_pubkey(request.token_address, "token address") if request.is_token_transfer else None
    units = _smallest_units(request)

    async with open_connection(request.network) as client:
        if mint is not None:
            instructions = await build_token_transfer_instructions(
                client, sender, recipient, mint, units, int(request.decimals)
            )
        else:
            instructions = [build_native_transfer_instruction(sender, recipient, units)]

        latest = get_resp_value(await client.get_latest_blockhash(Confirmed), "getLatestBlockhash")
        message = Message.new_with_blockhash(instructions, sender, latest.blockhash)
        tx = Transaction([keypair], message, latest.blockhash)
        try:
            resp = await client.send_raw_transaction(bytes(tx), opts=TxOpts(preflight_commitment=Confirmed))
        except RPC_ERRORS as e:
            if not _may_have_landed(e):
                raise
            signature = str(tx.signatures[0])
            error_type = type(e.__cause__ or e).__name__
            logger.warning(
                "transfer_submit_unanswered",
                network=network_id(request.network),
                signature=signature,
                error_type=error_type,
            )
            raise UnconfirmedSubmissionError(
                signature, network_id(request.network), f"no answer to sendTransaction: {error_type}"
            ) from e
        signature = str(get_resp_value(resp, "sendTransaction"))

    logger.info(
        "transfer_submitted",
        network=network_id(request.network),
        signature=signature,
        sender=str(sender),
        recipient=str(recipient),
        mint=str(mint) if mint else None,
        units=units,
    )
    return PendingTransfer(
        signature=signature,
        network=request.network,
        from_address=str(sender),
        to=request.to,
        amount=request.amount,
        token_address=request.token_address,
        last_valid_block_height=getattr(latest, "last_valid_block_height", None),
    )


async def wait_for_confirmation(pending: PendingTransfer) -> Any:
    """
    Suspend until the transfer reaches 'confirmed' or the SDK gives up.

    Returns:
        The signature status response as plain JSON data

    Raises:
        UnconfirmedSubmissionError: timeout, blockhash expiry or transport failure while waiting
    """
    signature = Signature.from_string(pending.signature)
    try:
        async with open_connection(pending.network) as client:
            resp = await client.confirm_transaction(
                signature,
                Confirmed,
                last_valid_block_height=pending.last_valid_block_height,
            )
    except CONFIRM_ERRORS as e:
        logger.warning(
            "transfer_unconfirmed",
            network=network_id(pending.network),
            signature=pending.signature,
            error_type=type(e).__name__,
            error=str(e),
        )
        raise UnconfirmedSubmissionError(pending.signature, network_id(pending.network), str(e) or type(e).__name__) from e

    payload = to_plain(resp)
    statuses = payload.get("value") if isinstance(payload, dict) else None
    if statuses and isinstance(statuses[0], dict) and statuses[0].get("err") is not None:
        logger.warning("transfer_failed_on_chain", signature=pending.signature, err=str(statuses[0]["err"]))
    else:
        logger.info("transfer_confirmed", network=network_id(pending.network), signature=pending.signature)
    return payload


async def send_transaction(request: Optional[TransferRequest] = None, **kwargs: Any) -> SendTransactionResult:
    """
    Send a transfer and wait for 'confirmed'.

    Accepts a TransferRequest, or its fields as keyword arguments
    (to, amount, network, private_key, decimals, token_address).
    """
    if request is None:
        request = TransferRequest(**kwargs)
    pending = await submit_transfer(request)
    confirmation = await wait_for_confirmation(pending)
    receipt = TransferReceipt(
        amount=request.amount,
        from_address=pending.from_address,
        to=request.to,
        network=network_id(request.network),
        transaction_hash=pending.signature,
        transaction_link=get_transaction_link(pending.signature, request.network),
        transaction_receipt=confirmation,
    )
    return SendTransactionResult(transaction_data={"signature": pending.signature}, receipt=receipt)
