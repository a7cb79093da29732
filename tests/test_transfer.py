"""
Tests for transfers (submit_transfer / wait_for_confirmation / send_transaction).

RPC is mocked; transactions are built and signed with real solders objects so
the submitted wire bytes can be decoded and checked.
"""

from __future__ import annotations

import asyncio
import json
from unittest.mock import MagicMock

import httpx
import pytest
from solana.exceptions import SolanaRpcException
from solana.rpc.commitment import Confirmed
from solana.rpc.core import RPCException, TransactionExpiredBlockheightExceededError, UnconfirmedTxError
from solders.hash import Hash
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction
from spl.token.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID

from solana_lib.core.exceptions import (
    InvalidAddressError,
    InvalidAmountError,
    InvalidKeyError,
    UnconfirmedSubmissionError,
)
from solana_lib.links import get_transaction_link
from solana_lib.models import TransferReceipt, TransferRequest
from solana_lib.transfers.transfer import (
    build_native_transfer_instruction,
    build_token_transfer_instructions,
    send_transaction,
    submit_transfer,
    wait_for_confirmation,
)

TOKEN_MINT = "4zMMC9srt5Ri5X14GAgXhaHii3GnPAEERYPJgZJDncDU"
SYSTEM_TRANSFER_INDEX = 2
TOKEN_TRANSFER_CHECKED_TAG = 12

CONFIRMATION = {
    "context": {"slot": 250000001},
    "value": [{"slot": 250000001, "confirmations": 0, "err": None, "confirmationStatus": "confirmed"}],
}


@pytest.fixture
def chain(rpc_client, signature):
    """Happy-path RPC answers: blockhash, accepted submission, confirmation."""
    rpc_client.get_latest_blockhash.return_value = MagicMock(
        value=MagicMock(blockhash=Hash.default(), last_valid_block_height=1234)
    )
    rpc_client.send_raw_transaction.return_value = MagicMock(value=Signature.from_string(signature))
    rpc_client.confirm_transaction.return_value = MagicMock(
        to_json=MagicMock(return_value=json.dumps(CONFIRMATION))
    )
    rpc_client.get_account_info.return_value = MagicMock(value=MagicMock())
    return rpc_client


def _sent_transaction(rpc_client) -> Transaction:
    raw = rpc_client.send_raw_transaction.await_args.args[0]
    return Transaction.from_bytes(raw)


def test_send_native_transfer(chain, sender, sender_key, recipient, signature):
    result = asyncio.run(
        send_transaction(to=recipient, amount=0.5, network="testnet", decimals=6, private_key=sender_key)
    )

    receipt = result.receipt
    assert receipt.amount == 0.5
    assert receipt.date is None
    assert receipt.from_address == str(sender.pubkey())
    assert receipt.to == recipient
    assert receipt.network == "testnet"
    assert receipt.transaction_hash == signature
    assert receipt.transaction_receipt == CONFIRMATION
    assert result.transaction_data == {"signature": signature}

    tx = _sent_transaction(chain)
    assert tx.message.account_keys[0] == sender.pubkey()
    assert len(tx.message.instructions) == 1
    data = bytes(tx.message.instructions[0].data)
    assert int.from_bytes(data[:4], "little") == SYSTEM_TRANSFER_INDEX
    assert int.from_bytes(data[4:12], "little") == 500_000_000
    chain.get_account_info.assert_not_awaited()


def test_receipt_hash_reproduces_transaction_link(chain, sender_key, recipient, signature):
    result = asyncio.run(
        send_transaction(TransferRequest(to=recipient, amount="0.25", network="other", private_key=sender_key))
    )

    link = get_transaction_link(result.receipt.transaction_hash, "other")
    assert link == result.receipt.transaction_link
    assert signature in link
    assert link.endswith("?cluster=devnet")

    payload = result.receipt.to_dict()
    assert payload["transactionHash"] == signature
    assert payload["from"] == result.receipt.from_address
    assert payload["gasCostCryptoCurrency"] == "SOL"
    assert payload["amount"] == 0.25


def test_send_waits_for_confirmed_commitment(chain, sender_key, recipient, signature):
    asyncio.run(send_transaction(TransferRequest(to=recipient, amount=1, network="main", private_key=sender_key)))

    call = chain.confirm_transaction.await_args
    assert str(call.args[0]) == signature
    assert call.args[1] == Confirmed
    assert call.kwargs["last_valid_block_height"] == 1234


@pytest.mark.parametrize(
    "error",
    [UnconfirmedTxError("not confirmed in time"), TransactionExpiredBlockheightExceededError("expired")],
)
def test_unconfirmed_submission_is_distinguishable(chain, sender_key, recipient, signature, error):
    chain.confirm_transaction.side_effect = error

    with pytest.raises(UnconfirmedSubmissionError) as exc:
        asyncio.run(send_transaction(TransferRequest(to=recipient, amount=0.5, network="testnet", private_key=sender_key)))

    assert exc.value.signature == signature
    assert exc.value.code == "UNCONFIRMED_SUBMISSION"
    assert exc.value.__cause__ is error
    chain.send_raw_transaction.assert_awaited_once()


def test_submission_error_propagates_unchanged(chain, sender_key, recipient):
    error = RPCException("Transaction simulation failed: insufficient lamports")
    chain.send_raw_transaction.side_effect = error

    with pytest.raises(RPCException) as exc:
        asyncio.run(send_transaction(TransferRequest(to=recipient, amount=0.5, network="testnet", private_key=sender_key)))

    assert exc.value is error
    chain.confirm_transaction.assert_not_awaited()
    chain.close.assert_awaited_once()


def _rpc_wrapped(cause: Exception) -> SolanaRpcException:
    """What AsyncHTTPProvider raises for an httpx error."""
    error = SolanaRpcException(cause, None, None, MagicMock())
    error.__cause__ = cause
    return error


@pytest.mark.parametrize(
    "error",
    [
        httpx.ReadTimeout("timed out"),
        _rpc_wrapped(httpx.ReadTimeout("timed out")),
        _rpc_wrapped(httpx.RemoteProtocolError("peer closed connection")),
    ],
)
def test_unanswered_submission_carries_signature(chain, sender_key, recipient, error):
    chain.send_raw_transaction.side_effect = error

    with pytest.raises(UnconfirmedSubmissionError) as exc:
        asyncio.run(submit_transfer(TransferRequest(to=recipient, amount=0.5, network="testnet", private_key=sender_key)))

    assert exc.value.signature == str(_sent_transaction(chain).signatures[0])
    assert exc.value.__cause__ is error
    chain.confirm_transaction.assert_not_awaited()


def test_submission_never_sent_propagates(chain, sender_key, recipient):
    error = _rpc_wrapped(httpx.ConnectError("connection refused"))
    chain.send_raw_transaction.side_effect = error

    with pytest.raises(SolanaRpcException) as exc:
        asyncio.run(submit_transfer(TransferRequest(to=recipient, amount=0.5, network="testnet", private_key=sender_key)))

    assert exc.value is error


def test_submit_then_poll(chain, sender_key, recipient, signature):
    request = TransferRequest(to=recipient, amount=0.5, network="testnet", private_key=sender_key)

    pending = asyncio.run(submit_transfer(request))

    assert pending.signature == signature
    assert pending.last_valid_block_height == 1234
    chain.confirm_transaction.assert_not_awaited()

    assert asyncio.run(wait_for_confirmation(pending)) == CONFIRMATION


def test_invalid_private_key(client_factory, recipient):
    with pytest.raises(InvalidKeyError):
        asyncio.run(send_transaction(TransferRequest(to=recipient, amount=0.5, network="testnet", private_key="nope")))
    client_factory.assert_not_called()


def test_invalid_recipient(client_factory, sender_key):
    with pytest.raises(InvalidAddressError):
        asyncio.run(send_transaction(TransferRequest(to="nobody", amount=0.5, network="testnet", private_key=sender_key)))
    client_factory.assert_not_called()


@pytest.mark.parametrize(
    ("amount", "decimals", "token"),
    [
        (0, None, None),
        (-1, None, None),
        ("0.0000000001", None, None),
        (1, None, TOKEN_MINT),
        ("0.0000001", 6, TOKEN_MINT),
    ],
)
def test_invalid_amounts(client_factory, sender_key, recipient, amount, decimals, token):
    request = TransferRequest(
        to=recipient, amount=amount, network="testnet", private_key=sender_key, decimals=decimals, token_address=token
    )
    with pytest.raises(InvalidAmountError):
        asyncio.run(submit_transfer(request))
    client_factory.assert_not_called()


def test_send_token_transfer_creates_missing_accounts(chain, sender, sender_key, recipient):
    chain.get_account_info.return_value = MagicMock(value=None)

    result = asyncio.run(
        send_transaction(
            TransferRequest(
                to=recipient,
                amount=1.25,
                network="testnet",
                private_key=sender_key,
                decimals=6,
                token_address=TOKEN_MINT,
            )
        )
    )

    assert result.receipt.amount == 1.25
    tx = _sent_transaction(chain)
    programs = [tx.message.account_keys[ix.program_id_index] for ix in tx.message.instructions]
    assert programs == [ASSOCIATED_TOKEN_PROGRAM_ID, ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID]
    assert chain.get_account_info.await_count == 2


def test_build_token_transfer_instructions_existing_sender_account(rpc_client, sender, recipient):
    rpc_client.get_account_info.side_effect = [MagicMock(value=MagicMock()), MagicMock(value=None)]
    owner = Pubkey.from_string(recipient)

    instructions = asyncio.run(
        build_token_transfer_instructions(
            rpc_client, sender.pubkey(), owner, Pubkey.from_string(TOKEN_MINT), 1_250_000, 6
        )
    )

    assert len(instructions) == 2
    create, transfer = instructions
    assert create.program_id == ASSOCIATED_TOKEN_PROGRAM_ID
    assert transfer.program_id == TOKEN_PROGRAM_ID
    data = bytes(transfer.data)
    assert data[0] == TOKEN_TRANSFER_CHECKED_TAG
    assert int.from_bytes(data[1:9], "little") == 1_250_000
    assert data[9] == 6


def test_build_token_transfer_to_self_checks_account_once(rpc_client, sender):
    rpc_client.get_account_info.return_value = MagicMock(value=MagicMock())

    instructions = asyncio.run(
        build_token_transfer_instructions(
            rpc_client, sender.pubkey(), sender.pubkey(), Pubkey.from_string(TOKEN_MINT), 1, 0
        )
    )

    assert len(instructions) == 1
    rpc_client.get_account_info.assert_awaited_once()


def test_build_native_transfer_instruction(sender, recipient):
    ix = build_native_transfer_instruction(sender.pubkey(), Pubkey.from_string(recipient), 500_000_000)
    data = bytes(ix.data)
    assert int.from_bytes(data[:4], "little") == SYSTEM_TRANSFER_INDEX
    assert int.from_bytes(data[4:12], "little") == 500_000_000


def test_receipt_amount_is_a_json_number(signature):
    receipt = TransferReceipt(
        amount="0.5",
        from_address="sender",
        to="recipient",
        network="testnet",
        transaction_hash=signature,
        transaction_link=get_transaction_link(signature, "testnet"),
    )

    assert '"amount": 0.5,' in json.dumps(receipt.to_dict())
