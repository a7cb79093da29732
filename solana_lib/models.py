"""
Result and request models for queries and transfers.

Field names are snake_case; ``to_dict()`` renders the camelCase receipt shape
consumers of the wallet API expect (``from``, ``transactionHash``, ...).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional, Union

from solana_lib.utils.amounts import to_decimal

GAS_CURRENCY = "SOL"


def _json_number(value: Any) -> Any:
    """Decimals and numeric strings (CLI amounts) render as JSON numbers."""
    if isinstance(value, (Decimal, str)):
        return float(to_decimal(value))
    return value


@dataclass(frozen=True)
class TransactionReceipt:
    """Receipt shaped from a getTransaction response at 'confirmed' commitment."""

    from_address: str
    date: Optional[datetime]
    gas_cost_in_crypto: Decimal
    fee_lamports: int
    gas_limit: Optional[int]
    is_successful: bool
    is_failed: bool
    network: str
    transaction_hash: str
    transaction_link: str
    # The node only returns confirmed data, so these never vary.
    is_pending: bool = False
    is_executed: bool = True
    is_invalid: bool = False
    nonce: int = 0
    gas_cost_crypto_currency: str = GAS_CURRENCY

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.from_address,
            "date": self.date.isoformat() if self.date else None,
            "gasCostCryptoCurrency": self.gas_cost_crypto_currency,
            "gasCostInCrypto": _json_number(self.gas_cost_in_crypto),
            "gasLimit": self.gas_limit,
            "isPending": self.is_pending,
            "isExecuted": self.is_executed,
            "isSuccessful": self.is_successful,
            "isFailed": self.is_failed,
            "isInvalid": self.is_invalid,
            "network": self.network,
            "nonce": self.nonce,
            "transactionHash": self.transaction_hash,
            "transactionLink": self.transaction_link,
        }


@dataclass(frozen=True)
class GetTransactionResult:
    transaction_data: dict[str, Any]
    receipt: TransactionReceipt

    def to_dict(self) -> dict[str, Any]:
        return {"transactionData": self.transaction_data, "receipt": self.receipt.to_dict()}


@dataclass(frozen=True)
class TransferRequest:
    """
    Parameters of a transfer.

    token_address selects an SPL token transfer (decimals then required);
    without it the amount is SOL. private_key is base58 or a JSON byte array.
    """

    to: str
    amount: Union[int, float, str, Decimal]
    network: str
    private_key: str = field(repr=False)
    decimals: Optional[int] = None
    token_address: Optional[str] = None

    @property
    def is_token_transfer(self) -> bool:
        return bool(self.token_address)


@dataclass(frozen=True)
class PendingTransfer:
    """A submitted, not yet confirmed transfer. Poll it; do not resubmit."""

    signature: str
    network: str
    from_address: str
    to: str
    amount: Union[int, float, str, Decimal]
    token_address: Optional[str] = None
    last_valid_block_height: Optional[int] = None


@dataclass(frozen=True)
class TransferReceipt:
    amount: Union[int, float, str, Decimal]
    from_address: str
    to: str
    network: str
    transaction_hash: str
    transaction_link: str
    transaction_receipt: Any = None
    # Block time is unknown right after confirmation.
    date: Optional[datetime] = None
    nonce: int = 0
    gas_cost_crypto_currency: str = GAS_CURRENCY

    def to_dict(self) -> dict[str, Any]:
        return {
            "amount": _json_number(self.amount),
            "date": self.date.isoformat() if self.date else None,
            "from": self.from_address,
            "gasCostCryptoCurrency": self.gas_cost_crypto_currency,
            "network": self.network,
            "nonce": self.nonce,
            "to": self.to,
            "transactionHash": self.transaction_hash,
            "transactionLink": self.transaction_link,
            "transactionReceipt": self.transaction_receipt,
        }


@dataclass(frozen=True)
class SendTransactionResult:
    transaction_data: dict[str, Any]
    receipt: TransferReceipt

    def to_dict(self) -> dict[str, Any]:
        return {"transactionData": self.transaction_data, "receipt": self.receipt.to_dict()}


def block_time_to_datetime(block_time: Optional[int]) -> Optional[datetime]:
    if block_time is None:
        return None
    return datetime.fromtimestamp(int(block_time), tz=timezone.utc)
