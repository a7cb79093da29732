"""
solana-lib: helpers over the Solana Python SDK.

Explorer links, wallet address validation, SOL/SPL balances, transaction
lookups and transfers on two networks: "main" (mainnet-beta) and the devnet
test network used for every other identifier.
"""

from solana_lib.config.networks import Network, NetworkConfig, get_network
from solana_lib.core.exceptions import (
    AccountNotFoundError,
    InvalidAddressError,
    InvalidAmountError,
    InvalidKeyError,
    SolanaLibError,
    TransactionNotFoundError,
    TransportError,
    UnconfirmedSubmissionError,
    UnknownNetworkError,
)
from solana_lib.links import get_transaction_link, get_wallet_link
from solana_lib.models import (
    GetTransactionResult,
    PendingTransfer,
    SendTransactionResult,
    TransactionReceipt,
    TransferReceipt,
    TransferRequest,
)
from solana_lib.queries.balance import get_balance
from solana_lib.queries.transactions import get_signature_status, get_transaction
from solana_lib.rpc.connection import get_connection
from solana_lib.transfers.transfer import send_transaction, submit_transfer, wait_for_confirmation
from solana_lib.utils.wallet_utils import is_valid_wallet_address

__version__ = "0.1.0"

__all__ = [
    # Operations
    "get_transaction_link",
    "get_wallet_link",
    "is_valid_wallet_address",
    "get_balance",
    "get_transaction",
    "get_signature_status",
    "send_transaction",
    "submit_transfer",
    "wait_for_confirmation",
    "get_connection",
    # Networks
    "Network",
    "NetworkConfig",
    "get_network",
    # Models
    "GetTransactionResult",
    "PendingTransfer",
    "SendTransactionResult",
    "TransactionReceipt",
    "TransferReceipt",
    "TransferRequest",
    # Errors
    "AccountNotFoundError",
    "InvalidAddressError",
    "InvalidAmountError",
    "InvalidKeyError",
    "SolanaLibError",
    "TransactionNotFoundError",
    "TransportError",
    "UnconfirmedSubmissionError",
    "UnknownNetworkError",
]
