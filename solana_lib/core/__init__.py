"""Core error types shared by queries, transfers and the CLI."""

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

__all__ = [
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
