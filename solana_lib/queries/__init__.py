"""Read-only queries: balances and transaction lookups."""

from solana_lib.queries.balance import get_balance  # noqa: F401
from solana_lib.queries.transactions import (  # noqa: F401
    build_transaction_receipt,
    get_signature_status,
    get_transaction,
)

__all__ = ["build_transaction_receipt", "get_balance", "get_signature_status", "get_transaction"]
