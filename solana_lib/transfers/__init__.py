"""SOL and SPL token transfers."""

from solana_lib.transfers.transfer import (  # noqa: F401
    send_transaction,
    submit_transfer,
    wait_for_confirmation,
)

__all__ = ["send_transaction", "submit_transfer", "wait_for_confirmation"]
