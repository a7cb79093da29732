"""
Application-level exceptions.

Every error raised by solana_lib derives from SolanaLibError and carries a
stable ``code`` so callers (and the CLI) can branch on the kind of failure
without parsing messages. SDK errors are chained via ``raise ... from``.
"""

from __future__ import annotations


class SolanaLibError(Exception):
    """Base class for all solana_lib errors."""

    code = "SOLANA_LIB_ERROR"

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": str(self)}


class UnknownNetworkError(SolanaLibError):
    """Network identifier not recognized (strict resolution only)."""

    code = "UNKNOWN_NETWORK"


class InvalidAddressError(SolanaLibError):
    """A wallet, mint or recipient address failed to parse."""

    code = "INVALID_ADDRESS"


class InvalidKeyError(SolanaLibError):
    """Secret key material could not be decoded into a keypair."""

    code = "INVALID_KEY"


class InvalidAmountError(SolanaLibError):
    """Transfer amount is not representable in the smallest unit."""

    code = "INVALID_AMOUNT"


class AccountNotFoundError(SolanaLibError):
    """Owner holds no token account for the requested mint."""

    code = "ACCOUNT_NOT_FOUND"

    def __init__(self, owner: str, mint: str) -> None:
        super().__init__(f"No token account for mint {mint} owned by {owner}")
        self.owner = owner
        self.mint = mint


class TransportError(SolanaLibError):
    """RPC node unreachable or returned a malformed response."""

    code = "TRANSPORT_FAILURE"


class TransactionNotFoundError(SolanaLibError):
    """Transaction is not known to the node."""

    code = "NOT_FOUND"

    def __init__(self, signature: str) -> None:
        super().__init__(f"Transaction not found: {signature}")
        self.signature = signature


class UnconfirmedSubmissionError(SolanaLibError):
    """
    Transaction was sent but confirmation was not observed.

    The transaction may still land. Poll ``signature`` before resubmitting,
    otherwise the transfer can happen twice.
    """

    code = "UNCONFIRMED_SUBMISSION"

    def __init__(self, signature: str, network: str, reason: str) -> None:
        super().__init__(f"Transaction {signature} submitted on {network} but not confirmed: {reason}")
        self.signature = signature
        self.network = network
        self.reason = reason

    def to_dict(self) -> dict[str, str]:
        out = super().to_dict()
        out["signature"] = self.signature
        return out
