#!/usr/bin/env python3
"""
Command line access to solana-lib.

Usage:
  solana-lib balance <address> [--token MINT] [--network main]
  solana-lib tx <signature> [--raw] [--network main]
  solana-lib status <signature>
  solana-lib validate <address>
  solana-lib link tx|wallet <value>
  solana-lib send <to> <amount> [--token MINT --decimals N] [--private-key KEY] [--no-wait]

Network defaults to SOLANA_NETWORK (testnet). Results are JSON on stdout;
logs go to stderr. Exit code 1 on a solana_lib error.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from dataclasses import asdict
from typing import Any, Optional, Sequence

from solana_lib.config.env import get_default_network, get_default_private_key
from solana_lib.core.exceptions import InvalidKeyError, SolanaLibError, TransactionNotFoundError
from solana_lib.links import get_transaction_link, get_wallet_link
from solana_lib.logging import get_logger
from solana_lib.models import TransferRequest
from solana_lib.queries.balance import get_balance
from solana_lib.queries.transactions import get_signature_status, get_transaction
from solana_lib.transfers.transfer import send_transaction, submit_transfer
from solana_lib.utils.wallet_utils import is_valid_wallet_address

logger = get_logger(__name__)


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _cmd_balance(args: argparse.Namespace) -> int:
    balance = asyncio.run(get_balance(args.network, args.address, args.token))
    _emit({"network": args.network, "address": args.address, "token": args.token, "balance": str(balance)})
    return 0


def _cmd_tx(args: argparse.Namespace) -> int:
    result = asyncio.run(get_transaction(args.signature, args.network))
    if result is None:
        raise TransactionNotFoundError(args.signature)
    _emit(result.to_dict() if args.raw else result.receipt.to_dict())
    return 0


def _cmd_status(args: argparse.Namespace) -> int:
    status = asyncio.run(get_signature_status(args.signature, args.network))
    _emit({"network": args.network, "signature": args.signature, "status": status})
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    valid = is_valid_wallet_address(args.address)
    _emit({"address": args.address, "valid": valid})
    return 0 if valid else 1


def _cmd_link(args: argparse.Namespace) -> int:
    if args.kind == "tx":
        print(get_transaction_link(args.value, args.network))
    else:
        print(get_wallet_link(args.value, args.network))
    return 0


def _cmd_send(args: argparse.Namespace) -> int:
    private_key = args.private_key or get_default_private_key()
    if not private_key:
        raise InvalidKeyError("No private key: pass --private-key or set SOLANA_PRIVATE_KEY")
    request = TransferRequest(
        to=args.to,
        amount=args.amount,
        network=args.network,
        private_key=private_key,
        decimals=args.decimals,
        token_address=args.token,
    )
    if args.no_wait:
        pending = asyncio.run(submit_transfer(request))
        _emit({**asdict(pending), "transactionLink": get_transaction_link(pending.signature, args.network)})
        return 0
    result = asyncio.run(send_transaction(request))
    _emit(result.receipt.to_dict())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="solana-lib", description="Solana balances, lookups and transfers.")
    parser.add_argument(
        "--network",
        default=None,
        help="Network identifier: main, or anything else for the devnet test network (default: SOLANA_NETWORK or testnet)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("balance", help="SOL or SPL token balance of a wallet")
    p.add_argument("address")
    p.add_argument("--token", default=None, help="SPL token mint address")
    p.set_defaults(func=_cmd_balance)

    p = sub.add_parser("tx", help="Look up a transaction receipt")
    p.add_argument("signature")
    p.add_argument("--raw", action="store_true", help="Include raw transaction data")
    p.set_defaults(func=_cmd_tx)

    p = sub.add_parser("status", help="Confirmation status of a signature")
    p.add_argument("signature")
    p.set_defaults(func=_cmd_status)

    p = sub.add_parser("validate", help="Check that an address is an on-curve wallet address")
    p.add_argument("address")
    p.set_defaults(func=_cmd_validate)

    p = sub.add_parser("link", help="Explorer link for a transaction or wallet")
    p.add_argument("kind", choices=("tx", "wallet"))
    p.add_argument("value")
    p.set_defaults(func=_cmd_link)

    p = sub.add_parser("send", help="Send SOL or an SPL token")
    p.add_argument("to")
    p.add_argument("amount", help="Amount in display units, e.g. 0.5")
    p.add_argument("--token", default=None, help="SPL token mint address")
    p.add_argument("--decimals", type=int, default=None, help="Token decimals (required with --token)")
    p.add_argument("--private-key", default=None, help="Sender secret key (default: SOLANA_PRIVATE_KEY)")
    p.add_argument("--no-wait", action="store_true", help="Return after submission without waiting for confirmation")
    p.set_defaults(func=_cmd_send)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.network:
        args.network = get_default_network()
    try:
        return args.func(args)
    except SolanaLibError as e:
        logger.error("cli_command_failed", command=args.command, code=e.code, error=str(e))
        _emit({"error": e.to_dict()})
        return 1


if __name__ == "__main__":
    sys.exit(main())
