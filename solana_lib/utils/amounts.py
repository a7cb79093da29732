"""
Conversion between human amounts and on-chain integer units.

All arithmetic goes through Decimal built from ``str(amount)`` so a float like
0.5 or 0.1 maps to exactly 500_000_000 / 100_000_000 lamports.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Union

from solana_lib.core.exceptions import InvalidAmountError

LAMPORTS_PER_SOL = 1_000_000_000
SOL_DECIMALS = 9

Number = Union[int, float, str, Decimal]


def to_decimal(amount: Number) -> Decimal:
    if isinstance(amount, bool):
        raise InvalidAmountError(f"Invalid amount: {amount!r}")
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError) as e:
        raise InvalidAmountError(f"Invalid amount: {amount!r}") from e
    if not value.is_finite():
        raise InvalidAmountError(f"Invalid amount: {amount!r}")
    return value


def to_smallest_units(amount: Number, decimals: int) -> int:
    """
    Convert a positive human amount to integer base units (10**decimals per unit).

    Raises:
        InvalidAmountError: amount <= 0, or finer than the unit precision
    """
    if decimals is None or int(decimals) < 0:
        raise InvalidAmountError(f"Invalid decimals: {decimals!r}")
    value = to_decimal(amount)
    if value <= 0:
        raise InvalidAmountError(f"Amount must be positive, got {amount!r}")
    units = value.scaleb(int(decimals))
    if units != units.to_integral_value():
        raise InvalidAmountError(f"Amount {amount!r} has more precision than {decimals} decimals")
    return int(units)


def sol_to_lamports(amount: Number) -> int:
    return to_smallest_units(amount, SOL_DECIMALS)


def from_smallest_units(raw: Union[int, str], decimals: int) -> Decimal:
    """Convert integer base units to a human Decimal amount."""
    return Decimal(int(raw)).scaleb(-int(decimals))


def lamports_to_sol(lamports: Union[int, str]) -> Decimal:
    return Decimal(int(lamports)) / LAMPORTS_PER_SOL
