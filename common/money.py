"""Decimal helpers for prices and cash.

All monetary values carry exactly two fractional digits and are rounded
half-up whenever they change.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

MONEY_STEP = Decimal("0.01")
MIN_PRICE = Decimal("0.01")
ZERO = Decimal("0.00")


def dec(x: Union[str, int, float, Decimal]) -> Decimal:
    """Convert to Decimal, going through str for floats."""
    return x if isinstance(x, Decimal) else Decimal(str(x))


def to_money(x: Union[str, int, float, Decimal]) -> Decimal:
    """Quantize to two decimal places, rounding half-up."""
    return dec(x).quantize(MONEY_STEP, rounding=ROUND_HALF_UP)
