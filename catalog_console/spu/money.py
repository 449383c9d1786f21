# catalog_console/spu/money.py
# Backend stores money as integer fen; the form edits yuan with two decimals.
from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value: Any) -> Decimal:
    """Best-effort coercion; None, blanks, garbage and non-finite values read as 0."""
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        d = value
    else:
        try:
            # str() first so 0.29 stays 0.29 instead of its binary expansion
            d = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return ZERO
    if not d.is_finite():
        return ZERO
    return d


def fen_to_yuan(fen: Any) -> Decimal:
    """12345 -> Decimal('123.45'), rounded half-up to two places."""
    return (to_decimal(fen) / 100).quantize(CENTS, rounding=ROUND_HALF_UP)


def yuan_to_fen(yuan: Any) -> int:
    """Decimal('123.45') -> 12345, rounded half-up to a whole fen."""
    return int((to_decimal(yuan) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
