# app/pricing/money.py
from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

D = Decimal

MONEY = D("0.01")
ZERO = D("0")
HUNDRED = D("100")


def to_decimal(v: Any) -> Decimal | None:
    """Parse a numeric input to Decimal; None/empty/non-numeric -> None."""
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, Decimal):
        return v if v.is_finite() else None
    if isinstance(v, str):
        v = v.strip()
        if v == "":
            return None
    try:
        d = D(str(v))
    except (InvalidOperation, ValueError):
        return None
    # NaN / Infinity tellen niet als getal
    return d if d.is_finite() else None


def qmoney(x: Decimal) -> Decimal:
    return x.quantize(MONEY, rounding=ROUND_HALF_UP)


def format_money(amount: Decimal, symbol: str) -> str:
    """`BBD$1107.00` style display string (no thousands separator)."""
    return f"{symbol}{qmoney(D(amount)):.2f}"
