# utils/formatting.py

import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Any, Optional

_TWO_PLACES = Decimal("0.01")

# numbro-style abbreviations, smallest first
_ABBREVIATIONS = [
    ("", Decimal(1)),
    ("k", Decimal(1_000)),
    ("m", Decimal(1_000_000)),
    ("b", Decimal(1_000_000_000)),
    ("t", Decimal(1_000_000_000_000)),
]


def safe_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        d = Decimal(str(value).strip())
    except (InvalidOperation, TypeError, ValueError):
        return None
    if not d.is_finite():
        return None
    return d


def _display_decimal(value: Any) -> Decimal:
    """Decimal for display, 0 when missing, non-numeric, or beyond float range."""
    d = safe_decimal(value)
    if d is None or not math.isfinite(float(d)):
        return Decimal(0)
    return d


def _round2(d: Decimal) -> Decimal:
    # quantize needs every integer digit to fit in the context precision
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, d.adjusted() + 4)
        return d.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def to_number(value: Any) -> float:
    """Numeric value of an upstream field, 0.0 when missing or non-numeric."""
    d = safe_decimal(value)
    if d is None:
        return 0.0
    n = float(d)
    return n if math.isfinite(n) else 0.0


def scale_amount(amount: Any, decimals: Any) -> float:
    """
    Human-readable token amount: amount / 10**decimals.

    Returns 0.0 when either side is missing, non-numeric, or decimals is not a
    non-negative integer.
    """
    amount_dec = safe_decimal(amount)
    decimals_dec = safe_decimal(decimals)
    if amount_dec is None or decimals_dec is None:
        return 0.0
    if decimals_dec < 0 or decimals_dec != decimals_dec.to_integral_value():
        return 0.0
    try:
        n = float(amount_dec.scaleb(-int(decimals_dec)))
    except ArithmeticError:
        return 0.0
    return n if math.isfinite(n) else 0.0


def format_usd(value: Optional[float]) -> str:
    """1234.5 -> '$1,234.50', -5 -> '-$5.00'."""
    rounded = _round2(_display_decimal(value))
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.2f}"


def _trim(number: Decimal) -> str:
    s = f"{number:,.2f}"
    return s.rstrip("0").rstrip(".")


def format_amount_short(amount: Optional[float]) -> str:
    """numbro-like '0,0.[00]a': 1234 -> '1.23k', 1_500_000 -> '1.5m', 3 -> '3'."""
    n = _display_decimal(amount)
    abs_n = abs(n)

    index = 0
    for i, (_, div) in enumerate(_ABBREVIATIONS):
        if abs_n >= div:
            index = i

    suffix, div = _ABBREVIATIONS[index]
    base = _round2(abs_n / div)

    # 999.999k rounds to 1000k, promote to the next unit
    if base >= 1000 and index + 1 < len(_ABBREVIATIONS):
        suffix, div = _ABBREVIATIONS[index + 1]
        base = _round2(abs_n / div)

    sign = "-" if n < 0 and base != 0 else ""
    return f"{sign}{_trim(base)}{suffix}"


def get_chain_label(token: dict) -> str:
    """
    Get Chain Name
    """
    chain_name = token.get("chain")

    # If we have a string like "base", "ethereum"
    if isinstance(chain_name, str) and chain_name and not chain_name.isdigit():
        return chain_name.capitalize()
    return "Unknown chain"
