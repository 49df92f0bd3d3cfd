"""
Money helpers shared by the pricing engine.

All amounts are ``Decimal``; rounding is 2 decimal places, ROUND_HALF_UP.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """Leniently coerce a price-like value to ``Decimal``.

    ``None``, non-numeric strings, NaN and infinities all become ``default``.
    Floats go through ``str`` so ``0.1`` stays ``Decimal("0.1")``.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return default
    if not result.is_finite():
        return default
    return result


def round_money(amount: Decimal) -> Decimal:
    """Round a monetary amount to cents."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_currency(amount: Decimal, currency: str) -> str:
    """Render an amount the way de-CH displays it, e.g. ``CHF 1’234.50``.

    Only used for human-readable line item descriptions.
    """
    return f"{currency} {round_money(amount):,.2f}".replace(",", "’")
