"""
Orbis Monetary: Decimal helpers for prices and totals.

Prices are stored as Decimal with two places (TRY kuruş precision).
Quantities are positive integers.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Coerce value (int, str, float, Decimal) to a 2-place Decimal."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def monetary_mult(qty: int, unit_price) -> Decimal:
    """Line total for qty units at unit_price."""
    return to_money(to_money(unit_price) * int(qty))
