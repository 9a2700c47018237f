"""
French display formatting.

- amounts:     ``1 234,56 €``  (2 decimals, ROUND_HALF_UP, space grouping)
- percentages: ``20`` / ``5,5`` (no trailing zeros)
- dates:       ``dd/mm/yyyy``

This is the only place where monetary values are rounded.
"""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Optional

from invoice_engine.app.utils.numbers import ZERO, parse_decimal

CENT = Decimal("0.01")
CURRENCY_SYMBOL = "€"


def round_money(value: Decimal) -> Decimal:
    # The working precision must hold every integral digit plus the cents.
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(value: Any) -> str:
    """Format a number as ``1 234,56`` (no currency symbol)."""
    amount = parse_decimal(value)
    if amount is None:
        amount = ZERO

    rounded = round_money(amount)
    sign = "-" if rounded < ZERO else ""
    integral, _, fraction = f"{rounded.copy_abs():f}".partition(".")

    groups = []
    while len(integral) > 3:
        groups.insert(0, integral[-3:])
        integral = integral[:-3]
    groups.insert(0, integral)

    return f"{sign}{' '.join(groups)},{fraction or '00'}"


def format_currency(value: Any) -> str:
    return f"{format_amount(value)} {CURRENCY_SYMBOL}"


def format_percentage(rate: Any) -> str:
    """Format a VAT rate without trailing zeros: ``20``, ``5,5``, ``2,1``."""
    parsed = parse_decimal(rate)
    if parsed is None:
        parsed = ZERO
    text = f"{parsed.normalize():f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text.replace(".", ",")


def format_quantity(value: Any) -> str:
    return format_percentage(value)


def format_date(value: Optional[date]) -> str:
    if value is None:
        return ""
    return value.strftime("%d/%m/%Y")
