"""
Multi-rate VAT aggregation.

Groups line items by tax rate and computes, per rate, the taxable base
and the tax amount, plus overall subtotal / tax / total.

Used in two places:
- the generation pipeline, to print one VAT line per rate
- the live editor (``POST /tax/aggregate``), on every keystroke

IMPORTANT:
- Rates are grouped by exact Decimal value. ``20`` and ``20.0`` share a
  bucket; ``5.5`` and ``5.500001`` do not. No tolerance is applied.
- Accumulation is done at full Decimal precision. Nothing is rounded
  here; rounding is a display concern (``app.rendering.formatting``).
- Malformed numbers contribute zero. The result never contains NaN.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field

from invoice_engine.app.schemas.documents import LineItem
from invoice_engine.app.utils.numbers import HUNDRED, ZERO


class VatBucket(BaseModel):
    rate: Decimal
    base: Decimal
    tax: Decimal

    model_config = ConfigDict(frozen=True, extra="forbid")


class TaxBreakdown(BaseModel):
    """
    Aggregated taxes of a document.

    Buckets are ordered by ascending rate.
    """

    buckets: List[VatBucket] = Field(default_factory=list)
    subtotal: Decimal = ZERO
    tax_amount: Decimal = ZERO
    total: Decimal = ZERO

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def vat_by_rate(self) -> Dict[Decimal, Decimal]:
        return {bucket.rate: bucket.tax for bucket in self.buckets}

    def taxed_buckets(self) -> List[VatBucket]:
        """Buckets with a strictly positive tax amount (printed VAT lines)."""
        return [bucket for bucket in self.buckets if bucket.tax > ZERO]


ItemInput = Union[LineItem, Mapping[str, Any]]


def _as_line_item(item: ItemInput) -> LineItem:
    if isinstance(item, LineItem):
        return item
    return LineItem.model_validate(dict(item))


def aggregate_tax(items: Iterable[ItemInput]) -> TaxBreakdown:
    """
    Aggregate VAT over ``items``.

    Args:
        items:
            ``LineItem`` models or raw mappings as sent by the editor
            (numeric fields may be strings; malformed ones count as 0).

    Returns:
        A ``TaxBreakdown`` with one bucket per distinct rate.
    """
    bases: Dict[Decimal, Decimal] = {}
    taxes: Dict[Decimal, Decimal] = {}

    for raw in items:
        item = _as_line_item(raw)
        # Decimal("20") == Decimal("20.0") and both hash alike.
        rate = item.tax_rate
        base = item.line_subtotal
        bases[rate] = bases.get(rate, ZERO) + base
        taxes[rate] = taxes.get(rate, ZERO) + base * rate / HUNDRED

    buckets = [
        VatBucket(rate=rate, base=bases[rate], tax=taxes[rate])
        for rate in sorted(bases)
    ]

    subtotal = sum((b.base for b in buckets), ZERO)
    tax_amount = sum((b.tax for b in buckets), ZERO)

    return TaxBreakdown(
        buckets=buckets,
        subtotal=subtotal,
        tax_amount=tax_amount,
        total=subtotal + tax_amount,
    )
