"""
Numeric coercion for monetary and percentage inputs.

Line items reach the engine from two places: finalized snapshots and the
live editor, where quantity, price and rate fields are frequently
half-typed strings. This module turns any such input into a finite
``Decimal``.

IMPORTANT:
- Coercion never raises. Malformed input becomes ``Decimal("0")``.
- Floats are converted through ``str()`` so that ``0.1`` stays ``0.1``
  instead of its binary expansion.
- No rounding happens here. Display rounding is a formatting concern.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Plain, non-breaking and narrow non-breaking spaces.
_GROUPING_CHARS = (" ", "\u00a0", "\u202f")


def parse_decimal(value: Any) -> Optional[Decimal]:
    """
    Parse ``value`` into a finite Decimal, or return None if impossible.

    Accepted inputs:
    - Decimal, int, float (bools are rejected)
    - strings using either ``.`` or ``,`` as decimal separator, with
      optional spaces or non-breaking spaces as grouping
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(str(value))
    elif isinstance(value, str):
        cleaned = value.strip().replace(",", ".")
        for grouping in _GROUPING_CHARS:
            cleaned = cleaned.replace(grouping, "")
        if not cleaned:
            return None
        try:
            result = Decimal(cleaned)
        except InvalidOperation:
            return None
    else:
        return None

    if not result.is_finite():
        return None

    return result


def coerce_amount(value: Any, *, field: str = "amount") -> Decimal:
    """
    Coerce a non-negative amount (quantity, unit price, total).

    Unparsable or negative values are reported and replaced by zero.
    """
    parsed = parse_decimal(value)
    if parsed is None or parsed < ZERO:
        if value not in (None, ""):
            logger.warning(
                "Malformed numeric input for %s (%r); using 0", field, value
            )
        return ZERO
    return parsed


def coerce_rate(value: Any, *, field: str = "tax_rate") -> Decimal:
    """
    Coerce a percentage in the closed range [0, 100].
    """
    parsed = parse_decimal(value)
    if parsed is None or parsed < ZERO or parsed > HUNDRED:
        if value not in (None, ""):
            logger.warning(
                "Malformed tax rate for %s (%r); using 0", field, value
            )
        return ZERO
    return parsed
