"""
Live tax recalculation for the document editor.

Accepts raw line items as typed in the editor (numbers or numeric
strings, possibly incomplete) and returns the VAT breakdown. Malformed
values count as zero; the endpoint does not reject partial input.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from invoice_engine.app.api.deps import get_engine_config
from invoice_engine.app.config import EngineConfig
from invoice_engine.app.tax.aggregator import TaxBreakdown, aggregate_tax

router = APIRouter()


class AggregateRequest(BaseModel):
    items: List[Dict[str, Any]] = Field(default_factory=list)


@router.post(
    "/aggregate",
    response_model=TaxBreakdown,
    summary="Aggregate line items by VAT rate",
)
def aggregate(
    payload: AggregateRequest,
    config: EngineConfig = Depends(get_engine_config),
) -> TaxBreakdown:
    if len(payload.items) > config.MAX_LINE_ITEMS:
        raise HTTPException(
            status_code=422,
            detail=(
                f"Request has {len(payload.items)} line items; "
                f"the limit is {config.MAX_LINE_ITEMS}."
            ),
        )
    return aggregate_tax(payload.items)
