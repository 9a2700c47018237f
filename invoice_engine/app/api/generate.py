"""
Document generation endpoint.

Clients supply the finalized document snapshot, the party records and a
template choice. Tax aggregation, legal mentions, layout and
fingerprinting are performed exclusively by this engine.

Two execution modes are supported via the ?mode query parameter:

    document   full pipeline -> rendered document tree (JSON), plus the
               readiness report. Subject to the delivery gate.

    preview    same pipeline -> HTML preview of the identical tree.
               Never gated; intended for iterative editing.

Both modes return the same X-Document-Hash for the same input, so a
client can tell whether the preview it shows matches the document it
is about to send.
"""

import logging
from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, ConfigDict

from invoice_engine.app.api.deps import get_engine_config, get_template_store
from invoice_engine.app.config import EngineConfig
from invoice_engine.app.normalization.normalize import merge_configuration
from invoice_engine.app.schemas.documents import DocumentFacts, PartyProfile
from invoice_engine.app.schemas.findings import ReadinessReport
from invoice_engine.app.schemas.rendered import RenderedDocument
from invoice_engine.app.services.generation import (
    GenerationResult,
    TemplateNotFoundError,
    generate_document,
)
from invoice_engine.app.services.preview import render_preview_html
from invoice_engine.app.services.template_store import InMemoryTemplateStore

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class SavedTemplateRef(BaseModel):
    user_id: str
    template_id: str


class GenerateRequest(BaseModel):
    """
    ``template`` names a visual preset; ``saved_template`` names a user
    template and takes precedence. ``configuration`` overrides are
    applied last.
    """

    document: DocumentFacts
    client: Optional[PartyProfile] = None
    issuer: Optional[PartyProfile] = None
    template: Optional[str] = None
    saved_template: Optional[SavedTemplateRef] = None
    architecture: Optional[str] = None
    configuration: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="forbid")


class GeneratedDocument(BaseModel):
    document_hash: str
    architecture: str
    architecture_fallback: bool
    readiness: ReadinessReport
    document: RenderedDocument


def _response_headers(result: GenerationResult, mode: str) -> Dict[str, str]:
    return {
        "X-Document-Hash": result.document_hash,
        "X-Architecture": result.architecture,
        "X-Architecture-Fallback": str(result.architecture_fallback).lower(),
        "X-Delivery-Ready": str(result.readiness.delivery_ready).lower(),
        "X-Generation-Mode": mode,
    }


# ---------------------------------------------------------------------------
# Route
# ---------------------------------------------------------------------------


@router.post(
    "",
    summary="Generate an invoice or quote document",
)
def generate(
    request: GenerateRequest,
    mode: Literal["document", "preview"] = Query(
        default="document",
        description=(
            "Execution mode. "
            "'document' returns the rendered document tree as JSON. "
            "'preview' returns an HTML rendering of the same tree."
        ),
    ),
    config: EngineConfig = Depends(get_engine_config),
    store: InMemoryTemplateStore = Depends(get_template_store),
):
    # ------------------------------------------------------------------
    # Request limits
    # ------------------------------------------------------------------
    item_count = len(request.document.items)
    if item_count > config.MAX_LINE_ITEMS:
        raise HTTPException(
            status_code=422,
            detail=(
                f"Document has {item_count} line items; "
                f"the limit is {config.MAX_LINE_ITEMS}."
            ),
        )

    # ------------------------------------------------------------------
    # Template selection
    # ------------------------------------------------------------------
    template = request.template or config.DEFAULT_PRESET
    overrides: Optional[Dict[str, Any]] = request.configuration

    if request.saved_template is not None:
        ref = request.saved_template
        saved = store.get(ref.user_id, ref.template_id)
        if saved is None:
            raise HTTPException(
                status_code=404,
                detail=(
                    f"Template '{ref.template_id}' not found "
                    f"for user '{ref.user_id}'."
                ),
            )
        template = saved.preset
        overrides = merge_configuration(saved.configuration, overrides)

    # ------------------------------------------------------------------
    # Generation pipeline
    # ------------------------------------------------------------------
    try:
        result = generate_document(
            request.document,
            client=request.client,
            issuer=request.issuer,
            template=template,
            configuration=overrides,
            architecture=request.architecture,
        )
    except TemplateNotFoundError as exc:
        raise HTTPException(
            status_code=404,
            detail=f"Template '{template}' not found.",
        ) from exc
    except Exception as exc:
        logger.exception(
            "Document generation failed for template='%s' mode='%s'",
            template,
            mode,
        )
        raise HTTPException(
            status_code=500,
            detail="Document generation failed. See engine logs for details.",
        ) from exc

    headers = _response_headers(result, mode)

    # ------------------------------------------------------------------
    # Preview
    # ------------------------------------------------------------------
    if mode == "preview":
        try:
            html = render_preview_html(
                result.document,
                document_hash=result.document_hash,
                readiness=result.readiness,
                template_dir=config.TEMPLATE_DIR,
            )
        except Exception as exc:
            logger.exception(
                "Preview rendering failed for template='%s'", template
            )
            raise HTTPException(
                status_code=500,
                detail="Preview rendering failed. See engine logs for details.",
            ) from exc
        return HTMLResponse(content=html, headers=headers)

    # ------------------------------------------------------------------
    # Delivery gate
    # ------------------------------------------------------------------
    if config.ENABLE_DELIVERY_GATE and not result.readiness.delivery_ready:
        logger.info(
            "Delivery gate rejected %r: %s",
            request.document.document_number,
            ", ".join(result.readiness.finding_ids()),
        )
        raise HTTPException(
            status_code=409,
            detail={
                "message": "Document is not ready for delivery.",
                "findings": result.readiness.model_dump(mode="json")["findings"],
            },
            headers=headers,
        )

    body = GeneratedDocument(
        document_hash=result.document_hash,
        architecture=result.architecture,
        architecture_fallback=result.architecture_fallback,
        readiness=result.readiness,
        document=result.document,
    )
    return JSONResponse(content=body.model_dump(mode="json"), headers=headers)
