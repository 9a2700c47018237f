"""
Legal mentions endpoints.

Expose the legal mentions preset table and the issuer -> preset
resolution used by the template editor to prefill (or reset) the legal
mentions text.
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from invoice_engine.app.legal.presets import LEGAL_MENTIONS_PRESETS, LegalMentionsPreset
from invoice_engine.app.legal.resolver import (
    find_unresolved_placeholders,
    generate_legal_mentions_text,
    get_preset,
    resolve_legal_mentions,
)
from invoice_engine.app.schemas.documents import PartyProfile

router = APIRouter()


class ResolveRequest(BaseModel):
    """
    ``preset_id`` forces a preset (the editor's "reset to preset");
    otherwise the preset follows the issuer's legal form.
    """

    issuer: Optional[PartyProfile] = None
    preset_id: Optional[str] = None


class ResolveResponse(BaseModel):
    preset_id: str
    text: str
    unresolved_placeholders: List[str]


@router.get(
    "",
    response_model=List[LegalMentionsPreset],
    summary="List legal mentions presets",
)
def list_legal_mentions_presets() -> List[LegalMentionsPreset]:
    return list(LEGAL_MENTIONS_PRESETS.values())


@router.post(
    "/resolve",
    response_model=ResolveResponse,
    summary="Resolve and materialize legal mentions for an issuer",
)
def resolve(payload: ResolveRequest) -> ResolveResponse:
    if payload.preset_id is None:
        resolved = resolve_legal_mentions(payload.issuer)
        return ResolveResponse(
            preset_id=resolved.preset_id,
            text=resolved.text,
            unresolved_placeholders=resolved.unresolved,
        )

    try:
        preset = get_preset(payload.preset_id)
    except KeyError as exc:
        raise HTTPException(
            status_code=404,
            detail=f"Legal mentions preset '{payload.preset_id}' not found.",
        ) from exc

    text = generate_legal_mentions_text(preset, payload.issuer)
    return ResolveResponse(
        preset_id=preset.id,
        text=text,
        unresolved_placeholders=find_unresolved_placeholders(text),
    )


@router.get(
    "/{preset_id}",
    response_model=LegalMentionsPreset,
    summary="Return one legal mentions preset",
)
def get_legal_mentions_preset(preset_id: str) -> LegalMentionsPreset:
    preset = LEGAL_MENTIONS_PRESETS.get(preset_id)
    if preset is None:
        raise HTTPException(
            status_code=404,
            detail=f"Legal mentions preset '{preset_id}' not found.",
        )
    return preset
