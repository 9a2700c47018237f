"""
Template discovery, schema introspection and user template endpoints.

Preset routes are read-only and operate entirely from the in-process
preset registry. User template routes read and write the template
store; writes are last-write-wins.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from invoice_engine.app.api.deps import get_engine_config, get_template_store
from invoice_engine.app.config import EngineConfig
from invoice_engine.app.normalization.normalize import (
    merge_configuration,
    normalize_configuration,
)
from invoice_engine.app.registry.presets import TEMPLATE_PRESETS
from invoice_engine.app.schemas.documents import PartyProfile
from invoice_engine.app.schemas.template_config import TemplateConfiguration
from invoice_engine.app.services.generation import materialize_legal_mentions
from invoice_engine.app.services.template_store import (
    InMemoryTemplateStore,
    TemplateRecord,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class TemplateListItem(BaseModel):
    slug: str
    name: str
    description: str
    architecture: str


class TemplateDetail(TemplateListItem):
    configuration: TemplateConfiguration


class UserTemplateWrite(BaseModel):
    """
    ``issuer`` is the profile the legal mentions text is generated for
    when ``configuration`` carries none. The generated text is stored
    with the template and is not regenerated afterwards.
    """

    name: str = Field(..., min_length=1, max_length=120)
    preset: str
    configuration: Dict[str, Any] = Field(default_factory=dict)
    is_default: bool = False
    issuer: Optional[PartyProfile] = None

    model_config = ConfigDict(extra="forbid")


class UserTemplateDetail(BaseModel):
    """
    A user template as stored, plus the configuration it renders with.

    ``template_id`` is None when the user has no saved default and the
    built-in default preset is returned instead.
    """

    user_id: str
    template_id: Optional[str] = None
    name: str
    preset: str
    architecture: str
    is_default: bool
    overrides: Dict[str, Any]
    configuration: TemplateConfiguration


def _user_template_detail(record: TemplateRecord) -> UserTemplateDetail:
    preset = TEMPLATE_PRESETS[record.preset]
    return UserTemplateDetail(
        user_id=record.user_id,
        template_id=record.template_id,
        name=record.name,
        preset=record.preset,
        architecture=preset.architecture,
        is_default=record.is_default,
        overrides=record.configuration,
        configuration=normalize_configuration(
            merge_configuration(preset.configuration, record.configuration)
        ),
    )


# ---------------------------------------------------------------------------
# GET /templates
# ---------------------------------------------------------------------------


@router.get(
    "",
    response_model=List[TemplateListItem],
    summary="List visual template presets",
)
def list_templates() -> List[TemplateListItem]:
    """
    Return all presets currently registered in the engine.
    """
    return [
        TemplateListItem(
            slug=preset.slug,
            name=preset.name,
            description=preset.description,
            architecture=preset.architecture,
        )
        for preset in TEMPLATE_PRESETS.values()
    ]


# ---------------------------------------------------------------------------
# GET /templates/schema
# ---------------------------------------------------------------------------


@router.get(
    "/schema",
    summary="Return the JSON schema of a template configuration",
)
def get_configuration_schema() -> Dict[str, Any]:
    """
    Return the JSON schema derived from ``TemplateConfiguration``.

    The schema documents the canonical camelCase wire format and every
    field default. Clients may send partial configurations: missing or
    invalid values are replaced by their defaults at generation time.
    """
    return TemplateConfiguration.model_json_schema(by_alias=True)


# ---------------------------------------------------------------------------
# User templates
# ---------------------------------------------------------------------------


@router.get(
    "/users/{user_id}/default",
    response_model=UserTemplateDetail,
    summary="Return a user's default template",
)
def get_user_default_template(
    user_id: str,
    config: EngineConfig = Depends(get_engine_config),
    store: InMemoryTemplateStore = Depends(get_template_store),
) -> UserTemplateDetail:
    """
    Return the user's default template, or the built-in default preset
    when the user has not saved one.
    """
    record = store.get_default(user_id)
    if record is not None:
        return _user_template_detail(record)

    preset = TEMPLATE_PRESETS[config.DEFAULT_PRESET]
    return UserTemplateDetail(
        user_id=user_id,
        template_id=None,
        name=preset.name,
        preset=preset.slug,
        architecture=preset.architecture,
        is_default=True,
        overrides={},
        configuration=preset.configuration,
    )


@router.get(
    "/users/{user_id}",
    response_model=List[UserTemplateDetail],
    summary="List a user's saved templates",
)
def list_user_templates(
    user_id: str,
    store: InMemoryTemplateStore = Depends(get_template_store),
) -> List[UserTemplateDetail]:
    return [_user_template_detail(r) for r in store.list_for_user(user_id)]


@router.put(
    "/users/{user_id}/{template_id}",
    response_model=UserTemplateDetail,
    summary="Create or replace a user template",
)
def put_user_template(
    user_id: str,
    template_id: str,
    payload: UserTemplateWrite,
    store: InMemoryTemplateStore = Depends(get_template_store),
) -> UserTemplateDetail:
    if payload.preset not in TEMPLATE_PRESETS:
        raise HTTPException(
            status_code=422,
            detail=f"Unknown template preset '{payload.preset}'.",
        )

    record = store.save(
        TemplateRecord(
            user_id=user_id,
            template_id=template_id,
            name=payload.name,
            preset=payload.preset,
            configuration=materialize_legal_mentions(
                TEMPLATE_PRESETS[payload.preset],
                payload.configuration,
                payload.issuer,
            ),
            is_default=payload.is_default,
        )
    )
    logger.info(
        "Saved template %s for user %s (preset=%s default=%s)",
        template_id,
        user_id,
        record.preset,
        record.is_default,
    )
    return _user_template_detail(record)


@router.get(
    "/users/{user_id}/{template_id}",
    response_model=UserTemplateDetail,
    summary="Return a saved user template",
)
def get_user_template(
    user_id: str,
    template_id: str,
    store: InMemoryTemplateStore = Depends(get_template_store),
) -> UserTemplateDetail:
    record = store.get(user_id, template_id)
    if record is None:
        raise HTTPException(
            status_code=404,
            detail=f"Template '{template_id}' not found for user '{user_id}'.",
        )
    return _user_template_detail(record)


@router.delete(
    "/users/{user_id}/{template_id}",
    status_code=204,
    summary="Delete a saved user template",
)
def delete_user_template(
    user_id: str,
    template_id: str,
    store: InMemoryTemplateStore = Depends(get_template_store),
) -> None:
    if not store.delete(user_id, template_id):
        raise HTTPException(
            status_code=404,
            detail=f"Template '{template_id}' not found for user '{user_id}'.",
        )


# ---------------------------------------------------------------------------
# GET /templates/{slug}
# ---------------------------------------------------------------------------


@router.get(
    "/{slug}",
    response_model=TemplateDetail,
    summary="Return a preset with its full configuration",
)
def get_template(slug: str) -> TemplateDetail:
    preset = TEMPLATE_PRESETS.get(slug)
    if preset is None:
        raise HTTPException(
            status_code=404,
            detail=f"Template '{slug}' not found.",
        )

    return TemplateDetail(
        slug=preset.slug,
        name=preset.name,
        description=preset.description,
        architecture=preset.architecture,
        configuration=preset.configuration,
    )
