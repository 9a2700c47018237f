"""
Document generation pipeline.

Wires the engine components together for one document:

    preset + user overrides  -> merge -> normalize      (configuration)
    issuer legal form        -> resolver                (legal text, if unset)
    line items               -> tax aggregator          (VAT breakdown)
    architecture id          -> router -> renderer      (document tree)
    document tree            -> canonical JSON -> hash  (fingerprint)
    everything above         -> readiness checks        (advisory report)

Design guarantees:
- Generation never fails because of soft conditions (unknown
  architecture, invalid configuration leaves, unresolved legal form,
  malformed numbers). They are logged and, where useful, reported.
- The pipeline is pure: the same inputs produce the same document tree
  and the same fingerprint.
- Readiness findings never block generation here. Blocking is a caller
  decision (see the delivery gate in ``app.api.generate``).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from invoice_engine.app.checks.readiness import assess_delivery_readiness
from invoice_engine.app.legal.presets import LEGAL_MENTIONS_PRESETS
from invoice_engine.app.legal.resolver import (
    generate_legal_mentions_text,
    get_preset,
    resolve_preset_id,
)
from invoice_engine.app.normalization.normalize import (
    canonicalize_configuration,
    merge_configuration,
    normalize_configuration,
)
from invoice_engine.app.registry.presets import (
    DEFAULT_PRESET_SLUG,
    TEMPLATE_PRESETS,
    TemplatePreset,
)
from invoice_engine.app.rendering.base import RenderInput
from invoice_engine.app.rendering.router import resolve_renderer
from invoice_engine.app.schemas.documents import DocumentFacts, PartyProfile
from invoice_engine.app.schemas.findings import ReadinessReport
from invoice_engine.app.schemas.rendered import RenderedDocument
from invoice_engine.app.schemas.template_config import TemplateConfiguration
from invoice_engine.app.tax.aggregator import TaxBreakdown, aggregate_tax
from invoice_engine.app.utils.canonical import canonical_json_bytes
from invoice_engine.app.utils.hashing import compute_document_hash

logger = logging.getLogger(__name__)


class TemplateNotFoundError(KeyError):
    """Raised when a request names a visual preset that is not registered."""


class GenerationResult(BaseModel):
    """
    Output of one pipeline run.

    ``configuration`` is the total configuration the document was
    rendered with; ``legal_text`` is the text printed in the legal
    mentions block (empty when the section is hidden).
    """

    document: RenderedDocument
    architecture: str
    architecture_fallback: bool
    configuration: TemplateConfiguration
    tax: TaxBreakdown
    legal_text: str
    readiness: ReadinessReport
    document_hash: str

    model_config = ConfigDict(frozen=True, extra="forbid")


# ---------------------------------------------------------------------------
# Configuration assembly
# ---------------------------------------------------------------------------


def get_template_preset(slug: Optional[str]) -> TemplatePreset:
    """
    Look up a visual preset; ``None`` selects the default preset.

    Raises:
        TemplateNotFoundError: if ``slug`` is not registered.
    """
    preset = TEMPLATE_PRESETS.get(slug or DEFAULT_PRESET_SLUG)
    if preset is None:
        raise TemplateNotFoundError(slug)
    return preset


def _legal_mentions_preset_id(
    preset: TemplatePreset,
    overrides: Dict[str, Any],
    issuer: Optional[PartyProfile],
) -> str:
    """
    Pick the legal mentions preset, in order: the one named in the
    overrides, the one matching the issuer's legal form, the one of the
    visual preset.
    """
    chosen = overrides.get("custom_text", {}).get("legal_mentions_preset_id")
    if isinstance(chosen, str) and chosen in LEGAL_MENTIONS_PRESETS:
        return chosen

    if issuer is not None and issuer.legal_form:
        return resolve_preset_id(issuer.legal_form)

    merged = normalize_configuration(
        merge_configuration(preset.configuration, overrides)
    )
    return merged.custom_text.legal_mentions_preset_id


def materialize_legal_mentions(
    preset: TemplatePreset,
    overrides: Any = None,
    issuer: Optional[PartyProfile] = None,
) -> Dict[str, Any]:
    """
    Return ``overrides`` (canonicalized) carrying a legal mentions text.

    Text already present in the overrides is kept as-is. Otherwise the
    text is generated for ``issuer`` and stored next to the preset id it
    came from. Once stored, the text no longer follows the issuer: a
    later change of legal form leaves it untouched.
    """
    canonical = canonicalize_configuration(overrides)
    custom_text = canonical.get("custom_text", {})

    text = custom_text.get("legal_mentions")
    if isinstance(text, str) and text:
        return canonical

    preset_id = _legal_mentions_preset_id(preset, canonical, issuer)
    canonical["custom_text"] = {
        **custom_text,
        "legal_mentions": generate_legal_mentions_text(
            get_preset(preset_id), issuer
        ),
        "legal_mentions_preset_id": preset_id,
    }
    return canonical


def build_configuration(
    preset: TemplatePreset,
    overrides: Any = None,
    issuer: Optional[PartyProfile] = None,
) -> TemplateConfiguration:
    """
    Merge user overrides onto ``preset`` and normalize the result.

    Legal mentions are materialized first (see
    ``materialize_legal_mentions``).
    """
    return normalize_configuration(
        merge_configuration(
            preset.configuration,
            materialize_legal_mentions(preset, overrides, issuer),
        )
    )


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def generate_document(
    facts: DocumentFacts,
    *,
    client: Optional[PartyProfile] = None,
    issuer: Optional[PartyProfile] = None,
    template: Optional[str] = None,
    configuration: Optional[Mapping[str, Any]] = None,
    architecture: Optional[str] = None,
) -> GenerationResult:
    """
    Run the full generation pipeline for one document.

    Args:
        facts:
            Finalized invoice or quote snapshot.
        client, issuer:
            Party records; both optional.
        template:
            Visual preset slug. ``None`` selects the default preset.
        configuration:
            User overrides merged on top of the preset configuration.
        architecture:
            Explicit architecture id overriding the preset's own.
            Unknown ids fall back to the default renderer.

    Raises:
        TemplateNotFoundError: if ``template`` is not a registered preset.
    """
    preset = get_template_preset(template)
    config = build_configuration(preset, configuration, issuer)

    tax = aggregate_tax(facts.items)

    legal_text = (
        config.custom_text.legal_mentions if config.sections.legal_mentions else ""
    )

    architecture_id, renderer, fell_back = resolve_renderer(
        architecture or preset.architecture
    )

    document = renderer(
        RenderInput(
            facts=facts,
            client=client,
            issuer=issuer,
            tax=tax,
            legal_text=legal_text,
        ),
        config,
    )

    document_hash = compute_document_hash(canonical_json_bytes(document))

    readiness = assess_delivery_readiness(facts, client, issuer, config, tax)

    logger.info(
        "Generated %s %r with preset=%s architecture=%s pages=%d ready=%s",
        facts.kind.value,
        facts.document_number,
        preset.slug,
        architecture_id,
        document.page_count,
        readiness.delivery_ready,
    )

    return GenerationResult(
        document=document,
        architecture=architecture_id,
        architecture_fallback=fell_back,
        configuration=config,
        tax=tax,
        legal_text=legal_text,
        readiness=readiness,
        document_hash=document_hash,
    )
