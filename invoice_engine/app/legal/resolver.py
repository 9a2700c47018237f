"""
Legal mentions resolution.

Maps an issuer's free-text legal form onto a legal mentions preset and
materializes the preset text for that issuer.

Resolution rules are evaluated in order; the first match wins:

1. micro / auto-entrepreneur          -> ``micro-entreprise``
2. liberal profession                 -> ``profession-liberale``
3. association                        -> ``association``
4. company suffix (SARL, SAS, ...)    -> ``societe-standard``
5. anything else                      -> ``societe-standard``

IMPORTANT:
- Matching is case-insensitive, trimmed and accent-insensitive, so
  "Profession libérale" and "PROFESSION LIBERALE" resolve identically.
- Company suffixes are matched as whole words. "Consultante SASU" hits
  rule 4, "Basalte" does not.
- Resolution never fails; the fallback is logged at INFO level.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass
from typing import List, Optional

from invoice_engine.app.legal.presets import (
    DEFAULT_LEGAL_MENTIONS_PRESET_ID,
    LEGAL_MENTIONS_PRESETS,
    LegalMentionsPreset,
)
from invoice_engine.app.rendering.formatting import format_amount
from invoice_engine.app.schemas.documents import PartyProfile

logger = logging.getLogger(__name__)


_PLACEHOLDER = re.compile(r"\[[^\[\]]+\]")
_COMPANY_SUFFIX = re.compile(r"\b(SARL|SASU|SAS|EURL|SA|SNC|SCS)\b")

CITY_PLACEHOLDER = "[Ville]"
CAPITAL_PLACEHOLDER = "[Capital]"
INSURANCE_PLACEHOLDER = "[Nom de l'assurance]"


def _fold(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.upper().strip()


# ---------------------------------------------------------------------------
# Legal form -> preset id
# ---------------------------------------------------------------------------


def resolve_preset_id(legal_form: Optional[str]) -> str:
    """
    Return the legal mentions preset id for an issuer legal form.
    """
    if not legal_form or not legal_form.strip():
        logger.info(
            "No legal form on issuer; using preset %s",
            DEFAULT_LEGAL_MENTIONS_PRESET_ID,
        )
        return DEFAULT_LEGAL_MENTIONS_PRESET_ID

    form = _fold(legal_form)

    if (
        "MICRO" in form
        or "AUTO-ENTREPRENEUR" in form
        or "AUTO ENTREPRENEUR" in form
        or form == "EI"
    ):
        return "micro-entreprise"

    if "LIBERAL" in form or form == "BNC":
        return "profession-liberale"

    if "ASSOCIATION" in form or form == "ASSO":
        return "association"

    if _COMPANY_SUFFIX.search(form):
        return "societe-standard"

    logger.info(
        "Unrecognized legal form %r; using preset %s",
        legal_form,
        DEFAULT_LEGAL_MENTIONS_PRESET_ID,
    )
    return DEFAULT_LEGAL_MENTIONS_PRESET_ID


def get_preset(preset_id: str) -> LegalMentionsPreset:
    """
    Look up a preset by id.

    Raises:
        KeyError: if the id is not in the preset table.
    """
    return LEGAL_MENTIONS_PRESETS[preset_id]


# ---------------------------------------------------------------------------
# Text materialization
# ---------------------------------------------------------------------------


def generate_legal_mentions_text(
    preset: LegalMentionsPreset,
    issuer: Optional[PartyProfile] = None,
) -> str:
    """
    Substitute issuer data into the preset template.

    A placeholder is only replaced when the preset enables the
    corresponding mention AND the issuer carries the value. Otherwise it
    is left verbatim so that the readiness checks can report it.
    """
    text = preset.template
    if issuer is None:
        return text

    rules = preset.rules

    if rules.registry_mention and issuer.rcs_city:
        text = text.replace(CITY_PLACEHOLDER, issuer.rcs_city.strip())

    if rules.capital_mention and issuer.capital is not None:
        text = text.replace(
            CAPITAL_PLACEHOLDER,
            f"Capital social : {format_amount(issuer.capital)} €",
        )

    if rules.insurance_mention and issuer.insurance_company:
        insurer = issuer.insurance_company.strip()
        if issuer.insurance_policy:
            insurer = f"{insurer} (police n° {issuer.insurance_policy.strip()})"
        text = text.replace(INSURANCE_PLACEHOLDER, insurer)

    return text


def find_unresolved_placeholders(text: Optional[str]) -> List[str]:
    """Return the ``[...]`` placeholders still present in ``text``, in order."""
    if not text:
        return []
    return _PLACEHOLDER.findall(text)


@dataclass(frozen=True)
class ResolvedLegalMentions:
    preset_id: str
    text: str
    unresolved: List[str]


def resolve_legal_mentions(
    issuer: Optional[PartyProfile],
) -> ResolvedLegalMentions:
    """
    Resolve the preset for ``issuer`` and materialize its text.
    """
    preset_id = resolve_preset_id(issuer.legal_form if issuer else None)
    text = generate_legal_mentions_text(get_preset(preset_id), issuer)
    unresolved = find_unresolved_placeholders(text)

    if unresolved:
        logger.info(
            "Legal mentions for preset %s keep placeholders: %s",
            preset_id,
            ", ".join(unresolved),
        )

    return ResolvedLegalMentions(
        preset_id=preset_id,
        text=text,
        unresolved=unresolved,
    )
