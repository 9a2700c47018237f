"""
French legal mentions presets.

Each preset bundles the rule flags that govern which mentions an invoice
must carry for a given kind of issuer (articles L441-3 and L441-9 of the
Code de commerce), together with the ready-to-print template text.

Templates may contain placeholders that are substituted from the issuer
profile by ``app.legal.resolver``:

- ``[Ville]``               city of the RCS registration
- ``[Capital]``             share capital
- ``[Nom de l'assurance]``  professional liability insurer

The table is immutable and safe to share across threads.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Rule model
# ---------------------------------------------------------------------------


class VatRegime(str, Enum):
    NORMAL = "normal"
    FRANCHISE = "franchise"
    REVERSE_CHARGE = "reverse_charge"
    EXEMPT = "exempt"


class DiscountTerms(BaseModel):
    rate: str
    delay: str

    model_config = ConfigDict(frozen=True, extra="forbid")


class LegalRules(BaseModel):
    """
    Rule flags of a preset.

    ``registry_mention``, ``capital_mention`` and ``insurance_mention``
    also gate placeholder substitution.
    """

    late_penalty_rate: str = "trois fois le taux d'intérêt légal"
    flat_indemnity: Decimal = Decimal("40")
    recovery_cost: bool = True
    discount: Optional[DiscountTerms] = None
    vat_regime: VatRegime = VatRegime.NORMAL
    vat_mention: Optional[str] = None
    registry_mention: bool = False
    capital_mention: bool = False
    insurance_mention: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")


class LegalMentionsPreset(BaseModel):
    id: str
    name: str
    description: str
    applicable_for: Tuple[str, ...] = Field(default_factory=tuple)
    rules: LegalRules = Field(default_factory=LegalRules)
    template: str

    model_config = ConfigDict(frozen=True, extra="forbid")


# ---------------------------------------------------------------------------
# Shared clauses
# ---------------------------------------------------------------------------

LATE_PAYMENT_CLAUSE = (
    "En cas de retard de paiement, seront exigibles, conformément à "
    "l'article L. 441-6 du Code de commerce, une indemnité calculée sur la "
    "base de trois fois le taux d'intérêt légal ainsi qu'une indemnité "
    "forfaitaire pour frais de recouvrement de 40 euros."
)

_EARLY_PAYMENT_DISCOUNT = "Escompte pour règlement anticipé : 2% à 8 jours."

_DISCOUNT_DEDUCTED = (
    "Les réglements reçus avant la date d'échéance et mentionnant "
    "« Escompte déduit » bénéficieront d'une réduction de 2%."
)

_COMPANY_REGISTRATION = "[Capital] - Inscrite au RCS de [Ville]."


def _paragraphs(*parts: str) -> str:
    return "\n\n".join(parts)


# ---------------------------------------------------------------------------
# Preset table
# ---------------------------------------------------------------------------

DEFAULT_LEGAL_MENTIONS_PRESET_ID = "societe-standard"

_PRESETS = (
    LegalMentionsPreset(
        id="micro-entreprise",
        name="Micro-entrepreneur (Franchise en base de TVA)",
        description=(
            "Pour auto-entrepreneurs et micro-entreprises en franchise de TVA"
        ),
        applicable_for=("Micro-entrepreneur", "Auto-entrepreneur"),
        rules=LegalRules(
            vat_regime=VatRegime.FRANCHISE,
            vat_mention="TVA non applicable, article 293 B du CGI",
        ),
        template=_paragraphs(
            LATE_PAYMENT_CLAUSE,
            "TVA non applicable, article 293 B du Code Général des Impôts.",
            "Dispensé d'immatriculation en application de l'article "
            "L. 123-1-1 du Code de commerce.",
        ),
    ),
    LegalMentionsPreset(
        id="societe-standard",
        name="Société (SARL, SAS, SASU, EURL)",
        description="Pour sociétés soumises à TVA avec immatriculation RCS",
        applicable_for=("SARL", "SAS", "SASU", "EURL", "SA"),
        rules=LegalRules(
            discount=DiscountTerms(rate="2%", delay="8 jours"),
            registry_mention=True,
            capital_mention=True,
        ),
        template=_paragraphs(
            LATE_PAYMENT_CLAUSE,
            _EARLY_PAYMENT_DISCOUNT,
            _DISCOUNT_DEDUCTED,
            _COMPANY_REGISTRATION,
        ),
    ),
    LegalMentionsPreset(
        id="profession-liberale",
        name="Profession libérale",
        description="Pour professions libérales avec assurance professionnelle",
        applicable_for=("Profession libérale", "Consultant", "Expert"),
        rules=LegalRules(insurance_mention=True),
        template=_paragraphs(
            LATE_PAYMENT_CLAUSE,
            "Assurance Responsabilité Civile Professionnelle souscrite "
            "auprès de [Nom de l'assurance].",
        ),
    ),
    LegalMentionsPreset(
        id="association",
        name="Association loi 1901",
        description=(
            "Pour associations non assujetties à la TVA sur leurs "
            "activités non lucratives"
        ),
        applicable_for=("Association", "Association loi 1901"),
        rules=LegalRules(
            vat_regime=VatRegime.EXEMPT,
            vat_mention="TVA non applicable, article 261-7-1° du CGI",
        ),
        template=_paragraphs(
            "Association régie par la loi du 1er juillet 1901.",
            "TVA non applicable, article 261-7-1° du Code Général des Impôts.",
            LATE_PAYMENT_CLAUSE,
        ),
    ),
    LegalMentionsPreset(
        id="prestataire-international",
        name="Prestataire de services international (Autoliquidation)",
        description=(
            "Pour prestations B2B intracommunautaires avec autoliquidation "
            "de la TVA"
        ),
        applicable_for=("Prestataire international", "B2B intracommunautaire"),
        rules=LegalRules(
            vat_regime=VatRegime.REVERSE_CHARGE,
            vat_mention=(
                "Autoliquidation de la TVA par le preneur - "
                "Article 283-2 du CGI"
            ),
            registry_mention=True,
            capital_mention=True,
        ),
        template=_paragraphs(
            LATE_PAYMENT_CLAUSE,
            "TVA non applicable - Autoliquidation par le preneur "
            "conformément à l'article 283-2 du Code Général des Impôts.",
            _COMPANY_REGISTRATION,
        ),
    ),
    LegalMentionsPreset(
        id="societe-complete",
        name="Société (Mentions complètes)",
        description="Toutes les mentions légales obligatoires pour une société",
        applicable_for=("SARL", "SAS", "SASU", "EURL", "SA"),
        rules=LegalRules(
            discount=DiscountTerms(rate="2%", delay="8 jours"),
            registry_mention=True,
            capital_mention=True,
            insurance_mention=True,
        ),
        template=_paragraphs(
            "PÉNALITÉS DE RETARD\n"
            + LATE_PAYMENT_CLAUSE
            + " Si les frais de recouvrement exposés sont supérieurs au "
            "montant de cette indemnité forfaitaire, une indemnité "
            "complémentaire peut être demandée.",
            "ESCOMPTE\n" + _EARLY_PAYMENT_DISCOUNT + " " + _DISCOUNT_DEDUCTED,
            "CONDITIONS GÉNÉRALES\n"
            "Nos conditions générales de vente sont disponibles sur simple "
            "demande. Elles font partie intégrante du présent contrat et sont "
            "réputées acceptées par le fait de ne pas avoir formulé de "
            "réserves au plus tard dans un délai de 8 jours suivant la "
            "réception de la présente facture.",
            "IMMATRICULATION\n" + _COMPANY_REGISTRATION,
        ),
    ),
    LegalMentionsPreset(
        id="personnalise",
        name="Mentions personnalisées",
        description="Créez vos propres mentions légales",
        applicable_for=("Tous types",),
        template=_paragraphs(
            "[Personnalisez vos mentions légales ici]",
            LATE_PAYMENT_CLAUSE,
        ),
    ),
)

LEGAL_MENTIONS_PRESETS: Mapping[str, LegalMentionsPreset] = MappingProxyType(
    {preset.id: preset for preset in _PRESETS}
)
