"""
Template configuration schema.

A ``TemplateConfiguration`` carries every user-customizable aspect of a
rendered document: colors, fonts, layout knobs, visible sections and
custom text. Renderers only ever receive a *total* configuration, i.e.
one produced by ``app.normalization.normalize.normalize_configuration``.

Accepted key spellings for every field:
- snake_case (canonical)
- camelCase
- legacy editor keys (``showLogo``, ``fonts.size``, ``legalMentionsType``...)

IMPORTANT:
- Defaults declared here are the single source of truth for
  normalization. Renderers must never re-default a field.
- Validation constraints declared here define what an "invalid leaf" is.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from invoice_engine.app.legal.presets import (
    DEFAULT_LEGAL_MENTIONS_PRESET_ID,
    LEGAL_MENTIONS_PRESETS,
)


_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")

MAX_FONT_NAME_LENGTH = 100

DEFAULT_LEGAL_MENTIONS = (
    "En cas de retard de paiement, seront exigibles, conformément à "
    "l'article L. 441-6 du code de commerce, une indemnité calculée sur la "
    "base de trois fois le taux de l'intérêt légal en vigueur ainsi qu'une "
    "indemnité forfaitaire pour frais de recouvrement de 40 euros."
)

_CONFIG_MODEL_CONFIG = ConfigDict(
    frozen=True,
    extra="ignore",
    alias_generator=to_camel,
    populate_by_name=True,
)


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class SectionKey(str, Enum):
    """
    The seven optional blocks a user can toggle.

    Values match the field names of ``Sections`` and are used to tag
    rendered blocks.
    """

    LOGO = "logo"
    BANK_DETAILS = "bank_details"
    PAYMENT_TERMS = "payment_terms"
    LEGAL_MENTIONS = "legal_mentions"
    ITEM_DETAILS = "item_details"
    COMPANY_DETAILS = "company_details"
    CLIENT_DETAILS = "client_details"


class LogoPosition(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class LogoSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class HeaderStyle(str, Enum):
    MODERN = "modern"
    CLASSIC = "classic"
    MINIMAL = "minimal"


class Spacing(str, Enum):
    COMPACT = "compact"
    NORMAL = "normal"
    RELAXED = "relaxed"


# ---------------------------------------------------------------------------
# Sub-models
# ---------------------------------------------------------------------------


class Colors(BaseModel):
    primary: str = "#2c5aa0"
    secondary: str = "#666666"
    accent: str = "#059669"
    text: str = "#333333"
    background: str = "#ffffff"

    model_config = _CONFIG_MODEL_CONFIG

    @field_validator("*")
    @classmethod
    def _hex_color(cls, v: str) -> str:
        if not _HEX_COLOR.match(v):
            raise ValueError(f"not a #RRGGBB color: {v!r}")
        return v.lower()


class FontSizes(BaseModel):
    base: int = Field(default=10, ge=6, le=16)
    heading: int = Field(default=20, ge=12, le=32)
    small: int = Field(default=8, ge=4, le=12)

    model_config = _CONFIG_MODEL_CONFIG


class Fonts(BaseModel):
    heading: str = Field(
        default="Helvetica-Bold", min_length=1, max_length=MAX_FONT_NAME_LENGTH
    )
    body: str = Field(
        default="Helvetica", min_length=1, max_length=MAX_FONT_NAME_LENGTH
    )
    sizes: FontSizes = Field(
        default_factory=FontSizes,
        validation_alias=AliasChoices("sizes", "size"),
    )

    model_config = _CONFIG_MODEL_CONFIG


class Layout(BaseModel):
    logo_position: LogoPosition = LogoPosition.LEFT
    logo_size: LogoSize = LogoSize.MEDIUM
    header_style: HeaderStyle = HeaderStyle.MODERN
    border_radius: int = Field(default=4, ge=0, le=20)
    spacing: Spacing = Spacing.NORMAL

    model_config = _CONFIG_MODEL_CONFIG


def _section_alias(name: str) -> AliasChoices:
    camel = to_camel(name)
    return AliasChoices(
        name,
        camel,
        "show" + camel[0].upper() + camel[1:],
        f"show_{name}",
    )


class Sections(BaseModel):
    """
    Visibility flags of the optional blocks.

    Everything is visible by default except per-item details.
    """

    logo: bool = Field(default=True, validation_alias=_section_alias("logo"))
    bank_details: bool = Field(
        default=True, validation_alias=_section_alias("bank_details")
    )
    payment_terms: bool = Field(
        default=True, validation_alias=_section_alias("payment_terms")
    )
    legal_mentions: bool = Field(
        default=True, validation_alias=_section_alias("legal_mentions")
    )
    item_details: bool = Field(
        default=False, validation_alias=_section_alias("item_details")
    )
    company_details: bool = Field(
        default=True, validation_alias=_section_alias("company_details")
    )
    client_details: bool = Field(
        default=True, validation_alias=_section_alias("client_details")
    )

    model_config = _CONFIG_MODEL_CONFIG

    def is_visible(self, key: SectionKey) -> bool:
        return bool(getattr(self, SectionKey(key).value))


class CustomText(BaseModel):
    invoice_title: str = Field(default="FACTURE", min_length=1)
    payment_terms_label: str = Field(
        default="Modalités de paiement", min_length=1
    )
    bank_details_label: str = Field(
        default="Coordonnées Bancaires", min_length=1
    )
    legal_mentions: str = DEFAULT_LEGAL_MENTIONS
    legal_mentions_preset_id: str = Field(
        default=DEFAULT_LEGAL_MENTIONS_PRESET_ID,
        validation_alias=AliasChoices(
            "legal_mentions_preset_id",
            "legalMentionsPresetId",
            "legalMentionsType",
            "legal_mentions_type",
        ),
    )
    footer_text: Optional[str] = None

    model_config = _CONFIG_MODEL_CONFIG

    @field_validator("legal_mentions_preset_id")
    @classmethod
    def _known_preset(cls, v: str) -> str:
        if v not in LEGAL_MENTIONS_PRESETS:
            raise ValueError(f"unknown legal mentions preset: {v!r}")
        return v

    @field_validator("footer_text")
    @classmethod
    def _blank_footer_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


# ---------------------------------------------------------------------------
# Root model
# ---------------------------------------------------------------------------


class TemplateConfiguration(BaseModel):
    """
    Total visual configuration handed to renderers.

    ``custom_text.legal_mentions`` is authoritative at render time.
    ``custom_text.legal_mentions_preset_id`` only records which preset the
    text was last reset from.
    """

    colors: Colors = Field(default_factory=Colors)
    fonts: Fonts = Field(default_factory=Fonts)
    layout: Layout = Field(default_factory=Layout)
    sections: Sections = Field(default_factory=Sections)
    custom_text: CustomText = Field(default_factory=CustomText)

    model_config = _CONFIG_MODEL_CONFIG
