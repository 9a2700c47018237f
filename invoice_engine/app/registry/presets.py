"""
Visual template preset registry.

Each preset explicitly binds together:

- a public identifier (slug)
- a human-readable name and description
- the layout architecture used to render it
- a complete template configuration (colors, fonts, layout, sections,
  custom text)

Several presets share one architecture and only differ by configuration.
Presets must be registered here to be addressable via the API.

The registry is immutable: user customizations are stored as separate
records and merged on top of a preset at generation time.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from invoice_engine.app.legal.presets import LEGAL_MENTIONS_PRESETS
from invoice_engine.app.schemas.template_config import TemplateConfiguration


class TemplatePreset(BaseModel):
    """
    Declarative description of a visual preset.
    """

    slug: str
    name: str
    description: str
    architecture: str
    configuration: TemplateConfiguration

    model_config = ConfigDict(frozen=True, extra="forbid")


def _configuration(
    *,
    colors: Dict[str, str],
    heading_font: str,
    body_font: str,
    sizes: Dict[str, int],
    layout: Dict[str, Any],
    sections: Optional[Dict[str, bool]] = None,
    legal_preset: str = "societe-standard",
) -> TemplateConfiguration:
    return TemplateConfiguration.model_validate(
        {
            "colors": colors,
            "fonts": {
                "heading": heading_font,
                "body": body_font,
                "sizes": sizes,
            },
            "layout": layout,
            "sections": sections or {},
            "custom_text": {
                "legal_mentions": LEGAL_MENTIONS_PRESETS[legal_preset].template,
                "legal_mentions_preset_id": legal_preset,
            },
        }
    )


_PRESETS = (
    TemplatePreset(
        slug="moderne",
        name="Moderne",
        description=(
            "Colonne latérale colorée avec logo, coordonnées et banque; "
            "contenu aéré à droite."
        ),
        architecture="sidebar",
        configuration=_configuration(
            colors={
                "primary": "#2563eb",
                "secondary": "#64748b",
                "accent": "#10b981",
                "text": "#1e293b",
                "background": "#ffffff",
            },
            heading_font="Helvetica-Bold",
            body_font="Helvetica",
            sizes={"base": 10, "heading": 20, "small": 8},
            layout={
                "logo_position": "left",
                "logo_size": "medium",
                "header_style": "modern",
                "border_radius": 4,
                "spacing": "compact",
            },
        ),
    ),
    TemplatePreset(
        slug="classique",
        name="Classique",
        description=(
            "En-tête serif centré dans une double bordure décorative, "
            "détails de prestation complets."
        ),
        architecture="formal",
        configuration=_configuration(
            colors={
                "primary": "#1e3a8a",
                "secondary": "#6b7280",
                "accent": "#b45309",
                "text": "#1f2937",
                "background": "#ffffff",
            },
            heading_font="Times-Bold",
            body_font="Times-Roman",
            sizes={"base": 10, "heading": 22, "small": 8},
            layout={
                "logo_position": "left",
                "logo_size": "large",
                "header_style": "classic",
                "border_radius": 0,
                "spacing": "normal",
            },
            sections={"item_details": True},
            legal_preset="societe-complete",
        ),
    ),
    TemplatePreset(
        slug="minimaliste",
        name="Minimaliste",
        description="Mise en page centrée, prestations en liste, sans tableau.",
        architecture="minimal",
        configuration=_configuration(
            colors={
                "primary": "#000000",
                "secondary": "#6b7280",
                "accent": "#3b82f6",
                "text": "#111827",
                "background": "#ffffff",
            },
            heading_font="Helvetica-Bold",
            body_font="Helvetica",
            sizes={"base": 10, "heading": 18, "small": 8},
            layout={
                "logo_position": "center",
                "logo_size": "small",
                "header_style": "minimal",
                "border_radius": 0,
                "spacing": "compact",
            },
            sections={"payment_terms": False},
        ),
    ),
    TemplatePreset(
        slug="studio",
        name="Studio",
        description="Bandeau diagonal violet et cartes décalées.",
        architecture="diagonal",
        configuration=_configuration(
            colors={
                "primary": "#8b5cf6",
                "secondary": "#6b7280",
                "accent": "#f59e0b",
                "text": "#111827",
                "background": "#ffffff",
            },
            heading_font="Helvetica-Bold",
            body_font="Helvetica",
            sizes={"base": 11, "heading": 26, "small": 9},
            layout={
                "logo_position": "right",
                "logo_size": "medium",
                "header_style": "modern",
                "border_radius": 12,
                "spacing": "normal",
            },
            sections={"item_details": True},
        ),
    ),
    TemplatePreset(
        slug="creatif",
        name="Créatif",
        description="En-tête asymétrique en diagonale avec barre d'accent.",
        architecture="diagonal",
        configuration=_configuration(
            colors={
                "primary": "#ec4899",
                "secondary": "#6b7280",
                "accent": "#14b8a6",
                "text": "#111827",
                "background": "#ffffff",
            },
            heading_font="Helvetica-Bold",
            body_font="Helvetica",
            sizes={"base": 11, "heading": 28, "small": 9},
            layout={
                "logo_position": "center",
                "logo_size": "large",
                "header_style": "modern",
                "border_radius": 8,
                "spacing": "relaxed",
            },
            sections={"item_details": True},
        ),
    ),
    TemplatePreset(
        slug="professionnel",
        name="Professionnel",
        description=(
            "Bandeau pleine largeur, contenu à 65 % et colonne "
            "récapitulative à 35 %."
        ),
        architecture="corporate",
        configuration=_configuration(
            colors={
                "primary": "#0f766e",
                "secondary": "#64748b",
                "accent": "#0ea5e9",
                "text": "#0f172a",
                "background": "#ffffff",
            },
            heading_font="Helvetica-Bold",
            body_font="Helvetica",
            sizes={"base": 10, "heading": 20, "small": 8},
            layout={
                "logo_position": "left",
                "logo_size": "medium",
                "header_style": "modern",
                "border_radius": 4,
                "spacing": "normal",
            },
        ),
    ),
    TemplatePreset(
        slug="corporate",
        name="Corporate",
        description="Identité d'entreprise sobre, bandeau sombre et colonne.",
        architecture="corporate",
        configuration=_configuration(
            colors={
                "primary": "#1f2937",
                "secondary": "#6b7280",
                "accent": "#2563eb",
                "text": "#111827",
                "background": "#ffffff",
            },
            heading_font="Helvetica-Bold",
            body_font="Helvetica",
            sizes={"base": 10, "heading": 20, "small": 8},
            layout={
                "logo_position": "left",
                "logo_size": "large",
                "header_style": "classic",
                "border_radius": 2,
                "spacing": "normal",
            },
            legal_preset="societe-complete",
        ),
    ),
    TemplatePreset(
        slug="elegant",
        name="Élégant",
        description="Serif centré, larges marges, filet or.",
        architecture="formal",
        configuration=_configuration(
            colors={
                "primary": "#44403c",
                "secondary": "#78716c",
                "accent": "#b8860b",
                "text": "#292524",
                "background": "#fffdf8",
            },
            heading_font="Times-Bold",
            body_font="Times-Roman",
            sizes={"base": 10, "heading": 24, "small": 8},
            layout={
                "logo_position": "center",
                "logo_size": "medium",
                "header_style": "classic",
                "border_radius": 0,
                "spacing": "relaxed",
            },
        ),
    ),
    TemplatePreset(
        slug="prestige",
        name="Prestige",
        description="Double bordure dorée et typographie serif haut de gamme.",
        architecture="formal",
        configuration=_configuration(
            colors={
                "primary": "#111827",
                "secondary": "#6b7280",
                "accent": "#ca8a04",
                "text": "#111827",
                "background": "#ffffff",
            },
            heading_font="Times-Bold",
            body_font="Times-Roman",
            sizes={"base": 10, "heading": 26, "small": 8},
            layout={
                "logo_position": "center",
                "logo_size": "large",
                "header_style": "classic",
                "border_radius": 0,
                "spacing": "normal",
            },
            sections={"item_details": True},
            legal_preset="societe-complete",
        ),
    ),
    TemplatePreset(
        slug="compact",
        name="Compact",
        description="Mise en page dense tenant sur une page A4.",
        architecture="compact",
        configuration=_configuration(
            colors={
                "primary": "#334155",
                "secondary": "#64748b",
                "accent": "#0284c7",
                "text": "#0f172a",
                "background": "#ffffff",
            },
            heading_font="Helvetica-Bold",
            body_font="Helvetica",
            sizes={"base": 8, "heading": 14, "small": 6},
            layout={
                "logo_position": "left",
                "logo_size": "small",
                "header_style": "minimal",
                "border_radius": 0,
                "spacing": "compact",
            },
        ),
    ),
    TemplatePreset(
        slug="tech",
        name="Tech",
        description="Esthétique terminal, chasse fixe et tableau serré.",
        architecture="compact",
        configuration=_configuration(
            colors={
                "primary": "#16a34a",
                "secondary": "#4b5563",
                "accent": "#22d3ee",
                "text": "#111827",
                "background": "#ffffff",
            },
            heading_font="Courier-Bold",
            body_font="Courier",
            sizes={"base": 8, "heading": 16, "small": 7},
            layout={
                "logo_position": "left",
                "logo_size": "small",
                "header_style": "minimal",
                "border_radius": 2,
                "spacing": "compact",
            },
        ),
    ),
    TemplatePreset(
        slug="colorful",
        name="Colorful",
        description="Bandeau pleine largeur et grille de cartes colorées.",
        architecture="card-grid",
        configuration=_configuration(
            colors={
                "primary": "#f97316",
                "secondary": "#6b7280",
                "accent": "#8b5cf6",
                "text": "#1f2937",
                "background": "#ffffff",
            },
            heading_font="Helvetica-Bold",
            body_font="Helvetica",
            sizes={"base": 10, "heading": 24, "small": 8},
            layout={
                "logo_position": "left",
                "logo_size": "medium",
                "header_style": "modern",
                "border_radius": 10,
                "spacing": "normal",
            },
        ),
    ),
)

TEMPLATE_PRESETS: Mapping[str, TemplatePreset] = MappingProxyType(
    {preset.slug: preset for preset in _PRESETS}
)

DEFAULT_PRESET_SLUG = "moderne"
