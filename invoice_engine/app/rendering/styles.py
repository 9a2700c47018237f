"""
Theme derivation.

Translates a normalized ``TemplateConfiguration`` into concrete text
styles and spacing values. Renderers ask the theme for styles instead of
reading configuration fields directly, so that architecture-specific
scaling (e.g. the compact layout) applies uniformly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from invoice_engine.app.schemas.rendered import TextStyle
from invoice_engine.app.schemas.template_config import (
    LogoSize,
    Spacing,
    TemplateConfiguration,
)

SPACING_GAPS = {
    Spacing.COMPACT: 6.0,
    Spacing.NORMAL: 10.0,
    Spacing.RELAXED: 16.0,
}

LOGO_HEIGHTS = {
    LogoSize.SMALL: 40.0,
    LogoSize.MEDIUM: 60.0,
    LogoSize.LARGE: 80.0,
}

WHITE = "#ffffff"
NEAR_BLACK = "#111111"


def contrast_color(fill: str) -> str:
    """Readable text color (white or near-black) on a ``#rrggbb`` fill."""
    try:
        r, g, b = (int(fill[i : i + 2], 16) for i in (1, 3, 5))
    except (TypeError, ValueError):
        return NEAR_BLACK
    luminance = 0.299 * r + 0.587 * g + 0.114 * b
    return WHITE if luminance < 150 else NEAR_BLACK


def tint(color: str, amount: float) -> str:
    """Mix ``color`` with white; ``amount`` 0 keeps it, 1 gives white."""
    try:
        channels = [int(color[i : i + 2], 16) for i in (1, 3, 5)]
    except (TypeError, ValueError):
        return WHITE
    mixed = [round(c + (255 - c) * amount) for c in channels]
    return "#" + "".join(f"{c:02x}" for c in mixed)


@dataclass(frozen=True)
class Theme:
    config: TemplateConfiguration
    scale: float = 1.0

    @property
    def colors(self):
        return self.config.colors

    @property
    def gap(self) -> float:
        return SPACING_GAPS[self.config.layout.spacing] * self.scale

    @property
    def logo_height(self) -> float:
        return LOGO_HEIGHTS[self.config.layout.logo_size] * self.scale

    @property
    def radius(self) -> float:
        return float(self.config.layout.border_radius)

    def _style(self, font: str, size: float, **overrides: Any) -> TextStyle:
        values = {
            "font": font,
            "size": round(size * self.scale, 2),
            "color": self.colors.text,
        }
        values.update(overrides)
        return TextStyle(**values)

    # -- text styles ------------------------------------------------------

    def body(self, **overrides: Any) -> TextStyle:
        return self._style(
            self.config.fonts.body, self.config.fonts.sizes.base, **overrides
        )

    def strong(self, **overrides: Any) -> TextStyle:
        overrides.setdefault("bold", True)
        return self.body(**overrides)

    def small(self, **overrides: Any) -> TextStyle:
        overrides.setdefault("color", self.colors.secondary)
        return self._style(
            self.config.fonts.body, self.config.fonts.sizes.small, **overrides
        )

    def label(self, **overrides: Any) -> TextStyle:
        overrides.setdefault("bold", True)
        overrides.setdefault("color", self.colors.primary)
        return self._style(
            self.config.fonts.heading,
            self.config.fonts.sizes.base + 1,
            **overrides,
        )

    def heading(self, **overrides: Any) -> TextStyle:
        overrides.setdefault("bold", True)
        overrides.setdefault("color", self.colors.primary)
        return self._style(
            self.config.fonts.heading,
            self.config.fonts.sizes.heading,
            **overrides,
        )
