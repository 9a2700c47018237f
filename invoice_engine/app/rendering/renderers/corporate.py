"""
Corporate architecture.

Three zones:

- a full-width header band with the logo, title and references
- a main column (65 %) with the client block, the items and notes
- a side column (35 %) with issuer details, totals, payment terms and
  bank details

The side column lives on the first page. Legal mentions span the full
width below whichever column ends lower.
"""

from dataclasses import replace

from invoice_engine.app.rendering.base import RenderInput
from invoice_engine.app.rendering.blocks import (
    Box,
    bank_block,
    client_block,
    company_block,
    footer_block,
    legal_block,
    logo_block,
    meta_block,
    notes_block,
    payment_terms_block,
    title_block,
    totals_block,
)
from invoice_engine.app.rendering.content import DocumentContent
from invoice_engine.app.rendering.layout import (
    MARGIN,
    PageComposer,
    decoration,
    place_stack,
)
from invoice_engine.app.rendering.styles import Theme, contrast_color, tint
from invoice_engine.app.rendering.tables import default_table_style, flow_items_table
from invoice_engine.app.schemas.rendered import (
    A4_WIDTH,
    RenderedDocument,
    Shape,
    TextAlign,
)
from invoice_engine.app.schemas.template_config import TemplateConfiguration

ARCHITECTURE = "corporate"

HEADER_HEIGHT = 112.0
CONTINUATION_HEADER_HEIGHT = 28.0
MAIN_RATIO = 0.65
COLUMN_GAP = 16.0

# Narrower quantity / VAT columns leave room for descriptions.
_MAIN_COLUMN_WEIGHTS = (0.09, 0.41, 0.18, 0.10, 0.22)


def render_corporate(
    data: RenderInput,
    config: TemplateConfiguration,
) -> RenderedDocument:
    content = DocumentContent(data, config)
    theme = Theme(config)
    colors = config.colors

    full_x = MARGIN
    full_width = A4_WIDTH - 2 * MARGIN
    main_width = full_width * MAIN_RATIO - COLUMN_GAP / 2
    side_x = full_x + main_width + COLUMN_GAP
    side_width = full_width - main_width - COLUMN_GAP
    on_band = contrast_color(colors.primary)

    def page_setup(composer: PageComposer, number: int) -> None:
        height = HEADER_HEIGHT if number == 1 else CONTINUATION_HEADER_HEIGHT
        composer.place(
            decoration(
                x=0.0,
                y=0.0,
                width=A4_WIDTH,
                height=height,
                shape=Shape(fill=colors.primary),
            )
        )
        composer.cursor = height + theme.gap * 2

    composer = PageComposer(
        x=full_x,
        width=main_width,
        gap=theme.gap,
        background=colors.background,
        marker_style=theme.small(),
        page_setup=page_setup,
    )

    # -- header band ----------------------------------------------------------
    band_top = (HEADER_HEIGHT - theme.logo_height) / 2
    logo = logo_block(
        content, theme, x=full_x, width=full_width / 2, align=TextAlign.LEFT
    )
    if logo is not None:
        composer.place(logo.moved(dy=band_top))

    place_stack(
        composer,
        [
            title_block(
                content,
                theme,
                x=full_x + full_width / 2,
                width=full_width / 2,
                align=TextAlign.RIGHT,
                style=theme.heading(align=TextAlign.RIGHT, color=on_band),
            ),
            meta_block(
                content,
                theme,
                x=full_x + full_width / 2,
                width=full_width / 2,
                align=TextAlign.RIGHT,
                style=theme.small(align=TextAlign.RIGHT, color=on_band),
            ),
        ],
        top=MARGIN - 12,
        gap=4.0,
    )

    # -- side column (first page) --------------------------------------------
    panel = Box(fill=tint(colors.primary, 0.92), radius=theme.radius, padding=10)
    side_bottom = place_stack(
        composer,
        [
            company_block(content, theme, x=side_x, width=side_width, box=panel),
            totals_block(
                content,
                theme,
                x=side_x,
                width=side_width,
                grand_fill=colors.primary,
                style=theme.small(color=colors.text),
            ),
            payment_terms_block(content, theme, x=side_x, width=side_width, box=panel),
            bank_block(content, theme, x=side_x, width=side_width, box=panel),
        ],
        top=composer.cursor,
        gap=theme.gap,
    )

    # -- main column ------------------------------------------------------------
    composer.flow(
        client_block(
            content,
            theme,
            x=full_x,
            width=main_width,
            box=Box(
                fill=tint(colors.accent, 0.92),
                radius=theme.radius,
                padding=10,
            ),
        ),
        gap=theme.gap * 2,
    )

    base_style = default_table_style(theme, stripe_fill=tint(colors.primary, 0.95))
    flow_items_table(
        composer,
        content,
        x=full_x,
        width=main_width,
        style=replace(
            base_style,
            body_text=theme.small(color=colors.text),
            weights=_MAIN_COLUMN_WEIGHTS,
        ),
    )
    composer.flow(notes_block(content, theme, x=full_x, width=main_width))

    # -- full width ---------------------------------------------------------------
    if composer.page_number == 1:
        composer.advance_to(side_bottom + theme.gap * 2)

    composer.flow(legal_block(content, theme, x=full_x, width=full_width))
    composer.flow(footer_block(content, theme, x=full_x, width=full_width))

    return composer.finish(
        architecture=ARCHITECTURE,
        kind=data.facts.kind,
        document_number=data.facts.document_number,
    )
