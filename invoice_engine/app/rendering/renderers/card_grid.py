"""
Card grid architecture.

A full-bleed colored header band followed by a two-column grid of
colored cards (issuer, client, payment terms, bank details). Cards that
have nothing to show are skipped and the grid closes up.
"""

from typing import List

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
    Block,
    RenderedDocument,
    Shape,
    TextAlign,
)
from invoice_engine.app.schemas.template_config import TemplateConfiguration

ARCHITECTURE = "card-grid"

BAND_HEIGHT = 136.0
CONTINUATION_BAND_HEIGHT = 24.0
CARD_PADDING = 12.0


def render_card_grid(
    data: RenderInput,
    config: TemplateConfiguration,
) -> RenderedDocument:
    content = DocumentContent(data, config)
    theme = Theme(config)
    colors = config.colors

    x = MARGIN
    width = A4_WIDTH - 2 * MARGIN
    on_band = contrast_color(colors.primary)

    def page_setup(composer: PageComposer, number: int) -> None:
        height = BAND_HEIGHT if number == 1 else CONTINUATION_BAND_HEIGHT
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
        x=x,
        width=width,
        gap=theme.gap,
        background=colors.background,
        marker_style=theme.small(),
        page_setup=page_setup,
    )

    # -- header band ------------------------------------------------------------
    logo = logo_block(content, theme, x=x, width=width / 2, align=TextAlign.LEFT)
    if logo is not None:
        composer.place(logo.moved(dy=(BAND_HEIGHT - logo.height) / 2))

    place_stack(
        composer,
        [
            title_block(
                content,
                theme,
                x=x + width / 2,
                width=width / 2,
                align=TextAlign.RIGHT,
                style=theme.heading(align=TextAlign.RIGHT, color=on_band),
            ),
            meta_block(
                content,
                theme,
                x=x + width / 2,
                width=width / 2,
                align=TextAlign.RIGHT,
                style=theme.body(align=TextAlign.RIGHT, color=on_band),
            ),
        ],
        top=MARGIN - 6,
        gap=6.0,
    )

    # -- card grid ----------------------------------------------------------------
    card_width = (width - theme.gap) / 2
    palette = [
        tint(colors.primary, 0.88),
        tint(colors.accent, 0.85),
        tint(colors.accent, 0.9),
        tint(colors.primary, 0.92),
    ]
    builders = [company_block, client_block, payment_terms_block, bank_block]

    cards: List[Block] = []
    for builder, fill in zip(builders, palette):
        card = builder(
            content,
            theme,
            x=x,
            width=card_width,
            box=Box(fill=fill, radius=theme.radius, padding=CARD_PADDING),
        )
        if card is not None:
            cards.append(card)

    for start in range(0, len(cards), 2):
        pair = cards[start : start + 2]
        if len(pair) == 2:
            pair[1] = pair[1].moved(dx=card_width + theme.gap)
        composer.flow_row(pair, gap=theme.gap, equal_height=True)

    composer.skip(theme.gap)

    # -- items & totals -------------------------------------------------------------
    flow_items_table(
        composer,
        content,
        x=x,
        width=width,
        style=default_table_style(theme, stripe_fill=tint(colors.accent, 0.93)),
    )

    totals_width = width * 0.45
    composer.flow(
        totals_block(
            content,
            theme,
            x=x + width - totals_width,
            width=totals_width,
            grand_fill=colors.accent,
            box=Box(fill=tint(colors.primary, 0.94), radius=theme.radius, padding=6),
        ),
        gap=theme.gap * 2,
    )

    composer.flow(
        notes_block(
            content,
            theme,
            x=x,
            width=width,
            box=Box(fill=tint(colors.secondary, 0.9), radius=theme.radius, padding=10),
        )
    )
    composer.flow(
        legal_block(
            content,
            theme,
            x=x,
            width=width,
            box=Box(fill=tint(colors.secondary, 0.93), radius=theme.radius, padding=10),
        )
    )
    composer.flow(footer_block(content, theme, x=x, width=width))

    return composer.finish(
        architecture=ARCHITECTURE,
        kind=data.facts.kind,
        document_number=data.facts.document_number,
    )
