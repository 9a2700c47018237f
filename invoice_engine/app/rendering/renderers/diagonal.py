"""
Diagonal architecture.

An asymmetric header band cut on a diagonal, underlined by a thin accent
bar, carries the title and document references. Issuer and client sit
in offset cards below it; totals and payment information use rounded
cards as well.
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
    ShapeKind,
    TextAlign,
)
from invoice_engine.app.schemas.template_config import TemplateConfiguration

ARCHITECTURE = "diagonal"

BAND_LEFT = 175.0
BAND_RIGHT = 120.0
ACCENT_THICKNESS = 8.0
CONTINUATION_LEFT = 46.0
CONTINUATION_RIGHT = 30.0
CARD_OFFSET = 16.0


def _band(left: float, right: float, fill: str) -> Block:
    return decoration(
        x=0.0,
        y=0.0,
        width=A4_WIDTH,
        height=max(left, right),
        shape=Shape(
            kind=ShapeKind.POLYGON,
            points=[[0.0, 0.0], [A4_WIDTH, 0.0], [A4_WIDTH, right], [0.0, left]],
            fill=fill,
        ),
    )


def _accent_bar(left: float, right: float, fill: str) -> Block:
    return decoration(
        x=0.0,
        y=min(left, right),
        width=A4_WIDTH,
        height=abs(left - right) + ACCENT_THICKNESS,
        shape=Shape(
            kind=ShapeKind.POLYGON,
            points=[
                [0.0, left],
                [A4_WIDTH, right],
                [A4_WIDTH, right + ACCENT_THICKNESS],
                [0.0, left + ACCENT_THICKNESS],
            ],
            fill=fill,
        ),
    )


def render_diagonal(
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
        if number == 1:
            left, right = BAND_LEFT, BAND_RIGHT
        else:
            left, right = CONTINUATION_LEFT, CONTINUATION_RIGHT
        composer.place(_band(left, right, colors.primary))
        composer.place(_accent_bar(left, right, colors.accent))
        composer.cursor = max(left, right) + ACCENT_THICKNESS + theme.gap * 2

    composer = PageComposer(
        x=x,
        width=width,
        gap=theme.gap,
        background=colors.background,
        marker_style=theme.small(),
        page_setup=page_setup,
    )

    # -- header band (first page) -------------------------------------------
    header_width = width * 0.6
    place_stack(
        composer,
        [
            title_block(
                content,
                theme,
                x=x,
                width=header_width,
                style=theme.heading(color=on_band),
            ),
            meta_block(
                content,
                theme,
                x=x,
                width=header_width,
                style=theme.small(color=on_band),
            ),
        ],
        top=MARGIN - 8,
        gap=4.0,
    )
    logo = logo_block(content, theme, x=x + header_width, width=width - header_width)
    if logo is not None:
        composer.place(logo.moved(dy=MARGIN - 8))

    # -- offset cards -------------------------------------------------------
    card_width = (width - theme.gap * 2) / 2
    card = Box(
        fill=tint(colors.primary, 0.93),
        radius=theme.radius,
        padding=12,
    )
    company = company_block(content, theme, x=x, width=card_width, box=card)
    client = client_block(
        content,
        theme,
        x=x + card_width + theme.gap * 2,
        width=card_width,
        box=Box(fill=tint(colors.accent, 0.9), radius=theme.radius, padding=12),
    )
    cards: List[Block] = [b for b in (company, client) if b is not None]
    if len(cards) == 2:
        cards[1] = cards[1].moved(dy=CARD_OFFSET)
        composer.flow_row(cards, gap=theme.gap * 2 + CARD_OFFSET)
    else:
        composer.flow_row(cards, gap=theme.gap * 2)

    # -- items & totals -------------------------------------------------------
    flow_items_table(
        composer,
        content,
        x=x,
        width=width,
        style=default_table_style(theme, stripe_fill=tint(colors.primary, 0.94)),
    )

    totals_width = width * 0.45
    composer.flow(
        totals_block(
            content,
            theme,
            x=x + width - totals_width,
            width=totals_width,
            grand_fill=colors.accent,
            box=Box(fill=tint(colors.accent, 0.92), radius=theme.radius, padding=6),
        ),
        gap=theme.gap * 2,
    )

    half = (width - theme.gap) / 2
    composer.flow_row(
        [
            payment_terms_block(
                content,
                theme,
                x=x,
                width=half,
                box=Box(fill=tint(colors.primary, 0.95), radius=theme.radius, padding=10),
            ),
            bank_block(
                content,
                theme,
                x=x + half + theme.gap,
                width=half,
                box=Box(fill=tint(colors.primary, 0.95), radius=theme.radius, padding=10),
            ),
        ],
        equal_height=True,
    )

    composer.flow(notes_block(content, theme, x=x, width=width))
    composer.flow(legal_block(content, theme, x=x, width=width))
    composer.flow(footer_block(content, theme, x=x, width=width))

    return composer.finish(
        architecture=ARCHITECTURE,
        kind=data.facts.kind,
        document_number=data.facts.document_number,
    )
