"""
Compact architecture.

Dense layout meant to keep an ordinary invoice on a single A4 page:
reduced type scale, tight margins and spacing, three-column header and
footer rows. Long documents still paginate normally.
"""

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
from invoice_engine.app.rendering.layout import PageComposer
from invoice_engine.app.rendering.styles import Theme, tint
from invoice_engine.app.rendering.tables import default_table_style, flow_items_table
from invoice_engine.app.schemas.rendered import (
    A4_HEIGHT,
    A4_WIDTH,
    Border,
    RenderedDocument,
    TextAlign,
)
from invoice_engine.app.schemas.template_config import TemplateConfiguration

ARCHITECTURE = "compact"

TYPE_SCALE = 0.85
COMPACT_MARGIN = 28.0
COMPACT_GAP = 5.0


def render_compact(
    data: RenderInput,
    config: TemplateConfiguration,
) -> RenderedDocument:
    content = DocumentContent(data, config)
    theme = Theme(config, scale=TYPE_SCALE)
    colors = config.colors

    x = COMPACT_MARGIN
    width = A4_WIDTH - 2 * COMPACT_MARGIN
    gap = min(theme.gap, COMPACT_GAP)

    composer = PageComposer(
        x=x,
        width=width,
        top=COMPACT_MARGIN,
        bottom=A4_HEIGHT - COMPACT_MARGIN,
        gap=gap,
        background=colors.background,
        marker_style=theme.small(),
    )

    half = (width - gap) / 2
    third = (width - 2 * gap) / 3

    composer.flow_row(
        [
            logo_block(content, theme, x=x, width=half, align=TextAlign.LEFT),
            title_block(
                content,
                theme,
                x=x + half + gap,
                width=half,
                align=TextAlign.RIGHT,
            ),
        ],
        gap=gap,
    )

    composer.flow_row(
        [
            company_block(content, theme, x=x, width=third),
            client_block(
                content,
                theme,
                x=x + third + gap,
                width=third,
                style=theme.small(color=colors.text),
            ),
            meta_block(
                content,
                theme,
                x=x + 2 * (third + gap),
                width=third,
                align=TextAlign.RIGHT,
                style=theme.small(align=TextAlign.RIGHT, color=colors.text),
            ),
        ],
        gap=gap * 2,
    )

    flow_items_table(
        composer,
        content,
        x=x,
        width=width,
        style=default_table_style(
            theme,
            stripe_fill=tint(colors.primary, 0.95),
            cell_padding=2.5,
        ),
    )

    composer.flow_row(
        [
            payment_terms_block(content, theme, x=x, width=third),
            bank_block(content, theme, x=x + third + gap, width=third),
            totals_block(
                content,
                theme,
                x=x + 2 * (third + gap),
                width=third,
                padding=2.5,
                grand_fill=colors.primary,
                box=Box(border=Border(color=colors.primary, width=0.5)),
            ),
        ],
        gap=gap * 2,
    )

    composer.flow(notes_block(content, theme, x=x, width=width), gap=gap)
    composer.flow(legal_block(content, theme, x=x, width=width), gap=gap)
    composer.flow(footer_block(content, theme, x=x, width=width), gap=gap)

    return composer.finish(
        architecture=ARCHITECTURE,
        kind=data.facts.kind,
        document_number=data.facts.document_number,
    )
