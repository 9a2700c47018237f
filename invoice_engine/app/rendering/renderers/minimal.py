"""
Minimal architecture.

A single centered column with generous side margins. Items are listed
(description, then quantity, price and total) instead of tabulated.
No fills, no frames: hierarchy comes from type weight and spacing only.
"""

from invoice_engine.app.rendering.base import RenderInput
from invoice_engine.app.rendering.blocks import (
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
from invoice_engine.app.rendering.layout import PageComposer, decoration
from invoice_engine.app.rendering.styles import Theme
from invoice_engine.app.rendering.tables import flow_item_list
from invoice_engine.app.schemas.rendered import (
    A4_WIDTH,
    RenderedDocument,
    Shape,
    ShapeKind,
    TextAlign,
)
from invoice_engine.app.schemas.template_config import TemplateConfiguration

ARCHITECTURE = "minimal"

SIDE_MARGIN = 90.0

CENTER = TextAlign.CENTER


def _rule(x: float, width: float, color: str):
    return decoration(
        x=x,
        y=0.0,
        width=width,
        height=0.5,
        shape=Shape(
            kind=ShapeKind.LINE,
            points=[[x, 0.0], [x + width, 0.0]],
            stroke=color,
            stroke_width=0.5,
        ),
    )


def render_minimal(
    data: RenderInput,
    config: TemplateConfiguration,
) -> RenderedDocument:
    content = DocumentContent(data, config)
    theme = Theme(config)
    colors = config.colors

    x = SIDE_MARGIN
    width = A4_WIDTH - 2 * SIDE_MARGIN

    composer = PageComposer(
        x=x,
        width=width,
        gap=theme.gap,
        background=colors.background,
        marker_style=theme.small(),
    )

    composer.flow(logo_block(content, theme, x=x, width=width, align=CENTER))
    composer.flow(
        title_block(
            content,
            theme,
            x=x,
            width=width,
            align=CENTER,
            style=theme.heading(align=CENTER, color=colors.text),
        ),
        gap=theme.gap / 2,
    )
    composer.flow(
        meta_block(
            content,
            theme,
            x=x,
            width=width,
            align=CENTER,
            style=theme.small(align=CENTER),
        ),
        gap=theme.gap * 2,
    )

    composer.flow(company_block(content, theme, x=x, width=width, align=CENTER))
    composer.flow(
        client_block(
            content,
            theme,
            x=x,
            width=width,
            align=CENTER,
            label_style=theme.small(align=CENTER, bold=True),
        ),
        gap=theme.gap * 2,
    )

    composer.flow(_rule(x, width, colors.secondary), gap=theme.gap)
    flow_item_list(composer, content, theme, x=x, width=width, align=CENTER)
    composer.flow(_rule(x, width, colors.secondary), gap=theme.gap)

    totals_width = width * 0.6
    composer.flow(
        totals_block(
            content,
            theme,
            x=x + (width - totals_width) / 2,
            width=totals_width,
            padding=2.0,
        ),
        gap=theme.gap * 2,
    )

    composer.flow(
        payment_terms_block(
            content,
            theme,
            x=x,
            width=width,
            align=CENTER,
            label_style=theme.small(align=CENTER, bold=True),
        )
    )
    composer.flow(
        bank_block(
            content,
            theme,
            x=x,
            width=width,
            align=CENTER,
            label_style=theme.small(align=CENTER, bold=True),
        )
    )
    composer.flow(notes_block(content, theme, x=x, width=width, align=CENTER))
    composer.flow(legal_block(content, theme, x=x, width=width, align=CENTER))
    composer.flow(footer_block(content, theme, x=x, width=width))

    return composer.finish(
        architecture=ARCHITECTURE,
        kind=data.facts.kind,
        document_number=data.facts.document_number,
    )
