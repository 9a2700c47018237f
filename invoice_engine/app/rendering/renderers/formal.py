"""
Formal architecture.

Centered letterhead (logo, issuer name and details) set inside a
decorative double border that frames every page. Body text is expected
to use a serif font; the architecture itself only enforces the centered
composition and the frame.
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
from invoice_engine.app.rendering.layout import PageComposer, decoration
from invoice_engine.app.rendering.styles import Theme
from invoice_engine.app.rendering.tables import default_table_style, flow_items_table
from invoice_engine.app.schemas.rendered import (
    A4_HEIGHT,
    A4_WIDTH,
    Border,
    RenderedDocument,
    Shape,
    ShapeKind,
    TextAlign,
)
from invoice_engine.app.schemas.template_config import TemplateConfiguration

ARCHITECTURE = "formal"

FRAME_INSET = 22.0
CONTENT_MARGIN = 58.0


def render_formal(
    data: RenderInput,
    config: TemplateConfiguration,
) -> RenderedDocument:
    content = DocumentContent(data, config)
    theme = Theme(config)
    colors = config.colors

    x = CONTENT_MARGIN
    width = A4_WIDTH - 2 * CONTENT_MARGIN

    def page_setup(composer: PageComposer, number: int) -> None:
        composer.place(
            decoration(
                x=FRAME_INSET,
                y=FRAME_INSET,
                width=A4_WIDTH - 2 * FRAME_INSET,
                height=A4_HEIGHT - 2 * FRAME_INSET,
                shape=Shape(stroke=colors.primary, stroke_width=1.5),
                border=Border(color=colors.primary, width=1.5, double=True),
            )
        )

    composer = PageComposer(
        x=x,
        width=width,
        top=CONTENT_MARGIN,
        bottom=A4_HEIGHT - CONTENT_MARGIN,
        gap=theme.gap,
        background=colors.background,
        marker_style=theme.small(),
        page_setup=page_setup,
    )

    # -- letterhead ---------------------------------------------------------
    composer.flow(
        logo_block(content, theme, x=x, width=width, align=TextAlign.CENTER)
    )
    composer.flow(
        company_block(
            content,
            theme,
            x=x,
            width=width,
            align=TextAlign.CENTER,
            name_style=theme.label(align=TextAlign.CENTER),
        )
    )

    rule_width = width * 0.4
    rule_x = x + (width - rule_width) / 2
    composer.flow(
        decoration(
            x=rule_x,
            y=0.0,
            width=rule_width,
            height=1.0,
            shape=Shape(
                kind=ShapeKind.LINE,
                points=[[rule_x, 0.0], [rule_x + rule_width, 0.0]],
                stroke=colors.accent,
                stroke_width=1.0,
            ),
        ),
        gap=theme.gap * 1.5,
    )

    composer.flow(
        title_block(content, theme, x=x, width=width, align=TextAlign.CENTER),
        gap=theme.gap / 2,
    )
    composer.flow(
        meta_block(content, theme, x=x, width=width, align=TextAlign.CENTER),
        gap=theme.gap * 2,
    )

    # -- body ---------------------------------------------------------------
    composer.flow(
        client_block(
            content,
            theme,
            x=x,
            width=width * 0.5,
            box=Box(
                border=Border(color=colors.secondary, width=0.75),
                padding=10,
            ),
        ),
        gap=theme.gap * 2,
    )

    flow_items_table(
        composer,
        content,
        x=x,
        width=width,
        style=default_table_style(theme),
    )

    totals_width = width * 0.45
    composer.flow(
        totals_block(
            content,
            theme,
            x=x + width - totals_width,
            width=totals_width,
            grand_fill=colors.primary,
            box=Box(border=Border(color=colors.primary, width=0.75)),
        ),
        gap=theme.gap * 2,
    )

    half = (width - theme.gap) / 2
    composer.flow_row(
        [
            payment_terms_block(content, theme, x=x, width=half),
            bank_block(content, theme, x=x + half + theme.gap, width=half),
        ]
    )

    composer.flow(notes_block(content, theme, x=x, width=width))
    composer.flow(
        legal_block(
            content,
            theme,
            x=x,
            width=width,
            box=Box(border=Border(color=colors.secondary, width=0.5), padding=8),
        )
    )
    composer.flow(footer_block(content, theme, x=x, width=width))

    return composer.finish(
        architecture=ARCHITECTURE,
        kind=data.facts.kind,
        document_number=data.facts.document_number,
    )
