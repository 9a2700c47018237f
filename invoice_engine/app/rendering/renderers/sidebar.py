"""
Sidebar architecture.

A colored column on the left (30 % of the page width) holds the logo,
the issuer identity and the bank details. The remaining 70 % carries the
title, client, items, totals, payment terms and legal mentions.

The column background is repeated on continuation pages; its content
is printed on the first page only.
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
from invoice_engine.app.rendering.layout import (
    MARGIN,
    PageComposer,
    decoration,
    place_stack,
)
from invoice_engine.app.rendering.styles import Theme, contrast_color, tint
from invoice_engine.app.rendering.tables import default_table_style, flow_items_table
from invoice_engine.app.schemas.rendered import (
    A4_HEIGHT,
    A4_WIDTH,
    RenderedDocument,
    Shape,
    TextAlign,
)
from invoice_engine.app.schemas.template_config import TemplateConfiguration

ARCHITECTURE = "sidebar"

SIDEBAR_RATIO = 0.30
SIDEBAR_PADDING = 20.0
COLUMN_GAP = 28.0


def render_sidebar(
    data: RenderInput,
    config: TemplateConfiguration,
) -> RenderedDocument:
    content = DocumentContent(data, config)
    theme = Theme(config)
    colors = config.colors

    sidebar_width = A4_WIDTH * SIDEBAR_RATIO
    main_x = sidebar_width + COLUMN_GAP
    main_width = A4_WIDTH - main_x - MARGIN
    on_sidebar = contrast_color(colors.primary)

    def page_setup(composer: PageComposer, number: int) -> None:
        composer.place(
            decoration(
                x=0.0,
                y=0.0,
                width=sidebar_width,
                height=A4_HEIGHT,
                shape=Shape(fill=colors.primary),
            )
        )

    composer = PageComposer(
        x=main_x,
        width=main_width,
        gap=theme.gap,
        background=colors.background,
        marker_style=theme.small(),
        page_setup=page_setup,
    )

    # -- sidebar column (first page) ---------------------------------------
    inner_x = SIDEBAR_PADDING
    inner_width = sidebar_width - 2 * SIDEBAR_PADDING

    place_stack(
        composer,
        [
            logo_block(
                content, theme, x=inner_x, width=inner_width, align=TextAlign.LEFT
            ),
            company_block(
                content,
                theme,
                x=inner_x,
                width=inner_width,
                name_style=theme.label(color=on_sidebar),
                style=theme.small(color=on_sidebar),
            ),
            bank_block(
                content,
                theme,
                x=inner_x,
                width=inner_width,
                label_style=theme.label(color=on_sidebar),
                style=theme.small(color=on_sidebar),
            ),
        ],
        top=MARGIN,
        gap=theme.gap * 2,
    )

    # -- main column ------------------------------------------------------
    composer.flow(
        title_block(content, theme, x=main_x, width=main_width),
        gap=theme.gap / 2,
    )
    composer.flow(
        meta_block(
            content,
            theme,
            x=main_x,
            width=main_width,
            style=theme.body(color=colors.secondary),
        ),
        gap=theme.gap * 2,
    )
    composer.flow(
        client_block(
            content,
            theme,
            x=main_x,
            width=main_width,
            box=Box(fill=tint(colors.primary, 0.92), padding=10, radius=theme.radius),
        ),
        gap=theme.gap * 2,
    )

    flow_items_table(
        composer,
        content,
        x=main_x,
        width=main_width,
        style=default_table_style(theme, stripe_fill=tint(colors.primary, 0.95)),
    )

    totals_width = main_width * 0.55
    composer.flow(
        totals_block(
            content,
            theme,
            x=main_x + main_width - totals_width,
            width=totals_width,
            grand_fill=colors.primary,
        ),
        gap=theme.gap * 2,
    )

    composer.flow(payment_terms_block(content, theme, x=main_x, width=main_width))
    composer.flow(notes_block(content, theme, x=main_x, width=main_width))
    composer.flow(legal_block(content, theme, x=main_x, width=main_width))
    composer.flow(footer_block(content, theme, x=main_x, width=main_width))

    return composer.finish(
        architecture=ARCHITECTURE,
        kind=data.facts.kind,
        document_number=data.facts.document_number,
    )
