"""
Line item rendering.

Two presentations are available:

- ``flow_items_table``: a columnar table (Qté, Description, P.U. HT,
  TVA, Total HT). Every row is its own block so that pages can break
  between any two rows; the header row is repeated at the top of every
  continuation page.
- ``flow_item_list``: a list presentation without columns, used by the
  minimal architecture.

When the item details section is visible, an item's details are placed
in a separate block tagged ``item_details`` directly under its row, and
the two are never separated by a page break.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from invoice_engine.app.rendering.content import (
    ITEM_COLUMN_HEADERS,
    DocumentContent,
    ItemContent,
)
from invoice_engine.app.rendering.layout import (
    PageComposer,
    line_height,
    make_lines,
    text_block,
)
from invoice_engine.app.rendering.styles import Theme, contrast_color
from invoice_engine.app.schemas.rendered import (
    Block,
    BlockRole,
    TableCell,
    TableRow,
    TextAlign,
    TextStyle,
)
from invoice_engine.app.schemas.template_config import SectionKey

# Relative widths of Qté, Description, P.U. HT, TVA, Total HT.
DEFAULT_COLUMN_WEIGHTS: Tuple[float, ...] = (0.10, 0.42, 0.17, 0.11, 0.20)
_ALIGNMENTS = (
    TextAlign.RIGHT,
    TextAlign.LEFT,
    TextAlign.RIGHT,
    TextAlign.RIGHT,
    TextAlign.RIGHT,
)


@dataclass(frozen=True)
class TableStyle:
    header_fill: Optional[str]
    header_text: TextStyle
    body_text: TextStyle
    detail_text: TextStyle
    cell_padding: float = 4.0
    stripe_fill: Optional[str] = None
    weights: Tuple[float, ...] = field(default=DEFAULT_COLUMN_WEIGHTS)


def default_table_style(
    theme: Theme,
    *,
    header_fill: Optional[str] = None,
    stripe_fill: Optional[str] = None,
    cell_padding: float = 4.0,
) -> TableStyle:
    header_fill = header_fill if header_fill is not None else theme.colors.primary
    return TableStyle(
        header_fill=header_fill,
        header_text=theme.strong(
            color=contrast_color(header_fill) if header_fill else theme.colors.primary
        ),
        body_text=theme.body(),
        detail_text=theme.small(italic=True),
        cell_padding=cell_padding,
        stripe_fill=stripe_fill,
    )


def _row_block(
    role: BlockRole,
    texts: Sequence[str],
    *,
    x: float,
    width: float,
    text_style: TextStyle,
    padding: float,
    weights: Sequence[float],
    fill: Optional[str],
    header: bool,
) -> Block:
    cells: List[TableCell] = []
    tallest = 0.0

    for text, weight, align in zip(texts, weights, _ALIGNMENTS):
        cell_width = width * weight
        style = text_style.model_copy(update={"align": align})
        lines = make_lines([(text, style)], max(cell_width - 2 * padding, 1.0))
        tallest = max(tallest, len(lines) * line_height(style))
        cells.append(TableCell(lines=lines, width=cell_width, align=align))

    height = tallest + 2 * padding
    return Block(
        role=role,
        x=x,
        y=0.0,
        width=width,
        height=height,
        rows=[TableRow(cells=cells, height=height, fill=fill, header=header)],
        padding=padding,
    )


def header_row(
    *,
    x: float,
    width: float,
    style: TableStyle,
) -> Block:
    return _row_block(
        BlockRole.ITEMS_HEADER,
        ITEM_COLUMN_HEADERS,
        x=x,
        width=width,
        text_style=style.header_text,
        padding=style.cell_padding,
        weights=style.weights,
        fill=style.header_fill,
        header=True,
    )


def item_row(
    item: ItemContent,
    *,
    x: float,
    width: float,
    style: TableStyle,
    fill: Optional[str] = None,
) -> Block:
    return _row_block(
        BlockRole.ITEM_ROW,
        item.cells,
        x=x,
        width=width,
        text_style=style.body_text,
        padding=style.cell_padding,
        weights=style.weights,
        fill=fill,
        header=False,
    )


def detail_block(
    item: ItemContent,
    *,
    x: float,
    width: float,
    style: TextStyle,
    padding: float,
) -> Optional[Block]:
    if not item.details:
        return None
    return text_block(
        BlockRole.ITEM_DETAIL,
        [(item.details, style)],
        x=x,
        width=width,
        section=SectionKey.ITEM_DETAILS,
        padding=padding,
    )


def flow_items_table(
    composer: PageComposer,
    content: DocumentContent,
    *,
    x: float,
    width: float,
    style: TableStyle,
) -> None:
    header = header_row(x=x, width=width, style=style)

    # Details sit under the description column.
    detail_x = x + width * style.weights[0]
    detail_width = width * style.weights[1]

    groups = []
    for index, item in enumerate(content.item_contents()):
        fill = style.stripe_fill if index % 2 == 1 else None
        row = item_row(item, x=x, width=width, style=style, fill=fill)
        detail = detail_block(
            item,
            x=detail_x,
            width=detail_width,
            style=style.detail_text,
            padding=style.cell_padding,
        )
        groups.append([b for b in (row, detail) if b is not None])

    # Never leave the header alone at the bottom of a page.
    first_height = sum(b.height for b in groups[0]) if groups else 0.0
    if not composer.fits(header.height + first_height) and not composer.at_top:
        composer.new_page()
    composer.flow(header, gap=0)
    header_page = composer.page_number

    for group in groups:
        group_height = sum(b.height for b in group)

        if not composer.fits(group_height) and not composer.at_top:
            composer.new_page()
        if composer.page_number != header_page:
            composer.flow(header, gap=0)
            header_page = composer.page_number

        composer.flow_group(group, gap=0)

    composer.skip(composer.gap)


def flow_item_list(
    composer: PageComposer,
    content: DocumentContent,
    theme: Theme,
    *,
    x: float,
    width: float,
    align: TextAlign = TextAlign.LEFT,
) -> None:
    """
    One entry per item: description, then quantity x price and total.
    """
    for item in content.item_contents():
        summary = (
            f"{item.quantity} × {item.unit_price} HT · TVA {item.tax_rate}"
            f" · {item.total}"
        )
        row = text_block(
            BlockRole.ITEM_ROW,
            [
                (item.description, theme.strong(align=align)),
                (summary, theme.small(align=align)),
            ],
            x=x,
            width=width,
            padding=2.0,
        )
        detail = None
        if item.details:
            detail = text_block(
                BlockRole.ITEM_DETAIL,
                [(item.details, theme.small(align=align, italic=True))],
                x=x,
                width=width,
                section=SectionKey.ITEM_DETAILS,
                padding=2.0,
            )
        composer.flow_group([row, detail], gap=theme.gap / 2)
