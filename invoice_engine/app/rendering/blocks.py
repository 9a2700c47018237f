"""
Block builders shared by the renderers.

Every builder returns a block positioned at ``y = 0`` (the composer
moves it into place), or ``None`` when the section is hidden or has no
data. Section blocks are tagged with their ``SectionKey``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from invoice_engine.app.rendering.content import CLIENT_LABEL, DocumentContent
from invoice_engine.app.rendering.layout import Paragraph, line_height, text_block
from invoice_engine.app.rendering.styles import Theme, contrast_color
from invoice_engine.app.schemas.rendered import (
    Block,
    BlockRole,
    Border,
    ImageRef,
    TableCell,
    TableRow,
    TextAlign,
    TextLine,
    TextStyle,
)
from invoice_engine.app.schemas.template_config import SectionKey


@dataclass(frozen=True)
class Box:
    """Panel decoration applied around a text block."""

    fill: Optional[str] = None
    border: Optional[Border] = None
    radius: float = 0.0
    padding: float = 0.0


PLAIN = Box()


def _panel(
    role: BlockRole,
    paragraphs: List[Paragraph],
    *,
    x: float,
    width: float,
    box: Box,
    section: Optional[SectionKey] = None,
) -> Block:
    return text_block(
        role,
        paragraphs,
        x=x,
        width=width,
        section=section,
        padding=box.padding,
        fill=box.fill,
        border=box.border,
        radius=box.radius,
    )


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------


def title_block(
    content: DocumentContent,
    theme: Theme,
    *,
    x: float,
    width: float,
    align: TextAlign = TextAlign.LEFT,
    style: Optional[TextStyle] = None,
) -> Block:
    style = style or theme.heading(align=align)
    return text_block(BlockRole.TITLE, [(content.title, style)], x=x, width=width)


def meta_block(
    content: DocumentContent,
    theme: Theme,
    *,
    x: float,
    width: float,
    align: TextAlign = TextAlign.LEFT,
    style: Optional[TextStyle] = None,
    box: Box = PLAIN,
) -> Block:
    style = style or theme.body(align=align)
    paragraphs = [(line, style) for line in content.meta_lines()]
    return _panel(BlockRole.DOCUMENT_META, paragraphs, x=x, width=width, box=box)


def logo_block(
    content: DocumentContent,
    theme: Theme,
    *,
    x: float,
    width: float,
    align: Optional[TextAlign] = None,
) -> Optional[Block]:
    if not content.visible(SectionKey.LOGO):
        return None

    height = theme.logo_height
    logo_width = min(width, height * 2)
    align = align or TextAlign(content.config.layout.logo_position.value)

    if align == TextAlign.CENTER:
        left = x + (width - logo_width) / 2
    elif align == TextAlign.RIGHT:
        left = x + width - logo_width
    else:
        left = x

    return Block(
        role=BlockRole.LOGO,
        section=SectionKey.LOGO,
        x=left,
        y=0.0,
        width=logo_width,
        height=height,
        image=ImageRef(
            source=content.logo_source,
            media_type=content.logo_media_type,
        ),
    )


# ---------------------------------------------------------------------------
# Parties
# ---------------------------------------------------------------------------


def company_block(
    content: DocumentContent,
    theme: Theme,
    *,
    x: float,
    width: float,
    align: TextAlign = TextAlign.LEFT,
    include_name: bool = True,
    name_style: Optional[TextStyle] = None,
    style: Optional[TextStyle] = None,
    box: Box = PLAIN,
) -> Optional[Block]:
    if not content.visible(SectionKey.COMPANY_DETAILS):
        return None

    style = style or theme.small(align=align)
    paragraphs: List[Paragraph] = []
    if include_name and content.company_name:
        paragraphs.append(
            (content.company_name, name_style or theme.strong(align=align))
        )
    paragraphs.extend((line, style) for line in content.company_lines())

    return _panel(
        BlockRole.COMPANY_DETAILS,
        paragraphs,
        x=x,
        width=width,
        box=box,
        section=SectionKey.COMPANY_DETAILS,
    )


def client_block(
    content: DocumentContent,
    theme: Theme,
    *,
    x: float,
    width: float,
    align: TextAlign = TextAlign.LEFT,
    label: Optional[str] = CLIENT_LABEL,
    label_style: Optional[TextStyle] = None,
    style: Optional[TextStyle] = None,
    box: Box = PLAIN,
) -> Optional[Block]:
    if not content.visible(SectionKey.CLIENT_DETAILS):
        return None

    style = style or theme.body(align=align)
    lines = content.client_lines()
    paragraphs: List[Paragraph] = []
    if label:
        paragraphs.append((label, label_style or theme.label(align=align)))
    if content.client_name:
        paragraphs.append((lines[0], theme.strong(align=align, color=style.color)))
        lines = lines[1:]
    paragraphs.extend((line, style) for line in lines)

    return _panel(
        BlockRole.CLIENT_DETAILS,
        paragraphs,
        x=x,
        width=width,
        box=box,
        section=SectionKey.CLIENT_DETAILS,
    )


# ---------------------------------------------------------------------------
# Payment
# ---------------------------------------------------------------------------


def bank_block(
    content: DocumentContent,
    theme: Theme,
    *,
    x: float,
    width: float,
    align: TextAlign = TextAlign.LEFT,
    label_style: Optional[TextStyle] = None,
    style: Optional[TextStyle] = None,
    box: Box = PLAIN,
) -> Optional[Block]:
    if not content.visible(SectionKey.BANK_DETAILS):
        return None

    style = style or theme.small(align=align, color=theme.colors.text)
    paragraphs: List[Paragraph] = [
        (content.bank_label, label_style or theme.label(align=align))
    ]
    paragraphs.extend((line, style) for line in content.bank_lines())

    return _panel(
        BlockRole.BANK_DETAILS,
        paragraphs,
        x=x,
        width=width,
        box=box,
        section=SectionKey.BANK_DETAILS,
    )


def payment_terms_block(
    content: DocumentContent,
    theme: Theme,
    *,
    x: float,
    width: float,
    align: TextAlign = TextAlign.LEFT,
    label_style: Optional[TextStyle] = None,
    style: Optional[TextStyle] = None,
    box: Box = PLAIN,
) -> Optional[Block]:
    if not content.visible(SectionKey.PAYMENT_TERMS):
        return None

    style = style or theme.small(align=align, color=theme.colors.text)
    paragraphs: List[Paragraph] = [
        (content.payment_terms_label, label_style or theme.label(align=align))
    ]
    paragraphs.extend((line, style) for line in content.payment_terms_lines())

    return _panel(
        BlockRole.PAYMENT_TERMS,
        paragraphs,
        x=x,
        width=width,
        box=box,
        section=SectionKey.PAYMENT_TERMS,
    )


def totals_block(
    content: DocumentContent,
    theme: Theme,
    *,
    x: float,
    width: float,
    padding: float = 4.0,
    grand_fill: Optional[str] = None,
    style: Optional[TextStyle] = None,
    box: Box = PLAIN,
) -> Block:
    """
    Subtotal, one VAT line per taxed rate, grand total and payments.

    Rendered as a two-column table so that values align on the right.
    """
    style = style or theme.body()
    label_width = width * 0.55
    value_width = width - label_width

    rows = []
    for total in content.total_lines():
        fill = grand_fill if total.grand else None
        color = contrast_color(fill) if fill else style.color
        row_style = style.model_copy(update={"bold": total.grand, "color": color})
        height = line_height(row_style) + 2 * padding
        rows.append(
            TableRow(
                cells=[
                    TableCell(
                        lines=[TextLine(text=total.label, style=row_style)],
                        width=label_width,
                        align=TextAlign.LEFT,
                    ),
                    TableCell(
                        lines=[
                            TextLine(
                                text=total.value,
                                style=row_style.model_copy(
                                    update={"align": TextAlign.RIGHT}
                                ),
                            )
                        ],
                        width=value_width,
                        align=TextAlign.RIGHT,
                    ),
                ],
                height=height,
                fill=fill,
            )
        )

    return Block(
        role=BlockRole.TOTALS,
        x=x,
        y=0.0,
        width=width,
        height=sum(row.height for row in rows) + 2 * box.padding,
        rows=rows,
        fill=box.fill,
        border=box.border,
        radius=box.radius,
        padding=box.padding,
    )


# ---------------------------------------------------------------------------
# Free text
# ---------------------------------------------------------------------------


def legal_block(
    content: DocumentContent,
    theme: Theme,
    *,
    x: float,
    width: float,
    align: TextAlign = TextAlign.LEFT,
    style: Optional[TextStyle] = None,
    box: Box = PLAIN,
) -> Optional[Block]:
    if not content.visible(SectionKey.LEGAL_MENTIONS):
        return None

    style = style or theme.small(align=align)
    return _panel(
        BlockRole.LEGAL_MENTIONS,
        [(content.legal_text, style)],
        x=x,
        width=width,
        box=box,
        section=SectionKey.LEGAL_MENTIONS,
    )


def notes_block(
    content: DocumentContent,
    theme: Theme,
    *,
    x: float,
    width: float,
    align: TextAlign = TextAlign.LEFT,
    box: Box = PLAIN,
) -> Optional[Block]:
    if content.notes is None:
        return None

    return _panel(
        BlockRole.NOTES,
        [
            ("Notes", theme.label(align=align)),
            (content.notes, theme.body(align=align, italic=True)),
        ],
        x=x,
        width=width,
        box=box,
    )


def footer_block(
    content: DocumentContent,
    theme: Theme,
    *,
    x: float,
    width: float,
    align: TextAlign = TextAlign.CENTER,
) -> Optional[Block]:
    if content.footer is None:
        return None

    return text_block(
        BlockRole.FOOTER,
        [(content.footer, theme.small(align=align))],
        x=x,
        width=width,
    )
