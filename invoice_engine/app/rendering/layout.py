"""
Text measurement and page composition.

Renderers build blocks at ``y = 0`` and hand them to a ``PageComposer``,
which stacks them down the current column and opens new A4 pages when
the column is full.

Measurement is approximate: each standard PDF font family is given an
average glyph width as a fraction of the font size. This is enough to
wrap text conservatively; serializers with real font metrics only ever
find lines shorter than the frame.

Design guarantees:
- composition never raises; a block taller than a whole page is placed
  at the top of a fresh page and allowed to overflow
- text-only blocks are split line by line across pages
- ``Page n / N`` markers are added only to multi-page documents
"""

from __future__ import annotations

import textwrap
from typing import Callable, List, Optional, Sequence, Tuple

from invoice_engine.app.schemas.documents import DocumentKind
from invoice_engine.app.schemas.rendered import (
    A4_HEIGHT,
    A4_WIDTH,
    Block,
    BlockRole,
    Border,
    Page,
    RenderedDocument,
    Shape,
    TextAlign,
    TextLine,
    TextStyle,
)
from invoice_engine.app.schemas.template_config import SectionKey

MARGIN = 40.0
LINE_SPACING = 1.35

# Average glyph width / font size.
_GLYPH_WIDTH = {
    "sans": 0.52,
    "serif": 0.48,
    "mono": 0.60,
}
_BOLD_FACTOR = 1.06

Paragraph = Tuple[str, TextStyle]


# ---------------------------------------------------------------------------
# Measurement
# ---------------------------------------------------------------------------


def font_family(font: str) -> str:
    name = font.lower()
    if "courier" in name or "mono" in name:
        return "mono"
    if "times" in name or "serif" in name.replace("sans-serif", "") or "georgia" in name:
        return "serif"
    return "sans"


def glyph_width(style: TextStyle) -> float:
    width = style.size * _GLYPH_WIDTH[font_family(style.font)]
    if style.bold:
        width *= _BOLD_FACTOR
    return width


def line_height(style: TextStyle) -> float:
    return style.size * LINE_SPACING


def text_width(text: str, style: TextStyle) -> float:
    return len(text) * glyph_width(style)


def wrap_text(text: str, style: TextStyle, width: float) -> List[str]:
    """
    Wrap ``text`` to ``width`` points.

    Explicit newlines are kept; blank lines survive as empty lines.
    """
    chars = max(1, int(width // glyph_width(style)))
    wrapped: List[str] = []
    for paragraph in text.split("\n"):
        if not paragraph.strip():
            wrapped.append("")
            continue
        wrapped.extend(
            textwrap.wrap(
                paragraph,
                width=chars,
                break_long_words=True,
                break_on_hyphens=True,
            )
        )
    return wrapped


def make_lines(
    paragraphs: Sequence[Paragraph],
    width: float,
) -> List[TextLine]:
    lines: List[TextLine] = []
    for text, style in paragraphs:
        for chunk in wrap_text(text, style, width):
            lines.append(TextLine(text=chunk, style=style))
    return lines


def lines_height(lines: Sequence[TextLine]) -> float:
    return sum(line_height(line.style) for line in lines)


def text_block(
    role: BlockRole,
    paragraphs: Sequence[Paragraph],
    *,
    x: float,
    width: float,
    section: Optional[SectionKey] = None,
    padding: float = 0.0,
    fill: Optional[str] = None,
    border: Optional[Border] = None,
    radius: float = 0.0,
    min_height: float = 0.0,
) -> Block:
    lines = make_lines(paragraphs, max(width - 2 * padding, 1.0))
    height = max(lines_height(lines) + 2 * padding, min_height)
    return Block(
        role=role,
        section=section,
        x=x,
        y=0.0,
        width=width,
        height=height,
        lines=lines,
        fill=fill,
        border=border,
        radius=radius,
        padding=padding,
    )


def _split_lines(block: Block, available: float) -> Tuple[Block, Block]:
    """Cut a text block so that its head fits in ``available`` points."""
    used = block.padding * 2
    count = 0
    for line in block.lines:
        step = line_height(line.style)
        if used + step > available:
            break
        used += step
        count += 1

    head_lines = block.lines[:count]
    tail_lines = block.lines[count:]
    head = block.model_copy(
        update={
            "lines": head_lines,
            "height": lines_height(head_lines) + 2 * block.padding,
        }
    )
    tail = block.model_copy(
        update={
            "lines": tail_lines,
            "height": lines_height(tail_lines) + 2 * block.padding,
        }
    )
    return head, tail


# ---------------------------------------------------------------------------
# Composer
# ---------------------------------------------------------------------------


PageSetup = Callable[["PageComposer", int], None]


class PageComposer:
    """
    Stacks blocks down a column over as many pages as needed.

    ``page_setup`` is called on every new page (including the first) to
    paint page chrome; it may move ``cursor`` to reserve space.
    """

    def __init__(
        self,
        *,
        x: float = MARGIN,
        width: float = A4_WIDTH - 2 * MARGIN,
        top: float = MARGIN,
        bottom: float = A4_HEIGHT - MARGIN,
        gap: float = 10.0,
        background: Optional[str] = None,
        marker_style: Optional[TextStyle] = None,
        page_setup: Optional[PageSetup] = None,
    ) -> None:
        self.x = x
        self.width = width
        self.top = top
        self.bottom = bottom
        self.gap = gap
        self.background = background
        self.marker_style = marker_style or TextStyle(size=8, color="#666666")
        self.page_setup = page_setup

        self._pages: List[List[Block]] = []
        self.cursor = top
        self._page_top = top
        self.new_page()

    # -- page state -------------------------------------------------------

    @property
    def page_number(self) -> int:
        return len(self._pages)

    @property
    def remaining(self) -> float:
        return self.bottom - self.cursor

    @property
    def at_top(self) -> bool:
        return self.cursor <= self._page_top + 0.01

    def fits(self, height: float) -> bool:
        return self.cursor + height <= self.bottom + 0.01

    def new_page(self) -> None:
        self._pages.append([])
        self.cursor = self.top
        if self.page_setup is not None:
            self.page_setup(self, self.page_number)
        self._page_top = self.cursor

    def skip(self, dy: float) -> None:
        self.cursor += dy

    def advance_to(self, y: float) -> None:
        self.cursor = max(self.cursor, y)

    # -- placement --------------------------------------------------------

    def place(self, block: Block, page_number: Optional[int] = None) -> Block:
        """Add a block at its own absolute position."""
        index = (page_number or self.page_number) - 1
        self._pages[index].append(block)
        return block

    def flow(
        self,
        block: Optional[Block],
        *,
        gap: Optional[float] = None,
        splittable: Optional[bool] = None,
    ) -> List[Block]:
        """
        Place ``block`` at the cursor, breaking pages as needed.

        Text-only blocks are split across pages unless ``splittable`` is
        False. Returns the placed block(s).
        """
        if block is None:
            return []

        gap = self.gap if gap is None else gap
        if splittable is None:
            splittable = bool(block.lines) and not (
                block.rows or block.image or block.shape
            )

        placed: List[Block] = []
        pending = block

        while True:
            if self.fits(pending.height):
                placed.append(self.place(pending.moved(dy=self.cursor)))
                self.cursor += pending.height + gap
                return placed

            if splittable and len(pending.lines) > 1:
                head, tail = _split_lines(pending, self.remaining)
                if head.lines and (len(head.lines) >= 2 or self.at_top):
                    placed.append(self.place(head.moved(dy=self.cursor)))
                    self.new_page()
                    pending = tail
                    continue

            if self.at_top:
                # Taller than a page and not splittable: overflow.
                placed.append(self.place(pending.moved(dy=self.cursor)))
                self.cursor += pending.height + gap
                return placed

            self.new_page()

    def flow_group(
        self,
        blocks: Sequence[Block],
        *,
        gap: Optional[float] = None,
        inner_gap: float = 0.0,
    ) -> List[Block]:
        """Place blocks one under the other, never separated by a page break."""
        blocks = [b for b in blocks if b is not None]
        if not blocks:
            return []

        gap = self.gap if gap is None else gap
        total = sum(b.height for b in blocks) + inner_gap * (len(blocks) - 1)
        if not self.fits(total) and not self.at_top:
            self.new_page()

        placed = []
        for index, block in enumerate(blocks):
            placed.append(self.place(block.moved(dy=self.cursor)))
            last = index == len(blocks) - 1
            self.cursor += block.height + (gap if last else inner_gap)
        return placed

    def flow_row(
        self,
        blocks: Sequence[Optional[Block]],
        *,
        gap: Optional[float] = None,
        equal_height: bool = False,
    ) -> List[Block]:
        """Place blocks side by side (each keeps its own ``x``)."""
        blocks = [b for b in blocks if b is not None]
        if not blocks:
            return []

        gap = self.gap if gap is None else gap
        height = max(b.height for b in blocks)
        if not self.fits(height) and not self.at_top:
            self.new_page()

        placed = []
        for block in blocks:
            if equal_height:
                block = block.model_copy(update={"height": height})
            placed.append(self.place(block.moved(dy=self.cursor)))
        self.cursor += height + gap
        return placed

    # -- output -----------------------------------------------------------

    def finish(
        self,
        *,
        architecture: str,
        kind: DocumentKind,
        document_number: str,
    ) -> RenderedDocument:
        total = self.page_number
        pages = []
        for index, blocks in enumerate(self._pages, start=1):
            blocks = list(blocks)
            if total > 1:
                blocks.append(self._page_marker(index, total))
            pages.append(
                Page(
                    number=index,
                    width=A4_WIDTH,
                    height=A4_HEIGHT,
                    background=self.background,
                    blocks=blocks,
                )
            )
        return RenderedDocument(
            architecture=architecture,
            kind=kind,
            document_number=document_number,
            pages=pages,
        )

    def _page_marker(self, number: int, total: int) -> Block:
        style = self.marker_style.model_copy(update={"align": TextAlign.RIGHT})
        width = 120.0
        height = line_height(style)
        return Block(
            role=BlockRole.PAGE_NUMBER,
            x=A4_WIDTH - MARGIN - width,
            y=A4_HEIGHT - MARGIN / 2 - height,
            width=width,
            height=height,
            lines=[TextLine(text=f"Page {number} / {total}", style=style)],
        )


def place_stack(
    composer: PageComposer,
    blocks: Sequence[Optional[Block]],
    *,
    top: float,
    gap: float,
) -> float:
    """
    Place blocks one under the other at fixed positions on the current
    page, outside the flow. Returns the bottom of the stack.
    """
    y = top
    for block in blocks:
        if block is None:
            continue
        composer.place(block.moved(dy=y))
        y += block.height + gap
    return y - gap if y > top else top


def decoration(
    *,
    x: float,
    y: float,
    width: float,
    height: float,
    shape: Shape,
    border: Optional[Border] = None,
    radius: float = 0.0,
) -> Block:
    return Block(
        role=BlockRole.DECORATION,
        x=x,
        y=y,
        width=width,
        height=height,
        shape=shape,
        fill=shape.fill,
        border=border,
        radius=radius,
    )
