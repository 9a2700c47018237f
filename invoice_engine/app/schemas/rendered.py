"""
Rendered document tree.

The output of every renderer: an ordered list of A4 pages, each holding
absolutely positioned blocks. Coordinates are PDF points with the origin
at the top-left corner of the page.

The tree is a pure value. It carries everything a serializer (PDF writer,
HTML preview) needs and nothing it must compute: text is already
formatted, wrapped into lines and styled.

IMPORTANT:
- Block order within a page is paint order.
- ``Block.section`` is set only on blocks belonging to one of the seven
  user-toggleable sections; structural blocks leave it empty.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from invoice_engine.app.schemas.documents import DocumentKind
from invoice_engine.app.schemas.template_config import SectionKey

A4_WIDTH = 595.28
A4_HEIGHT = 841.89

_TREE_MODEL_CONFIG = ConfigDict(frozen=True, extra="forbid")


# ---------------------------------------------------------------------------
# Styling primitives
# ---------------------------------------------------------------------------


class TextAlign(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class TextStyle(BaseModel):
    font: str = "Helvetica"
    size: float = 10
    color: str = "#333333"
    bold: bool = False
    italic: bool = False
    align: TextAlign = TextAlign.LEFT

    model_config = _TREE_MODEL_CONFIG


class TextLine(BaseModel):
    text: str
    style: TextStyle = Field(default_factory=TextStyle)

    model_config = _TREE_MODEL_CONFIG


class Border(BaseModel):
    color: str
    width: float = 1.0
    double: bool = False

    model_config = _TREE_MODEL_CONFIG


# ---------------------------------------------------------------------------
# Content kinds
# ---------------------------------------------------------------------------


class TableCell(BaseModel):
    lines: List[TextLine] = Field(default_factory=list)
    width: float
    align: TextAlign = TextAlign.LEFT

    model_config = _TREE_MODEL_CONFIG

    @property
    def text(self) -> str:
        return "\n".join(line.text for line in self.lines)


class TableRow(BaseModel):
    cells: List[TableCell]
    height: float
    fill: Optional[str] = None
    header: bool = False

    model_config = _TREE_MODEL_CONFIG


class ImageRef(BaseModel):
    source: str
    media_type: str = "image/png"

    model_config = _TREE_MODEL_CONFIG


class ShapeKind(str, Enum):
    RECT = "rect"
    POLYGON = "polygon"
    LINE = "line"


class Shape(BaseModel):
    """
    Decorative geometry.

    ``points`` are absolute page coordinates for polygons and lines;
    rectangles use the block frame.
    """

    kind: ShapeKind = ShapeKind.RECT
    points: List[List[float]] = Field(default_factory=list)
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: float = 0.0

    model_config = _TREE_MODEL_CONFIG


class BlockRole(str, Enum):
    TITLE = "title"
    DOCUMENT_META = "document_meta"
    LOGO = "logo"
    COMPANY_DETAILS = "company_details"
    CLIENT_DETAILS = "client_details"
    ITEMS_HEADER = "items_header"
    ITEM_ROW = "item_row"
    ITEM_DETAIL = "item_detail"
    TOTALS = "totals"
    BANK_DETAILS = "bank_details"
    PAYMENT_TERMS = "payment_terms"
    NOTES = "notes"
    LEGAL_MENTIONS = "legal_mentions"
    FOOTER = "footer"
    DECORATION = "decoration"
    PAGE_NUMBER = "page_number"


# ---------------------------------------------------------------------------
# Blocks and pages
# ---------------------------------------------------------------------------


class Block(BaseModel):
    role: BlockRole
    section: Optional[SectionKey] = None

    x: float
    y: float
    width: float
    height: float

    lines: List[TextLine] = Field(default_factory=list)
    rows: List[TableRow] = Field(default_factory=list)
    image: Optional[ImageRef] = None
    shape: Optional[Shape] = None

    fill: Optional[str] = None
    border: Optional[Border] = None
    radius: float = 0.0
    padding: float = 0.0

    model_config = _TREE_MODEL_CONFIG

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return (
            not self.lines
            and not self.rows
            and self.image is None
            and self.shape is None
        )

    def text(self) -> str:
        parts = [line.text for line in self.lines]
        for row in self.rows:
            parts.extend(cell.text for cell in row.cells)
        return "\n".join(p for p in parts if p)

    def moved(self, dx: float = 0.0, dy: float = 0.0) -> "Block":
        update = {"x": self.x + dx, "y": self.y + dy}
        if self.shape is not None and self.shape.points:
            update["shape"] = self.shape.model_copy(
                update={
                    "points": [[px + dx, py + dy] for px, py in self.shape.points]
                }
            )
        return self.model_copy(update=update)


class Page(BaseModel):
    number: int
    width: float = A4_WIDTH
    height: float = A4_HEIGHT
    background: Optional[str] = None
    blocks: List[Block] = Field(default_factory=list)

    model_config = _TREE_MODEL_CONFIG


class RenderedDocument(BaseModel):
    architecture: str
    kind: DocumentKind
    document_number: str
    pages: List[Page]

    model_config = _TREE_MODEL_CONFIG

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def iter_blocks(self) -> Iterator[Block]:
        for page in self.pages:
            yield from page.blocks

    def blocks(
        self,
        *,
        role: Optional[BlockRole] = None,
        section: Optional[SectionKey] = None,
    ) -> List[Block]:
        return [
            block
            for block in self.iter_blocks()
            if (role is None or block.role == role)
            and (section is None or block.section == section)
        ]

    def text(self) -> str:
        return "\n".join(block.text() for block in self.iter_blocks())
