"""
HTML preview service.

Turns a rendered document tree into a self-contained HTML page for the
in-browser preview. Every block is drawn at its absolute position on a
fixed-size A4 sheet, so the preview shows exactly the pages, breaks and
positions the document serializer receives.

Design guarantees:
- Deterministic template rendering (Jinja2 + StrictUndefined)
- Autoescaping on: user text never becomes markup
- No document transformation occurs in this module; the tree is
  displayed as-is

Trust boundary:
- This module is presentation-only. Tax computation, legal mentions,
  layout and hashing happen strictly before it is called.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    select_autoescape,
)

from invoice_engine.app.config import PACKAGED_TEMPLATE_DIR
from invoice_engine.app.rendering.layout import LINE_SPACING, font_family
from invoice_engine.app.schemas.findings import ReadinessReport
from invoice_engine.app.schemas.rendered import RenderedDocument

PREVIEW_TEMPLATE = "preview.html.jinja"

_CSS_FONT_STACKS = {
    "sans": "Helvetica, Arial, sans-serif",
    "serif": "'Times New Roman', Times, serif",
    "mono": "'Courier New', Courier, monospace",
}


class PreviewRenderError(RuntimeError):
    """Raised when the preview template fails to render."""


def css_font_stack(font: str) -> str:
    """CSS ``font-family`` value for a document font name."""
    return _CSS_FONT_STACKS[font_family(font)]


@lru_cache(maxsize=None)
def _environment(template_dir: Path) -> Environment:
    if not template_dir.is_dir():
        raise PreviewRenderError(
            f"Preview template directory does not exist: {template_dir}"
        )

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        undefined=StrictUndefined,
        autoescape=select_autoescape(["html", "jinja"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["font_stack"] = css_font_stack
    env.globals["line_spacing"] = LINE_SPACING
    return env


def render_preview_html(
    document: RenderedDocument,
    *,
    document_hash: str,
    readiness: Optional[ReadinessReport] = None,
    template_dir: Path = PACKAGED_TEMPLATE_DIR,
) -> str:
    """
    Render ``document`` as an HTML preview page.

    ``document_hash`` is displayed in the preview toolbar and is the
    same fingerprint as the one returned for the JSON document.

    Raises:
        PreviewRenderError: if the template is missing or fails.
    """
    try:
        template = _environment(Path(template_dir).resolve()).get_template(
            PREVIEW_TEMPLATE
        )
        return template.render(
            document=document,
            document_hash=document_hash,
            readiness=readiness,
        )
    except TemplateError as exc:
        raise PreviewRenderError(
            f"Preview rendering failed: {exc}"
        ) from exc
