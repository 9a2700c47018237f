"""
Renderer registry.

Maps architecture identifiers to renderer functions. The table is
static and read-only; renderers must be registered here to be
addressable by presets and by the API.

Unknown or missing identifiers never fail: they fall back to the
default architecture and the fallback is logged and reported to the
caller.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from invoice_engine.app.rendering.base import Renderer, RenderInput
from invoice_engine.app.rendering.renderers.card_grid import render_card_grid
from invoice_engine.app.rendering.renderers.compact import render_compact
from invoice_engine.app.rendering.renderers.corporate import render_corporate
from invoice_engine.app.rendering.renderers.diagonal import render_diagonal
from invoice_engine.app.rendering.renderers.formal import render_formal
from invoice_engine.app.rendering.renderers.minimal import render_minimal
from invoice_engine.app.rendering.renderers.sidebar import render_sidebar
from invoice_engine.app.schemas.rendered import RenderedDocument
from invoice_engine.app.schemas.template_config import TemplateConfiguration

logger = logging.getLogger(__name__)

DEFAULT_ARCHITECTURE = "sidebar"

RENDERERS: Mapping[str, Renderer] = MappingProxyType(
    {
        "sidebar": render_sidebar,
        "formal": render_formal,
        "minimal": render_minimal,
        "diagonal": render_diagonal,
        "corporate": render_corporate,
        "compact": render_compact,
        "card-grid": render_card_grid,
    }
)


def resolve_renderer(
    architecture: Optional[str],
) -> Tuple[str, Renderer, bool]:
    """
    Return ``(architecture_id, renderer, fell_back)`` for an identifier.

    Matching is exact. ``fell_back`` is True when the default renderer
    was substituted for an unknown or missing identifier.
    """
    renderer = RENDERERS.get(architecture) if architecture else None
    if renderer is not None:
        return architecture, renderer, False

    logger.warning(
        "Unknown architecture %r; falling back to %s",
        architecture,
        DEFAULT_ARCHITECTURE,
    )
    return DEFAULT_ARCHITECTURE, RENDERERS[DEFAULT_ARCHITECTURE], True


def render_document(
    architecture: Optional[str],
    data: RenderInput,
    config: TemplateConfiguration,
) -> Tuple[RenderedDocument, bool]:
    """
    Route ``data`` to the renderer for ``architecture``.

    Returns the rendered tree and whether the default renderer was used
    as a fallback. The router computes nothing itself.
    """
    _, renderer, fell_back = resolve_renderer(architecture)
    return renderer(data, config), fell_back
