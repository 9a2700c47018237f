"""
FastAPI entrypoint for the invoice document engine.

The engine is stateless apart from the in-memory user template store:
every generation request carries the finalized document snapshot and
party records it renders.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from invoice_engine.app.api.generate import router as generate_router
from invoice_engine.app.api.legal_mentions import router as legal_mentions_router
from invoice_engine.app.api.tax import router as tax_router
from invoice_engine.app.api.templates import router as templates_router
from invoice_engine.app.config import EngineConfig
from invoice_engine.app.services.template_store import InMemoryTemplateStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Application setup
# ---------------------------------------------------------------------------

app = FastAPI(
    title="invoice-engine",
    description="Invoice and quote document generation engine",
    version="0.1.0",
)

# Configuration is loaded once and treated as immutable for the lifetime
# of the process.
app.state.config = EngineConfig.from_env()
app.state.template_store = InMemoryTemplateStore()

app.include_router(generate_router, prefix="/generate", tags=["generate"])
app.include_router(templates_router, prefix="/templates", tags=["templates"])
app.include_router(
    legal_mentions_router, prefix="/legal-mentions", tags=["legal-mentions"]
)
app.include_router(tax_router, prefix="/tax", tags=["tax"])

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[
        "X-Document-Hash",
        "X-Architecture",
        "X-Architecture-Fallback",
        "X-Delivery-Ready",
    ],
)


# ---------------------------------------------------------------------------
# Startup
# ---------------------------------------------------------------------------


@app.on_event("startup")
def startup_event() -> None:
    """
    Application startup hook.

    Logging is configured here, once, from the engine configuration.
    """
    config: EngineConfig = app.state.config

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "Engine started (default_preset=%s delivery_gate=%s max_line_items=%d)",
        config.DEFAULT_PRESET,
        config.ENABLE_DELIVERY_GATE,
        config.MAX_LINE_ITEMS,
    )
