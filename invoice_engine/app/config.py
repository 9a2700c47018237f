"""
Runtime configuration for the document generation engine.

This module centralizes environment-driven settings: which visual preset
is used when a request names none, whether the delivery readiness gate
blocks final documents, request size limits and logging.

Configuration is read once at startup and is immutable afterwards. It
never changes what a given input renders to.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from invoice_engine.app.registry.presets import DEFAULT_PRESET_SLUG, TEMPLATE_PRESETS

PACKAGED_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class EngineConfig(BaseModel):
    """
    Runtime configuration for the generation engine.
    """

    # ------------------------------------------------------------------
    # Generation defaults
    # ------------------------------------------------------------------

    DEFAULT_PRESET: str = Field(
        DEFAULT_PRESET_SLUG,
        description="Visual preset used when a request does not name one",
    )

    ENABLE_DELIVERY_GATE: bool = Field(
        False,
        description=(
            "Reject mode=document requests with HTTP 409 when the "
            "readiness checks report a critical or major finding"
        ),
    )

    # ------------------------------------------------------------------
    # Safety and resource limits
    # ------------------------------------------------------------------

    MAX_LINE_ITEMS: int = Field(
        500,
        gt=0,
        description="Maximum number of line items accepted per document",
    )

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    TEMPLATE_DIR: Path = Field(
        PACKAGED_TEMPLATE_DIR,
        description="Directory holding the Jinja2 preview templates",
    )

    LOG_LEVEL: str = Field(
        "INFO",
        description="Root logging level configured at startup",
    )

    # ------------------------------------------------------------------
    # Validators (Pydantic v2)
    # ------------------------------------------------------------------

    @field_validator("DEFAULT_PRESET")
    @classmethod
    def validate_default_preset(cls, v: str) -> str:
        if v not in TEMPLATE_PRESETS:
            raise ValueError(
                f"Unknown DEFAULT_PRESET '{v}'. "
                f"Allowed values: {sorted(TEMPLATE_PRESETS)}"
            )
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(
                f"Unsupported LOG_LEVEL '{v}'. "
                f"Allowed values: {sorted(_LOG_LEVELS)}"
            )
        return level

    @field_validator("TEMPLATE_DIR")
    @classmethod
    def template_dir_must_exist(cls, v: Path) -> Path:
        if not v.is_dir():
            raise ValueError(f"Configured TEMPLATE_DIR does not exist: {v}")
        return v

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """
        Load configuration from environment variables.

        All values are parsed once at startup and must remain immutable.
        """

        def env_bool(name: str, default: bool) -> bool:
            raw = os.getenv(name)
            if raw is None:
                return default
            return raw.lower() in {"1", "true", "yes", "on"}

        template_dir_env = os.getenv("TEMPLATE_DIR")

        return cls(
            DEFAULT_PRESET=os.getenv(
                "ENGINE_DEFAULT_PRESET", DEFAULT_PRESET_SLUG
            ),
            ENABLE_DELIVERY_GATE=env_bool(
                "ENGINE_ENABLE_DELIVERY_GATE", False
            ),
            MAX_LINE_ITEMS=int(
                os.getenv("ENGINE_MAX_LINE_ITEMS", "500")
            ),
            TEMPLATE_DIR=(
                Path(template_dir_env)
                if template_dir_env
                else PACKAGED_TEMPLATE_DIR
            ),
            LOG_LEVEL=os.getenv("ENGINE_LOG_LEVEL", "INFO"),
        )

    model_config = {
        "frozen": True,
    }
