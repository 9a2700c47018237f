"""
Request-scoped dependencies.

The engine configuration and the template store live on ``app.state``
and are created by the application factory. Tests replace them through
``app.dependency_overrides``.
"""

from fastapi import Request

from invoice_engine.app.config import EngineConfig
from invoice_engine.app.services.template_store import InMemoryTemplateStore


def get_engine_config(request: Request) -> EngineConfig:
    return request.app.state.config


def get_template_store(request: Request) -> InMemoryTemplateStore:
    return request.app.state.template_store
