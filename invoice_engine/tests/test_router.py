import logging

import pytest

from invoice_engine.app.normalization.normalize import normalize_configuration
from invoice_engine.app.registry.presets import TEMPLATE_PRESETS
from invoice_engine.app.rendering.router import (
    DEFAULT_ARCHITECTURE,
    RENDERERS,
    render_document,
    resolve_renderer,
)

from invoice_engine.tests.fixtures.documents import render_input


def test_seven_architectures_are_registered():
    assert set(RENDERERS) == {
        "sidebar",
        "formal",
        "minimal",
        "diagonal",
        "corporate",
        "compact",
        "card-grid",
    }


def test_registry_is_read_only():
    with pytest.raises(TypeError):
        RENDERERS["custom"] = RENDERERS["sidebar"]


@pytest.mark.parametrize("architecture", sorted(RENDERERS))
def test_known_architecture_resolves_exactly(architecture):
    resolved_id, renderer, fell_back = resolve_renderer(architecture)

    assert resolved_id == architecture
    assert renderer is RENDERERS[architecture]
    assert fell_back is False


@pytest.mark.parametrize("architecture", ["unknown", "Sidebar", "", None])
def test_unknown_architecture_falls_back_to_default(architecture, caplog):
    with caplog.at_level(logging.WARNING, logger="invoice_engine.app.rendering.router"):
        resolved_id, renderer, fell_back = resolve_renderer(architecture)

    assert resolved_id == DEFAULT_ARCHITECTURE
    assert renderer is RENDERERS[DEFAULT_ARCHITECTURE]
    assert fell_back is True
    assert any(r.levelno == logging.WARNING for r in caplog.records)


def test_render_document_with_unknown_architecture_does_not_raise():
    document, fell_back = render_document(
        "does-not-exist", render_input(), normalize_configuration(None)
    )

    assert fell_back is True
    assert document.architecture == DEFAULT_ARCHITECTURE
    assert document.page_count >= 1


def test_every_preset_points_at_a_registered_architecture():
    for preset in TEMPLATE_PRESETS.values():
        assert preset.architecture in RENDERERS


def test_every_architecture_is_used_by_a_preset():
    used = {preset.architecture for preset in TEMPLATE_PRESETS.values()}

    assert used == set(RENDERERS)
