from decimal import Decimal

import pytest

from invoice_engine.app.registry.presets import TEMPLATE_PRESETS
from invoice_engine.app.schemas.rendered import BlockRole
from invoice_engine.app.services.generation import (
    TemplateNotFoundError,
    generate_document,
    materialize_legal_mentions,
)
from invoice_engine.app.utils.canonical import canonical_json_bytes
from invoice_engine.app.utils.hashing import compute_document_hash

from invoice_engine.tests.fixtures.documents import (
    client_profile,
    invoice_facts,
    issuer_profile,
)


def _generate(**kwargs):
    kwargs.setdefault("client", client_profile())
    kwargs.setdefault("issuer", issuer_profile())
    return generate_document(invoice_facts(), **kwargs)


@pytest.mark.parametrize("slug", sorted(TEMPLATE_PRESETS))
def test_every_preset_generates(slug):
    result = _generate(template=slug)

    assert result.architecture == TEMPLATE_PRESETS[slug].architecture
    assert result.architecture_fallback is False
    assert result.document.page_count >= 1
    assert result.document_hash.startswith("SHA-256:")


def test_default_preset_is_used_when_none_given():
    result = _generate()

    assert result.architecture == "sidebar"


def test_unknown_template_raises():
    with pytest.raises(TemplateNotFoundError):
        _generate(template="does-not-exist")


def test_unknown_architecture_is_reported_not_raised():
    result = _generate(architecture="hexagonal")

    assert result.architecture == "sidebar"
    assert result.architecture_fallback is True


def test_explicit_architecture_overrides_preset():
    result = _generate(template="moderne", architecture="minimal")

    assert result.document.architecture == "minimal"


def test_generation_is_deterministic():
    first = _generate(template="classique")
    second = _generate(template="classique")

    assert first.document == second.document
    assert first.document_hash == second.document_hash


def test_hash_is_computed_over_canonical_document():
    result = _generate()

    assert result.document_hash == compute_document_hash(
        canonical_json_bytes(result.document)
    )


def test_hash_changes_with_content():
    first = _generate()
    second = _generate(configuration={"customText": {"invoiceTitle": "NOTE"}})

    assert first.document_hash != second.document_hash


def test_legal_mentions_prefilled_from_issuer_legal_form():
    result = _generate(issuer=issuer_profile(legalForm="Auto-entrepreneur"))

    assert result.configuration.custom_text.legal_mentions_preset_id == "micro-entreprise"
    assert "293 B" in result.legal_text


def test_legal_placeholders_filled_from_issuer():
    result = _generate()

    assert "Inscrite au RCS de Lyon" in result.legal_text
    assert "[" not in result.legal_text
    assert result.readiness.delivery_ready is True


def test_user_legal_text_is_authoritative():
    custom = "Mentions légales propres à l'atelier."

    result = _generate(
        issuer=issuer_profile(legalForm="Auto-entrepreneur"),
        configuration={"customText": {"legalMentions": custom}},
    )

    assert result.legal_text == custom
    assert custom in result.document.text()


def test_preset_legal_preset_used_when_issuer_form_is_missing():
    result = _generate(template="classique", issuer=issuer_profile(legalForm=None))

    assert result.configuration.custom_text.legal_mentions_preset_id == "societe-complete"
    assert "IMMATRICULATION" in result.legal_text


def test_hidden_legal_mentions_yield_critical_finding_but_still_render():
    result = _generate(configuration={"sections": {"showLegalMentions": False}})

    assert result.legal_text == ""
    assert result.document.blocks(role=BlockRole.LEGAL_MENTIONS) == []
    assert "LEGAL-CRIT-001" in result.readiness.finding_ids()
    assert result.readiness.delivery_ready is False


def test_tax_breakdown_is_returned():
    result = _generate()

    assert len(result.tax.buckets) == 2
    assert result.tax.total == Decimal("2171.75")


def test_hash_rejects_non_bytes():
    with pytest.raises(TypeError):
        compute_document_hash("not bytes")


def test_chosen_legal_preset_wins_over_issuer_legal_form():
    result = _generate(
        configuration={"customText": {"legalMentionsPresetId": "micro-entreprise"}},
    )

    assert result.configuration.custom_text.legal_mentions_preset_id == "micro-entreprise"
    assert "293 B" in result.legal_text


def test_unknown_chosen_legal_preset_falls_back_to_issuer_legal_form():
    result = _generate(configuration={"customText": {"legalMentionsPresetId": "inconnu"}})

    assert result.configuration.custom_text.legal_mentions_preset_id == "societe-standard"


def test_materialized_legal_mentions_are_stored_in_the_overrides():
    overrides = materialize_legal_mentions(
        TEMPLATE_PRESETS["moderne"],
        {"colors": {"primary": "#112233"}},
        issuer_profile(),
    )

    assert overrides["colors"] == {"primary": "#112233"}
    assert overrides["custom_text"]["legal_mentions_preset_id"] == "societe-standard"
    assert "Inscrite au RCS de Lyon" in overrides["custom_text"]["legal_mentions"]

    regenerated = _generate(
        issuer=issuer_profile(legalForm="Auto-entrepreneur"),
        configuration=overrides,
    )
    assert regenerated.legal_text == overrides["custom_text"]["legal_mentions"]


def test_hash_of_empty_bytes():
    assert compute_document_hash(b"") == (
        "SHA-256:e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    )
