"""
Every renderer honors every section flag.

With complete data, a visible section produces at least one non-empty
block tagged with its key; a hidden section produces none.
"""

import pytest

from invoice_engine.app.normalization.normalize import normalize_configuration
from invoice_engine.app.rendering.router import RENDERERS
from invoice_engine.app.schemas.documents import PartyProfile
from invoice_engine.app.schemas.rendered import BlockRole
from invoice_engine.app.schemas.template_config import SectionKey

from invoice_engine.tests.fixtures.documents import (
    invoice_facts,
    line_item,
    quote_facts,
    render_input,
    sections,
)

ARCHITECTURES = sorted(RENDERERS)
SECTION_KEYS = list(SectionKey)


def _render(architecture, config_sections, **input_overrides):
    config = normalize_configuration({"sections": config_sections})
    return RENDERERS[architecture](render_input(**input_overrides), config)


@pytest.mark.parametrize("architecture", ARCHITECTURES)
@pytest.mark.parametrize("section", SECTION_KEYS, ids=lambda s: s.value)
def test_visible_section_is_rendered(architecture, section):
    document = _render(architecture, sections())

    tagged = document.blocks(section=section)

    assert tagged, f"{architecture}: no block for {section.value}"
    assert all(not block.is_empty for block in tagged)


@pytest.mark.parametrize("architecture", ARCHITECTURES)
@pytest.mark.parametrize("section", SECTION_KEYS, ids=lambda s: s.value)
def test_hidden_section_is_not_rendered(architecture, section):
    document = _render(architecture, sections(**{section.value: False}))

    assert document.blocks(section=section) == []

    # Other sections are unaffected.
    for other in SECTION_KEYS:
        if other != section:
            assert document.blocks(section=other), (
                f"{architecture}: hiding {section.value} removed {other.value}"
            )


@pytest.mark.parametrize("architecture", ARCHITECTURES)
def test_hidden_legal_mentions_text_is_absent(architecture):
    document = _render(architecture, sections(legal_mentions=False))

    assert "pénalité" not in document.text()


@pytest.mark.parametrize("architecture", ARCHITECTURES)
def test_hidden_item_details_text_is_absent(architecture):
    document = _render(architecture, sections(item_details=False))

    assert "Maquettes, intégration et mise en ligne" not in document.text()
    assert document.blocks(role=BlockRole.ITEM_DETAIL) == []


@pytest.mark.parametrize("architecture", ARCHITECTURES)
def test_missing_optional_data_omits_blocks_without_raising(architecture):
    """
    Flags on, data missing: the block is omitted, nothing raises.
    """
    bare = PartyProfile()
    document = _render(
        architecture,
        sections(),
        issuer=bare,
        client=bare,
        legal_text="",
        facts=invoice_facts(dueDate=None, notes=None),
    )

    for section in (
        SectionKey.LOGO,
        SectionKey.BANK_DETAILS,
        SectionKey.COMPANY_DETAILS,
        SectionKey.CLIENT_DETAILS,
        SectionKey.LEGAL_MENTIONS,
    ):
        assert document.blocks(section=section) == []

    assert document.blocks(role=BlockRole.TITLE)
    assert document.blocks(role=BlockRole.TOTALS)


@pytest.mark.parametrize("architecture", ARCHITECTURES)
def test_header_information_is_always_shown(architecture):
    document = _render(architecture, sections())
    text = document.text()

    assert "FACTURE" in text
    assert "N° FAC-2026-001" in text
    assert "02/03/2026" in text
    assert "01/04/2026" in text


@pytest.mark.parametrize("architecture", ARCHITECTURES)
def test_totals_show_vat_lines_and_snapshot_totals(architecture):
    document = _render(architecture, sections())
    totals = "\n".join(b.text() for b in document.blocks(role=BlockRole.TOTALS))

    assert "1 840,00 €" in totals
    assert "TVA 20 %" in totals
    assert "318,00 €" in totals
    assert "TVA 5,5 %" in totals
    assert "13,75 €" in totals
    assert "2 171,75 €" in totals


@pytest.mark.parametrize("architecture", ARCHITECTURES)
def test_quote_uses_quote_title_and_validity_date(architecture):
    document = _render(architecture, sections(), facts=quote_facts())
    text = document.text()

    assert "DEVIS" in text
    assert "FACTURE" not in text
    assert "Valable jusqu'au : 15/04/2026" in text


@pytest.mark.parametrize("architecture", ARCHITECTURES)
def test_huge_amounts_render_without_raising(architecture):
    facts = invoice_facts(
        items=[line_item(quantity="1e30", unitPrice="1", taxRate="20")],
        subtotal="1e30",
        taxAmount="2e29",
        total="1.2e30",
    )

    document = _render(architecture, sections(), facts=facts)

    assert len(document.blocks(role=BlockRole.ITEM_ROW)) == 1
    assert document.blocks(role=BlockRole.TOTALS)
