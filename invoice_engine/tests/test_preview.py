import pytest

from invoice_engine.app.services.generation import generate_document
from invoice_engine.app.services.preview import (
    PreviewRenderError,
    css_font_stack,
    render_preview_html,
)

from invoice_engine.tests.fixtures.documents import (
    client_profile,
    invoice_facts,
    issuer_profile,
    long_invoice_facts,
)


def _result(facts=None, **kwargs):
    return generate_document(
        facts or invoice_facts(),
        client=client_profile(),
        issuer=issuer_profile(),
        **kwargs,
    )


def test_preview_contains_one_sheet_per_page():
    result = _result(long_invoice_facts(60))

    html = render_preview_html(
        result.document,
        document_hash=result.document_hash,
        readiness=result.readiness,
    )

    assert html.count('class="page"') == result.document.page_count
    assert result.document_hash in html


def test_preview_shows_document_text():
    result = _result()

    html = render_preview_html(result.document, document_hash=result.document_hash)

    assert "FACTURE" in html
    assert "FAC-2026-001" in html
    assert "2 171,75 €" in html
    assert 'data-section="bank_details"' in html


def test_preview_escapes_user_text():
    facts = invoice_facts(notes="<script>alert('x')</script>")
    result = _result(facts)

    html = render_preview_html(result.document, document_hash=result.document_hash)

    assert "<script>" not in html
    assert "&lt;script&gt;" in html


@pytest.mark.parametrize("template", ["studio", "classique", "colorful"])
def test_preview_renders_decorations(template):
    result = _result(template=template)

    html = render_preview_html(result.document, document_hash=result.document_hash)

    assert 'data-role="decoration"' in html


def test_preview_lists_readiness_findings():
    result = _result(configuration={"sections": {"legalMentions": False}})

    html = render_preview_html(
        result.document,
        document_hash=result.document_hash,
        readiness=result.readiness,
    )

    assert "LEGAL-CRIT-001" in html


def test_missing_template_directory_raises(tmp_path):
    result = _result()

    with pytest.raises(PreviewRenderError):
        render_preview_html(
            result.document,
            document_hash=result.document_hash,
            template_dir=tmp_path / "missing",
        )


def test_css_font_stack():
    assert "serif" in css_font_stack("Times-Roman")
    assert "monospace" in css_font_stack("Courier")
    assert css_font_stack("Helvetica").endswith("sans-serif")
