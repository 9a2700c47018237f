from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from invoice_engine.app.schemas.documents import (
    DocumentFacts,
    DocumentKind,
    ItemUnit,
    LineItem,
    PartyProfile,
    PaymentMethod,
)

from invoice_engine.tests.fixtures.documents import (
    TINY_PNG_BASE64,
    invoice_facts,
    issuer_profile,
    quote_facts,
)


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

def test_invoice_payload_aliases():
    facts = invoice_facts()

    assert facts.kind == DocumentKind.INVOICE
    assert facts.document_number == "FAC-2026-001"
    assert facts.issue_date == date(2026, 3, 2)
    assert facts.due_date == date(2026, 4, 1)
    assert facts.tax_amount == Decimal("331.75")
    assert len(facts.items) == 3


def test_quote_payload_aliases():
    facts = quote_facts()

    assert facts.kind == DocumentKind.QUOTE
    assert facts.document_number == "DEV-2026-014"
    assert facts.due_date == date(2026, 4, 15)


def test_issue_date_is_required():
    with pytest.raises(ValidationError):
        DocumentFacts.model_validate({"invoiceNumber": "FAC-1"})


def test_unknown_payment_method_becomes_other():
    assert invoice_facts(paymentMethod="bitcoin").payment_method == PaymentMethod.OTHER
    assert invoice_facts(paymentMethod=None).payment_method == PaymentMethod.BANK_TRANSFER


def test_outstanding_amount():
    assert invoice_facts(amountPaid="171.75").outstanding == Decimal("2000.00")
    assert invoice_facts(amountPaid="5000").outstanding == Decimal("0")
    assert invoice_facts(balanceDue="12").outstanding == Decimal("12")


def test_malformed_totals_become_zero():
    facts = invoice_facts(total="beaucoup")

    assert facts.total == Decimal("0")


def test_line_item_amounts_keep_full_precision():
    item = LineItem.model_validate(
        {"quantity": "3", "unitPrice": "0.333", "taxRate": "5.5"}
    )

    assert item.line_subtotal == Decimal("0.999")
    assert item.line_tax == Decimal("0.054945")


def test_unknown_unit_defaults_to_unit():
    item = LineItem.model_validate({"unit": "barrel"})

    assert item.unit == ItemUnit.UNIT
    assert item.description == ""


# ---------------------------------------------------------------------------
# Parties
# ---------------------------------------------------------------------------

def test_flat_bank_fields_are_lifted():
    issuer = issuer_profile()

    assert issuer.bank.iban.startswith("FR76")
    assert issuer.bank.bic == "AGRIFRPP"
    assert issuer.bank.bank_name == "Crédit Agricole"
    assert issuer.iban == issuer.bank.iban


def test_nested_bank_details_win_over_flat_fields():
    issuer = PartyProfile.model_validate(
        {"iban": "FR00 FLAT", "bankDetails": {"iban": "FR00 NESTED"}}
    )

    assert issuer.iban == "FR00 NESTED"


def test_siret_is_read_from_company_info():
    issuer = PartyProfile.model_validate(
        {"companyName": "Atelier", "companyInfo": {"siret": "999 888 777 00011"}}
    )

    assert issuer.name == "Atelier"
    assert issuer.registration_id == "999 888 777 00011"


def test_logo_string_is_accepted():
    inline = PartyProfile.model_validate({"logo": f"data:image/png;base64,{TINY_PNG_BASE64}"})
    remote = PartyProfile.model_validate({"logo": "https://example.org/logo.png"})

    assert inline.logo.source.startswith("data:image/png;base64,")
    assert remote.logo.source == "https://example.org/logo.png"


def test_base64_logo_gets_data_uri():
    assert issuer_profile().logo.source == f"data:image/png;base64,{TINY_PNG_BASE64}"


def test_party_models_are_frozen_and_ignore_unknown_keys():
    profile = PartyProfile.model_validate({"name": "X", "createdAt": "2026-01-01"})

    with pytest.raises(ValidationError):
        profile.name = "Y"


def test_empty_capital_is_none():
    assert issuer_profile(capital="").capital is None
    assert issuer_profile().capital == Decimal("10000")
