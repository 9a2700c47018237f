"""
Document content shared by every architecture.

``DocumentContent`` answers two questions for renderers:

- is a given section visible? (configuration flag AND data present)
- what text does it contain? (already formatted for display)

Renderers decide where things go; this module decides what they say.
Nothing here raises for missing optional data: absent fields simply
produce no line, and a section with no lines is reported invisible.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from invoice_engine.app.rendering.base import RenderInput
from invoice_engine.app.rendering.formatting import (
    format_currency,
    format_date,
    format_percentage,
    format_quantity,
)
from invoice_engine.app.schemas.documents import (
    Address,
    DocumentKind,
    ItemUnit,
    LineItem,
    PartyProfile,
    PaymentMethod,
)
from invoice_engine.app.schemas.template_config import (
    SectionKey,
    TemplateConfiguration,
)
from invoice_engine.app.utils.numbers import ZERO

DEFAULT_INVOICE_TITLE = "FACTURE"
QUOTE_TITLE = "DEVIS"
CLIENT_LABEL = "Facturé à"
ITEM_COLUMN_HEADERS = ("Qté", "Description", "P.U. HT", "TVA", "Total HT")

PAYMENT_METHOD_LABELS = {
    PaymentMethod.BANK_TRANSFER: "Règlement par virement bancaire",
    PaymentMethod.CHECK: "Règlement par chèque",
    PaymentMethod.CASH: "Règlement en espèces",
    PaymentMethod.CARD: "Règlement par carte bancaire",
    PaymentMethod.ONLINE: "Règlement en ligne",
    PaymentMethod.OTHER: "Règlement selon modalités convenues",
}

UNIT_SUFFIXES = {
    ItemUnit.UNIT: "",
    ItemUnit.HOUR: " h",
    ItemUnit.DAY: " j",
    ItemUnit.MONTH: " mois",
    ItemUnit.KG: " kg",
}


@dataclass(frozen=True)
class ItemContent:
    quantity: str
    description: str
    unit_price: str
    tax_rate: str
    total: str
    details: Optional[str] = None

    @property
    def cells(self) -> List[str]:
        return [
            self.quantity,
            self.description,
            self.unit_price,
            self.tax_rate,
            self.total,
        ]


@dataclass(frozen=True)
class TotalLine:
    label: str
    value: str
    grand: bool = False


def _address_lines(address: Optional[Address]) -> List[str]:
    if address is None:
        return []
    lines = []
    if address.street:
        lines.append(address.street)
    city = " ".join(p for p in (address.zip_code, address.city) if p)
    if city:
        lines.append(city)
    if address.country:
        lines.append(address.country)
    return lines


class DocumentContent:
    def __init__(self, data: RenderInput, config: TemplateConfiguration) -> None:
        self.data = data
        self.config = config
        self.facts = data.facts
        self.issuer = data.issuer or PartyProfile()
        self.client = data.client or PartyProfile()
        self.tax = data.tax

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------

    def visible(self, section: SectionKey) -> bool:
        if not self.config.sections.is_visible(section):
            return False

        if section == SectionKey.LOGO:
            return self.logo_source is not None
        if section == SectionKey.COMPANY_DETAILS:
            return bool(self.company_lines())
        if section == SectionKey.CLIENT_DETAILS:
            return bool(self.client_lines())
        if section == SectionKey.BANK_DETAILS:
            return self.issuer.iban is not None
        if section == SectionKey.PAYMENT_TERMS:
            return bool(self.payment_terms_lines())
        if section == SectionKey.LEGAL_MENTIONS:
            return bool(self.legal_text)
        if section == SectionKey.ITEM_DETAILS:
            return any(item.details for item in self.items)
        return False

    # ------------------------------------------------------------------
    # Header
    # ------------------------------------------------------------------

    @property
    def is_quote(self) -> bool:
        return self.facts.kind == DocumentKind.QUOTE

    @property
    def title(self) -> str:
        title = self.config.custom_text.invoice_title
        if self.is_quote and title == DEFAULT_INVOICE_TITLE:
            return QUOTE_TITLE
        return title

    def meta_lines(self) -> List[str]:
        lines = []
        if self.facts.document_number:
            lines.append(f"N° {self.facts.document_number}")
        lines.append(f"Date : {format_date(self.facts.issue_date)}")
        if self.facts.due_date is not None:
            label = "Valable jusqu'au" if self.is_quote else "Échéance"
            lines.append(f"{label} : {format_date(self.facts.due_date)}")
        return lines

    @property
    def logo_source(self) -> Optional[str]:
        if self.issuer.logo is None:
            return None
        return self.issuer.logo.source

    @property
    def logo_media_type(self) -> str:
        return self.issuer.logo.media_type if self.issuer.logo else "image/png"

    # ------------------------------------------------------------------
    # Parties
    # ------------------------------------------------------------------

    @property
    def company_name(self) -> Optional[str]:
        return self.issuer.name or None

    def company_lines(self, include_name: bool = False) -> List[str]:
        issuer = self.issuer
        lines = []
        if include_name and issuer.name:
            lines.append(issuer.name)
        lines.extend(_address_lines(issuer.address))
        if issuer.email:
            lines.append(issuer.email)
        if issuer.phone:
            lines.append(issuer.phone)
        if issuer.website:
            lines.append(issuer.website)
        if issuer.registration_id:
            lines.append(f"SIRET : {issuer.registration_id}")
        if issuer.vat_number:
            lines.append(f"N° TVA : {issuer.vat_number}")
        if not lines and issuer.name:
            lines.append(issuer.name)
        return lines

    @property
    def client_name(self) -> Optional[str]:
        return self.client.name or None

    def client_lines(self) -> List[str]:
        client = self.client
        lines = _address_lines(client.address)
        if client.email:
            lines.append(client.email)
        if client.phone:
            lines.append(client.phone)
        if client.registration_id:
            lines.append(f"SIRET : {client.registration_id}")
        if client.vat_number:
            lines.append(f"N° TVA : {client.vat_number}")
        if client.name:
            lines.insert(0, client.name)
        return lines

    # ------------------------------------------------------------------
    # Payment
    # ------------------------------------------------------------------

    @property
    def bank_label(self) -> str:
        return self.config.custom_text.bank_details_label

    def bank_lines(self) -> List[str]:
        bank = self.issuer.bank
        if bank is None or not bank.iban:
            return []
        lines = [f"IBAN : {bank.iban}"]
        if bank.bic:
            lines.append(f"BIC : {bank.bic}")
        if bank.bank_name:
            lines.append(f"Banque : {bank.bank_name}")
        return lines

    @property
    def payment_terms_label(self) -> str:
        return self.config.custom_text.payment_terms_label

    def payment_terms_lines(self) -> List[str]:
        lines = [PAYMENT_METHOD_LABELS[self.facts.payment_method]]
        if self.facts.due_date is not None and not self.is_quote:
            lines.append(f"Date limite : {format_date(self.facts.due_date)}")
        return lines

    # ------------------------------------------------------------------
    # Items and totals
    # ------------------------------------------------------------------

    @property
    def items(self) -> List[LineItem]:
        return list(self.facts.items)

    def item_contents(self) -> List[ItemContent]:
        show_details = self.config.sections.item_details
        contents = []
        for item in self.facts.items:
            contents.append(
                ItemContent(
                    quantity=format_quantity(item.quantity)
                    + UNIT_SUFFIXES[item.unit],
                    description=item.description,
                    unit_price=format_currency(item.unit_price),
                    tax_rate=f"{format_percentage(item.tax_rate)} %",
                    total=format_currency(item.line_subtotal),
                    details=item.details if show_details and item.details else None,
                )
            )
        return contents

    def vat_lines(self) -> List[TotalLine]:
        return [
            TotalLine(
                label=f"TVA {format_percentage(bucket.rate)} %",
                value=format_currency(bucket.tax),
            )
            for bucket in self.tax.taxed_buckets()
        ]

    def total_lines(self) -> List[TotalLine]:
        facts = self.facts
        lines = [TotalLine(label="Total HT", value=format_currency(facts.subtotal))]
        lines.extend(self.vat_lines())
        lines.append(
            TotalLine(
                label="TOTAL TTC",
                value=format_currency(facts.total),
                grand=True,
            )
        )
        if facts.amount_paid > ZERO:
            lines.append(
                TotalLine(
                    label="Déjà réglé",
                    value=format_currency(facts.amount_paid),
                )
            )
            lines.append(
                TotalLine(
                    label="Reste à payer",
                    value=format_currency(facts.outstanding),
                    grand=True,
                )
            )
        return lines

    @property
    def grand_total(self) -> Decimal:
        return self.facts.total

    # ------------------------------------------------------------------
    # Free text
    # ------------------------------------------------------------------

    @property
    def legal_text(self) -> str:
        return (self.data.legal_text or "").strip()

    @property
    def notes(self) -> Optional[str]:
        notes = self.facts.notes
        return notes.strip() if notes and notes.strip() else None

    @property
    def footer(self) -> Optional[str]:
        return self.config.custom_text.footer_text
