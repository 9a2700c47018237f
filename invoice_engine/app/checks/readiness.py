"""
Delivery readiness checks.

Deterministic checks run after rendering to decide whether a generated
document can be sent to a client as-is. They are advisory: generation
always completes, and the caller (API gate, UI) decides what to do with
the report.

Stable finding identifiers:

    LEGAL-CRIT-001   legal mentions hidden or empty
    LEGAL-MAJ-002    unresolved placeholders in legal mentions
    TOTALS-MAJ-003   snapshot totals disagree with line items
    DOC-MAJ-004      missing document number
    ISSUER-MIN-005   issuer registration id (SIRET) missing
    CLIENT-MIN-006   client name missing
    DOC-MIN-007      invoice without due date
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from invoice_engine.app.legal.resolver import find_unresolved_placeholders
from invoice_engine.app.rendering.formatting import format_currency
from invoice_engine.app.schemas.documents import (
    DocumentFacts,
    DocumentKind,
    PartyProfile,
)
from invoice_engine.app.schemas.findings import (
    FindingCategory,
    ReadinessFinding,
    ReadinessReport,
    Severity,
)
from invoice_engine.app.schemas.template_config import TemplateConfiguration
from invoice_engine.app.tax.aggregator import TaxBreakdown

TOTALS_TOLERANCE = Decimal("0.01")


def _legal_findings(config: TemplateConfiguration) -> List[ReadinessFinding]:
    text = (config.custom_text.legal_mentions or "").strip()

    if not config.sections.legal_mentions or not text:
        return [
            ReadinessFinding(
                finding_id="LEGAL-CRIT-001",
                category=FindingCategory.LEGAL,
                severity=Severity.CRITICAL,
                title="Legal mentions missing",
                description=(
                    "The legal mentions section is hidden or empty. French "
                    "invoices must state late payment penalties and the flat "
                    "recovery indemnity."
                ),
                suggested_fix=(
                    "Enable the legal mentions section or reset the text "
                    "from a legal mentions preset."
                ),
                metadata={
                    "section_visible": config.sections.legal_mentions,
                    "text_empty": not text,
                },
            )
        ]

    placeholders = find_unresolved_placeholders(text)
    if placeholders:
        return [
            ReadinessFinding(
                finding_id="LEGAL-MAJ-002",
                category=FindingCategory.LEGAL,
                severity=Severity.MAJOR,
                title="Unresolved placeholders in legal mentions",
                description=(
                    "The legal mentions still contain template placeholders: "
                    + ", ".join(placeholders)
                ),
                suggested_fix=(
                    "Complete the issuer profile (RCS city, share capital, "
                    "insurer) or edit the legal mentions text."
                ),
                metadata={"placeholders": placeholders},
            )
        ]

    return []


def _totals_findings(
    facts: DocumentFacts,
    tax: TaxBreakdown,
) -> List[ReadinessFinding]:
    mismatches = {}
    for name, recorded, computed in (
        ("subtotal", facts.subtotal, tax.subtotal),
        ("tax_amount", facts.tax_amount, tax.tax_amount),
        ("total", facts.total, tax.total),
    ):
        if abs(recorded - computed) > TOTALS_TOLERANCE:
            mismatches[name] = {
                "recorded": str(recorded),
                "computed": str(computed),
            }

    if not mismatches:
        return []

    details = "; ".join(
        f"{name}: {format_currency(Decimal(v['recorded']))} recorded, "
        f"{format_currency(Decimal(v['computed']))} from line items"
        for name, v in mismatches.items()
    )
    return [
        ReadinessFinding(
            finding_id="TOTALS-MAJ-003",
            category=FindingCategory.TOTALS,
            severity=Severity.MAJOR,
            title="Totals do not match line items",
            description=f"Recorded totals disagree with the line items ({details}).",
            suggested_fix="Recalculate the document totals before sending.",
            metadata=mismatches,
        )
    ]


def assess_delivery_readiness(
    facts: DocumentFacts,
    client: Optional[PartyProfile],
    issuer: Optional[PartyProfile],
    config: TemplateConfiguration,
    tax: TaxBreakdown,
) -> ReadinessReport:
    """
    Run every readiness check and build the report.

    Findings are ordered by severity, then by identifier.
    """
    findings: List[ReadinessFinding] = []

    findings.extend(_legal_findings(config))
    findings.extend(_totals_findings(facts, tax))

    if not facts.document_number:
        findings.append(
            ReadinessFinding(
                finding_id="DOC-MAJ-004",
                category=FindingCategory.DOCUMENT,
                severity=Severity.MAJOR,
                title="Missing document number",
                description="The document has no number.",
                suggested_fix="Finalize the document to assign a number.",
            )
        )

    if issuer is None or not issuer.registration_id:
        findings.append(
            ReadinessFinding(
                finding_id="ISSUER-MIN-005",
                category=FindingCategory.ISSUER,
                severity=Severity.MINOR,
                title="Issuer SIRET missing",
                description="The issuer profile has no registration number.",
                suggested_fix="Add the SIRET to the company profile.",
            )
        )

    if client is None or not client.name:
        findings.append(
            ReadinessFinding(
                finding_id="CLIENT-MIN-006",
                category=FindingCategory.CLIENT,
                severity=Severity.MINOR,
                title="Client name missing",
                description="The client record has no name.",
            )
        )

    if facts.kind == DocumentKind.INVOICE and facts.due_date is None:
        findings.append(
            ReadinessFinding(
                finding_id="DOC-MIN-007",
                category=FindingCategory.DOCUMENT,
                severity=Severity.MINOR,
                title="Invoice without due date",
                description="The invoice does not state a payment due date.",
                suggested_fix="Set a due date on the invoice.",
            )
        )

    order = list(Severity)
    findings.sort(key=lambda f: (order.index(f.severity), f.finding_id))
    return ReadinessReport.from_findings(findings)
