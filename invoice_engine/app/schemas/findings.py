"""
Delivery readiness finding schema.

Findings describe why a generated document is not fit to be sent to a
client yet (missing legal mentions, inconsistent totals, unresolved
placeholders...). They are advisory: generation never fails because of
a finding.

Finding identifiers are stable contracts. Format:
``<AREA>-<SEV>-<NNN>`` (e.g. ``LEGAL-CRIT-001``).
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations (FROZEN CONTRACTS)
# ---------------------------------------------------------------------------


class Severity(str, Enum):
    """
    Severity level of a finding.

    Ordering is intentional and MUST remain stable.
    """

    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"
    INFO = "info"


BLOCKING_SEVERITIES = frozenset({Severity.CRITICAL, Severity.MAJOR})


class FindingCategory(str, Enum):
    LEGAL = "legal"
    TOTALS = "totals"
    DOCUMENT = "document"
    ISSUER = "issuer"
    CLIENT = "client"


# ---------------------------------------------------------------------------
# Finding + report
# ---------------------------------------------------------------------------


class ReadinessFinding(BaseModel):
    finding_id: str = Field(
        ...,
        description="Stable identifier for the finding (e.g. 'LEGAL-CRIT-001').",
    )

    category: FindingCategory = Field(
        ...,
        description="Area of the document the finding applies to",
    )

    severity: Severity = Field(
        ...,
        description="Severity level of the finding",
    )

    title: str = Field(
        ...,
        description="Short human-readable summary of the finding",
    )

    description: str = Field(
        ...,
        description="Explanation of what is wrong with the document",
    )

    suggested_fix: Optional[str] = Field(
        None,
        description="Optional advisory remediation suggestion",
    )

    metadata: Optional[Dict] = Field(
        None,
        description="Optional structured metadata for tooling",
    )

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )


class ReadinessReport(BaseModel):
    """
    Outcome of the delivery readiness checks for one generated document.

    ``delivery_ready`` is False as soon as one CRITICAL or MAJOR finding
    is present.
    """

    delivery_ready: bool
    findings: List[ReadinessFinding] = Field(default_factory=list)

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    @classmethod
    def from_findings(cls, findings: List[ReadinessFinding]) -> "ReadinessReport":
        blocking = any(f.severity in BLOCKING_SEVERITIES for f in findings)
        return cls(delivery_ready=not blocking, findings=list(findings))

    def finding_ids(self) -> List[str]:
        return [f.finding_id for f in self.findings]
