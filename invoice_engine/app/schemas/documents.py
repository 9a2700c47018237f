"""
Document snapshot and party schemas.

These models describe the read-only inputs of the generation engine:

- ``LineItem`` / ``DocumentFacts``: a finalized invoice or quote snapshot
- ``PartyProfile``: issuer or client identity, address and banking record

The engine never mutates these records. All models are frozen, accept
both snake_case and camelCase keys, and ignore unknown keys so that
records coming straight from the document store can be passed through.

Numeric fields are coerced (see ``app.utils.numbers``): malformed values
become zero instead of failing validation.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from invoice_engine.app.utils.numbers import ZERO, HUNDRED, coerce_amount, coerce_rate


_INPUT_MODEL_CONFIG = ConfigDict(
    frozen=True,
    extra="ignore",
    alias_generator=to_camel,
    populate_by_name=True,
)


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class DocumentKind(str, Enum):
    INVOICE = "invoice"
    QUOTE = "quote"


class PaymentMethod(str, Enum):
    BANK_TRANSFER = "bank_transfer"
    CHECK = "check"
    CASH = "cash"
    CARD = "card"
    ONLINE = "online"
    OTHER = "other"


class ItemUnit(str, Enum):
    UNIT = "unit"
    HOUR = "hour"
    DAY = "day"
    MONTH = "month"
    KG = "kg"


# ---------------------------------------------------------------------------
# Line items
# ---------------------------------------------------------------------------


class LineItem(BaseModel):
    """
    A single billed line.

    Derived amounts are computed at full Decimal precision; rounding is
    applied only when amounts are displayed.
    """

    description: str = ""
    quantity: Decimal = ZERO
    unit_price: Decimal = ZERO
    tax_rate: Decimal = ZERO
    unit: ItemUnit = ItemUnit.UNIT
    details: Optional[str] = None

    model_config = _INPUT_MODEL_CONFIG

    @field_validator("quantity", "unit_price", mode="before")
    @classmethod
    def _coerce_amounts(cls, v: Any, info) -> Decimal:
        return coerce_amount(v, field=info.field_name)

    @field_validator("tax_rate", mode="before")
    @classmethod
    def _coerce_tax_rate(cls, v: Any) -> Decimal:
        return coerce_rate(v)

    @field_validator("unit", mode="before")
    @classmethod
    def _unknown_unit_defaults(cls, v: Any) -> Any:
        if v not in {u.value for u in ItemUnit} and not isinstance(v, ItemUnit):
            return ItemUnit.UNIT
        return v

    @field_validator("description", mode="before")
    @classmethod
    def _none_description(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @property
    def line_subtotal(self) -> Decimal:
        return self.quantity * self.unit_price

    @property
    def line_tax(self) -> Decimal:
        return self.line_subtotal * self.tax_rate / HUNDRED


# ---------------------------------------------------------------------------
# Document snapshot
# ---------------------------------------------------------------------------


class DocumentFacts(BaseModel):
    """
    Finalized invoice or quote snapshot.

    ``subtotal``, ``tax_amount`` and ``total`` are the amounts recorded at
    finalization. They are displayed as-is; their agreement with the
    line items is checked by the readiness gate, not enforced here.
    """

    kind: DocumentKind = DocumentKind.INVOICE
    document_number: str = Field(
        default="",
        validation_alias=AliasChoices(
            "document_number",
            "documentNumber",
            "invoiceNumber",
            "quoteNumber",
        ),
    )
    status: str = "draft"
    issue_date: date
    due_date: Optional[date] = Field(
        default=None,
        validation_alias=AliasChoices("due_date", "dueDate", "validUntil"),
    )

    items: List[LineItem] = Field(default_factory=list)

    subtotal: Decimal = ZERO
    tax_amount: Decimal = ZERO
    total: Decimal = ZERO
    amount_paid: Decimal = ZERO
    balance_due: Optional[Decimal] = None

    payment_method: PaymentMethod = PaymentMethod.BANK_TRANSFER
    notes: Optional[str] = None

    model_config = _INPUT_MODEL_CONFIG

    @field_validator(
        "subtotal", "tax_amount", "total", "amount_paid", mode="before"
    )
    @classmethod
    def _coerce_totals(cls, v: Any, info) -> Decimal:
        return coerce_amount(v, field=info.field_name)

    @field_validator("balance_due", mode="before")
    @classmethod
    def _coerce_balance(cls, v: Any) -> Optional[Decimal]:
        if v is None:
            return None
        return coerce_amount(v, field="balance_due")

    @field_validator("payment_method", mode="before")
    @classmethod
    def _unknown_method_is_other(cls, v: Any) -> Any:
        if v is None:
            return PaymentMethod.BANK_TRANSFER
        if isinstance(v, PaymentMethod):
            return v
        if v not in {m.value for m in PaymentMethod}:
            return PaymentMethod.OTHER
        return v

    @field_validator("document_number", mode="before")
    @classmethod
    def _none_number(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @property
    def outstanding(self) -> Decimal:
        """Balance still due; derived from total and amount paid if absent."""
        if self.balance_due is not None:
            return self.balance_due
        return max(self.total - self.amount_paid, ZERO)


# ---------------------------------------------------------------------------
# Parties
# ---------------------------------------------------------------------------


class Address(BaseModel):
    street: Optional[str] = None
    zip_code: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("zip_code", "zipCode", "postal_code"),
    )
    city: Optional[str] = None
    country: Optional[str] = None

    model_config = _INPUT_MODEL_CONFIG


class BankDetails(BaseModel):
    iban: Optional[str] = None
    bic: Optional[str] = None
    bank_name: Optional[str] = None

    model_config = _INPUT_MODEL_CONFIG


class LogoAsset(BaseModel):
    """
    An already-resolved logo image.

    The engine performs no I/O: callers provide either inline base64 data
    or a URL that the serializer can fetch on its own terms.
    """

    media_type: str = "image/png"
    data: Optional[str] = None
    url: Optional[str] = None

    model_config = _INPUT_MODEL_CONFIG

    @property
    def source(self) -> Optional[str]:
        if self.data:
            if self.data.startswith("data:"):
                return self.data
            return f"data:{self.media_type};base64,{self.data}"
        return self.url or None


class PartyProfile(BaseModel):
    """
    Issuer or client record.

    Every field is optional; renderers omit whatever is missing.
    """

    name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("name", "companyName", "company_name"),
    )
    legal_form: Optional[str] = None
    address: Optional[Address] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None

    registration_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "registration_id", "registrationId", "siret"
        ),
    )
    vat_number: Optional[str] = None
    bank: Optional[BankDetails] = Field(
        default=None,
        validation_alias=AliasChoices("bank", "bankDetails", "bank_details"),
    )
    logo: Optional[LogoAsset] = None

    # Legal-mentions placeholder sources
    rcs_city: Optional[str] = None
    capital: Optional[Decimal] = None
    insurance_company: Optional[str] = None
    insurance_policy: Optional[str] = None

    model_config = _INPUT_MODEL_CONFIG

    @model_validator(mode="before")
    @classmethod
    def _lift_legacy_fields(cls, data: Any) -> Any:
        """
        Accept the flat banking fields and nested company info used by
        older user and client records.
        """
        if not isinstance(data, dict):
            return data

        data = dict(data)

        if not any(k in data for k in ("bank", "bankDetails", "bank_details")):
            flat = {
                key: data[key]
                for key in ("iban", "bic", "bankName", "bank_name")
                if data.get(key)
            }
            if flat:
                data["bank"] = flat

        company_info = data.get("companyInfo")
        if isinstance(company_info, dict):
            if not data.get("siret") and company_info.get("siret"):
                data["siret"] = company_info["siret"]

        logo = data.get("logo")
        if isinstance(logo, str):
            data["logo"] = (
                {"data": logo} if logo.startswith("data:") else {"url": logo}
            )

        return data

    @field_validator("capital", mode="before")
    @classmethod
    def _coerce_capital(cls, v: Any) -> Optional[Decimal]:
        if v is None or v == "":
            return None
        return coerce_amount(v, field="capital")

    @property
    def iban(self) -> Optional[str]:
        return self.bank.iban if self.bank and self.bank.iban else None
