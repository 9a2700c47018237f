from datetime import date
from decimal import Decimal

import pytest

from invoice_engine.app.rendering.formatting import (
    format_amount,
    format_currency,
    format_date,
    format_percentage,
)
from invoice_engine.app.utils.numbers import coerce_amount, coerce_rate, parse_decimal


@pytest.mark.parametrize(
    "value, expected",
    [
        (Decimal("1234.56"), "1 234,56 €"),
        (Decimal("0"), "0,00 €"),
        (Decimal("1470"), "1 470,00 €"),
        (Decimal("1234567.891"), "1 234 567,89 €"),
        (Decimal("0.005"), "0,01 €"),
        (Decimal("2.675"), "2,68 €"),
        (Decimal("-12.5"), "-12,50 €"),
        ("not a number", "0,00 €"),
    ],
)
def test_format_currency(value, expected):
    assert format_currency(value) == expected


def test_format_amount_has_no_symbol():
    assert format_amount(Decimal("10000")) == "10 000,00"


@pytest.mark.parametrize(
    "rate, expected",
    [
        (Decimal("20"), "20"),
        (Decimal("20.00"), "20"),
        (Decimal("5.5"), "5,5"),
        (Decimal("2.10"), "2,1"),
        (Decimal("0"), "0"),
        (Decimal("100"), "100"),
    ],
)
def test_format_percentage(rate, expected):
    assert format_percentage(rate) == expected


def test_format_date():
    assert format_date(date(2026, 3, 2)) == "02/03/2026"
    assert format_date(None) == ""


# ---------------------------------------------------------------------------
# Numeric coercion
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "raw, expected",
    [
        ("12,5", Decimal("12.5")),
        ("1 234,50", Decimal("1234.50")),
        ("1\u00a0234,50", Decimal("1234.50")),
        (0.1, Decimal("0.1")),
        (7, Decimal("7")),
    ],
)
def test_parse_decimal_accepts_common_spellings(raw, expected):
    assert parse_decimal(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "abc", "NaN", "Infinity", True, [1]])
def test_parse_decimal_rejects_garbage(raw):
    assert parse_decimal(raw) is None


def test_coerce_amount_logs_and_zeroes_bad_input(caplog):
    with caplog.at_level("WARNING", logger="invoice_engine.app.utils.numbers"):
        assert coerce_amount("-4", field="quantity") == Decimal("0")
        assert coerce_amount("douze", field="quantity") == Decimal("0")

    assert len(caplog.records) == 2


def test_coerce_amount_does_not_log_missing_values(caplog):
    with caplog.at_level("WARNING", logger="invoice_engine.app.utils.numbers"):
        assert coerce_amount(None) == Decimal("0")
        assert coerce_amount("") == Decimal("0")

    assert caplog.records == []


def test_coerce_rate_bounds():
    assert coerce_rate("100") == Decimal("100")
    assert coerce_rate("100.01") == Decimal("0")
    assert coerce_rate("-1") == Decimal("0")


def test_format_currency_beyond_default_decimal_precision():
    assert format_currency(Decimal("1e30")) == "1 " + " ".join(["000"] * 10) + ",00 €"
    assert format_amount(Decimal("123456789012345678901234567890.125")).endswith(
        "567 890,13"
    )
