"""Tests for statement_ledger.normalize -- date and amount normalizers."""

from decimal import Decimal

import pytest

from statement_ledger.normalize import (
    is_iso_date,
    normalize_any_date,
    parse_amount,
    parse_signed_amount,
    split_quoted_line,
    to_iso_date,
    to_iso_date_dash,
    to_iso_date_long,
)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


class TestToIsoDate:
    """DD/MM/YY slash dates."""

    def test_two_digit_year(self):
        assert to_iso_date("31/01/26") == "2026-01-31"

    def test_four_digit_year(self):
        assert to_iso_date("05/12/2025") == "2025-12-05"

    def test_pads_single_digits(self):
        assert to_iso_date("1/2/26") == "2026-02-01"

    def test_wrong_shape_passes_through(self):
        """Input that is not three numeric parts comes back unchanged."""
        assert to_iso_date("2026-01-31") == "2026-01-31"
        assert to_iso_date("Opening Balance") == "Opening Balance"
        assert to_iso_date("aa/bb/cc") == "aa/bb/cc"


class TestToIsoDateLong:
    """DD Mon YYYY long dates."""

    def test_basic(self):
        assert to_iso_date_long("03 Mar 2025") == "2025-03-03"

    def test_month_is_case_insensitive(self):
        assert to_iso_date_long("15 DEC 2024") == "2024-12-15"

    @pytest.mark.parametrize("text", ["", "03 Foo 2025", "Mar 2025", "xx Mar 2025"])
    def test_failure_returns_empty_string(self, text):
        assert to_iso_date_long(text) == ""


class TestToIsoDateDash:
    """DD-MMM-YY dash dates."""

    def test_basic(self):
        assert to_iso_date_dash("18-Feb-26") == "2026-02-18"

    def test_unknown_month_passes_through(self):
        assert to_iso_date_dash("18-Foo-26") == "18-Foo-26"

    def test_wrong_shape_passes_through(self):
        assert to_iso_date_dash("18 Feb 26") == "18 Feb 26"


class TestNormalizeAnyDate:
    """Best-effort conversion used by the generic parser."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("2026-01-03", "2026-01-03"),
            ("04/01/26", "2026-01-04"),
            ("18-Feb-26", "2026-02-18"),
            ("03 Mar 2025", "2025-03-03"),
        ],
    )
    def test_supported_shapes(self, text, expected):
        assert normalize_any_date(text) == expected

    def test_unresolvable_passes_through(self):
        assert normalize_any_date("not a date") == "not a date"


class TestIsIsoDate:
    def test_valid(self):
        assert is_iso_date("2024-02-29")

    def test_impossible_calendar_date(self):
        """Shape alone is not enough: the date must exist."""
        assert not is_iso_date("2026-02-30")
        assert not is_iso_date("2026-13-01")

    def test_wrong_shape(self):
        assert not is_iso_date("")
        assert not is_iso_date("31/01/26")
        assert not is_iso_date("2026-1-31")


# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------


class TestParseAmount:
    """Unsigned debit/credit cell parsing."""

    def test_plain(self):
        assert parse_amount("600.00") == Decimal("600.00")

    def test_currency_prefix_and_separators(self):
        assert parse_amount("INR 50,000.00") == Decimal("50000.00")
        assert parse_amount("inr600") == Decimal("600.00")

    def test_always_non_negative(self):
        assert parse_amount("-42.50") == Decimal("42.50")

    @pytest.mark.parametrize("text", [None, "", "   ", "-", "abc", "NaN", "Infinity"])
    def test_missing_or_garbage_is_zero(self, text):
        assert parse_amount(text) == Decimal("0")

    def test_quantized_to_cents(self):
        assert parse_amount("1200.5") == Decimal("1200.50")
        assert str(parse_amount("1200.5")) == "1200.50"


class TestParseSignedAmount:
    def test_keeps_sign(self):
        assert parse_signed_amount("-180.00") == Decimal("-180.00")
        assert parse_signed_amount("85,000.00") == Decimal("85000.00")

    def test_dash_sentinel(self):
        assert parse_signed_amount("-") == Decimal("0")


# ---------------------------------------------------------------------------
# Line splitting
# ---------------------------------------------------------------------------


class TestSplitQuotedLine:
    def test_commas_inside_quotes_do_not_split(self):
        line = '18-Feb-26,"S12345678 UPI/DR","1,250.00",-,"48,750.00"\n'
        assert split_quoted_line(line) == [
            "18-Feb-26",
            "S12345678 UPI/DR",
            "1,250.00",
            "-",
            "48,750.00",
        ]

    def test_empty_fields_are_kept(self):
        assert split_quoted_line(",order 4411,,,,") == ["", "order 4411", "", "", "", ""]

    def test_strips_crlf(self):
        assert split_quoted_line("a,b\r\n") == ["a", "b"]

    def test_doubled_quote_is_literal(self):
        assert split_quoted_line('"say ""hi""",x') == ['say "hi"', "x"]

    def test_empty_line(self):
        assert split_quoted_line("") == [""]
