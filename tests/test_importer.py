"""Tests for statement_ledger.importer -- reading, conversion and dispatch."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

import openpyxl
import pytest

from statement_ledger.importer import (
    detect_format,
    excel_to_csv,
    extract_text,
    find_data_start,
    import_file,
    read_records,
    read_statement,
)
from statement_ledger.models import CategoryRule, RuleSet

FIXTURES = Path(__file__).parent / "fixtures"


def _write_workbook(path: Path, rows: list[list[object]]) -> Path:
    wb = openpyxl.Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    wb.save(path)
    return path


# ---------------------------------------------------------------------------
# Format detection
# ---------------------------------------------------------------------------


class TestDetectFormat:
    def test_hdfc(self):
        assert detect_format("Date,Narration\n", "hdfc") == "hdfc"

    def test_indian_family_quoted_signature(self):
        text = "Date,Transaction Details,Debits,Credits,Balance\n"
        assert detect_format(text, "iob") == "iob"
        assert detect_format(text, "indian_bank") == "iob"

    def test_indian_family_fixed_column(self):
        text = "Account Statement,,,,,\nDate,Transaction Details,,Debits,Credits,Balance\n"
        assert detect_format(text, "indian_bank") == "indian_bank"
        assert detect_format(text, "iob") == "indian_bank"

    def test_signature_only_checked_on_first_line(self):
        text = "Account Statement\nDate,Transaction Details,Debits,Credits,Balance\n"
        assert detect_format(text, "iob") == "indian_bank"

    def test_unknown_bank_type(self):
        with pytest.raises(ValueError, match="Unknown bank type"):
            detect_format("", "sbi")


# ---------------------------------------------------------------------------
# CSV helpers
# ---------------------------------------------------------------------------


class TestRecords:
    def test_find_data_start_drops_preamble(self):
        text = "HDFC BANK\nAccount No,123\nDate,Narration,Withdrawal Amt.\n01/01/26,X,1.00"
        assert find_data_start(text).splitlines()[0] == "Date,Narration,Withdrawal Amt."

    def test_find_data_start_without_header(self):
        text = "a,b\n1,2"
        assert find_data_start(text) == text

    def test_read_records_trims_and_skips_blank_rows(self):
        text = "Date , Narration\n 01/01/26 , COFFEE \n,\n"
        assert read_records(text) == [{"Date": "01/01/26", "Narration": "COFFEE"}]


# ---------------------------------------------------------------------------
# extract_text dispatch
# ---------------------------------------------------------------------------


class TestExtractText:
    """Routing by declared bank type and auto-detection."""

    def test_hdfc(self):
        text = (FIXTURES / "hdfc_sample.csv").read_text(encoding="utf-8")
        txns = extract_text(text, "hdfc")
        assert len(txns) == 4

    def test_falls_back_to_generic(self):
        """A columnar file the HDFC parser does not recognize still parses."""
        text = (FIXTURES / "generic_sample.csv").read_text(encoding="utf-8")
        txns = extract_text(text, "hdfc")
        assert [t.reference_number for t in txns] == ["R001", "R002"]

    def test_indian_bank_declared_iob_file(self):
        text = (FIXTURES / "iob_sample.csv").read_text(encoding="utf-8")
        txns = extract_text(text, "indian_bank")
        assert len(txns) == 4
        assert txns[0].reference_number == "S12345678"

    def test_iob_declared_indian_bank_file(self):
        text = (FIXTURES / "indian_bank_sample.csv").read_text(encoding="utf-8")
        txns = extract_text(text, "iob")
        assert len(txns) == 4
        assert txns[0].reference_number == "506212345678"

    def test_header_only_is_empty_not_error(self):
        text = (FIXTURES / "hdfc_header_only.csv").read_text(encoding="utf-8")
        assert extract_text(text, "hdfc") == []

    def test_empty_text(self):
        assert extract_text("", "hdfc") == []
        assert extract_text("", "indian_bank") == []

    def test_rule_set_passed_through(self):
        text = (FIXTURES / "iob_sample.csv").read_text(encoding="utf-8")
        rules = RuleSet(category_rules=[CategoryRule(category="Dining", keyword="zomato")])
        txns = extract_text(text, "iob", rules)
        assert txns[0].category == "Dining"
        assert txns[1].category == "Uncategorized"


# ---------------------------------------------------------------------------
# File reading
# ---------------------------------------------------------------------------


class TestReadStatement:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_statement(tmp_path / "nope.csv")

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "statement.pdf"
        path.write_bytes(b"%PDF-1.4")
        with pytest.raises(ValueError, match="Unsupported file type"):
            read_statement(path)

    def test_csv_bom_is_stripped(self, tmp_path):
        path = tmp_path / "statement.csv"
        path.write_bytes(b"\xef\xbb\xbfDate,Narration\n")
        assert read_statement(path) == "Date,Narration\n"

    def test_undecodable_csv(self, tmp_path):
        path = tmp_path / "statement.csv"
        path.write_bytes(b"Date,Narration\n\xff\xfe\xfa\n")
        with pytest.raises(ValueError, match="Failed to read CSV file"):
            read_statement(path)

    def test_extension_is_case_insensitive(self, tmp_path):
        path = tmp_path / "STATEMENT.CSV"
        path.write_text("Date,Narration\n", encoding="utf-8")
        assert read_statement(path) == "Date,Narration\n"


class TestExcel:
    """Spreadsheets are converted to CSV text before dispatch."""

    def test_excel_to_csv(self, tmp_path):
        path = _write_workbook(
            tmp_path / "statement.xlsx",
            [
                ["Date", "Transaction Details", "Debits", "Credits", "Balance"],
                ["18-Feb-26", "S12345678 UPI/512345678901/DR/ZOMATO", "1,250.00", "-", "48,750.00"],
            ],
        )
        text = excel_to_csv(path)
        assert text.splitlines()[0] == "Date,Transaction Details,Debits,Credits,Balance"
        assert '"1,250.00"' in text

    def test_import_xlsx_iob(self, tmp_path):
        path = _write_workbook(
            tmp_path / "statement.xlsx",
            [
                ["Date", "Transaction Details", "Debits", "Credits", "Balance"],
                ["18-Feb-26", "S12345678 UPI/512345678901/DR/ZOMATO", "1,250.00", "-", "48,750.00"],
                ["20-Feb-26", "NEFT-IOBAN26051012345-ACME SALARY", "-", "75,000.00", "123,750.00"],
            ],
        )
        txns = import_file(path, "iob")

        assert len(txns) == 2
        assert txns[0].amount == Decimal("-1250.00")
        assert txns[1].reference_number == "IOBAN26051012345"

    def test_import_xlsx_hdfc_with_empty_cells(self, tmp_path):
        path = _write_workbook(
            tmp_path / "statement.xlsx",
            [
                ["HDFC BANK Ltd."],
                [],
                ["Date", "Narration", "Chq./Ref.No.", "Value Dt", "Withdrawal Amt.", "Deposit Amt."],
                ["01/01/26", "UPI-COTHAS COFFEE", "0000600112233445", "01/01/26", "250.00", None],
                ["02/01/26", "NEFT CR-RENTLY-SALARY", "NEFTN1", "02/01/26", None, "1000.00"],
            ],
        )
        txns = import_file(path, "hdfc")

        assert [t.amount for t in txns] == [Decimal("-250.00"), Decimal("1000.00")]
        assert txns[0].category == "Coffee"

    def test_corrupt_workbook(self, tmp_path):
        path = tmp_path / "broken.xlsx"
        path.write_bytes(b"this is not a spreadsheet")
        with pytest.raises(ValueError, match="Failed to read Excel file"):
            import_file(path, "hdfc")

    def test_date_cells_become_iso_text(self, tmp_path):
        path = _write_workbook(
            tmp_path / "statement.xlsx",
            [
                ["Date", "Transaction Details", "Debits", "Credits", "Balance"],
                [datetime(2026, 2, 18), "S12345678 UPI/512345678901/DR/ZOMATO", 1250.0, "-", 48750.0],
            ],
        )
        line = excel_to_csv(path).splitlines()[1]
        assert line == "2026-02-18,S12345678 UPI/512345678901/DR/ZOMATO,1250,-,48750"

    def test_import_xlsx_iob_with_date_cells(self, tmp_path):
        path = _write_workbook(
            tmp_path / "statement.xlsx",
            [
                ["Date", "Transaction Details", "Debits", "Credits", "Balance"],
                [datetime(2026, 2, 18), "S12345678 UPI/512345678901/DR/ZOMATO", 1250.0, "-", 48750.0],
            ],
        )
        txns = import_file(path, "iob")

        assert len(txns) == 1
        assert txns[0].date == "2026-02-18"
        assert txns[0].amount == Decimal("-1250.00")
        assert txns[0].reference_number == "S12345678"

    def test_import_xlsx_hdfc_with_date_cells(self, tmp_path):
        path = _write_workbook(
            tmp_path / "statement.xlsx",
            [
                ["Date", "Narration", "Chq./Ref.No.", "Value Dt", "Withdrawal Amt.", "Deposit Amt."],
                [
                    datetime(2026, 1, 31),
                    "UPI-COTHAS COFFEE",
                    "0000600112233445",
                    datetime(2026, 1, 31),
                    250.0,
                    None,
                ],
            ],
        )
        txns = import_file(path, "hdfc")

        assert len(txns) == 1
        assert txns[0].date == "2026-01-31"
        assert txns[0].amount == Decimal("-250.00")
        assert txns[0].category == "Coffee"

    def test_import_xlsx_indian_bank_with_date_cells(self, tmp_path):
        """Continuation rows still merge when the date column holds real dates."""
        path = _write_workbook(
            tmp_path / "statement.xlsx",
            [
                ["Date", "Transaction Details", None, "Debits", "Credits", "Balance"],
                [datetime(2025, 3, 3), "TRF/UPI/506212345678/DR/SWIGGY", None, 600.0, "-", 9400.0],
                [None, "order 4411", None, None, None, None],
            ],
        )
        txns = import_file(path, "indian_bank")

        assert len(txns) == 1
        assert txns[0].date == "2025-03-03"
        assert txns[0].description == "TRF/UPI/506212345678/DR/SWIGGY order 4411"
        assert txns[0].amount == Decimal("-600.00")
        assert txns[0].reference_number == "506212345678"
