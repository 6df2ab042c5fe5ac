"""Statement import: file reading, Excel-to-CSV conversion, and dispatch.

Every extractor works on CSV-shaped text, so spreadsheets are decoded
first (first sheet only) and re-encoded as CSV.  Routing then depends on
the caller-declared bank type:

- ``hdfc`` -- header-keyed records go to the HDFC parser; if it finds
  nothing, the same records are retried with the generic parser.
- ``indian_bank`` / ``iob`` -- the first line decides the layout: the
  IOB header signature selects the quoted-CSV parser, anything else the
  Indian Bank fixed-column parser.

Only file-level problems raise (missing file, unsupported extension,
undecodable file).  A file that parses but yields no transactions
returns an empty list.
"""

from __future__ import annotations

import csv
import io
import logging
from datetime import date, datetime
from pathlib import Path

import pandas as pd

from statement_ledger.models import RuleSet, Transaction
from statement_ledger.parsers import (
    BANK_TYPES,
    DEFAULT_BANK_TYPE,
    INDIAN_BANK_FAMILY,
    get_parser,
    iob,
)

logger = logging.getLogger(__name__)

EXCEL_EXTENSIONS = frozenset({".xlsx", ".xls"})
CSV_EXTENSIONS = frozenset({".csv"})
SUPPORTED_EXTENSIONS = EXCEL_EXTENSIONS | CSV_EXTENSIONS


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


def _cell_text(value: object) -> str:
    """Render one spreadsheet cell the way a CSV export would show it.

    Date cells become ``YYYY-MM-DD``, which every extractor accepts, and
    whole-number floats lose their trailing ``.0``.
    """
    if value is None or value is pd.NaT:
        return ""
    if isinstance(value, (datetime, date)):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def excel_to_csv(file_path: Path) -> str:
    """Decode the first sheet of a spreadsheet and return it as CSV text.

    Empty cells become empty fields and date cells are written as ISO
    dates, so the result lines up with what the bank's own CSV export
    looks like.

    Raises:
        ValueError: If the spreadsheet cannot be decoded.
    """
    try:
        frame = pd.read_excel(file_path, sheet_name=0, header=None, dtype=object, na_filter=False)
    except Exception as exc:
        raise ValueError(f"Failed to read Excel file: {file_path} - {exc}") from exc
    return frame.map(_cell_text).to_csv(index=False, header=False, lineterminator="\n")


def read_statement(file_path: Path) -> str:
    """Read a statement file as CSV text, converting spreadsheets.

    Args:
        file_path: Path to a ``.csv``, ``.xlsx`` or ``.xls`` file.

    Returns:
        The statement as CSV text.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the extension is unsupported or the file cannot
            be decoded.
    """
    file_path = Path(file_path)
    if not file_path.is_file():
        raise FileNotFoundError(f"File does not exist: {file_path}")

    ext = file_path.suffix.lower()
    if ext in EXCEL_EXTENSIONS:
        logger.info("Converting %s to CSV", file_path.name)
        return excel_to_csv(file_path)
    if ext in CSV_EXTENSIONS:
        try:
            return file_path.read_text(encoding="utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ValueError(f"Failed to read CSV file: {file_path} - {exc}") from exc
    raise ValueError(f"Unsupported file type: {ext or file_path.name}")


def find_data_start(csv_text: str) -> str:
    """Drop any preamble above the column header row.

    The header row is the first line mentioning ``Date`` together with
    ``Narration`` or ``Description``.  Without such a line the text is
    returned unchanged.
    """
    lines = csv_text.splitlines()
    for index, line in enumerate(lines):
        if "Date" in line and ("Narration" in line or "Description" in line):
            if index > 0:
                logger.debug("Skipping %d preamble line(s)", index)
            return "\n".join(lines[index:])
    return csv_text


def read_records(csv_text: str) -> list[dict[str, str]]:
    """Parse CSV text into header-keyed records.

    Keys and values are trimmed and blank rows are skipped.
    """
    reader = csv.DictReader(io.StringIO(find_data_start(csv_text)))
    records: list[dict[str, str]] = []
    for row in reader:
        record = {
            (key.strip() if isinstance(key, str) else key): (
                value.strip() if isinstance(value, str) else value
            )
            for key, value in row.items()
        }
        if not any(isinstance(v, str) and v for v in record.values()):
            continue
        records.append(record)
    return records


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def detect_format(csv_text: str, bank_type: str) -> str:
    """Return the parser name that should handle *csv_text*.

    Raises:
        ValueError: If *bank_type* is not a known bank type.
    """
    if bank_type not in BANK_TYPES:
        raise ValueError(
            f"Unknown bank type: {bank_type!r}. Expected one of: {', '.join(BANK_TYPES)}"
        )
    if bank_type in INDIAN_BANK_FAMILY:
        first_line = csv_text.split("\n", 1)[0]
        return "iob" if iob.is_quoted_format(first_line) else "indian_bank"
    return "hdfc"


def extract_text(
    csv_text: str,
    bank_type: str = DEFAULT_BANK_TYPE,
    rule_set: RuleSet | None = None,
) -> list[Transaction]:
    """Extract transactions from CSV text.

    Args:
        csv_text: The statement as CSV text.
        bank_type: One of :data:`~statement_ledger.parsers.BANK_TYPES`.
        rule_set: User rules, or ``None`` to use the bank family's
            built-in tables.

    Returns:
        The extracted transactions in source order, possibly empty.
    """
    parser_name = detect_format(csv_text, bank_type)
    logger.info("Routing %s statement to the %s parser", bank_type, parser_name)

    if parser_name in INDIAN_BANK_FAMILY:
        return get_parser(parser_name)(io.StringIO(csv_text), rule_set)

    records = read_records(csv_text)
    transactions = get_parser("hdfc")(records, rule_set)
    if not transactions and records:
        logger.info("No HDFC rows found, retrying with the generic parser")
        transactions = get_parser("generic")(records, rule_set)
    return transactions


def import_file(
    file_path: Path,
    bank_type: str = DEFAULT_BANK_TYPE,
    rule_set: RuleSet | None = None,
) -> list[Transaction]:
    """Read a statement file and extract its transactions.

    See :func:`read_statement` for the errors raised on unreadable files.
    """
    return extract_text(read_statement(file_path), bank_type, rule_set)
