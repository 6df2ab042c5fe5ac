"""Generic fallback parser for unrecognized columnar statements.

Used when the HDFC parser finds nothing in a file.  Column identities
are discovered from the header names (case-insensitive substring):

    date        -> first column containing "date"
    description -> first column containing "description", "narration" or "memo"
    amount      -> first column containing "amount"
    reference   -> first column containing "chq", "ref" or "reference"

The amount column is a single signed value; it is not split into
debit/credit.  A row survives only if some date-like column is non-blank.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from statement_ledger.categorizer import build_transaction
from statement_ledger.models import RuleSet, Transaction
from statement_ledger.normalize import is_iso_date, normalize_any_date, parse_signed_amount
from statement_ledger.tables import HDFC_TABLE

logger = logging.getLogger(__name__)

DATE_HINTS = ("date",)
DESCRIPTION_HINTS = ("description", "narration", "memo")
AMOUNT_HINTS = ("amount",)
REFERENCE_HINTS = ("chq", "ref", "reference")


def find_column(columns: Sequence[str], hints: Sequence[str]) -> str | None:
    """Return the first column whose lowercased name contains any hint."""
    for column in columns:
        name = column.lower()
        if any(hint in name for hint in hints):
            return column
    return None


def _value(record: Mapping[str, str | None], column: str | None) -> str:
    if column is None:
        return ""
    value = record.get(column)
    if value is None:
        return ""
    return value.strip()


def _has_date_value(record: Mapping[str, str | None]) -> bool:
    return any(
        key is not None and "date" in key.lower() and _value(record, key)
        for key in record
    )


def extract(
    records: Iterable[Mapping[str, str | None]],
    rule_set: RuleSet | None = None,
) -> list[Transaction]:
    """Extract transactions by sniffing column names.

    Args:
        records: Header-keyed rows in any layout.
        rule_set: User rules to classify with, or ``None`` for the
            built-in HDFC table.

    Returns:
        Transactions in source order.  Rows with an unresolved date or a
        zero amount are dropped.
    """
    transactions: list[Transaction] = []

    for row_ordinal, record in enumerate(records):
        if not _has_date_value(record):
            continue

        columns = [key for key in record if key is not None]
        date_col = find_column(columns, DATE_HINTS)
        desc_col = find_column(columns, DESCRIPTION_HINTS)
        amount_col = find_column(columns, AMOUNT_HINTS)
        ref_col = find_column(columns, REFERENCE_HINTS)

        txn_date = normalize_any_date(_value(record, date_col))
        amount = parse_signed_amount(_value(record, amount_col))
        if not is_iso_date(txn_date) or amount == 0:
            logger.debug("generic: dropped row %d (date=%r, amount=%s)", row_ordinal, txn_date, amount)
            continue

        transactions.append(
            build_transaction(
                date=txn_date,
                description=_value(record, desc_col),
                amount=amount,
                reference_number=_value(record, ref_col) or None,
                rule_set=rule_set,
                table=HDFC_TABLE,
            )
        )

    return transactions
