"""HDFC Bank statement parser (default columnar format).

HDFC CSV format (after the account-summary preamble is cut off):
    Date, Narration, Chq./Ref.No., Value Dt, Withdrawal Amt., Deposit Amt., Closing Balance

Dates are ``DD/MM/YY``.  Masked rows (``****``) and the statement
summary rows (opening/closing balance) share the Date column and are
skipped.

Sign convention:
    Withdrawal Amt. -> negative amount.
    Deposit Amt.    -> positive amount.
    Rows where neither is positive are dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal

from statement_ledger.categorizer import build_transaction
from statement_ledger.models import RuleSet, Transaction
from statement_ledger.normalize import ZERO, is_iso_date, parse_amount, to_iso_date
from statement_ledger.tables import HDFC_TABLE

logger = logging.getLogger(__name__)

DATE_COLUMN = "Date"
NARRATION_COLUMN = "Narration"
WITHDRAWAL_COLUMN = "Withdrawal Amt."
DEPOSIT_COLUMN = "Deposit Amt."
REFERENCE_COLUMN = "Chq./Ref.No."

MASK_TOKEN = "****"
SUMMARY_WORDS = ("opening", "closing", "summary")


@dataclass(frozen=True)
class HdfcRow:
    """The fields of one HDFC record; absent columns read as ``""``."""

    date: str
    narration: str
    withdrawal: str
    deposit: str
    reference: str

    @classmethod
    def from_record(cls, record: Mapping[str, str | None]) -> HdfcRow:
        return cls(
            date=_field(record, DATE_COLUMN),
            narration=_field(record, NARRATION_COLUMN),
            withdrawal=_field(record, WITHDRAWAL_COLUMN),
            deposit=_field(record, DEPOSIT_COLUMN),
            reference=_field(record, REFERENCE_COLUMN),
        )


def _field(record: Mapping[str, str | None], column: str) -> str:
    value = record.get(column)
    if value is None:
        return ""
    return value.strip()


def _is_transaction_row(row: HdfcRow) -> bool:
    if not row.date or MASK_TOKEN in row.date:
        return False
    date_lower = row.date.lower()
    if any(word in date_lower for word in SUMMARY_WORDS):
        return False
    return bool(row.narration)


def _signed_amount(row: HdfcRow) -> Decimal:
    withdrawal = parse_amount(row.withdrawal)
    if withdrawal > 0:
        return -withdrawal
    deposit = parse_amount(row.deposit)
    if deposit > 0:
        return deposit
    return ZERO


def extract(
    records: Iterable[Mapping[str, str | None]],
    rule_set: RuleSet | None = None,
) -> list[Transaction]:
    """Extract transactions from HDFC header-keyed records.

    Args:
        records: Rows keyed by the HDFC header names, e.g. from
            ``csv.DictReader``.
        rule_set: User rules to classify with, or ``None`` for the
            built-in HDFC table.

    Returns:
        Transactions in source order.  Rows with an unresolved date or a
        zero amount are dropped.
    """
    transactions: list[Transaction] = []

    for row_ordinal, record in enumerate(records):
        row = HdfcRow.from_record(record)
        if not _is_transaction_row(row):
            logger.debug("hdfc: skipped non-transaction row %d (%r)", row_ordinal, row.date)
            continue

        txn_date = to_iso_date(row.date)
        amount = _signed_amount(row)
        if not is_iso_date(txn_date) or amount == 0:
            logger.debug(
                "hdfc: dropped row %d (date=%r, amount=%s)", row_ordinal, row.date, amount
            )
            continue

        transactions.append(
            build_transaction(
                date=txn_date,
                description=row.narration,
                amount=amount,
                reference_number=row.reference or None,
                rule_set=rule_set,
                table=HDFC_TABLE,
            )
        )

    return transactions
