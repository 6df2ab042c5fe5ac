"""Indian Bank statement parser (fixed-column line format).

Indian Bank exports a loosely structured CSV: an account-details
preamble, then transaction rows whose fields sit at fixed column
offsets, with the column header block repeated on every page::

    Date,Transaction Details,,Debits,Credits,Balance
    03 Mar 2025,TRF/UPI/506212345678/DR/SWIGGY,,INR 600.00,-,"INR 9,400.00"
    ,swiggy@ybl/Payment from Phone,,,,
    ,order 4411,,,,
    04 Mar 2025,NEFT/SBIN/N065250123456/ACME PAYROLL,,-,"INR 50,000.00","INR 59,400.00"

A long narration wraps onto *continuation rows* whose date column is
empty.  The parser therefore runs a small state machine:

- A **date row** (column 0 shaped like ``DD Mon YYYY``, or an ISO date
  in a converted spreadsheet) flushes the
  transaction accumulated so far and starts a new one.
- A **continuation row** (empty date, non-empty details) appends its
  details to the open transaction, space-joined.
- Header rows, blank lines and anything else are ignored.
- End of input flushes the last open transaction.

A flush resolves the sign (debit -> negative, else credit -> positive)
and silently drops the transaction when both are zero; that is how stray
balance/summary rows are filtered out.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from decimal import Decimal

from statement_ledger.categorizer import build_transaction
from statement_ledger.models import RuleSet, Transaction
from statement_ledger.normalize import (
    ZERO,
    is_iso_date,
    parse_amount,
    split_quoted_line,
    to_iso_date_long,
)
from statement_ledger.references import extract_reference_fixed
from statement_ledger.tables import INDIAN_BANK_TABLE

logger = logging.getLogger(__name__)

DATE_COL = 0
DESCRIPTION_COL = 1
DEBIT_COL = 3
CREDIT_COL = 4

HEADER_DATE = "Date"
HEADER_SIGNATURE = "Transaction Details"

DATE_ROW_RE = re.compile(r"^\d{2}\s+[A-Za-z]{3}\s+\d{4}$")


@dataclass
class _Pending:
    """The transaction being accumulated across physical lines."""

    date: str = ""
    description_parts: list[str] = field(default_factory=list)
    debit: Decimal = ZERO
    credit: Decimal = ZERO

    def is_open(self) -> bool:
        return bool(self.date or self.description_parts or self.debit or self.credit)


def _is_date_cell(cell: str) -> bool:
    # Spreadsheet exports carry ISO dates instead of "DD Mon YYYY".
    return bool(DATE_ROW_RE.match(cell)) or is_iso_date(cell)


def _column(columns: list[str], index: int) -> str:
    if index < len(columns):
        return columns[index].strip()
    return ""


def _flush(pending: _Pending, rule_set: RuleSet | None) -> Transaction | None:
    if not pending.is_open():
        return None

    if pending.debit > 0:
        amount = -pending.debit
    elif pending.credit > 0:
        amount = pending.credit
    else:
        logger.debug("indian_bank: dropped zero-amount span starting %r", pending.date)
        return None

    txn_date = pending.date if is_iso_date(pending.date) else to_iso_date_long(pending.date)
    description = " ".join(pending.description_parts).strip()
    if not is_iso_date(txn_date) or not description:
        logger.debug("indian_bank: dropped span with date=%r", pending.date)
        return None

    return build_transaction(
        date=txn_date,
        description=description,
        amount=amount,
        reference_number=extract_reference_fixed(description),
        rule_set=rule_set,
        table=INDIAN_BANK_TABLE,
    )


def iter_transactions(
    lines: Iterable[str],
    rule_set: RuleSet | None = None,
) -> Iterator[Transaction]:
    """Yield transactions from Indian Bank CSV lines, one per date-row span.

    Only the current span is held in memory, so *lines* may be a file
    object or any other lazy iterator.

    Args:
        lines: Raw CSV lines, with or without trailing newlines.
        rule_set: User rules to classify with, or ``None`` for the
            built-in Indian Bank table.
    """
    pending = _Pending()

    for line_no, line in enumerate(lines):
        if not line.strip():
            continue

        columns = split_quoted_line(line)
        date_cell = _column(columns, DATE_COL)
        description_cell = _column(columns, DESCRIPTION_COL)

        if date_cell == HEADER_DATE and description_cell == HEADER_SIGNATURE:
            continue

        if _is_date_cell(date_cell):
            txn = _flush(pending, rule_set)
            if txn is not None:
                yield txn
            pending = _Pending(
                date=date_cell,
                description_parts=[description_cell] if description_cell else [],
                debit=parse_amount(_column(columns, DEBIT_COL)),
                credit=parse_amount(_column(columns, CREDIT_COL)),
            )
        elif not date_cell and description_cell:
            if pending.date:
                pending.description_parts.append(description_cell)
            else:
                logger.debug("indian_bank: continuation line %d before any date row", line_no)
        else:
            logger.debug("indian_bank: ignored line %d", line_no)

    txn = _flush(pending, rule_set)
    if txn is not None:
        yield txn


def extract(lines: Iterable[str], rule_set: RuleSet | None = None) -> list[Transaction]:
    """Extract all transactions from Indian Bank CSV lines."""
    return list(iter_transactions(lines, rule_set))
