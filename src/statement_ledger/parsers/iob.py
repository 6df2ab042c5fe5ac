"""Indian Overseas Bank statement parser (quoted CSV format).

IOB CSV format (one row per transaction, no continuation rows):
    Date, Transaction Details, Debits, Credits, Balance

Example::

    Date,Transaction Details,Debits,Credits,Balance
    18-Feb-26,"S12345678 UPI/512345678901/DR/ZOMATO","1,250.00",-,"48,750.00"

Dates are ``DD-MMM-YY``.  ``-`` or an empty cell means "no amount".

Sign convention:
    Debits  -> negative amount.
    Credits -> positive amount.
    Rows where neither is positive are dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from statement_ledger.categorizer import build_transaction
from statement_ledger.models import RuleSet, Transaction
from statement_ledger.normalize import is_iso_date, parse_amount, split_quoted_line, to_iso_date_dash
from statement_ledger.references import extract_reference_quoted
from statement_ledger.tables import IOB_TABLE

logger = logging.getLogger(__name__)

HEADER_SIGNATURE = "Date,Transaction Details,Debits,Credits,Balance"

MIN_COLUMNS = 5


def is_quoted_format(first_line: str) -> bool:
    """Return True if *first_line* carries the IOB header signature."""
    return HEADER_SIGNATURE in first_line


def extract(lines: Iterable[str], rule_set: RuleSet | None = None) -> list[Transaction]:
    """Extract transactions from IOB CSV lines.

    The first line is the header and is always skipped.

    Args:
        lines: Raw CSV lines, header first.
        rule_set: User rules to classify with, or ``None`` for the
            built-in IOB table.

    Returns:
        Transactions in source order.
    """
    transactions: list[Transaction] = []

    for line_no, line in enumerate(lines):
        if line_no == 0 or not line.strip():
            continue

        columns = split_quoted_line(line)
        if len(columns) < MIN_COLUMNS:
            logger.debug("iob: skipped short line %d (%d columns)", line_no, len(columns))
            continue

        txn_date = to_iso_date_dash(columns[0].strip())
        description = columns[1].strip()
        debit = parse_amount(columns[2])
        credit = parse_amount(columns[3])

        if debit > 0:
            amount = -debit
        elif credit > 0:
            amount = credit
        else:
            logger.debug("iob: skipped zero-amount line %d", line_no)
            continue

        if not is_iso_date(txn_date) or not description:
            logger.debug("iob: skipped line %d (date=%r)", line_no, columns[0])
            continue

        transactions.append(
            build_transaction(
                date=txn_date,
                description=description,
                amount=amount,
                reference_number=extract_reference_quoted(description),
                rule_set=rule_set,
                table=IOB_TABLE,
            )
        )

    return transactions
