"""Date and amount normalizers for bank statement fields.

Every function here is total: malformed input never raises.  Dates that
cannot be resolved come back as a pass-through or empty-string sentinel,
and amounts that cannot be parsed come back as zero.  Dropping such rows
is the extractor's job (see :func:`is_iso_date`).

Three date shapes are supported, one function each:

- ``DD/MM/YY``     -> :func:`to_iso_date`       (pass-through on failure)
- ``DD Mon YYYY``  -> :func:`to_iso_date_long`  (empty string on failure)
- ``DD-MMM-YY``    -> :func:`to_iso_date_dash`  (pass-through on failure)
"""

from __future__ import annotations

import csv
import re
from datetime import date
from decimal import Decimal, InvalidOperation

ZERO = Decimal("0")

_CENTS = Decimal("0.01")

MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Currency code prefix, e.g. "INR 50,000.00" or "inr600".
_CURRENCY_PREFIX_RE = re.compile(r"^\s*INR\s*", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def _format_iso(year: int, month: int, day: int) -> str:
    if year < 100:
        year += 2000
    return f"{year:04d}-{month:02d}-{day:02d}"


def to_iso_date(text: str) -> str:
    """Convert ``DD/MM/YY`` to ``YYYY-MM-DD``.

    Example: ``"31/01/26"`` -> ``"2026-01-31"``.  Two-digit years are
    taken to be in the 2000s.  Input that does not split into three
    numeric parts is returned unchanged.
    """
    stripped = text.strip()
    parts = stripped.split("/")
    if len(parts) != 3:
        return text
    try:
        day, month, year = (int(p) for p in parts)
    except ValueError:
        return text
    return _format_iso(year, month, day)


def to_iso_date_long(text: str) -> str:
    """Convert ``DD Mon YYYY`` to ``YYYY-MM-DD``.

    Example: ``"03 Mar 2025"`` -> ``"2025-03-03"``.  The month name is a
    case-insensitive three-letter abbreviation.  Returns an empty string
    when the input has the wrong shape or the month is unknown.
    """
    parts = text.split()
    if len(parts) != 3:
        return ""
    month = MONTHS.get(parts[1].lower())
    if month is None:
        return ""
    try:
        day = int(parts[0])
        year = int(parts[2])
    except ValueError:
        return ""
    return _format_iso(year, month, day)


def to_iso_date_dash(text: str) -> str:
    """Convert ``DD-MMM-YY`` to ``YYYY-MM-DD``.

    Example: ``"18-Feb-26"`` -> ``"2026-02-18"``.  Input with the wrong
    shape or an unknown month is returned unchanged.
    """
    parts = text.strip().split("-")
    if len(parts) != 3:
        return text
    month = MONTHS.get(parts[1].strip().lower())
    if month is None:
        return text
    try:
        day = int(parts[0])
        year = int(parts[2])
    except ValueError:
        return text
    return _format_iso(year, month, day)


def normalize_any_date(text: str) -> str:
    """Best-effort conversion of a date in any supported shape to ISO.

    Tries ISO itself, then the slash, dash, and long formats in turn.
    Returns the input unchanged if none of them resolves.
    """
    stripped = text.strip()
    if is_iso_date(stripped):
        return stripped
    for convert in (to_iso_date, to_iso_date_dash, to_iso_date_long):
        candidate = convert(stripped)
        if is_iso_date(candidate):
            return candidate
    return text


def is_iso_date(text: str) -> bool:
    """Return True if *text* is a real calendar date in ``YYYY-MM-DD`` form."""
    if not text or not _ISO_DATE_RE.match(text):
        return False
    try:
        date.fromisoformat(text)
    except ValueError:
        return False
    return True


# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------


def _to_decimal(text: str | None) -> Decimal:
    if text is None:
        return ZERO
    cleaned = text.strip()
    if not cleaned or cleaned == "-":
        return ZERO
    cleaned = _CURRENCY_PREFIX_RE.sub("", cleaned).replace(",", "").strip()
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return ZERO
    if not value.is_finite():
        return ZERO
    return value.quantize(_CENTS)


def parse_amount(text: str | None) -> Decimal:
    """Parse a debit or credit cell into a non-negative Decimal.

    Handles plain decimals (``"600.00"``), ``INR``-prefixed values with
    thousands separators (``"INR 50,000.00"``), and the ``"-"`` sentinel
    meaning "no amount".  Empty, missing, or unparseable input yields
    zero.  The sign is applied by the caller, depending on which column
    the value came from.
    """
    return abs(_to_decimal(text))


def parse_signed_amount(text: str | None) -> Decimal:
    """Parse a single signed amount cell, keeping its sign.

    Same cleanup as :func:`parse_amount`; used where a statement has one
    amount column instead of a debit/credit pair.
    """
    return _to_decimal(text)


# ---------------------------------------------------------------------------
# Line splitting
# ---------------------------------------------------------------------------


def split_quoted_line(line: str) -> list[str]:
    """Split one CSV line on commas, honoring double quotes.

    Commas inside a quoted field do not split, the quotes themselves are
    dropped, and a doubled quote inside a quoted field is a literal
    quote.  Fields are returned untrimmed; an empty line gives one empty
    field.
    """
    return next(csv.reader([line.rstrip("\r\n")]), [""])
