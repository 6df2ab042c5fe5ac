"""Output artifacts, the JSON ledger, and the processing summary.

- :func:`write_converted_csv` and :func:`write_parsed_json` write the two
  per-file artifacts (``<name>_converted.csv`` and ``<name>_parsed.json``).
- :func:`load_parsed_json` reads a parsed JSON file back into
  transactions, e.g. for re-tagging.
- :func:`save_to_ledger` appends transactions to a JSON ledger, skipping
  any whose reference number is already recorded.
- :func:`print_summary` prints per-file and aggregate results to stdout.
"""

from __future__ import annotations

import json
from collections import Counter
from collections.abc import Iterable
from decimal import Decimal
from pathlib import Path

from statement_ledger.models import FileResult, SaveResult, Transaction
from statement_ledger.normalize import is_iso_date

# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def transaction_to_dict(txn: Transaction) -> dict:
    """Convert a Transaction to a JSON-ready dict (amount as a number)."""
    return {
        "date": txn.date,
        "description": txn.description,
        "category": txn.category,
        "type": txn.type,
        "tags": list(txn.tags),
        "amount": float(txn.amount),
        "reference_number": txn.reference_number,
    }


def transaction_from_dict(data: dict) -> Transaction:
    """Build a Transaction from a dict produced by :func:`transaction_to_dict`.

    Raises:
        KeyError: If a required key is missing.
    """
    return Transaction(
        date=data["date"],
        description=data["description"],
        category=data.get("category", "Uncategorized"),
        type=data.get("type", "Other"),
        tags=tuple(data.get("tags") or ()),
        amount=Decimal(str(data["amount"])).quantize(Decimal("0.01")),
        reference_number=data.get("reference_number") or None,
    )


# ---------------------------------------------------------------------------
# Artifacts
# ---------------------------------------------------------------------------


def write_converted_csv(csv_text: str, output_dir: str | Path, base_name: str) -> Path:
    """Write the statement's CSV text to ``output_dir/<base_name>_converted.csv``."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / f"{base_name}_converted.csv"
    output_path.write_text(csv_text, encoding="utf-8")
    return output_path


def write_parsed_json(
    transactions: Iterable[Transaction],
    output_dir: str | Path,
    base_name: str,
) -> Path:
    """Write transactions as a pretty-printed JSON array.

    Writes ``output_dir/<base_name>_parsed.json``, overwriting any
    existing file.

    Returns:
        The :class:`~pathlib.Path` to the written file.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / f"{base_name}_parsed.json"
    _write_json(output_path, transactions)
    return output_path


def load_parsed_json(path: str | Path) -> list[Transaction]:
    """Read a parsed JSON file (or the ledger) back into transactions.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a JSON array of transactions.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON array of transactions")
    try:
        return [transaction_from_dict(item) for item in data]
    except (KeyError, TypeError, ArithmeticError) as exc:
        raise ValueError(f"{path}: malformed transaction record: {exc}") from exc


def write_transactions(path: str | Path, transactions: Iterable[Transaction]) -> None:
    """Overwrite *path* with *transactions* as a JSON array."""
    _write_json(Path(path), transactions)


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------


def save_to_ledger(transactions: Iterable[Transaction], ledger_path: str | Path) -> SaveResult:
    """Append transactions to the JSON ledger at *ledger_path*.

    A transaction whose reference number is already in the ledger (or
    appeared earlier in this batch) is skipped.  Transactions without a
    reference number are always inserted.  Records that break the
    Transaction invariants (unresolved date, zero amount) are rejected
    with an error message instead of being written.

    Returns:
        A :class:`SaveResult` with inserted/skipped counts and errors.
    """
    ledger_path = Path(ledger_path)
    existing = load_parsed_json(ledger_path) if ledger_path.exists() else []
    known_refs = {t.reference_number for t in existing if t.reference_number}

    result = SaveResult()
    for txn in transactions:
        problem = _validate(txn)
        if problem:
            result.errors.append(
                f"Error inserting transaction {txn.date} {txn.description}: {problem}"
            )
            continue
        if txn.reference_number and txn.reference_number in known_refs:
            result.skipped += 1
            continue
        existing.append(txn)
        if txn.reference_number:
            known_refs.add(txn.reference_number)
        result.inserted += 1

    ledger_path.parent.mkdir(parents=True, exist_ok=True)
    _write_json(ledger_path, existing)
    return result


# ---------------------------------------------------------------------------
# Summary printer
# ---------------------------------------------------------------------------


def print_summary(results: list[FileResult], save_result: SaveResult | None = None) -> None:
    """Print a human-readable processing summary to stdout.

    The summary includes one line per file, the aggregate success/failure
    counts, total transactions with money in/out, a category breakdown,
    and the ledger counts when a save was performed.

    Args:
        results: One :class:`FileResult` per processed file.
        save_result: Ledger counts from ``save_to_ledger``, if any.
    """
    succeeded = [r for r in results if r.ok]
    failed = [r for r in results if not r.ok]
    transactions = [t for r in succeeded for t in r.transactions]

    print()
    print("== Processing Summary ==")
    for r in results:
        if r.ok:
            print(f"  OK    {r.file_name}: {len(r.transactions)} transactions")
        else:
            print(f"  FAIL  {r.file_name}: {r.error}")

    print()
    print(f"Files:        {len(succeeded)} succeeded, {len(failed)} failed")
    print(f"Transactions: {len(transactions)}")

    if transactions:
        money_out = sum((t.amount for t in transactions if t.amount < 0), Decimal("0"))
        money_in = sum((t.amount for t in transactions if t.amount > 0), Decimal("0"))
        print(f"  Money out:  {abs(money_out):,.2f}")
        print(f"  Money in:   {money_in:,.2f}")

        category_counts = Counter(t.category for t in transactions)
        print()
        print("By category:")
        for category, count in category_counts.most_common():
            print(f"  {category + ':':<18} {count}")

    if save_result is not None:
        print()
        print(f"Ledger: {save_result.inserted} inserted, {save_result.skipped} skipped (duplicate reference)")
        for e in save_result.errors:
            print(f"  - {e}")

    print()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _validate(txn: Transaction) -> str:
    if not is_iso_date(txn.date):
        return f"invalid date {txn.date!r}"
    if txn.amount == 0:
        return "zero amount"
    return ""


def _write_json(path: Path, transactions: Iterable[Transaction]) -> None:
    payload = [transaction_to_dict(t) for t in transactions]
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
