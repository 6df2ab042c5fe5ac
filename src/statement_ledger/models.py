"""Core data models for Statement Ledger.

This module defines the dataclasses shared by the normalizers, the
classifier, the per-bank extractors, and the output layer. It has zero
internal imports -- everything depends on it, but it depends on nothing
within the package.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

UNCATEGORIZED = "Uncategorized"

OTHER_TYPE = "Other"

MATCH_TYPES = ("contains", "startsWith", "endsWith", "exact", "regex")

DEFAULT_MATCH_TYPE = "contains"


@dataclass(frozen=True)
class Transaction:
    """A single normalized statement transaction.

    Built once by an extractor per source row (or per flushed multi-line
    span) and never mutated afterwards. Re-classification produces a new
    instance via :func:`dataclasses.replace`.

    Attributes:
        date: ISO calendar date, ``YYYY-MM-DD``.
        description: Trimmed narration text; the only input to
            classification.
        category: Exactly one category label, or ``"Uncategorized"``.
        type: Transaction type label (``UPI``, ``Bill Payment``,
            ``Transfer``, ``POS``, ``Check``, ``ATM`` or ``Other``).
        tags: Uppercase tag labels, duplicates removed. May be empty.
        amount: Signed amount. Negative means money out (debit or
            withdrawal), positive means money in. Never zero.
        reference_number: Settlement/reference identifier, or ``None``
            when none could be extracted.
    """

    date: str
    description: str
    category: str
    type: str
    tags: tuple[str, ...]
    amount: Decimal
    reference_number: str | None = None


@dataclass
class CategoryRule:
    """A user-editable category rule.

    Rules are evaluated in priority-descending order; the first rule whose
    keyword matches the description decides the category.

    Attributes:
        category: Target category name.
        keyword: Pattern to test against the description (lowercase at
            rest).
        match_type: One of :data:`MATCH_TYPES`.
        priority: Higher values are evaluated first.
        color: Optional display hint. Not used for matching.
    """

    category: str
    keyword: str
    match_type: str = DEFAULT_MATCH_TYPE
    priority: int = 0
    color: str | None = None


@dataclass
class TagRule:
    """A user-editable tag rule.

    Unlike category rules, every matching tag rule contributes its tag.

    Attributes:
        tag_name: Tag label (uppercase at rest).
        pattern: Pattern to test against the description (lowercase at
            rest).
        match_type: One of :data:`MATCH_TYPES`.
        priority: Higher values are evaluated first.
    """

    tag_name: str
    pattern: str
    match_type: str = DEFAULT_MATCH_TYPE
    priority: int = 0


@dataclass
class RuleSet:
    """The category and tag rules of one user, as fetched from the store."""

    category_rules: list[CategoryRule] = field(default_factory=list)
    tag_rules: list[TagRule] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.category_rules and not self.tag_rules


@dataclass
class FileResult:
    """Outcome of processing one uploaded statement file.

    Attributes:
        file_name: Name of the source file.
        transactions: Extracted transactions (empty on failure).
        csv_path: Path of the written ``_converted.csv`` artifact, or
            empty string if nothing was written.
        json_path: Path of the written ``_parsed.json`` artifact, or
            empty string if nothing was written.
        error: Error message when the file failed, else empty string.
    """

    file_name: str
    transactions: list[Transaction] = field(default_factory=list)
    csv_path: str = ""
    json_path: str = ""
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error


@dataclass
class SaveResult:
    """Counts reported back by the ledger after a save.

    Attributes:
        inserted: Number of transactions written.
        skipped: Number of transactions skipped as duplicates by
            reference number.
        errors: One message per transaction that could not be written.
    """

    inserted: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class AppConfig:
    """Top-level application configuration loaded from config.toml.

    Attributes:
        uploads_dir: Directory scanned for statement files. Default:
            "uploads".
        parsed_dir: Directory receiving the converted CSV and parsed JSON
            artifacts. Default: "parsed_files".
        ledger_file: JSON ledger path used by ``process --save``.
            Default: "ledger.json".
        bank_type: Bank type used when the CLI is not given one.
            Default: "hdfc".
    """

    uploads_dir: str = "uploads"
    parsed_dir: str = "parsed_files"
    ledger_file: str = "ledger.json"
    bank_type: str = "hdfc"
