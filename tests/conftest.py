"""Shared pytest fixtures for Statement Ledger tests.

Provides reusable fixtures for:
- Paths to the sample statement files in ``tests/fixtures``.
- tmp_project_dir: A temporary project root created by ``initialize()``
  with sample statements dropped into ``uploads/``.
- sample_transactions: A few classified Transaction objects for output
  and re-tag tests.
- sample_rule_set: A small user RuleSet exercising priorities and match
  types.
"""

from __future__ import annotations

import shutil
from decimal import Decimal
from pathlib import Path

import pytest

from statement_ledger.config import initialize
from statement_ledger.models import CategoryRule, RuleSet, TagRule, Transaction

# ---------------------------------------------------------------------------
# Path constants
# ---------------------------------------------------------------------------

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Fixture file path helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the tests/fixtures/ directory."""
    return FIXTURES_DIR


@pytest.fixture
def hdfc_sample_csv() -> Path:
    """Path to the HDFC sample statement (preamble, masked row, summary)."""
    return FIXTURES_DIR / "hdfc_sample.csv"


@pytest.fixture
def indian_bank_sample_csv() -> Path:
    """Path to the Indian Bank fixed-column sample with continuation rows."""
    return FIXTURES_DIR / "indian_bank_sample.csv"


@pytest.fixture
def iob_sample_csv() -> Path:
    """Path to the Indian Overseas Bank quoted-CSV sample."""
    return FIXTURES_DIR / "iob_sample.csv"


@pytest.fixture
def generic_sample_csv() -> Path:
    """Path to a columnar statement the HDFC parser does not recognize."""
    return FIXTURES_DIR / "generic_sample.csv"


# ---------------------------------------------------------------------------
# tmp_project_dir -- temp directory with full project structure
# ---------------------------------------------------------------------------


@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Create an initialized project with an HDFC statement in uploads/.

    The directory contains config.toml, a seeded rules.toml, an empty
    parsed_files/ and ``uploads/statement_jan.csv``.
    """
    project = tmp_path / "ledger-project"
    initialize(project)
    shutil.copy2(FIXTURES_DIR / "hdfc_sample.csv", project / "uploads" / "statement_jan.csv")
    return project


# ---------------------------------------------------------------------------
# Sample objects
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_transactions() -> list[Transaction]:
    """Three classified transactions, two with reference numbers."""
    return [
        Transaction(
            date="2026-01-01",
            description="UPI-COTHAS COFFEE-COTHAS@YBL",
            category="Coffee",
            type="UPI",
            tags=("COTHAS",),
            amount=Decimal("-250.00"),
            reference_number="600112233445",
        ),
        Transaction(
            date="2026-01-02",
            description="NEFT CR-ACME-SALARY JAN",
            category="Salary",
            type="Transfer",
            tags=("SALARY", "NEFT"),
            amount=Decimal("150000.00"),
            reference_number="NEFTN12345678",
        ),
        Transaction(
            date="2026-01-07",
            description="ATM CASH WITHDRAWAL",
            category="Uncategorized",
            type="ATM",
            tags=(),
            amount=Decimal("-1000.00"),
        ),
    ]


@pytest.fixture
def sample_rule_set() -> RuleSet:
    """A user RuleSet with mixed priorities and match types.

    - "swiggy" (priority 20) outranks the generic "upi" rule (priority 5).
    - A regex rule recognizes 12-digit references.
    - Two tag rules both match UPI food orders.
    """
    return RuleSet(
        category_rules=[
            CategoryRule(category="Transfers", keyword="upi", priority=5),
            CategoryRule(category="Food", keyword="swiggy", priority=20),
            CategoryRule(category="Rent", keyword="rent", match_type="endsWith", priority=10),
            CategoryRule(
                category="Referenced", keyword=r"/\d{12}/", match_type="regex", priority=1
            ),
        ],
        tag_rules=[
            TagRule(tag_name="UPI", pattern="upi", priority=1),
            TagRule(tag_name="FOOD", pattern="swiggy", priority=10),
            TagRule(tag_name="food", pattern="zomato", priority=10),
        ],
    )
