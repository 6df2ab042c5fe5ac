"""Hardcoded classification tables, one per bank family.

These are the built-in keyword tables used when no user rules exist, or
when the caller explicitly asks for the hardcoded path.  The algorithm
that applies them lives in ``categorizer.py``; the tables differ only in
data.

Each table is an immutable sequence of ``(label, keywords)`` pairs in
evaluation order:

- ``category_keywords``: lowercase substrings; the first category with
  any hit wins.
- ``tag_keywords``: uppercase substrings; every tag with any hit is
  added.
- ``type_keywords``: lowercase substrings; the first type with any hit
  wins, else ``"Other"``.

The default seed rules for a new rule store are derived from the HDFC
table so that seeding reproduces the hardcoded behavior.
"""

from __future__ import annotations

from dataclasses import dataclass

from statement_ledger.models import CategoryRule, RuleSet, TagRule

KeywordTable = tuple[tuple[str, tuple[str, ...]], ...]


@dataclass(frozen=True)
class RuleTable:
    """Built-in keyword tables for one bank family."""

    name: str
    category_keywords: KeywordTable
    tag_keywords: KeywordTable
    type_keywords: KeywordTable


# ---------------------------------------------------------------------------
# HDFC (default columnar export)
# ---------------------------------------------------------------------------

HDFC_TABLE = RuleTable(
    name="hdfc",
    category_keywords=(
        ("Investments", ("groww", "stocks", "mutual", "share", "mf")),
        ("Coffee", ("coffee", "cothas")),
        (
            "Food",
            (
                "food",
                "cafe",
                "restaurant",
                "bakery",
                "snacks",
                "apollo pharmacy",
                "pharmacy",
                "grocery",
            ),
        ),
        ("Shopping", ("shopping", "malai", "sports", "shuttle", "gyftr")),
        ("Utilities", ("billpay", "bill", "electricity", "water")),
        ("Salary", ("salary", "neft cr", "rently")),
        ("Transfers", ("upi", "neft", "imps", "ft-")),
        ("Entertainment", ("games", "movie", "show")),
        ("Personal", ("loan", "emi")),
    ),
    tag_keywords=(
        ("GROWW", ("GROWW",)),
        ("AUTOPAY", ("AUTOPAY",)),
        ("BILLPAY", ("BILLPAY",)),
        ("SALARY", ("SALARY", "RENTLY")),
        ("NEFT", ("NEFT CR", "NEFT")),
        ("COTHAS", ("COTHAS",)),
        ("APOLLO", ("APOLLO",)),
        ("SHOPPING", ("SHOPPING",)),
        ("SPORTS", ("SHUTTLE",)),
        ("GYFTR", ("GYFTR",)),
        ("JEWELRY", ("GOLD",)),
    ),
    type_keywords=(
        ("UPI", ("upi-",)),
        ("Bill Payment", ("billpay", "ib billpay")),
        ("Transfer", ("neft", "imps", "ft-")),
        ("POS", ("pos ",)),
        ("Check", ("chq",)),
        ("ATM", ("atw-", "nwd-", "atm")),
    ),
)


# ---------------------------------------------------------------------------
# Indian Bank (fixed-column export)
# ---------------------------------------------------------------------------

INDIAN_BANK_TABLE = RuleTable(
    name="indian_bank",
    category_keywords=(
        ("Investments", ("groww", "zerodha", "stocks", "mutual", "mf")),
        ("Coffee", ("coffee", "cothas", "starbucks")),
        (
            "Food",
            (
                "food",
                "swiggy",
                "zomato",
                "cafe",
                "restaurant",
                "bakery",
                "snacks",
                "pharmacy",
                "grocery",
            ),
        ),
        ("Shopping", ("amazon", "flipkart", "shopping", "gyftr")),
        ("Utilities", ("billpay", "bill pay", "electricity", "recharge")),
        ("Salary", ("salary", "rently")),
        ("Transfers", ("upi", "neft", "imps", "rtgs")),
        ("Entertainment", ("netflix", "movie", "games")),
        ("Personal", ("loan", "emi")),
    ),
    tag_keywords=(
        ("UPI", ("/UPI/", "UPI/")),
        ("IMPS", ("IMPS",)),
        ("NEFT", ("NEFT",)),
        ("SALARY", ("SALARY", "RENTLY")),
        ("GROWW", ("GROWW",)),
        ("SWIGGY", ("SWIGGY",)),
        ("ZOMATO", ("ZOMATO",)),
        ("AMAZON", ("AMAZON",)),
        ("AUTOPAY", ("AUTOPAY",)),
        ("ATM", ("ATM",)),
    ),
    type_keywords=(
        ("UPI", ("upi/",)),
        ("Bill Payment", ("billpay", "bill pay")),
        ("Transfer", ("neft", "imps", "rtgs")),
        ("POS", ("pos ",)),
        ("Check", ("chq", "cheque")),
        ("ATM", ("atm",)),
    ),
)


# ---------------------------------------------------------------------------
# Indian Overseas Bank (quoted CSV export)
# ---------------------------------------------------------------------------

IOB_TABLE = RuleTable(
    name="iob",
    category_keywords=(
        ("Investments", ("groww", "zerodha", "stocks", "mutual", "mf")),
        ("Coffee", ("coffee", "cothas")),
        (
            "Food",
            (
                "food",
                "swiggy",
                "zomato",
                "hotel",
                "cafe",
                "restaurant",
                "bakery",
                "grocery",
            ),
        ),
        ("Shopping", ("amazon", "flipkart", "shopping")),
        ("Utilities", ("billpay", "electricity", "recharge")),
        ("Salary", ("salary", "rently")),
        ("Transfers", ("upi", "neft", "imps", "rtgs", "trf")),
        ("Entertainment", ("netflix", "movie", "games")),
        ("Personal", ("loan", "emi")),
    ),
    tag_keywords=(
        ("UPI", ("UPI",)),
        ("IMPS", ("IMPS",)),
        ("NEFT", ("NEFT",)),
        ("SALARY", ("SALARY", "RENTLY")),
        ("GROWW", ("GROWW",)),
        ("SWIGGY", ("SWIGGY",)),
        ("AMAZON", ("AMAZON",)),
        ("ATM", ("ATM", "CASH WDL")),
    ),
    type_keywords=(
        ("UPI", ("upi",)),
        ("Bill Payment", ("billpay",)),
        ("Transfer", ("neft", "imps", "rtgs", "trf")),
        ("POS", ("pos ",)),
        ("Check", ("chq", "clg")),
        ("ATM", ("atm", "cash wdl")),
    ),
)

TABLES: dict[str, RuleTable] = {
    HDFC_TABLE.name: HDFC_TABLE,
    INDIAN_BANK_TABLE.name: INDIAN_BANK_TABLE,
    IOB_TABLE.name: IOB_TABLE,
}


# ---------------------------------------------------------------------------
# Seed rules for a new rule store
# ---------------------------------------------------------------------------

SEED_PRIORITY = 10

CATEGORY_COLORS: dict[str, str] = {
    "Investments": "#DAA520",
    "Coffee": "#8B4513",
    "Food": "#FF6347",
    "Shopping": "#FF69B4",
    "Utilities": "#DC143C",
    "Salary": "#228B22",
    "Transfers": "#4169E1",
    "Entertainment": "#FF1493",
    "Personal": "#696969",
}


def default_rule_set() -> RuleSet:
    """Build the default seed rules from the HDFC table.

    One ``contains`` rule per keyword, all at the same priority, in table
    order.  Since the classifier's priority sort is stable, the seeded
    store classifies exactly like the hardcoded table.
    """
    category_rules = [
        CategoryRule(
            category=category,
            keyword=keyword,
            match_type="contains",
            priority=SEED_PRIORITY,
            color=CATEGORY_COLORS.get(category),
        )
        for category, keywords in HDFC_TABLE.category_keywords
        for keyword in keywords
    ]
    tag_rules = [
        TagRule(
            tag_name=tag,
            pattern=keyword.lower(),
            match_type="contains",
            priority=SEED_PRIORITY,
        )
        for tag, keywords in HDFC_TABLE.tag_keywords
        for keyword in keywords
    ]
    return RuleSet(category_rules=category_rules, tag_rules=tag_rules)
