"""Classification engine: rule matching, category/tag/type classifiers, re-tag.

Two rule sources feed the classifier:

1. **User rules** -- a :class:`~statement_ledger.models.RuleSet` fetched
   from the rule store.  Rules are sorted by priority (descending, stable)
   and tested with :func:`matches_rule`.  Category: first match wins.
   Tags: every match contributes.

2. **Built-in tables** -- the bank family's
   :class:`~statement_ledger.tables.RuleTable`, used when no rules are
   supplied.

Transaction type is always derived from the built-in table; it has no
rule-store path.

Depends on ``models.py`` and ``tables.py`` only.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import replace
from decimal import Decimal
from functools import lru_cache

from statement_ledger.models import (
    OTHER_TYPE,
    UNCATEGORIZED,
    CategoryRule,
    RuleSet,
    TagRule,
    Transaction,
)
from statement_ledger.tables import HDFC_TABLE, RuleTable

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Rule matching
# ---------------------------------------------------------------------------


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str] | None:
    """Compile a user regex case-insensitively, or None if it is invalid."""
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        logger.debug("Ignoring invalid regex rule %r: %s", pattern, exc)
        return None


def matches_rule(text: str, pattern: str, match_type: str) -> bool:
    """Test *text* against *pattern* using *match_type*.

    Both sides are lowercased.  Supported modes are ``contains``,
    ``startsWith``, ``endsWith``, ``exact`` and ``regex``; any other value
    behaves like ``contains``.  A regex is compiled as written with
    ``re.IGNORECASE`` (lowercasing it would change escapes such as
    ``\\D``) and searched anywhere in the text.  An invalid regex never
    matches.

    Args:
        text: The text to test, usually a transaction description.
        pattern: The rule's keyword or pattern.
        match_type: The comparison mode.

    Returns:
        True if the pattern matches.
    """
    text_lower = text.lower()
    if match_type == "regex":
        compiled = _compile(pattern)
        return compiled is not None and compiled.search(text_lower) is not None

    pattern_lower = pattern.lower()
    if match_type == "startsWith":
        return text_lower.startswith(pattern_lower)
    if match_type == "endsWith":
        return text_lower.endswith(pattern_lower)
    if match_type == "exact":
        return text_lower == pattern_lower
    return pattern_lower in text_lower


def _by_priority(rules: Iterable[CategoryRule] | Iterable[TagRule]) -> list:
    # sorted() is stable, so equal priorities keep the caller's order.
    return sorted(rules, key=lambda r: -r.priority)


# ---------------------------------------------------------------------------
# Classifiers
# ---------------------------------------------------------------------------


def classify_category(
    description: str,
    rules: Sequence[CategoryRule] | None = None,
    table: RuleTable = HDFC_TABLE,
) -> str:
    """Assign exactly one category to *description*.

    With a non-empty *rules* list, the highest-priority matching rule
    wins.  Otherwise the *table*'s categories are tried in declared order
    and the first one with a keyword present in the lowercased
    description wins.

    Returns:
        The category name, or ``"Uncategorized"`` if nothing matched.
    """
    if rules:
        for rule in _by_priority(rules):
            if matches_rule(description, rule.keyword, rule.match_type):
                return rule.category
        return UNCATEGORIZED

    desc_lower = description.lower()
    for category, keywords in table.category_keywords:
        if any(keyword in desc_lower for keyword in keywords):
            return category
    return UNCATEGORIZED


def classify_tags(
    description: str,
    rules: Sequence[TagRule] | None = None,
    table: RuleTable = HDFC_TABLE,
) -> tuple[str, ...]:
    """Collect every tag that applies to *description*.

    With *rules* supplied (even an empty list), every rule is evaluated
    in priority order and each match contributes its uppercased
    ``tag_name``.  With ``rules=None`` the *table*'s tag checks run
    against the uppercased description.  Duplicates are removed, keeping
    first-seen order.

    Returns:
        A possibly empty tuple of tag names.
    """
    tags: list[str] = []
    if rules is not None:
        for rule in _by_priority(rules):
            if matches_rule(description, rule.pattern, rule.match_type):
                tags.append(rule.tag_name.upper())
    else:
        desc_upper = description.upper()
        for tag, keywords in table.tag_keywords:
            if any(keyword in desc_upper for keyword in keywords):
                tags.append(tag)
    return tuple(dict.fromkeys(tags))


def classify_transaction_type(description: str, table: RuleTable = HDFC_TABLE) -> str:
    """Derive the transaction type from the *table*'s type keywords.

    The first type with a keyword present in the lowercased description
    wins, in declared order.  Defaults to ``"Other"``.
    """
    desc_lower = description.lower()
    for type_name, keywords in table.type_keywords:
        if any(keyword in desc_lower for keyword in keywords):
            return type_name
    return OTHER_TYPE


def apply_rules(
    description: str,
    rule_set: RuleSet | None = None,
    table: RuleTable = HDFC_TABLE,
) -> tuple[str, tuple[str, ...]]:
    """Compute ``(category, tags)`` for *description*.

    Pass ``rule_set=None`` to use the built-in *table* for both.
    """
    if rule_set is None:
        return (
            classify_category(description, None, table),
            classify_tags(description, None, table),
        )
    return (
        classify_category(description, rule_set.category_rules, table),
        classify_tags(description, rule_set.tag_rules, table),
    )


def build_transaction(
    date: str,
    description: str,
    amount: Decimal,
    reference_number: str | None,
    rule_set: RuleSet | None = None,
    table: RuleTable = HDFC_TABLE,
) -> Transaction:
    """Classify *description* and assemble the final Transaction."""
    category, tags = apply_rules(description, rule_set, table)
    return Transaction(
        date=date,
        description=description,
        category=category,
        type=classify_transaction_type(description, table),
        tags=tags,
        amount=amount,
        reference_number=reference_number or None,
    )


# ---------------------------------------------------------------------------
# Re-tag workflow
# ---------------------------------------------------------------------------


def retag(
    transactions: Iterable[Transaction],
    rule_set: RuleSet,
    table: RuleTable = HDFC_TABLE,
) -> tuple[list[Transaction], int]:
    """Recompute category and tags for stored transactions.

    Category and tags are re-derived from each transaction's description
    with the *current* rules; date, amount, type and reference number are
    left alone.  Running it twice with the same rules gives the same
    result.

    Args:
        transactions: Previously extracted transactions.
        rule_set: The current rules from the store.
        table: Built-in table used where the rule set leaves a gap (an
            empty category rule list).

    Returns:
        A tuple of the re-classified transactions (new instances) and the
        number of transactions processed.
    """
    updated: list[Transaction] = []
    for txn in transactions:
        category, tags = apply_rules(txn.description, rule_set, table)
        updated.append(replace(txn, category=category, tags=tags))
    logger.info("Re-tagged %d transaction(s)", len(updated))
    return updated, len(updated)
