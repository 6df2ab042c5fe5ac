"""Configuration loading, the rule store, and project initialization.

Reads TOML files using stdlib ``tomllib`` and writes them using
``tomli_w``.  Two files live in the project root:

- ``config.toml`` -- directories and the default bank type.
- ``rules.toml``  -- the user-editable category and tag rules.

Rules are normalized at rest: keywords and patterns are trimmed and
lowercased, tag names uppercased, and unknown match types coerced to
``contains``.  Depends only on ``models.py`` and ``tables.py``.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

import tomli_w

from statement_ledger.models import (
    DEFAULT_MATCH_TYPE,
    MATCH_TYPES,
    AppConfig,
    CategoryRule,
    RuleSet,
    TagRule,
)
from statement_ledger.tables import default_rule_set

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.toml"
RULES_FILE = "rules.toml"

# ---------------------------------------------------------------------------
# Default file content
# ---------------------------------------------------------------------------

_DEFAULT_CONFIG_TOML = """\
# Statement Ledger configuration

[general]
uploads_dir = "uploads"          # statements to process
parsed_dir = "parsed_files"      # converted CSV + parsed JSON output
ledger_file = "ledger.json"      # written by `ledger process --save`
bank_type = "hdfc"               # "hdfc", "indian_bank" or "iob"
"""

_RULES_HEADER = """\
# Category and tag rules.
# Rules are evaluated highest priority first.
# Category: the first matching rule wins. Tags: every matching rule adds its tag.
# match_type: "contains", "startsWith", "endsWith", "exact" or "regex".

"""

# Directories that ``initialize`` creates.
_INIT_DIRS = [
    "uploads",
    "parsed_files",
]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(root: Path) -> AppConfig:
    """Load ``config.toml`` from *root* and return an :class:`AppConfig`.

    Args:
        root: Project root directory containing ``config.toml``.

    Returns:
        A fully-populated :class:`AppConfig` instance.

    Raises:
        FileNotFoundError: If ``config.toml`` does not exist.
    """
    data = _read_toml(root / CONFIG_FILE)
    general = data.get("general", {})
    defaults = AppConfig()

    return AppConfig(
        uploads_dir=general.get("uploads_dir", defaults.uploads_dir),
        parsed_dir=general.get("parsed_dir", defaults.parsed_dir),
        ledger_file=general.get("ledger_file", defaults.ledger_file),
        bank_type=general.get("bank_type", defaults.bank_type),
    )


def load_rules(root: Path) -> RuleSet | None:
    """Load ``rules.toml`` and return the user's rules.

    Each list is ordered by priority, highest first; rules with equal
    priority keep their file order.

    Args:
        root: Project root directory containing ``rules.toml``.

    Returns:
        A :class:`RuleSet`, or ``None`` if the file is missing or holds
        no rules at all (callers then fall back to the built-in tables).
    """
    path = root / RULES_FILE
    if not path.exists():
        return None
    data = _read_toml(path)

    category_rules = [
        normalize_category_rule(
            CategoryRule(
                category=str(entry.get("category", "")),
                keyword=str(entry.get("keyword", "")),
                match_type=str(entry.get("match_type", DEFAULT_MATCH_TYPE)),
                priority=_as_int(entry.get("priority", 0)),
                color=entry.get("color") or None,
            )
        )
        for entry in data.get("category_rules", [])
    ]
    tag_rules = [
        normalize_tag_rule(
            TagRule(
                tag_name=str(entry.get("tag_name", "")),
                pattern=str(entry.get("pattern", "")),
                match_type=str(entry.get("match_type", DEFAULT_MATCH_TYPE)),
                priority=_as_int(entry.get("priority", 0)),
            )
        )
        for entry in data.get("tag_rules", [])
    ]

    # Rules with nothing to match on are unusable.
    category_rules = [r for r in category_rules if r.category and r.keyword]
    tag_rules = [r for r in tag_rules if r.tag_name and r.pattern]

    rule_set = RuleSet(
        category_rules=sorted(category_rules, key=lambda r: -r.priority),
        tag_rules=sorted(tag_rules, key=lambda r: -r.priority),
    )
    if rule_set.is_empty():
        return None
    return rule_set


def save_rules(root: Path, rule_set: RuleSet) -> None:
    """Write *rule_set* to ``rules.toml``, replacing its contents.

    Args:
        root: Project root directory.
        rule_set: The complete set of rules to store.
    """
    data = {
        "category_rules": [
            _category_rule_to_dict(normalize_category_rule(r)) for r in rule_set.category_rules
        ],
        "tag_rules": [_tag_rule_to_dict(normalize_tag_rule(r)) for r in rule_set.tag_rules],
    }
    (root / RULES_FILE).write_text(_RULES_HEADER + tomli_w.dumps(data), encoding="utf-8")


def seed_rules(root: Path) -> bool:
    """Write the default rules unless the store already has category rules.

    Idempotent: a store that already holds category rules is left alone.

    Returns:
        True if the defaults were written.
    """
    existing = load_rules(root)
    if existing is not None and existing.category_rules:
        return False
    seeded = default_rule_set()
    if existing is not None:
        # Keep tag rules the user already wrote.
        seeded.tag_rules = existing.tag_rules + seeded.tag_rules
    save_rules(root, seeded)
    return True


def initialize(target_dir: Path) -> None:
    """Create the standard directory structure and default config files.

    Idempotent: existing directories are left alone and existing files
    are **not** overwritten.  A new ``rules.toml`` is seeded with the
    default rules.

    Args:
        target_dir: The directory in which to create the project structure.
    """
    target_dir = Path(target_dir)
    target_dir.mkdir(parents=True, exist_ok=True)

    for d in _INIT_DIRS:
        (target_dir / d).mkdir(parents=True, exist_ok=True)

    _write_if_missing(target_dir / CONFIG_FILE, _DEFAULT_CONFIG_TOML)
    if not (target_dir / RULES_FILE).exists():
        save_rules(target_dir, default_rule_set())


def normalize_category_rule(rule: CategoryRule) -> CategoryRule:
    """Return *rule* in its at-rest form (trimmed, lowercase keyword)."""
    return CategoryRule(
        category=rule.category.strip(),
        keyword=rule.keyword.strip().lower(),
        match_type=_normalize_match_type(rule.match_type),
        priority=rule.priority,
        color=rule.color.strip() if rule.color and rule.color.strip() else None,
    )


def normalize_tag_rule(rule: TagRule) -> TagRule:
    """Return *rule* in its at-rest form (uppercase tag, lowercase pattern)."""
    return TagRule(
        tag_name=rule.tag_name.strip().upper(),
        pattern=rule.pattern.strip().lower(),
        match_type=_normalize_match_type(rule.match_type),
        priority=rule.priority,
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _read_toml(path: Path) -> dict:
    """Read and parse a TOML file."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def _normalize_match_type(match_type: str) -> str:
    if match_type in MATCH_TYPES:
        return match_type
    logger.warning("Unknown match_type %r, using %r", match_type, DEFAULT_MATCH_TYPE)
    return DEFAULT_MATCH_TYPE


def _as_int(value: object) -> int:
    # bool is an int subclass; TOML booleans are not priorities.
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


def _category_rule_to_dict(rule: CategoryRule) -> dict:
    entry = {
        "category": rule.category,
        "keyword": rule.keyword,
        "match_type": rule.match_type,
        "priority": rule.priority,
    }
    if rule.color:
        entry["color"] = rule.color
    return entry


def _tag_rule_to_dict(rule: TagRule) -> dict:
    return {
        "tag_name": rule.tag_name,
        "pattern": rule.pattern,
        "match_type": rule.match_type,
        "priority": rule.priority,
    }


def _write_if_missing(path: Path, content: str) -> None:
    """Write *content* to *path* only if the file does not already exist."""
    if not path.exists():
        path.write_text(content, encoding="utf-8")
