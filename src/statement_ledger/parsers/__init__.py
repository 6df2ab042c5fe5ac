"""Parser registry for bank statement extractors.

Two kinds of extractor exist:

- *record* extractors (``hdfc``, ``generic``) take header-keyed rows;
- *line* extractors (``indian_bank``, ``iob``) take raw CSV lines.

Each exposes ``extract(data, rule_set=None)`` returning a list of
:class:`~statement_ledger.models.Transaction`.  The ``PARSERS`` dict maps
parser names to extract functions, and ``get_parser()`` provides a
lookup with a clear error on unknown names.  Which parser runs for a
given upload is decided by ``importer.py``.
"""

from __future__ import annotations

from collections.abc import Callable

from statement_ledger.parsers import generic, hdfc, indian_bank, iob

PARSERS: dict[str, Callable] = {
    "hdfc": hdfc.extract,
    "generic": generic.extract,
    "indian_bank": indian_bank.extract,
    "iob": iob.extract,
}

DEFAULT_BANK_TYPE = "hdfc"

# Bank types a caller may declare.  Both Indian-bank types auto-detect
# between the quoted-CSV and fixed-column layouts.
BANK_TYPES = ("hdfc", "indian_bank", "iob")

INDIAN_BANK_FAMILY = frozenset({"indian_bank", "iob"})


def get_parser(name: str) -> Callable:
    """Look up a parser by name.

    Args:
        name: Parser name, e.g. "hdfc".

    Returns:
        The extract function for the named parser.

    Raises:
        KeyError: If no parser is registered under the given name.
    """
    return PARSERS[name]
