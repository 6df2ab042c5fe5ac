"""Reference-number extraction from transaction narration.

The reference number is the settlement identifier a bank embeds in the
narration text.  Downstream it serves as the natural deduplication key,
so a missing reference is normal (``None``), never an error.

Each bank family embeds references differently, so each has its own
ordered list of patterns.  Patterns are tried in order and the first
capture wins.
"""

from __future__ import annotations

import re

# Indian Bank (fixed-column export), e.g.
#   "TRF/UPI/506212345678/DR/SWIGGY/YESB"
#   "IMPS/P2A/512345678901/JOHN DOE"
#   "NEFT/SBIN/N123456789012345/ACME PAYROLL"
FIXED_COLUMN_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"/UPI/(\d{10,})/", re.IGNORECASE),
    re.compile(r"IMPS/P2A/(\d+)", re.IGNORECASE),
    re.compile(r"NEFT/[^/]+/([A-Z0-9]+)", re.IGNORECASE),
)

# Indian Overseas Bank (quoted CSV export), e.g.
#   "S12345678 UPI/DR/..."       -> leading S-number transaction id
#   "UPI/512345678901/CR/..."
#   "IMPS-512345678901-JOHN"
#   "NEFT-IOBAN12345678-ACME"
QUOTED_CSV_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^\s*(S\d{8,})"),
    re.compile(r"UPI/(\d{10,})", re.IGNORECASE),
    re.compile(r"IMPS[/-](\d+)", re.IGNORECASE),
    re.compile(r"NEFT[/-]([A-Z0-9]+)", re.IGNORECASE),
)


def _first_capture(description: str, patterns: tuple[re.Pattern[str], ...]) -> str | None:
    for pattern in patterns:
        match = pattern.search(description)
        if match:
            return match.group(1)
    return None


def extract_reference_fixed(description: str) -> str | None:
    """Extract a reference from an Indian Bank narration.

    Tries, in order: an embedded UPI reference (10+ digits between
    ``/UPI/`` and ``/``), an IMPS P2A reference, then a NEFT reference.
    """
    return _first_capture(description, FIXED_COLUMN_PATTERNS)


def extract_reference_quoted(description: str) -> str | None:
    """Extract a reference from an Indian Overseas Bank narration.

    Tries, in order: a leading ``S`` + 8-or-more-digit transaction id, a
    UPI reference, an IMPS reference, then a NEFT reference.
    """
    return _first_capture(description, QUOTED_CSV_PATTERNS)
