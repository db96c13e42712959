"""
Dangerous-Pattern Validator

Scans free-text SQL fragments (WHERE predicates, DDL definitions, identifiers)
for known injection signatures before they are placed inline in a statement.

These fragments cannot be sent as bound parameters, so the only defence is a
blocklist. It is a best-effort filter, NOT a security boundary: a regex over
text cannot prove a fragment harmless. Anything that can be a parameter must
be one; this module only covers what is left over.

Signatures are checked in order and the first match wins, so the reason a
caller sees is stable for a given input.
"""

import re
from typing import Any

from .errors import UnsafeFragmentError
from .outcome import ValidationOutcome

EMPTY_FRAGMENT_REASON = "must be a non-empty string"

# (pattern, reason) - order matters, first match is reported.
# DOTALL lets COPY ... PROGRAM span lines.
DANGEROUS_PATTERNS: tuple[tuple[re.Pattern, str], ...] = tuple(
    (re.compile(pattern, re.IGNORECASE | re.DOTALL), reason)
    for pattern, reason in (
        # Statement injection
        (r";\s*(DROP|DELETE|TRUNCATE|INSERT|UPDATE|CREATE|ALTER|GRANT|REVOKE)",
         "statement terminator followed by dangerous keyword"),
        (r";\s*$", "trailing statement terminator"),
        # Comments can hide the rest of a statement
        (r"--", "SQL line comment"),
        (r"/\*", "SQL block comment"),
        # Data exfiltration
        (r"\bUNION\s+(ALL\s+)?SELECT\b", "UNION SELECT"),
        # File access
        (r"\bINTO\s+(OUT|DUMP)FILE\b", "file write operation"),
        (r"\bLOAD_FILE\s*\(", "file read operation"),
        # PostgreSQL functions
        (r"\bpg_sleep\s*\(", "time-based injection function"),
        (r"\bpg_read_file\s*\(", "file read function"),
        (r"\bpg_read_binary_file\s*\(", "binary file read function"),
        (r"\bpg_ls_dir\s*\(", "directory listing function"),
        (r"\blo_import\s*\(", "large object import function"),
        (r"\blo_export\s*\(", "large object export function"),
        # Command execution
        (r"\bCOPY\s+.*\s+(FROM|TO)\s+PROGRAM\b", "COPY PROGRAM (command execution)"),
    )
)


def validate_fragment(fragment: Any) -> ValidationOutcome:
    """
    Check a free-text fragment against the blocklist.

    Returns ValidationOutcome.valid() when no signature matches, otherwise
    an Invalid outcome carrying the first matching signature's reason.

    Examples:
        validate_fragment("price > 10")                    # valid
        validate_fragment("status = 'active' AND id < 100") # valid
        validate_fragment("1=1; DROP TABLE users;--")      # statement terminator ...
        validate_fragment("1=1 UNION SELECT * FROM pg_shadow")  # UNION SELECT
    """
    if not isinstance(fragment, str) or not fragment.strip():
        return ValidationOutcome.invalid(EMPTY_FRAGMENT_REASON)

    for pattern, reason in DANGEROUS_PATTERNS:
        if pattern.search(fragment):
            return ValidationOutcome.invalid(reason)

    return ValidationOutcome.valid()


def check_fragment(fragment: Any, field: str) -> str:
    """Validate a fragment for `field`, raising UnsafeFragmentError on a match."""
    outcome = validate_fragment(fragment)
    if not outcome:
        raise UnsafeFragmentError(outcome.reason, field=field)
    return fragment
