"""
Error Message Utilities

Turns raw PostgreSQL error text into something a caller can act on:
constraint and key violations, missing objects, permission and timeout
failures. Anything unrecognised is returned unchanged.
"""

import asyncio
import re
from typing import Optional

# SQLSTATE -> short explanation, used when the message text alone says little
SQLSTATE_HINTS = {
    "42601": "Syntax error in SQL statement.",
    "42P01": "Table or view does not exist.",
    "42703": "Column does not exist.",
    "42883": "Function does not exist or argument types do not match.",
    "42501": "Insufficient privilege for this operation.",
    "40001": "Serialization failure; the transaction can be retried.",
    "40P01": "Deadlock detected; the transaction was rolled back.",
    "57014": "Statement was cancelled (timeout or cancel request).",
    "25P02": "Current transaction is aborted; roll back before running more statements.",
}


def enhance_error_message(error: Exception) -> str:
    """
    Enhance database error messages with human-readable explanations.

    Handles:
    - Invalid enum values
    - Check, foreign key, unique and not-null violations
    - Undefined table / column
    - Timeouts and cancelled statements
    - Known SQLSTATE codes (asyncpg exposes them as `sqlstate`)

    Returns the enhanced error message string.
    """
    error_str = str(error)

    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return "Statement timed out before completing. Raise timeout_ms or narrow the query."

    enum_match = re.search(r'invalid input value for enum (\w+): "([^"]+)"', error_str)
    if enum_match:
        return f"Invalid value '{enum_match.group(2)}' for enum {enum_match.group(1)}. {error_str}"

    constraint_match = re.search(r'violates check constraint "(\w+)"', error_str)
    if constraint_match:
        return f"Constraint violation: {constraint_match.group(1)}. {error_str}"

    fk_match = re.search(r'violates foreign key constraint "(\w+)"', error_str)
    if fk_match:
        return (
            f"Foreign key violation ({fk_match.group(1)}): "
            f"The referenced record does not exist or is still referenced. {error_str}"
        )

    unique_match = re.search(r'duplicate key value violates unique constraint "(\w+)"', error_str)
    if unique_match:
        return f"Duplicate entry: A record with this value already exists ({unique_match.group(1)})."

    null_match = re.search(r'null value in column "(\w+)".* violates not-null constraint', error_str)
    if null_match:
        return f"Required field missing: '{null_match.group(1)}' cannot be null."

    relation_match = re.search(r'relation "([^"]+)" does not exist', error_str)
    if relation_match:
        return f"Table or view '{relation_match.group(1)}' does not exist. Check the name and schema."

    column_match = re.search(r'column "([^"]+)" does not exist', error_str)
    if column_match:
        return f"Column '{column_match.group(1)}' does not exist. {error_str}"

    hint = get_sqlstate_hint(getattr(error, "sqlstate", None))
    if hint:
        return f"{hint} {error_str}"

    return error_str


def get_sqlstate_hint(sqlstate: Optional[str]) -> Optional[str]:
    """Short explanation for a known SQLSTATE code."""
    if not sqlstate:
        return None
    return SQLSTATE_HINTS.get(sqlstate)
