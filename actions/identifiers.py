"""
PostgreSQL identifier rules and quoting.

Identifiers (table, index, schema, savepoint names) cannot be bound
parameters, so they are checked against the unquoted-identifier rules and
then always emitted double-quoted.
"""

import re
from typing import Optional

# Letter or underscore, then letters, digits, underscores or dollar signs
IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*$")

# NAMEDATALEN - 1
MAX_IDENTIFIER_LENGTH = 63


def identifier_problem(name) -> Optional[str]:
    """Return why `name` is not a valid identifier, or None if it is."""
    if not isinstance(name, str) or not name:
        return "must be a non-empty string"
    if len(name) > MAX_IDENTIFIER_LENGTH:
        return f"exceeds maximum identifier length of {MAX_IDENTIFIER_LENGTH} characters"
    if not IDENTIFIER_PATTERN.match(name):
        if "." in name:
            return "schema-qualified names are not accepted here, use the separate 'schema' field"
        return (
            "must start with a letter or underscore and contain only letters, "
            "digits, underscores or dollar signs"
        )
    return None


def quote_identifier(name: str) -> str:
    """Double-quote an identifier, escaping embedded quotes."""
    return '"' + name.replace('"', '""') + '"'


def qualified_name(name: str, schema: Optional[str] = None) -> str:
    """"schema"."name" when a schema is given, otherwise "name"."""
    if schema:
        return f"{quote_identifier(schema)}.{quote_identifier(name)}"
    return quote_identifier(name)
