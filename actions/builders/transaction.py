"""
Transaction Control Builders

The core does not track whether a transaction is open; these are ordinary
statements, and keeping them on one connection is up to the executor.
"""

from typing import Any, Mapping

from ..identifiers import quote_identifier
from ..specs import BuiltStatement

ISOLATION_LEVELS = ("read_committed", "repeatable_read", "serializable")


def build_begin(fields: Mapping[str, Any]) -> BuiltStatement:
    level = fields.get("isolation_level")
    if level:
        return BuiltStatement(f"BEGIN ISOLATION LEVEL {level.replace('_', ' ').upper()}")
    return BuiltStatement("BEGIN")


def build_commit(fields: Mapping[str, Any]) -> BuiltStatement:
    return BuiltStatement("COMMIT")


def build_rollback(fields: Mapping[str, Any]) -> BuiltStatement:
    return BuiltStatement("ROLLBACK")


def build_savepoint(fields: Mapping[str, Any]) -> BuiltStatement:
    return BuiltStatement(f"SAVEPOINT {quote_identifier(fields['name'])}")


def build_release(fields: Mapping[str, Any]) -> BuiltStatement:
    return BuiltStatement(f"RELEASE SAVEPOINT {quote_identifier(fields['name'])}")


def build_rollback_to(fields: Mapping[str, Any]) -> BuiltStatement:
    return BuiltStatement(f"ROLLBACK TO SAVEPOINT {quote_identifier(fields['name'])}")
