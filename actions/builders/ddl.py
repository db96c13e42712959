"""
DDL Statement Builders

CREATE / ALTER / DROP for tables, indexes, views and schemas.

`definition` is caller text placed inline (column list, ALTER clause, view
query) and has already been through the pattern blocklist by the time it
gets here. Targets the builders have no statement for raise
UnsupportedCombinationError rather than producing an empty statement.
"""

from typing import Any, Mapping

from ..errors import UnsupportedCombinationError
from ..identifiers import qualified_name, quote_identifier
from ..specs import BuiltStatement

DDL_TARGETS = ("table", "index", "view", "function", "trigger", "schema")


def _unsupported(action: str, target: str) -> UnsupportedCombinationError:
    return UnsupportedCombinationError(
        f"{action} {target} is not supported", field="target", action=action, target=target
    )


def build_create(fields: Mapping[str, Any]) -> BuiltStatement:
    target = fields["target"]
    name = fields["name"]
    schema = fields.get("schema")
    definition = fields.get("definition")
    if_not_exists = "IF NOT EXISTS " if fields.get("if_not_exists") else ""

    if target == "table":
        sql = f"CREATE TABLE {if_not_exists}{qualified_name(name, schema)} ({definition})"
    elif target == "index":
        # definition is "<table> (<columns>)"; the index lives in the table's schema
        schema_prefix = f"{quote_identifier(schema)}." if schema else ""
        sql = f"CREATE INDEX {if_not_exists}{quote_identifier(name)} ON {schema_prefix}{definition}"
    elif target == "view":
        if if_not_exists:
            raise UnsupportedCombinationError(
                "if_not_exists is not supported for create view", field="if_not_exists"
            )
        sql = f"CREATE VIEW {qualified_name(name, schema)} AS {definition}"
    elif target == "schema":
        sql = f"CREATE SCHEMA {if_not_exists}{quote_identifier(name)}"
    else:
        raise _unsupported("create", target)

    return BuiltStatement(sql)


def build_alter(fields: Mapping[str, Any]) -> BuiltStatement:
    target = fields["target"]
    name = fields["name"]
    definition = fields["definition"]
    if_exists = "IF EXISTS " if fields.get("if_exists") else ""

    if target in ("table", "index", "view"):
        sql = f"ALTER {target.upper()} {if_exists}{qualified_name(name, fields.get('schema'))} {definition}"
    elif target == "schema":
        sql = f"ALTER SCHEMA {quote_identifier(name)} {definition}"
    else:
        raise _unsupported("alter", target)

    return BuiltStatement(sql)


def build_drop(fields: Mapping[str, Any]) -> BuiltStatement:
    target = fields["target"]
    name = fields["name"]
    if_exists = "IF EXISTS " if fields.get("if_exists") else ""
    cascade = " CASCADE" if fields.get("cascade") else ""

    if target in ("table", "index", "view"):
        sql = f"DROP {target.upper()} {if_exists}{qualified_name(name, fields.get('schema'))}{cascade}"
    elif target == "schema":
        sql = f"DROP SCHEMA {if_exists}{quote_identifier(name)}{cascade}"
    else:
        raise _unsupported("drop", target)

    return BuiltStatement(sql)
