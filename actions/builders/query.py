"""
Query Statement Builders

read / write / explain pass the caller's SQL through untouched and bind
`params` positionally. count / exists build a small SELECT around a quoted
table name and an optional WHERE fragment.
"""

from typing import Any, Mapping

from ..identifiers import qualified_name, quote_identifier
from ..specs import BuiltStatement

EXPLAIN_FORMATS = ("text", "json", "xml", "yaml")

DEFAULT_SCHEMA = "public"


def build_read(fields: Mapping[str, Any]) -> BuiltStatement:
    return BuiltStatement(fields["sql"], fields.get("params") or [], fields.get("timeout_ms"))


def build_write(fields: Mapping[str, Any]) -> BuiltStatement:
    return BuiltStatement(fields["sql"], fields.get("params") or [], fields.get("timeout_ms"))


def build_explain(fields: Mapping[str, Any]) -> BuiltStatement:
    """
    EXPLAIN [(ANALYZE, FORMAT JSON)] <sql>

    Only the requested options appear in the list; with neither requested
    the list is omitted entirely.
    """
    options = []
    if fields.get("analyze"):
        options.append("ANALYZE")
    if fields.get("format"):
        options.append(f"FORMAT {fields['format'].upper()}")

    prefix = f"EXPLAIN ({', '.join(options)}) " if options else "EXPLAIN "
    return BuiltStatement(prefix + fields["sql"], fields.get("params") or [], fields.get("timeout_ms"))


def _from_clause(fields: Mapping[str, Any]) -> str:
    clause = f"FROM {qualified_name(fields['table'], fields.get('schema') or DEFAULT_SCHEMA)}"
    if fields.get("where"):
        clause += f" WHERE {fields['where']}"
    return clause


def build_count(fields: Mapping[str, Any]) -> BuiltStatement:
    """SELECT COUNT(*) AS count FROM "public"."t" [WHERE ...]"""
    column = quote_identifier(fields["column"]) if fields.get("column") else "*"
    return BuiltStatement(
        f"SELECT COUNT({column}) AS count {_from_clause(fields)}",
        fields.get("params") or [],
    )


def build_exists(fields: Mapping[str, Any]) -> BuiltStatement:
    return BuiltStatement(
        f"SELECT EXISTS(SELECT 1 {_from_clause(fields)}) AS exists",
        fields.get("params") or [],
    )
