"""
Catalog Read Builders

`list` and `describe` for the schema tool. Every filter value (schema, table,
name, limit, offset) is a bound parameter; only fixed catalog SQL is text.
"""

from typing import Any, Mapping

from ..errors import UnsupportedCombinationError
from ..specs import BuiltStatement

LIST_TARGETS = (
    "database", "schema", "table", "view", "function", "trigger",
    "sequence", "constraint", "index", "column",
)
DESCRIBE_TARGETS = ("table", "view")

_USER_SCHEMAS = "n.nspname NOT IN ('pg_catalog', 'information_schema')"


def _filters(fields: Mapping[str, Any], params: list, columns: dict[str, str]) -> list[str]:
    """Build `<column> = $n` conditions for each present field in `columns`."""
    conditions = []
    for field_name, column in columns.items():
        value = fields.get(field_name)
        if value is not None:
            params.append(value)
            conditions.append(f"{column} = ${len(params)}")
    return conditions


def _list_query(target: str, fields: Mapping[str, Any], params: list) -> str:
    if target == "database":
        return "SELECT datname AS name FROM pg_database WHERE NOT datistemplate ORDER BY datname"

    if target == "schema":
        return (
            "SELECT nspname AS name FROM pg_namespace "
            "WHERE nspname NOT LIKE 'pg_%' AND nspname != 'information_schema' ORDER BY nspname"
        )

    if target == "table":
        # Tables default to the public schema
        params.append(fields.get("schema") or "public")
        return (
            "SELECT schemaname AS schema, tablename AS name, tableowner AS owner, hasindexes AS has_indexes "
            f"FROM pg_tables WHERE schemaname = ${len(params)} ORDER BY tablename"
        )

    if target == "view":
        kinds = "IN ('v', 'm')" if fields.get("include_materialized", True) else "= 'v'"
        conditions = [f"c.relkind {kinds}", _USER_SCHEMAS]
        conditions += _filters(fields, params, {"schema": "n.nspname"})
        return (
            "SELECT n.nspname AS schema, c.relname AS name, "
            "CASE c.relkind WHEN 'v' THEN 'view' WHEN 'm' THEN 'materialized_view' END AS type "
            "FROM pg_class c JOIN pg_namespace n ON n.oid = c.relnamespace "
            f"WHERE {' AND '.join(conditions)} ORDER BY n.nspname, c.relname"
        )

    if target == "function":
        conditions = [_USER_SCHEMAS] + _filters(fields, params, {"schema": "n.nspname"})
        return (
            "SELECT n.nspname AS schema, p.proname AS name, "
            "pg_get_function_arguments(p.oid) AS arguments, pg_get_function_result(p.oid) AS returns, "
            "l.lanname AS language "
            "FROM pg_proc p JOIN pg_namespace n ON n.oid = p.pronamespace "
            "JOIN pg_language l ON l.oid = p.prolang "
            f"WHERE {' AND '.join(conditions)} ORDER BY n.nspname, p.proname"
        )

    if target == "trigger":
        conditions = ["NOT t.tgisinternal", _USER_SCHEMAS]
        conditions += _filters(fields, params, {"schema": "n.nspname", "table": "c.relname"})
        return (
            "SELECT n.nspname AS schema, c.relname AS table_name, t.tgname AS name, "
            "CASE t.tgtype::int & 2 WHEN 2 THEN 'BEFORE' ELSE 'AFTER' END AS timing, "
            "p.proname AS function_name "
            "FROM pg_trigger t JOIN pg_class c ON c.oid = t.tgrelid "
            "JOIN pg_namespace n ON n.oid = c.relnamespace JOIN pg_proc p ON p.oid = t.tgfoid "
            f"WHERE {' AND '.join(conditions)} ORDER BY n.nspname, c.relname, t.tgname"
        )

    if target == "sequence":
        conditions = ["c.relkind = 'S'", _USER_SCHEMAS]
        conditions += _filters(fields, params, {"schema": "n.nspname"})
        return (
            "SELECT n.nspname AS schema, c.relname AS name "
            "FROM pg_class c JOIN pg_namespace n ON n.oid = c.relnamespace "
            f"WHERE {' AND '.join(conditions)} ORDER BY n.nspname, c.relname"
        )

    if target == "constraint":
        conditions = [_USER_SCHEMAS, "con.contype != 'n'"]
        conditions += _filters(fields, params, {"schema": "n.nspname", "table": "c.relname"})
        return (
            "SELECT n.nspname AS schema, c.relname AS table_name, con.conname AS name, "
            "CASE con.contype WHEN 'p' THEN 'primary_key' WHEN 'f' THEN 'foreign_key' "
            "WHEN 'u' THEN 'unique' WHEN 'c' THEN 'check' ELSE con.contype::text END AS type, "
            "pg_get_constraintdef(con.oid) AS definition "
            "FROM pg_constraint con JOIN pg_class c ON c.oid = con.conrelid "
            "JOIN pg_namespace n ON n.oid = c.relnamespace "
            f"WHERE {' AND '.join(conditions)} ORDER BY n.nspname, c.relname, con.conname"
        )

    if target == "index":
        conditions = ["schemaname NOT IN ('pg_catalog', 'information_schema')"]
        conditions += _filters(fields, params, {"schema": "schemaname", "table": "tablename"})
        return (
            "SELECT schemaname AS schema, tablename AS table_name, indexname AS name, indexdef AS definition "
            f"FROM pg_indexes WHERE {' AND '.join(conditions)} ORDER BY schemaname, tablename, indexname"
        )

    if target == "column":
        params.append(fields.get("schema") or "public")
        params.append(fields["table"])
        return (
            "SELECT column_name AS name, data_type AS type, is_nullable AS nullable, column_default AS default_value "
            "FROM information_schema.columns "
            f"WHERE table_schema = ${len(params) - 1} AND table_name = ${len(params)} ORDER BY ordinal_position"
        )

    raise UnsupportedCombinationError(f"list {target} is not supported", field="target")


def build_list(fields: Mapping[str, Any]) -> BuiltStatement:
    """List catalog objects of one kind, with optional LIMIT / OFFSET."""
    params: list = []
    sql = _list_query(fields["target"], fields, params)

    if fields.get("limit") is not None:
        params.append(fields["limit"])
        sql += f" LIMIT ${len(params)}"
    if fields.get("offset") is not None:
        params.append(fields["offset"])
        sql += f" OFFSET ${len(params)}"

    return BuiltStatement(sql, params)


def build_describe(fields: Mapping[str, Any]) -> BuiltStatement:
    """Column layout of a table or view."""
    target = fields["target"]
    if target not in DESCRIBE_TARGETS:
        raise UnsupportedCombinationError(f"describe {target} is not supported", field="target")

    return BuiltStatement(
        "SELECT column_name AS name, data_type AS type, is_nullable AS nullable, "
        "column_default AS default_value, character_maximum_length AS max_length "
        "FROM information_schema.columns "
        "WHERE table_schema = $1 AND table_name = $2 ORDER BY ordinal_position",
        [fields.get("schema") or "public", fields["name"]],
    )
