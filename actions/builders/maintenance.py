"""
Maintenance Statement Builders

VACUUM / ANALYZE / REINDEX plus the server-control functions
(cancel/terminate backend, set_config, reload, reset stats).

Boolean flags become a parenthesized option list in a fixed order so the
same input always yields the same text.
"""

from typing import Any, Mapping

from ..errors import UnsupportedCombinationError
from ..identifiers import qualified_name, quote_identifier
from ..specs import BuiltStatement

# Fixed option order for VACUUM (...)
VACUUM_OPTIONS = (("full", "FULL"), ("verbose", "VERBOSE"), ("analyze", "ANALYZE"))
ANALYZE_OPTIONS = (("verbose", "VERBOSE"),)

REINDEX_TARGETS = ("table", "index", "schema", "database")


def _option_list(fields: Mapping[str, Any], options) -> str:
    enabled = [keyword for flag, keyword in options if fields.get(flag)]
    return f"({', '.join(enabled)})" if enabled else ""


def _target(fields: Mapping[str, Any]) -> str:
    target = fields.get("target")
    if not target:
        return ""
    return qualified_name(target, fields.get("schema"))


def _join(*parts: str) -> str:
    return " ".join(p for p in parts if p)


def build_vacuum(fields: Mapping[str, Any]) -> BuiltStatement:
    """VACUUM [(FULL, VERBOSE, ANALYZE)] ["schema".]"table" """
    return BuiltStatement(_join("VACUUM", _option_list(fields, VACUUM_OPTIONS), _target(fields)))


def build_analyze(fields: Mapping[str, Any]) -> BuiltStatement:
    """ANALYZE [(VERBOSE)] ["schema".]"table" [("col", ...)]"""
    target = _target(fields)
    columns = fields.get("columns") or []
    if columns:
        target += " (" + ", ".join(quote_identifier(c) for c in columns) + ")"
    return BuiltStatement(_join("ANALYZE", _option_list(fields, ANALYZE_OPTIONS), target))


def build_reindex(fields: Mapping[str, Any]) -> BuiltStatement:
    """
    REINDEX TABLE|INDEX|SCHEMA|DATABASE [CONCURRENTLY] "name"

    For target=database the name may be omitted, which reindexes the
    current database.
    """
    target = fields["target"]
    if target not in REINDEX_TARGETS:
        raise UnsupportedCombinationError(f"reindex does not support target '{target}'", field="target")

    name = fields.get("name")
    if name and target in ("table", "index"):
        name_sql = qualified_name(name, fields.get("schema"))
    elif name:
        name_sql = quote_identifier(name)
    else:
        name_sql = ""

    concurrently = "CONCURRENTLY" if fields.get("concurrently") else ""
    return BuiltStatement(_join("REINDEX", target.upper(), concurrently, name_sql))


def build_cancel_backend(fields: Mapping[str, Any]) -> BuiltStatement:
    return BuiltStatement("SELECT pg_cancel_backend($1)", [fields["pid"]])


def build_terminate_backend(fields: Mapping[str, Any]) -> BuiltStatement:
    return BuiltStatement("SELECT pg_terminate_backend($1)", [fields["pid"]])


def build_set_config(fields: Mapping[str, Any]) -> BuiltStatement:
    """Session (or transaction-local) setting; name and value are data, so both are bound."""
    return BuiltStatement(
        "SELECT set_config($1, $2, $3)",
        [fields["name"], fields["value"], bool(fields.get("is_local", False))],
    )


def build_reload_conf(fields: Mapping[str, Any]) -> BuiltStatement:
    return BuiltStatement("SELECT pg_reload_conf()")


def build_reset_stats(fields: Mapping[str, Any]) -> BuiltStatement:
    return BuiltStatement("SELECT pg_stat_reset()")


def build_stats(fields: Mapping[str, Any]) -> BuiltStatement:
    """Per-table activity counters; one named table is parameterized, the listing is top 20."""
    target = fields.get("target")
    if not target:
        return BuiltStatement(
            "SELECT schemaname, relname, seq_scan, seq_tup_read, idx_scan, idx_tup_fetch, "
            "n_tup_ins, n_tup_upd, n_tup_del "
            "FROM pg_stat_user_tables "
            "ORDER BY n_tup_ins + n_tup_upd + n_tup_del DESC LIMIT 20"
        )

    params = [target]
    sql = "SELECT * FROM pg_stat_user_tables WHERE relname = $1"
    if fields.get("schema"):
        params.append(fields["schema"])
        sql += " AND schemaname = $2"
    return BuiltStatement(sql, params)
