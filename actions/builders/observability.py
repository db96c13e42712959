"""
Observability Builders

Health, connection, lock and size reports. A named database or table is
always a bound parameter; without one the builder falls back to a fixed
top-N listing with no parameters at all.
"""

from typing import Any, Mapping

from ..identifiers import qualified_name
from ..specs import BuiltStatement

TOP_N = 20


def build_health(fields: Mapping[str, Any]) -> BuiltStatement:
    return BuiltStatement("SELECT version(), current_database(), now()")


def build_connections(fields: Mapping[str, Any]) -> BuiltStatement:
    state_filter = "" if fields.get("include_idle") else " WHERE state != 'idle'"
    return BuiltStatement(
        "SELECT datname AS database, count(*) AS count, state "
        f"FROM pg_stat_activity{state_filter} "
        "GROUP BY datname, state"
    )


def build_locks(fields: Mapping[str, Any]) -> BuiltStatement:
    return BuiltStatement(
        "SELECT t.relname, l.locktype, l.mode, l.granted, a.query, a.query_start "
        "FROM pg_locks l "
        "JOIN pg_stat_activity a ON l.pid = a.pid "
        "LEFT JOIN pg_class t ON l.relation = t.oid "
        "WHERE a.datname = current_database() "
        "ORDER BY a.query_start"
    )


def build_size(fields: Mapping[str, Any]) -> BuiltStatement:
    if fields.get("database"):
        return BuiltStatement(
            "SELECT pg_size_pretty(pg_database_size($1)) AS size",
            [fields["database"]],
        )

    if fields.get("table"):
        # quoted, so regclass input keeps the exact case the table was created with
        relation = qualified_name(fields["table"], fields.get("schema"))
        return BuiltStatement(
            "SELECT pg_size_pretty(pg_total_relation_size($1::regclass)) AS size",
            [relation],
        )

    return BuiltStatement(
        "SELECT relname AS name, pg_size_pretty(pg_total_relation_size(relid)) AS size "
        "FROM pg_catalog.pg_statio_user_tables "
        f"ORDER BY pg_total_relation_size(relid) DESC LIMIT {TOP_N}"
    )
