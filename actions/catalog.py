"""
Action Catalog - The static table of every action the server accepts

Each entry pairs an ActionSpec (fields, constraints, aliases) with the
builder that turns validated fields into SQL. The default registry is built
once, frozen, and shared by every request.

Kinds:
- query:   read, write, explain, count, exists
- schema:  create, alter, drop, list, describe
- admin:   vacuum, analyze, reindex, stats, cancel_backend, terminate_backend,
           set_config, reload_conf, reset_stats
- monitor: health, connections, locks, size
- tx:      begin, commit, rollback, savepoint, release, rollback_to
"""

from typing import Optional

from . import builders
from .builders.ddl import DDL_TARGETS
from .builders.introspection import DESCRIBE_TARGETS, LIST_TARGETS
from .builders.maintenance import REINDEX_TARGETS
from .builders.query import EXPLAIN_FORMATS
from .builders.transaction import ISOLATION_LEVELS
from .registry import ActionRegistry
from .specs import ActionSpec, FieldConstraint, FieldDef


def _ident(name: str, description: str = "", inline: bool = True) -> FieldDef:
    """Identifier field; `inline` ones are placed in SQL text and also pattern-checked."""
    return FieldDef(name, "identifier", free_text=inline, description=description)


def _flag(name: str, description: str = "") -> FieldDef:
    return FieldDef(name, "boolean", description=description)


def _requires(field: str, other: str, message: str) -> FieldConstraint:
    """`field` may only be given together with `other`."""
    return FieldConstraint(field, message, lambda f: f.get(field) is None or f.get(other) is not None)


def _at_least(field: str, minimum: int) -> FieldConstraint:
    return FieldConstraint(
        field,
        f"'{field}' must be >= {minimum}",
        lambda f: f.get(field) is None or f[field] >= minimum,
    )


# ----------------------------------------------------------------------------
# query
# ----------------------------------------------------------------------------

SQL = FieldDef("sql", "string", description="SQL text, passed through unmodified")
PARAMS = FieldDef("params", "array", description="Positional values for $1, $2, ...")
TIMEOUT_MS = FieldDef("timeout_ms", "integer", description="Statement timeout in milliseconds")
WHERE = FieldDef("where", "string", free_text=True, description="WHERE predicate, may use $n placeholders")

QUERY_ALIASES = {"query": "sql", "timeoutMs": "timeout_ms"}
TABLE_ALIASES = {"tableName": "table", "name": "table", "condition": "where", "filter": "where"}

QUERY_SPECS = [
    (ActionSpec(
        "query", "read",
        required=(SQL,),
        optional=(PARAMS, TIMEOUT_MS),
        constraints=(_at_least("timeout_ms", 1),),
        aliases=QUERY_ALIASES,
        description="Run a read-only SELECT",
    ), builders.build_read),
    (ActionSpec(
        "query", "write",
        required=(SQL,),
        optional=(PARAMS, TIMEOUT_MS),
        constraints=(_at_least("timeout_ms", 1),),
        aliases=QUERY_ALIASES,
        description="Run INSERT / UPDATE / DELETE",
    ), builders.build_write),
    (ActionSpec(
        "query", "explain",
        required=(SQL,),
        optional=(
            PARAMS, TIMEOUT_MS,
            _flag("analyze", "Execute the statement and report actual timings"),
            FieldDef("format", "enum", choices=EXPLAIN_FORMATS),
        ),
        constraints=(_at_least("timeout_ms", 1),),
        aliases={**QUERY_ALIASES, "explain_analyze": "analyze", "explain_format": "format"},
        description="Show the execution plan of a statement",
    ), builders.build_explain),
    (ActionSpec(
        "query", "count",
        required=(_ident("table"),),
        optional=(_ident("schema"), WHERE, PARAMS, _ident("column")),
        aliases=TABLE_ALIASES,
        description="Count rows, optionally filtered",
    ), builders.build_count),
    (ActionSpec(
        "query", "exists",
        required=(_ident("table"),),
        optional=(_ident("schema"), WHERE, PARAMS),
        aliases=TABLE_ALIASES,
        description="Check whether any row matches",
    ), builders.build_exists),
]


# ----------------------------------------------------------------------------
# schema
# ----------------------------------------------------------------------------

DDL_TARGET = FieldDef("target", "enum", choices=DDL_TARGETS)
DEFINITION = FieldDef(
    "definition", "string", free_text=True,
    description="Column list, ALTER clause, index columns or view query",
)

SCHEMA_SPECS = [
    (ActionSpec(
        "schema", "create",
        required=(DDL_TARGET, _ident("name")),
        optional=(_ident("schema"), DEFINITION, _flag("if_not_exists")),
        constraints=(
            FieldConstraint(
                "definition",
                "'definition' is required for create unless target is 'schema'",
                lambda f: f.get("target") == "schema" or f.get("definition") is not None,
            ),
        ),
        aliases={"ifNotExists": "if_not_exists"},
        description="CREATE TABLE / INDEX / VIEW / SCHEMA",
    ), builders.build_create),
    (ActionSpec(
        "schema", "alter",
        required=(DDL_TARGET, _ident("name"), DEFINITION),
        optional=(_ident("schema"), _flag("if_exists")),
        aliases={"ifExists": "if_exists"},
        description="ALTER TABLE / INDEX / VIEW / SCHEMA",
    ), builders.build_alter),
    (ActionSpec(
        "schema", "drop",
        required=(DDL_TARGET, _ident("name")),
        optional=(_ident("schema"), _flag("if_exists"), _flag("cascade")),
        aliases={"ifExists": "if_exists"},
        description="DROP TABLE / INDEX / VIEW / SCHEMA",
    ), builders.build_drop),
    (ActionSpec(
        "schema", "list",
        required=(FieldDef("target", "enum", choices=LIST_TARGETS),),
        optional=(
            _ident("schema", inline=False),
            _ident("table", inline=False),
            FieldDef("limit", "integer"),
            FieldDef("offset", "integer"),
            _flag("include_materialized"),
        ),
        constraints=(
            FieldConstraint(
                "table",
                "'table' is required when listing columns",
                lambda f: f.get("target") != "column" or f.get("table") is not None,
            ),
            _at_least("limit", 1),
            _at_least("offset", 0),
        ),
        aliases={"tableName": "table", "includeMaterialized": "include_materialized"},
        description="List catalog objects",
    ), builders.build_list),
    (ActionSpec(
        "schema", "describe",
        required=(FieldDef("target", "enum", choices=DESCRIBE_TARGETS), _ident("name", inline=False)),
        optional=(_ident("schema", inline=False),),
        aliases={"table": "name", "tableName": "name"},
        description="Column layout of a table or view",
    ), builders.build_describe),
]


# ----------------------------------------------------------------------------
# admin
# ----------------------------------------------------------------------------

TARGET_ALIASES = {"table": "target", "tableName": "target"}
PID = FieldDef("pid", "integer", description="Backend process id")

ADMIN_SPECS = [
    (ActionSpec(
        "admin", "vacuum",
        optional=(_ident("target"), _ident("schema"), _flag("full"), _flag("verbose"), _flag("analyze")),
        aliases=TARGET_ALIASES,
        description="VACUUM a table, or the whole database when no target is given",
    ), builders.build_vacuum),
    (ActionSpec(
        "admin", "analyze",
        optional=(
            _ident("target"), _ident("schema"), _flag("verbose"),
            FieldDef("columns", "array", item_type="identifier"),
        ),
        constraints=(_requires("columns", "target", "'columns' requires a 'target' table"),),
        aliases=TARGET_ALIASES,
        description="Refresh planner statistics",
    ), builders.build_analyze),
    (ActionSpec(
        "admin", "reindex",
        required=(FieldDef("target", "enum", choices=REINDEX_TARGETS),),
        optional=(_ident("name"), _ident("schema"), _flag("concurrently")),
        constraints=(
            FieldConstraint(
                "name",
                "'name' is required unless target is 'database'",
                lambda f: f.get("target") == "database" or f.get("name") is not None,
            ),
        ),
        aliases={"table": "name", "tableName": "name", "indexName": "name"},
        description="Rebuild indexes",
    ), builders.build_reindex),
    (ActionSpec(
        "admin", "stats",
        optional=(_ident("target", inline=False), _ident("schema", inline=False)),
        constraints=(_requires("schema", "target", "'schema' requires a 'target' table"),),
        aliases=TARGET_ALIASES,
        description="Table activity counters",
    ), builders.build_stats),
    (ActionSpec(
        "admin", "cancel_backend",
        required=(PID,),
        aliases={"processId": "pid"},
        description="Cancel the running query of a backend",
    ), builders.build_cancel_backend),
    (ActionSpec(
        "admin", "terminate_backend",
        required=(PID,),
        aliases={"processId": "pid"},
        description="Terminate a backend connection",
    ), builders.build_terminate_backend),
    (ActionSpec(
        "admin", "set_config",
        required=(FieldDef("name", "string"), FieldDef("value", "string")),
        optional=(_flag("is_local", "Only for the current transaction"),),
        aliases={"isLocal": "is_local", "setting": "name"},
        description="Change a run-time setting",
    ), builders.build_set_config),
    (ActionSpec("admin", "reload_conf", description="Reload server configuration files"),
     builders.build_reload_conf),
    (ActionSpec("admin", "reset_stats", description="Reset statistics counters for the current database"),
     builders.build_reset_stats),
]


# ----------------------------------------------------------------------------
# monitor
# ----------------------------------------------------------------------------

MONITOR_SPECS = [
    (ActionSpec("monitor", "health", description="Server version, database and time"),
     builders.build_health),
    (ActionSpec(
        "monitor", "connections",
        optional=(_flag("include_idle"),),
        aliases={"includeIdle": "include_idle"},
        description="Connections grouped by database and state",
    ), builders.build_connections),
    (ActionSpec("monitor", "locks", description="Locks held in the current database"),
     builders.build_locks),
    (ActionSpec(
        "monitor", "size",
        optional=(
            FieldDef("database", "string"),
            _ident("table", inline=False),
            _ident("schema", inline=False),
        ),
        constraints=(_requires("schema", "table", "'schema' requires a 'table'"),),
        aliases={"tableName": "table"},
        description="Database or table size, or the largest tables",
    ), builders.build_size),
]


# ----------------------------------------------------------------------------
# tx
# ----------------------------------------------------------------------------

SAVEPOINT_NAME = _ident("name", "Savepoint name")

TX_SPECS = [
    (ActionSpec(
        "tx", "begin",
        optional=(FieldDef("isolation_level", "enum", choices=ISOLATION_LEVELS),),
        aliases={"isolationLevel": "isolation_level"},
        description="Start a transaction",
    ), builders.build_begin),
    (ActionSpec("tx", "commit", description="Commit the open transaction"), builders.build_commit),
    (ActionSpec("tx", "rollback", description="Roll back the open transaction"), builders.build_rollback),
    (ActionSpec("tx", "savepoint", required=(SAVEPOINT_NAME,), description="Set a savepoint"),
     builders.build_savepoint),
    (ActionSpec("tx", "release", required=(SAVEPOINT_NAME,), description="Release a savepoint"),
     builders.build_release),
    (ActionSpec("tx", "rollback_to", required=(SAVEPOINT_NAME,), description="Roll back to a savepoint"),
     builders.build_rollback_to),
]


ALL_SPECS = QUERY_SPECS + SCHEMA_SPECS + ADMIN_SPECS + MONITOR_SPECS + TX_SPECS


def build_default_registry() -> ActionRegistry:
    """Register every catalog entry and freeze the result."""
    registry = ActionRegistry()
    for spec, builder in ALL_SPECS:
        registry.register(spec, builder)
    registry.freeze()
    return registry


_registry: Optional[ActionRegistry] = None


def get_registry() -> ActionRegistry:
    """Process-wide default registry, built on first use."""
    global _registry
    if _registry is None:
        _registry = build_default_registry()
    return _registry
