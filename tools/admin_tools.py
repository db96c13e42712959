"""
Admin MCP Tool

pg_admin: maintenance (vacuum / analyze / reindex / stats) and server
control (backends, settings, configuration reload, statistics reset).
"""

from mcp import types

from actions.catalog import get_registry
from actions.builders.maintenance import REINDEX_TARGETS


def pg_admin() -> types.Tool:
    return types.Tool(
        name="pg_admin",
        description=(
            "Database maintenance and server control.\n\n"
            "ACTIONS:\n"
            "- vacuum: optional target table, flags full / verbose / analyze\n"
            "- analyze: optional target table and columns, flag verbose\n"
            "- reindex: target table | index | schema | database; name required except for database\n"
            "- stats: activity counters for one table, or the 20 busiest tables\n"
            "- cancel_backend / terminate_backend: pid of the backend\n"
            "- set_config: name, value, optional is_local\n"
            "- reload_conf, reset_stats: no arguments"
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "enum": get_registry().describe("admin"),
                    "description": "Sub-action to perform.",
                },
                "target": {
                    "type": "string",
                    "description": (
                        "vacuum / analyze / stats: table name (aliases: table, tableName). "
                        f"reindex: one of {', '.join(REINDEX_TARGETS)}."
                    ),
                },
                "name": {
                    "type": "string",
                    "description": "reindex: object name (aliases: table, tableName, indexName). set_config: setting name.",
                },
                "schema": {"type": "string", "description": "Schema of the target table or index."},
                "full": {"type": "boolean", "description": "vacuum: VACUUM FULL."},
                "verbose": {"type": "boolean", "description": "vacuum / analyze: VERBOSE."},
                "analyze": {"type": "boolean", "description": "vacuum: also ANALYZE."},
                "columns": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "analyze: restrict to these columns (requires target).",
                },
                "concurrently": {"type": "boolean", "description": "reindex: CONCURRENTLY."},
                "pid": {"type": "integer", "description": "Backend process id. Alias: processId."},
                "value": {"type": "string", "description": "set_config: new value."},
                "is_local": {"type": "boolean", "description": "set_config: only for the current transaction."},
                "options": {
                    "type": "object",
                    "description": "Any of the flags above may also be nested here.",
                },
            },
            "required": ["action"],
        },
    )
