"""
Schema MCP Tool

pg_schema: DDL (create / alter / drop) and catalog reads (list / describe).
"""

from mcp import types

from actions.catalog import get_registry
from actions.builders.ddl import DDL_TARGETS
from actions.builders.introspection import LIST_TARGETS


def pg_schema() -> types.Tool:
    return types.Tool(
        name="pg_schema",
        description=(
            "Inspect and change database structure.\n\n"
            "ACTIONS:\n"
            "- create: table, index, view or schema (definition required except for schema)\n"
            "- alter: table, index, view or schema with an ALTER clause in definition\n"
            "- drop: table, index, view or schema, optional if_exists and cascade\n"
            "- list: databases, schemas, tables, views, functions, triggers, sequences, "
            "constraints, indexes or columns (columns need table)\n"
            "- describe: columns of a table or view\n\n"
            "Names are validated identifiers and always quoted. Put the schema in `schema`, "
            "not in the name."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "enum": get_registry().describe("schema"),
                    "description": "Sub-action to perform.",
                },
                "target": {
                    "type": "string",
                    "enum": sorted(set(DDL_TARGETS) | set(LIST_TARGETS)),
                    "description": "Object kind the action applies to.",
                },
                "name": {
                    "type": "string",
                    "description": "Object name. describe also accepts table / tableName.",
                },
                "schema": {
                    "type": "string",
                    "description": "Schema containing the object.",
                },
                "definition": {
                    "type": "string",
                    "description": (
                        "create table: column list; create index: '<table> (<columns>)'; "
                        "create view: the SELECT; alter: the ALTER clause."
                    ),
                },
                "if_not_exists": {"type": "boolean", "description": "create: add IF NOT EXISTS."},
                "if_exists": {"type": "boolean", "description": "alter / drop: add IF EXISTS."},
                "cascade": {"type": "boolean", "description": "drop: add CASCADE."},
                "table": {"type": "string", "description": "list: restrict to one table."},
                "limit": {"type": "integer", "description": "list: maximum rows."},
                "offset": {"type": "integer", "description": "list: rows to skip."},
                "include_materialized": {
                    "type": "boolean",
                    "description": "list views: include materialized views (default: true).",
                },
                "options": {
                    "type": "object",
                    "description": "Any of the flags above may also be nested here.",
                },
            },
            "required": ["action"],
        },
    )
