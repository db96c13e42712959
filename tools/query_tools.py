"""
Query MCP Tool

pg_query: run caller SQL (read / write / explain) or build a small
count / exists query around a table name and WHERE fragment.
"""

from mcp import types

from actions.catalog import get_registry
from actions.builders.query import EXPLAIN_FORMATS


def pg_query() -> types.Tool:
    return types.Tool(
        name="pg_query",
        description=(
            "Run SQL against PostgreSQL.\n\n"
            "ACTIONS:\n"
            "- read: SELECT with positional params ($1, $2, ...)\n"
            "- write: INSERT / UPDATE / DELETE with positional params\n"
            "- explain: execution plan, optionally with analyze and format\n"
            "- count: row count of a table, optional where + params\n"
            "- exists: whether any row of a table matches where\n\n"
            "Values always go in `params`. The `where` fragment of count/exists is checked "
            "against a blocklist of injection patterns (comments, stacked statements, "
            "UNION SELECT, file access functions) and rejected on a match."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "enum": get_registry().describe("query"),
                    "description": "Sub-action to perform.",
                },
                "sql": {
                    "type": "string",
                    "description": "SQL text for read / write / explain. Alias: query.",
                },
                "params": {
                    "type": "array",
                    "description": "Positional parameter values for $1, $2, ...",
                },
                "timeout_ms": {
                    "type": "integer",
                    "description": "Statement timeout in milliseconds.",
                },
                "analyze": {
                    "type": "boolean",
                    "description": "explain: run the statement and report actual timings. Alias: explain_analyze.",
                },
                "format": {
                    "type": "string",
                    "enum": list(EXPLAIN_FORMATS),
                    "description": "explain: output format. Alias: explain_format.",
                },
                "table": {
                    "type": "string",
                    "description": "count / exists: table name. Aliases: tableName, name.",
                },
                "schema": {
                    "type": "string",
                    "description": "count / exists: schema (default: public).",
                },
                "where": {
                    "type": "string",
                    "description": "count / exists: WHERE predicate, may use $n placeholders. Aliases: condition, filter.",
                },
                "column": {
                    "type": "string",
                    "description": "count: count non-null values of this column instead of rows.",
                },
                "options": {
                    "type": "object",
                    "description": "Any of the flags above may also be nested here.",
                },
            },
            "required": ["action"],
        },
    )
