"""
Monitor MCP Tool

pg_monitor: health, connections, locks and sizes.
"""

from mcp import types

from actions.catalog import get_registry


def pg_monitor() -> types.Tool:
    return types.Tool(
        name="pg_monitor",
        description=(
            "Observe the running server.\n\n"
            "ACTIONS:\n"
            "- health: version, current database and server time\n"
            "- connections: connections grouped by database and state (idle excluded unless include_idle)\n"
            "- locks: locks held in the current database\n"
            "- size: size of one database or table, or the 20 largest tables"
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "enum": get_registry().describe("monitor"),
                    "description": "Sub-action to perform.",
                },
                "include_idle": {"type": "boolean", "description": "connections: include idle sessions."},
                "database": {"type": "string", "description": "size: database name."},
                "table": {"type": "string", "description": "size: table name. Alias: tableName."},
                "schema": {"type": "string", "description": "size: schema of the table."},
                "options": {
                    "type": "object",
                    "description": "Any of the fields above may also be nested here.",
                },
            },
            "required": ["action"],
        },
    )
