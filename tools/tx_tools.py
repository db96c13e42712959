"""
Transaction MCP Tool

pg_tx: begin / commit / rollback and savepoints. After a successful begin,
every tool call runs on the same connection until commit or rollback.
"""

from mcp import types

from actions.catalog import get_registry
from actions.builders.transaction import ISOLATION_LEVELS


def pg_tx() -> types.Tool:
    return types.Tool(
        name="pg_tx",
        description=(
            "Transaction control.\n\n"
            "ACTIONS:\n"
            "- begin: optional isolation_level\n"
            "- commit, rollback: end the open transaction\n"
            "- savepoint, release, rollback_to: name required\n\n"
            "Between begin and commit/rollback all pg_* calls share one connection."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "enum": get_registry().describe("tx"),
                    "description": "Sub-action to perform.",
                },
                "name": {"type": "string", "description": "Savepoint name."},
                "isolation_level": {
                    "type": "string",
                    "enum": list(ISOLATION_LEVELS),
                    "description": "begin: isolation level. Alias: isolationLevel.",
                },
                "options": {
                    "type": "object",
                    "description": "isolation_level may also be nested here.",
                },
            },
            "required": ["action"],
        },
    )
