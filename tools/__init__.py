"""
MCP Tools Package

One tool per action kind:
- pg_query:   query
- pg_schema:  schema
- pg_admin:   admin
- pg_monitor: monitor
- pg_tx:      tx
"""

from mcp import types

from .admin_tools import pg_admin
from .monitor_tools import pg_monitor
from .query_tools import pg_query
from .schema_tools import pg_schema
from .tx_tools import pg_tx


def get_tool_catalog() -> list[types.Tool]:
    """All tools the server exposes, in display order."""
    return [pg_query(), pg_schema(), pg_admin(), pg_monitor(), pg_tx()]


__all__ = [
    'get_tool_catalog',
    'pg_admin',
    'pg_monitor',
    'pg_query',
    'pg_schema',
    'pg_tx',
]
