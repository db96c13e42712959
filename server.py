"""
MCP Server Entry Point for the PostgreSQL action server
Run with: python server.py
"""

import asyncio
import logging
import sys
from typing import Any, Optional

from mcp import types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server

from actions.catalog import get_registry
from actions.service import ActionService
from config import DatabaseConfig, ServerConfig, get_environment_mode, load_app_environment
from database import DatabaseConnection
from handlers import ToolContext, handle_tool_call
from utils.statement_log import StatementLog

__version__ = "1.0.0"

# Initialize logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize server
app = Server("pg-action-server")
db: Optional[DatabaseConnection] = None
context: Optional[ToolContext] = None

# A stdio server talks to exactly one client, so all its calls share one session id
STDIO_SESSION_ID = "stdio"


def build_context(executor, server_config: ServerConfig, sessions=None) -> ToolContext:
    """Wire the frozen registry, an executor and the optional statement log together."""
    statement_log = StatementLog(server_config.statement_log_dir) if server_config.statement_log_dir else None
    service = ActionService(get_registry(), executor=executor, statement_log=statement_log)
    return ToolContext(service, sessions=sessions)


@app.list_tools()
async def handle_list_tools() -> list[types.Tool]:
    """pg_query, pg_schema, pg_admin, pg_monitor, pg_tx"""
    from tools import get_tool_catalog
    return get_tool_catalog()


@app.call_tool()
async def handle_call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
    if context is None:
        return [types.TextContent(type="text", text="Server not initialized")]
    return await handle_tool_call(context, name, arguments, session_id=STDIO_SESSION_ID)


async def main():
    """Main entry point for MCP server"""
    global db, context

    try:
        # config.py handles loading .env.{mode} based on APP_ENV
        config = DatabaseConfig.from_environment()
        server_config = ServerConfig.from_environment()

        db = DatabaseConnection(config)
        await db.connect()
        context = build_context(db, server_config, sessions=db)

        logger.info("PostgreSQL action server starting...")
        logger.info(f"Environment: {get_environment_mode()}")
        logger.info(f"Connected to database: {config.database} at {config.host}")

        async with stdio_server() as (read_stream, write_stream):
            await app.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name="pg-action-server",
                    server_version=__version__,
                    capabilities=app.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={}
                    )
                )
            )
    except Exception as e:
        logger.error(f"Failed to start MCP server: {e}", exc_info=True)
        raise
    finally:
        if context:
            await context.release_all()
        if db:
            await db.disconnect()
            logger.info("Database connection closed")


def cli_entry():
    """Entry point for console script - wraps async main()"""
    import argparse

    load_app_environment()
    server_config = ServerConfig.from_environment()
    logging.getLogger().setLevel(server_config.log_level)

    parser = argparse.ArgumentParser(description="PostgreSQL Action MCP Server")
    parser.add_argument('--version', '-v', action='store_true', help='Show version')
    parser.add_argument('--http', action='store_true', help='Run in HTTP mode (JSON tool endpoints)')
    parser.add_argument('--port', type=int, default=server_config.http_port,
                        help=f'Port for HTTP mode (default: {server_config.http_port})')
    parser.add_argument('--host', type=str, default=server_config.http_host,
                        help=f'Host for HTTP mode (default: {server_config.http_host})')

    args = parser.parse_args()

    if args.version:
        print(f"pg-action-server version {__version__}")
        sys.exit(0)

    if args.http:
        logger.info(f"Starting in HTTP mode on {args.host}:{args.port}")
        from transport.http import run_http_server
        run_http_server(host=args.host, port=args.port)
    else:
        logger.info("Starting in stdio mode...")
        asyncio.run(main())


if __name__ == "__main__":
    cli_entry()
