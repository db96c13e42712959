"""
HTTP transport for the action tools.

- GET  /healthz: runs monitor.health through the action pipeline
- GET  /tools: tool names, descriptions and input schemas
- POST /tools/{tool_name}: JSON body is the tool arguments

Requests carrying the same X-Session-Id header share a pinned connection
after pg_tx begin; requests without one always run on the pool.

Reuses the same ToolContext and handlers as the stdio server.
Action errors map to 404 (unknown tool / action), 422 (rejected input)
and 502 (database failure).
"""

import logging
from typing import Any, Optional

import uvicorn
from fastapi import Body, FastAPI, Header
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.status import (
    HTTP_200_OK,
    HTTP_404_NOT_FOUND,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_502_BAD_GATEWAY,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from actions.errors import ActionError, ExecutionError, NotFoundError
from config import DatabaseConfig, ServerConfig
from database import DatabaseConnection
from handlers import ToolContext, run_tool

logger = logging.getLogger(__name__)


class ToolInfo(BaseModel):
    name: str
    description: Optional[str] = None
    inputSchema: dict[str, Any]


class ToolResult(BaseModel):
    action: str
    rowCount: int
    rows: list[dict[str, Any]]


# Global state (initialized at startup)
db: Optional[DatabaseConnection] = None
context: Optional[ToolContext] = None
app = FastAPI(title="PostgreSQL Action Server")


def status_for(error: ActionError) -> int:
    if isinstance(error, NotFoundError):
        return HTTP_404_NOT_FOUND
    if isinstance(error, ExecutionError):
        return HTTP_502_BAD_GATEWAY
    return HTTP_422_UNPROCESSABLE_ENTITY


def _not_ready() -> JSONResponse:
    return JSONResponse(
        status_code=HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "unhealthy", "error": "Server not initialized"},
    )


@app.get("/healthz")
async def health_check():
    """Health check: one round trip through the action pipeline"""
    if context is None:
        return _not_ready()
    try:
        result = await context.service.handle("monitor", "health", {})
    except ActionError as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "error": str(e)},
        )

    row = result.rows[0] if result.rows else {}
    return JSONResponse(content={
        "status": "healthy",
        "database": row.get("current_database"),
        "version": row.get("version"),
        "pool": await db.get_pool_stats() if db else None,
    })


@app.get("/tools", response_model=list[ToolInfo])
async def list_tools():
    from tools import get_tool_catalog
    return [
        ToolInfo(name=tool.name, description=tool.description, inputSchema=tool.inputSchema)
        for tool in get_tool_catalog()
    ]


@app.post("/tools/{tool_name}")
async def call_tool(
    tool_name: str,
    arguments: Optional[dict[str, Any]] = Body(default=None),
    session_id: Optional[str] = Header(None, alias="X-Session-Id"),
):
    if context is None:
        return _not_ready()
    try:
        payload = await run_tool(context, tool_name, arguments, session_id=session_id)
    except ActionError as e:
        return JSONResponse(status_code=status_for(e), content=e.to_dict())
    return JSONResponse(status_code=HTTP_200_OK, content=ToolResult(**payload).model_dump())


async def initialize_server():
    """Connect the pool and build the tool context"""
    global db, context
    from server import build_context

    config = DatabaseConfig.from_environment()
    db = DatabaseConnection(config)
    await db.connect()
    context = build_context(db, ServerConfig.from_environment(), sessions=db)

    logger.info(f"Connected to database: {config.database} at {config.host}")


async def shutdown_server():
    """Cleanup on shutdown"""
    global db, context
    if context:
        await context.release_all()
        context = None
    if db:
        await db.disconnect()
        db = None
        logger.info("Database connection closed")


def run_http_server(host: str = "127.0.0.1", port: int = 8000):
    """
    Run the tool endpoints over HTTP.

    Args:
        host: Host to bind to
        port: Port to listen on
    """

    @app.on_event("startup")
    async def startup_event():
        await initialize_server()
        logger.info(f"PostgreSQL action server (HTTP) starting on http://{host}:{port}")

    @app.on_event("shutdown")
    async def shutdown_event():
        await shutdown_server()

    uvicorn.run(app, host=host, port=port, log_level="info")
