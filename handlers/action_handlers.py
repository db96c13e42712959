"""
Action Tool Handlers

Routes a tool call to the action service and shapes the JSON response.

Handles the one piece of state the core leaves out: an open transaction.
A caller that wants BEGIN ... COMMIT on one connection passes a session id
(the HTTP `X-Session-Id` header; the stdio client gets one implicit id).
After `pg_tx begin` succeeds under that id, a pooled connection is pinned
and every later call with the same id runs on it until `commit` or
`rollback`. Calls without an id, including tx statements, run on the pool
and never touch another caller's connection.
"""

import asyncio
import json
import logging
from collections import defaultdict
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from mcp import types

from actions.errors import ActionError, ExecutionError, NotFoundError, ValidationError
from actions.executor import QueryResult
from actions.service import ActionService

logger = logging.getLogger(__name__)

# Tool registry: {tool_name: action_kind}
TOOL_KINDS = {
    "pg_query": "query",
    "pg_schema": "schema",
    "pg_admin": "admin",
    "pg_monitor": "monitor",
    "pg_tx": "tx",
}

# tx sub-actions that end the pinned session
ENDS_TRANSACTION = ("commit", "rollback")


def get_action_kind(tool_name: str) -> Optional[str]:
    """Action kind served by a tool, or None for an unknown tool."""
    return TOOL_KINDS.get(tool_name)


def _serialize(obj: Any) -> Any:
    """JSON serialization helper for non-native types."""
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, (list, tuple)):
        return [_serialize(v) for v in obj]
    if isinstance(obj, dict):
        return {k: _serialize(v) for k, v in obj.items()}
    if isinstance(obj, (datetime, date, time)):
        return obj.isoformat()
    if isinstance(obj, timedelta):
        return obj.total_seconds()
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return bytes(obj).hex()
    return str(obj)


class ToolContext:
    """
    Shared state for tool handlers.

    Args:
        service: ActionService with the default (pooled) executor
        sessions: anything with `async create_session()`, usually the
            DatabaseConnection; None disables connection pinning
    """

    def __init__(self, service: ActionService, sessions=None):
        self.service = service
        self.sessions = sessions
        self._pinned: dict[str, Any] = {}
        # one statement at a time per session id
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def in_transaction(self, session_id: Optional[str]) -> bool:
        return session_id is not None and session_id in self._pinned

    async def release_session(self, session_id: str):
        session = self._pinned.pop(session_id, None)
        if session is not None:
            await session.release()

    async def release_all(self):
        for session_id in list(self._pinned):
            await self.release_session(session_id)

    async def run(
        self,
        action_kind: str,
        sub_action: str,
        fields: dict,
        session_id: Optional[str] = None,
    ) -> QueryResult:
        if session_id is None or self.sessions is None:
            return await self.service.handle(action_kind, sub_action, fields)

        async with self._locks[session_id]:
            if action_kind == "tx":
                return await self._run_tx(session_id, sub_action, fields)
            return await self.service.handle(
                action_kind, sub_action, fields, executor=self._pinned.get(session_id)
            )

    async def _run_tx(self, session_id: str, sub_action: str, fields: dict) -> QueryResult:
        pinned = self._pinned.get(session_id)

        if sub_action == "begin" and pinned is None:
            session = await self.sessions.create_session()
            try:
                result = await self.service.handle("tx", sub_action, fields, executor=session)
            except Exception:
                await session.release()
                raise
            self._pinned[session_id] = session
            logger.info(f"✅ Transaction started on pinned connection (session {session_id})")
            return result

        ends = sub_action in ENDS_TRANSACTION
        try:
            result = await self.service.handle("tx", sub_action, fields, executor=pinned)
        except ExecutionError:
            if ends:
                await self.release_session(session_id)
            raise
        if ends:
            await self.release_session(session_id)
        return result


def _split_arguments(arguments: Optional[dict]) -> tuple[str, dict]:
    fields = dict(arguments or {})
    sub_action = fields.pop("action", None)
    if not isinstance(sub_action, str) or not sub_action:
        raise ValidationError("'action' is required and must be a string", field="action")
    return sub_action, fields


async def run_tool(
    context: ToolContext,
    tool_name: str,
    arguments: Optional[dict],
    session_id: Optional[str] = None,
) -> dict:
    """
    Run one tool call and return the success payload.

    Raises ActionError subclasses unchanged so each transport can map them.
    """
    action_kind = get_action_kind(tool_name)
    if action_kind is None:
        raise NotFoundError(f"Unknown tool: {tool_name}", field="tool")

    sub_action, fields = _split_arguments(arguments)
    result = await context.run(action_kind, sub_action, fields, session_id=session_id)

    return {
        "action": sub_action,
        "rowCount": result.row_count,
        "rows": _serialize(result.rows),
    }


async def handle_tool_call(
    context: ToolContext,
    tool_name: str,
    arguments: Optional[dict],
    session_id: Optional[str] = None,
) -> list[types.TextContent]:
    """MCP entry point: JSON text for both success and failure."""
    try:
        payload = await run_tool(context, tool_name, arguments, session_id=session_id)
    except ActionError as e:
        payload = e.to_dict()
    return [types.TextContent(type="text", text=json.dumps(payload, indent=2))]
