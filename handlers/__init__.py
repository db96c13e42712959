"""
Handler Registry - Maps tool names to action kinds

Every tool is a thin front for one action kind; the `action` argument picks
the sub-action and the remaining arguments are its fields.

Usage:
    from handlers import ToolContext, handle_tool_call

    context = ToolContext(ActionService(get_registry(), db), sessions=db)
    response = await handle_tool_call(context, "pg_admin", {"action": "vacuum", "target": "orders"})
"""

from .action_handlers import TOOL_KINDS, ToolContext, get_action_kind, handle_tool_call, run_tool


def list_all_tools() -> list[str]:
    """Get list of all registered tool names"""
    return list(TOOL_KINDS.keys())


__all__ = [
    'TOOL_KINDS',
    'ToolContext',
    'get_action_kind',
    'handle_tool_call',
    'list_all_tools',
    'run_tool',
]
