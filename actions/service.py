"""
Action Service - dispatch a request and run it on an executor

This is the single call surface the tool handlers use. Everything up to the
executor call is local and synchronous; the executor call is the only
suspension point. Results come back exactly as the executor produced them.
"""

import logging
from typing import Any, Mapping, Optional

from .errors import ActionError, ExecutionError
from .executor import ExecuteOptions, Executor, QueryResult
from .registry import ActionRegistry

logger = logging.getLogger(__name__)


class ActionService:
    def __init__(self, registry: ActionRegistry, executor: Optional[Executor] = None, statement_log=None):
        self.registry = registry
        self.executor = executor
        self.statement_log = statement_log

    async def handle(
        self,
        action_kind: str,
        sub_action: str,
        fields: Optional[Mapping[str, Any]] = None,
        executor: Optional[Executor] = None,
    ) -> QueryResult:
        """
        Build and execute one action.

        `executor` overrides the default one for this call; the handlers use
        it to route statements to a pinned transaction session.

        Raises:
            NotFoundError, ValidationError, UnsafeFragmentError,
            UnsupportedCombinationError: before anything is executed
            ExecutionError: the database rejected or failed the statement
        """
        statement = self.registry.dispatch(action_kind, sub_action, fields)

        target = executor or self.executor
        if target is None:
            raise RuntimeError("ActionService has no executor")

        if self.statement_log:
            self.statement_log.record(f"{action_kind}.{sub_action}", statement.sql, len(statement.params))

        try:
            return await target.execute(
                statement.sql,
                statement.params,
                ExecuteOptions(timeout_ms=statement.timeout_ms),
            )
        except ActionError:
            raise
        except Exception as e:
            logger.error(f"❌ {action_kind}.{sub_action} failed in executor: {e}")
            raise ExecutionError(str(e)) from e
