"""
Executor Contract

The only thing the action pipeline knows about the database. Implementations
bind parameters, enforce the timeout and report database-side failures as
ExecutionError. See database.DatabaseConnection for the asyncpg one.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Sequence, runtime_checkable


@dataclass(frozen=True)
class ExecuteOptions:
    timeout_ms: Optional[int] = None

    @property
    def timeout_seconds(self) -> Optional[float]:
        return self.timeout_ms / 1000 if self.timeout_ms else None


@dataclass
class QueryResult:
    """Rows as plain dicts plus the affected/returned row count."""
    rows: list[dict] = field(default_factory=list)
    row_count: int = 0


@runtime_checkable
class Executor(Protocol):
    async def execute(
        self,
        sql: str,
        params: Sequence[Any] = (),
        options: Optional[ExecuteOptions] = None,
    ) -> QueryResult:
        ...
