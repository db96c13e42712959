"""
Pytest configuration and shared fixtures

Everything runs against MockExecutor, which records each statement it is
asked to run; no PostgreSQL server is needed.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from actions.catalog import build_default_registry
from actions.executor import QueryResult
from actions.service import ActionService
from handlers import ToolContext


class MockExecutor:
    """Executor double: records calls and returns a canned result or raises."""

    def __init__(self, rows=None, row_count=None, error=None):
        self.rows = rows or []
        self.row_count = row_count
        self.error = error
        self.calls = []

    async def execute(self, sql, params=(), options=None):
        self.calls.append((sql, tuple(params), options))
        if self.error is not None:
            raise self.error
        count = self.row_count if self.row_count is not None else len(self.rows)
        return QueryResult(rows=list(self.rows), row_count=count)

    @property
    def statements(self) -> list[str]:
        return [sql for sql, _, _ in self.calls]


class MockSession(MockExecutor):
    """A pinned connection double; remembers whether it was released."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.released = False

    async def release(self):
        self.released = True


class MockSessionFactory:
    """Stands in for DatabaseConnection.create_session()."""

    def __init__(self, **session_kwargs):
        self.session_kwargs = session_kwargs
        self.sessions = []

    async def create_session(self):
        session = MockSession(**self.session_kwargs)
        self.sessions.append(session)
        return session


@pytest.fixture
def registry():
    return build_default_registry()


@pytest.fixture
def mock_executor():
    return MockExecutor()


@pytest.fixture
def service(registry, mock_executor):
    return ActionService(registry, executor=mock_executor)


@pytest.fixture
def session_factory():
    return MockSessionFactory()


@pytest.fixture
def tool_context(service, session_factory):
    return ToolContext(service, sessions=session_factory)
