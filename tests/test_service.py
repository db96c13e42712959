"""
Tests for ActionService: dispatch, execution and error propagation
"""

import json

import pytest

from actions.errors import ExecutionError, NotFoundError, UnsafeFragmentError, ValidationError
from actions.executor import ExecuteOptions
from actions.service import ActionService
from conftest import MockExecutor
from utils.statement_log import StatementLog


class TestActionService:

    async def test_executes_built_statement(self, service, mock_executor):
        mock_executor.rows = [{"id": 1}]
        result = await service.handle("query", "read", {"sql": "SELECT $1::int AS id", "params": [1], "timeout_ms": 250})

        assert result.rows == [{"id": 1}]
        assert result.row_count == 1
        sql, params, options = mock_executor.calls[0]
        assert sql == "SELECT $1::int AS id"
        assert params == (1,)
        assert options == ExecuteOptions(timeout_ms=250)
        assert options.timeout_seconds == 0.25

    async def test_result_passed_back_unmodified(self, registry):
        executor = MockExecutor(rows=[{"a": 1}, {"a": 2}], row_count=7)
        result = await ActionService(registry, executor).handle("query", "write", {"sql": "UPDATE t SET a = a"})
        assert result.row_count == 7
        assert result.rows == [{"a": 1}, {"a": 2}]

    @pytest.mark.parametrize("kind, action, fields, error", [
        ("admin", "defragment", {}, NotFoundError),
        ("tx", "release", {}, ValidationError),
        ("query", "count", {"table": "t", "where": "1=1 UNION SELECT 1"}, UnsafeFragmentError),
    ])
    async def test_local_errors_never_reach_executor(self, service, mock_executor, kind, action, fields, error):
        with pytest.raises(error):
            await service.handle(kind, action, fields)
        assert mock_executor.calls == []

    async def test_execution_error_surfaces_unchanged(self, registry):
        failure = ExecutionError("relation does not exist", sqlstate="42P01")
        service = ActionService(registry, MockExecutor(error=failure))
        with pytest.raises(ExecutionError) as exc_info:
            await service.handle("query", "read", {"sql": "SELECT * FROM missing"})
        assert exc_info.value is failure

    async def test_other_executor_errors_wrapped(self, registry):
        executor = MockExecutor(error=ConnectionResetError("connection lost"))
        with pytest.raises(ExecutionError) as exc_info:
            await ActionService(registry, executor).handle("monitor", "health")
        assert "connection lost" in str(exc_info.value)
        assert len(executor.calls) == 1

    async def test_executor_override(self, service, mock_executor):
        other = MockExecutor()
        await service.handle("tx", "begin", {}, executor=other)
        assert other.statements == ["BEGIN"]
        assert mock_executor.calls == []

    async def test_no_executor(self, registry):
        with pytest.raises(RuntimeError):
            await ActionService(registry).handle("tx", "commit")

    async def test_statement_log(self, registry, tmp_path):
        log = StatementLog(tmp_path)
        service = ActionService(registry, MockExecutor(), statement_log=log)
        await service.handle("admin", "cancel_backend", {"pid": 99})

        lines = log.path_for().read_text(encoding="utf-8").splitlines()
        entry = json.loads(lines[0])
        assert entry["action"] == "admin.cancel_backend"
        assert entry["sql"] == "SELECT pg_cancel_backend($1)"
        assert entry["param_count"] == 1
        assert "params" not in entry


class TestStatementLog:

    def test_write_failure_is_only_logged(self, tmp_path, caplog):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x")
        StatementLog(blocker).record("tx.begin", "BEGIN", 0)
        assert "Failed to log statement" in caplog.text
