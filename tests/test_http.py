"""
HTTP transport tests (FastAPI TestClient, mock executor)
"""

import pytest
from fastapi.testclient import TestClient

import transport.http as http_transport
from actions.errors import ExecutionError


@pytest.fixture
def client(tool_context):
    http_transport.context = tool_context
    yield TestClient(http_transport.app)
    http_transport.context = None


class TestHttpTransport:

    def test_healthz(self, client, mock_executor):
        mock_executor.rows = [{"version": "PostgreSQL 16.2", "current_database": "shop", "now": "x"}]
        response = client.get("/healthz")
        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy", "database": "shop", "version": "PostgreSQL 16.2", "pool": None,
        }

    def test_healthz_database_down(self, client, mock_executor):
        mock_executor.error = ExecutionError("connection refused")
        response = client.get("/healthz")
        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"

    def test_not_initialized(self):
        http_transport.context = None
        client = TestClient(http_transport.app)
        assert client.get("/healthz").status_code == 503
        assert client.post("/tools/pg_tx", json={"action": "begin"}).status_code == 503

    def test_list_tools(self, client):
        response = client.get("/tools")
        assert response.status_code == 200
        names = [tool["name"] for tool in response.json()]
        assert names == ["pg_query", "pg_schema", "pg_admin", "pg_monitor", "pg_tx"]

    def test_call_tool(self, client, mock_executor):
        response = client.post("/tools/pg_admin", json={"action": "vacuum", "target": "orders", "full": True})
        assert response.status_code == 200
        assert response.json() == {"action": "vacuum", "rowCount": 0, "rows": []}
        assert mock_executor.statements == ['VACUUM (FULL) "orders"']

    @pytest.mark.parametrize("tool, body, status, code", [
        ("pg_backup", {"action": "create"}, 404, "NOT_FOUND"),
        ("pg_admin", {"action": "defragment"}, 404, "NOT_FOUND"),
        ("pg_admin", {"action": "reindex", "target": "table"}, 422, "VALIDATION_ERROR"),
        ("pg_query", {"action": "exists", "table": "t", "where": "pg_sleep(1) IS NULL"}, 422, "UNSAFE_FRAGMENT"),
        ("pg_schema", {"action": "drop", "target": "trigger", "name": "trg"}, 422, "UNSUPPORTED_COMBINATION"),
    ])
    def test_error_status(self, client, mock_executor, tool, body, status, code):
        response = client.post(f"/tools/{tool}", json=body)
        assert response.status_code == status
        assert response.json()["code"] == code
        assert mock_executor.calls == []

    def test_execution_error_is_bad_gateway(self, client, mock_executor):
        mock_executor.error = ExecutionError("deadlock detected")
        response = client.post("/tools/pg_query", json={"action": "write", "sql": "UPDATE t SET a = 1"})
        assert response.status_code == 502
        assert response.json()["code"] == "EXECUTION_ERROR"

    def test_healthz_reports_pool_stats(self, client, monkeypatch):
        class FakeDatabase:
            async def get_pool_stats(self):
                return {"status": "connected", "size": 3, "freesize": 2}

        monkeypatch.setattr(http_transport, "db", FakeDatabase())
        response = client.get("/healthz")
        assert response.json()["pool"] == {"status": "connected", "size": 3, "freesize": 2}

    def test_session_header_isolates_transactions(self, client, session_factory, mock_executor):
        alice = {"X-Session-Id": "alice"}
        assert client.post("/tools/pg_tx", json={"action": "begin"}, headers=alice).status_code == 200
        client.post("/tools/pg_query", json={"action": "write", "sql": "INSERT INTO t VALUES (1)"})
        client.post("/tools/pg_tx", json={"action": "rollback"}, headers=alice)

        assert session_factory.sessions[0].statements == ["BEGIN", "ROLLBACK"]
        assert mock_executor.statements == ["INSERT INTO t VALUES (1)"]
