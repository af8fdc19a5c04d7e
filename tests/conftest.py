"""Shared test fixtures.

Provides an in-memory ``FakeGateway`` standing in for Supabase, a
FastAPI ``TestClient`` wired to it, and mock Supabase clients for the
health endpoint.
"""

import os
from collections.abc import Generator
from typing import Any
from unittest.mock import MagicMock, patch

os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-key")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402


class FakeGateway:
    """In-memory ``DataGateway`` keyed by table name.

    ``fail(op, table)`` makes every later ``op`` on ``table`` raise.
    """

    def __init__(self, tables: dict[str, list[dict[str, Any]]] | None = None) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {
            name: [dict(row) for row in rows] for name, rows in (tables or {}).items()
        }
        self.calls: list[tuple[str, str]] = []
        self._failures: dict[tuple[str, str], Exception] = {}

    def fail(self, op: str, table: str, exc: Exception | None = None) -> None:
        self._failures[(op, table)] = exc or RuntimeError(f"{op} on {table} failed")

    def _enter(self, op: str, table: str) -> list[dict[str, Any]]:
        self.calls.append((op, table))
        if (op, table) in self._failures:
            raise self._failures[(op, table)]
        return self.tables.setdefault(table, [])

    async def list_records(
        self,
        table: str,
        order_by: str,
        descending: bool = True,
        filters: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        rows = [
            row
            for row in self._enter("list", table)
            if all(row.get(k) == v for k, v in (filters or {}).items())
        ]
        rows.sort(key=lambda r: str(r.get(order_by) or ""), reverse=descending)
        return [dict(row) for row in rows]

    async def get_record(self, table: str, record_id: Any) -> dict[str, Any] | None:
        for row in self._enter("get", table):
            if str(row.get("id")) == str(record_id):
                return dict(row)
        return None

    async def count(self, table: str, field: str, value: Any) -> int:
        return sum(1 for row in self._enter("count", table) if row.get(field) == value)

    async def update(self, table: str, record_id: Any, fields: dict[str, Any]) -> None:
        for row in self._enter("update", table):
            if str(row.get("id")) == str(record_id):
                row.update(fields)

    async def delete(self, table: str, field: str, value: Any) -> None:
        rows = self._enter("delete", table)
        rows[:] = [row for row in rows if row.get(field) != value]


def sample_tables() -> dict[str, list[dict[str, Any]]]:
    """Three users: one active, one banned with interviews, one idle."""
    return {
        "users": [
            {
                "id": "u1",
                "name": "Alice Martin",
                "email": "alice@example.com",
                "created_at": "2024-03-01T10:00:00+00:00",
                "credits": 5,
                "banned": False,
                "interview_id": "iv-1",
            },
            {
                "id": "u2",
                "name": "Bob Stone",
                "email": "bob@example.com",
                "created_at": "2024-02-01T09:30:00+00:00",
                "credits": None,
                "banned": True,
                "interview_id": "iv-2",
            },
            {
                "id": "u3",
                "name": None,
                "email": "carol@sample.org",
                "created_at": "2024-04-15T08:00:00+00:00",
                "credits": 0,
                "banned": None,
                "interview_id": None,
            },
        ],
        "Interviews": [
            {"id": "i1", "userEmail": "alice@example.com"},
            {"id": "i2", "userEmail": "alice@example.com"},
            {"id": "i3", "userEmail": "bob@example.com"},
        ],
        "interview_results": [
            {
                "id": "r1",
                "interview_id": "iv-1",
                "fullname": "dana lee",
                "created_at": "2024-03-05T12:00:00+00:00",
                "conversation_transcript": {"feedback": {"rating": {"technical": 7, "communication": 8}}},
            },
            {
                "id": "r2",
                "interview_id": "iv-2",
                "fullname": None,
                "created_at": "2024-03-06T12:00:00+00:00",
                "conversation_transcript": None,
            },
        ],
    }


@pytest.fixture()
def gateway() -> FakeGateway:
    """A gateway preloaded with ``sample_tables()``."""
    return FakeGateway(sample_tables())


@pytest.fixture()
def test_client(gateway: FakeGateway) -> Generator[TestClient, None, None]:
    """Provide a FastAPI TestClient whose gateway is ``gateway``."""
    from app.db.gateway import get_gateway
    from app.main import app

    app.dependency_overrides[get_gateway] = lambda: gateway
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture()
def mock_supabase_module() -> Generator[MagicMock, None, None]:
    """Patch the Supabase client used by the health router."""
    mock_client = MagicMock()
    mock_table = MagicMock()
    mock_select = MagicMock()
    mock_limit = MagicMock()

    mock_client.table.return_value = mock_table
    mock_table.select.return_value = mock_select
    mock_select.limit.return_value = mock_limit
    mock_limit.execute.return_value = MagicMock()  # non-None result

    with patch("app.routers.health.get_supabase", return_value=mock_client):
        yield mock_client


@pytest.fixture()
def mock_supabase_disconnected() -> Generator[MagicMock, None, None]:
    """Patch ``get_supabase`` to simulate a disconnected database."""
    with patch(
        "app.routers.health.get_supabase",
        side_effect=Exception("Connection refused"),
    ):
        yield MagicMock()
