"""Endpoint tests for /api/v1/admin/users."""

from __future__ import annotations

from fastapi.testclient import TestClient

from conftest import FakeGateway
from app.core.locks import acquire_user_lock, release_user_lock


class TestListEndpoint:

    def test_returns_users_and_stats(self, test_client: TestClient) -> None:
        response = test_client.get("/api/v1/admin/users")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 3
        assert [u["id"] for u in body["users"]] == ["u3", "u1", "u2"]
        assert body["users"][1]["interview_count"] == 2
        assert body["users"][1]["candidate_count"] == 1
        assert body["stats"]["total_users"] == 3

    def test_query_parameters(self, test_client: TestClient) -> None:
        response = test_client.get(
            "/api/v1/admin/users",
            params={"search": "example", "sort_by": "name", "order": "asc", "show_banned": "false"},
        )

        assert response.status_code == 200
        assert [u["id"] for u in response.json()["users"]] == ["u1"]

    def test_invalid_sort_key_rejected(self, test_client: TestClient) -> None:
        response = test_client.get("/api/v1/admin/users", params={"sort_by": "credits"})

        assert response.status_code == 422

    def test_aggregation_failure_returns_502(
        self, test_client: TestClient, gateway: FakeGateway
    ) -> None:
        gateway.fail("count", "Interviews")

        response = test_client.get("/api/v1/admin/users")

        assert response.status_code == 502
        assert response.json()["detail"] == "Failed to fetch users"

    def test_stats_endpoint(self, test_client: TestClient) -> None:
        response = test_client.get("/api/v1/admin/users/stats")

        assert response.status_code == 200
        assert response.json() == {
            "total_users": 3,
            "active_users": 1,
            "banned_users": 1,
            "total_interviews": 3,
            "total_candidates": 2,
        }


class TestExportEndpoint:

    def test_downloads_visible_users(self, test_client: TestClient) -> None:
        response = test_client.get(
            "/api/v1/admin/users/export", params={"show_banned": "false"}
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        disposition = response.headers["content-disposition"]
        assert disposition.startswith('attachment; filename="users-')
        assert disposition.endswith('.csv"')
        lines = response.text.splitlines()
        assert len(lines) == 3
        assert not any("bob@example.com" in line for line in lines)


class TestModerationEndpoints:

    def test_ban_returns_refreshed_list(
        self, test_client: TestClient, gateway: FakeGateway
    ) -> None:
        response = test_client.post("/api/v1/admin/users/u1/ban")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "User banned successfully"
        assert body["users"]["stats"]["banned_users"] == 2

    def test_unban(self, test_client: TestClient, gateway: FakeGateway) -> None:
        response = test_client.post("/api/v1/admin/users/u2/unban")

        assert response.status_code == 200
        assert response.json()["message"] == "User unbanned successfully"
        bob = next(r for r in gateway.tables["users"] if r["id"] == "u2")
        assert bob["banned"] is False

    def test_ban_failure_returns_502(
        self, test_client: TestClient, gateway: FakeGateway
    ) -> None:
        gateway.fail("update", "users")

        response = test_client.post("/api/v1/admin/users/u1/ban")

        assert response.status_code == 502
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Failed to update user status"

    def test_delete_reports_steps(
        self, test_client: TestClient, gateway: FakeGateway
    ) -> None:
        gateway.fail("delete", "interview_results")

        response = test_client.delete("/api/v1/admin/users/u1")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [(s["name"], s["status"]) for s in body["steps"]] == [
            ("interviews", "ok"),
            ("interview_results", "failed"),
            ("user", "ok"),
        ]
        assert body["users"]["total"] == 2

    def test_delete_unknown_user_is_noop_success(
        self, test_client: TestClient, gateway: FakeGateway
    ) -> None:
        response = test_client.delete("/api/v1/admin/users/ghost")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [(s["name"], s["status"]) for s in body["steps"]] == [
            ("interviews", "skipped"),
            ("interview_results", "skipped"),
            ("user", "ok"),
        ]
        assert len(gateway.tables["users"]) == 3
        assert ("delete", "Interviews") not in gateway.calls

    def test_delete_root_failure_returns_502_with_steps(
        self, test_client: TestClient, gateway: FakeGateway
    ) -> None:
        gateway.fail("delete", "users")

        response = test_client.delete("/api/v1/admin/users/u1")

        assert response.status_code == 502
        body = response.json()
        assert body["message"] == "Failed to delete user"
        assert body["steps"][-1]["status"] == "failed"

    def test_busy_user_returns_409(
        self, test_client: TestClient, gateway: FakeGateway
    ) -> None:
        assert acquire_user_lock("u1")
        try:
            response = test_client.delete("/api/v1/admin/users/u1")
        finally:
            release_user_lock("u1")

        assert response.status_code == 409
        assert ("delete", "users") not in gateway.calls
