"""Tests for API endpoints: session, cases, tasks, maintenance, dashboard, kanban, search."""

import pytest

from facilitydesk.core.errors import DataAccessError
from facilitydesk.db.capabilities import Capabilities
from tests.conftest import make_token


@pytest.mark.asyncio
class TestHealthEndpoints:
    async def test_root(self, client):
        resp = await client.get("/")
        assert resp.status_code == 200
        data = resp.json()
        assert data["service"] == "FacilityDesk"
        assert data["status"] == "running"

    async def test_openapi_docs(self, client):
        resp = await client.get("/openapi.json")
        assert resp.status_code == 200
        paths = resp.json()["paths"]
        assert "/api/cases" in paths
        assert "/api/maintenance/calendar" in paths
        assert "/api/dashboard/kpi/{kind}" in paths


@pytest.mark.asyncio
class TestSession:
    async def test_signed_out_session(self, client):
        resp = await client.get("/api/session")
        assert resp.status_code == 200
        assert resp.json()["signed_in"] is False

    async def test_signed_in_session(self, client, auth_headers):
        resp = await client.get("/api/session", headers=auth_headers)
        data = resp.json()
        assert data["user_id"] == "dev-user"
        assert data["role"] == "förvaltare"
        assert data["capabilities"] == {"comments": True}

    async def test_protected_routes_need_a_token(self, client):
        resp = await client.get("/api/cases")
        assert resp.status_code == 401
        resp = await client.get("/api/cases", headers={"Authorization": "Bearer junk"})
        assert resp.status_code == 401


@pytest.mark.asyncio
class TestCaseEndpoints:
    async def test_list_cases(self, client, auth_headers):
        resp = await client.get("/api/cases", headers=auth_headers)
        assert resp.status_code == 200
        data = resp.json()
        assert data["total"] == 3
        assert data["loading"] is False

    async def test_list_cases_filtered_and_sorted(self, client, auth_headers):
        resp = await client.get(
            "/api/cases",
            params={"q": "i", "sort": "title", "direction": "asc"},
            headers=auth_headers,
        )
        titles = [c["title"] for c in resp.json()["cases"]]
        assert titles == sorted(titles)

        resp = await client.get("/api/cases", params={"priority": "hög"}, headers=auth_headers)
        assert [c["id"] for c in resp.json()["cases"]] == ["case-2"]

    async def test_invalid_filter_is_422(self, client, auth_headers):
        resp = await client.get("/api/cases", params={"status": "archived"}, headers=auth_headers)
        assert resp.status_code == 422
        resp = await client.get("/api/cases", params={"sort": "colour"}, headers=auth_headers)
        assert resp.status_code == 422

    async def test_create_case_shows_up_after_change(self, client, auth_headers, context):
        resp = await client.post("/api/cases", headers=auth_headers, json={
            "title": "Fuktfläck i källare",
            "property_id": "prop-1",
            "category": "VVS",
            "priority": "hög",
        })
        assert resp.status_code == 201
        created = resp.json()
        assert created["status"] == "reported"
        assert created["created_by"] == "dev-user"

        await context.hub.drain()
        resp = await client.get("/api/cases", headers=auth_headers)
        assert created["id"] in {c["id"] for c in resp.json()["cases"]}

    async def test_create_case_requires_title_and_property(self, client, auth_headers):
        resp = await client.post("/api/cases", headers=auth_headers, json={
            "title": "", "property_id": "", "category": "VVS", "priority": "låg",
        })
        assert resp.status_code == 422

    async def test_case_detail(self, client, auth_headers):
        resp = await client.get("/api/cases/case-2", headers=auth_headers)
        assert resp.status_code == 200
        data = resp.json()
        assert data["case"]["title"] == "Trasig belysning garage"
        assert data["property"]["id"] == "prop-1"
        assert [t["id"] for t in data["tasks"]] == ["task-1"]
        assert data["comments_supported"] is True

    async def test_case_detail_not_found(self, client, auth_headers):
        resp = await client.get("/api/cases/nonexistent-id", headers=auth_headers)
        assert resp.status_code == 404

    async def test_update_status(self, client, auth_headers):
        resp = await client.patch(
            "/api/cases/case-1/status", json={"status": "in_progress"}, headers=auth_headers
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == "in_progress"

    async def test_update_status_unknown_case(self, client, auth_headers):
        resp = await client.patch(
            "/api/cases/nope/status", json={"status": "done"}, headers=auth_headers
        )
        assert resp.status_code == 404

    async def test_update_status_backend_failure_is_502(self, client, auth_headers, context, monkeypatch):
        async def broken(*args, **kwargs):
            raise DataAccessError("connection refused", table="cases")

        monkeypatch.setattr(context.data_source.cases, "update", broken)
        resp = await client.patch(
            "/api/cases/case-1/status", json={"status": "done"}, headers=auth_headers
        )
        assert resp.status_code == 502
        assert context.cases.get("case-1").status.value == "reported"
        assert context.notifier.recent()[0].title == "Updating case status failed"

    async def test_delete_case(self, client, auth_headers):
        resp = await client.delete("/api/cases/case-3", headers=auth_headers)
        assert resp.status_code == 200
        resp = await client.delete("/api/cases/case-3", headers=auth_headers)
        assert resp.status_code == 404

    async def test_comments_round_trip(self, client, auth_headers):
        resp = await client.post(
            "/api/cases/case-1/comments", json={"content": "Tekniker bokad"}, headers=auth_headers
        )
        assert resp.status_code == 201
        assert resp.json()["author_id"] == "dev-user"

        resp = await client.get("/api/cases/case-1/comments", headers=auth_headers)
        assert [c["content"] for c in resp.json()["comments"]] == ["Tekniker bokad"]

    async def test_blank_comment_rejected(self, client, auth_headers):
        resp = await client.post(
            "/api/cases/case-1/comments", json={"content": "   "}, headers=auth_headers
        )
        assert resp.status_code == 422

    async def test_comments_unsupported_is_501(self, client, auth_headers, context):
        context.capabilities = Capabilities(comments=False)
        resp = await client.get("/api/cases/case-1/comments", headers=auth_headers)
        assert resp.status_code == 501
        resp = await client.post(
            "/api/cases/case-1/comments", json={"content": "Hej"}, headers=auth_headers
        )
        assert resp.status_code == 501
        resp = await client.get("/api/cases/case-1", headers=auth_headers)
        assert resp.json()["comments_supported"] is False


@pytest.mark.asyncio
class TestTaskAndMaintenanceEndpoints:
    async def test_list_tasks_by_case(self, client, auth_headers):
        resp = await client.get("/api/tasks", params={"case_id": "case-2"}, headers=auth_headers)
        assert [t["id"] for t in resp.json()["tasks"]] == ["task-1"]

    async def test_create_task(self, client, auth_headers):
        resp = await client.post(
            "/api/tasks", json={"description": "Kontrollera brandlarm"}, headers=auth_headers
        )
        assert resp.status_code == 201
        assert resp.json()["status"] == "pending"

    async def test_list_plans(self, client, auth_headers):
        resp = await client.get("/api/maintenance", headers=auth_headers)
        assert [p["id"] for p in resp.json()["plans"]] == ["maint-1"]

    async def test_create_plan_validation(self, client, auth_headers):
        body = {
            "title": "Sotning", "property_id": "prop-1", "frequency": "annual",
            "next_due_date": "2025-10-01", "estimated_duration_hours": 0.25,
        }
        resp = await client.post("/api/maintenance", json=body, headers=auth_headers)
        assert resp.status_code == 422

        body["estimated_duration_hours"] = 1
        resp = await client.post("/api/maintenance", json=body, headers=auth_headers)
        assert resp.status_code == 201
        assert resp.json()["priority"] == "normal"

    async def test_delete_plan(self, client, auth_headers):
        resp = await client.delete("/api/maintenance/maint-1", headers=auth_headers)
        assert resp.status_code == 200
        resp = await client.delete("/api/maintenance/maint-1", headers=auth_headers)
        assert resp.status_code == 404

    async def test_calendar(self, client, auth_headers):
        resp = await client.get("/api/maintenance/calendar", headers=auth_headers)
        assert resp.status_code == 200
        events = resp.json()["events"]
        assert len(events) == 6
        assert events[0]["property_name"] == "Newsec Demo Fastighet"
        assert events[0]["overdue"] is False

        resp = await client.get(
            "/api/maintenance/calendar", params={"property_id": "other"}, headers=auth_headers
        )
        assert resp.json()["events"] == []


@pytest.mark.asyncio
class TestDashboardEndpoints:
    async def test_stats(self, client, auth_headers):
        resp = await client.get("/api/dashboard", headers=auth_headers)
        stats = resp.json()["stats"]
        assert stats["open_cases"] == 2
        assert stats["overdue_tasks"] == 0
        assert stats["total_cases"] == 3
        assert stats["total_maintenance_plans"] == 1

    async def test_kpi_detail(self, client, auth_headers):
        resp = await client.get("/api/dashboard/kpi/open_cases", headers=auth_headers)
        data = resp.json()
        assert data["title"] == "Öppna Ärenden"
        assert {i["id"] for i in data["items"]} == {"case-1", "case-2"}

        resp = await client.get("/api/dashboard/kpi/nonsense", headers=auth_headers)
        assert resp.status_code == 422

    async def test_charts_recent_counts(self, client, auth_headers):
        charts = (await client.get("/api/dashboard/charts", headers=auth_headers)).json()
        assert [d["value"] for d in charts["status_distribution"]] == [1, 1, 1, 0]

        recent = (await client.get("/api/dashboard/recent", headers=auth_headers)).json()
        assert len(recent["cases"]) == 3

        counts = (await client.get("/api/dashboard/counts", headers=auth_headers)).json()
        assert counts == {"properties": 1, "cases": 3, "tasks": 2, "maintenance_plans": 1}


@pytest.mark.asyncio
class TestKanbanAndSearch:
    async def test_board(self, client, auth_headers):
        resp = await client.get("/api/kanban", headers=auth_headers)
        columns = resp.json()["columns"]
        assert [c["id"] for c in columns] == ["reported", "in_progress", "done", "closed"]

    async def test_move(self, client, auth_headers):
        resp = await client.post(
            "/api/kanban/move", json={"case_id": "case-1", "column_id": "done"}, headers=auth_headers
        )
        assert resp.json()["moved"] is True
        done = next(c for c in resp.json()["columns"] if c["id"] == "done")
        assert {c["id"] for c in done["cases"]} == {"case-1", "case-3"}

        resp = await client.post(
            "/api/kanban/move", json={"case_id": "case-1", "column_id": "case-2"}, headers=auth_headers
        )
        assert resp.json()["moved"] is False

    async def test_snapshot_search(self, client, auth_headers):
        resp = await client.get("/api/search", params={"q": "ARMATUR"}, headers=auth_headers)
        results = resp.json()["results"]
        assert [(r["type"], r["id"]) for r in results] == [("task", "task-1")]

        resp = await client.get("/api/search", params={"q": "a"}, headers=auth_headers)
        assert resp.json()["results"] == []

    async def test_search_type_filter(self, client, auth_headers):
        resp = await client.get(
            "/api/search", params={"q": "kontroll", "types": ["maintenance"]}, headers=auth_headers
        )
        assert [r["href"] for r in resp.json()["results"]] == ["/maintenance/maint-1"]

    async def test_server_search(self, client, auth_headers):
        resp = await client.get("/api/search/server", params={"q": "demo"}, headers=auth_headers)
        assert [p["id"] for p in resp.json()["properties"]] == ["prop-1"]


@pytest.mark.asyncio
class TestReferenceEndpoints:
    async def test_properties_units_users(self, client, auth_headers):
        props = (await client.get("/api/properties", headers=auth_headers)).json()["properties"]
        assert [p["id"] for p in props] == ["prop-1"]

        units = (await client.get("/api/properties/prop-1/units", headers=auth_headers)).json()
        assert [u["unit_number"] for u in units["units"]] == ["A12"]

        resp = await client.get("/api/properties/nope/units", headers=auth_headers)
        assert resp.status_code == 404

        users = (await client.get("/api/users", headers=auth_headers)).json()["users"]
        assert users[0]["email"] == "demo@newsec.se"

    async def test_other_user_token(self, client):
        headers = {"Authorization": f"Bearer {make_token(user_id='stranger', email='s@x.se')}"}
        resp = await client.get("/api/session", headers=headers)
        assert resp.json()["signed_in"] is True
        assert resp.json()["profile"] is None
