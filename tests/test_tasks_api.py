"""Tests for weekly_planner.routers.tasks — the /api/tasks endpoints."""

from unittest.mock import patch

from weekly_planner.services.week_service import WeekService

from tests.conftest import WEEK, task


class TestGetWeekEndpoint:
    def test_unknown_week_is_empty_object(self, client):
        resp = client.get("/api/tasks/2099-01-05")
        assert resp.status_code == 200
        assert resp.json() == {}

    def test_returns_saved_days(self, client):
        client.post(f"/api/tasks/{WEEK}", json={"days": {"0": [task("a", "x")]}})
        assert client.get(f"/api/tasks/{WEEK}").json() == {"0": [task("a", "x")]}


class TestPutWeekEndpoint:
    def test_upserts_and_echoes(self, client):
        days = {"0": [task("a", "x")], "4": [task("b", "y", "Completed")]}
        resp = client.post(f"/api/tasks/{WEEK}", json={"days": days})
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "weekKey": WEEK, "days": days}

    def test_days_list_is_400(self, client):
        resp = client.post(f"/api/tasks/{WEEK}", json={"days": [1, 2, 3]})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid payload: 'days' must be an object"
        assert client.get(f"/api/tasks/{WEEK}").json() == {}

    def test_missing_days_is_400(self, client):
        resp = client.post(f"/api/tasks/{WEEK}", json={})
        assert resp.status_code == 400

    def test_non_json_body_is_400(self, client):
        resp = client.post(f"/api/tasks/{WEEK}", content=b"not json", headers={"Content-Type": "application/json"})
        assert resp.status_code == 400


class TestUpdateTaskEndpoint:
    def test_updates_task(self, client):
        client.post(f"/api/tasks/{WEEK}", json={"days": {"1": [task("a", "x"), task("b", "y")]}})
        resp = client.put(f"/api/tasks/{WEEK}/1/b", json={"text": "z", "status": "Abandoned"})
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "task": task("b", "z", "Abandoned")}
        assert client.get(f"/api/tasks/{WEEK}").json() == {
            "1": [task("a", "x"), task("b", "z", "Abandoned")]
        }

    def test_missing_week_is_404(self, client):
        resp = client.put("/api/tasks/2099-01-05/1/b", json={"text": "z", "status": "Completed"})
        assert resp.status_code == 404
        assert resp.json() == {"error": "Week or day not found"}

    def test_missing_task_is_404(self, client):
        client.post(f"/api/tasks/{WEEK}", json={"days": {"1": [task("a", "x")]}})
        resp = client.put(f"/api/tasks/{WEEK}/1/nope", json={"text": "z", "status": "Completed"})
        assert resp.status_code == 404
        assert resp.json() == {"error": "Task not found"}

    def test_unknown_status_is_400(self, client):
        client.post(f"/api/tasks/{WEEK}", json={"days": {"1": [task("a", "x")]}})
        resp = client.put(f"/api/tasks/{WEEK}/1/a", json={"text": "z", "status": "Sleeping"})
        assert resp.status_code == 400

    def test_non_integer_day_is_400(self, client):
        resp = client.put(f"/api/tasks/{WEEK}/monday/a", json={"text": "z"})
        assert resp.status_code == 400


class TestDeleteTaskEndpoint:
    def test_deletes_task(self, client):
        client.post(f"/api/tasks/{WEEK}", json={"days": {"2": [task("a", "x"), task("b", "y")]}})
        resp = client.delete(f"/api/tasks/{WEEK}/2/a")
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "days": {"2": [task("b", "y")]}}

    def test_absent_task_succeeds(self, client):
        client.post(f"/api/tasks/{WEEK}", json={"days": {"2": [task("a", "x")]}})
        resp = client.delete(f"/api/tasks/{WEEK}/2/nope")
        assert resp.status_code == 200
        assert resp.json()["days"] == {"2": [task("a", "x")]}

    def test_missing_day_is_404(self, client):
        client.post(f"/api/tasks/{WEEK}", json={"days": {"2": [task("a", "x")]}})
        assert client.delete(f"/api/tasks/{WEEK}/3/a").status_code == 404


class TestAppendTaskEndpoint:
    def test_appends(self, client):
        resp = client.post(f"/api/tasks/{WEEK}/5", json=task("a", "x"))
        assert resp.status_code == 201
        assert resp.json() == {"success": True, "task": task("a", "x")}
        assert client.get(f"/api/tasks/{WEEK}").json() == {"5": [task("a", "x")]}

    def test_text_too_long_is_400(self, client):
        resp = client.post(f"/api/tasks/{WEEK}/5", json=task("a", "x" * 101))
        assert resp.status_code == 400


class TestClearWeekEndpoint:
    def test_clears(self, client):
        client.post(f"/api/tasks/{WEEK}", json={"days": {"2": [task("a", "x")]}})
        resp = client.delete(f"/api/tasks/{WEEK}")
        assert resp.json() == {"cleared": True}
        assert client.get(f"/api/tasks/{WEEK}").json() == {}

    def test_clearing_unknown_week_succeeds(self, client):
        resp = client.delete("/api/tasks/2099-01-05")
        assert resp.status_code == 200
        assert resp.json() == {"cleared": True}


class TestInternalErrors:
    def test_unexpected_fault_is_generic_500(self, client):
        with patch.object(WeekService, "get_week", side_effect=RuntimeError("db password leaked")):
            resp = client.get(f"/api/tasks/{WEEK}")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Internal Server Error"}


class TestMeta:
    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"
