from __future__ import annotations

from datetime import date

import pytest

from meal_registration.core.enums import OrderStatus
from meal_registration.main import create_app


@pytest.fixture
def client(container):
    app = create_app(container)
    app.config["TESTING"] = True
    return app.test_client()


def _login(client, *, role="Employee", user_id="e1", tenant_id="t1"):
    with client.session_transaction() as s:
        s["user_id"] = user_id
        s["tenant_id"] = tenant_id
        s["role"] = role
        s["name"] = "An Nguyen"


def test_orders_require_login(client):
    res = client.post("/api/v1/orders/toggle", json={})
    assert res.status_code == 401


def test_toggle_route(client, orders_repo):
    _login(client)
    res = client.post("/api/v1/orders/toggle", json={}, headers={"User-Agent": "pytest"})

    assert res.status_code == 200
    body = res.get_json()
    assert body["status"] == "not_eating"
    assert body["previous_status"] == "eating"
    assert body["is_late"] is False
    assert orders_repo.rows[("t1", "e1", date(2024, 6, 10))].status == OrderStatus.NOT_EATING


def test_toggle_route_rejects_unknown_status(client):
    _login(client)
    res = client.post("/api/v1/orders/toggle", json={"current_status": "maybe"})
    assert res.status_code == 400
    assert res.get_json()["code"] == "ERR_VALIDATION"


def test_bulk_route_reports_partial_failure(client, orders_repo):
    _login(client)
    orders_repo.fail_on.add(date(2024, 6, 12))

    res = client.post(
        "/api/v1/orders/bulk",
        json={"dates": ["2024-06-11", "2024-06-12"], "status": "not_eating"},
    )

    assert res.status_code == 207
    body = res.get_json()
    assert body["succeeded"] == ["2024-06-11"]
    assert body["failed"] == ["2024-06-12"]


def test_bulk_route_validates_payload(client):
    _login(client)
    assert client.post("/api/v1/orders/bulk", json={"dates": [], "status": "eating"}).status_code == 400
    assert client.post("/api/v1/orders/bulk", json={"dates": ["11/06/2024"], "status": "eating"}).status_code == 400
    assert client.post("/api/v1/orders/bulk", json={"dates": ["2024-06-11"], "status": "x"}).status_code == 400


def test_calendar_and_history_routes(client, orders_repo):
    _login(client)
    orders_repo.put("t1", "e1", date(2024, 6, 11), OrderStatus.NOT_EATING)

    res = client.get("/api/v1/orders/calendar?year=2024&month=6")
    assert res.status_code == 200
    days = {d["date"]: d for d in res.get_json()["days"]}
    assert days["2024-06-11"]["is_opted_out"] is True

    res = client.get("/api/v1/orders/history?days=30")
    assert res.status_code == 200
    assert res.get_json()["pagination"]["total"] == 1

    assert client.get("/api/v1/orders/history?days=120").status_code == 400


def test_dashboard_forbidden_for_employee(client):
    _login(client)
    res = client.get("/api/v1/dashboard/summary")
    assert res.status_code == 403


def test_dashboard_summary_for_manager(client, orders_repo):
    _login(client, role="Manager", user_id="e3")
    orders_repo.put("t1", "e1", date(2024, 6, 10), OrderStatus.NOT_EATING)

    res = client.get("/api/v1/dashboard/summary?date=2024-06-10")

    assert res.status_code == 200
    assert res.get_json() == {
        "date": "2024-06-10",
        "total_employees": 4,
        "not_eating_count": 1,
        "registered_count": 3,
    }


def test_kitchen_can_read_board(client):
    _login(client, role="Kitchen", user_id="k1")
    res = client.get("/api/v1/dashboard/board?date=2024-06-10&status=all&page_size=2")
    assert res.status_code == 200
    assert res.get_json()["pagination"]["total_pages"] == 3


def test_settings_update_requires_admin(client, settings_repo):
    _login(client, role="Manager")
    res = client.put("/api/admin/settings/deadline", json={"deadline_time": "06:00", "offset_days": 0})
    assert res.status_code == 403

    _login(client, role="Admin HR")
    res = client.put("/api/admin/settings/deadline", json={"deadline_time": "06:00", "offset_days": 0})
    assert res.status_code == 200
    assert res.get_json()["data"] == {"deadline_time": "06:00", "offset_days": 0}
    assert settings_repo.values["registration_deadline"] == "06:00"


def test_broken_setting_maps_to_config_error(client, settings_repo):
    settings_repo.values["cooking_days"] = "oops"
    res = client.get("/api/admin/settings/cooking-days")
    assert res.status_code == 409
    assert res.get_json()["code"] == "ERR_CONFIG"


def test_cron_requires_secret(client):
    assert client.post("/api/cron/auto-reset-meals").status_code == 401

    res = client.post("/api/cron/auto-reset-meals", headers={"Authorization": "Bearer test-cron-secret"})
    assert res.status_code == 200
    assert res.get_json()["reason"] == "disabled"


@pytest.mark.parametrize(
    "path",
    [
        "/api/v1/orders/calendar?year=0&month=1",
        "/api/v1/orders/calendar?year=10000&month=1",
        "/api/v1/orders/calendar?year=2024&month=13",
        "/api/v1/stats/monthly?year=0&month=1",
        "/api/v1/stats/monthly?year=10000&month=12",
    ],
)
def test_out_of_range_year_or_month_is_rejected(client, path):
    _login(client)
    res = client.get(path)
    assert res.status_code == 400
    assert res.get_json()["code"] == "ERR_VALIDATION"


def test_activity_logs_route(client, activity_repo):
    _login(client)
    client.post("/api/v1/orders/toggle", json={})
    assert client.get("/api/admin/activity-logs").status_code == 403

    _login(client, role="Admin HR", user_id="e3")
    res = client.get("/api/admin/activity-logs?action=cancellation&user_id=e1&limit=5")
    assert res.status_code == 200
    data = res.get_json()["data"]
    assert data["total"] == 1
    assert data["logs"][0]["performed_by"]["full_name"] == "An Nguyen"

    assert client.get("/api/admin/activity-logs?from_date=10-06-2024").status_code == 400


def test_manager_dashboard_route(client, orders_repo):
    _login(client, role="Manager", user_id="e3")
    orders_repo.put("t1", "e1", date(2024, 6, 10), OrderStatus.NOT_EATING)

    res = client.get("/api/v1/dashboard/manager?days=7")

    assert res.status_code == 200
    body = res.get_json()
    assert body["kpis"]["cost_savings"] == 25000
    assert len(body["trend_data"]) == 8
    assert body["date_range"] == {"start": "2024-06-03", "end": "2024-06-10", "days": 7}
    assert client.get("/api/v1/dashboard/manager?days=0").status_code == 400


def test_board_route_search(client):
    _login(client, role="Kitchen", user_id="k1")
    res = client.get("/api/v1/dashboard/board?date=2024-06-10&search=binh")
    assert [r["id"] for r in res.get_json()["data"]] == ["e2"]
