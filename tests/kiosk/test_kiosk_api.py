from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest

from src.timeclock.timeclock.main import create_app


@pytest.fixture
def app(tmp_path):
    settings = SimpleNamespace(
        SECRET_KEY="test",
        DATABASE_URL=f"sqlite:///{tmp_path / 'kiosk.db'}",
        DEBUG=False,
        TESTING=True,
        LOG_LEVEL="WARNING",
        MANAGER_PIN="9999",
        MANAGER_SESSION_MINUTES=1,
        PHOTO_CAPTURE="none",
        AUTO_SEED_DB=False,
    )
    app = create_app(settings)
    container = app.extensions["timeclock"]
    container.employees_repo.create(first_name="John", last_name="Doe", pay_rate=Decimal("20.00"), job_title="Developer")
    yield app
    container.conn.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


def test_clock_in_then_double_tap(client):
    first = client.post("/api/employees/1/clock-in", json={"notes": "front desk"})
    second = client.post("/api/employees/1/clock-in")

    assert first.status_code == 201
    assert first.get_json()["shift"]["is_active"] is True
    assert second.status_code == 409
    assert second.get_json()["error"] == "ALREADY_CLOCKED_IN"


def test_clock_out_right_away_is_too_soon(client):
    client.post("/api/employees/1/clock-in")

    resp = client.post("/api/employees/1/clock-out")

    assert resp.status_code == 422
    assert resp.get_json()["error"] == "TOO_SOON"


def test_unknown_employee(client):
    assert client.post("/api/employees/99/clock-in").status_code == 404
    assert client.get("/api/employees/99/status").status_code == 404


def test_status_and_employee_list(client):
    client.post("/api/employees/1/clock-in")

    status = client.get("/api/employees/1/status").get_json()
    employees = client.get("/api/employees").get_json()

    assert status["is_working"] is True
    assert status["state"] == "WORKING"
    assert status["name"] == "John Doe"
    assert employees[0]["is_clocked_in"] is True


def test_manager_login_flow(client):
    assert client.post("/api/manager/login", json={"pin": "0000"}).status_code == 401

    ok = client.post("/api/manager/login", json={"pin": "9999"})
    assert ok.status_code == 200
    assert client.get("/api/manager/session").get_json()["authenticated"] is True

    client.post("/api/manager/logout")
    assert client.get("/api/manager/session").get_json()["authenticated"] is False


def test_correction_requires_manager_then_applies(client):
    shift_id = client.post("/api/employees/1/clock-in").get_json()["shift"]["shift_id"]
    now = datetime.now().replace(microsecond=0)
    body = {
        "clock_in": (now - timedelta(hours=3)).isoformat(sep=" "),
        "clock_out": (now - timedelta(hours=1)).isoformat(sep=" "),
        "reason": "left early",
    }

    denied = client.post(f"/api/employees/1/shifts/{shift_id}/correction", json=body)
    assert denied.status_code == 401

    client.post("/api/manager/login", json={"pin": "9999"})
    resp = client.post(f"/api/employees/1/shifts/{shift_id}/correction", json=body)

    assert resp.status_code == 200
    shift = resp.get_json()["shift"]
    assert shift["total_hours"] == "2.00"
    assert shift["gross_pay"] == "40.00"
    assert shift["is_active"] is False

    summary = client.get("/api/reports/summary?group_by=employee").get_json()
    assert summary["summary"][0]["employee_name"] == "John Doe"
    assert summary["summary"][0]["total_hours"] == "2.00"


def test_bad_correction_times(client):
    shift_id = client.post("/api/employees/1/clock-in").get_json()["shift"]["shift_id"]
    client.post("/api/manager/login", json={"pin": "9999"})

    resp = client.post(
        f"/api/employees/1/shifts/{shift_id}/correction",
        json={"clock_in": "2026-01-05 10:00", "clock_out": "2026-01-05 09:00"},
    )
    garbage = client.post(f"/api/employees/1/shifts/{shift_id}/correction", json={"clock_out": "yesterday"})

    assert resp.status_code == 422
    assert resp.get_json()["error"] == "NEGATIVE_OR_ZERO_DURATION"
    assert garbage.status_code == 400


def test_correction_with_utc_offset_is_rejected(client):
    shift_id = client.post("/api/employees/1/clock-in").get_json()["shift"]["shift_id"]
    client.post("/api/manager/login", json={"pin": "9999"})

    resp = client.post(
        f"/api/employees/1/shifts/{shift_id}/correction",
        json={"clock_in": "2026-01-05T08:00:00+00:00", "clock_out": "2026-01-05T10:00:00+00:00"},
    )
    mixed = client.post(
        f"/api/employees/1/shifts/{shift_id}/correction",
        json={"clock_in": "2026-01-05T08:00:00", "clock_out": "2026-01-05T10:00:00Z"},
    )

    assert resp.status_code == 400
    assert "clock_in" in resp.get_json()["message"]
    assert mixed.status_code == 400


def test_reports_validation_and_job_titles(client):
    assert client.get("/api/reports/summary?group_by=decade").status_code == 400
    assert client.get("/api/reports/shifts?start=2026-02-10&end=2026-02-01").status_code == 400
    assert client.get("/api/reports/job-titles").get_json() == ["Developer"]

    rows = client.get("/api/reports/shifts").get_json()
    assert rows["rows"] == []


def test_delete_shifts_for_date_requires_manager(client):
    client.post("/api/employees/1/clock-in")
    today = datetime.now().date().isoformat()

    assert client.delete(f"/api/employees/1/shifts?date={today}").status_code == 401

    client.post("/api/manager/login", json={"pin": "9999"})
    resp = client.delete(f"/api/employees/1/shifts?date={today}")

    assert resp.status_code == 200
    assert resp.get_json()["deleted"] == 1
    assert client.get("/api/employees/1/status").get_json()["is_working"] is False
