import pytest
from fastapi.testclient import TestClient

from officedesk.api.deps import get_current_user
from officedesk.main import app
from officedesk.repositories import appointments_repo, offices_repo

CUSTOMER = {"id": "u1", "username": "ana", "role": "customer"}


@pytest.fixture
def client(monkeypatch):
    """Cliente sin lifespan (no toca Mongo) y con usuario fijo."""
    state = {"availability": None}

    async def get_availability(office_id):
        return state["availability"]

    async def list_for_office_day(office_id, day, exclude_id=None):
        return []

    monkeypatch.setattr(offices_repo, "get_availability", get_availability)
    monkeypatch.setattr(appointments_repo, "list_for_office_day", list_for_office_day)
    app.dependency_overrides[get_current_user] = lambda: CUSTOMER
    c = TestClient(app)
    c.state = state
    yield c
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_bad_date_is_rejected(client):
    r = client.get("/offices/o1/availability/slots", params={"date": "19-10-2026"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid date format. Use YYYY-MM-DD"


def test_slots_for_closed_day_are_empty(client):
    r = client.get("/offices/o1/availability/slots", params={"date": "2026-10-24"})
    assert r.status_code == 200
    body = r.json()
    assert body["working_day"] is False
    assert body["available_slots"] == []


def test_next_working_day_reports_exhaustion(client):
    client.state["availability"] = {"defaultSchedule": {str(d): {"available": False} for d in range(7)}}
    r = client.get("/offices/o1/availability/next-working-day", params={"from": "2026-10-19"})
    assert r.status_code == 200
    assert r.json()["date"] is None
    assert r.json()["exhausted"] is True


def test_next_working_day_with_default_week(client):
    r = client.get("/offices/o1/availability/next-working-day", params={"from": "2026-10-24"})
    assert r.json()["date"] == "2026-10-26"


def test_malformed_stored_config_is_invalid_input(client):
    client.state["availability"] = {"defaultSchedule": {"1": {"available": True, "slots": ["9am"]}}}
    r = client.get("/offices/o1/availability/slots", params={"date": "2026-10-19"})
    assert r.status_code == 422
    assert r.json()["detail"]["code"] == "invalid_input"


def test_appointment_time_must_be_hh_mm(client):
    r = client.post("/appointments", json={"request_id": "r1", "date": "2026-10-26", "time": "9am"})
    assert r.status_code == 422


def test_customer_cannot_record_staff_decision(client):
    r = client.post("/requests/r1/staff-decision", json={"decision": "approved"})
    assert r.status_code == 403


def test_config_update_is_admin_only(client):
    r = client.put("/offices/o1/availability", json={"defaultSchedule": {}})
    assert r.status_code == 403


def test_patch_with_null_date_is_rejected(client):
    r = client.patch("/appointments/a1", json={"date": None})
    assert r.status_code == 422


def test_patch_with_null_address_is_rejected(client):
    r = client.patch("/requests/r1", json={"current_address": None})
    assert r.status_code == 422
