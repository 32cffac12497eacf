"""
HTTP tests for the FastAPI app.

The Supabase-backed services are replaced through app.dependency_overrides
with services built over the in-memory repositories and a fixed clock.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from api.dependencies import build_services, get_services
from api.main import app
from domain.lead import CallStatus, Program
from domain.sales_person import AgentStatus
from services.settings import EngineSettings
from tests.fakes import NOW, make_lead


@pytest.fixture
def services(lead_repo, roster_repo, appointment_repo):
    return build_services(EngineSettings(), lead_repo, roster_repo, appointment_repo, clock=lambda: NOW)


@pytest.fixture
def client(services):
    app.dependency_overrides[get_services] = lambda: services
    yield TestClient(app)
    app.dependency_overrides.clear()


def _lead_body(phone: str, program: str = "General Program", **extra) -> dict:
    return {"first_name": "Jane", "last_name": "Doe", "phone": phone, "program": program, **extra}


def test_health(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_submit_lead_rotates(client) -> None:
    first = client.post("/api/v1/leads", json=_lead_body("0801"))
    second = client.post("/api/v1/leads", json=_lead_body("0802"))

    assert first.status_code == 201
    assert first.json()["assigned_agent_name"] == "Alice"
    assert first.json()["lead"]["call_status"] == "uncalled"
    assert second.json()["assigned_agent_name"] == "Bob"


def test_submit_duplicate_phone_conflict(client, lead_repo) -> None:
    client.post("/api/v1/leads", json=_lead_body("0801"))

    response = client.post("/api/v1/leads", json=_lead_body("0801"))

    assert response.status_code == 409
    assert "Duplicate phone" in response.json()["detail"]
    assert len(lead_repo.all()) == 1


def test_submit_reserved_program_with_specialist_offline(client, roster_repo, lead_repo) -> None:
    roster_repo.set_status("Nat", AgentStatus.OFFLINE)

    response = client.post("/api/v1/leads", json=_lead_body("0801", "Fix Face Lock"))

    assert response.status_code == 409
    assert lead_repo.all() == []


def test_submit_with_manual_assignee(client) -> None:
    response = client.post("/api/v1/leads", json=_lead_body("0801", assign_to_name="Charlie"))

    assert response.status_code == 201
    assert response.json()["lead"]["assigned_sales_id"] == "s-charlie"


def test_submit_with_unknown_assignee(client) -> None:
    response = client.post("/api/v1/leads", json=_lead_body("0801", assign_to_id="s-missing"))

    assert response.status_code == 422


def test_submit_with_both_assignee_fields_rejected(client, lead_repo) -> None:
    response = client.post("/api/v1/leads", json=_lead_body("0801", assign_to_id="s-bob", assign_to_name="Bob"))

    assert response.status_code == 422
    assert lead_repo.calls == []


def test_list_leads_with_filter(client, lead_repo) -> None:
    lead_repo.insert_lead(make_lead("0801", sales_name="Alice"))
    lead_repo.insert_lead(make_lead("0802", status=CallStatus.CONTACTED, sales_name="Bob"))

    response = client.get("/api/v1/leads", params={"call_status": "contacted"})

    body = response.json()
    assert response.status_code == 200
    assert body["total_count"] == 1
    assert body["items"][0]["phone"] == "0802"


def test_store_failure_is_bad_gateway(client, lead_repo) -> None:
    lead_repo.fail_reads = True

    response = client.get("/api/v1/leads")

    assert response.status_code == 502


def test_update_lead(client, lead_repo) -> None:
    lead = make_lead("0801", status=CallStatus.NEGOTIATION)
    lead_repo.insert_lead(lead)

    response = client.patch(
        f"/api/v1/leads/{lead.lead_id}",
        json={"call_status": "closed_won", "sale_value": "25000.00", "notes": "Paid deposit"},
    )

    assert response.status_code == 200
    stored = lead_repo.get(lead.lead_id)
    assert stored.call_status is CallStatus.CLOSED_WON
    assert str(stored.sale_value) == "25000.00"


def test_update_closed_lead_rejected(client, lead_repo) -> None:
    lead = make_lead("0801", status=CallStatus.CLOSED_WON)
    lead_repo.insert_lead(lead)

    response = client.patch(f"/api/v1/leads/{lead.lead_id}", json={"call_status": "follow_up"})

    assert response.status_code == 422


def test_update_requires_fields(client, lead_repo) -> None:
    lead = make_lead("0801")
    lead_repo.insert_lead(lead)

    assert client.patch(f"/api/v1/leads/{lead.lead_id}", json={}).status_code == 422
    assert client.patch(f"/api/v1/leads/{lead.lead_id}", json={"sale_value": "-5"}).status_code == 422


def test_reassign_and_delete_lead(client, lead_repo) -> None:
    lead = make_lead("0801", sales_id="s-alice", sales_name="Alice")
    lead_repo.insert_lead(lead)

    moved = client.post(f"/api/v1/leads/{lead.lead_id}/reassign", json={"assign_to_name": "Bob"})
    deleted = client.delete(f"/api/v1/leads/{lead.lead_id}")
    missing = client.delete(f"/api/v1/leads/{lead.lead_id}")

    assert moved.status_code == 200
    assert moved.json()["lead"]["assigned_sales_name"] == "Bob"
    assert deleted.status_code == 200
    assert missing.status_code == 404


def test_roster_endpoints(client) -> None:
    registered = client.post(
        "/api/v1/roster", json={"sales_id": "s-dana", "name": "Dana", "email": "dana@example.com"}
    )
    toggled = client.post("/api/v1/roster/s-dana/toggle-status")
    removed = client.delete("/api/v1/roster/s-charlie")
    names = [m["name"] for m in client.get("/api/v1/roster").json()]

    assert registered.status_code == 201
    assert registered.json()["status"] == "offline"
    assert toggled.json()["status"] == "online"
    assert removed.status_code == 204
    assert names == ["Alice", "Bob", "Nat", "Dana"]
    assert client.post("/api/v1/roster/s-missing/toggle-status").status_code == 404


def test_worklist(client, lead_repo) -> None:
    lead_repo.insert_lead(make_lead("0801", sales_id="s-bob", sales_name="Bob"))
    lead_repo.insert_lead(make_lead("0802", status=CallStatus.CLOSED_LOST, sales_id="s-bob", sales_name="Bob"))

    response = client.get("/api/v1/roster/s-bob/worklist")

    assert [lead["phone"] for lead in response.json()] == ["0801"]
    assert client.get("/api/v1/roster/s-missing/worklist").status_code == 404


def test_idle_sweep(client, lead_repo) -> None:
    lead = make_lead("0801", age=timedelta(hours=30), sales_id="s-alice", sales_name="Alice")
    lead_repo.insert_lead(lead)

    response = client.post("/api/v1/system/idle-sweep")

    body = response.json()
    assert response.status_code == 200
    assert body["reassigned_count"] == 1
    assert body["reassignments"][0] == {"lead_id": str(lead.lead_id), "old_agent": "Alice", "new_agent": "Bob"}
    assert not body["aborted"]


def test_idle_sweep_aborted(client, roster_repo) -> None:
    roster_repo.set_status("Bob", AgentStatus.OFFLINE)

    body = client.post("/api/v1/system/idle-sweep").json()

    assert body["aborted"]
    assert body["reassigned_count"] == 0
    assert "at least 2 required" in body["message"]


def test_reminder_endpoints(client, lead_repo) -> None:
    this_month = date.today().month
    lead_repo.insert_lead(make_lead("0801", age=timedelta(minutes=15)))
    lead_repo.insert_lead(make_lead("0802", status=CallStatus.CONTACTED, birth_date=date(1990, this_month, 1)))

    stale = client.get("/api/v1/system/reminders/stale-uncalled").json()
    birthdays = client.get("/api/v1/system/reminders/birthdays", params={"scope": "month"}).json()

    assert [lead["phone"] for lead in stale] == ["0801"]
    assert [lead["phone"] for lead in birthdays] == ["0802"]
    assert client.get("/api/v1/system/reminders/birthdays", params={"scope": "year"}).status_code == 422


def test_appointment_batch(client, appointment_repo) -> None:
    response = client.post(
        "/api/v1/appointments/batch",
        json={"customer_name": "Jane Doe", "base_date": "2024-01-31", "assigned_to": "Alice"},
    )

    body = response.json()
    assert response.status_code == 201
    assert len(body) == 5
    assert body[1]["appointment_date"].startswith("2024-02-29")
    assert {a["assigned_to"] for a in body} == {"Alice"}
    assert len(appointment_repo.rows) == 5


def test_appointment_batch_defaults_to_after_care(client) -> None:
    response = client.post("/api/v1/appointments/batch", json={"customer_name": "Jane Doe", "base_date": "2024-01-31"})

    assert {a["assigned_to"] for a in response.json()} == {"After Care"}


def test_dashboard_personal_view(client, lead_repo) -> None:
    lead_repo.insert_lead(
        make_lead(
            "0801",
            program=Program.PREMIUM,
            status=CallStatus.CLOSED_WON,
            sales_id="s-bob",
            sales_name="Bob",
            sale_value=Decimal("4200"),
        )
    )

    body = client.get("/api/v1/dashboard", params={"sales_name": "Bob"}).json()

    assert body["total_leads"] == 1
    assert body["rank"] == 1
    assert body["total_salespeople"] == 4
