"""
Tests for the Supabase repositories against a recording stub client.

Covers:
- Row <-> domain conversion for leads, roster members and appointments.
- Query shape: filters, ordering and the single multi-row appointment insert.
- Backend failures (APIError, response.error or an httpx transport error)
  surface as RepositoryError.
- Services running on the Supabase adapters turn those failures into
  structured results instead of raising.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace
from typing import Any, List, Optional
from uuid import UUID

import httpx
import pytest
from postgrest.exceptions import APIError

from domain.appointment import build_follow_up_batch
from domain.assignment import AssignmentPolicy
from domain.lead import CallStatus, LeadSubmission, Program
from domain.sales_person import AgentStatus
from repositories.appointment_repository import SupabaseAppointmentRepository
from repositories.client import execute
from repositories.contracts import LeadFilter
from repositories.errors import RepositoryError
from repositories.lead_repository import SupabaseLeadRepository, _lead_to_row
from repositories.rows import parse_utc_datetime, to_column
from repositories.sales_person_repository import SupabaseSalesPersonRepository
from services.idle_sweep_service import IdleLeadSweepService
from services.lead_intake_service import LeadIntakeService
from tests.fakes import NOW, SPECIALIST, make_lead

LEAD_ID = "00000000-0000-0000-0000-000000000001"

LEAD_ROW = {
    "id": LEAD_ID,
    "first_name": "Jane",
    "last_name": "Doe",
    "phone": "0812345678",
    "program": "Fix Face Lock",
    "call_status": "appointment",
    "created_at": "2025-06-01T08:00:00Z",
    "updated_at": "2025-06-02T08:00:00+00:00",
    "birth_date": "1990-03-22",
    "address": "",
    "assigned_sales_id": "s-nat",
    "assigned_sales_name": "Nat",
    "sale_value": "1500.50",
    "notes": None,
    "follow_up_date": "2025-06-20",
    "appointment_date": "2025-06-21T03:00:00+07:00",
    "admin_submitter": None,
}


class StubQuery:
    """Records the builder chain and returns canned rows on execute()."""

    def __init__(self, client: "StubClient", table: str):
        self.client = client
        self.calls: List[tuple] = [("table", table)]

    def __getattr__(self, name: str):
        def method(*args: Any, **kwargs: Any) -> "StubQuery":
            self.calls.append((name, *args))
            return self

        return method

    def execute(self):
        self.client.executed.append(self.calls)
        if self.client.failures:
            failure = self.client.failures.pop(0)
            if failure is not None:
                raise failure
        if self.client.api_error is not None:
            raise self.client.api_error
        return SimpleNamespace(data=self.client.rows, error=self.client.response_error)


class StubClient:
    def __init__(self, rows: Optional[list] = None):
        self.rows = rows or []
        self.executed: List[list] = []
        self.api_error: Optional[Exception] = None
        # Per-call outcomes, consumed in order: an exception to raise or None.
        self.failures: List[Optional[Exception]] = []
        self.response_error: Optional[str] = None

    def table(self, name: str) -> StubQuery:
        return StubQuery(self, name)

    @property
    def last(self) -> list:
        return self.executed[-1]


def test_row_to_lead_conversion() -> None:
    client = StubClient([LEAD_ROW])
    lead = SupabaseLeadRepository(client=client).get_lead_by_id(UUID(LEAD_ID))

    assert lead.lead_id == UUID(LEAD_ID)
    assert lead.program is Program.FIX_FACE_LOCK
    assert lead.call_status is CallStatus.APPOINTMENT
    assert lead.created_at == datetime(2025, 6, 1, 8, 0, tzinfo=timezone.utc)
    assert lead.appointment_date == datetime(2025, 6, 20, 20, 0, tzinfo=timezone.utc)
    assert lead.birth_date == date(1990, 3, 22)
    assert lead.sale_value == Decimal("1500.50")
    assert lead.address is None
    assert lead.notes == ""
    assert client.last == [("table", "leads"), ("select", "*"), ("eq", "id", LEAD_ID), ("limit", 1)]


def test_missing_lead_returns_none() -> None:
    assert SupabaseLeadRepository(client=StubClient()).find_lead_by_phone("0800") is None


def test_insert_lead_payload() -> None:
    client = StubClient()
    lead = make_lead("0801", program=Program.PREMIUM, sales_id="s-alice", sales_name="Alice")

    SupabaseLeadRepository(client=client, table="crm_leads").insert_lead(lead)

    (table, (op, payload)) = client.last
    assert table == ("table", "crm_leads")
    assert op == "insert"
    assert payload["id"] == str(lead.lead_id)
    assert payload["program"] == "Premium Package"
    assert payload["call_status"] == "uncalled"
    assert payload["sale_value"] == "0"
    assert payload["assigned_sales_name"] == "Alice"
    assert payload["birth_date"] is None
    assert payload["created_at"] == lead.created_at.isoformat()


def test_update_lead_maps_domain_fields_to_columns() -> None:
    client = StubClient([LEAD_ROW])

    updated = SupabaseLeadRepository(client=client).update_lead(
        UUID(LEAD_ID),
        {"call_status": CallStatus.CONTACTED, "sale_value": Decimal("10"), "updated_at": NOW},
    )

    assert updated is not None
    _, (op, payload), eq = client.last
    assert op == "update"
    assert payload == {"call_status": "contacted", "sale_value": "10", "updated_at": NOW.isoformat()}
    assert eq == ("eq", "id", LEAD_ID)


def test_update_missing_lead_returns_none() -> None:
    assert SupabaseLeadRepository(client=StubClient()).update_lead(UUID(LEAD_ID), {"notes": "x"}) is None


def test_list_leads_applies_filters_and_order() -> None:
    client = StubClient([LEAD_ROW])

    leads = SupabaseLeadRepository(client=client).list_leads(
        LeadFilter(call_status=CallStatus.UNCALLED, assigned_sales_name="Bob")
    )

    assert len(leads) == 1
    assert client.last == [
        ("table", "leads"),
        ("select", "*"),
        ("eq", "call_status", "uncalled"),
        ("eq", "assigned_sales_name", "Bob"),
        ("order", "created_at"),
    ]


def test_delete_lead_reports_whether_a_row_was_removed() -> None:
    assert SupabaseLeadRepository(client=StubClient([LEAD_ROW])).delete_lead(UUID(LEAD_ID))
    assert not SupabaseLeadRepository(client=StubClient()).delete_lead(UUID(LEAD_ID))


def test_roster_rows_in_creation_order() -> None:
    client = StubClient(
        [
            {"id": "s-alice", "name": "Alice", "email": "a@example.com", "status": "online", "created_at": "2025-01-01T00:00:00Z"},
            {"id": "s-bob", "name": "Bob", "email": None, "status": None, "created_at": None},
        ]
    )

    roster = SupabaseSalesPersonRepository(client=client).list_sales_persons()

    assert [m.name for m in roster] == ["Alice", "Bob"]
    assert roster[0].is_online
    assert roster[1].status is AgentStatus.OFFLINE
    assert roster[1].email == ""
    assert client.last[-1] == ("order", "created_at")


def test_roster_status_update() -> None:
    client = StubClient([{"id": "s-bob", "name": "Bob", "email": "b@example.com", "status": "online"}])

    member = SupabaseSalesPersonRepository(client=client).update_sales_person_status("s-bob", AgentStatus.ONLINE)

    assert member.is_online
    assert client.last[1] == ("update", {"status": "online"})


def test_appointment_batch_is_one_insert() -> None:
    client = StubClient()
    batch = build_follow_up_batch("Jane Doe", date(2024, 1, 31), "Alice", created_at=NOW)

    SupabaseAppointmentRepository(client=client).insert_appointments(batch)

    assert len(client.executed) == 1
    _, (op, payloads) = client.last
    assert op == "insert"
    assert [p["follow_up_type"] for p in payloads] == ["+1 day", "+1 month", "+3 months", "+6 months", "+1 year"]
    assert payloads[1]["appointment_date"] == "2024-02-29T00:00:00+00:00"
    assert payloads[0]["lead_id"] is None


def test_empty_appointment_batch_is_a_no_op() -> None:
    client = StubClient()

    SupabaseAppointmentRepository(client=client).insert_appointments([])

    assert client.executed == []


def test_api_error_becomes_repository_error() -> None:
    client = StubClient()
    client.api_error = APIError({"message": "permission denied for table leads", "code": "42501"})

    with pytest.raises(RepositoryError) as exc:
        SupabaseLeadRepository(client=client).list_leads()

    assert exc.value.code == "repository_error"
    assert "permission denied" in exc.value.message
    assert exc.value.message.startswith("Failed to list leads")


def test_response_error_becomes_repository_error() -> None:
    client = StubClient()
    client.response_error = "relation does not exist"

    with pytest.raises(RepositoryError):
        execute(client.table("leads").select("*"), "list leads")


def test_transport_error_becomes_repository_error() -> None:
    client = StubClient()
    client.api_error = httpx.ConnectError("connection refused")

    with pytest.raises(RepositoryError) as exc:
        SupabaseLeadRepository(client=client).find_lead_by_phone("0812345678")

    assert exc.value.code == "repository_error"
    assert "connection refused" in exc.value.message


def test_submission_against_unreachable_store_returns_failure(roster_repo) -> None:
    client = StubClient()
    client.api_error = httpx.ConnectError("connection refused")
    policy = AssignmentPolicy(specialist_name=SPECIALIST)
    service = LeadIntakeService(SupabaseLeadRepository(client=client), roster_repo, policy, clock=lambda: NOW)

    result = service.submit_lead(LeadSubmission("Jane", "Doe", "0812345678", Program.GENERAL))

    assert not result.success
    assert result.error_code == "repository_error"
    assert result.lead is None
    assert policy.cursor.position == 0


def test_sweep_keeps_going_after_a_write_times_out(roster_repo) -> None:
    """The oldest lead's write times out; the other two still move to Bob."""

    idle = [
        make_lead(f"080{n}", age=timedelta(days=5 - n), sales_id="s-alice", sales_name="Alice")
        for n in range(1, 4)
    ]
    client = StubClient(rows=[_lead_to_row(lead) for lead in idle])
    client.failures = [None, httpx.ReadTimeout("read timed out")]
    service = IdleLeadSweepService(
        SupabaseLeadRepository(client=client), roster_repo, SPECIALIST, clock=lambda: NOW
    )

    result = service.run_idle_sweep()

    assert not result.aborted
    assert result.reassigned_count == 2
    assert [r.lead_id for r in result.reassignments] == [idle[1].lead_id, idle[2].lead_id]
    assert {r.new_agent for r in result.reassignments} == {"Bob"}
    assert len(result.failures) == 1
    assert result.failures[0].lead_id == idle[0].lead_id
    assert "read timed out" in result.failures[0].error


def test_parse_naive_timestamp_as_utc() -> None:
    assert parse_utc_datetime("2025-01-01T00:00:00") == datetime(2025, 1, 1, tzinfo=timezone.utc)


def test_to_column_rejects_naive_datetime() -> None:
    with pytest.raises(ValueError):
        to_column(datetime(2025, 1, 1))
