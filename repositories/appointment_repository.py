"""
Appointment repository.

Follow-up appointments are written in batches with a single multi-row insert,
so a batch either lands completely or not at all.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Sequence
from uuid import UUID

from domain.appointment import Appointment, FollowUpOffset
from repositories.client import execute, get_supabase
from repositories.rows import parse_optional_datetime, parse_utc_datetime, to_column


def _appointment_to_row(appointment: Appointment) -> dict[str, Any]:
    return {
        "id": str(appointment.appointment_id),
        "customer_name": appointment.customer_name,
        "appointment_date": to_column(appointment.appointment_date),
        "follow_up_type": appointment.follow_up_type.value,
        "assigned_to": appointment.assigned_to,
        "lead_id": to_column(appointment.lead_id),
        "created_at": to_column(appointment.created_at),
    }


def _row_to_appointment(row: Mapping[str, Any]) -> Appointment:
    lead_id = row.get("lead_id")
    return Appointment(
        appointment_id=UUID(str(row["id"])),
        customer_name=str(row["customer_name"]),
        appointment_date=parse_utc_datetime(row["appointment_date"]),
        follow_up_type=FollowUpOffset(str(row["follow_up_type"])),
        assigned_to=str(row["assigned_to"]),
        lead_id=UUID(str(lead_id)) if lead_id else None,
        created_at=parse_optional_datetime(row.get("created_at")),
    )


class SupabaseAppointmentRepository:
    """Appointment persistence against the Supabase `appointments` table."""

    def __init__(self, client: Any = None, table: str = "appointments"):
        self._client = client
        self.table = table

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = get_supabase()
        return self._client

    def insert_appointments(self, appointments: Sequence[Appointment]) -> None:
        """
        Bulk insert appointments in a single request.

        Empty input is a no-op. If any row is rejected the whole batch fails.
        """

        if not appointments:
            return
        payloads = [_appointment_to_row(a) for a in appointments]
        execute(
            self.client.table(self.table).insert(payloads),
            f"insert {len(payloads)} appointments",
        )

    def list_appointments(self) -> List[Appointment]:
        rows = execute(
            self.client.table(self.table).select("*").order("appointment_date"),
            "list appointments",
        )
        return [_row_to_appointment(row) for row in rows]


__all__ = ["SupabaseAppointmentRepository"]
