"""
Lead repository (persistence).

This module provides *only* persistence operations for the Lead domain entity.
No business rules (assignment, phone uniqueness, workflow transitions) belong
here; the intake service enforces them before calling in.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping
from uuid import UUID

from domain.lead import CallStatus, Lead, Program
from repositories.client import execute, get_supabase
from repositories.contracts import LeadFilter
from repositories.rows import (
    optional_text,
    parse_decimal,
    parse_optional_date,
    parse_optional_datetime,
    parse_utc_datetime,
    to_column,
)

# Domain field name -> column name, for fields whose names differ.
_COLUMN_FOR_FIELD: Dict[str, str] = {"lead_id": "id"}


def _lead_to_row(lead: Lead) -> dict[str, Any]:
    """Convert a domain Lead to a Supabase row payload."""

    return {
        # Core identifiers
        "id": str(lead.lead_id),
        "program": lead.program.value,
        "call_status": lead.call_status.value,
        "created_at": to_column(lead.created_at),
        "updated_at": to_column(lead.updated_at),

        # Contact information
        "first_name": lead.first_name,
        "last_name": lead.last_name,
        "phone": lead.phone,
        "birth_date": to_column(lead.birth_date),
        "address": lead.address or "",

        # Assignment
        "assigned_sales_id": lead.assigned_sales_id,
        "assigned_sales_name": lead.assigned_sales_name or "",

        # Workflow and commercial
        "sale_value": to_column(lead.sale_value),
        "notes": lead.notes or "",
        "follow_up_date": to_column(lead.follow_up_date),
        "appointment_date": to_column(lead.appointment_date),

        # Provenance
        "admin_submitter": lead.admin_submitter or "",
    }


def _row_to_lead(row: Mapping[str, Any]) -> Lead:
    """Convert a Supabase row into a domain Lead."""

    return Lead(
        lead_id=UUID(str(row["id"])),
        first_name=str(row.get("first_name") or ""),
        last_name=str(row.get("last_name") or ""),
        phone=str(row["phone"]),
        program=Program(str(row["program"])),
        call_status=CallStatus(str(row["call_status"])),
        created_at=parse_utc_datetime(row["created_at"]),
        updated_at=parse_utc_datetime(row.get("updated_at") or row["created_at"]),
        birth_date=parse_optional_date(row.get("birth_date")),
        address=optional_text(row.get("address")),
        assigned_sales_id=optional_text(row.get("assigned_sales_id")),
        assigned_sales_name=optional_text(row.get("assigned_sales_name")),
        sale_value=parse_decimal(row.get("sale_value")),
        notes=str(row.get("notes") or ""),
        follow_up_date=parse_optional_date(row.get("follow_up_date")),
        appointment_date=parse_optional_datetime(row.get("appointment_date")),
        admin_submitter=optional_text(row.get("admin_submitter")),
    )


def _fields_to_columns(fields: Mapping[str, Any]) -> dict[str, Any]:
    return {_COLUMN_FOR_FIELD.get(name, name): to_column(value) for name, value in fields.items()}


class SupabaseLeadRepository:
    """Lead persistence against the Supabase `leads` table."""

    def __init__(self, client: Any = None, table: str = "leads"):
        self._client = client
        self.table = table

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = get_supabase()
        return self._client

    def find_lead_by_phone(self, phone: str) -> Lead | None:
        """Return the lead registered with this phone number, if any."""

        rows = execute(
            self.client.table(self.table).select("*").eq("phone", phone).limit(1),
            "look up lead by phone",
        )
        return _row_to_lead(rows[0]) if rows else None

    def get_lead_by_id(self, lead_id: UUID) -> Lead | None:
        rows = execute(
            self.client.table(self.table).select("*").eq("id", str(lead_id)).limit(1),
            "fetch lead",
        )
        return _row_to_lead(rows[0]) if rows else None

    def insert_lead(self, lead: Lead) -> None:
        """
        Insert a Lead into Supabase.

        Raises:
        - RepositoryError if Supabase rejects the write.
        - ValueError/TypeError for invalid domain values (e.g., timestamps).
        """

        execute(self.client.table(self.table).insert(_lead_to_row(lead)), "insert lead")

    def update_lead(self, lead_id: UUID, fields: Mapping[str, Any]) -> Lead | None:
        """
        Write a partial update. `fields` uses domain field names.

        Returns the updated Lead, or None when no row has this id.
        """

        if not fields:
            return self.get_lead_by_id(lead_id)
        rows = execute(
            self.client.table(self.table).update(_fields_to_columns(fields)).eq("id", str(lead_id)),
            "update lead",
        )
        return _row_to_lead(rows[0]) if rows else None

    def delete_lead(self, lead_id: UUID) -> bool:
        rows = execute(
            self.client.table(self.table).delete().eq("id", str(lead_id)),
            "delete lead",
        )
        return bool(rows)

    def list_leads(self, lead_filter: LeadFilter | None = None) -> List[Lead]:
        """
        List Leads, oldest first, with optional exact-match filters.
        """

        query = self.client.table(self.table).select("*")
        if lead_filter is not None:
            if lead_filter.call_status is not None:
                query = query.eq("call_status", lead_filter.call_status.value)
            if lead_filter.program is not None:
                query = query.eq("program", lead_filter.program.value)
            if lead_filter.assigned_sales_id is not None:
                query = query.eq("assigned_sales_id", lead_filter.assigned_sales_id)
            if lead_filter.assigned_sales_name is not None:
                query = query.eq("assigned_sales_name", lead_filter.assigned_sales_name)
        query = query.order("created_at")

        rows = execute(query, "list leads")
        return [_row_to_lead(row) for row in rows]


__all__ = ["SupabaseLeadRepository"]
