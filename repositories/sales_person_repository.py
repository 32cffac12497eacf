"""
Sales roster repository.

Persistence for SalesPerson records. The roster is always returned in
creation order, which is the order the round-robin rotation walks.
"""

from __future__ import annotations

from typing import Any, List, Mapping

from domain.sales_person import AgentStatus, SalesPerson
from repositories.client import execute, get_supabase
from repositories.rows import parse_optional_datetime, to_column


def _row_to_sales_person(row: Mapping[str, Any]) -> SalesPerson:
    return SalesPerson(
        sales_id=str(row["id"]),
        name=str(row["name"]),
        email=str(row.get("email") or ""),
        status=AgentStatus(str(row.get("status") or AgentStatus.OFFLINE.value)),
        created_at=parse_optional_datetime(row.get("created_at")),
    )


def _sales_person_to_row(member: SalesPerson) -> dict[str, Any]:
    row = {
        "id": member.sales_id,
        "name": member.name,
        "email": member.email,
        "status": member.status.value,
    }
    if member.created_at is not None:
        row["created_at"] = to_column(member.created_at)
    return row


class SupabaseSalesPersonRepository:
    """Roster persistence against the Supabase `sales_persons` table."""

    def __init__(self, client: Any = None, table: str = "sales_persons"):
        self._client = client
        self.table = table

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = get_supabase()
        return self._client

    def list_sales_persons(self) -> List[SalesPerson]:
        rows = execute(
            self.client.table(self.table).select("*").order("created_at"),
            "list sales roster",
        )
        return [_row_to_sales_person(row) for row in rows]

    def get_sales_person(self, sales_id: str) -> SalesPerson | None:
        rows = execute(
            self.client.table(self.table).select("*").eq("id", sales_id).limit(1),
            "fetch salesperson",
        )
        return _row_to_sales_person(rows[0]) if rows else None

    def insert_sales_person(self, member: SalesPerson) -> None:
        execute(self.client.table(self.table).insert(_sales_person_to_row(member)), "register salesperson")

    def update_sales_person_status(self, sales_id: str, status: AgentStatus) -> SalesPerson | None:
        rows = execute(
            self.client.table(self.table).update({"status": status.value}).eq("id", sales_id),
            "update salesperson status",
        )
        return _row_to_sales_person(rows[0]) if rows else None

    def delete_sales_person(self, sales_id: str) -> bool:
        rows = execute(
            self.client.table(self.table).delete().eq("id", sales_id),
            "remove salesperson",
        )
        return bool(rows)


__all__ = ["SupabaseSalesPersonRepository"]
