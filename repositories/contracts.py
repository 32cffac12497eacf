"""
Repository contracts the services depend on.

The Supabase adapters in this package implement these; the test suite
supplies in-memory versions. Every method may raise RepositoryError.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Protocol, Sequence
from uuid import UUID

from domain.appointment import Appointment
from domain.lead import CallStatus, Lead, Program
from domain.sales_person import AgentStatus, SalesPerson


@dataclass(frozen=True, slots=True)
class LeadFilter:
    """Optional exact-match filters for listing leads. None means no filter."""

    call_status: Optional[CallStatus] = None
    program: Optional[Program] = None
    assigned_sales_id: Optional[str] = None
    assigned_sales_name: Optional[str] = None

    def matches(self, lead: Lead) -> bool:
        if self.call_status is not None and lead.call_status is not self.call_status:
            return False
        if self.program is not None and lead.program is not self.program:
            return False
        if self.assigned_sales_id is not None and lead.assigned_sales_id != self.assigned_sales_id:
            return False
        if self.assigned_sales_name is not None and lead.assigned_sales_name != self.assigned_sales_name:
            return False
        return True


class LeadStore(Protocol):
    def find_lead_by_phone(self, phone: str) -> Optional[Lead]: ...

    def get_lead_by_id(self, lead_id: UUID) -> Optional[Lead]: ...

    def insert_lead(self, lead: Lead) -> None: ...

    def update_lead(self, lead_id: UUID, fields: Mapping[str, Any]) -> Optional[Lead]: ...

    def delete_lead(self, lead_id: UUID) -> bool: ...

    def list_leads(self, lead_filter: Optional[LeadFilter] = None) -> List[Lead]: ...


class RosterStore(Protocol):
    def list_sales_persons(self) -> List[SalesPerson]: ...

    def get_sales_person(self, sales_id: str) -> Optional[SalesPerson]: ...

    def insert_sales_person(self, member: SalesPerson) -> None: ...

    def update_sales_person_status(self, sales_id: str, status: AgentStatus) -> Optional[SalesPerson]: ...

    def delete_sales_person(self, sales_id: str) -> bool: ...


class AppointmentStore(Protocol):
    def insert_appointments(self, appointments: Sequence[Appointment]) -> None: ...

    def list_appointments(self) -> List[Appointment]: ...


__all__ = ["LeadFilter", "LeadStore", "RosterStore", "AppointmentStore"]
