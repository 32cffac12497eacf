"""
Domain: Lead entity.

A Lead is a prospective customer's service record, from intake through the
sales workflow to a closed (won/lost) outcome.

Rules implemented here:
- A Lead is uniquely identified by lead_id (UUID).
- created_at / updated_at are UTC timestamps and are authoritative.
- Every Lead is interested in exactly one Program.
- call_status starts at UNCALLED; CLOSED_WON and CLOSED_LOST are terminal.

Phone uniqueness is not checkable on a single entity; it is enforced by the
intake service before a Lead is written.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID

from .time import require_utc_timestamp


class Program(str, Enum):
    GENERAL = "General Program"
    PREMIUM = "Premium Package"
    FIX_FACE_LOCK = "Fix Face Lock"
    CONSULTATION = "Consultation"


# Leads in this program may only be handled by the configured specialist.
RESERVED_PROGRAM = Program.FIX_FACE_LOCK


class CallStatus(str, Enum):
    """Workflow state of a Lead. Declaration order is the workflow order."""

    UNCALLED = "uncalled"
    CONTACTED = "contacted"
    FOLLOW_UP = "follow_up"
    APPOINTMENT = "appointment"
    QUOTATION = "quotation"
    NEGOTIATION = "negotiation"
    CLOSED_WON = "closed_won"
    CLOSED_LOST = "closed_lost"

    @property
    def is_terminal(self) -> bool:
        return self in (CallStatus.CLOSED_WON, CallStatus.CLOSED_LOST)


OPPORTUNITY_STATUSES = frozenset(
    {
        CallStatus.CONTACTED,
        CallStatus.FOLLOW_UP,
        CallStatus.APPOINTMENT,
        CallStatus.QUOTATION,
        CallStatus.NEGOTIATION,
    }
)


@dataclass(frozen=True, slots=True)
class LeadSubmission:
    """
    Intake payload for a new Lead (public registration, salesperson
    self-entry or admin entry). Assignment and workflow fields are filled
    in by the intake service.
    """

    first_name: str
    last_name: str
    phone: str
    program: Program
    birth_date: Optional[date] = None
    address: Optional[str] = None
    admin_submitter: Optional[str] = None

    def validate(self) -> None:
        if not self.first_name or not self.first_name.strip():
            raise ValueError("first_name is required")
        if not self.phone or not self.phone.strip():
            raise ValueError("phone is required")


@dataclass(frozen=True, slots=True)
class Lead:
    """
    Pure domain entity for a Lead.

    Immutability:
    - The entity is frozen. Edits and reassignment are written through the
      lead store and the stored row is read back.

    Notes:
    - assigned_sales_name is a denormalized copy of the assignee's display
      name. It is kept even if the salesperson is later removed.
    """

    lead_id: UUID
    first_name: str
    last_name: str
    phone: str
    program: Program
    call_status: CallStatus
    created_at: datetime
    updated_at: datetime

    birth_date: Optional[date] = None
    address: Optional[str] = None

    assigned_sales_id: Optional[str] = None
    assigned_sales_name: Optional[str] = None

    sale_value: Decimal = Decimal("0")
    notes: str = ""
    follow_up_date: Optional[date] = None
    appointment_date: Optional[datetime] = None

    admin_submitter: Optional[str] = None

    def __post_init__(self) -> None:
        require_utc_timestamp("created_at", self.created_at)
        require_utc_timestamp("updated_at", self.updated_at)
        if self.appointment_date is not None:
            require_utc_timestamp("appointment_date", self.appointment_date)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_active(self) -> bool:
        """A lead stays on a salesperson's worklist until it is closed."""

        return not self.call_status.is_terminal


@dataclass(frozen=True, slots=True)
class LeadUpdate:
    """
    Partial update for an existing Lead.

    Only fields listed in `fields_set` are written; this lets callers clear a
    value (e.g. follow_up_date=None) explicitly.
    """

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    address: Optional[str] = None
    program: Optional[Program] = None
    call_status: Optional[CallStatus] = None
    sale_value: Optional[Decimal] = None
    notes: Optional[str] = None
    follow_up_date: Optional[date] = None
    appointment_date: Optional[datetime] = None
    fields_set: frozenset = field(default_factory=frozenset)

    @classmethod
    def of(cls, **values: Any) -> "LeadUpdate":
        return cls(**values, fields_set=frozenset(values))

    def changes(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in sorted(self.fields_set)}
