"""
Domain: follow-up appointments.

After a service (or a closed sale) a customer gets exactly five follow-up
appointments at fixed calendar offsets from the service date. Offsets use
calendar arithmetic (dateutil's relativedelta), so adding a month to Jan 31
lands on the last day of February rather than a fixed day count.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import List, Optional, Union
from uuid import UUID, uuid4

from dateutil.relativedelta import relativedelta

from .time import require_utc_timestamp

AFTER_CARE_BUCKET = "After Care"


class FollowUpOffset(str, Enum):
    ONE_DAY = "+1 day"
    ONE_MONTH = "+1 month"
    THREE_MONTHS = "+3 months"
    SIX_MONTHS = "+6 months"
    ONE_YEAR = "+1 year"

    @property
    def delta(self) -> relativedelta:
        return _OFFSET_DELTAS[self]


_OFFSET_DELTAS = {
    FollowUpOffset.ONE_DAY: relativedelta(days=1),
    FollowUpOffset.ONE_MONTH: relativedelta(months=1),
    FollowUpOffset.THREE_MONTHS: relativedelta(months=3),
    FollowUpOffset.SIX_MONTHS: relativedelta(months=6),
    FollowUpOffset.ONE_YEAR: relativedelta(years=1),
}


@dataclass(frozen=True, slots=True)
class Appointment:
    """Immutable follow-up appointment; created in batches, never edited."""

    appointment_id: UUID
    customer_name: str
    appointment_date: datetime
    follow_up_type: FollowUpOffset
    assigned_to: str
    lead_id: Optional[UUID] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        require_utc_timestamp("appointment_date", self.appointment_date)
        if self.created_at is not None:
            require_utc_timestamp("created_at", self.created_at)


def _as_utc_datetime(base: Union[date, datetime]) -> datetime:
    if isinstance(base, datetime):
        require_utc_timestamp("base_date", base)
        return base
    return datetime.combine(base, time.min, tzinfo=timezone.utc)


def build_follow_up_batch(
    customer_name: str,
    base_date: Union[date, datetime],
    assigned_to: str,
    created_at: datetime,
    lead_id: Optional[UUID] = None,
) -> List[Appointment]:
    """
    Build the five follow-up appointments for one customer.

    A plain date is treated as midnight UTC. All five share the customer name
    and the assignment target.
    """

    if not customer_name or not customer_name.strip():
        raise ValueError("customer_name is required")
    if not assigned_to or not assigned_to.strip():
        raise ValueError("assigned_to is required")

    base = _as_utc_datetime(base_date)
    return [
        Appointment(
            appointment_id=uuid4(),
            customer_name=customer_name,
            appointment_date=base + offset.delta,
            follow_up_type=offset,
            assigned_to=assigned_to,
            lead_id=lead_id,
            created_at=created_at,
        )
        for offset in FollowUpOffset
    ]
