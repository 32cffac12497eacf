"""
Domain: reminder and follow-up scans (pure filters, no mutation).

- Stale uncalled: UNCALLED leads created more than STALE_UNCALLED_AFTER ago.
- Due follow-ups: follow_up_date is today and the lead is not closed.
- Birthdays: birth month/day equals today's, ignoring the year.

`today` is a calendar date supplied by the caller (server-local by default
in the services); no datetime comparison is involved for dates.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence

from .lead import CallStatus, Lead
from .sales_person import SalesPerson
from .time import require_utc_timestamp

STALE_UNCALLED_AFTER = timedelta(minutes=10)


def stale_uncalled(leads: Sequence[Lead], now: datetime) -> List[Lead]:
    require_utc_timestamp("now", now)
    threshold = now - STALE_UNCALLED_AFTER
    return [
        lead
        for lead in leads
        if lead.call_status is CallStatus.UNCALLED and lead.created_at < threshold
    ]


def due_follow_ups(leads: Sequence[Lead], today: date) -> List[Lead]:
    return [
        lead
        for lead in leads
        if lead.follow_up_date == today and not lead.call_status.is_terminal
    ]


def _scoped(leads: Sequence[Lead], sales_name: Optional[str]) -> Sequence[Lead]:
    if sales_name is None:
        return leads
    return [lead for lead in leads if lead.assigned_sales_name == sales_name]


def todays_birthdays(leads: Sequence[Lead], today: date, sales_name: Optional[str] = None) -> List[Lead]:
    return [
        lead
        for lead in _scoped(leads, sales_name)
        if lead.birth_date is not None
        and (lead.birth_date.month, lead.birth_date.day) == (today.month, today.day)
    ]


def birthdays_this_month(leads: Sequence[Lead], today: date, sales_name: Optional[str] = None) -> List[Lead]:
    return [
        lead
        for lead in _scoped(leads, sales_name)
        if lead.birth_date is not None and lead.birth_date.month == today.month
    ]


def worklist_for(leads: Sequence[Lead], member: SalesPerson) -> List[Lead]:
    """
    A salesperson's open leads, newest first.

    Leads are matched by assigned_sales_id when it is set, otherwise by the
    denormalized name (manual assignments made before the id was known).
    """

    def owned(lead: Lead) -> bool:
        if lead.assigned_sales_id:
            return lead.assigned_sales_id == member.sales_id
        return lead.assigned_sales_name == member.name

    mine = [lead for lead in leads if owned(lead) and lead.is_active]
    return sorted(mine, key=lambda lead: lead.created_at, reverse=True)
