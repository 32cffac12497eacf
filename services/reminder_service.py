"""
Reminder and follow-up scans.

Read-only: every scan re-reads the full lead list and filters it. Store
failures propagate to the caller as RepositoryError.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, List, Optional

from domain import reminders
from domain.errors import SalesPersonNotFound
from domain.lead import Lead
from domain.time import local_today, utc_now
from repositories.contracts import LeadStore, RosterStore


class ReminderService:
    def __init__(
        self,
        leads: LeadStore,
        roster: RosterStore,
        clock: Callable[[], datetime] = utc_now,
        today: Callable[[], date] = local_today,
    ):
        self.leads = leads
        self.roster = roster
        self.clock = clock
        self.today = today

    def scan_stale_uncalled(self, now: Optional[datetime] = None) -> List[Lead]:
        """UNCALLED leads older than ten minutes."""

        return reminders.stale_uncalled(self.leads.list_leads(), now or self.clock())

    def scan_due_follow_ups(self, today: Optional[date] = None) -> List[Lead]:
        """Open leads whose follow-up date is today."""

        return reminders.due_follow_ups(self.leads.list_leads(), today or self.today())

    def scan_todays_birthdays(self, today: Optional[date] = None, sales_name: Optional[str] = None) -> List[Lead]:
        return reminders.todays_birthdays(self.leads.list_leads(), today or self.today(), sales_name)

    def scan_birthdays_this_month(self, today: Optional[date] = None, sales_name: Optional[str] = None) -> List[Lead]:
        return reminders.birthdays_this_month(self.leads.list_leads(), today or self.today(), sales_name)

    def worklist(self, sales_id: str) -> List[Lead]:
        """A salesperson's open leads, newest first."""

        member = self.roster.get_sales_person(sales_id)
        if member is None:
            raise SalesPersonNotFound(sales_id)
        return reminders.worklist_for(self.leads.list_leads(), member)


__all__ = ["ReminderService"]
