"""Dashboard stats over the current leads and roster."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from domain.dashboard import DashboardStats, build_dashboard
from domain.time import utc_now
from repositories.contracts import LeadStore, RosterStore


class DashboardService:
    def __init__(self, leads: LeadStore, roster: RosterStore, clock: Callable[[], datetime] = utc_now):
        self.leads = leads
        self.roster = roster
        self.clock = clock

    def get_dashboard_stats(self, sales_name: Optional[str] = None) -> DashboardStats:
        return build_dashboard(
            self.leads.list_leads(),
            self.roster.list_sales_persons(),
            now=self.clock(),
            sales_name=sales_name,
        )


__all__ = ["DashboardService"]
