"""
Sales roster management.

Registration, availability toggling and removal of salespeople. Removing a
salesperson never touches the leads already assigned to them.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional

from domain.errors import SalesPersonNotFound
from domain.sales_person import AgentStatus, SalesPerson
from domain.time import utc_now
from repositories.contracts import RosterStore
from services.notifications import Change, ChangeKind, ChangeNotifier

logger = logging.getLogger(__name__)


class RosterService:
    def __init__(
        self,
        roster: RosterStore,
        notifier: Optional[ChangeNotifier] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.roster = roster
        self.notifier = notifier or ChangeNotifier()
        self.clock = clock

    def list_roster(self) -> List[SalesPerson]:
        return self.roster.list_sales_persons()

    def register_sales_person(self, sales_id: str, name: str, email: str) -> SalesPerson:
        """New salespeople start offline until they switch themselves online."""

        if not name or not name.strip():
            raise ValueError("name is required")
        member = SalesPerson(
            sales_id=sales_id,
            name=name.strip(),
            email=email,
            status=AgentStatus.OFFLINE,
            created_at=self.clock(),
        )
        self.roster.insert_sales_person(member)
        logger.info("Salesperson registered", extra={"sales_id": sales_id, "sales_name": member.name})
        self.notifier.publish(Change(ChangeKind.ROSTER_CHANGED, sales_id))
        return member

    def set_status(self, sales_id: str, status: AgentStatus) -> SalesPerson:
        updated = self.roster.update_sales_person_status(sales_id, status)
        if updated is None:
            raise SalesPersonNotFound(sales_id)
        logger.info("Salesperson status changed", extra={"sales_id": sales_id, "status": status.value})
        self.notifier.publish(Change(ChangeKind.ROSTER_CHANGED, sales_id))
        return updated

    def toggle_status(self, sales_id: str) -> SalesPerson:
        member = self.roster.get_sales_person(sales_id)
        if member is None:
            raise SalesPersonNotFound(sales_id)
        return self.set_status(sales_id, member.status.toggled())

    def remove_sales_person(self, sales_id: str) -> None:
        if not self.roster.delete_sales_person(sales_id):
            raise SalesPersonNotFound(sales_id)
        logger.info("Salesperson removed", extra={"sales_id": sales_id})
        self.notifier.publish(Change(ChangeKind.ROSTER_CHANGED, sales_id))


__all__ = ["RosterService"]
