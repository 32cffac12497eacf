"""
Domain: SalesPerson (roster member).

A salesperson is an authenticated user who can receive leads. The id comes
from the identity provider; the display name doubles as a human-readable
secondary key for manual assignment.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional

from .time import require_utc_timestamp


class AgentStatus(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"

    def toggled(self) -> "AgentStatus":
        return AgentStatus.OFFLINE if self is AgentStatus.ONLINE else AgentStatus.ONLINE


@dataclass(frozen=True, slots=True)
class SalesPerson:
    """
    Roster member with an availability flag.

    Availability is toggled by the salesperson themself; only online members
    receive automatic assignments.
    """

    sales_id: str
    name: str
    email: str
    status: AgentStatus = AgentStatus.OFFLINE
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.created_at is not None:
            require_utc_timestamp("created_at", self.created_at)

    @property
    def is_online(self) -> bool:
        return self.status is AgentStatus.ONLINE

    def with_status(self, status: AgentStatus) -> "SalesPerson":
        return replace(self, status=status)


def find_by_id(roster: Iterable[SalesPerson], sales_id: str) -> Optional[SalesPerson]:
    for member in roster:
        if member.sales_id == sales_id:
            return member
    return None


def find_by_name(roster: Iterable[SalesPerson], name: str) -> Optional[SalesPerson]:
    """First roster-order member with this display name (names may collide)."""

    for member in roster:
        if member.name == name:
            return member
    return None
