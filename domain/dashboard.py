"""
Domain: sales dashboard aggregation.

Computes headline stats, the status distribution and per-salesperson
performance from a lead list and the roster. Sales value only counts
CLOSED_WON leads.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Sequence

from .lead import OPPORTUNITY_STATUSES, CallStatus, Lead
from .sales_person import SalesPerson
from .time import require_utc_timestamp

NEW_CUSTOMER_WINDOW = timedelta(days=30)


@dataclass(frozen=True, slots=True)
class SalesPerformance:
    sales_id: str
    name: str
    leads_count: int
    sales_value: Decimal
    conversion_rate: Decimal
    status_counts: Dict[str, int]


@dataclass(frozen=True, slots=True)
class DashboardStats:
    total_leads: int
    total_sales_value: Decimal
    conversion_rate: Decimal
    uncalled_leads: int
    new_customers: int
    opportunities: int
    status_distribution: Dict[str, int]
    performance: List[SalesPerformance]
    rank: Optional[int] = None
    total_salespeople: Optional[int] = None


def _percentage(part: int, whole: int) -> Decimal:
    if whole == 0:
        return Decimal("0.0")
    return (Decimal(part) * 100 / Decimal(whole)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def _won_value(leads: Sequence[Lead]) -> Decimal:
    return sum((lead.sale_value for lead in leads if lead.call_status is CallStatus.CLOSED_WON), Decimal("0"))


def _status_counts(leads: Sequence[Lead]) -> Dict[str, int]:
    counts = {status.value: 0 for status in CallStatus}
    for lead in leads:
        counts[lead.call_status.value] += 1
    return counts


def _owned_by(lead: Lead, member: SalesPerson) -> bool:
    if lead.assigned_sales_id:
        return lead.assigned_sales_id == member.sales_id
    return lead.assigned_sales_name == member.name


def build_dashboard(
    leads: Sequence[Lead],
    roster: Sequence[SalesPerson],
    now: datetime,
    sales_name: Optional[str] = None,
) -> DashboardStats:
    """
    Build dashboard stats for everyone, or for one salesperson.

    When `sales_name` is given the headline figures are scoped to that
    salesperson's leads and their rank among the roster is filled in.
    """

    require_utc_timestamp("now", now)

    relevant = list(leads)
    if sales_name is not None:
        relevant = [lead for lead in leads if lead.assigned_sales_name == sales_name]

    won = sum(1 for lead in relevant if lead.call_status is CallStatus.CLOSED_WON)
    distribution = {status: count for status, count in _status_counts(relevant).items() if count > 0}

    performance = []
    for member in roster:
        mine = [lead for lead in leads if _owned_by(lead, member)]
        mine_won = sum(1 for lead in mine if lead.call_status is CallStatus.CLOSED_WON)
        performance.append(
            SalesPerformance(
                sales_id=member.sales_id,
                name=member.name,
                leads_count=len(mine),
                sales_value=_won_value(mine),
                conversion_rate=_percentage(mine_won, len(mine)),
                status_counts=_status_counts(mine),
            )
        )
    # stable sort keeps roster order among equal sales values
    performance.sort(key=lambda p: p.sales_value, reverse=True)

    rank = None
    total_salespeople = None
    if sales_name is not None:
        total_salespeople = len(performance)
        for position, entry in enumerate(performance, start=1):
            if entry.name == sales_name:
                rank = position
                break

    return DashboardStats(
        total_leads=len(relevant),
        total_sales_value=_won_value(relevant),
        conversion_rate=_percentage(won, len(relevant)),
        uncalled_leads=sum(1 for lead in relevant if lead.call_status is CallStatus.UNCALLED),
        new_customers=sum(1 for lead in relevant if lead.created_at > now - NEW_CUSTOMER_WINDOW),
        opportunities=sum(1 for lead in relevant if lead.call_status in OPPORTUNITY_STATUSES),
        status_distribution=distribution,
        performance=performance,
        rank=rank,
        total_salespeople=total_salespeople,
    )
