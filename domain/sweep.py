"""
Domain: idle-lead sweep planning.

Leads still UNCALLED more than IDLE_REASSIGN_AFTER after creation are moved
to a different online salesperson. The plan is computed here without I/O;
the sweep service writes it.

Rules:
- Candidates: status UNCALLED, created_at < now - IDLE_REASSIGN_AFTER, and
  program is not the reserved program (the specialist keeps their leads).
- Receiving pool: online members excluding the specialist, roster order.
- Fewer than two in the pool: the whole sweep is refused.
- A lead is never planned onto the agent it already belongs to.
- Candidates are visited oldest first; a sweep-local cursor rotates across
  each lead's sub-pool. It is separate from the intake round-robin cursor.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Sequence
from uuid import UUID

from .errors import InsufficientAgentsForSweep
from .lead import RESERVED_PROGRAM, CallStatus, Lead
from .sales_person import SalesPerson
from .time import require_utc_timestamp

IDLE_REASSIGN_AFTER = timedelta(hours=24)


@dataclass(frozen=True, slots=True)
class Reassignment:
    lead_id: UUID
    old_agent: Optional[str]
    new_agent: str
    new_agent_id: str


def idle_candidates(leads: Sequence[Lead], now: datetime) -> List[Lead]:
    """Stale UNCALLED leads outside the reserved program, oldest first."""

    require_utc_timestamp("now", now)
    threshold = now - IDLE_REASSIGN_AFTER
    candidates = [
        lead
        for lead in leads
        if lead.call_status is CallStatus.UNCALLED
        and lead.created_at < threshold
        and lead.program != RESERVED_PROGRAM
    ]
    return sorted(candidates, key=lambda lead: (lead.created_at, str(lead.lead_id)))


def _belongs_to(lead: Lead, member: SalesPerson) -> bool:
    if lead.assigned_sales_id:
        return member.sales_id == lead.assigned_sales_id
    return lead.assigned_sales_name is not None and member.name == lead.assigned_sales_name


def plan_idle_reassignments(
    leads: Sequence[Lead],
    roster: Sequence[SalesPerson],
    now: datetime,
    specialist_name: str,
) -> List[Reassignment]:
    """
    Compute reassignments for idle leads.

    Raises:
        InsufficientAgentsForSweep: fewer than two eligible online agents.
    """

    pool = [m for m in roster if m.is_online and m.name != specialist_name]
    if len(pool) <= 1:
        raise InsufficientAgentsForSweep(len(pool))

    plan: List[Reassignment] = []
    sweep_cursor = 0
    for lead in idle_candidates(leads, now):
        sub_pool = [m for m in pool if not _belongs_to(lead, m)]
        if not sub_pool:
            continue
        new_agent = sub_pool[sweep_cursor % len(sub_pool)]
        sweep_cursor += 1
        plan.append(
            Reassignment(
                lead_id=lead.lead_id,
                old_agent=lead.assigned_sales_name,
                new_agent=new_agent.name,
                new_agent_id=new_agent.sales_id,
            )
        )
    return plan
