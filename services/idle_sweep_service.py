"""
Idle-lead sweep service.

Reassigns leads that have sat UNCALLED for more than 24 hours to a different
online salesperson. Planning is pure (domain/sweep.py); this module reads
the current state, writes the plan and reports.

Batch semantics:
- Too few eligible agents: nothing is written, the result is marked aborted.
- Each reassignment is written on its own. A failed write is recorded and the
  sweep carries on with the remaining leads.
- One sweep at a time per process; a second trigger while one is running
  returns immediately without touching any lead.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional
from uuid import UUID

from domain.errors import InsufficientAgentsForSweep
from domain.sweep import Reassignment, plan_idle_reassignments
from domain.time import utc_now
from repositories.contracts import LeadStore, RosterStore
from repositories.errors import RepositoryError
from services.notifications import Change, ChangeKind, ChangeNotifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SweepFailure:
    lead_id: UUID
    error: str


@dataclass(frozen=True, slots=True)
class SweepResult:
    """
    Outcome of one sweep.

    reassignments: leads that were moved (old agent is never the new agent)
    failures: planned moves whose write failed
    aborted: True if the sweep made no attempt (not enough agents, already
        running, or the initial read failed)
    """

    reassignments: List[Reassignment] = field(default_factory=list)
    failures: List[SweepFailure] = field(default_factory=list)
    message: str = ""
    aborted: bool = False
    error_code: Optional[str] = None

    @property
    def reassigned_count(self) -> int:
        return len(self.reassignments)


class IdleLeadSweepService:
    def __init__(
        self,
        leads: LeadStore,
        roster: RosterStore,
        specialist_name: str,
        notifier: Optional[ChangeNotifier] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.leads = leads
        self.roster = roster
        self.specialist_name = specialist_name
        self.notifier = notifier or ChangeNotifier()
        self.clock = clock
        self._in_flight = threading.Lock()

    def run_idle_sweep(self, now: Optional[datetime] = None) -> SweepResult:
        if not self._in_flight.acquire(blocking=False):
            return SweepResult(
                message="An idle-lead sweep is already running",
                aborted=True,
                error_code="sweep_in_progress",
            )
        try:
            return self._sweep(now or self.clock())
        finally:
            self._in_flight.release()

    def _sweep(self, now: datetime) -> SweepResult:
        try:
            leads = self.leads.list_leads()
            roster = self.roster.list_sales_persons()
            plan = plan_idle_reassignments(leads, roster, now, self.specialist_name)
        except InsufficientAgentsForSweep as e:
            logger.warning("Idle-lead sweep aborted", extra={"online_agents": e.online_count})
            return SweepResult(message=e.message, aborted=True, error_code=e.code)
        except RepositoryError as e:
            logger.error("Idle-lead sweep could not read state", extra={"error": e.message})
            return SweepResult(message=e.message, aborted=True, error_code=e.code)

        done: List[Reassignment] = []
        failures: List[SweepFailure] = []
        for move in plan:
            try:
                updated = self.leads.update_lead(
                    move.lead_id,
                    {
                        "assigned_sales_id": move.new_agent_id,
                        "assigned_sales_name": move.new_agent,
                        "updated_at": now,
                    },
                )
            except RepositoryError as e:
                logger.error(
                    "Idle-lead reassignment failed",
                    extra={"lead_id": str(move.lead_id), "new_agent": move.new_agent, "error": e.message},
                )
                failures.append(SweepFailure(lead_id=move.lead_id, error=e.message))
                continue
            if updated is None:
                failures.append(SweepFailure(lead_id=move.lead_id, error=f"Lead not found: {move.lead_id}"))
                continue

            done.append(move)
            logger.info(
                "Idle lead reassigned",
                extra={"lead_id": str(move.lead_id), "old_agent": move.old_agent, "new_agent": move.new_agent},
            )
            self.notifier.publish(Change(ChangeKind.LEAD_REASSIGNED, str(move.lead_id)))

        if done:
            message = f"Reassigned {len(done)} lead(s) idle for more than 24 hours"
        else:
            message = "No leads idle for more than 24 hours needed reassignment"
        if failures:
            message += f"; {len(failures)} reassignment(s) failed"

        logger.info(
            "Idle-lead sweep finished",
            extra={"reassigned": len(done), "failed": len(failures), "planned": len(plan)},
        )
        return SweepResult(reassignments=done, failures=failures, message=message)


__all__ = ["IdleLeadSweepService", "SweepFailure", "SweepResult"]
