"""
Lead intake service.

Handles:
- New lead submission with duplicate-phone rejection and automatic or manual
  assignment (see domain/assignment.py for the rules)
- Lead edits with workflow checks, manual reassignment and admin delete

Ordering:
- The phone check completes before the roster is read or the cursor is
  consulted; a duplicate never moves the rotation.
- The round-robin cursor advances only after the lead is written.
- The whole check -> decide -> insert -> commit sequence runs under one lock,
  so concurrent submissions in this process take turns on the cursor.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable, List, Optional
from uuid import UUID, uuid4

from domain.assignment import (
    AssignmentOverride,
    AssignmentPolicy,
    ByAgentName,
    NoOverride,
    resolve_override,
)
from domain.errors import (
    DuplicatePhone,
    InvalidStatusTransition,
    LeadEngineError,
    LeadNotFound,
)
from domain.lead import CallStatus, Lead, LeadSubmission, LeadUpdate
from domain.sales_person import SalesPerson
from domain.time import utc_now
from repositories.contracts import LeadFilter, LeadStore, RosterStore
from repositories.errors import RepositoryError
from services.notifications import Change, ChangeKind, ChangeNotifier
from services.results import OperationResult, SubmissionResult

logger = logging.getLogger(__name__)


def _warn_on_name_collision(override: AssignmentOverride, roster: List[SalesPerson]) -> None:
    if isinstance(override, ByAgentName):
        matches = [m.sales_id for m in roster if m.name == override.name]
        if len(matches) > 1:
            logger.warning(
                "Assignee name matches several salespeople; using the first",
                extra={"sales_name": override.name, "sales_ids": matches},
            )


def _check_status_transition(current: CallStatus, requested: CallStatus) -> None:
    if current == requested:
        return
    if current.is_terminal:
        raise InvalidStatusTransition(current.value, requested.value, "lead is already closed")
    if requested is CallStatus.UNCALLED:
        raise InvalidStatusTransition(current.value, requested.value, "uncalled is only an initial status")


class LeadIntakeService:
    def __init__(
        self,
        leads: LeadStore,
        roster: RosterStore,
        policy: AssignmentPolicy,
        notifier: Optional[ChangeNotifier] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.leads = leads
        self.roster = roster
        self.policy = policy
        self.notifier = notifier or ChangeNotifier()
        self.clock = clock
        self._intake_lock = threading.Lock()

    def submit_lead(
        self,
        submission: LeadSubmission,
        override: AssignmentOverride = NoOverride(),
    ) -> SubmissionResult:
        """
        Create a lead and assign it.

        Never raises for rule violations or store failures; the returned
        SubmissionResult says what happened. On failure no lead is created.
        """

        try:
            submission.validate()
        except ValueError as e:
            return SubmissionResult(success=False, message=str(e), error_code="invalid_submission")

        try:
            with self._intake_lock:
                lead, assignee_name = self._create_assigned_lead(submission, override)
        except (LeadEngineError, RepositoryError) as e:
            logger.warning(
                "Lead submission rejected",
                extra={"phone": submission.phone, "program": submission.program.value, "error_code": e.code},
            )
            return SubmissionResult.failed(e)

        self.notifier.publish(Change(ChangeKind.LEAD_CREATED, str(lead.lead_id)))
        return SubmissionResult(
            success=True,
            message=f"Lead created and assigned to {assignee_name}",
            assigned_agent_name=assignee_name,
            lead=lead,
        )

    def _create_assigned_lead(self, submission: LeadSubmission, override: AssignmentOverride) -> tuple[Lead, str]:
        if self.leads.find_lead_by_phone(submission.phone) is not None:
            raise DuplicatePhone(submission.phone)

        roster = self.roster.list_sales_persons()
        _warn_on_name_collision(override, roster)
        decision = self.policy.decide(submission.program, override, roster)

        now = self.clock()
        lead = Lead(
            lead_id=uuid4(),
            first_name=submission.first_name,
            last_name=submission.last_name,
            phone=submission.phone,
            program=submission.program,
            call_status=CallStatus.UNCALLED,
            created_at=now,
            updated_at=now,
            birth_date=submission.birth_date,
            address=submission.address,
            assigned_sales_id=decision.assignee.sales_id,
            assigned_sales_name=decision.assignee.name,
            admin_submitter=submission.admin_submitter,
        )
        self.leads.insert_lead(lead)
        self.policy.commit(decision)

        logger.info(
            "Lead assigned",
            extra={
                "lead_id": str(lead.lead_id),
                "assignee": decision.assignee.name,
                "assignee_id": decision.assignee.sales_id,
                "rule": decision.rule.value,
            },
        )
        return lead, decision.assignee.name

    def update_lead(self, lead_id: UUID, update: LeadUpdate) -> OperationResult:
        """Apply a partial edit (status, notes, sale value, dates, contact)."""

        try:
            with self._intake_lock:
                lead = self._apply_update(lead_id, update)
        except (LeadEngineError, RepositoryError) as e:
            return OperationResult.failed(e)
        except ValueError as e:
            return OperationResult(success=False, message=str(e), error_code="invalid_update")

        self.notifier.publish(Change(ChangeKind.LEAD_UPDATED, str(lead_id)))
        return OperationResult(success=True, message="Lead updated", lead=lead)

    def _apply_update(self, lead_id: UUID, update: LeadUpdate) -> Lead:
        current = self.leads.get_lead_by_id(lead_id)
        if current is None:
            raise LeadNotFound(lead_id)

        changes = update.changes()
        if "call_status" in changes:
            if changes["call_status"] is None:
                raise ValueError("call_status cannot be cleared")
            _check_status_transition(current.call_status, changes["call_status"])
        if "sale_value" in changes:
            if changes["sale_value"] is None or changes["sale_value"] < 0:
                raise ValueError("sale_value must be a non-negative amount")
        if "phone" in changes and changes["phone"] != current.phone:
            if not changes["phone"]:
                raise ValueError("phone is required")
            owner = self.leads.find_lead_by_phone(changes["phone"])
            if owner is not None and owner.lead_id != lead_id:
                raise DuplicatePhone(changes["phone"])

        now = self.clock()
        updated = self.leads.update_lead(lead_id, {**changes, "updated_at": now})
        if updated is None:
            raise LeadNotFound(lead_id)
        return updated

    def reassign_lead(self, lead_id: UUID, override: AssignmentOverride) -> OperationResult:
        """Manually move a lead to a named roster member (availability not checked)."""

        try:
            current = self.leads.get_lead_by_id(lead_id)
            if current is None:
                raise LeadNotFound(lead_id)
            roster = self.roster.list_sales_persons()
            _warn_on_name_collision(override, roster)
            assignee = resolve_override(override, roster)
            if assignee is None:
                raise ValueError("an assignee is required to reassign a lead")
            updated = self.leads.update_lead(
                lead_id,
                {
                    "assigned_sales_id": assignee.sales_id,
                    "assigned_sales_name": assignee.name,
                    "updated_at": self.clock(),
                },
            )
            if updated is None:
                raise LeadNotFound(lead_id)
        except (LeadEngineError, RepositoryError) as e:
            return OperationResult.failed(e)
        except ValueError as e:
            return OperationResult(success=False, message=str(e), error_code="invalid_update")

        logger.info(
            "Lead manually reassigned",
            extra={"lead_id": str(lead_id), "old_agent": current.assigned_sales_name, "new_agent": assignee.name},
        )
        self.notifier.publish(Change(ChangeKind.LEAD_REASSIGNED, str(lead_id)))
        return OperationResult(success=True, message=f"Lead reassigned to {assignee.name}", lead=updated)

    def delete_lead(self, lead_id: UUID) -> OperationResult:
        try:
            if not self.leads.delete_lead(lead_id):
                raise LeadNotFound(lead_id)
        except (LeadEngineError, RepositoryError) as e:
            return OperationResult.failed(e)

        logger.info("Lead deleted", extra={"lead_id": str(lead_id)})
        self.notifier.publish(Change(ChangeKind.LEAD_DELETED, str(lead_id)))
        return OperationResult(success=True, message="Lead deleted")

    def list_leads(self, lead_filter: Optional[LeadFilter] = None) -> List[Lead]:
        return self.leads.list_leads(lead_filter)


__all__ = ["LeadIntakeService"]
