"""
Domain: error taxonomy for the lead engine.

Every error carries a stable `code` (used by the services and the API to
classify failures) and a human-readable message the presentation layer can
show as-is.
"""

from __future__ import annotations

from typing import Optional


class LeadEngineError(Exception):
    """Base class for rule violations raised by the lead engine."""

    code: str = "lead_engine_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AssignmentError(LeadEngineError):
    """A new lead could not be assigned; the lead is not created."""

    code = "assignment_error"


class DuplicatePhone(AssignmentError):
    code = "duplicate_phone"

    def __init__(self, phone: str):
        self.phone = phone
        super().__init__(f"Duplicate phone number: {phone} is already registered to another lead")


class SpecialistOffline(AssignmentError):
    code = "specialist_offline"

    def __init__(self, specialist_name: str, program: str):
        self.specialist_name = specialist_name
        super().__init__(
            f"Cannot assign {program} lead: specialist {specialist_name!r} is not online"
        )


class NoAvailableAgent(AssignmentError):
    code = "no_available_agent"

    def __init__(self) -> None:
        super().__init__("No available agent: no salesperson is online to receive this lead")


class UnknownAssignee(AssignmentError):
    code = "unknown_assignee"

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(f"Unknown assignee: {reference!r} is not on the sales roster")


class InsufficientAgentsForSweep(LeadEngineError):
    code = "insufficient_agents_for_sweep"

    def __init__(self, online_count: int):
        self.online_count = online_count
        super().__init__(
            f"Not enough agents to reassign idle leads: {online_count} eligible agent(s) online, at least 2 required"
        )


class LeadNotFound(LeadEngineError):
    code = "lead_not_found"

    def __init__(self, lead_id: object):
        self.lead_id = lead_id
        super().__init__(f"Lead not found: {lead_id}")


class SalesPersonNotFound(LeadEngineError):
    code = "sales_person_not_found"

    def __init__(self, sales_id: str):
        self.sales_id = sales_id
        super().__init__(f"Salesperson not found: {sales_id}")


class InvalidStatusTransition(LeadEngineError):
    code = "invalid_status_transition"

    def __init__(self, current: str, requested: str, reason: Optional[str] = None):
        self.current = current
        self.requested = requested
        detail = f": {reason}" if reason else ""
        super().__init__(f"Cannot change call status from {current} to {requested}{detail}")


__all__ = [
    "LeadEngineError",
    "AssignmentError",
    "DuplicatePhone",
    "SpecialistOffline",
    "NoAvailableAgent",
    "UnknownAssignee",
    "InsufficientAgentsForSweep",
    "LeadNotFound",
    "SalesPersonNotFound",
    "InvalidStatusTransition",
]
