"""
Domain: lead assignment policy.

Decides which salesperson receives a newly submitted lead. Rules, first match
wins:

1. Explicit override: an admin names the assignee (by roster id or display
   name). Resolved against the roster; availability is not consulted.
2. Reserved program: FIX_FACE_LOCK leads go only to the configured
   specialist, who must be online.
3. Round-robin: online members other than the specialist, in roster order,
   selected by a rotating cursor.

The policy itself does no I/O. It reads a roster snapshot passed in by the
caller and never advances the cursor on its own: the caller commits a
decision only once the lead has been written, so rejected or failed
submissions leave the rotation untouched.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Union

from .errors import NoAvailableAgent, SpecialistOffline, UnknownAssignee
from .lead import RESERVED_PROGRAM, Program
from .sales_person import SalesPerson, find_by_id, find_by_name


@dataclass(frozen=True, slots=True)
class NoOverride:
    """Let the policy choose."""


@dataclass(frozen=True, slots=True)
class ByAgentId:
    sales_id: str


@dataclass(frozen=True, slots=True)
class ByAgentName:
    name: str


AssignmentOverride = Union[NoOverride, ByAgentId, ByAgentName]


class AssignmentRule(str, Enum):
    OVERRIDE = "override"
    SPECIALIST = "specialist"
    ROUND_ROBIN = "round_robin"


@dataclass(frozen=True, slots=True)
class AssignmentDecision:
    assignee: SalesPerson
    rule: AssignmentRule
    cursor_position: int | None = None

    @property
    def advances_cursor(self) -> bool:
        return self.rule is AssignmentRule.ROUND_ROBIN


class RoundRobinCursor:
    """
    Rotating index for fair distribution of incoming leads.

    Process-lifetime state starting at 0; never persisted, so a restart
    resets the rotation. All access goes through an internal lock.
    """

    def __init__(self, start: int = 0):
        if start < 0:
            raise ValueError("cursor start must be >= 0")
        self._position = start
        self._lock = threading.Lock()

    @property
    def position(self) -> int:
        with self._lock:
            return self._position

    def advance(self, expected: int | None = None) -> int:
        """
        Move the cursor one step and return the new position.

        If `expected` is given the cursor only moves when it still sits at
        that position, which keeps a stale decision from double-advancing.
        """

        with self._lock:
            if expected is not None and self._position != expected:
                return self._position
            self._position += 1
            return self._position


def resolve_override(override: AssignmentOverride, roster: Sequence[SalesPerson]) -> SalesPerson | None:
    """
    Resolve an explicit assignee against the roster.

    Returns None for NoOverride. Raises UnknownAssignee when the reference
    matches no roster member. Name lookups take the first match in roster
    order; ids are authoritative.
    """

    if isinstance(override, NoOverride):
        return None
    if isinstance(override, ByAgentId):
        member = find_by_id(roster, override.sales_id)
        if member is None:
            raise UnknownAssignee(override.sales_id)
        return member
    if isinstance(override, ByAgentName):
        member = find_by_name(roster, override.name)
        if member is None:
            raise UnknownAssignee(override.name)
        return member
    raise TypeError(f"Unsupported assignment override: {override!r}")


def round_robin_pool(roster: Sequence[SalesPerson], specialist_name: str) -> List[SalesPerson]:
    """Online members excluding the specialist, in roster order."""

    return [m for m in roster if m.is_online and m.name != specialist_name]


class AssignmentPolicy:
    """
    Owns the round-robin cursor and applies the assignment rules.

    One instance per process; construct it once and share it.
    """

    def __init__(self, specialist_name: str, cursor: RoundRobinCursor | None = None):
        self.specialist_name = specialist_name
        self.cursor = cursor or RoundRobinCursor()

    def decide(
        self,
        program: Program,
        override: AssignmentOverride,
        roster: Sequence[SalesPerson],
    ) -> AssignmentDecision:
        explicit = resolve_override(override, roster)
        if explicit is not None:
            return AssignmentDecision(assignee=explicit, rule=AssignmentRule.OVERRIDE)

        if program == RESERVED_PROGRAM:
            specialist = find_by_name(roster, self.specialist_name)
            if specialist is None or not specialist.is_online:
                raise SpecialistOffline(self.specialist_name, program.value)
            return AssignmentDecision(assignee=specialist, rule=AssignmentRule.SPECIALIST)

        pool = round_robin_pool(roster, self.specialist_name)
        if not pool:
            raise NoAvailableAgent()
        position = self.cursor.position
        return AssignmentDecision(
            assignee=pool[position % len(pool)],
            rule=AssignmentRule.ROUND_ROBIN,
            cursor_position=position,
        )

    def commit(self, decision: AssignmentDecision) -> None:
        """Record a decision whose lead was written successfully."""

        if decision.advances_cursor:
            self.cursor.advance(expected=decision.cursor_position)
