"""
Pytest configuration and shared fixtures.

This file adds the project root to the Python path so that tests can import
from the domain, repositories, services and api modules, and provides
in-memory repositories, a fixed clock and a standard roster.
"""

import sys
from pathlib import Path

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.assignment import AssignmentPolicy  # noqa: E402
from tests.fakes import (  # noqa: E402
    NOW,
    SPECIALIST,
    InMemoryAppointmentRepository,
    InMemoryLeadRepository,
    InMemorySalesPersonRepository,
    make_member,
)


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def roster_members():
    """Alice and Bob online, Charlie offline, the specialist Nat online."""

    return [
        make_member("s-alice", "Alice", online=True, minutes=0),
        make_member("s-bob", "Bob", online=True, minutes=1),
        make_member("s-charlie", "Charlie", online=False, minutes=2),
        make_member("s-nat", SPECIALIST, online=True, minutes=3),
    ]


@pytest.fixture
def roster_repo(roster_members):
    return InMemorySalesPersonRepository(roster_members)


@pytest.fixture
def lead_repo():
    return InMemoryLeadRepository()


@pytest.fixture
def appointment_repo():
    return InMemoryAppointmentRepository()


@pytest.fixture
def policy():
    return AssignmentPolicy(specialist_name=SPECIALIST)
