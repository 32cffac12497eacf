"""
Database validation tests.

This module checks a live Supabase project and verifies that:
1. Connection credentials work
2. Required tables exist
3. The lead and roster repositories can write and read back their rows

Skipped unless SUPABASE_URL and SUPABASE_KEY are set. Run this first to
validate database setup before deploying.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

import pytest
from dotenv import load_dotenv

# Load .env file before anything else
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

pytestmark = pytest.mark.skipif(
    not (os.getenv("SUPABASE_URL") and os.getenv("SUPABASE_KEY")),
    reason="SUPABASE_URL / SUPABASE_KEY not set",
)


def test_supabase_url_format() -> None:
    assert os.getenv("SUPABASE_URL", "").startswith("https://"), "SUPABASE_URL should start with https://"


@pytest.mark.parametrize("table_env, default", [
    ("LEADS_TABLE", "leads"),
    ("SALES_PERSONS_TABLE", "sales_persons"),
    ("APPOINTMENTS_TABLE", "appointments"),
])
def test_table_exists(table_env: str, default: str) -> None:
    """Verify each required table exists and can be queried."""

    from repositories.client import execute, get_supabase

    table = os.getenv(table_env, default)
    execute(get_supabase().table(table).select("*").limit(0), f"query {table}")


def test_lead_repository_round_trip() -> None:
    """Insert, read back, update and delete a throwaway lead."""

    from domain.lead import CallStatus, Lead, Program
    from repositories.lead_repository import SupabaseLeadRepository

    repo = SupabaseLeadRepository(table=os.getenv("LEADS_TABLE", "leads"))
    created = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
    lead = Lead(
        lead_id=uuid4(),
        first_name="Validation",
        last_name="Lead",
        phone=f"test-{uuid4().hex[:12]}",
        program=Program.CONSULTATION,
        call_status=CallStatus.UNCALLED,
        created_at=created,
        updated_at=created,
    )

    repo.insert_lead(lead)
    try:
        fetched = repo.find_lead_by_phone(lead.phone)
        assert fetched is not None
        assert fetched.lead_id == lead.lead_id
        assert fetched.program is Program.CONSULTATION

        updated = repo.update_lead(lead.lead_id, {"call_status": CallStatus.CONTACTED})
        assert updated is not None
        assert updated.call_status is CallStatus.CONTACTED
    finally:
        assert repo.delete_lead(lead.lead_id)


def test_roster_repository_round_trip() -> None:
    from domain.sales_person import AgentStatus, SalesPerson
    from repositories.sales_person_repository import SupabaseSalesPersonRepository

    repo = SupabaseSalesPersonRepository(table=os.getenv("SALES_PERSONS_TABLE", "sales_persons"))
    member = SalesPerson(
        sales_id=f"test-{uuid4().hex[:12]}",
        name="Validation Agent",
        email="validation@example.com",
        created_at=datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
    )

    repo.insert_sales_person(member)
    try:
        updated = repo.update_sales_person_status(member.sales_id, AgentStatus.ONLINE)
        assert updated is not None
        assert updated.is_online
    finally:
        assert repo.delete_sales_person(member.sales_id)
