#!/usr/bin/env python3
"""
System Checks Script

Runs the idle-lead sweep and the reminder scans against the live Supabase
project. Meant for cron or a manual run by an admin; run at most one sweep
at a time.

Usage:
    python scripts/run_system_checks.py sweep
    python scripts/run_system_checks.py stale
    python scripts/run_system_checks.py follow-ups
    python scripts/run_system_checks.py birthdays
    python scripts/run_system_checks.py all
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from api.dependencies import Services, get_services
from domain.lead import Lead
from repositories.client import get_supabase
from repositories.errors import RepositoryError


def _print_leads(title: str, leads: List[Lead]) -> None:
    print(f"\n{title}: {len(leads)}")
    for lead in leads:
        assignee = lead.assigned_sales_name or "-"
        print(f"  {lead.lead_id}  {lead.full_name:<30} {lead.phone:<14} {assignee}")


def run_sweep(services: Services) -> bool:
    result = services.sweep.run_idle_sweep()
    print(f"\nIdle-lead sweep: {result.message}")
    for move in result.reassignments:
        print(f"  {move.lead_id}  {move.old_agent or '-'} -> {move.new_agent}")
    for failure in result.failures:
        print(f"  [FAILED] {failure.lead_id}: {failure.error}")
    return not result.failures and result.error_code != "repository_error"


def run_stale(services: Services) -> bool:
    _print_leads("Uncalled for more than 10 minutes", services.reminders.scan_stale_uncalled())
    return True


def run_follow_ups(services: Services) -> bool:
    _print_leads("Follow-ups due today", services.reminders.scan_due_follow_ups())
    return True


def run_birthdays(services: Services) -> bool:
    _print_leads("Birthdays today", services.reminders.scan_todays_birthdays())
    return True


CHECKS = {
    "sweep": [run_sweep],
    "stale": [run_stale],
    "follow-ups": [run_follow_ups],
    "birthdays": [run_birthdays],
    "all": [run_stale, run_follow_ups, run_birthdays, run_sweep],
}


def main() -> int:
    parser = argparse.ArgumentParser(description="Run lead sweep and reminder checks")
    parser.add_argument("check", choices=sorted(CHECKS), help="Which check to run")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log at DEBUG level")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        get_supabase()
    except RuntimeError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2

    services = get_services()
    ok = True
    for check in CHECKS[args.check]:
        try:
            ok = check(services) and ok
        except RepositoryError as e:
            print(f"[ERROR] {e.message}", file=sys.stderr)
            ok = False

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
