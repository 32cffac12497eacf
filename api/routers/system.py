"""
System API Endpoints.

Manual triggers for the idle-lead sweep and the reminder scans. The same
operations are available from scripts/run_system_checks.py for cron.
"""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends

from api.dependencies import Services, get_services
from api.errors import http_error
from api.models import LeadResponse, ReassignmentResponse, SweepFailureResponse, SweepResponse
from repositories.errors import RepositoryError

router = APIRouter()


@router.post(
    "/system/idle-sweep",
    response_model=SweepResponse,
    summary="Run Idle-Lead Sweep",
    description="Reassign leads left uncalled for more than 24 hours to another online salesperson."
)
def run_idle_sweep(services: Services = Depends(get_services)):
    """
    Run the idle-lead sweep.

    Always returns 200 with a summary. `aborted` is true when nothing was
    attempted (fewer than two eligible salespeople online, or a sweep is
    already running). Individual write failures are listed in `failures`.
    """
    result = services.sweep.run_idle_sweep()
    return SweepResponse(
        reassignments=[ReassignmentResponse.from_domain(m) for m in result.reassignments],
        failures=[SweepFailureResponse(lead_id=f.lead_id, error=f.error) for f in result.failures],
        reassigned_count=result.reassigned_count,
        message=result.message,
        aborted=result.aborted,
    )


@router.get(
    "/system/reminders/stale-uncalled",
    response_model=List[LeadResponse],
    summary="Stale Uncalled Leads",
    description="Leads still uncalled more than 10 minutes after creation."
)
def stale_uncalled(services: Services = Depends(get_services)):
    try:
        leads = services.reminders.scan_stale_uncalled()
    except RepositoryError as e:
        raise http_error(e.code, e.message)
    return [LeadResponse.from_domain(lead) for lead in leads]


@router.get(
    "/system/reminders/follow-ups",
    response_model=List[LeadResponse],
    summary="Follow-ups Due Today",
)
def follow_ups(services: Services = Depends(get_services)):
    try:
        leads = services.reminders.scan_due_follow_ups()
    except RepositoryError as e:
        raise http_error(e.code, e.message)
    return [LeadResponse.from_domain(lead) for lead in leads]


@router.get(
    "/system/reminders/birthdays",
    response_model=List[LeadResponse],
    summary="Customer Birthdays",
    description="Leads whose birthday is today (scope=today) or falls in the current month (scope=month)."
)
def birthdays(
    scope: Literal["today", "month"] = "today",
    sales_name: Optional[str] = None,
    services: Services = Depends(get_services),
):
    try:
        if scope == "month":
            leads = services.reminders.scan_birthdays_this_month(sales_name=sales_name)
        else:
            leads = services.reminders.scan_todays_birthdays(sales_name=sales_name)
    except RepositoryError as e:
        raise http_error(e.code, e.message)
    return [LeadResponse.from_domain(lead) for lead in leads]
