"""
Leads API Endpoints.

Endpoints for lead intake, listing, editing, manual reassignment and delete.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import Services, get_services
from api.errors import http_error
from api.models import (
    LeadListResponse,
    LeadResponse,
    OperationResponse,
    ReassignLeadRequest,
    SubmitLeadRequest,
    SubmitLeadResponse,
    UpdateLeadRequest,
)
from domain.assignment import AssignmentOverride, ByAgentId, ByAgentName, NoOverride
from domain.lead import CallStatus, LeadSubmission, LeadUpdate, Program
from repositories.contracts import LeadFilter
from repositories.errors import RepositoryError

router = APIRouter()


def _override(assign_to_id: Optional[str], assign_to_name: Optional[str]) -> AssignmentOverride:
    if assign_to_id:
        return ByAgentId(assign_to_id)
    if assign_to_name:
        return ByAgentName(assign_to_name)
    return NoOverride()


@router.post(
    "/leads",
    response_model=SubmitLeadResponse,
    status_code=201,
    summary="Submit Lead",
    description="Create a lead and assign it to a salesperson."
)
def submit_lead(request: SubmitLeadRequest, services: Services = Depends(get_services)):
    """
    Create a new lead.

    **Assignment rules (first match wins):**
    1. `assign_to_id` / `assign_to_name` set: that roster member gets the lead
    2. Program "Fix Face Lock": only the specialist, who must be online
    3. Otherwise: round-robin across online salespeople

    **Rejections (no lead is created):**
    - 409 duplicate phone, specialist offline, no available agent
    - 422 unknown assignee
    """
    submission = LeadSubmission(
        first_name=request.first_name,
        last_name=request.last_name,
        phone=request.phone,
        program=request.program,
        birth_date=request.birth_date,
        address=request.address,
        admin_submitter=request.admin_submitter,
    )
    result = services.intake.submit_lead(
        submission, _override(request.assign_to_id, request.assign_to_name)
    )
    if not result.success:
        raise http_error(result.error_code, result.message)

    return SubmitLeadResponse(
        success=True,
        message=result.message,
        assigned_agent_name=result.assigned_agent_name,
        lead=LeadResponse.from_domain(result.lead),
    )


@router.get(
    "/leads",
    response_model=LeadListResponse,
    summary="List Leads",
    description="List leads with optional filtering by status, program and assignee."
)
def list_leads(
    call_status: Optional[CallStatus] = None,
    program: Optional[Program] = None,
    assigned_sales_id: Optional[str] = None,
    assigned_sales_name: Optional[str] = None,
    services: Services = Depends(get_services),
):
    lead_filter = LeadFilter(
        call_status=call_status,
        program=program,
        assigned_sales_id=assigned_sales_id,
        assigned_sales_name=assigned_sales_name,
    )
    try:
        leads = services.intake.list_leads(lead_filter)
    except RepositoryError as e:
        raise http_error(e.code, e.message)

    return LeadListResponse(
        items=[LeadResponse.from_domain(lead) for lead in leads],
        total_count=len(leads),
    )


@router.patch(
    "/leads/{lead_id}",
    response_model=OperationResponse,
    summary="Update Lead",
)
def update_lead(lead_id: UUID, request: UpdateLeadRequest, services: Services = Depends(get_services)):
    """Update workflow status, notes, sale value, dates or contact details."""
    values = request.model_dump(exclude_unset=True)
    if not values:
        raise HTTPException(status_code=422, detail="No fields to update")

    result = services.intake.update_lead(lead_id, LeadUpdate.of(**values))
    if not result.success:
        raise http_error(result.error_code, result.message)
    return OperationResponse(success=True, message=result.message, lead=LeadResponse.from_domain(result.lead))


@router.post(
    "/leads/{lead_id}/reassign",
    response_model=OperationResponse,
    summary="Reassign Lead",
)
def reassign_lead(lead_id: UUID, request: ReassignLeadRequest, services: Services = Depends(get_services)):
    result = services.intake.reassign_lead(lead_id, _override(request.assign_to_id, request.assign_to_name))
    if not result.success:
        raise http_error(result.error_code, result.message)
    return OperationResponse(success=True, message=result.message, lead=LeadResponse.from_domain(result.lead))


@router.delete(
    "/leads/{lead_id}",
    response_model=OperationResponse,
    summary="Delete Lead",
)
def delete_lead(lead_id: UUID, services: Services = Depends(get_services)):
    result = services.intake.delete_lead(lead_id)
    if not result.success:
        raise http_error(result.error_code, result.message)
    return OperationResponse(success=True, message=result.message)
