"""
Roster API Endpoints.

Salesperson registration, availability toggle, removal and worklists.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import Services, get_services
from api.errors import http_error
from api.models import LeadResponse, RegisterSalesPersonRequest, SalesPersonResponse
from domain.errors import SalesPersonNotFound
from repositories.errors import RepositoryError

router = APIRouter()


@router.get("/roster", response_model=List[SalesPersonResponse], summary="List Roster")
def list_roster(services: Services = Depends(get_services)):
    try:
        return [SalesPersonResponse.from_domain(m) for m in services.roster.list_roster()]
    except RepositoryError as e:
        raise http_error(e.code, e.message)


@router.post("/roster", response_model=SalesPersonResponse, status_code=201, summary="Register Salesperson")
def register_sales_person(request: RegisterSalesPersonRequest, services: Services = Depends(get_services)):
    try:
        member = services.roster.register_sales_person(request.sales_id, request.name, request.email)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except RepositoryError as e:
        raise http_error(e.code, e.message)
    return SalesPersonResponse.from_domain(member)


@router.post(
    "/roster/{sales_id}/toggle-status",
    response_model=SalesPersonResponse,
    summary="Toggle Availability",
    description="Switch a salesperson between online and offline."
)
def toggle_status(sales_id: str, services: Services = Depends(get_services)):
    try:
        member = services.roster.toggle_status(sales_id)
    except (SalesPersonNotFound, RepositoryError) as e:
        raise http_error(e.code, e.message)
    return SalesPersonResponse.from_domain(member)


@router.delete("/roster/{sales_id}", status_code=204, summary="Remove Salesperson")
def remove_sales_person(sales_id: str, services: Services = Depends(get_services)):
    """Leads already assigned to the salesperson keep their assignment."""
    try:
        services.roster.remove_sales_person(sales_id)
    except (SalesPersonNotFound, RepositoryError) as e:
        raise http_error(e.code, e.message)


@router.get(
    "/roster/{sales_id}/worklist",
    response_model=List[LeadResponse],
    summary="Salesperson Worklist",
    description="Open (not closed) leads assigned to the salesperson, newest first."
)
def worklist(sales_id: str, services: Services = Depends(get_services)):
    try:
        leads = services.reminders.worklist(sales_id)
    except (SalesPersonNotFound, RepositoryError) as e:
        raise http_error(e.code, e.message)
    return [LeadResponse.from_domain(lead) for lead in leads]
