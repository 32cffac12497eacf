"""
Appointments API Endpoints.

After-care follow-up scheduling.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import Services, get_services
from api.errors import http_error
from api.models import AppointmentBatchRequest, AppointmentResponse
from repositories.errors import RepositoryError

router = APIRouter()


@router.post(
    "/appointments/batch",
    response_model=List[AppointmentResponse],
    status_code=201,
    summary="Schedule Follow-up Appointments",
    description="Create the five follow-ups (+1 day, +1 month, +3 months, +6 months, +1 year) for a customer."
)
def schedule_batch(request: AppointmentBatchRequest, services: Services = Depends(get_services)):
    """
    Schedule a follow-up batch.

    The five appointments are stored together; if the store rejects the
    batch none of them exist.
    """
    try:
        batch = services.appointments.schedule_appointment_batch(
            request.customer_name,
            request.base_date,
            request.assigned_to,
            lead_id=request.lead_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except RepositoryError as e:
        raise http_error(e.code, e.message)
    return [AppointmentResponse.from_domain(a) for a in batch]


@router.get("/appointments", response_model=List[AppointmentResponse], summary="List Appointments")
def list_appointments(services: Services = Depends(get_services)):
    try:
        appointments = services.appointments.list_appointments()
    except RepositoryError as e:
        raise http_error(e.code, e.message)
    return [AppointmentResponse.from_domain(a) for a in appointments]
