"""
Dashboard API Endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from api.dependencies import Services, get_services
from api.errors import http_error
from api.models import DashboardResponse
from repositories.errors import RepositoryError

router = APIRouter()


@router.get(
    "/dashboard",
    response_model=DashboardResponse,
    summary="Sales Dashboard",
    description="Headline stats and per-salesperson performance. Pass sales_name for a personal view with rank."
)
def dashboard(sales_name: Optional[str] = None, services: Services = Depends(get_services)):
    try:
        stats = services.dashboard.get_dashboard_stats(sales_name=sales_name)
    except RepositoryError as e:
        raise http_error(e.code, e.message)
    return DashboardResponse.from_domain(stats)
