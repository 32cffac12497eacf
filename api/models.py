"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from domain.appointment import AFTER_CARE_BUCKET, Appointment
from domain.dashboard import DashboardStats, SalesPerformance
from domain.lead import CallStatus, Lead, Program
from domain.sales_person import AgentStatus, SalesPerson
from domain.sweep import Reassignment


# ============================================================================
# Lead Models
# ============================================================================

class LeadResponse(BaseModel):
    """Single lead in API responses."""
    lead_id: UUID
    first_name: str
    last_name: str
    phone: str
    program: Program
    call_status: CallStatus
    birth_date: Optional[date] = None
    address: Optional[str] = None
    assigned_sales_id: Optional[str] = None
    assigned_sales_name: Optional[str] = None
    sale_value: Decimal
    notes: str
    follow_up_date: Optional[date] = None
    appointment_date: Optional[datetime] = None
    admin_submitter: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, lead: Lead) -> "LeadResponse":
        return cls(
            lead_id=lead.lead_id,
            first_name=lead.first_name,
            last_name=lead.last_name,
            phone=lead.phone,
            program=lead.program,
            call_status=lead.call_status,
            birth_date=lead.birth_date,
            address=lead.address,
            assigned_sales_id=lead.assigned_sales_id,
            assigned_sales_name=lead.assigned_sales_name,
            sale_value=lead.sale_value,
            notes=lead.notes,
            follow_up_date=lead.follow_up_date,
            appointment_date=lead.appointment_date,
            admin_submitter=lead.admin_submitter,
            created_at=lead.created_at,
            updated_at=lead.updated_at,
        )


class SubmitLeadRequest(BaseModel):
    """
    Request to create a lead.

    Leave both assign_to fields empty for automatic assignment. Setting one
    assigns the lead to that roster member regardless of availability.
    """
    first_name: str = Field(..., min_length=1)
    last_name: str = ""
    phone: str = Field(..., min_length=1)
    program: Program
    birth_date: Optional[date] = None
    address: Optional[str] = None
    admin_submitter: Optional[str] = None
    assign_to_id: Optional[str] = None
    assign_to_name: Optional[str] = None

    @model_validator(mode="after")
    def _single_override(self) -> "SubmitLeadRequest":
        if self.assign_to_id and self.assign_to_name:
            raise ValueError("Provide assign_to_id or assign_to_name, not both")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "first_name": "Jane",
                "last_name": "Doe",
                "phone": "0812345678",
                "program": "General Program",
                "birth_date": "1990-03-22",
                "address": "1 Sukhumvit Rd, Bangkok",
                "admin_submitter": "Admin A"
            }
        }


class SubmitLeadResponse(BaseModel):
    """Response after a successful lead submission."""
    success: bool
    message: str
    assigned_agent_name: str
    lead: LeadResponse


class UpdateLeadRequest(BaseModel):
    """Partial lead update; only the fields sent are changed."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    address: Optional[str] = None
    program: Optional[Program] = None
    call_status: Optional[CallStatus] = None
    sale_value: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None
    follow_up_date: Optional[date] = None
    appointment_date: Optional[datetime] = None

    class Config:
        json_schema_extra = {
            "example": {
                "call_status": "closed_won",
                "sale_value": "25000.00",
                "notes": "Paid deposit"
            }
        }


class ReassignLeadRequest(BaseModel):
    """Manual reassignment target: a roster id or a display name."""
    assign_to_id: Optional[str] = None
    assign_to_name: Optional[str] = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "ReassignLeadRequest":
        if bool(self.assign_to_id) == bool(self.assign_to_name):
            raise ValueError("Provide exactly one of assign_to_id or assign_to_name")
        return self


class OperationResponse(BaseModel):
    success: bool
    message: str
    lead: Optional[LeadResponse] = None


# ============================================================================
# Roster Models
# ============================================================================

class SalesPersonResponse(BaseModel):
    sales_id: str
    name: str
    email: str
    status: AgentStatus
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, member: SalesPerson) -> "SalesPersonResponse":
        return cls(
            sales_id=member.sales_id,
            name=member.name,
            email=member.email,
            status=member.status,
            created_at=member.created_at,
        )


class RegisterSalesPersonRequest(BaseModel):
    """The id comes from the identity provider account of the salesperson."""
    sales_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)


# ============================================================================
# System (sweep and reminder) Models
# ============================================================================

class ReassignmentResponse(BaseModel):
    lead_id: UUID
    old_agent: Optional[str]
    new_agent: str

    @classmethod
    def from_domain(cls, move: Reassignment) -> "ReassignmentResponse":
        return cls(lead_id=move.lead_id, old_agent=move.old_agent, new_agent=move.new_agent)


class SweepFailureResponse(BaseModel):
    lead_id: UUID
    error: str


class SweepResponse(BaseModel):
    """Response for an idle-lead sweep."""
    reassignments: List[ReassignmentResponse]
    failures: List[SweepFailureResponse]
    reassigned_count: int
    message: str
    aborted: bool

    class Config:
        json_schema_extra = {
            "example": {
                "reassignments": [
                    {
                        "lead_id": "123e4567-e89b-12d3-a456-426614174000",
                        "old_agent": "Alice",
                        "new_agent": "Bob"
                    }
                ],
                "failures": [],
                "reassigned_count": 1,
                "message": "Reassigned 1 lead(s) idle for more than 24 hours",
                "aborted": False
            }
        }


class LeadListResponse(BaseModel):
    items: List[LeadResponse]
    total_count: int


# ============================================================================
# Appointment Models
# ============================================================================

class AppointmentBatchRequest(BaseModel):
    customer_name: str = Field(..., min_length=1)
    base_date: date
    assigned_to: str = Field(AFTER_CARE_BUCKET, min_length=1)
    lead_id: Optional[UUID] = None

    class Config:
        json_schema_extra = {
            "example": {
                "customer_name": "Jane Doe",
                "base_date": "2024-01-31",
                "assigned_to": "Alice"
            }
        }


class AppointmentResponse(BaseModel):
    appointment_id: UUID
    customer_name: str
    appointment_date: datetime
    follow_up_type: str
    assigned_to: str
    lead_id: Optional[UUID] = None

    @classmethod
    def from_domain(cls, appointment: Appointment) -> "AppointmentResponse":
        return cls(
            appointment_id=appointment.appointment_id,
            customer_name=appointment.customer_name,
            appointment_date=appointment.appointment_date,
            follow_up_type=appointment.follow_up_type.value,
            assigned_to=appointment.assigned_to,
            lead_id=appointment.lead_id,
        )


# ============================================================================
# Dashboard Models
# ============================================================================

class SalesPerformanceResponse(BaseModel):
    sales_id: str
    name: str
    leads_count: int
    sales_value: Decimal
    conversion_rate: Decimal
    status_counts: Dict[str, int]

    @classmethod
    def from_domain(cls, entry: SalesPerformance) -> "SalesPerformanceResponse":
        return cls(
            sales_id=entry.sales_id,
            name=entry.name,
            leads_count=entry.leads_count,
            sales_value=entry.sales_value,
            conversion_rate=entry.conversion_rate,
            status_counts=entry.status_counts,
        )


class DashboardResponse(BaseModel):
    total_leads: int
    total_sales_value: Decimal
    conversion_rate: Decimal
    uncalled_leads: int
    new_customers: int
    opportunities: int
    status_distribution: Dict[str, int]
    performance: List[SalesPerformanceResponse]
    rank: Optional[int] = None
    total_salespeople: Optional[int] = None

    @classmethod
    def from_domain(cls, stats: DashboardStats) -> "DashboardResponse":
        return cls(
            total_leads=stats.total_leads,
            total_sales_value=stats.total_sales_value,
            conversion_rate=stats.conversion_rate,
            uncalled_leads=stats.uncalled_leads,
            new_customers=stats.new_customers,
            opportunities=stats.opportunities,
            status_distribution=stats.status_distribution,
            performance=[SalesPerformanceResponse.from_domain(p) for p in stats.performance],
            rank=stats.rank,
            total_salespeople=stats.total_salespeople,
        )


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    detail: str

    class Config:
        json_schema_extra = {
            "example": {
                "detail": "Duplicate phone number: 0812345678 is already registered to another lead"
            }
        }
