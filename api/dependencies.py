"""
Service wiring for the API.

All services share one set of Supabase repositories, one change notifier and
one assignment policy, so the round-robin cursor is a single per-process
object. Tests replace `get_services` through `app.dependency_overrides`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import Callable

from domain.assignment import AssignmentPolicy
from domain.time import utc_now
from repositories.appointment_repository import SupabaseAppointmentRepository
from repositories.contracts import AppointmentStore, LeadStore, RosterStore
from repositories.lead_repository import SupabaseLeadRepository
from repositories.sales_person_repository import SupabaseSalesPersonRepository
from services.appointment_service import AppointmentService
from services.dashboard_service import DashboardService
from services.idle_sweep_service import IdleLeadSweepService
from services.lead_intake_service import LeadIntakeService
from services.notifications import ChangeNotifier
from services.reminder_service import ReminderService
from services.roster_service import RosterService
from services.settings import EngineSettings


@dataclass(frozen=True)
class Services:
    intake: LeadIntakeService
    sweep: IdleLeadSweepService
    reminders: ReminderService
    appointments: AppointmentService
    roster: RosterService
    dashboard: DashboardService
    notifier: ChangeNotifier


def build_services(
    settings: EngineSettings,
    leads: LeadStore,
    roster: RosterStore,
    appointments: AppointmentStore,
    clock: Callable[[], datetime] = utc_now,
) -> Services:
    notifier = ChangeNotifier()
    policy = AssignmentPolicy(specialist_name=settings.specialist_name)
    return Services(
        intake=LeadIntakeService(leads, roster, policy, notifier=notifier, clock=clock),
        sweep=IdleLeadSweepService(leads, roster, settings.specialist_name, notifier=notifier, clock=clock),
        reminders=ReminderService(leads, roster, clock=clock),
        appointments=AppointmentService(appointments, notifier=notifier, clock=clock),
        roster=RosterService(roster, notifier=notifier, clock=clock),
        dashboard=DashboardService(leads, roster, clock=clock),
        notifier=notifier,
    )


@lru_cache(maxsize=1)
def get_services() -> Services:
    settings = EngineSettings.from_env()
    return build_services(
        settings,
        leads=SupabaseLeadRepository(table=settings.leads_table),
        roster=SupabaseSalesPersonRepository(table=settings.sales_persons_table),
        appointments=SupabaseAppointmentRepository(table=settings.appointments_table),
    )


__all__ = ["Services", "build_services", "get_services"]
