"""
Appointment batch scheduling.

Creates the five after-care follow-ups for a customer in one multi-row
insert. Either all five are stored or the call raises and none are.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, List, Optional, Union
from uuid import UUID

from domain.appointment import AFTER_CARE_BUCKET, Appointment, build_follow_up_batch
from domain.time import utc_now
from repositories.contracts import AppointmentStore
from services.notifications import Change, ChangeKind, ChangeNotifier

logger = logging.getLogger(__name__)


class AppointmentService:
    def __init__(
        self,
        appointments: AppointmentStore,
        notifier: Optional[ChangeNotifier] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.appointments = appointments
        self.notifier = notifier or ChangeNotifier()
        self.clock = clock

    def schedule_appointment_batch(
        self,
        customer_name: str,
        base_date: Union[date, datetime],
        assigned_to: str = AFTER_CARE_BUCKET,
        lead_id: Optional[UUID] = None,
    ) -> List[Appointment]:
        """
        Build and store the five follow-up appointments.

        Raises:
            ValueError: customer_name or assigned_to is empty
            RepositoryError: the batch insert failed (nothing stored)
        """

        batch = build_follow_up_batch(
            customer_name,
            base_date,
            assigned_to,
            created_at=self.clock(),
            lead_id=lead_id,
        )
        self.appointments.insert_appointments(batch)

        logger.info(
            "Follow-up appointments scheduled",
            extra={"customer_name": customer_name, "assigned_to": assigned_to, "count": len(batch)},
        )
        self.notifier.publish(Change(ChangeKind.APPOINTMENTS_CREATED, str(batch[0].appointment_id)))
        return batch

    def list_appointments(self) -> List[Appointment]:
        return sorted(self.appointments.list_appointments(), key=lambda a: a.appointment_date)


__all__ = ["AppointmentService"]
