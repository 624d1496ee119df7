"""
Appointment Store.

In-memory collection of appointments keyed by id. Mutations do NOT re-validate
availability or overlaps; that is the caller's job (see engine.Agenda).
"""

import logging
from datetime import date as date_type
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from models import Appointment, AppointmentData, AppointmentStatus
from .constraints import ValidationFailure

logger = logging.getLogger(__name__)


class AppointmentStore:
    """
    Maintains the list of bookings in insertion order.
    Unknown ids on update/remove are silent no-ops.
    """

    def __init__(self, appointments: Iterable[Appointment] = ()):
        self._appointments: List[Appointment] = list(appointments)

    def add(self, data: Union[AppointmentData, Dict[str, Any]]) -> Appointment:
        """Store a new appointment with id = max(existing ids) + 1 (1 when empty)."""
        if isinstance(data, AppointmentData):
            data = data.model_dump(exclude={"id"})
        else:
            data = {k: v for k, v in data.items() if k != "id"}

        next_id = max((a.id for a in self._appointments), default=0) + 1
        try:
            appointment = Appointment(id=next_id, **data)
        except ValidationError as e:
            raise ValidationFailure.from_pydantic(e) from e
        self._appointments.append(appointment)

        logger.debug(
            f"Appointment {appointment.id} added: {appointment.patient_name} "
            f"{appointment.date} {appointment.start_time:%H:%M}"
        )
        return appointment

    def update_status(self, appointment_id: int, status: AppointmentStatus) -> None:
        """
        Replace only the status. Any status may move to any other; there is
        no state machine (a cancelled booking can be re-confirmed).
        """
        status = AppointmentStatus(status)
        self._appointments = [
            a.model_copy(update={"status": status}) if a.id == appointment_id else a
            for a in self._appointments
        ]

    def replace(self, updated: Appointment) -> None:
        self._appointments = [
            updated if a.id == updated.id else a
            for a in self._appointments
        ]

    def remove(self, appointment_id: int) -> None:
        self._appointments = [a for a in self._appointments if a.id != appointment_id]

    # --- Query Methods ---

    def get(self, appointment_id: int) -> Optional[Appointment]:
        for appt in self._appointments:
            if appt.id == appointment_id:
                return appt
        return None

    def by_date(self, date: date_type) -> List[Appointment]:
        """Appointments on a date, in insertion order (NOT sorted by start time)."""
        return [a for a in self._appointments if a.date == date]

    def all(self) -> List[Appointment]:
        return list(self._appointments)

    def day_statistics(self, date: date_type) -> Dict[str, int]:
        """Totals for the day summary cards."""
        day = self.by_date(date)
        return {
            "total": len(day),
            "confirmed": sum(1 for a in day if a.status == AppointmentStatus.CONFIRMED),
        }

    def __len__(self) -> int:
        return len(self._appointments)
