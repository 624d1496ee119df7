"""
The Clinic Agenda Booking Engine.

This module is the single entry point for every change to the agenda.
Every calendar interaction goes through an explicit two-phase protocol:
1. validate(intent) -> BookingDecision (accepted, or rejected with the failing rule)
2. commit(intent)   -> only ever mutates after a successful validation

Configuration writes (working hours, breaks, blocks) also go through here so
they are checked and saved after every mutation.
"""

import logging
from dataclasses import dataclass
from datetime import date as date_type, time as time_type
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from models import (
    Appointment,
    AppointmentData,
    AppointmentStatus,
    BlockEntry,
    BreakInterval,
    DaySchedule,
    Weekday,
)
from .availability import AvailabilityResolver
from .calendar_math import parse_time
from .constraints import (
    NOT_FOUND,
    BookingRejected,
    ConstraintChecker,
    ConstraintViolation,
    ValidationFailure,
)
from .slots import generate_slots
from .state import AgendaState
from .store import AppointmentStore

logger = logging.getLogger(__name__)


def _time_input(value: Union[str, time_type], field: str) -> time_type:
    """'HH:MM' or a time, else a ValidationFailure naming the field."""
    try:
        return parse_time(value)
    except ValueError as e:
        raise ValidationFailure(f"Invalid time {value!r}, expected HH:MM", field) from e


# --- Intents (what the user tried to do in the calendar) ---

@dataclass
class CreateIntent:
    """Click-to-create / booking form submit."""
    data: AppointmentData


@dataclass
class MoveIntent:
    """Drag-and-drop an existing appointment to another date/time."""
    appointment_id: int
    date: date_type
    start_time: time_type


@dataclass
class ResizeIntent:
    """Drag the bottom edge of an appointment: only the duration changes."""
    appointment_id: int
    duration_minutes: int


Intent = Union[CreateIntent, MoveIntent, ResizeIntent]


@dataclass
class BookingDecision:
    accepted: bool
    violation: Optional[ConstraintViolation] = None

    @property
    def reason(self) -> Optional[str]:
        return self.violation.reason if self.violation else None


class Agenda:
    """
    Main scheduling facade.
    Ingests the state container (schedule + blocks) and an appointment store.
    """

    def __init__(self, state: AgendaState, store: Optional[AppointmentStore] = None):
        self.state = state
        self.store = store if store is not None else AppointmentStore()

        # Resolver reads state.schedule lazily so external replacements are seen.
        self.resolver = AvailabilityResolver(lambda: self.state.schedule, self.state.blocks)
        self.checker = ConstraintChecker(self.resolver)

    # --- Phase 1: Validate ---

    def validate(self, intent: Intent) -> BookingDecision:
        violation = self._check(intent)
        if violation:
            logger.info(f"Rejected {type(intent).__name__}: [{violation.constraint_type}] {violation.reason}")
            return BookingDecision(False, violation)
        return BookingDecision(True)

    def _check(self, intent: Intent) -> Optional[ConstraintViolation]:
        existing = self.store.all()

        if isinstance(intent, CreateIntent):
            data = intent.data
            return self.checker.check_booking(
                data.date, data.start_time, data.duration_minutes, existing
            )

        current = self.store.get(intent.appointment_id)
        if current is None:
            return ConstraintViolation(
                NOT_FOUND,
                f"Appointment {intent.appointment_id} does not exist",
                getattr(intent, "date", date_type.today()),
                getattr(intent, "start_time", time_type(0, 0)),
                intent.appointment_id
            )

        if isinstance(intent, MoveIntent):
            return self.checker.check_booking(
                intent.date, intent.start_time, current.duration_minutes,
                existing, exclude_id=current.id
            )

        if isinstance(intent, ResizeIntent):
            if intent.duration_minutes <= 0:
                raise ValidationFailure("Duration must be positive", "duration_minutes")
            # The new end must stay inside working hours and clear of breaks/blocks.
            return self.checker.check_booking(
                current.date, current.start_time, intent.duration_minutes,
                existing, exclude_id=current.id, check_span=True
            )

        raise TypeError(f"Unsupported intent: {intent!r}")

    # --- Phase 2: Commit ---

    def commit(self, intent: Intent) -> Appointment:
        """Apply an intent. Raises BookingRejected if it does not validate."""
        decision = self.validate(intent)
        if not decision.accepted:
            raise BookingRejected(decision.violation)

        if isinstance(intent, CreateIntent):
            appointment = self.store.add(intent.data)
            logger.info(f"Booked #{appointment.id} {appointment.patient_name} on {appointment.date} at {appointment.start_time:%H:%M}")
            return appointment

        current = self.store.get(intent.appointment_id)
        if isinstance(intent, MoveIntent):
            updated = current.model_copy(update={"date": intent.date, "start_time": intent.start_time})
        else:
            updated = current.model_copy(update={"duration_minutes": intent.duration_minutes})

        self.store.replace(updated)
        return updated

    def book(self, data: Union[AppointmentData, Dict[str, Any]]) -> Appointment:
        """Shortcut for commit(CreateIntent(...)) that also accepts a plain dict."""
        if not isinstance(data, AppointmentData):
            try:
                data = AppointmentData(**data)
            except ValidationError as e:
                raise ValidationFailure.from_pydantic(e) from e
        return self.commit(CreateIntent(data))

    def set_status(self, appointment_id: int, status: AppointmentStatus) -> None:
        self.store.update_status(appointment_id, status)

    # --- Queries ---

    def available_slots(self, date: date_type, slot_minutes: Optional[int] = None) -> List[time_type]:
        return generate_slots(self.resolver, date, slot_minutes)

    def appointments_for(self, date: date_type) -> List[Appointment]:
        """Day view: sorted by start time (the store itself keeps insertion order)."""
        return sorted(self.store.by_date(date), key=lambda a: a.start_time)

    # --- Configuration writes (validated, then saved) ---

    def configure_day(
        self,
        weekday: Weekday,
        active: Optional[bool] = None,
        open: Union[str, time_type, None] = None,
        close: Union[str, time_type, None] = None
    ) -> DaySchedule:
        """Change one weekday. The resulting day must be consistent or nothing changes."""
        candidate = self.state.schedule.get_day(weekday)
        changes = {}
        if active is not None: changes["active"] = active
        if open is not None: changes["open"] = _time_input(open, "open")
        if close is not None: changes["close"] = _time_input(close, "close")
        candidate = candidate.model_copy(update=changes)

        self._ensure_valid_day(candidate)

        if active is not None:
            self.state.schedule.set_day_active(weekday, active)
        if open is not None or close is not None:
            self.state.schedule.set_day_hours(weekday, candidate.open, candidate.close)
        self.state.save_schedule()
        return self.state.schedule.get_day(weekday)

    def add_break(self, weekday: Weekday, start: time_type, end: time_type) -> BreakInterval:
        try:
            interval = BreakInterval(start=start, end=end)
        except ValidationError as e:
            raise ValidationFailure.from_pydantic(e) from e

        candidate = self.state.schedule.get_day(weekday)
        candidate.breaks.append(interval)
        self._ensure_valid_day(candidate)

        self.state.schedule.add_break(weekday, interval)
        self.state.save_schedule()
        return interval

    def update_break(self, weekday: Weekday, break_id: str, field: str, value: Union[str, time_type]) -> None:
        if field not in ("start", "end"):
            raise ValidationFailure(f"Unknown break field '{field}'", field)
        value = _time_input(value, field)

        candidate = self.state.schedule.get_day(weekday)
        candidate.breaks = [
            b.model_copy(update={field: value}) if b.id == break_id else b
            for b in candidate.breaks
        ]
        for brk in candidate.breaks:
            if brk.start >= brk.end:
                raise ValidationFailure("Break end must be strictly after break start", field)
        self._ensure_valid_day(candidate)

        self.state.schedule.update_break(weekday, break_id, field, value)
        self.state.save_schedule()

    def remove_break(self, weekday: Weekday, break_id: str) -> None:
        self.state.schedule.remove_break(weekday, break_id)
        self.state.save_schedule()

    def set_consultation_minutes(self, minutes: int) -> None:
        if not 5 <= minutes <= 480:
            raise ValidationFailure("Consultation length must be between 5 and 480 minutes", "consultation_minutes")
        self.state.schedule = self.state.schedule.model_copy(update={"consultation_minutes": minutes})
        self.state.save_schedule()

    def add_block(self, data: Union[BlockEntry, Dict[str, Any]]) -> BlockEntry:
        entry = self.state.blocks.add(data)
        self.state.save_blocks()
        return entry

    def remove_block(self, block_id: str) -> None:
        self.state.blocks.remove(block_id)
        self.state.save_blocks()

    def _ensure_valid_day(self, day: DaySchedule) -> None:
        errors = day.validation_errors()
        if errors:
            raise ValidationFailure("; ".join(errors), "schedule")
