"""
Hard Constraint Validation Logic.

This module answers the binary question: "Can this appointment happen at Time Y?"
It enforces physical reality (one patient per chair at a time) on top of the
working-hours / block rules resolved by availability.py.

Overlap detection here is ADVISORY: the AppointmentStore never calls it.
Callers (the booking engine, drag/drop or resize handlers) must check first.
"""

from datetime import date as date_type, time as time_type
from typing import Iterable, List, Optional
from dataclasses import dataclass

from pydantic import ValidationError

from models import Appointment, AppointmentStatus


# Rule names carried by ConstraintViolation.constraint_type
HOURS = "Hours"
BREAK = "Break"
BLOCK = "Block"
OVERLAP = "Overlap"
NOT_FOUND = "NotFound"


@dataclass
class ConstraintViolation:
    """Detailed reason for rejection."""
    constraint_type: str  # e.g., "Hours", "Block", "Overlap"
    reason: str
    date: date_type
    start_time: time_type
    appointment_id: Optional[int] = None


class ValidationFailure(ValueError):
    """A record could not be built. 'field' names the input that has to change."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    @classmethod
    def from_pydantic(cls, error: ValidationError) -> "ValidationFailure":
        first = error.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        message = first.get("msg", str(error)).removeprefix("Value error, ")
        return cls(message, field)


class BookingRejected(Exception):
    """Raised when a booking intent is committed without passing validation."""

    def __init__(self, violation: ConstraintViolation):
        super().__init__(violation.reason)
        self.violation = violation


def _span(start: time_type, duration_minutes: int):
    begin = start.hour * 60 + start.minute
    return begin, begin + duration_minutes


def find_conflict(
    date: date_type,
    start: time_type,
    duration_minutes: int,
    existing: Iterable[Appointment],
    exclude_id: Optional[int] = None
) -> Optional[Appointment]:
    """
    First non-cancelled appointment on the same date whose [start, end) overlaps
    the candidate's. Touching (one ends exactly when the other starts) is fine.
    """
    cand_start, cand_end = _span(start, duration_minutes)

    for appt in existing:
        if appt.date != date: continue
        if appt.status == AppointmentStatus.CANCELLED: continue
        if exclude_id is not None and appt.id == exclude_id: continue

        other_start, other_end = _span(appt.start_time, appt.duration_minutes)

        # Standard Overlap Logic: StartA < EndB and EndA > StartB
        if cand_start < other_end and cand_end > other_start:
            return appt
    return None


def has_conflict(
    date: date_type,
    start: time_type,
    duration_minutes: int,
    existing: Iterable[Appointment],
    exclude_id: Optional[int] = None
) -> bool:
    return find_conflict(date, start, duration_minutes, existing, exclude_id) is not None


class ConstraintChecker:
    """
    Validates hard constraints for a proposed booking.
    Composes the AvailabilityResolver (hours, breaks, blocks) with overlap detection.
    """

    def __init__(self, resolver):
        self.resolver = resolver

    def check_booking(
        self,
        date: date_type,
        start: time_type,
        duration_minutes: int,
        existing: List[Appointment],
        exclude_id: Optional[int] = None,
        check_span: bool = False
    ) -> Optional[ConstraintViolation]:
        """
        Master validation function. Returns None if Valid, Violation object if Invalid.
        """
        # 1. Is the practice open (and not blocked) at this time?
        if check_span:
            violation = self.resolver.check_span(date, start, duration_minutes)
        else:
            violation = self.resolver.check(date, start)
        if violation: return violation

        # 2. Does it clash with another patient?
        clash = find_conflict(date, start, duration_minutes, existing, exclude_id)
        if clash:
            return ConstraintViolation(
                OVERLAP,
                f"Clashes with {clash.patient_name} at {clash.start_time:%H:%M} "
                f"({clash.duration_minutes} min)",
                date, start, clash.id
            )

        return None  # All clear!
