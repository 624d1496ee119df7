"""
Slot Generator.

Enumerates bookable start times for a date. Pure function of the current
schedule and blocks; recomputed from scratch on every call.
"""

from datetime import date as date_type, time as time_type
from typing import List, Optional

from .availability import AvailabilityResolver
from .calendar_math import from_minutes, to_minutes, weekday_of


def generate_slots(
    resolver: AvailabilityResolver,
    date: date_type,
    slot_minutes: Optional[int] = None
) -> List[time_type]:
    """
    Walk the day from opening time in steps of slot_minutes (default: the
    schedule's consultation length) and keep every step that is bookable.
    """
    schedule = resolver.schedule
    if slot_minutes is None:
        slot_minutes = schedule.consultation_minutes
    if slot_minutes <= 0:
        raise ValueError("slot_minutes must be positive")

    day = schedule.days[weekday_of(date)]
    if not day.active:
        return []

    slots = []
    # Integer minutes, not add_minutes(): wrapping at midnight would never reach close.
    current = to_minutes(day.open)
    close = to_minutes(day.close)
    while current < close:
        candidate = from_minutes(current)
        if resolver.is_bookable(date, candidate):
            slots.append(candidate)
        current += slot_minutes

    return slots
