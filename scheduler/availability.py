"""
Availability Resolver.

Decides whether a (date, time) pair is bookable by composing the
WeeklySchedule (working hours + breaks) with the BlockRegistry.
All intervals are half-open: [start, end).
"""

from datetime import date as date_type, time as time_type
from typing import Callable, Optional

from models import WeeklySchedule
from .blocks import BlockRegistry
from .calendar_math import to_minutes, weekday_of
from .constraints import BLOCK, BREAK, HOURS, ConstraintViolation


class AvailabilityResolver:
    """
    Read-only view over the schedule and the block registry.

    The schedule is taken through a zero-argument callable so the resolver always
    sees the current record, even after the state container swaps it wholesale.
    """

    def __init__(self, schedule: Callable[[], WeeklySchedule], blocks: BlockRegistry):
        self._schedule = schedule
        self.blocks = blocks

    @property
    def schedule(self) -> WeeklySchedule:
        return self._schedule()

    # --- Predicates ---

    def is_blocked(self, date: date_type, time: time_type) -> bool:
        return any(entry.covers(date, time) for entry in self.blocks)

    def is_within_business_hours(self, date: date_type, time: time_type) -> bool:
        day = self.schedule.days[weekday_of(date)]
        if not day.active:
            return False
        if not (day.open <= time < day.close):
            return False
        return not day.in_break(time)

    def is_bookable(self, date: date_type, time: time_type) -> bool:
        return self.is_within_business_hours(date, time) and not self.is_blocked(date, time)

    # --- Explained checks (tell the caller WHICH rule failed) ---

    def check(self, date: date_type, time: time_type) -> Optional[ConstraintViolation]:
        weekday = weekday_of(date)
        day = self.schedule.days[weekday]

        if not day.active:
            return ConstraintViolation(HOURS, f"The practice is closed on {weekday.value}", date, time)

        if not (day.open <= time < day.close):
            return ConstraintViolation(
                HOURS,
                f"{time:%H:%M} is outside working hours ({day.open:%H:%M}-{day.close:%H:%M})",
                date, time
            )

        for brk in day.breaks:
            if brk.contains(time):
                return ConstraintViolation(
                    BREAK, f"{time:%H:%M} falls in the {brk.start:%H:%M}-{brk.end:%H:%M} break", date, time
                )

        for entry in self.blocks.for_date(date):
            if entry.start <= time < entry.end:
                return ConstraintViolation(
                    BLOCK, f"Agenda blocked {entry.start:%H:%M}-{entry.end:%H:%M}: {entry.reason}", date, time
                )

        return None

    def check_span(self, date: date_type, start: time_type, duration_minutes: int) -> Optional[ConstraintViolation]:
        """
        Stricter check for resizes: the start must be bookable AND the whole
        [start, start + duration) must stay inside working hours, clear of
        breaks and blocks.
        """
        violation = self.check(date, start)
        if violation: return violation

        day = self.schedule.days[weekday_of(date)]
        begin = to_minutes(start)
        end = begin + duration_minutes

        if end > to_minutes(day.close):
            return ConstraintViolation(
                HOURS, f"Appointment would end after closing time ({day.close:%H:%M})", date, start
            )

        for brk in day.breaks:
            if begin < to_minutes(brk.end) and end > to_minutes(brk.start):
                return ConstraintViolation(
                    BREAK, f"Appointment would run into the {brk.start:%H:%M}-{brk.end:%H:%M} break", date, start
                )

        for entry in self.blocks.for_date(date):
            if begin < to_minutes(entry.end) and end > to_minutes(entry.start):
                return ConstraintViolation(
                    BLOCK, f"Appointment would run into a block: {entry.reason}", date, start
                )

        return None
