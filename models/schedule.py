"""
Working-hours data models for the Clinic Agenda.

This module defines the declarative 'Business Hours' of the practice:
1. Weekday (closed Sun..Sat enum, no free-form day names)
2. BreakInterval (pauses inside a working day, e.g. lunch)
3. DaySchedule / WeeklySchedule (per-weekday open/close + breaks)
"""

import itertools
import time as time_module
from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict, field_serializer, field_validator, model_validator
from datetime import time


class Weekday(str, Enum):
    """Days of the week, Sunday first (calendar column order)."""
    SUNDAY = "sunday"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"


_id_counter = itertools.count()


def new_entry_id() -> str:
    """Time-derived token; the counter suffix keeps ids unique within one millisecond."""
    return f"{int(time_module.time() * 1000)}-{next(_id_counter)}"


def _minutes(t: time) -> int:
    return t.hour * 60 + t.minute


def to_time_of_day(value):
    """
    Coerce 'HH:MM' strings and times to a minute-resolution time.
    Seconds are dropped. Other values are returned untouched for pydantic to reject.
    """
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    if isinstance(value, str):
        hours, minutes = value.strip().split(":")[:2]
        return time(int(hours), int(minutes))
    return value


def format_time_of_day(t: time) -> str:
    return f"{t.hour:02d}:{t.minute:02d}"


class BreakInterval(BaseModel):
    """A pause inside a working day. Half-open: [start, end)."""
    id: str = Field(default_factory=new_entry_id, description="Stable identifier")
    start: time = Field(description="Break start (inclusive)")
    end: time = Field(description="Break end (exclusive)")

    @field_validator('start', 'end', mode='before')
    @classmethod
    def parse_times(cls, v):
        return to_time_of_day(v)

    @field_serializer('start', 'end', when_used='json')
    def serialize_times(self, t: time) -> str:
        return format_time_of_day(t)

    @model_validator(mode='after')
    def validate_times(self):
        if self.start >= self.end:
            raise ValueError("Break end must be strictly after break start")
        return self

    def contains(self, t: time) -> bool:
        return self.start <= t < self.end


class DaySchedule(BaseModel):
    """
    Opening hours for a single weekday.

    The consistency rules (open < close, breaks inside the day and not overlapping)
    are NOT enforced on construction; the configuration form builds these records
    field by field. Call validation_errors() before committing.
    """
    active: bool = Field(default=False, description="Does the practice open on this day?")
    open: time = Field(default=time(8, 0), description="Opening time (inclusive)")
    close: time = Field(default=time(17, 0), description="Closing time (exclusive)")
    breaks: List[BreakInterval] = Field(default_factory=list, description="Ordered pauses")

    @field_validator('open', 'close', mode='before')
    @classmethod
    def parse_times(cls, v):
        return to_time_of_day(v)

    @field_serializer('open', 'close', when_used='json')
    def serialize_times(self, t: time) -> str:
        return format_time_of_day(t)

    def in_break(self, t: time) -> bool:
        return any(b.contains(t) for b in self.breaks)

    def validation_errors(self) -> List[str]:
        """Human-readable list of invariant violations (empty when valid)."""
        if not self.active:
            return []

        errors = []
        if self.open >= self.close:
            errors.append("Opening time must be before closing time")

        for brk in self.breaks:
            if brk.start < self.open or brk.end > self.close:
                errors.append(
                    f"Break {brk.start:%H:%M}-{brk.end:%H:%M} is outside working hours"
                )

        ordered = sorted(self.breaks, key=lambda b: _minutes(b.start))
        for prev, nxt in zip(ordered, ordered[1:]):
            if nxt.start < prev.end:
                errors.append(
                    f"Breaks {prev.start:%H:%M}-{prev.end:%H:%M} and "
                    f"{nxt.start:%H:%M}-{nxt.end:%H:%M} overlap"
                )
        return errors


def _default_days() -> Dict[Weekday, DaySchedule]:
    days = {}
    for day in Weekday:
        if day in (Weekday.SATURDAY, Weekday.SUNDAY):
            days[day] = DaySchedule(active=False, open=time(8, 0), close=time(12, 0))
        else:
            days[day] = DaySchedule(active=True, open=time(8, 0), close=time(17, 0))
    return days


class WeeklySchedule(BaseModel):
    """
    The practice's week: default consultation length + one DaySchedule per weekday.

    All setters replace the whole DaySchedule record (copy-on-write), so a
    DaySchedule obtained from get_day() is never changed behind the caller's back.
    Setters do not validate; see DaySchedule.validation_errors().
    """
    consultation_minutes: int = Field(
        default=60,
        ge=5,
        le=480,
        description="Default slot length in minutes"
    )
    days: Dict[Weekday, DaySchedule] = Field(default_factory=_default_days)

    @model_validator(mode='after')
    def fill_missing_days(self):
        # Older payloads may omit days; every weekday must have an entry.
        defaults = _default_days()
        for day in Weekday:
            if day not in self.days:
                self.days[day] = defaults[day]
        return self

    def get_day(self, weekday: Weekday) -> DaySchedule:
        return self.days[weekday].model_copy(deep=True)

    def _replace_day(self, weekday: Weekday, **changes) -> DaySchedule:
        updated = self.days[weekday].model_copy(update=changes, deep=True)
        self.days[weekday] = updated
        return updated

    def set_day_active(self, weekday: Weekday, active: bool) -> DaySchedule:
        return self._replace_day(weekday, active=active)

    def set_day_hours(self, weekday: Weekday, open: time, close: time) -> DaySchedule:
        return self._replace_day(weekday, open=to_time_of_day(open), close=to_time_of_day(close))

    def add_break(self, weekday: Weekday, interval: Optional[BreakInterval] = None) -> BreakInterval:
        """Append a break (12:00-13:00 unless given)."""
        if interval is None:
            interval = BreakInterval(start=time(12, 0), end=time(13, 0))
        breaks = [b.model_copy() for b in self.days[weekday].breaks] + [interval]
        self._replace_day(weekday, breaks=breaks)
        return interval

    def remove_break(self, weekday: Weekday, break_id: str) -> None:
        breaks = [b.model_copy() for b in self.days[weekday].breaks if b.id != break_id]
        self._replace_day(weekday, breaks=breaks)

    def update_break(self, weekday: Weekday, break_id: str, field: str, value: time) -> None:
        """Change 'start' or 'end' of one break. Unknown ids are ignored."""
        if field not in ("start", "end"):
            raise ValueError(f"Unknown break field '{field}' (expected 'start' or 'end')")

        # model_copy(update=...) skips validation (and coercion), matching the
        # form's edit-one-field-at-a-time flow.
        value = to_time_of_day(value)
        breaks = [
            b.model_copy(update={field: value}) if b.id == break_id else b.model_copy()
            for b in self.days[weekday].breaks
        ]
        self._replace_day(weekday, breaks=breaks)

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "consultation_minutes": 60,
            "days": {
                "monday": {
                    "active": True,
                    "open": "08:00",
                    "close": "17:00",
                    "breaks": [{"id": "1738580000000-0", "start": "12:00", "end": "13:00"}]
                },
                "saturday": {"active": False, "open": "08:00", "close": "12:00", "breaks": []}
            }
        }
    })
