"""
Time-off block models for the Clinic Agenda.

A block removes a time range from the bookable agenda, either once
(a dentist appointment, a holiday afternoon) or on a recurring basis
(every Wednesday's staff meeting, the 1st of every month).
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_serializer, field_validator
from datetime import date as date_type, time

from .schedule import format_time_of_day, new_entry_id, to_time_of_day


class BlockKind(str, Enum):
    SINGLE = "single"
    RECURRING = "recurring"


class Recurrence(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class BlockEntry(BaseModel):
    """
    A declared unavailable range. Half-open: [start, end).

    For recurring blocks 'date' is the anchor: the block repeats from that date
    forward with no end date.
    """
    id: str = Field(default_factory=new_entry_id, description="Unique, stable identifier")
    date: date_type = Field(description="Literal date (single) or anchor date (recurring)")
    start: time = Field(description="Block start (inclusive)")
    end: time = Field(description="Block end (exclusive)")
    reason: str = Field(description="Why the agenda is blocked")
    kind: BlockKind = Field(default=BlockKind.SINGLE)
    recurrence: Optional[Recurrence] = Field(
        default=None,
        validate_default=True,
        description="Required iff kind == recurring"
    )

    # Field-level validators (rather than one model validator) so the error
    # location names the field the user has to fix.

    @field_validator('start', 'end', mode='before')
    @classmethod
    def parse_times(cls, v):
        return to_time_of_day(v)

    @field_validator('end')
    @classmethod
    def validate_end(cls, v, info):
        start = info.data.get('start')
        if start is not None and v <= start:
            raise ValueError("Block start must be before block end")
        return v

    @field_validator('reason')
    @classmethod
    def validate_reason(cls, v):
        if not v or not v.strip():
            raise ValueError("A reason is required for a block")
        return v.strip()

    @field_validator('recurrence')
    @classmethod
    def validate_recurrence(cls, v, info):
        kind = info.data.get('kind')
        if kind == BlockKind.RECURRING and v is None:
            raise ValueError("Recurring blocks need a recurrence (weekly or monthly)")
        if kind == BlockKind.SINGLE and v is not None:
            raise ValueError("Single blocks cannot carry a recurrence")
        return v

    @field_serializer('start', 'end', when_used='json')
    def serialize_times(self, t: time) -> str:
        return format_time_of_day(t)

    def matches(self, day: date_type) -> bool:
        """Does this block apply on the given calendar date?"""
        if self.kind == BlockKind.SINGLE:
            return day == self.date

        if day < self.date:
            return False

        if self.recurrence == Recurrence.WEEKLY:
            return day.weekday() == self.date.weekday()

        # Monthly: an anchor on the 31st simply never fires in shorter months.
        return day.day == self.date.day

    def covers(self, day: date_type, t: time) -> bool:
        return self.matches(day) and self.start <= t < self.end

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "id": "1738580000000-0",
            "date": "2025-02-03",
            "start": "14:00",
            "end": "15:00",
            "reason": "Staff meeting",
            "kind": "recurring",
            "recurrence": "weekly"
        }
    })
