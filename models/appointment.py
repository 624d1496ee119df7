"""
Appointment data models for the Clinic Agenda.

This module defines the 'Output' side of the agenda:
concrete bookings of a patient into a date/time.
"""

from typing import Optional
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict, field_serializer, field_validator
from datetime import date as date_type, time as time_type, datetime, timedelta

from .schedule import format_time_of_day, to_time_of_day


class AppointmentKind(str, Enum):
    """Type of consultation."""
    VISIT = "visit"
    FOLLOWUP = "followup"
    OTHER = "other"


class AppointmentStatus(str, Enum):
    """Current state of the booking."""
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    BLOCKED = "blocked"


# Follow-ups are shorter than full consultations
FOLLOWUP_MINUTES = 45
VISIT_MINUTES = 60


def default_duration(kind: AppointmentKind) -> int:
    """Duration the booking form assigns to each consultation type."""
    return FOLLOWUP_MINUTES if kind == AppointmentKind.FOLLOWUP else VISIT_MINUTES


class AppointmentData(BaseModel):
    """
    Everything about a booking except its identifier.
    This is what callers hand to AppointmentStore.add().
    """

    # --- Who ---
    patient_id: int = Field(description="ID of the patient")
    patient_name: str = Field(min_length=1, description="Denormalized patient name for display")

    # --- When ---
    date: date_type = Field(description="Calendar date")
    start_time: time_type = Field(description="Start time (minute resolution)")
    duration_minutes: int = Field(gt=0, description="Length of the appointment")

    # --- What / Where ---
    kind: AppointmentKind = Field(default=AppointmentKind.VISIT)
    status: AppointmentStatus = Field(default=AppointmentStatus.SCHEDULED)
    location: str = Field(description="Where the patient is seen (city, office, online)")
    notes: Optional[str] = Field(default=None)

    # --- Flags ---
    notify_patient: bool = Field(default=True, description="Send the patient a reminder")
    billable: bool = Field(default=True, description="Track in financial control")
    is_remote: Optional[bool] = Field(default=None, description="Video consultation")

    @field_validator('start_time', mode='before')
    @classmethod
    def parse_start_time(cls, v):
        return to_time_of_day(v)

    @field_serializer('start_time', when_used='json')
    def serialize_start_time(self, t: time_type) -> str:
        return format_time_of_day(t)

    @property
    def end_time(self) -> time_type:
        """start + duration, wrapping within the day."""
        total = (self.start_time.hour * 60 + self.start_time.minute + self.duration_minutes) % 1440
        return time_type(total // 60, total % 60)

    @property
    def start_at(self) -> datetime:
        return datetime.combine(self.date, self.start_time)

    @property
    def end_at(self) -> datetime:
        return self.start_at + timedelta(minutes=self.duration_minutes)


class Appointment(AppointmentData):
    """A stored booking. 'id' is assigned by the store and never reused while present."""
    id: int = Field(ge=1, description="Store-assigned identifier")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "id": 1,
            "patient_id": 1,
            "patient_name": "Maria Silva Santos",
            "date": "2025-01-27",
            "start_time": "09:00",
            "duration_minutes": 60,
            "kind": "visit",
            "status": "confirmed",
            "location": "Santa Rita",
            "notes": "First consultation",
            "notify_patient": True,
            "billable": True
        }
    })
