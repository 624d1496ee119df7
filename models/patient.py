"""
Patient and outreach-classification models for the Clinic Agenda.

Status views are derived on every query from a Patient, its last visit
and the ClassifierConfig; they are never persisted.
"""

from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, model_validator
from datetime import date as date_type


# Days value used for patients without any previous visit
NEW_PATIENT_DAYS = 999


class PatientStatus(str, Enum):
    """Engagement bucket, by how recently the patient was seen."""
    FLOW = "Flow"
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    NEW = "New"


class Urgency(str, Enum):
    """Outreach priority relative to the location's visit frequency."""
    NOW = "Now"
    LATE = "Late"
    SOON = "Soon"


class BookingFilter(str, Enum):
    ALL = "all"
    BOOKED = "booked"
    NOT_BOOKED = "not_booked"


class Patient(BaseModel):
    id: int
    name: str = Field(min_length=1)
    phone: str = Field(default="")
    location: str = Field(description="Where the patient is usually seen")
    barter: bool = Field(default=False, description="Service exchange instead of payment")


class LastVisit(BaseModel):
    """Most recent completed consultation of a patient."""
    patient_id: int
    date: date_type
    kind: str = Field(default="visit")


class ClassifierConfig(BaseModel):
    """Thresholds driving the status/urgency buckets."""
    flow_max_days: int = Field(default=30, ge=0, description="Up to this many days: Flow")
    active_max_days: int = Field(default=90, ge=0, description="Up to this many days: Active")

    frequency_by_location: Dict[str, int] = Field(
        default_factory=dict,
        description="Target days between visits, per location"
    )
    default_frequency_days: int = Field(default=15, ge=1)
    now_window_days: int = Field(
        default=5,
        ge=0,
        description="Tolerance around the target frequency that counts as 'Now'"
    )

    @model_validator(mode='after')
    def validate_thresholds(self):
        if self.active_max_days < self.flow_max_days:
            raise ValueError("active_max_days cannot be smaller than flow_max_days")
        return self

    def frequency_for(self, location: str) -> int:
        return self.frequency_by_location.get(location) or self.default_frequency_days


class PatientStatusView(BaseModel):
    """Derived, read-only classification of one patient."""
    patient: Patient
    status: PatientStatus
    urgency: Urgency
    days_since_last_visit: int = Field(description=f"{NEW_PATIENT_DAYS} for new patients")
    is_booked: bool
    frequency_days: int
    last_visit_date: Optional[date_type] = None
    last_visit_kind: Optional[str] = None


class PatientFilter(BaseModel):
    """Selection criteria for the outreach list. Empty lists mean 'no restriction'."""
    statuses: List[PatientStatus] = Field(default_factory=list)
    urgencies: List[Urgency] = Field(default_factory=list)
    locations: List[str] = Field(default_factory=list)
    booking: BookingFilter = Field(default=BookingFilter.ALL)
