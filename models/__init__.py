"""
Data models package for the Clinic Agenda.

This package exports the core pillars of the data architecture:
1. Supply (WeeklySchedule, BlockEntry) - when the practice can see patients
2. Bookings (Appointment) - who is seen when
3. Outreach (Patient, ClassifierConfig, PatientStatusView) - who should be contacted
"""

from .schedule import (
    Weekday,
    BreakInterval,
    DaySchedule,
    WeeklySchedule,
    new_entry_id
)

from .block import (
    BlockEntry,
    BlockKind,
    Recurrence
)

from .appointment import (
    Appointment,
    AppointmentData,
    AppointmentKind,
    AppointmentStatus,
    default_duration
)

from .patient import (
    NEW_PATIENT_DAYS,
    BookingFilter,
    ClassifierConfig,
    LastVisit,
    Patient,
    PatientFilter,
    PatientStatus,
    PatientStatusView,
    Urgency
)

__all__ = [
    # --- Working Hours ---
    "Weekday",
    "BreakInterval",
    "DaySchedule",
    "WeeklySchedule",
    "new_entry_id",

    # --- Blocks ---
    "BlockEntry",
    "BlockKind",
    "Recurrence",

    # --- Bookings ---
    "Appointment",
    "AppointmentData",
    "AppointmentKind",
    "AppointmentStatus",
    "default_duration",

    # --- Outreach ---
    "NEW_PATIENT_DAYS",
    "BookingFilter",
    "ClassifierConfig",
    "LastVisit",
    "Patient",
    "PatientFilter",
    "PatientStatus",
    "PatientStatusView",
    "Urgency",
]
