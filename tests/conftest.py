"""Shared test fixtures for the clinic agenda tests."""

from datetime import date, time

import pytest

from models import AppointmentData, AppointmentKind, AppointmentStatus, Weekday
from scheduler.engine import Agenda
from scheduler.state import AgendaState
from scheduler.storage import MemoryStorage

MONDAY = date(2025, 2, 3)
SATURDAY = date(2025, 2, 1)


def make_appointment_data(
    start: time,
    duration: int = 60,
    day: date = MONDAY,
    patient_id: int = 1,
    status: AppointmentStatus = AppointmentStatus.SCHEDULED,
) -> AppointmentData:
    return AppointmentData(
        patient_id=patient_id,
        patient_name=f"Patient {patient_id}",
        date=day,
        start_time=start,
        duration_minutes=duration,
        kind=AppointmentKind.VISIT,
        status=status,
        location="Office",
    )


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def state(storage) -> AgendaState:
    """Default week (Mon-Fri 08:00-17:00) with no breaks or blocks."""
    state = AgendaState(storage)
    state.load()
    return state


@pytest.fixture
def clinic_state(state) -> AgendaState:
    """Monday lunch break 12:00-13:00 and a single block on 2025-02-03 14:00-15:00."""
    state.schedule.add_break(Weekday.MONDAY)
    state.blocks.add({
        "date": MONDAY,
        "start": time(14, 0),
        "end": time(15, 0),
        "reason": "Lab results review",
        "kind": "single",
    })
    return state


@pytest.fixture
def agenda(clinic_state) -> Agenda:
    return Agenda(clinic_state)
