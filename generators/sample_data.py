"""
Built-in demo data set for the Clinic Agenda.
Used when no cache exists and no GOOGLE_API_KEY is configured.
"""

from datetime import date, time
from typing import Dict, List

from models import (
    AppointmentData,
    AppointmentKind,
    AppointmentStatus,
    ClassifierConfig,
    LastVisit,
    Patient,
)

LOCATIONS = ["Santa Rita", "Luiz Antonio", "Cornelio", "Londrina", "Online", "Office", "Home visit"]

_NAMES = [
    "Maria Silva Santos", "Joao Pedro Oliveira", "Ana Carolina Ferreira",
    "Carlos Eduardo Moreira", "Juliana Costa Lima", "Roberto Alves Souza",
    "Fernanda Rodrigues", "Lucas Martins Silva", "Patricia Santos Nunes",
    "Anderson Lima Costa", "Carla Beatriz Araujo", "Diego Fernando Alves",
]


def sample_patients() -> List[Patient]:
    return [
        Patient(
            id=i + 1,
            name=name,
            phone=f"55169876543{i + 21:02d}",
            location=LOCATIONS[i % len(LOCATIONS)],
            barter=(i % 4 == 2)
        )
        for i, name in enumerate(_NAMES)
    ]


def sample_last_visits() -> List[LastVisit]:
    # Patients 11 and 12 have never been seen (New).
    visits = [
        (1, date(2025, 1, 15), "visit"),
        (2, date(2024, 12, 20), "followup"),
        (3, date(2025, 1, 20), "visit"),
        (4, date(2024, 11, 1), "visit"),
        (5, date(2024, 10, 15), "followup"),
        (6, date(2025, 1, 22), "visit"),
        (7, date(2024, 9, 10), "visit"),
        (8, date(2025, 1, 10), "followup"),
        (9, date(2024, 12, 1), "visit"),
        (10, date(2025, 1, 18), "followup"),
    ]
    return [LastVisit(patient_id=p, date=d, kind=k) for p, d, k in visits]


def sample_appointments() -> List[AppointmentData]:
    rows = [
        (1, date(2025, 1, 27), time(9, 0), AppointmentKind.VISIT, 60, AppointmentStatus.CONFIRMED),
        (3, date(2025, 1, 27), time(14, 0), AppointmentKind.FOLLOWUP, 45, AppointmentStatus.SCHEDULED),
        (6, date(2025, 1, 28), time(10, 30), AppointmentKind.VISIT, 60, AppointmentStatus.CONFIRMED),
        (8, date(2025, 1, 29), time(16, 0), AppointmentKind.FOLLOWUP, 45, AppointmentStatus.SCHEDULED),
        (12, date(2025, 1, 30), time(9, 30), AppointmentKind.VISIT, 60, AppointmentStatus.CONFIRMED),
    ]
    patients = {p.id: p for p in sample_patients()}
    return [
        AppointmentData(
            patient_id=pid,
            patient_name=patients[pid].name,
            date=d,
            start_time=t,
            duration_minutes=duration,
            kind=kind,
            status=status,
            location=patients[pid].location,
            is_remote=patients[pid].location == "Online"
        )
        for pid, d, t, kind, duration, status in rows
    ]


def sample_classifier_config() -> ClassifierConfig:
    frequency: Dict[str, int] = {loc: 15 for loc in LOCATIONS}
    return ClassifierConfig(flow_max_days=30, active_max_days=90, frequency_by_location=frequency)
