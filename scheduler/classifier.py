"""
Patient Classifier.

Buckets patients for proactive outreach:
- Status (Flow / Active / Inactive / New) from days since the last visit.
- Urgency (Now / Late / Soon) from the same number against the visit
  frequency expected for the patient's location.

Everything here is pure and recomputed on every read.
"""

from collections import defaultdict
from datetime import date as date_type
from typing import Dict, Iterable, List, Optional

from models import (
    NEW_PATIENT_DAYS,
    Appointment,
    AppointmentStatus,
    BookingFilter,
    ClassifierConfig,
    LastVisit,
    Patient,
    PatientFilter,
    PatientStatus,
    PatientStatusView,
    Urgency,
)
from .calendar_math import days_between


def _is_new(days: Optional[int]) -> bool:
    return days is None or days >= NEW_PATIENT_DAYS


def classify_status(days_since_last_visit: Optional[int], config: ClassifierConfig) -> PatientStatus:
    if _is_new(days_since_last_visit):
        return PatientStatus.NEW
    if days_since_last_visit <= config.flow_max_days:
        return PatientStatus.FLOW
    if days_since_last_visit <= config.active_max_days:
        return PatientStatus.ACTIVE
    return PatientStatus.INACTIVE


def classify_urgency(days_since_last_visit: Optional[int], target_frequency_days: int, tolerance: int) -> Urgency:
    # New patients are contacted later, not urgently.
    if _is_new(days_since_last_visit):
        return Urgency.SOON

    days = days_since_last_visit
    if target_frequency_days - tolerance <= days <= target_frequency_days + tolerance:
        return Urgency.NOW
    if days > target_frequency_days + tolerance:
        return Urgency.LATE
    return Urgency.SOON


def is_booked(patient_id: int, appointments: Iterable[Appointment], today: date_type) -> bool:
    """Has the patient a non-cancelled appointment today or later?"""
    return any(
        a.patient_id == patient_id
        and a.status != AppointmentStatus.CANCELLED
        and a.date >= today
        for a in appointments
    )


def build_status_views(
    patients: Iterable[Patient],
    last_visits: Iterable[LastVisit],
    appointments: Iterable[Appointment],
    config: ClassifierConfig,
    today: Optional[date_type] = None
) -> List[PatientStatusView]:
    if today is None:
        today = date_type.today()

    appointments = list(appointments)
    latest: Dict[int, LastVisit] = {}
    for visit in last_visits:
        known = latest.get(visit.patient_id)
        if known is None or visit.date > known.date:
            latest[visit.patient_id] = visit

    views = []
    for patient in patients:
        visit = latest.get(patient.id)
        days = days_between(visit.date, today) if visit else None
        frequency = config.frequency_for(patient.location)

        views.append(PatientStatusView(
            patient=patient,
            status=classify_status(days, config),
            urgency=classify_urgency(days, frequency, config.now_window_days),
            days_since_last_visit=NEW_PATIENT_DAYS if days is None else days,
            is_booked=is_booked(patient.id, appointments, today),
            frequency_days=frequency,
            last_visit_date=visit.date if visit else None,
            last_visit_kind=visit.kind if visit else None
        ))
    return views


def filter_patients(views: Iterable[PatientStatusView], criteria: PatientFilter) -> List[PatientStatusView]:
    result = []
    for view in views:
        if criteria.statuses and view.status not in criteria.statuses: continue
        if criteria.urgencies and view.urgency not in criteria.urgencies: continue
        if criteria.locations and view.patient.location not in criteria.locations: continue
        if criteria.booking == BookingFilter.BOOKED and not view.is_booked: continue
        if criteria.booking == BookingFilter.NOT_BOOKED and view.is_booked: continue
        result.append(view)
    return result


def compute_metrics(views: Iterable[PatientStatusView]) -> Dict:
    """Counts for the outreach dashboard."""
    views = list(views)
    by_status = defaultdict(int)
    by_urgency = defaultdict(int)
    for view in views:
        by_status[view.status.value] += 1
        by_urgency[view.urgency.value] += 1

    booked = sum(1 for v in views if v.is_booked)
    return {
        "total_patients": len(views),
        "by_status": dict(by_status),
        "by_urgency": dict(by_urgency),
        "booked": booked,
        "not_booked": len(views) - booked,
    }
