"""
Main Execution Script for the Clinic Agenda.
Loads (or generates) demo data, books it through the validating engine,
prints the day views and the outreach list, and exports a dashboard JSON.
"""

import os
import sys
import logging
from datetime import date, time, timedelta
import json

# Add current directory to path so imports work
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from generators.data_factory import DataGenerator
from generators.sample_data import (
    sample_appointments,
    sample_classifier_config,
    sample_last_visits,
    sample_patients,
)
from models import AppointmentData, LastVisit, Patient, Weekday
from scheduler.calendar_math import format_time
from scheduler.classifier import build_status_views, compute_metrics
from scheduler.constraints import BookingRejected
from scheduler.engine import Agenda, CreateIntent
from scheduler.state import AgendaState
from scheduler.storage import SCHEDULE_KEY, JsonFileStorage

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger("Main")

# --- CONFIGURATION ---
STORAGE_DIR = os.environ.get("AGENDA_STORAGE_DIR", ".agenda")
CACHE_FILENAME = "demo_data.json"
USE_CACHE = True  # Set to False to force new AI generation
API_KEY = os.environ.get("GOOGLE_API_KEY")
# ---------------------


def save_demo_data(data: dict, filename: str):
    """Helper to save generated data so we don't re-query the LLM every time."""
    serializable = {key: [item.model_dump(mode='json') for item in val] for key, val in data.items()}
    with open(filename, 'w') as f:
        json.dump(serializable, f, indent=2)
    logger.info(f"💾 Saved demo data to {filename}")


def load_cached_data(filename: str):
    """Load JSON data and reconstruct pydantic objects. Returns None if unusable."""
    try:
        with open(filename, 'r') as f:
            data = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError):
        logger.warning(f"⚠️ Cache file {filename} not found or invalid.")
        return None

    try:
        return {
            "patients": [Patient(**item) for item in data.get('patients', [])],
            "last_visits": [LastVisit(**item) for item in data.get('last_visits', [])],
            "appointments": [AppointmentData(**item) for item in data.get('appointments', [])],
        }
    except (TypeError, ValueError) as e:
        logger.error(f"❌ Failed to load cache: {e}")
        return None


def acquire_data(start_date: date) -> dict:
    """Cache -> Gemini -> built-in sample set."""
    if USE_CACHE:
        cached = load_cached_data(CACHE_FILENAME)
        if cached and cached["patients"]:
            return cached

    if API_KEY:
        generator = DataGenerator(api_key=API_KEY)
        patients, _ = generator.generate_patients(count=15)
        last_visits, _ = generator.generate_last_visits(patients, today=start_date)
        appointments, _ = generator.generate_appointments(patients, start_date=start_date, count=10)
        logger.info(f"💸 Total Estimated LLM Cost: ${generator.total_cost:.4f}")

        if patients:
            data = {"patients": patients, "last_visits": last_visits, "appointments": appointments}
            save_demo_data(data, CACHE_FILENAME)
            return data

    logger.info("Using built-in sample data set")
    return {
        "patients": sample_patients(),
        "last_visits": sample_last_visits(),
        "appointments": sample_appointments(),
    }


def export_dashboard_data(agenda: Agenda, views, metrics, days, filename="dashboard_data.json"):
    """Serializes the agenda into a JSON format for the frontend."""
    data = {
        "config": agenda.state.to_dict(),
        "schedule": {},
        "slots": {},
        "outreach": [v.model_dump(mode='json') for v in views],
        "metrics": metrics,
    }
    for day in days:
        key = day.isoformat()
        data["schedule"][key] = [a.model_dump(mode='json') for a in agenda.appointments_for(day)]
        data["slots"][key] = [format_time(t) for t in agenda.available_slots(day)]

    with open(filename, 'w') as f:
        json.dump(data, f, indent=2)
    logger.info(f"✅ Dashboard data exported to {filename}")


def prepare_agenda(storage) -> Agenda:
    """
    Load the stored configuration. A first run (no schedule record yet) gets a
    12:00-13:00 lunch break on weekdays; an existing configuration is left as is.
    """
    first_run = storage.get(SCHEDULE_KEY) is None
    state = AgendaState(storage)
    state.load()
    agenda = Agenda(state)

    if first_run:
        for weekday in (Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY, Weekday.FRIDAY):
            agenda.add_break(weekday, time(12, 0), time(13, 0))
    return agenda


def main():
    agenda = prepare_agenda(JsonFileStorage(STORAGE_DIR))

    # --- PHASE 1: DATA ACQUISITION ---
    data = acquire_data(date.today())
    first_day = min((a.date for a in data["appointments"]), default=date.today())

    # --- PHASE 2: BOOKING (validate, then commit) ---
    rejected = 0
    for appt in data["appointments"]:
        decision = agenda.validate(CreateIntent(appt))
        if not decision.accepted:
            rejected += 1
            logger.warning(f"❌ {appt.patient_name} {appt.date} {format_time(appt.start_time)}: {decision.reason}")
            continue
        try:
            agenda.commit(CreateIntent(appt))
        except BookingRejected as e:
            logger.warning(f"❌ Rejected at commit: {e}")

    logger.info(f"📋 Booked {len(agenda.store)} appointments ({rejected} rejected)")

    # --- PHASE 3: REPORTING ---
    days = [first_day + timedelta(days=i) for i in range(7)]
    print("\n" + "=" * 50)
    print("📅 AGENDA")
    print("=" * 50)
    for day in days:
        booked = agenda.appointments_for(day)
        slots = agenda.available_slots(day)
        print(f"{day} ({day:%A}): {len(booked)} booked, free slots: {', '.join(format_time(t) for t in slots) or '-'}")
        for appt in booked:
            print(f"   {format_time(appt.start_time)}-{format_time(appt.end_time)} {appt.patient_name} [{appt.status.value}]")

    config = sample_classifier_config()
    views = build_status_views(data["patients"], data["last_visits"], agenda.store.all(), config, today=first_day)
    metrics = compute_metrics(views)

    print("\n🔍 OUTREACH")
    for view in sorted(views, key=lambda v: v.days_since_last_visit, reverse=True):
        print(f"   {view.patient.name:<28} {view.status.value:<9} {view.urgency.value:<5} {view.days_since_last_visit:>4}d")
    print(metrics)

    # --- PHASE 4: EXPORT FOR FRONTEND ---
    export_dashboard_data(agenda, views, metrics, days)


if __name__ == "__main__":
    main()
