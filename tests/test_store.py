"""Tests for the in-memory appointment store."""

from datetime import date, time

import pytest
from pydantic import ValidationError

from models import AppointmentStatus, default_duration, AppointmentKind
from scheduler.constraints import ValidationFailure
from scheduler.store import AppointmentStore

from .conftest import MONDAY, make_appointment_data


@pytest.fixture
def store() -> AppointmentStore:
    return AppointmentStore()


class TestAdd:
    """Tests for id assignment."""

    def test_sequential_ids_from_empty(self, store) -> None:
        first = store.add(make_appointment_data(time(9, 0)))
        second = store.add(make_appointment_data(time(10, 0)))
        assert (first.id, second.id) == (1, 2)

    def test_id_is_max_plus_one(self, store) -> None:
        for hour in (9, 10, 11):
            store.add(make_appointment_data(time(hour, 0)))
        store.remove(2)
        assert store.add(make_appointment_data(time(14, 0))).id == 4

    def test_supplied_id_is_ignored(self, store) -> None:
        data = make_appointment_data(time(9, 0)).model_dump()
        data["id"] = 99
        assert store.add(data).id == 1

    def test_add_does_not_check_overlaps(self, store) -> None:
        store.add(make_appointment_data(time(9, 0)))
        store.add(make_appointment_data(time(9, 0)))
        assert len(store) == 2

    def test_add_then_by_date(self, store) -> None:
        appt = store.add(make_appointment_data(time(9, 0)))
        assert store.by_date(MONDAY) == [appt]

    def test_rejects_non_positive_duration(self) -> None:
        with pytest.raises(ValidationError):
            make_appointment_data(time(9, 0), duration=0)

    def test_end_time_derived(self, store) -> None:
        appt = store.add(make_appointment_data(time(9, 15), duration=45))
        assert appt.end_time == time(10, 0)


class TestMutations:
    """Status transitions, replace and remove."""

    def test_update_status(self, store) -> None:
        appt = store.add(make_appointment_data(time(9, 0)))
        store.update_status(appt.id, AppointmentStatus.CONFIRMED)
        assert store.get(appt.id).status == AppointmentStatus.CONFIRMED
        assert store.get(appt.id).start_time == time(9, 0)

    def test_any_transition_is_allowed(self, store) -> None:
        appt = store.add(make_appointment_data(time(9, 0)))
        store.update_status(appt.id, AppointmentStatus.CANCELLED)
        store.update_status(appt.id, "confirmed")
        assert store.get(appt.id).status == AppointmentStatus.CONFIRMED

    def test_update_status_unknown_id_is_noop(self, store) -> None:
        store.add(make_appointment_data(time(9, 0)))
        before = store.all()
        store.update_status(42, AppointmentStatus.CANCELLED)
        assert store.all() == before

    def test_replace(self, store) -> None:
        appt = store.add(make_appointment_data(time(9, 0)))
        moved = appt.model_copy(update={"start_time": time(15, 0), "notes": "moved"})
        store.replace(moved)
        assert store.get(appt.id) == moved
        assert len(store) == 1

    def test_replace_unknown_is_noop(self, store) -> None:
        appt = store.add(make_appointment_data(time(9, 0)))
        store.replace(appt.model_copy(update={"id": 7}))
        assert [a.id for a in store.all()] == [1]

    def test_remove(self, store) -> None:
        appt = store.add(make_appointment_data(time(9, 0)))
        store.remove(99)
        assert len(store) == 1
        store.remove(appt.id)
        assert store.get(appt.id) is None


class TestQueries:
    """Tests for by_date and day statistics."""

    def test_by_date_keeps_insertion_order(self, store) -> None:
        late = store.add(make_appointment_data(time(15, 0)))
        other_day = store.add(make_appointment_data(time(8, 0), day=date(2025, 2, 4)))
        early = store.add(make_appointment_data(time(9, 0)))
        assert store.by_date(MONDAY) == [late, early]
        assert store.by_date(date(2025, 2, 4)) == [other_day]

    def test_day_statistics(self, store) -> None:
        store.add(make_appointment_data(time(9, 0), status=AppointmentStatus.CONFIRMED))
        store.add(make_appointment_data(time(10, 0)))
        store.add(make_appointment_data(time(9, 0), day=date(2025, 2, 4), status=AppointmentStatus.CONFIRMED))
        assert store.day_statistics(MONDAY) == {"total": 2, "confirmed": 1}

    def test_default_duration_by_kind(self) -> None:
        assert default_duration(AppointmentKind.FOLLOWUP) == 45
        assert default_duration(AppointmentKind.VISIT) == 60
        assert default_duration(AppointmentKind.OTHER) == 60


class TestInputCoercion:
    """Dict input errors and time resolution."""

    def test_invalid_dict_names_the_field(self, store) -> None:
        data = make_appointment_data(time(9, 0)).model_dump()
        data["duration_minutes"] = 0
        with pytest.raises(ValidationFailure) as exc:
            store.add(data)
        assert exc.value.field == "duration_minutes"
        assert len(store) == 0

    def test_json_start_time_is_hours_and_minutes(self, store) -> None:
        appt = store.add(make_appointment_data(time(9, 15, 30)))
        assert appt.start_time == time(9, 15)
        assert appt.model_dump(mode='json')["start_time"] == "09:15"
