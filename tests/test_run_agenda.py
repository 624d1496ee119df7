"""Tests for the entry script's configuration bootstrap."""

from datetime import time

from models import Weekday
from run_agenda import prepare_agenda
from scheduler.state import AgendaState
from scheduler.storage import SCHEDULE_KEY, MemoryStorage


class TestPrepareAgenda:
    """Default lunch breaks only on a first run."""

    def test_first_run_gets_weekday_lunch_break(self) -> None:
        storage = MemoryStorage()
        agenda = prepare_agenda(storage)
        for weekday in (Weekday.MONDAY, Weekday.FRIDAY):
            breaks = agenda.state.schedule.days[weekday].breaks
            assert [(b.start, b.end) for b in breaks] == [(time(12, 0), time(13, 0))]
        assert agenda.state.schedule.days[Weekday.SATURDAY].breaks == []
        assert storage.get(SCHEDULE_KEY) is not None

    def test_stored_schedule_without_breaks_is_kept(self) -> None:
        storage = MemoryStorage()
        saved = AgendaState(storage)
        saved.schedule.consultation_minutes = 30
        saved.save()

        agenda = prepare_agenda(storage)
        assert agenda.state.schedule.consultation_minutes == 30
        assert all(not day.breaks for day in agenda.state.schedule.days.values())

    def test_second_run_does_not_add_another_break(self) -> None:
        storage = MemoryStorage()
        prepare_agenda(storage)
        agenda = prepare_agenda(storage)
        assert len(agenda.state.schedule.days[Weekday.MONDAY].breaks) == 1
