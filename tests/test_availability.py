"""Tests for the Availability Resolver (hours, breaks, blocks)."""

from datetime import date, time

import pytest

from models import Weekday
from scheduler.availability import AvailabilityResolver
from scheduler.constraints import BLOCK, BREAK, HOURS

from .conftest import MONDAY, SATURDAY


@pytest.fixture
def resolver(clinic_state) -> AvailabilityResolver:
    return AvailabilityResolver(lambda: clinic_state.schedule, clinic_state.blocks)


class TestIsBookable:
    """Each rule checked in isolation at its boundaries."""

    @pytest.mark.parametrize("t,expected", [
        (time(7, 59), False),   # before opening
        (time(8, 0), True),     # opening is inclusive
        (time(11, 59), True),
        (time(12, 0), False),   # break start is inclusive
        (time(12, 59), False),
        (time(13, 0), True),    # break end is exclusive
        (time(14, 0), False),   # block start is inclusive
        (time(14, 59), False),
        (time(15, 0), True),    # block end is exclusive
        (time(16, 59), True),
        (time(17, 0), False),   # closing is exclusive
    ])
    def test_monday_boundaries(self, resolver, t, expected) -> None:
        assert resolver.is_bookable(MONDAY, t) is expected

    def test_inactive_day(self, resolver) -> None:
        assert not resolver.is_within_business_hours(SATURDAY, time(9, 0))
        assert not resolver.is_bookable(SATURDAY, time(9, 0))

    def test_block_does_not_affect_business_hours(self, resolver) -> None:
        assert resolver.is_within_business_hours(MONDAY, time(14, 30))
        assert resolver.is_blocked(MONDAY, time(14, 30))

    def test_single_block_only_on_its_date(self, resolver) -> None:
        assert not resolver.is_blocked(date(2025, 2, 10), time(14, 30))
        assert resolver.is_bookable(date(2025, 2, 10), time(14, 30))

    def test_weekly_block_applies_to_later_weeks(self, clinic_state, resolver) -> None:
        clinic_state.blocks.add({
            "date": MONDAY, "start": "09:00", "end": "10:00",
            "reason": "Team sync", "kind": "recurring", "recurrence": "weekly",
        })
        assert resolver.is_blocked(date(2025, 2, 17), time(9, 30))
        assert not resolver.is_blocked(date(2025, 1, 27), time(9, 30))

    def test_sees_replaced_schedule(self, clinic_state, resolver) -> None:
        clinic_state.schedule.set_day_active(Weekday.MONDAY, False)
        assert not resolver.is_bookable(MONDAY, time(9, 0))


class TestCheck:
    """check() names the rule that failed."""

    @pytest.mark.parametrize("day,t,rule", [
        (SATURDAY, time(9, 0), HOURS),
        (MONDAY, time(7, 0), HOURS),
        (MONDAY, time(17, 0), HOURS),
        (MONDAY, time(12, 30), BREAK),
        (MONDAY, time(14, 15), BLOCK),
    ])
    def test_failing_rule(self, resolver, day, t, rule) -> None:
        violation = resolver.check(day, t)
        assert violation is not None
        assert violation.constraint_type == rule
        assert violation.date == day
        assert violation.start_time == t

    def test_bookable_time_has_no_violation(self, resolver) -> None:
        assert resolver.check(MONDAY, time(9, 0)) is None


class TestCheckSpan:
    """Whole-appointment checks used for resizes."""

    def test_fits(self, resolver) -> None:
        assert resolver.check_span(MONDAY, time(9, 0), 60) is None
        assert resolver.check_span(MONDAY, time(16, 0), 60) is None

    def test_runs_past_closing(self, resolver) -> None:
        assert resolver.check_span(MONDAY, time(16, 30), 60).constraint_type == HOURS

    def test_runs_into_break(self, resolver) -> None:
        assert resolver.check_span(MONDAY, time(11, 30), 60).constraint_type == BREAK

    def test_runs_into_block(self, resolver) -> None:
        assert resolver.check_span(MONDAY, time(13, 0), 90).constraint_type == BLOCK

    def test_ending_exactly_at_break_is_fine(self, resolver) -> None:
        assert resolver.check_span(MONDAY, time(11, 0), 60) is None
