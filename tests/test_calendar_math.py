"""Tests for date/time arithmetic primitives."""

from datetime import date, time

import pytest

from models import Weekday
from scheduler.calendar_math import (
    add_minutes,
    days_between,
    format_time,
    from_minutes,
    parse_time,
    to_minutes,
    weekday_of,
)


class TestAddMinutes:
    """Tests for add_minutes wrapping."""

    def test_simple_addition(self) -> None:
        assert add_minutes(time(9, 0), 45) == time(9, 45)

    def test_accepts_hhmm_strings(self) -> None:
        assert add_minutes("08:30", 90) == time(10, 0)

    def test_wraps_past_midnight(self) -> None:
        assert add_minutes(time(23, 30), 60) == time(0, 30)

    def test_negative_offset_wraps_backwards(self) -> None:
        assert add_minutes(time(0, 15), -30) == time(23, 45)

    def test_multiple_days_collapse(self) -> None:
        assert add_minutes(time(9, 0), -2 * 1440) == time(9, 0)

    @pytest.mark.parametrize("start,offset", [
        (time(0, 0), 1),
        (time(12, 34), -755),
        (time(23, 59), 3000),
        (time(7, 5), -10_000),
    ])
    def test_inverse_offset_restores_time(self, start, offset) -> None:
        assert add_minutes(add_minutes(start, offset), -offset) == start


class TestConversions:
    """Tests for minute/time conversion helpers."""

    def test_to_and_from_minutes(self) -> None:
        assert to_minutes(time(13, 15)) == 795
        assert from_minutes(795) == time(13, 15)
        assert from_minutes(1440) == time(0, 0)

    def test_format_is_zero_padded(self) -> None:
        assert format_time(time(8, 5)) == "08:05"

    def test_parse_drops_seconds(self) -> None:
        assert parse_time(time(8, 5, 30)) == time(8, 5)
        assert parse_time(" 17:00 ") == time(17, 0)


class TestDaysBetween:
    """Tests for calendar day differences."""

    def test_same_day_is_zero(self) -> None:
        assert days_between(date(2025, 1, 27), date(2025, 1, 27)) == 0

    def test_is_symmetric(self) -> None:
        a, b = date(2024, 12, 20), date(2025, 1, 27)
        assert days_between(a, b) == days_between(b, a) == 38

    def test_dst_transition_counts_one_day(self) -> None:
        assert days_between(date(2025, 3, 9), date(2025, 3, 10)) == 1

    def test_defaults_to_today(self) -> None:
        assert days_between(date.today()) == 0


class TestWeekdayOf:
    """Tests for weekday lookup."""

    def test_known_dates(self) -> None:
        assert weekday_of(date(2025, 2, 2)) == Weekday.SUNDAY
        assert weekday_of(date(2025, 2, 3)) == Weekday.MONDAY
        assert weekday_of(date(2025, 2, 8)) == Weekday.SATURDAY
