"""Tests for the calendar helpers."""

from datetime import date, datetime

import pytest

from placebi.analytics.periods import (
    as_day,
    days_in_month,
    days_remaining_in_month,
    days_remaining_in_week,
    get_date_range,
)
from placebi.models.analytics import TimeFilter


WEDNESDAY = date(2024, 12, 18)


class TestGetDateRange:
    def test_today(self):
        assert get_date_range(TimeFilter.TODAY, today=WEDNESDAY) == (WEDNESDAY, WEDNESDAY)

    def test_this_week_runs_monday_to_sunday(self):
        start, end = get_date_range(TimeFilter.THIS_WEEK, today=WEDNESDAY)
        assert start == date(2024, 12, 16)
        assert end == date(2024, 12, 22)
        assert start.weekday() == 0

    def test_this_week_on_sunday(self):
        start, end = get_date_range("this_week", today=date(2024, 12, 22))
        assert (start, end) == (date(2024, 12, 16), date(2024, 12, 22))

    def test_this_month(self):
        assert get_date_range(TimeFilter.THIS_MONTH, today=WEDNESDAY) == (
            date(2024, 12, 1),
            date(2024, 12, 31),
        )

    def test_this_month_leap_february(self):
        _, end = get_date_range(TimeFilter.THIS_MONTH, today=date(2024, 2, 10))
        assert end == date(2024, 2, 29)

    def test_custom_falls_back_to_today(self):
        assert get_date_range(TimeFilter.CUSTOM, today=WEDNESDAY) == (WEDNESDAY, WEDNESDAY)

    def test_unknown_filter(self):
        with pytest.raises(ValueError):
            get_date_range("last_year", today=WEDNESDAY)


class TestRemainingDays:
    @pytest.mark.parametrize(
        "day, expected",
        [
            (date(2024, 12, 15), 7),  # Sunday
            (date(2024, 12, 16), 6),  # Monday
            (date(2024, 12, 18), 4),  # Wednesday
            (date(2024, 12, 21), 1),  # Saturday
        ],
    )
    def test_days_remaining_in_week(self, day, expected):
        assert days_remaining_in_week(day) == expected

    def test_days_remaining_in_month(self):
        assert days_remaining_in_month(WEDNESDAY) == 13
        assert days_remaining_in_month(date(2024, 12, 31)) == 0
        assert days_remaining_in_month(date(2023, 2, 1)) == 27

    def test_days_in_month(self):
        assert days_in_month(date(2023, 2, 1)) == 28
        assert days_in_month(date(2024, 4, 30)) == 30


def test_as_day_drops_time():
    assert as_day(datetime(2024, 12, 18, 23, 59)) == WEDNESDAY
    assert as_day(WEDNESDAY) is WEDNESDAY
