"""
Calendar helpers for the dashboard and the predictor.

All functions take the reference day as an argument (defaulting to
today) so callers and tests control the clock.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Optional, Union

from placebi.models.analytics import TimeFilter


def as_day(value: Union[date, datetime]) -> date:
    """Drop the time-of-day part, if any."""
    if isinstance(value, datetime):
        return value.date()
    return value


def get_date_range(
    time_filter: Union[TimeFilter, str],
    today: Optional[date] = None,
) -> tuple[date, date]:
    """
    Inclusive (start, end) days for a dashboard filter.

    Weeks run Monday to Sunday. CUSTOM has no range of its own yet and
    falls back to today.
    """
    today = as_day(today or date.today())
    time_filter = TimeFilter(time_filter)

    if time_filter == TimeFilter.THIS_WEEK:
        monday = today - timedelta(days=today.weekday())
        return monday, monday + timedelta(days=6)
    if time_filter == TimeFilter.THIS_MONTH:
        return today.replace(day=1), today.replace(day=days_in_month(today))
    return today, today


def days_in_month(day: date) -> int:
    return calendar.monthrange(day.year, day.month)[1]


def days_remaining_in_week(day: date) -> int:
    """
    7 minus the Sunday-based weekday index (Sunday=0 ... Saturday=6).

    NOTE: Sunday yields 7, not 0. That is the established behaviour of
    the week prediction and is kept as-is.
    """
    sunday_based = (day.weekday() + 1) % 7
    return 7 - sunday_based


def days_remaining_in_month(day: date) -> int:
    """Days after `day` until month end (0 on the last day)."""
    return days_in_month(day) - day.day
