"""Unit tests for UTC day and week boundaries"""

from datetime import datetime, timedelta, timezone
from velocity_limits.utils.date_utils import end_of_day, start_of_day, start_of_week, to_utc

UTC = timezone.utc


def test_start_and_end_of_day():
    moment = datetime(2000, 1, 5, 15, 42, 7, tzinfo=UTC)

    assert start_of_day(moment) == datetime(2000, 1, 5, tzinfo=UTC)
    assert end_of_day(moment) == datetime(2000, 1, 6, tzinfo=UTC)


def test_day_follows_utc_date_not_local_date():
    """01:00 at +03:00 is still the previous day in UTC"""
    moment = datetime(2000, 1, 5, 1, 0, tzinfo=timezone(timedelta(hours=3)))

    assert to_utc(moment) == datetime(2000, 1, 4, 22, 0, tzinfo=UTC)
    assert start_of_day(moment) == datetime(2000, 1, 4, tzinfo=UTC)


def test_start_of_week_on_monday_is_same_day():
    monday = datetime(2000, 1, 3, 18, 0, tzinfo=UTC)

    assert start_of_week(monday) == datetime(2000, 1, 3, tzinfo=UTC)


def test_start_of_week_on_sunday_is_previous_monday():
    sunday = datetime(2000, 1, 9, 23, 59, tzinfo=UTC)

    assert start_of_week(sunday) == datetime(2000, 1, 3, tzinfo=UTC)


def test_start_of_week_across_month_boundary():
    wednesday = datetime(2000, 3, 1, 10, 0, tzinfo=UTC)

    assert start_of_week(wednesday) == datetime(2000, 2, 28, tzinfo=UTC)
