"""Date manipulation utilities"""

from datetime import datetime, time, timedelta, timezone


def to_utc(moment: datetime) -> datetime:
    """Convert an offset-aware datetime to UTC"""
    return moment.astimezone(timezone.utc)


def start_of_day(moment: datetime) -> datetime:
    """Midnight UTC of the moment's UTC calendar date"""
    return datetime.combine(to_utc(moment).date(), time.min, tzinfo=timezone.utc)


def end_of_day(moment: datetime) -> datetime:
    """Exclusive end of the moment's UTC day"""
    return start_of_day(moment) + timedelta(days=1)


def start_of_week(moment: datetime) -> datetime:
    """Midnight UTC of the Monday on or before the moment's UTC date"""
    day_start = start_of_day(moment)
    return day_start - timedelta(days=day_start.weekday())
