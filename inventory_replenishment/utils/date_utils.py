# inventory_replenishment/utils/date_utils.py
import math
from datetime import date, datetime, timedelta
from typing import List, Union

DateLike = Union[date, datetime]

def js_day_of_week(value: DateLike) -> int:
    """Get the day of week with Sunday as 0 and Saturday as 6.

    Python's weekday() puts Monday at 0; the seasonal profile is keyed
    Sunday first.

    Args:
        value: Date or datetime

    Returns:
        Day of week number (0-6)
    """
    return (value.weekday() + 1) % 7

def add_days(value: DateLike, days: int) -> DateLike:
    """Add a number of days to a date or datetime.

    Args:
        value: Starting date or datetime
        days: Number of days to add (may be negative)

    Returns:
        New date or datetime
    """
    return value + timedelta(days=days)

def forecast_dates(start: DateLike, days: int) -> List[DateLike]:
    """Get consecutive calendar days starting at start.

    Args:
        start: First date of the horizon
        days: Number of days

    Returns:
        List of dates, start first
    """
    return [add_days(start, i) for i in range(days)]

def days_between(first: DateLike, second: DateLike) -> int:
    """Get the absolute number of days between two dates, rounded to whole days.

    Args:
        first: First date or datetime
        second: Second date or datetime

    Returns:
        Number of days
    """
    if isinstance(first, datetime) != isinstance(second, datetime):
        first = convert_to_datetime(first)
        second = convert_to_datetime(second)

    diff_days = abs((second - first).total_seconds()) / 86400.0
    return int(math.floor(diff_days + 0.5))

def convert_to_datetime(value: DateLike) -> datetime:
    """Convert a date to a datetime at midnight; datetimes pass through.

    Args:
        value: Date or datetime

    Returns:
        Datetime
    """
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)

def start_of_day(value: DateLike) -> datetime:
    """Get midnight of the calendar day a date or datetime falls on."""
    return datetime(value.year, value.month, value.day)
