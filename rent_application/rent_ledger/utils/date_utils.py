"""
Date utilities for rent ledger calculations
Calendar-date helpers (no time of day, no timezone)
"""

import calendar
from datetime import date, datetime, timedelta
from dateutil.relativedelta import relativedelta
from typing import List, Optional, Union


def eomonth(d: date, months: int = 0) -> date:
    """
    Calculate end of month - same as Excel EOMONTH()
    Args:
        d: Starting date
        months: Number of months to add/subtract
    Returns:
        Last day of the month, adjusted by months
    """
    target_month = d + relativedelta(months=months)
    return date(target_month.year, target_month.month, days_in_month(target_month))


def start_of_month(d: date) -> date:
    """First day of the month containing d"""
    return d.replace(day=1)


def add_months(d: date, months: int) -> date:
    """
    Add months to a date - similar to EDATE in Excel
    Day of month is clamped to the end of shorter months (Jan 31 + 1 month = Feb 28/29)
    """
    return d + relativedelta(months=months)


def days_in_month(d: date) -> int:
    return calendar.monthrange(d.year, d.month)[1]


def is_month_end(d: date) -> bool:
    return d.day == days_in_month(d)


def same_month(a: date, b: date) -> bool:
    return (a.year, a.month) == (b.year, b.month)


def inclusive_days(start_date: date, end_date: date) -> int:
    """
    Count calendar days from start_date to end_date, both included
    Returns 0 when end_date is before start_date
    """
    if end_date < start_date:
        return 0
    return (end_date - start_date).days + 1


def overlap_days(start_a: date, end_a: date, start_b: date, end_b: date) -> int:
    """Number of days shared by two inclusive date ranges"""
    return inclusive_days(max(start_a, start_b), min(end_a, end_b))


def month_label(d: date) -> str:
    """Billing description for the month of d, e.g. '2023-07월분'"""
    return f"{d.strftime('%Y-%m')}월분"


def iter_month_starts(start_date: date, end_date: date):
    """
    Yield the first day of every calendar month from start_date's month
    through end_date's month, inclusive
    """
    current = start_of_month(start_date)
    last = start_of_month(end_date)
    while current <= last:
        yield current
        if current == last:
            break
        current = add_months(current, 1)


def parse_date(value: Union[str, date, None]) -> Optional[date]:
    """
    Parse a calendar date

    Accepts a date object or an ISO 'YYYY-MM-DD' string. None and empty
    strings give None. datetime values are rejected: the ledger works on
    calendar days and an instant has no unambiguous day.

    Raises:
        ValueError: if the value is not a calendar date
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        raise ValueError(f"expected a calendar date, got a datetime: {value!r}")
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return datetime.strptime(value.strip(), '%Y-%m-%d').date()
    raise ValueError(f"expected a 'YYYY-MM-DD' date string, got {type(value).__name__}: {value!r}")


def calculate_payment_dates(
    start_date: date,
    end_date: date,
    day_of_month: int,
) -> List[date]:
    """
    Generate monthly recurring payment dates

    Args:
        start_date: First date of the range
        end_date: Last date of the range (inclusive)
        day_of_month: Day of month for payments (1-31)
    Returns:
        Sorted list of payment dates inside [start_date, end_date]
    """
    if not 1 <= day_of_month <= 31:
        raise ValueError(f"day_of_month must be between 1 and 31, got {day_of_month}")

    dates = []
    for month_start in iter_month_starts(start_date, end_date):
        try:
            payment_date = date(month_start.year, month_start.month, day_of_month)
        except ValueError:
            # Invalid day (e.g., Feb 30), use last day
            payment_date = eomonth(month_start)

        if start_date <= payment_date <= end_date:
            dates.append(payment_date)

    return dates


def previous_day(d: date) -> date:
    return d - timedelta(days=1)
