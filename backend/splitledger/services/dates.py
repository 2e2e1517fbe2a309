"""Calendar helpers shared by analytics windows, store queries and recurring rules."""
import calendar
from datetime import date
from typing import Optional

from splitledger.errors import InvalidQuery


def add_months(day: date, months: int) -> date:
    """Shift by whole months, clamping to the last day of shorter months."""
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    last_day = calendar.monthrange(year, month + 1)[1]
    return date(year, month + 1, min(day.day, last_day))


def check_range(start_date: Optional[date], end_date: Optional[date]) -> None:
    if start_date is not None and end_date is not None and end_date < start_date:
        raise InvalidQuery(f"end_date ({end_date}) must not be before start_date ({start_date})")


def in_range(day: date, start_date=None, end_date=None) -> bool:
    if start_date is not None and day < start_date:
        return False
    if end_date is not None and day > end_date:
        return False
    return True
