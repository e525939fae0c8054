# finstat/domain/time/fiscal_calendar.py

from __future__ import annotations

import calendar
from datetime import date, datetime


def require_plain_date(value: date, name: str = "date") -> None:
    """
    Enforce a calendar date without time.

    Reporting periods are defined at day granularity; a datetime would make
    two otherwise identical periods compare unequal.
    """
    if isinstance(value, datetime):
        raise TypeError(f"{name} must be a date without time")
    if not isinstance(value, date):
        raise TypeError(f"{name} must be a date instance")


def month_end(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def quarter_of(d: date) -> int:
    return (d.month - 1) // 3 + 1


def quarter_start(year: int, quarter: int) -> date:
    return date(year, (quarter - 1) * 3 + 1, 1)


def quarter_end(year: int, quarter: int) -> date:
    return month_end(year, quarter * 3)


def add_months(year: int, month: int, months: int) -> tuple[int, int]:
    """Shift (year, month) by a number of months."""
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1
