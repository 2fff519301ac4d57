"""
Calendar helpers shared by the recurrence generator and the budget read-models.

Weeks are Monday through Sunday everywhere in the backend.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_months_clamped(base: date, delta: int, *, day: int | None = None) -> date:
    """
    Move ``base`` by ``delta`` calendar months, keeping the day of month.

    When the target month is shorter than the wanted day, the day is clamped
    to the month's last day.

    Example:
        >>> add_months_clamped(date(2024, 1, 31), 1)
        datetime.date(2024, 2, 29)
        >>> add_months_clamped(date(2025, 11, 30), 3)
        datetime.date(2026, 2, 28)
    """
    wanted = day if day is not None else base.day
    year = base.year + (base.month - 1 + delta) // 12
    month = (base.month - 1 + delta) % 12 + 1
    return date(year, month, min(wanted, days_in_month(year, month)))


def month_range(value: date) -> tuple[date, date]:
    return date(value.year, value.month, 1), date(value.year, value.month, days_in_month(value.year, value.month))


def week_range(value: date) -> tuple[date, date]:
    start = value - timedelta(days=value.weekday())
    return start, start + timedelta(days=6)


def iter_days(start: date, end: date):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
