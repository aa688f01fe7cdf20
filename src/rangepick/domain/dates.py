"""Calendar arithmetic on local calendar days.

All functions are pure. Time-of-day is never part of the domain: any
``datetime`` input is truncated to its date first.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta

GRID_CELLS = 42  # 6 weeks x 7 days

WEEKDAY_LABELS: tuple[str, ...] = ("Su", "Mo", "Tu", "We", "Th", "Fr", "Sa")

MONTH_NAMES: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def normalize(d: date | datetime) -> date:
    """Truncate *d* to its calendar day."""
    if isinstance(d, datetime):
        return d.date()
    return d


def add_days(d: date | datetime, n: int) -> date:
    return normalize(d) + timedelta(days=n)


def add_months(d: date | datetime, n: int) -> date:
    """Shift *d* by *n* months, clamping the day to the target month's length.

    Jan 31 + 1 month -> Feb 28 (or 29).
    """
    d = normalize(d)
    index = d.year * 12 + (d.month - 1) + n
    year, month0 = divmod(index, 12)
    month = month0 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, last_day))


def start_of_month(d: date | datetime) -> date:
    return normalize(d).replace(day=1)


def is_same_day(a: date | datetime, b: date | datetime) -> bool:
    return normalize(a) == normalize(b)


def is_same_month(a: date | datetime, b: date | datetime) -> bool:
    a, b = normalize(a), normalize(b)
    return a.year == b.year and a.month == b.month


def build_month_grid(anchor: date | datetime) -> list[date | None]:
    """Return the 42-cell, Sunday-first grid for *anchor*'s month.

    Cells outside the month are ``None``.
    """
    first = start_of_month(anchor)
    # date.weekday(): Monday=0 .. Sunday=6; shift so Sunday leads.
    leading = (first.weekday() + 1) % 7
    days_in_month = calendar.monthrange(first.year, first.month)[1]

    cells: list[date | None] = [None] * leading
    cells.extend(first.replace(day=day) for day in range(1, days_in_month + 1))
    cells.extend([None] * (GRID_CELLS - len(cells)))
    return cells


def year_options(center_year: int, radius: int) -> list[int]:
    """Years ``center_year - radius`` .. ``center_year + radius`` inclusive."""
    return list(range(center_year - radius, center_year + radius + 1))


def month_name(index: int) -> str:
    """English month name for a zero-based month index."""
    return MONTH_NAMES[index]


def month_label(d: date | datetime) -> str:
    """Header label such as ``"March 2024"``."""
    d = normalize(d)
    return f"{month_name(d.month - 1)} {d.year}"
