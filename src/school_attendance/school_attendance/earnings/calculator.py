"""Monthly earnings arithmetic for the instructor.

Pure helpers only; persistence lives in ``EarningsService``.
"""

from __future__ import annotations

import calendar
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from .model import EarningsRecord


def month_key(year: int, month: int) -> str:
    """Storage key of a month, "MM-YYYY"."""
    return f"{int(month):02d}-{int(year)}"


def month_grid(year: int, month: int) -> list[list[Optional[date]]]:
    """Weeks of a month starting on Sunday; days outside the month are None."""
    cal = calendar.Calendar(firstweekday=calendar.SUNDAY)
    weeks = []
    for week in cal.monthdatescalendar(int(year), int(month)):
        weeks.append([d if d.month == int(month) else None for d in week])
    return weeks


def total_classes(selected: Iterable[date], classes_per_day: int) -> int:
    return len(set(selected)) * max(int(classes_per_day), 0)


def toggle_day(selected: Sequence[date], day: date, classes_per_day: int) -> tuple[tuple[date, ...], int]:
    """Flip one worked day; returns the new sorted selection and its class count."""
    days = set(selected)
    if day in days:
        days.remove(day)
    else:
        days.add(day)
    ordered = tuple(sorted(days))
    return ordered, total_classes(ordered, classes_per_day)


def total_amount(classes: int, value_per_class: Decimal | str | int) -> Decimal:
    return Decimal(int(classes)) * Decimal(str(value_per_class))


def annual_total(history: Iterable[EarningsRecord], year: int) -> Decimal:
    return sum((r.total_amount for r in history if r.year == int(year)), Decimal("0"))
