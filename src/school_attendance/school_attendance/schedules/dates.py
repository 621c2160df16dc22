from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

from ..core.constants import FIRST_SEMESTER_RANGE, SECOND_SEMESTER_RANGE
from ..core.enums import Semester, Weekday
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class SessionDate:
    """A calendar date on which a class meets."""

    date: date
    weekday: Weekday

    @property
    def abbreviation(self) -> str:
        return self.weekday.abbreviation

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "weekday": self.weekday.value,
            "short": self.abbreviation,
        }


def semester_range(year: int, semester: str | Semester) -> tuple[date, date]:
    """Default term bounds: Feb 1 - Jun 30 or Aug 1 - Dec 31."""
    term = semester if isinstance(semester, Semester) else Semester.parse(semester)
    if term is None:
        raise ValidationError(f"Semestre inválido: {semester}")

    (start_month, start_day), (end_month, end_day) = (
        FIRST_SEMESTER_RANGE if term is Semester.FIRST else SECOND_SEMESTER_RANGE
    )
    return date(int(year), start_month, start_day), date(int(year), end_month, end_day)


def iter_days(start: date, end: date) -> Iterable[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def generate_session_dates(
    year: int,
    semester: str | Semester,
    weekdays: Iterable[str | Weekday],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[SessionDate]:
    """Ordered session dates of a class for its term.

    An explicit range is only used when both ends are given; otherwise the
    semester label decides the range. Holidays are not excluded.
    """

    targets = {Weekday(d) for d in weekdays}
    if not targets:
        return []

    if start is not None and end is not None:
        first, last = start, end
    else:
        first, last = semester_range(year, semester)

    sessions: list[SessionDate] = []
    for day in iter_days(first, last):
        weekday = Weekday.of(day)
        if weekday in targets:
            sessions.append(SessionDate(date=day, weekday=weekday))
    return sessions
