"""Presence/absence counting and frequency percentage.

Rules shared by every view (sheet, reports, export, dashboard):
- unmarked cells are left out of both numerator and denominator;
- justified counts as attended;
- percent is rounded half up to an integer, and is ``None`` when nothing was marked.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


@dataclass(frozen=True)
class FrequencySummary:
    present: int = 0
    justified: int = 0
    absences: int = 0

    @property
    def presences(self) -> int:
        return self.present + self.justified

    @property
    def total(self) -> int:
        return self.presences + self.absences

    @property
    def percent(self) -> Optional[int]:
        return frequency_percent(self.presences, self.total)

    def __add__(self, other: "FrequencySummary") -> "FrequencySummary":
        return FrequencySummary(
            present=self.present + other.present,
            justified=self.justified + other.justified,
            absences=self.absences + other.absences,
        )

    def to_dict(self) -> dict:
        return {
            "presences": self.presences,
            "present": self.present,
            "justified": self.justified,
            "absences": self.absences,
            "total": self.total,
            "percent": self.percent,
        }


def frequency_percent(presences: int, total: int) -> Optional[int]:
    if total <= 0:
        return None
    # floor(presences * 100 / total + 1/2) in integer arithmetic
    return (presences * 200 + total) // (2 * total)


def format_percent(percent: Optional[int], *, empty: str = "--") -> str:
    return empty if percent is None else f"{percent}%"


def count_statuses(statuses: Iterable[Optional[AttendanceStatus]]) -> FrequencySummary:
    present = justified = absences = 0
    for status in statuses:
        if status == AttendanceStatus.PRESENT:
            present += 1
        elif status == AttendanceStatus.JUSTIFIED:
            justified += 1
        elif status == AttendanceStatus.ABSENT:
            absences += 1
    return FrequencySummary(present=present, justified=justified, absences=absences)


def summarize(
    dates: Sequence[date],
    statuses_by_date: Mapping[date, Mapping[str, Optional[AttendanceStatus]]],
    student_id: str,
) -> FrequencySummary:
    """Counts for one student over the given session dates."""
    return count_statuses((statuses_by_date.get(d) or {}).get(student_id) for d in dates)


def summarize_class(
    dates: Sequence[date],
    statuses_by_date: Mapping[date, Mapping[str, Optional[AttendanceStatus]]],
    student_ids: Iterable[str],
) -> FrequencySummary:
    total = FrequencySummary()
    for student_id in student_ids:
        total = total + summarize(dates, statuses_by_date, student_id)
    return total


def summarize_records(records: Iterable[AttendanceRecord]) -> FrequencySummary:
    """Aggregate over every mark in the given records (dashboard rate)."""
    return count_statuses(status for record in records for status in record.statuses.values())


def statuses_by_date(records: Iterable[AttendanceRecord]) -> dict[date, Mapping[str, AttendanceStatus]]:
    return {r.date: r.statuses for r in records}
