from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.frequency import FrequencySummary, format_percent, summarize_records
from ..classes.model import SchoolClass
from ..common.datetime_utils import now_local
from ..core.enums import DashboardMode, Semester, StudentStatus, Weekday
from ..core.exceptions import ValidationError
from ..roster.resolver import is_member
from ..state.store import StateStore


@dataclass(frozen=True)
class Overview:
    mode: DashboardMode
    year: Optional[int]
    semester: Optional[str]
    student_count: int
    status_counts: dict[str, int]
    class_count: int
    today: Weekday
    classes_today: list[SchoolClass]
    attendance: FrequencySummary

    @property
    def attendance_rate(self) -> Optional[int]:
        return self.attendance.percent

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "year": self.year,
            "semester": self.semester,
            "student_count": self.student_count,
            "status_counts": self.status_counts,
            "class_count": self.class_count,
            "today": self.today.value,
            "classes_today": [c.to_dict() for c in self.classes_today],
            "attendance_rate": self.attendance_rate,
            "attendance_rate_label": format_percent(self.attendance_rate),
        }


class DashboardService:
    def __init__(self, store: StateStore):
        self._store = store

    def overview(
        self,
        *,
        mode: DashboardMode | str = DashboardMode.PERIOD,
        year: Optional[int] = None,
        semester: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Overview:
        """Headline numbers, either over all history or for one term.

        Period mode defaults to the term containing ``today``.
        """

        mode = DashboardMode(mode)
        today = today or now_local().date()
        state = self._store.state

        if mode is DashboardMode.ALWAYS:
            classes = list(state.classes)
            students = list(state.students)
            records = list(state.records)
            year, semester = None, None
        else:
            year = int(year) if year is not None else today.year
            term = Semester.parse(semester) if semester else Semester.for_date(today)
            if term is None:
                raise ValidationError(f"Semestre inválido: {semester}")
            semester = term.value

            classes = [c for c in state.classes if c.in_term(year, term)]
            class_ids = {c.class_id for c in classes}
            students = [s for s in state.students if any(is_member(c, s) for c in classes)]
            records = [r for r in state.records if r.class_id in class_ids]

        weekday = Weekday.of(today)
        classes_today = sorted((c for c in classes if weekday in c.days), key=lambda c: c.sort_time)

        return Overview(
            mode=mode,
            year=year,
            semester=semester,
            student_count=len(students),
            status_counts={status.value: sum(1 for s in students if s.status == status) for status in StudentStatus},
            class_count=len(classes),
            today=weekday,
            classes_today=classes_today,
            attendance=summarize_records(records),
        )
