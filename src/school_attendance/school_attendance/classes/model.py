from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional

from ..core.constants import DEFAULT_CLASS_TIME
from ..core.enums import Semester, Weekday, normalize_label


@dataclass(frozen=True)
class SchoolClass:
    """Domain entity: a class (turma) meeting on fixed weekdays in one term."""

    class_id: str
    course_name: str
    days: tuple[Weekday, ...]
    time: str
    frequency: int
    year: int
    semester: str
    student_ids: tuple[str, ...] = field(default_factory=tuple)
    position: int = 0
    archived: bool = False
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def in_term(self, year: int, semester: str | Semester) -> bool:
        label = semester.value if isinstance(semester, Semester) else semester
        return self.year == int(year) and normalize_label(self.semester) == normalize_label(label)

    def with_student(self, student_id: str) -> "SchoolClass":
        if student_id in self.student_ids:
            return self
        return replace(self, student_ids=self.student_ids + (student_id,))

    def without_student(self, student_id: str) -> "SchoolClass":
        return replace(self, student_ids=tuple(s for s in self.student_ids if s != student_id))

    @property
    def sort_time(self) -> str:
        return self.time or DEFAULT_CLASS_TIME

    def to_dict(self) -> dict:
        return {
            "id": self.class_id,
            "course_name": self.course_name,
            "days": [d.value for d in self.days],
            "time": self.time,
            "frequency": self.frequency,
            "student_ids": list(self.student_ids),
            "position": self.position,
            "semester": self.semester,
            "year": self.year,
            "archived": self.archived,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
        }
