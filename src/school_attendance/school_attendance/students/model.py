from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional

from ..core.enums import StudentStatus


@dataclass(frozen=True)
class Student:
    """Domain entity: a student.

    ``enrolled_class_ids`` is the enrollment history and is never trimmed by
    status changes; live roster membership is held on the class side.
    """

    student_id: str
    name: str
    phone: str = ""
    status: StudentStatus = StudentStatus.ACTIVE
    enrolled_class_ids: tuple[str, ...] = field(default_factory=tuple)
    observations: str = ""
    registration_date: Optional[date] = None

    @property
    def is_active(self) -> bool:
        return self.status == StudentStatus.ACTIVE

    def with_class(self, class_id: str) -> "Student":
        if class_id in self.enrolled_class_ids:
            return self
        return replace(self, enrolled_class_ids=self.enrolled_class_ids + (class_id,))

    def without_class(self, class_id: str) -> "Student":
        return replace(self, enrolled_class_ids=tuple(c for c in self.enrolled_class_ids if c != class_id))

    def to_dict(self) -> dict:
        return {
            "id": self.student_id,
            "name": self.name,
            "phone": self.phone,
            "status": self.status.value,
            "enrolled_class_ids": list(self.enrolled_class_ids),
            "observations": self.observations,
            "registration_date": self.registration_date.isoformat() if self.registration_date else None,
        }
