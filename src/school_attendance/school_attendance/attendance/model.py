from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Mapping, Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: the marks of one class on one date.

    (class_id, date) is the natural key; record_id is the surrogate used for
    upserts. A student missing from ``statuses`` is unmarked.
    """

    record_id: str
    class_id: str
    date: date
    statuses: Mapping[str, AttendanceStatus] = field(default_factory=dict)

    def status_of(self, student_id: str) -> Optional[AttendanceStatus]:
        return self.statuses.get(student_id)

    def with_status(self, student_id: str, status: Optional[AttendanceStatus]) -> "AttendanceRecord":
        statuses = dict(self.statuses)
        if status is None:
            statuses.pop(student_id, None)
        else:
            statuses[student_id] = status
        return AttendanceRecord(record_id=self.record_id, class_id=self.class_id, date=self.date, statuses=statuses)

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "class_id": self.class_id,
            "date": self.date.isoformat(),
            "statuses": {sid: s.value for sid, s in self.statuses.items()},
        }
