"""Application state and its reducer.

The state is an immutable snapshot of the collections loaded from the store.
Every change is an action applied by ``reduce``, which returns a new snapshot
and never mutates the old one, so a reader holding a snapshot always sees it
whole.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Iterable, Optional, Sequence, Union

from ..attendance.model import AttendanceRecord
from ..classes.model import SchoolClass
from ..holidays.model import Holiday
from ..students.model import Student


@dataclass(frozen=True)
class AppState:
    students: tuple[Student, ...] = field(default_factory=tuple)
    classes: tuple[SchoolClass, ...] = field(default_factory=tuple)
    records: tuple[AttendanceRecord, ...] = field(default_factory=tuple)
    holidays: tuple[Holiday, ...] = field(default_factory=tuple)

    def student(self, student_id: str) -> Optional[Student]:
        return next((s for s in self.students if s.student_id == student_id), None)

    def school_class(self, class_id: str) -> Optional[SchoolClass]:
        return next((c for c in self.classes if c.class_id == class_id), None)

    def records_for_class(self, class_id: str) -> list[AttendanceRecord]:
        return sorted((r for r in self.records if r.class_id == class_id), key=lambda r: r.date)

    def record_for(self, class_id: str, day: date) -> Optional[AttendanceRecord]:
        return next((r for r in self.records if r.class_id == class_id and r.date == day), None)


# === actions ===


@dataclass(frozen=True)
class Loaded:
    students: Sequence[Student]
    classes: Sequence[SchoolClass]
    records: Sequence[AttendanceRecord]
    holidays: Sequence[Holiday]


@dataclass(frozen=True)
class StudentsSaved:
    students: Sequence[Student]


@dataclass(frozen=True)
class StudentDeleted:
    student_id: str


@dataclass(frozen=True)
class ClassesSaved:
    classes: Sequence[SchoolClass]


@dataclass(frozen=True)
class ClassDeleted:
    class_id: str


@dataclass(frozen=True)
class RosterChanged:
    """Student and class rows written together in one transaction."""

    students: Sequence[Student] = ()
    classes: Sequence[SchoolClass] = ()
    deleted_student_id: Optional[str] = None
    deleted_class_id: Optional[str] = None


@dataclass(frozen=True)
class RecordSaved:
    record: AttendanceRecord


@dataclass(frozen=True)
class HolidaySaved:
    holiday: Holiday


@dataclass(frozen=True)
class HolidayDeleted:
    holiday_id: str


Action = Union[
    Loaded,
    StudentsSaved,
    StudentDeleted,
    ClassesSaved,
    ClassDeleted,
    RosterChanged,
    RecordSaved,
    HolidaySaved,
    HolidayDeleted,
]


def _upsert(items: Iterable, updates: Iterable, key) -> tuple:
    """Replace matching items in place, append unknown ones at the end."""
    by_key = {key(u): u for u in updates}
    out = []
    for item in items:
        k = key(item)
        if k in by_key:
            out.append(by_key.pop(k))
        else:
            out.append(item)
    out.extend(by_key.values())
    return tuple(out)


def reduce(state: AppState, action: Action) -> AppState:
    if isinstance(action, Loaded):
        return AppState(
            students=tuple(sorted(action.students, key=lambda s: s.name.casefold())),
            classes=tuple(sorted(action.classes, key=lambda c: c.position)),
            records=tuple(action.records),
            holidays=tuple(sorted(action.holidays, key=lambda h: h.date)),
        )

    if isinstance(action, StudentsSaved):
        students = _upsert(state.students, action.students, key=lambda s: s.student_id)
        return replace(state, students=tuple(sorted(students, key=lambda s: s.name.casefold())))

    if isinstance(action, StudentDeleted):
        return replace(state, students=tuple(s for s in state.students if s.student_id != action.student_id))

    if isinstance(action, ClassesSaved):
        classes = _upsert(state.classes, action.classes, key=lambda c: c.class_id)
        return replace(state, classes=tuple(sorted(classes, key=lambda c: c.position)))

    if isinstance(action, ClassDeleted):
        return replace(state, classes=tuple(c for c in state.classes if c.class_id != action.class_id))

    if isinstance(action, RosterChanged):
        new_state = state
        if action.deleted_student_id is not None:
            new_state = reduce(new_state, StudentDeleted(action.deleted_student_id))
        if action.deleted_class_id is not None:
            new_state = reduce(new_state, ClassDeleted(action.deleted_class_id))
        if action.students:
            new_state = reduce(new_state, StudentsSaved(action.students))
        if action.classes:
            new_state = reduce(new_state, ClassesSaved(action.classes))
        return new_state

    if isinstance(action, RecordSaved):
        return replace(state, records=_upsert(state.records, [action.record], key=lambda r: r.record_id))

    if isinstance(action, HolidaySaved):
        holidays = _upsert(state.holidays, [action.holiday], key=lambda h: h.holiday_id)
        return replace(state, holidays=tuple(sorted(holidays, key=lambda h: h.date)))

    if isinstance(action, HolidayDeleted):
        return replace(state, holidays=tuple(h for h in state.holidays if h.holiday_id != action.holiday_id))

    raise TypeError(f"Unknown action: {action!r}")
