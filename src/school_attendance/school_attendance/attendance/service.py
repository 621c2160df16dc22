from __future__ import annotations

import logging
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Iterator, Optional

from ..classes.model import SchoolClass
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, StoreError, ValidationError
from ..roster.resolver import active_roster, is_member
from ..schedules.dates import SessionDate, generate_session_dates
from ..state.app_state import RecordSaved
from ..state.store import StateStore
from ..students.model import Student
from .frequency import FrequencySummary, format_percent, statuses_by_date, summarize
from .model import AttendanceRecord
from .repository import AttendanceRepository
from .state_machine import advance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToggleOutcome:
    """Result of one click on an attendance cell.

    Exactly one of: applied (written and visible), busy (a write for the same
    cell is still pending, nothing done) or failed (store error, nothing changed).
    """

    student_id: str
    date: date
    status: Optional[AttendanceStatus]
    applied: bool = False
    busy: bool = False
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "date": self.date.isoformat(),
            "status": self.status.value if self.status else None,
            "applied": self.applied,
            "busy": self.busy,
            "error": self.error,
        }


@dataclass(frozen=True)
class SheetRow:
    student: Student
    cells: dict[date, Optional[AttendanceStatus]]
    summary: FrequencySummary

    def to_dict(self) -> dict:
        return {
            "student_id": self.student.student_id,
            "name": self.student.name,
            "cells": {d.isoformat(): (s.code if s else "") for d, s in self.cells.items()},
            "presences": self.summary.presences,
            "absences": self.summary.absences,
            "percent": self.summary.percent,
            "percent_label": format_percent(self.summary.percent),
        }


@dataclass(frozen=True)
class AttendanceSheet:
    """Semester grid of a class: one row per active student, one column per session date."""

    school_class: SchoolClass
    dates: list[SessionDate]
    rows: list[SheetRow] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "class": self.school_class.to_dict(),
            "dates": [d.to_dict() for d in self.dates],
            "rows": [r.to_dict() for r in self.rows],
        }


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        store: StateStore,
        *,
        id_factory: Callable[[], str] | None = None,
    ):
        self._attendance = attendance
        self._store = store
        self._new_id = id_factory or (lambda: str(uuid.uuid4()))
        self._in_flight: set[tuple[str, date]] = set()
        self._record_locks: dict[tuple[str, date], list] = {}
        self._record_owners: dict[tuple[str, date], int] = {}
        self._lock = threading.Lock()

    def _get_class(self, class_id: str) -> SchoolClass:
        school_class = self._store.state.school_class(class_id)
        if not school_class:
            raise NotFoundError("Turma não encontrada")
        return school_class

    def session_dates(self, class_id: str) -> list[SessionDate]:
        c = self._get_class(class_id)
        return generate_session_dates(c.year, c.semester, c.days, c.start_date, c.end_date)

    def sheet(self, class_id: str) -> AttendanceSheet:
        state = self._store.state
        school_class = self._get_class(class_id)
        dates = self.session_dates(class_id)
        marks = statuses_by_date(state.records_for_class(class_id))
        days = [d.date for d in dates]

        rows = []
        for student in active_roster(school_class, state.students):
            cells = {d: (marks.get(d) or {}).get(student.student_id) for d in days}
            rows.append(SheetRow(student=student, cells=cells, summary=summarize(days, marks, student.student_id)))
        return AttendanceSheet(school_class=school_class, dates=dates, rows=rows)

    def toggle(self, *, class_id: str, student_id: str, day: date) -> ToggleOutcome:
        """Advance one cell and persist the whole record.

        Writes to the same (class, date) record run one at a time, so marks of
        other students on that date are never overwritten. State is replaced
        only after the store accepted the write, so a failed write leaves
        nothing to roll back.
        """
        state = self._store.state
        school_class = self._get_class(class_id)
        student = state.student(student_id)
        if not student:
            raise NotFoundError("Aluno não encontrado")
        if not is_member(school_class, student):
            raise ValidationError(f"{student.name} não pertence a esta turma")

        key = (student_id, day)
        record_key = (class_id, day)
        existing = state.record_for(class_id, day)
        current = existing.status_of(student_id) if existing else None

        with self._lock:
            # a click issued from inside this thread's own pending write cannot wait for it
            if key in self._in_flight or self._record_owners.get(record_key) == threading.get_ident():
                return ToggleOutcome(student_id=student_id, date=day, status=current, busy=True)
            self._in_flight.add(key)

        try:
            with self._hold_record(record_key):
                existing = self._store.state.record_for(class_id, day)
                current = existing.status_of(student_id) if existing else None
                nxt = advance(current)
                base = existing or AttendanceRecord(record_id=self._new_id(), class_id=class_id, date=day)
                record = base.with_status(student_id, nxt)

                try:
                    saved = self._attendance.save(record)
                except StoreError as e:
                    logger.exception("Failed to save attendance %s for %s on %s", class_id, student_id, day)
                    return ToggleOutcome(student_id=student_id, date=day, status=current, error=str(e))

                self._store.dispatch(RecordSaved(saved))
                return ToggleOutcome(student_id=student_id, date=day, status=nxt, applied=True)
        finally:
            with self._lock:
                self._in_flight.discard(key)

    @contextmanager
    def _hold_record(self, record_key: tuple[str, date]) -> Iterator[None]:
        with self._lock:
            entry = self._record_locks.setdefault(record_key, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                with self._lock:
                    self._record_owners[record_key] = threading.get_ident()
                try:
                    yield
                finally:
                    with self._lock:
                        self._record_owners.pop(record_key, None)
        finally:
            with self._lock:
                entry[1] -= 1
                if not entry[1]:
                    del self._record_locks[record_key]

    def is_busy(self, student_id: str, day: date) -> bool:
        with self._lock:
            return (student_id, day) in self._in_flight
