from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date
from typing import Callable, Optional

from ..common.validators import digits_only, require_non_empty
from ..core.enums import StudentStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..roster.repository import RosterStore
from ..roster.resolver import detach_from_classes
from ..state.app_state import RosterChanged
from ..state.store import StateStore
from .model import Student

logger = logging.getLogger(__name__)


class StudentService:
    """Use case: register students and manage their lifecycle."""

    def __init__(self, roster: RosterStore, store: StateStore, *, id_factory: Callable[[], str] | None = None):
        self._roster = roster
        self._store = store
        self._new_id = id_factory or (lambda: str(uuid.uuid4()))

    def list_students(self) -> list[Student]:
        return list(self._store.state.students)

    def get(self, student_id: str) -> Student:
        student = self._store.state.student(student_id)
        if not student:
            raise NotFoundError("Aluno não encontrado")
        return student

    def _ensure_unique_phone(self, phone: str, *, ignore_id: Optional[str]) -> None:
        clean = digits_only(phone)
        if not clean:
            return
        for other in self._store.state.students:
            if other.student_id != ignore_id and digits_only(other.phone) == clean:
                raise ValidationError("Já existe um aluno cadastrado com este número de telefone")

    def save(
        self,
        *,
        name: str,
        phone: str = "",
        status: StudentStatus = StudentStatus.ACTIVE,
        observations: str = "",
        registration_date: Optional[date] = None,
        student_id: Optional[str] = None,
    ) -> Student:
        """Create or update a student.

        Enrollment history is kept on edit. A status other than active
        detaches the student from every live roster in the same write.
        """

        name = require_non_empty(name, "Nome")
        status = StudentStatus(status)

        with self._store.transaction():
            self._ensure_unique_phone(phone, ignore_id=student_id)
            existing = self.get(student_id) if student_id else None
            student = Student(
                student_id=student_id or self._new_id(),
                name=name,
                phone=(phone or "").strip(),
                status=status,
                enrolled_class_ids=existing.enrolled_class_ids if existing else (),
                observations=(observations or "").strip(),
                registration_date=registration_date or (existing.registration_date if existing else date.today()),
            )
            return self._write_with_cascade(student)

    def change_status(self, student_id: str, status: StudentStatus) -> Student:
        status = StudentStatus(status)
        with self._store.transaction():
            student = self.get(student_id)
            if student.status == status:
                return student
            return self._write_with_cascade(replace(student, status=status))

    def _write_with_cascade(self, student: Student) -> Student:
        affected = [] if student.is_active else detach_from_classes(student.student_id, self._store.state.classes)

        self._roster.save_batch(students=[student], classes=affected)

        self._store.dispatch(RosterChanged(students=[student], classes=affected))
        if affected:
            logger.info("Student %s is %s; removed from %d class rosters", student.student_id, student.status.value, len(affected))
        return student

    def delete(self, student_id: str) -> None:
        """Delete a student and drop them from every live roster."""
        with self._store.transaction() as state:
            self.get(student_id)
            affected = detach_from_classes(student_id, state.classes)

            self._roster.save_batch(classes=affected, delete_student_id=student_id)

            self._store.dispatch(RosterChanged(classes=affected, deleted_student_id=student_id))
