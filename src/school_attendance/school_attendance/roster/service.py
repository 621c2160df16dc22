from __future__ import annotations

from dataclasses import dataclass, field

from ..classes.model import SchoolClass
from ..core.enums import StudentStatus
from ..core.exceptions import EnrollmentConflictError, NotFoundError
from ..state.app_state import RosterChanged
from ..state.store import StateStore
from ..students.model import Student
from .repository import RosterStore
from .resolver import enroll, is_member, resolve_roster, sort_by_name, transfer, unenroll


@dataclass(frozen=True)
class ClassRoster:
    """Resolved members of a class split by lifecycle status."""

    school_class: SchoolClass
    active: list[Student] = field(default_factory=list)
    completed: list[Student] = field(default_factory=list)
    withdrawn: list[Student] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.active) + len(self.completed) + len(self.withdrawn)

    def to_dict(self) -> dict:
        return {
            "class_id": self.school_class.class_id,
            "active": [s.to_dict() for s in self.active],
            "completed": [s.to_dict() for s in self.completed],
            "withdrawn": [s.to_dict() for s in self.withdrawn],
        }


class RosterService:
    """Use case: move students in and out of classes, keeping both sides in step."""

    def __init__(self, roster: RosterStore, store: StateStore):
        self._roster = roster
        self._store = store

    def _class(self, class_id: str) -> SchoolClass:
        school_class = self._store.state.school_class(class_id)
        if not school_class:
            raise NotFoundError("Turma não encontrada")
        return school_class

    def _student(self, student_id: str) -> Student:
        student = self._store.state.student(student_id)
        if not student:
            raise NotFoundError("Aluno não encontrado")
        return student

    def roster(self, class_id: str) -> ClassRoster:
        school_class = self._class(class_id)
        members = resolve_roster(school_class, self._store.state.students)
        return ClassRoster(
            school_class=school_class,
            active=[s for s in members if s.status == StudentStatus.ACTIVE],
            completed=[s for s in members if s.status == StudentStatus.COMPLETED],
            withdrawn=[s for s in members if s.status == StudentStatus.WITHDRAWN],
        )

    def available_students(self, class_id: str, search: str = "") -> list[Student]:
        """Students not yet in the class by either signal, filtered by name."""
        school_class = self._class(class_id)
        term = (search or "").strip().casefold()
        return sort_by_name(
            s
            for s in self._store.state.students
            if not is_member(school_class, s) and term in s.name.casefold()
        )

    def enroll(self, *, class_id: str, student_id: str) -> tuple[Student, SchoolClass]:
        with self._store.transaction():
            school_class = self._class(class_id)
            student = self._student(student_id)
            updated_student, updated_class = enroll(student, school_class)
            if updated_student == student and updated_class == school_class:
                return student, school_class

            self._commit([updated_student], [updated_class])
            return updated_student, updated_class

    def remove(self, *, class_id: str, student_id: str) -> tuple[Student, SchoolClass]:
        with self._store.transaction():
            updated_student, updated_class = unenroll(self._student(student_id), self._class(class_id))
            self._commit([updated_student], [updated_class])
            return updated_student, updated_class

    def transfer(self, *, student_id: str, from_class_id: str, to_class_id: str) -> tuple[Student, SchoolClass, SchoolClass]:
        if from_class_id == to_class_id:
            raise EnrollmentConflictError("Selecione uma turma diferente da atual")
        with self._store.transaction():
            updated_student, source, target = transfer(
                self._student(student_id), self._class(from_class_id), self._class(to_class_id)
            )
            self._commit([updated_student], [source, target])
            return updated_student, source, target

    def _commit(self, students: list[Student], classes: list[SchoolClass]) -> None:
        self._roster.save_batch(students=students, classes=classes)
        self._store.dispatch(RosterChanged(students=students, classes=classes))
