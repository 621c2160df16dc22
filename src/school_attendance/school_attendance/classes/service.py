from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date
from typing import Callable, Optional, Sequence

from ..common.validators import require_date_range, require_frequency, require_non_empty, require_weekdays
from ..core.enums import Semester, Weekday
from ..core.exceptions import NotFoundError, ValidationError
from ..roster.repository import RosterStore
from ..roster.resolver import apply_roster_selection
from ..state.app_state import ClassesSaved, RosterChanged
from ..state.store import StateStore
from .model import SchoolClass
from .repository import ClassRepository

logger = logging.getLogger(__name__)


def _require_semester(semester: str | Semester) -> str:
    term = semester if isinstance(semester, Semester) else Semester.parse(semester)
    if term is None:
        raise ValidationError(f"Semestre inválido: {semester}")
    return term.value


class ClassService:
    def __init__(
        self,
        classes: ClassRepository,
        roster: RosterStore,
        store: StateStore,
        *,
        id_factory: Callable[[], str] | None = None,
    ):
        self._classes = classes
        self._roster = roster
        self._store = store
        self._new_id = id_factory or (lambda: str(uuid.uuid4()))

    def get(self, class_id: str) -> SchoolClass:
        school_class = self._store.state.school_class(class_id)
        if not school_class:
            raise NotFoundError("Turma não encontrada")
        return school_class

    def list_classes(self, *, include_archived: bool = True) -> list[SchoolClass]:
        return [c for c in self._store.state.classes if include_archived or not c.archived]

    def classes_for_term(self, year: int, semester: str | Semester) -> list[SchoolClass]:
        return [c for c in self._store.state.classes if c.in_term(year, semester)]

    def classes_on_weekday(self, day: Weekday, classes: Optional[Sequence[SchoolClass]] = None) -> list[SchoolClass]:
        pool = self._store.state.classes if classes is None else classes
        return sorted((c for c in pool if day in c.days), key=lambda c: c.sort_time)

    def save(
        self,
        *,
        course_name: str,
        days: Sequence[str | Weekday],
        time: str = "",
        frequency: int = 1,
        year: int,
        semester: str | Semester,
        student_ids: Sequence[str] = (),
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        class_id: Optional[str] = None,
    ) -> SchoolClass:
        """Create or edit a class and reconcile its roster with the students' history."""

        course_name = require_non_empty(course_name, "Nome do curso")
        weekdays = require_weekdays(days)
        frequency = require_frequency(frequency)
        semester_label = _require_semester(semester)
        require_date_range(start_date, end_date)
        if int(year) <= 0:
            raise ValidationError("Ano é obrigatório")

        with self._store.transaction() as state:
            unknown = [sid for sid in student_ids if state.student(sid) is None]
            if unknown:
                raise NotFoundError(f"Aluno não encontrado: {', '.join(unknown)}")

            existing = self.get(class_id) if class_id else None
            draft = SchoolClass(
                class_id=class_id or self._new_id(),
                course_name=course_name,
                days=weekdays,
                time=(time or "").strip(),
                frequency=frequency,
                year=int(year),
                semester=semester_label,
                student_ids=existing.student_ids if existing else (),
                position=existing.position if existing else len(state.classes),
                archived=existing.archived if existing else False,
                start_date=start_date,
                end_date=end_date,
            )
            school_class, changed_students = apply_roster_selection(draft, student_ids, state.students)

            self._roster.save_batch(students=changed_students, classes=[school_class])
            self._store.dispatch(RosterChanged(students=changed_students, classes=[school_class]))
            return school_class

    def delete(self, class_id: str) -> None:
        """Delete a class and remove it from every student's enrollment history."""
        with self._store.transaction() as state:
            self.get(class_id)
            students = [s.without_class(class_id) for s in state.students if class_id in s.enrolled_class_ids]

            self._roster.save_batch(students=students, delete_class_id=class_id)
            self._store.dispatch(RosterChanged(students=students, deleted_class_id=class_id))

    def reorder(self, from_index: int, to_index: int) -> list[SchoolClass]:
        with self._store.transaction() as state:
            ordered = list(state.classes)
            if not (0 <= from_index < len(ordered)) or not (0 <= to_index < len(ordered)):
                raise ValidationError("Posição inválida")
            if from_index == to_index:
                return ordered

            moved = ordered.pop(from_index)
            ordered.insert(to_index, moved)
            updated = [replace(c, position=i) for i, c in enumerate(ordered)]

            self._classes.save_all(updated)
            self._store.dispatch(ClassesSaved(updated))
            return updated

    def clone_to_next_semester(self, *, year: int, semester: str | Semester) -> list[SchoolClass]:
        """Archive every active class and create an empty copy for the target term.

        Students are not carried over; re-enrollment is a manual step.
        """

        semester_label = _require_semester(semester)
        if int(year) <= 0:
            raise ValidationError("Ano é obrigatório")

        with self._store.transaction() as state:
            active = [c for c in state.classes if not c.archived]
            if not active:
                raise ValidationError("Não há turmas ativas para clonar")

            archived = [replace(c, archived=True) for c in active]
            clones = [
                SchoolClass(
                    class_id=self._new_id(),
                    course_name=c.course_name,
                    days=c.days,
                    time=c.time,
                    frequency=c.frequency,
                    year=int(year),
                    semester=semester_label,
                    student_ids=(),
                    position=c.position,
                    archived=False,
                )
                for c in active
            ]

            self._classes.save_all(archived + clones)
            self._store.dispatch(ClassesSaved(archived + clones))
        logger.info("Cloned %d classes into %s %s", len(clones), year, semester_label)
        return clones

    def update_term_dates(self, *, year: int, semester: str | Semester, start: date, end: date) -> list[SchoolClass]:
        """Set the same explicit start/end on every class of a term."""
        require_date_range(start, end)
        with self._store.transaction():
            targets = self.classes_for_term(year, semester)
            updated = [replace(c, start_date=start, end_date=end) for c in targets]
            if not updated:
                return []

            self._classes.save_all(updated)
            self._store.dispatch(ClassesSaved(updated))
        logger.info("Updated term dates of %d classes (%s - %s)", len(updated), start, end)
        return updated
