"""Roster resolution and reconciliation.

Membership of a student in a class is recorded on two sides that can drift
apart: ``SchoolClass.student_ids`` (the live roster, edited in bulk from the
class form) and ``Student.enrolled_class_ids`` (the student's enrollment
history, edited by per-student operations). Reads take the union of both;
writes update both sides and hand the pair to a single transaction.

All functions here are pure: they return new entities and never touch a store.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Sequence

from ..classes.model import SchoolClass
from ..core.enums import StudentStatus
from ..core.exceptions import EnrollmentConflictError
from ..students.model import Student


def is_member(school_class: SchoolClass, student: Student) -> bool:
    return student.student_id in school_class.student_ids or school_class.class_id in student.enrolled_class_ids


def sort_by_name(students: Iterable[Student]) -> list[Student]:
    return sorted(students, key=lambda s: s.name.casefold())


def resolve_roster(school_class: SchoolClass, students: Sequence[Student]) -> list[Student]:
    """Union of both membership signals, each student once, ordered by name."""
    seen: set[str] = set()
    members: list[Student] = []
    for student in students:
        if student.student_id in seen:
            continue
        if is_member(school_class, student):
            seen.add(student.student_id)
            members.append(student)
    return sort_by_name(members)


def active_roster(school_class: SchoolClass, students: Sequence[Student]) -> list[Student]:
    """Students attendance is taken for."""
    return [s for s in resolve_roster(school_class, students) if s.status == StudentStatus.ACTIVE]


def enroll(student: Student, school_class: SchoolClass) -> tuple[Student, SchoolClass]:
    """Add on both sides; enrolling always makes the student active."""
    updated_student = replace(student.with_class(school_class.class_id), status=StudentStatus.ACTIVE)
    return updated_student, school_class.with_student(student.student_id)


def unenroll(student: Student, school_class: SchoolClass) -> tuple[Student, SchoolClass]:
    return student.without_class(school_class.class_id), school_class.without_student(student.student_id)


def transfer(
    student: Student, source: SchoolClass, target: SchoolClass
) -> tuple[Student, SchoolClass, SchoolClass]:
    if is_member(target, student):
        raise EnrollmentConflictError(f"{student.name} já está matriculado nesta turma")

    updated_student = student.without_class(source.class_id).with_class(target.class_id)
    return updated_student, source.without_student(student.student_id), target.with_student(student.student_id)


def detach_from_classes(student_id: str, classes: Sequence[SchoolClass]) -> list[SchoolClass]:
    """Remove a student from every live roster holding them.

    Only the classes that changed are returned. The student's enrollment
    history is not touched here.
    """
    return [c.without_student(student_id) for c in classes if student_id in c.student_ids]


def apply_roster_selection(
    school_class: SchoolClass, selected_ids: Sequence[str], students: Sequence[Student]
) -> tuple[SchoolClass, list[Student]]:
    """Make ``selected_ids`` the class roster and reconcile enrollment history.

    Returns the updated class and the students whose rows changed.
    """
    selected = list(dict.fromkeys(selected_ids))
    selected_set = set(selected)
    changed: list[Student] = []

    for student in students:
        enrolled = school_class.class_id in student.enrolled_class_ids
        if student.student_id in selected_set and not enrolled:
            changed.append(replace(student.with_class(school_class.class_id), status=StudentStatus.ACTIVE))
        elif student.student_id not in selected_set and enrolled:
            changed.append(student.without_class(school_class.class_id))

    return replace(school_class, student_ids=tuple(selected)), changed
