from __future__ import annotations

from datetime import date

import pytest

from src.school_attendance.school_attendance.classes.model import SchoolClass
from src.school_attendance.school_attendance.core.enums import StudentStatus, Weekday
from src.school_attendance.school_attendance.core.exceptions import NotFoundError, ValidationError
from src.school_attendance.school_attendance.state.app_state import AppState
from src.school_attendance.school_attendance.state.store import StateStore
from src.school_attendance.school_attendance.students.model import Student
from src.school_attendance.school_attendance.students.service import StudentService


class FakeRosterStore:
    def __init__(self):
        self.batches = []

    def save_batch(self, *, students=(), classes=(), delete_student_id=None, delete_class_id=None):
        self.batches.append((list(students), list(classes), delete_student_id, delete_class_id))


def _class(class_id, student_ids=()):
    return SchoolClass(class_id, "Canto", (Weekday.FRIDAY,), "", 2, 2024, "2º Semestre", student_ids=tuple(student_ids))


@pytest.fixture()
def setup():
    store = StateStore(
        AppState(
            students=(Student("s1", "Ana", phone="(11) 98888-7777", enrolled_class_ids=("a", "b")),),
            classes=(_class("a", ["s1"]), _class("b", ["s1", "s9"]), _class("c")),
        )
    )
    roster = FakeRosterStore()
    return store, roster, StudentService(roster, store, id_factory=lambda: "new-id")


def test_create_student(setup):
    store, roster, service = setup

    student = service.save(name="  Bruno ", phone="11 5555-0000", registration_date=date(2024, 2, 10))

    assert student.student_id == "new-id"
    assert student.name == "Bruno"
    assert student.status == StudentStatus.ACTIVE
    assert [s.name for s in service.list_students()] == ["Ana", "Bruno"]
    assert roster.batches == [([student], [], None, None)]


def test_name_is_required(setup):
    _, roster, service = setup

    with pytest.raises(ValidationError):
        service.save(name="   ")
    assert roster.batches == []


def test_phone_must_be_unique_by_digits(setup):
    _, _, service = setup

    with pytest.raises(ValidationError):
        service.save(name="Outra", phone="11988887777")


def test_editing_keeps_own_phone_and_history(setup):
    store, _, service = setup

    student = service.save(student_id="s1", name="Ana Maria", phone="11988887777")

    assert student.enrolled_class_ids == ("a", "b")
    assert store.state.student("s1").name == "Ana Maria"


def test_withdrawal_detaches_from_rosters_in_same_write(setup):
    store, roster, service = setup

    service.change_status("s1", StudentStatus.WITHDRAWN)

    students, classes, _, _ = roster.batches[0]
    assert len(roster.batches) == 1
    assert [c.class_id for c in classes] == ["a", "b"]
    assert store.state.school_class("a").student_ids == ()
    assert store.state.school_class("b").student_ids == ("s9",)
    assert store.state.student("s1").enrolled_class_ids == ("a", "b")


def test_unchanged_status_is_a_no_op(setup):
    _, roster, service = setup

    service.change_status("s1", StudentStatus.ACTIVE)

    assert roster.batches == []


def test_delete_removes_from_class_rosters(setup):
    store, roster, service = setup

    service.delete("s1")

    _, classes, deleted, _ = roster.batches[0]
    assert deleted == "s1"
    assert store.state.student("s1") is None
    assert all("s1" not in c.student_ids for c in store.state.classes)


def test_unknown_student_is_reported(setup):
    _, _, service = setup

    with pytest.raises(NotFoundError):
        service.delete("ghost")
    with pytest.raises(NotFoundError):
        service.save(student_id="ghost", name="X")
