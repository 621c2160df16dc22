from __future__ import annotations

import threading

import pytest

from src.school_attendance.school_attendance.classes.model import SchoolClass
from src.school_attendance.school_attendance.core.enums import StudentStatus, Weekday
from src.school_attendance.school_attendance.core.exceptions import EnrollmentConflictError, NotFoundError, StoreError
from src.school_attendance.school_attendance.roster.service import RosterService
from src.school_attendance.school_attendance.state.app_state import AppState
from src.school_attendance.school_attendance.state.store import StateStore
from src.school_attendance.school_attendance.students.model import Student


class FakeRosterStore:
    def __init__(self):
        self.batches = []
        self.fail = False
        self.on_batch = None

    def save_batch(self, *, students=(), classes=(), delete_student_id=None, delete_class_id=None):
        if self.on_batch:
            self.on_batch()
        if self.fail:
            raise StoreError("timeout")
        self.batches.append(
            {
                "students": list(students),
                "classes": list(classes),
                "delete_student_id": delete_student_id,
                "delete_class_id": delete_class_id,
            }
        )


def _class(class_id, student_ids=()):
    return SchoolClass(class_id, "Teclado", (Weekday.WEDNESDAY,), "10:00", 1, 2024, "1º Semestre", student_ids=tuple(student_ids))


@pytest.fixture()
def setup():
    store = StateStore(
        AppState(
            students=(
                Student("s1", "Ana", enrolled_class_ids=("a",)),
                Student("s2", "Bia", status=StudentStatus.COMPLETED),
                Student("s3", "Caio", status=StudentStatus.WITHDRAWN, enrolled_class_ids=("a",)),
            ),
            classes=(_class("a", ["s1"]), _class("b")),
        )
    )
    roster = FakeRosterStore()
    return store, roster, RosterService(roster, store)


def test_enroll_writes_both_sides_in_one_batch(setup):
    store, roster, service = setup

    service.enroll(class_id="b", student_id="s2")

    assert len(roster.batches) == 1
    batch = roster.batches[0]
    assert batch["students"][0].enrolled_class_ids == ("b",)
    assert batch["classes"][0].student_ids == ("s2",)
    assert store.state.student("s2").status == StudentStatus.ACTIVE
    assert store.state.school_class("b").student_ids == ("s2",)


def test_enroll_of_current_member_does_not_write(setup):
    store, roster, service = setup

    service.enroll(class_id="a", student_id="s1")

    assert roster.batches == []


def test_failed_write_keeps_previous_state(setup):
    store, roster, service = setup
    roster.fail = True
    before = store.state

    with pytest.raises(StoreError):
        service.enroll(class_id="b", student_id="s2")

    assert store.state is before


def test_transfer_updates_three_rows(setup):
    store, roster, service = setup

    service.transfer(student_id="s1", from_class_id="a", to_class_id="b")

    assert store.state.student("s1").enrolled_class_ids == ("b",)
    assert store.state.school_class("a").student_ids == ()
    assert store.state.school_class("b").student_ids == ("s1",)
    assert len(roster.batches[0]["classes"]) == 2


def test_transfer_conflict_writes_nothing(setup):
    store, roster, service = setup
    service.enroll(class_id="b", student_id="s1")
    roster.batches.clear()

    with pytest.raises(EnrollmentConflictError):
        service.transfer(student_id="s1", from_class_id="a", to_class_id="b")
    with pytest.raises(EnrollmentConflictError):
        service.transfer(student_id="s1", from_class_id="a", to_class_id="a")
    assert roster.batches == []


def test_remove_drops_both_sides(setup):
    store, roster, service = setup

    service.remove(class_id="a", student_id="s1")

    assert store.state.student("s1").enrolled_class_ids == ()
    assert store.state.school_class("a").student_ids == ()


def test_roster_groups_by_status(setup):
    _, _, service = setup

    roster = service.roster("a")

    assert [s.student_id for s in roster.active] == ["s1"]
    assert [s.student_id for s in roster.withdrawn] == ["s3"]
    assert roster.completed == []
    assert roster.size == 2


def test_available_students_excludes_members_and_filters_by_name(setup):
    _, _, service = setup

    assert [s.student_id for s in service.available_students("a")] == ["s2"]
    assert service.available_students("b", "ca")[0].student_id == "s3"


def test_unknown_ids_are_reported(setup):
    _, _, service = setup

    with pytest.raises(NotFoundError):
        service.enroll(class_id="zzz", student_id="s1")
    with pytest.raises(NotFoundError):
        service.remove(class_id="a", student_id="zzz")


def test_simultaneous_enrollments_into_one_class_keep_both(setup):
    store, roster, service = setup
    workers = []

    def second_request():
        roster.on_batch = None
        worker = threading.Thread(target=lambda: service.enroll(class_id="b", student_id="s1"))
        worker.start()
        workers.append(worker)
        worker.join(timeout=0.2)
        assert worker.is_alive()

    roster.on_batch = second_request

    service.enroll(class_id="b", student_id="s2")
    workers[0].join(timeout=5)

    assert set(store.state.school_class("b").student_ids) == {"s1", "s2"}
    assert set(roster.batches[-1]["classes"][0].student_ids) == {"s1", "s2"}
    assert store.state.student("s1").enrolled_class_ids == ("a", "b")
