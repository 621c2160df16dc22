from __future__ import annotations

from datetime import date

import pytest

from src.school_attendance.school_attendance.classes.model import SchoolClass
from src.school_attendance.school_attendance.classes.service import ClassService
from src.school_attendance.school_attendance.core.enums import Semester, StudentStatus, Weekday
from src.school_attendance.school_attendance.core.exceptions import NotFoundError, ValidationError
from src.school_attendance.school_attendance.state.app_state import AppState
from src.school_attendance.school_attendance.state.store import StateStore
from src.school_attendance.school_attendance.students.model import Student


class FakeClassRepo:
    def __init__(self):
        self.bulk_writes = []

    def list_all(self):
        return []

    def save(self, school_class):
        self.bulk_writes.append([school_class])
        return school_class

    def save_all(self, classes):
        self.bulk_writes.append(list(classes))
        return classes

    def delete(self, class_id):
        return True


class FakeRosterStore:
    def __init__(self):
        self.batches = []

    def save_batch(self, *, students=(), classes=(), delete_student_id=None, delete_class_id=None):
        self.batches.append((list(students), list(classes), delete_student_id, delete_class_id))


def _class(class_id, *, days=(Weekday.MONDAY,), time="19:00", position=0, year=2024, semester="1º Semestre", **kw):
    return SchoolClass(class_id, f"Curso {class_id}", tuple(days), time, 1, year, semester, position=position, **kw)


def _ids():
    counter = iter(range(1, 100))
    return lambda: f"new-{next(counter)}"


@pytest.fixture()
def setup():
    store = StateStore(
        AppState(
            students=(
                Student("s1", "Ana", enrolled_class_ids=("a",)),
                Student("s2", "Bia", status=StudentStatus.COMPLETED),
            ),
            classes=(
                _class("a", position=0, student_ids=("s1",)),
                _class("b", position=1, days=(Weekday.MONDAY, Weekday.WEDNESDAY), time="08:30"),
                _class("old", position=2, archived=True, year=2023, semester="2º Semestre"),
            ),
        )
    )
    classes, roster = FakeClassRepo(), FakeRosterStore()
    return store, classes, roster, ClassService(classes, roster, store, id_factory=_ids())


def test_create_class_appends_position_and_enrolls_selection(setup):
    store, _, roster, service = setup

    created = service.save(
        course_name="Bateria",
        days=["Terça", "Quinta"],
        time="20:00",
        frequency=2,
        year=2024,
        semester="1º semestre",
        student_ids=["s2"],
    )

    assert created.class_id == "new-1"
    assert created.position == 3
    assert created.semester == Semester.FIRST.value
    assert created.student_ids == ("s2",)
    students, classes, _, _ = roster.batches[0]
    assert students[0].enrolled_class_ids == ("new-1",)
    assert students[0].status == StudentStatus.ACTIVE
    assert store.state.student("s2").status == StudentStatus.ACTIVE


def test_edit_keeps_position_and_drops_deselected(setup):
    store, _, _, service = setup

    updated = service.save(class_id="a", course_name="Curso a", days=["Segunda"], year=2024, semester="1º Semestre")

    assert updated.position == 0
    assert updated.student_ids == ()
    assert store.state.student("s1").enrolled_class_ids == ()


@pytest.mark.parametrize(
    "overrides",
    [
        {"course_name": " "},
        {"days": []},
        {"days": ["Feriado"]},
        {"frequency": 3},
        {"semester": "3º Semestre"},
        {"start_date": date(2024, 3, 1)},
        {"start_date": date(2024, 3, 10), "end_date": date(2024, 3, 1)},
    ],
)
def test_invalid_class_is_rejected_before_any_write(setup, overrides):
    _, _, roster, service = setup
    data = {"course_name": "Piano", "days": ["Segunda"], "year": 2024, "semester": "1º Semestre"}
    data.update(overrides)

    with pytest.raises(ValidationError):
        service.save(**data)
    assert roster.batches == []


def test_unknown_selected_student_is_reported(setup):
    _, _, _, service = setup

    with pytest.raises(NotFoundError):
        service.save(course_name="Piano", days=["Segunda"], year=2024, semester="1º Semestre", student_ids=["ghost"])


def test_delete_clears_enrollment_history(setup):
    store, _, roster, service = setup

    service.delete("a")

    students, _, _, deleted = roster.batches[0]
    assert deleted == "a"
    assert [s.student_id for s in students] == ["s1"]
    assert store.state.school_class("a") is None
    assert store.state.student("s1").enrolled_class_ids == ()


def test_reorder_rewrites_positions(setup):
    store, classes, _, service = setup

    service.reorder(2, 0)

    assert [c.class_id for c in store.state.classes] == ["old", "a", "b"]
    assert [c.position for c in classes.bulk_writes[0]] == [0, 1, 2]


def test_reorder_out_of_range(setup):
    _, _, _, service = setup

    with pytest.raises(ValidationError):
        service.reorder(0, 5)


def test_clone_archives_active_classes_and_creates_empty_copies(setup):
    store, classes, _, service = setup

    clones = service.clone_to_next_semester(year=2024, semester="2º Semestre")

    assert [c.class_id for c in clones] == ["new-1", "new-2"]
    assert all(c.student_ids == () and not c.archived for c in clones)
    assert [c.position for c in clones] == [0, 1]
    assert clones[1].days == (Weekday.MONDAY, Weekday.WEDNESDAY)
    assert all(c.in_term(2024, Semester.SECOND) for c in clones)
    assert store.state.school_class("a").archived
    assert store.state.school_class("a").student_ids == ("s1",)
    assert len(classes.bulk_writes) == 1


def test_clone_without_active_classes_fails():
    store = StateStore(AppState(classes=(_class("x", archived=True),)))
    classes = FakeClassRepo()
    service = ClassService(classes, FakeRosterStore(), store)

    with pytest.raises(ValidationError):
        service.clone_to_next_semester(year=2025, semester="1º Semestre")
    assert classes.bulk_writes == []


def test_update_term_dates_only_touches_that_term(setup):
    store, _, _, service = setup

    updated = service.update_term_dates(year=2024, semester="1º Semestre", start=date(2024, 3, 1), end=date(2024, 7, 15))

    assert {c.class_id for c in updated} == {"a", "b"}
    assert store.state.school_class("a").end_date == date(2024, 7, 15)
    assert store.state.school_class("old").start_date is None


def test_classes_on_weekday_sorted_by_time(setup):
    _, _, _, service = setup

    monday = service.classes_on_weekday(Weekday.MONDAY)

    assert [c.class_id for c in monday] == ["b", "a", "old"]
    assert [c.class_id for c in service.classes_on_weekday(Weekday.WEDNESDAY)] == ["b"]
