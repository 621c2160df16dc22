from __future__ import annotations

from datetime import date

import pytest

from src.school_attendance.school_attendance.attendance.model import AttendanceRecord
from src.school_attendance.school_attendance.classes.model import SchoolClass
from src.school_attendance.school_attendance.core.enums import AttendanceStatus, DashboardMode, StudentStatus, Weekday
from src.school_attendance.school_attendance.core.exceptions import ValidationError
from src.school_attendance.school_attendance.dashboard.service import DashboardService
from src.school_attendance.school_attendance.state.app_state import AppState
from src.school_attendance.school_attendance.state.store import StateStore
from src.school_attendance.school_attendance.students.model import Student

P, F = AttendanceStatus.PRESENT, AttendanceStatus.ABSENT
MONDAY = date(2024, 3, 4)


@pytest.fixture()
def service():
    store = StateStore(
        AppState(
            students=(
                Student("s1", "Ana", enrolled_class_ids=("a",)),
                Student("s2", "Bia", status=StudentStatus.COMPLETED),
                Student("s3", "Caio", status=StudentStatus.WITHDRAWN, enrolled_class_ids=("old",)),
            ),
            classes=(
                SchoolClass("a", "Piano", (Weekday.MONDAY,), "19:00", 1, 2024, "1º Semestre"),
                SchoolClass("b", "Canto", (Weekday.MONDAY, Weekday.FRIDAY), "08:00", 2, 2024, "1º semestre ", student_ids=("s2",)),
                SchoolClass("old", "Violão", (Weekday.MONDAY,), "10:00", 1, 2023, "2º Semestre", archived=True),
            ),
            records=(
                AttendanceRecord("r1", "a", MONDAY, {"s1": P}),
                AttendanceRecord("r2", "b", MONDAY, {"s2": F}),
                AttendanceRecord("r3", "old", date(2023, 9, 4), {"s3": F}),
            ),
        )
    )
    return DashboardService(store)


def test_period_mode_filters_by_term(service):
    overview = service.overview(mode=DashboardMode.PERIOD, year=2024, semester="1º Semestre", today=MONDAY)

    assert overview.class_count == 2
    assert overview.student_count == 2
    assert overview.status_counts == {"cursando": 1, "desistiu": 0, "concluiu": 1}
    assert [c.class_id for c in overview.classes_today] == ["b", "a"]
    assert overview.attendance_rate == 50


def test_period_defaults_to_current_term(service):
    overview = service.overview(today=date(2023, 9, 4))

    assert overview.year == 2023
    assert overview.semester == "2º Semestre"
    assert overview.student_count == 1
    assert overview.attendance_rate == 0


def test_always_mode_uses_everything(service):
    overview = service.overview(mode="always", today=date(2024, 3, 8))

    assert overview.class_count == 3
    assert overview.student_count == 3
    assert [c.class_id for c in overview.classes_today] == ["b"]
    assert overview.attendance_rate == 33


def test_no_marks_gives_no_rate(service):
    overview = service.overview(year=2025, semester="1º Semestre", today=MONDAY)

    assert overview.attendance_rate is None
    assert overview.to_dict()["attendance_rate_label"] == "--"


def test_invalid_semester(service):
    with pytest.raises(ValidationError):
        service.overview(year=2024, semester="verão", today=MONDAY)
