from __future__ import annotations

from datetime import date

import pytest
from werkzeug.security import generate_password_hash

from src.school_attendance.school_attendance.classes.model import SchoolClass
from src.school_attendance.school_attendance.container import assemble
from src.school_attendance.school_attendance.core.enums import Weekday
from src.school_attendance.school_attendance.core.exceptions import StoreError
from src.school_attendance.school_attendance.main import create_app
from src.school_attendance.school_attendance.students.model import Student
from src.school_attendance.school_attendance.users.model import User


class MemoryRepo:
    def __init__(self, items=(), key=None):
        self.items = list(items)
        self.key = key
        self.fail = False

    def list_all(self):
        return list(self.items)

    def save(self, item):
        if self.fail:
            raise StoreError("write refused")
        self.items = [i for i in self.items if self.key(i) != self.key(item)] + [item]
        return item

    def save_all(self, items):
        for item in items:
            self.save(item)
        return items

    def delete(self, item_id):
        before = len(self.items)
        self.items = [i for i in self.items if self.key(i) != item_id]
        return len(self.items) < before


class MemoryUsers:
    def __init__(self, users):
        self.users = users

    def get_by_id(self, user_id):
        return next((u for u in self.users if u.user_id == user_id), None)

    def get_by_username(self, username):
        return next((u for u in self.users if u.username == username), None)


class MemoryRoster:
    def __init__(self, students, classes):
        self.students = students
        self.classes = classes

    def save_batch(self, *, students=(), classes=(), delete_student_id=None, delete_class_id=None):
        if delete_student_id:
            self.students.delete(delete_student_id)
        if delete_class_id:
            self.classes.delete(delete_class_id)
        self.students.save_all(students)
        self.classes.save_all(classes)


@pytest.fixture()
def client(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    students = MemoryRepo([Student("s1", "Ana")], key=lambda s: s.student_id)
    classes = MemoryRepo(
        [SchoolClass("c1", "Inglês", (Weekday.MONDAY,), "19:00", 1, 2024, "1º Semestre", student_ids=("s1",))],
        key=lambda c: c.class_id,
    )
    attendance = MemoryRepo(key=lambda r: r.record_id)
    container = assemble(
        users_repo=MemoryUsers([User(1, "Secretaria", "admin", generate_password_hash("admin"))]),
        students_repo=students,
        classes_repo=classes,
        attendance_repo=attendance,
        holidays_repo=MemoryRepo(key=lambda h: h.holiday_id),
        earnings_repo=MemoryRepo(key=lambda e: e.record_id),
        roster_store=MemoryRoster(students, classes),
    )
    container.reload()
    app = create_app(container)
    test_client = app.test_client()
    test_client.attendance_repo = attendance
    return test_client


def _login(client):
    resp = client.post("/api/login", json={"username": "admin", "password": "admin"})
    assert resp.status_code == 200


def test_data_routes_require_login(client):
    resp = client.get("/api/students")

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_bad_credentials(client):
    resp = client.post("/api/login", json={"username": "admin", "password": "nope"})

    assert resp.status_code == 401


def test_toggle_attendance_roundtrip(client):
    _login(client)

    resp = client.post("/api/classes/c1/attendance/toggle", json={"student_id": "s1", "date": "2024-03-04"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "presente"

    sheet = client.get("/api/classes/c1/attendance").get_json()["data"]
    assert sheet["rows"][0]["cells"]["2024-03-04"] == "P"
    assert sheet["rows"][0]["percent_label"] == "100%"


def test_toggle_store_failure_is_reported(client):
    _login(client)
    client.attendance_repo.fail = True

    resp = client.post("/api/classes/c1/attendance/toggle", json={"student_id": "s1", "date": "2024-03-04"})

    assert resp.status_code == 502


def test_validation_and_not_found_map_to_status_codes(client):
    _login(client)

    assert client.post("/api/classes", json={"course_name": "X", "days": [], "year": 2024, "semester": "1º Semestre"}).status_code == 400
    assert client.get("/api/classes/zzz/attendance").status_code == 404
    assert client.post("/api/classes/c1/attendance/toggle", json={"student_id": "s1", "date": "04/03/2024"}).status_code == 400


def test_create_student_and_enroll(client):
    _login(client)

    created = client.post("/api/students", json={"name": "Bruno", "phone": "11 90000-0000"}).get_json()["data"]
    resp = client.post(f"/api/classes/c1/roster/{created['id']}")

    assert resp.status_code == 200
    roster = client.get("/api/classes/c1/roster").get_json()["data"]
    assert [s["name"] for s in roster["active"]] == ["Ana", "Bruno"]


def test_export_download(client):
    _login(client)
    client.post("/api/classes/c1/attendance/toggle", json={"student_id": "s1", "date": str(date(2024, 3, 4))})

    resp = client.get("/api/reports/classes/c1/export")

    assert resp.status_code == 200
    assert resp.headers["Content-Disposition"].startswith("attachment")
    assert resp.data[:2] == b"PK"
