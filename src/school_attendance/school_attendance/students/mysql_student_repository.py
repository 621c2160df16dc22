from __future__ import annotations

from typing import Sequence

from ..common.datetime_utils import as_date
from ..core.enums import StudentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, load_json
from .model import Student
from .repository import StudentRepository

_COLUMNS = "id, name, phone, status, enrolled_class_ids, observations, registration_date"


def row_to_student(row: dict) -> Student:
    return Student(
        student_id=str(row["id"]),
        name=row["name"],
        phone=row.get("phone") or "",
        status=StudentStatus(row.get("status") or StudentStatus.ACTIVE.value),
        enrolled_class_ids=tuple(load_json(row.get("enrolled_class_ids"), [])),
        observations=row.get("observations") or "",
        registration_date=as_date(row.get("registration_date")),
    )


def student_to_row(student: Student) -> tuple:
    return (
        student.student_id,
        student.name,
        student.phone,
        student.status.value,
        dump_json(list(student.enrolled_class_ids)),
        student.observations or None,
        student.registration_date,
    )


def upsert_student(cur, student: Student) -> None:
    """Shared by the repository and the roster transaction writer."""
    cur.execute(
        f"""
        INSERT INTO students({_COLUMNS})
        VALUES(%s,%s,%s,%s,%s,%s,%s)
        ON DUPLICATE KEY UPDATE
            name=VALUES(name), phone=VALUES(phone), status=VALUES(status),
            enrolled_class_ids=VALUES(enrolled_class_ids), observations=VALUES(observations),
            registration_date=VALUES(registration_date)
        """,
        student_to_row(student),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students ORDER BY name")
            return [row_to_student(r) for r in fetchall(cur)]

    def save(self, student: Student) -> Student:
        with db_cursor(self._conn_factory) as (_, cur):
            upsert_student(cur, student)
        return student

    def delete(self, student_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE id=%s", (student_id,))
            return cur.rowcount > 0
