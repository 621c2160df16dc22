from __future__ import annotations

from datetime import date
from typing import Sequence

from ..common.datetime_utils import as_date
from ..core.enums import Semester, Weekday
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, load_json
from .model import SchoolClass
from .repository import ClassRepository

_COLUMNS = (
    "id, course_name, days, time, frequency, student_ids, position, semester, year, archived, start_date, end_date"
)


def row_to_class(row: dict) -> SchoolClass:
    return SchoolClass(
        class_id=str(row["id"]),
        course_name=row["course_name"],
        days=tuple(Weekday(d) for d in load_json(row.get("days"), [])),
        time=row.get("time") or "",
        frequency=int(row.get("frequency") or 1),
        student_ids=tuple(load_json(row.get("student_ids"), [])),
        position=int(row.get("position") or 0),
        semester=row.get("semester") or Semester.FIRST.value,
        year=int(row.get("year") or date.today().year),
        archived=bool(row.get("archived")),
        start_date=as_date(row.get("start_date")),
        end_date=as_date(row.get("end_date")),
    )


def class_to_row(school_class: SchoolClass) -> tuple:
    return (
        school_class.class_id,
        school_class.course_name,
        dump_json([d.value for d in school_class.days]),
        school_class.time,
        int(school_class.frequency),
        dump_json(list(school_class.student_ids)),
        int(school_class.position),
        school_class.semester,
        int(school_class.year),
        1 if school_class.archived else 0,
        school_class.start_date,
        school_class.end_date,
    )


def upsert_class(cur, school_class: SchoolClass) -> None:
    """Shared by the repository and the roster transaction writer."""
    cur.execute(
        f"""
        INSERT INTO classes({_COLUMNS})
        VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
        ON DUPLICATE KEY UPDATE
            course_name=VALUES(course_name), days=VALUES(days), time=VALUES(time),
            frequency=VALUES(frequency), student_ids=VALUES(student_ids), position=VALUES(position),
            semester=VALUES(semester), year=VALUES(year), archived=VALUES(archived),
            start_date=VALUES(start_date), end_date=VALUES(end_date)
        """,
        class_to_row(school_class),
    )


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM classes ORDER BY position ASC")
            return [row_to_class(r) for r in fetchall(cur)]

    def save(self, school_class: SchoolClass) -> SchoolClass:
        with db_cursor(self._conn_factory) as (_, cur):
            upsert_class(cur, school_class)
        return school_class

    def save_all(self, classes: Sequence[SchoolClass]) -> Sequence[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            for school_class in classes:
                upsert_class(cur, school_class)
        return list(classes)

    def delete(self, class_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM classes WHERE id=%s", (class_id,))
            return cur.rowcount > 0
