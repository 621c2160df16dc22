from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..classes.model import SchoolClass
from ..classes.mysql_class_repository import upsert_class
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from ..students.model import Student
from ..students.mysql_student_repository import upsert_student
from .repository import RosterStore

logger = logging.getLogger(__name__)


class MySQLRosterStore(RosterStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def save_batch(
        self,
        *,
        students: Sequence[Student] = (),
        classes: Sequence[SchoolClass] = (),
        delete_student_id: Optional[str] = None,
        delete_class_id: Optional[str] = None,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            if delete_student_id is not None:
                cur.execute("DELETE FROM students WHERE id=%s", (delete_student_id,))
            if delete_class_id is not None:
                cur.execute("DELETE FROM classes WHERE id=%s", (delete_class_id,))
            for student in students:
                upsert_student(cur, student)
            for school_class in classes:
                upsert_class(cur, school_class)
        logger.debug("Roster batch committed: %d students, %d classes", len(students), len(classes))
