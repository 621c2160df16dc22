from __future__ import annotations

from typing import Sequence

from ..common.datetime_utils import as_date
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, load_json
from .model import AttendanceRecord
from .repository import AttendanceRepository


def row_to_record(row: dict) -> AttendanceRecord:
    raw = load_json(row.get("statuses"), {})
    return AttendanceRecord(
        record_id=str(row["id"]),
        class_id=str(row["class_id"]),
        date=as_date(row["date"]),
        # null values are treated as unmarked, same as a missing key
        statuses={sid: AttendanceStatus(v) for sid, v in raw.items() if v},
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, date, class_id, statuses FROM attendance_records ORDER BY date ASC")
            return [row_to_record(r) for r in fetchall(cur)]

    def save(self, record: AttendanceRecord) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(id, date, class_id, statuses)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE statuses=VALUES(statuses)
                """,
                (
                    record.record_id,
                    record.date,
                    record.class_id,
                    dump_json({sid: s.value for sid, s in record.statuses.items()}),
                ),
            )
        return record
