from __future__ import annotations

from typing import Sequence

from ..common.datetime_utils import as_date
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Holiday
from .repository import HolidayRepository


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, date, name FROM holidays ORDER BY date ASC")
            return [
                Holiday(holiday_id=str(r["id"]), date=as_date(r["date"]), name=r["name"])
                for r in fetchall(cur)
            ]

    def save(self, holiday: Holiday) -> Holiday:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO holidays(id, date, name) VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE date=VALUES(date), name=VALUES(name)
                """,
                (holiday.holiday_id, holiday.date, holiday.name),
            )
        return holiday

    def delete(self, holiday_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE id=%s", (holiday_id,))
            return cur.rowcount > 0
