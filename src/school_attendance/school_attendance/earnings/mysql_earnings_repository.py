from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from ..common.datetime_utils import parse_iso_date
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, load_json
from .model import EarningsRecord
from .repository import EarningsRepository


def _row_to_record(row: dict) -> EarningsRecord:
    return EarningsRecord(
        record_id=str(row["id"]),
        month=row["month"],
        value_per_class=Decimal(str(row.get("value_per_class") or 0)),
        classes_per_day=int(row.get("classes_per_day") or 1),
        total_classes=int(row.get("total_classes") or 0),
        total_amount=Decimal(str(row.get("total_amount") or 0)),
        selected_days=tuple(sorted(parse_iso_date(d) for d in load_json(row.get("selected_days"), []))),
        updated_at=row.get("updated_at"),
    )


class MySQLEarningsRepository(EarningsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[EarningsRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, month, value_per_class, classes_per_day, total_classes,
                       total_amount, selected_days, updated_at
                FROM earnings_records
                """
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def save(self, record: EarningsRecord) -> EarningsRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO earnings_records(
                    id, month, value_per_class, classes_per_day, total_classes,
                    total_amount, selected_days, updated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    value_per_class=VALUES(value_per_class), classes_per_day=VALUES(classes_per_day),
                    total_classes=VALUES(total_classes), total_amount=VALUES(total_amount),
                    selected_days=VALUES(selected_days), updated_at=VALUES(updated_at)
                """,
                (
                    record.record_id,
                    record.month,
                    record.value_per_class,
                    int(record.classes_per_day),
                    int(record.total_classes),
                    record.total_amount,
                    dump_json([d.isoformat() for d in record.selected_days]),
                    record.updated_at,
                ),
            )
        return record

    def delete(self, record_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM earnings_records WHERE id=%s", (record_id,))
            return cur.rowcount > 0
