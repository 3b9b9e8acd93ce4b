from __future__ import annotations

from datetime import date, datetime
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause, normalize_mysql_time
from .model import RawPunch
from .repository import PunchRepository


class MySQLPunchRepository(PunchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_date(self, attendance_date: date) -> Sequence[RawPunch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, employee_code, attendance_date, attendance_time, record_type, is_processed
                FROM zk_attendance_logs
                WHERE attendance_date=%s
                ORDER BY attendance_time ASC, id ASC
                """,
                (attendance_date,),
            )
            return [
                RawPunch(
                    punch_id=int(r["id"]),
                    employee_code=str(r["employee_code"]),
                    attendance_date=r["attendance_date"],
                    attendance_time=normalize_mysql_time(r["attendance_time"]),
                    record_type=r.get("record_type"),
                    is_processed=bool(r.get("is_processed")),
                )
                for r in fetchall(cur)
            ]

    def mark_processed(self, punch_ids: Sequence[int], *, processed_at: datetime) -> int:
        if not punch_ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE zk_attendance_logs
                SET is_processed=1, processed_at=%s
                WHERE id IN ({in_clause(punch_ids)})
                """,
                (processed_at, *[int(i) for i in punch_ids]),
            )
            return cur.rowcount
