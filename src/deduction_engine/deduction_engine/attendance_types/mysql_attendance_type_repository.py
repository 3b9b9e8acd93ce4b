from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_time
from .model import AttendanceType
from .repository import AttendanceTypeRepository


class MySQLAttendanceTypeRepository(AttendanceTypeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[AttendanceType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, type_name, fixed_start_time, fixed_end_time,
                       allow_late_minutes, allow_early_exit_minutes
                FROM attendance_types
                ORDER BY type_name
                """
            )
            return [
                AttendanceType(
                    type_id=str(r["id"]),
                    type_name=r["type_name"],
                    fixed_start_time=normalize_mysql_time(r.get("fixed_start_time")),
                    fixed_end_time=normalize_mysql_time(r.get("fixed_end_time")),
                    allow_late_minutes=int(r.get("allow_late_minutes") or 0),
                    allow_early_exit_minutes=int(r.get("allow_early_exit_minutes") or 0),
                )
                for r in fetchall(cur)
            ]
