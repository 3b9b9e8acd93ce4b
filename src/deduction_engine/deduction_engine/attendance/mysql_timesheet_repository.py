from __future__ import annotations

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import TimesheetEntry
from .repository import TimesheetRepository


class MySQLTimesheetRepository(TimesheetRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert_timesheet(self, entry: TimesheetEntry) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO timesheets(
                    employee_id, work_date, scheduled_start, scheduled_end,
                    actual_start, actual_end, break_duration_minutes, status,
                    is_absent, absence_reason, late_minutes, early_leave_minutes,
                    overtime_minutes, total_work_minutes, deduction_amount,
                    overtime_amount, notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    scheduled_start=VALUES(scheduled_start),
                    scheduled_end=VALUES(scheduled_end),
                    actual_start=VALUES(actual_start),
                    actual_end=VALUES(actual_end),
                    break_duration_minutes=VALUES(break_duration_minutes),
                    status=VALUES(status),
                    is_absent=VALUES(is_absent),
                    absence_reason=VALUES(absence_reason),
                    late_minutes=VALUES(late_minutes),
                    early_leave_minutes=VALUES(early_leave_minutes),
                    overtime_minutes=VALUES(overtime_minutes),
                    total_work_minutes=VALUES(total_work_minutes),
                    deduction_amount=VALUES(deduction_amount),
                    overtime_amount=VALUES(overtime_amount),
                    notes=VALUES(notes)
                """,
                (
                    entry.employee_id,
                    entry.work_date,
                    entry.scheduled_start,
                    entry.scheduled_end,
                    entry.actual_start,
                    entry.actual_end,
                    entry.break_duration_minutes,
                    entry.status,
                    int(entry.is_absent),
                    entry.absence_reason,
                    entry.late_minutes,
                    entry.early_leave_minutes,
                    entry.overtime_minutes,
                    entry.total_work_minutes,
                    entry.deduction_amount,
                    entry.overtime_amount,
                    entry.notes,
                ),
            )
