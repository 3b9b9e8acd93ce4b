from __future__ import annotations

from datetime import date, datetime
from typing import Sequence

from ..core.enums import IssueType, ProcessType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_decimal, normalize_mysql_time
from .model import AttendanceSummary
from .repository import AttendanceSummaryRepository

_SENT_COLUMNS = {
    ProcessType.MORNING: ("entry_notification_sent", "entry_notification_sent_at"),
    ProcessType.EVENING: ("exit_notification_sent", "exit_notification_sent_at"),
}


def _float_or_none(value):
    return float(value) if value is not None else None


class MySQLAttendanceSummaryRepository(AttendanceSummaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert_summary(self, summary: AttendanceSummary) -> None:
        # Review state (is_confirmed) and notification flags are left alone on update.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO saved_attendance(
                    employee_code, attendance_date, in_time, out_time,
                    total_hours, expected_hours, difference_hours, record_status,
                    deduction_rule_id, deduction_rule_ids, deduction_amount,
                    auto_processed, processing_source, has_issues, issue_type,
                    is_confirmed, saved_by, saved_at, filter_from_date, filter_to_date
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    in_time=VALUES(in_time),
                    out_time=VALUES(out_time),
                    total_hours=VALUES(total_hours),
                    expected_hours=VALUES(expected_hours),
                    difference_hours=VALUES(difference_hours),
                    record_status=VALUES(record_status),
                    deduction_rule_id=VALUES(deduction_rule_id),
                    deduction_rule_ids=VALUES(deduction_rule_ids),
                    deduction_amount=VALUES(deduction_amount),
                    auto_processed=VALUES(auto_processed),
                    processing_source=VALUES(processing_source),
                    has_issues=VALUES(has_issues),
                    issue_type=VALUES(issue_type),
                    saved_by=VALUES(saved_by),
                    saved_at=VALUES(saved_at),
                    filter_from_date=VALUES(filter_from_date),
                    filter_to_date=VALUES(filter_to_date)
                """,
                (
                    summary.employee_code,
                    summary.attendance_date,
                    summary.in_time,
                    summary.out_time,
                    summary.total_hours,
                    summary.expected_hours,
                    summary.difference_hours,
                    summary.record_status,
                    summary.deduction_rule_id,
                    ",".join(summary.deduction_rule_ids) or None,
                    summary.deduction_amount,
                    int(summary.auto_processed),
                    summary.processing_source,
                    int(summary.has_issues),
                    summary.issue_type.value if summary.issue_type else None,
                    int(summary.is_confirmed),
                    summary.saved_by,
                    summary.saved_at,
                    summary.attendance_date,
                    summary.attendance_date,
                ),
            )

    def mark_notification_sent(
        self,
        *,
        employee_code: str,
        attendance_date: date,
        process_type: ProcessType,
        sent_at: datetime,
    ) -> bool:
        flag_col, at_col = _SENT_COLUMNS[process_type]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE saved_attendance
                SET {flag_col}=1, {at_col}=%s
                WHERE employee_code=%s AND attendance_date=%s
                """,
                (sent_at, employee_code, attendance_date),
            )
            return cur.rowcount > 0

    def list_pending_deduction_notifications(self, attendance_date: date) -> Sequence[AttendanceSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, employee_code, attendance_date, in_time, out_time,
                       total_hours, expected_hours, difference_hours,
                       deduction_rule_id, deduction_rule_ids, deduction_amount,
                       has_issues, issue_type, is_confirmed, saved_by, saved_at
                FROM saved_attendance
                WHERE attendance_date=%s
                  AND has_issues=1
                  AND deduction_notification_sent=0
                  AND deduction_amount > 0
                ORDER BY employee_code
                """,
                (attendance_date,),
            )
            return [
                AttendanceSummary(
                    summary_id=int(r["id"]),
                    employee_code=str(r["employee_code"]),
                    attendance_date=r["attendance_date"],
                    in_time=normalize_mysql_time(r.get("in_time")),
                    out_time=normalize_mysql_time(r.get("out_time")),
                    total_hours=_float_or_none(r.get("total_hours")),
                    expected_hours=_float_or_none(r.get("expected_hours")),
                    difference_hours=_float_or_none(r.get("difference_hours")),
                    deduction_amount=normalize_decimal(r["deduction_amount"]),
                    deduction_rule_id=r.get("deduction_rule_id"),
                    deduction_rule_ids=tuple(filter(None, (r.get("deduction_rule_ids") or "").split(","))),
                    has_issues=bool(r["has_issues"]),
                    issue_type=IssueType(r["issue_type"]) if r.get("issue_type") else None,
                    is_confirmed=bool(r.get("is_confirmed")),
                    saved_by=r.get("saved_by"),
                    saved_at=r.get("saved_at"),
                )
                for r in fetchall(cur)
            ]

    def mark_deduction_notification_sent(self, *, summary_id: int, sent_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE saved_attendance
                SET deduction_notification_sent=1, deduction_notification_sent_at=%s
                WHERE id=%s
                """,
                (sent_at, int(summary_id)),
            )
            return cur.rowcount > 0
