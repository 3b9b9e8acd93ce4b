from __future__ import annotations

from datetime import date, datetime
from typing import Protocol, Sequence

from ..core.enums import ProcessType
from .model import AttendanceSummary, TimesheetEntry


class AttendanceSummaryRepository(Protocol):
    def upsert_summary(self, summary: AttendanceSummary) -> None:
        """Insert or update keyed by (employee_code, attendance_date)."""

        raise NotImplementedError

    def mark_notification_sent(
        self,
        *,
        employee_code: str,
        attendance_date: date,
        process_type: ProcessType,
        sent_at: datetime,
    ) -> bool:
        """Set the entry (morning) or exit (evening) notification flag."""

        raise NotImplementedError

    def list_pending_deduction_notifications(self, attendance_date: date) -> Sequence[AttendanceSummary]:
        """Summaries with issues and a positive deduction not yet notified."""

        raise NotImplementedError

    def mark_deduction_notification_sent(self, *, summary_id: int, sent_at: datetime) -> bool:
        raise NotImplementedError


class TimesheetRepository(Protocol):
    def upsert_timesheet(self, entry: TimesheetEntry) -> None:
        """Insert or update keyed by (employee_id, work_date)."""

        raise NotImplementedError
