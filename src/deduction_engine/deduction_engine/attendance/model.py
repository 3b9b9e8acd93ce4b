from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from ..common.time_utils import format_time
from ..core.constants import PROCESSING_SOURCE, RECORD_STATUS_NORMAL, TIMESHEET_STATUS_PENDING
from ..core.enums import IssueType, OutcomeStatus, ProcessType


@dataclass(frozen=True)
class VarianceResult:
    late_minutes: int = 0
    early_exit_minutes: int = 0
    total_hours: Optional[float] = None
    expected_hours: Optional[float] = None
    difference_hours: Optional[float] = None


@dataclass(frozen=True)
class AttendanceSummary:
    """Derived day-level attendance record, one per (employee_code, attendance_date).

    Written by the engine, later confirmed or edited by a human reviewer.
    """

    employee_code: str
    attendance_date: date
    in_time: Optional[time]
    out_time: Optional[time]
    total_hours: Optional[float]
    expected_hours: Optional[float]
    difference_hours: Optional[float]
    deduction_amount: Decimal
    deduction_rule_id: Optional[str]
    has_issues: bool
    issue_type: Optional[IssueType]
    saved_by: Optional[str]
    saved_at: datetime
    deduction_rule_ids: tuple[str, ...] = ()
    record_status: str = RECORD_STATUS_NORMAL
    auto_processed: bool = True
    processing_source: str = PROCESSING_SOURCE
    is_confirmed: bool = False
    summary_id: Optional[int] = None


@dataclass(frozen=True)
class TimesheetEntry:
    """Derived payroll timesheet row, one per (employee_id, work_date)."""

    employee_id: str
    work_date: date
    scheduled_start: Optional[time]
    scheduled_end: Optional[time]
    actual_start: Optional[time]
    actual_end: Optional[time]
    is_absent: bool
    absence_reason: Optional[str]
    late_minutes: int
    early_leave_minutes: int
    total_work_minutes: int
    deduction_amount: Decimal
    notes: str
    break_duration_minutes: int = 0
    status: str = TIMESHEET_STATUS_PENDING
    overtime_minutes: int = 0
    overtime_amount: Decimal = Decimal("0.00")


@dataclass(frozen=True)
class EmployeeResult:
    """One row of the run output for an employee whose records were written."""

    employee_code: str
    date: date
    in_time: Optional[time]
    out_time: Optional[time]
    late_minutes: int
    early_exit_minutes: int
    deduction_amount: Decimal
    deduction_rule_id: Optional[str]
    has_issues: bool
    issue_type: Optional[IssueType]

    def to_dict(self) -> dict:
        return {
            "employee_code": self.employee_code,
            "date": self.date.strftime("%Y-%m-%d"),
            "in_time": format_time(self.in_time),
            "out_time": format_time(self.out_time),
            "late_minutes": self.late_minutes,
            "early_exit_minutes": self.early_exit_minutes,
            "deduction_amount": float(self.deduction_amount),
            "deduction_rule_id": self.deduction_rule_id,
            "has_issues": self.has_issues,
            "issue_type": self.issue_type.value if self.issue_type else None,
        }


@dataclass(frozen=True)
class EmployeeOutcome:
    employee_code: str
    status: OutcomeStatus
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {"employee_code": self.employee_code, "status": self.status.value, "error": self.error}


@dataclass(frozen=True)
class ProcessingRequest:
    process_type: ProcessType
    target_date: date
    send_notifications: bool = True


@dataclass
class ProcessingRunResult:
    process_type: ProcessType
    target_date: date
    results: list[EmployeeResult] = field(default_factory=list)
    outcomes: list[EmployeeOutcome] = field(default_factory=list)
    notifications_sent: int = 0
    consumed_punch_count: int = 0

    @property
    def processed_count(self) -> int:
        return len(self.results)

    @property
    def message(self) -> str:
        return f"Processed {self.processed_count} attendance records"

    def to_dict(self) -> dict:
        return {
            "success": True,
            "message": self.message,
            "processed_count": self.processed_count,
            "notifications_sent": self.notifications_sent,
            "results": [r.to_dict() for r in self.results],
            "outcomes": [o.to_dict() for o in self.outcomes],
        }
