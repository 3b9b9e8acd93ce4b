from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..attendance_types.model import AttendanceType
from ..core.actor import Actor
from ..core.constants import ABSENCE_REASON_NO_CHECKIN, DEFAULT_ISSUE_LATE_THRESHOLD_MINUTES
from ..core.enums import IssueType, OutcomeStatus, ProcessType
from ..deductions.model import DeductionResult
from ..employees.model import Employee
from ..punches.model import ResolvedPunches
from .model import AttendanceSummary, TimesheetEntry, VarianceResult
from .repository import AttendanceSummaryRepository, TimesheetRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailyFacts:
    """Everything computed for one employee on one date, before anything is written."""

    employee: Employee
    attendance_type: Optional[AttendanceType]
    target_date: date
    process_type: ProcessType
    punches: ResolvedPunches
    variance: VarianceResult
    deduction: DeductionResult
    is_absent: bool

    @property
    def persisted_out_time(self):
        # Morning runs never persist a check-out even if one was resolved.
        return self.punches.out_time if self.process_type is ProcessType.EVENING else None


@dataclass(frozen=True)
class MaterializeOutcome:
    summary: AttendanceSummary
    timesheet: TimesheetEntry
    status: OutcomeStatus
    error: Optional[str] = None

    @property
    def timesheet_written(self) -> bool:
        return self.status is not OutcomeStatus.TIMESHEET_WRITE_FAILED


def classify_issues(
    *,
    deduction_amount: Decimal,
    late_minutes: int,
    early_exit_minutes: int,
    has_in_time: bool,
    has_out_time: bool,
    process_type: ProcessType,
    late_threshold_minutes: int = DEFAULT_ISSUE_LATE_THRESHOLD_MINUTES,
) -> tuple[bool, Optional[IssueType]]:
    """Return ``(has_issues, issue_type)``; issue_type is the highest-precedence reason."""

    reasons = [
        (deduction_amount > 0, IssueType.DEDUCTION),
        (late_minutes > late_threshold_minutes, IssueType.LATE),
        (early_exit_minutes > 0, IssueType.EARLY_EXIT),
        (not has_in_time, IssueType.MISSING_IN),
        (process_type is ProcessType.EVENING and not has_out_time, IssueType.MISSING_OUT),
    ]
    for triggered, issue in reasons:
        if triggered:
            return True, issue
    return False, None


class RecordMaterializer:
    """Upsert the summary and timesheet rows for one employee-day.

    A failed summary write is tolerated and the timesheet is still attempted;
    a failed timesheet write is reported so the caller drops the employee for
    the rest of the run.
    """

    def __init__(
        self,
        summaries: AttendanceSummaryRepository,
        timesheets: TimesheetRepository,
        *,
        late_threshold_minutes: int = DEFAULT_ISSUE_LATE_THRESHOLD_MINUTES,
    ):
        self._summaries = summaries
        self._timesheets = timesheets
        self._late_threshold = int(late_threshold_minutes)

    def build_summary(self, facts: DailyFacts, *, actor: Actor, saved_at: datetime) -> AttendanceSummary:
        has_issues, issue_type = classify_issues(
            deduction_amount=facts.deduction.amount,
            late_minutes=facts.variance.late_minutes,
            early_exit_minutes=facts.variance.early_exit_minutes,
            has_in_time=facts.punches.in_time is not None,
            has_out_time=facts.punches.out_time is not None,
            process_type=facts.process_type,
            late_threshold_minutes=self._late_threshold,
        )
        return AttendanceSummary(
            employee_code=str(facts.employee.zk_employee_code),
            attendance_date=facts.target_date,
            in_time=facts.punches.in_time,
            out_time=facts.persisted_out_time,
            total_hours=facts.variance.total_hours,
            expected_hours=facts.variance.expected_hours,
            difference_hours=facts.variance.difference_hours,
            deduction_amount=facts.deduction.amount,
            deduction_rule_id=facts.deduction.rule_id,
            deduction_rule_ids=facts.deduction.rule_ids,
            has_issues=has_issues,
            issue_type=issue_type,
            saved_by=actor.user_id,
            saved_at=saved_at,
        )

    def build_timesheet(self, facts: DailyFacts) -> TimesheetEntry:
        attendance_type = facts.attendance_type
        total_hours = facts.variance.total_hours
        return TimesheetEntry(
            employee_id=facts.employee.employee_id,
            work_date=facts.target_date,
            scheduled_start=attendance_type.fixed_start_time if attendance_type else None,
            scheduled_end=attendance_type.fixed_end_time if attendance_type else None,
            actual_start=facts.punches.in_time,
            actual_end=facts.persisted_out_time,
            is_absent=facts.is_absent,
            absence_reason=ABSENCE_REASON_NO_CHECKIN if facts.is_absent else None,
            late_minutes=facts.variance.late_minutes,
            early_leave_minutes=facts.variance.early_exit_minutes,
            total_work_minutes=round(total_hours * 60) if total_hours else 0,
            deduction_amount=facts.deduction.amount,
            notes=f"Auto-processed from ZK attendance ({facts.process_type.value})",
        )

    def materialize(self, facts: DailyFacts, *, actor: Actor, saved_at: datetime) -> MaterializeOutcome:
        summary = self.build_summary(facts, actor=actor, saved_at=saved_at)
        timesheet = self.build_timesheet(facts)
        status = OutcomeStatus.OK
        error: Optional[str] = None

        try:
            self._summaries.upsert_summary(summary)
        except Exception as e:
            logger.error("Error upserting attendance summary for %s: %s", summary.employee_code, e, exc_info=True)
            status, error = OutcomeStatus.SUMMARY_WRITE_FAILED, str(e)

        try:
            self._timesheets.upsert_timesheet(timesheet)
        except Exception as e:
            logger.error("Error upserting timesheet for employee %s: %s", timesheet.employee_id, e, exc_info=True)
            status, error = OutcomeStatus.TIMESHEET_WRITE_FAILED, str(e)

        return MaterializeOutcome(summary=summary, timesheet=timesheet, status=status, error=error)
