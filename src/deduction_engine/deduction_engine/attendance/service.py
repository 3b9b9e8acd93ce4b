from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..attendance_types.repository import AttendanceTypeRepository
from ..common.datetime_utils import now_local
from ..common.time_utils import format_time
from ..core.actor import Actor
from ..core.enums import OutcomeStatus, ProcessType
from ..core.exceptions import SourceReadError
from ..deductions.calculator.base import DeductionCalculator
from ..deductions.calculator.standard_calculator import StandardDeductionCalculator
from ..deductions.overlap import find_overlapping_rules
from ..deductions.repository import DeductionRuleRepository
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..notifications.model import QueuedNotification
from ..notifications.service import NotificationDispatcher
from ..punches.repository import PunchRepository
from ..punches.resolver import PunchResolver, group_by_employee
from .materializer import DailyFacts, RecordMaterializer
from .model import EmployeeOutcome, EmployeeResult, ProcessingRequest, ProcessingRunResult
from .variance import compute_variance

logger = logging.getLogger(__name__)


class AttendanceProcessingService:
    """Turn one date's raw punches into summaries, timesheets and notifications.

    Source reads are all-or-nothing: if any of them fails the run raises
    ``SourceReadError`` before writing anything. After that, every failure is
    scoped to a single employee and reported in ``ProcessingRunResult.outcomes``.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        attendance_types: AttendanceTypeRepository,
        deduction_rules: DeductionRuleRepository,
        punches: PunchRepository,
        materializer: RecordMaterializer,
        dispatcher: NotificationDispatcher,
        *,
        calculator: DeductionCalculator | None = None,
        resolver: PunchResolver | None = None,
        consume_punches_per_employee: bool = False,
        clock: Callable[[], datetime] = now_local,
    ):
        self._employees = employees
        self._attendance_types = attendance_types
        self._rules = deduction_rules
        self._punches = punches
        self._materializer = materializer
        self._dispatcher = dispatcher
        self._calculator = calculator or StandardDeductionCalculator()
        self._resolver = resolver or PunchResolver()
        self._consume_per_employee = bool(consume_punches_per_employee)
        self._clock = clock

    def process(self, request: ProcessingRequest, actor: Actor | None = None) -> ProcessingRunResult:
        actor = actor or Actor.system()
        target_date = request.target_date
        logger.info("Processing %s attendance for %s", request.process_type.value, target_date)

        try:
            employees = list(self._employees.list_active_with_zk_code())
            attendance_types = {t.type_id: t for t in self._attendance_types.list_all()}
            rules = list(self._rules.list_active())
            punches = list(self._punches.list_for_date(target_date))
        except Exception as e:
            logger.error("Error reading attendance sources for %s: %s", target_date, e, exc_info=True)
            raise SourceReadError(str(e)) from e

        for first, second in find_overlapping_rules(rules):
            logger.warning(
                "Deduction rules %s and %s overlap (%s); %s wins by order",
                first.rule_id,
                second.rule_id,
                first.rule_type,
                first.rule_id,
            )

        by_employee = group_by_employee(punches)
        run = ProcessingRunResult(process_type=request.process_type, target_date=target_date)
        queued: list[QueuedNotification] = []
        pending_punch_ids: list[int] = []

        for employee in employees:
            employee_punches = by_employee.get(str(employee.zk_employee_code), [])
            resolved = self._resolver.resolve(employee_punches)

            if request.process_type is ProcessType.MORNING and resolved.in_time is None:
                continue

            attendance_type = attendance_types.get(employee.attendance_type_id) if employee.attendance_type_id else None
            out_time = resolved.out_time if request.process_type is ProcessType.EVENING else None
            variance = compute_variance(in_time=resolved.in_time, out_time=out_time, attendance_type=attendance_type)
            is_absent = request.process_type is ProcessType.EVENING and resolved.in_time is None
            deduction = self._calculator.compute(
                late_minutes=variance.late_minutes,
                early_exit_minutes=variance.early_exit_minutes,
                is_absent=is_absent,
                basic_salary=employee.basic_salary,
                rules=rules,
            )

            facts = DailyFacts(
                employee=employee,
                attendance_type=attendance_type,
                target_date=target_date,
                process_type=request.process_type,
                punches=resolved,
                variance=variance,
                deduction=deduction,
                is_absent=is_absent,
            )
            outcome = self._materializer.materialize(facts, actor=actor, saved_at=self._clock())
            run.outcomes.append(
                EmployeeOutcome(employee_code=str(employee.zk_employee_code), status=outcome.status, error=outcome.error)
            )
            if not outcome.timesheet_written:
                continue

            summary = outcome.summary
            run.results.append(
                EmployeeResult(
                    employee_code=summary.employee_code,
                    date=target_date,
                    in_time=summary.in_time,
                    out_time=resolved.out_time,
                    late_minutes=variance.late_minutes,
                    early_exit_minutes=variance.early_exit_minutes,
                    deduction_amount=deduction.amount,
                    deduction_rule_id=deduction.rule_id,
                    has_issues=summary.has_issues,
                    issue_type=summary.issue_type,
                )
            )

            punch_ids = [p.punch_id for p in employee_punches if not p.is_processed]
            if self._consume_per_employee:
                run.consumed_punch_count += self._consume(punch_ids)
            else:
                pending_punch_ids.extend(punch_ids)

            if request.send_notifications and employee.user_id:
                queued.append(self._queue_notification(employee, run.results[-1], request.process_type))

        if pending_punch_ids:
            run.consumed_punch_count += self._consume(pending_punch_ids)

        if queued:
            report = self._dispatcher.dispatch(queued, target_date=target_date)
            run.notifications_sent = report.sent
            if report.failures:
                run.outcomes = [self._with_notify_failure(o, report.failures) for o in run.outcomes]

        logger.info(
            "Processed %d attendance records for %s (%s), %d notifications sent",
            run.processed_count,
            target_date,
            request.process_type.value,
            run.notifications_sent,
        )
        return run

    def _consume(self, punch_ids: Sequence[int]) -> int:
        if not punch_ids:
            return 0
        try:
            return self._punches.mark_processed(punch_ids, processed_at=self._clock())
        except Exception as e:
            logger.error("Error marking %d punches as processed: %s", len(punch_ids), e, exc_info=True)
            return 0

    @staticmethod
    def _queue_notification(employee: Employee, result: EmployeeResult, process_type: ProcessType) -> QueuedNotification:
        return QueuedNotification(
            employee_code=result.employee_code,
            user_id=str(employee.user_id),
            email=employee.email,
            employee_name=employee.full_name,
            process_type=process_type,
            payload={
                "date": result.date.strftime("%Y-%m-%d"),
                "process_type": process_type.value,
                "in_time": format_time(result.in_time),
                "out_time": format_time(result.out_time),
                "late_minutes": result.late_minutes,
                "early_exit_minutes": result.early_exit_minutes,
                "deduction_amount": float(result.deduction_amount),
            },
        )

    @staticmethod
    def _with_notify_failure(outcome: EmployeeOutcome, failures: dict[str, str]) -> EmployeeOutcome:
        error: Optional[str] = failures.get(outcome.employee_code)
        if error is None or outcome.status is not OutcomeStatus.OK:
            return outcome
        return EmployeeOutcome(employee_code=outcome.employee_code, status=OutcomeStatus.NOTIFY_FAILED, error=error)
