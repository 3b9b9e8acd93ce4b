from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.materializer import RecordMaterializer
from .attendance.mysql_attendance_repository import MySQLAttendanceSummaryRepository
from .attendance.mysql_timesheet_repository import MySQLTimesheetRepository
from .attendance.service import AttendanceProcessingService
from .attendance_types.mysql_attendance_type_repository import MySQLAttendanceTypeRepository
from .core.constants import (
    DEFAULT_ISSUE_LATE_THRESHOLD_MINUTES,
    DEFAULT_MAIL_TIMEOUT_SECONDS,
    DEFAULT_OUT_WINDOW_END,
    DEFAULT_OUT_WINDOW_START,
)
from .database.connection import DBConfig, DatabaseConnection
from .deductions.calculator.standard_calculator import StandardDeductionCalculator
from .deductions.factory import DeductionStrategyFactory
from .deductions.mysql_deduction_rule_repository import MySQLDeductionRuleRepository
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .notifications.deduction_service import DeductionNotificationService
from .notifications.mailer import HttpMailSender, MailSender
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.service import NotificationDispatcher
from .punches.mysql_punch_repository import MySQLPunchRepository
from .punches.resolver import PunchResolver


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    attendance_types_repo: MySQLAttendanceTypeRepository
    deduction_rules_repo: MySQLDeductionRuleRepository
    punches_repo: MySQLPunchRepository
    summaries_repo: MySQLAttendanceSummaryRepository
    timesheets_repo: MySQLTimesheetRepository
    notifications_repo: MySQLNotificationRepository

    mailer: Optional[MailSender]
    processing_service: AttendanceProcessingService
    deduction_notification_service: DeductionNotificationService


def build_mailer(settings) -> Optional[MailSender]:
    url = getattr(settings, "MAIL_SERVICE_URL", None)
    if not url:
        return None
    return HttpMailSender(
        url,
        token=getattr(settings, "MAIL_SERVICE_TOKEN", None),
        timeout=float(getattr(settings, "MAIL_TIMEOUT_SECONDS", DEFAULT_MAIL_TIMEOUT_SECONDS)),
    )


def build_container(*, db_config: dict, settings=None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    attendance_types_repo = MySQLAttendanceTypeRepository(conn)
    deduction_rules_repo = MySQLDeductionRuleRepository(conn)
    punches_repo = MySQLPunchRepository(conn)
    summaries_repo = MySQLAttendanceSummaryRepository(conn)
    timesheets_repo = MySQLTimesheetRepository(conn)
    notifications_repo = MySQLNotificationRepository(conn)

    mailer = build_mailer(settings)
    materializer = RecordMaterializer(
        summaries_repo,
        timesheets_repo,
        late_threshold_minutes=int(
            getattr(settings, "ISSUE_LATE_THRESHOLD_MINUTES", DEFAULT_ISSUE_LATE_THRESHOLD_MINUTES)
        ),
    )
    dispatcher = NotificationDispatcher(notifications_repo, summaries_repo, mailer=mailer)
    processing_service = AttendanceProcessingService(
        employees_repo,
        attendance_types_repo,
        deduction_rules_repo,
        punches_repo,
        materializer,
        dispatcher,
        calculator=StandardDeductionCalculator(strategy_factory=DeductionStrategyFactory()),
        resolver=PunchResolver(
            out_window_start=getattr(settings, "OUT_WINDOW_START", DEFAULT_OUT_WINDOW_START),
            out_window_end=getattr(settings, "OUT_WINDOW_END", DEFAULT_OUT_WINDOW_END),
        ),
        consume_punches_per_employee=bool(getattr(settings, "CONSUME_PUNCHES_PER_EMPLOYEE", False)),
    )
    deduction_notification_service = DeductionNotificationService(
        summaries_repo,
        employees_repo,
        deduction_rules_repo,
        notifications_repo,
        mailer=mailer,
    )

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        attendance_types_repo=attendance_types_repo,
        deduction_rules_repo=deduction_rules_repo,
        punches_repo=punches_repo,
        summaries_repo=summaries_repo,
        timesheets_repo=timesheets_repo,
        notifications_repo=notifications_repo,
        mailer=mailer,
        processing_service=processing_service,
        deduction_notification_service=deduction_notification_service,
    )
