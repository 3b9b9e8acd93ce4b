from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from ..attendance.repository import AttendanceSummaryRepository
from ..common.datetime_utils import now_local, yesterday_local
from ..common.time_utils import format_short_time, format_time
from ..core.enums import NotificationType
from ..core.exceptions import SourceReadError
from ..deductions.repository import DeductionRuleRepository
from ..employees.repository import EmployeeRepository
from . import messages
from .mailer import MailSender
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeductionNotificationResult:
    target_date: date
    count: int

    def to_dict(self) -> dict:
        if self.count == 0:
            message = "No deduction notifications to send"
        else:
            message = f"Sent {self.count} deduction notifications"
        return {"success": True, "message": message, "count": self.count}


class DeductionNotificationService:
    """Tell employees about the deductions a processing run recorded for them.

    Runs the day after processing (defaults to yesterday) and sends each
    summary at most once, guarded by its ``deduction_notification_sent`` flag.
    """

    def __init__(
        self,
        summaries: AttendanceSummaryRepository,
        employees: EmployeeRepository,
        rules: DeductionRuleRepository,
        notifications: NotificationRepository,
        *,
        mailer: Optional[MailSender] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._summaries = summaries
        self._employees = employees
        self._rules = rules
        self._notifications = notifications
        self._mailer = mailer
        self._clock = clock

    def notify_pending(self, target_date: Optional[date] = None) -> DeductionNotificationResult:
        target_date = target_date or yesterday_local()
        logger.info("Sending deduction notifications for date: %s", target_date)

        try:
            records = list(self._summaries.list_pending_deduction_notifications(target_date))
            if not records:
                return DeductionNotificationResult(target_date=target_date, count=0)

            codes = sorted({r.employee_code for r in records})
            employees = {e.zk_employee_code: e for e in self._employees.list_by_zk_codes(codes)}
            rule_ids = sorted({r.deduction_rule_id for r in records if r.deduction_rule_id})
            rules = {r.rule_id: r for r in self._rules.get_by_ids(rule_ids)}
        except Exception as e:
            raise SourceReadError(str(e)) from e

        sent = 0
        for record in records:
            employee = employees.get(record.employee_code)
            if employee is None or not employee.user_id:
                continue

            rule = rules.get(record.deduction_rule_id) if record.deduction_rule_id else None
            reason = rule.display_name if rule else messages.DEFAULT_DEDUCTION_REASON
            body = messages.deduction_body(amount=record.deduction_amount, target_date=target_date, reason=reason)

            try:
                self._notifications.insert(
                    Notification(
                        user_id=employee.user_id,
                        title=messages.DEDUCTION_TITLE,
                        body=body,
                        type=NotificationType.DEDUCTION,
                        data={
                            "date": target_date.strftime("%Y-%m-%d"),
                            "in_time": format_time(record.in_time),
                            "out_time": format_time(record.out_time),
                            "deduction_amount": float(record.deduction_amount),
                            "deduction_rule": reason,
                        },
                    )
                )
            except Exception as e:
                logger.error("Error creating notification for %s: %s", record.employee_code, e)
                continue

            try:
                if record.summary_id is not None:
                    self._summaries.mark_deduction_notification_sent(summary_id=record.summary_id, sent_at=self._clock())
            except Exception as e:
                logger.error("Error updating deduction flag for %s: %s", record.employee_code, e)

            if employee.email and self._mailer is not None:
                try:
                    self._mailer.send(
                        to=employee.email,
                        subject=messages.DEDUCTION_TITLE,
                        html=messages.deduction_email_html(
                            body=body,
                            target_date=target_date,
                            in_time=format_short_time(record.in_time),
                            out_time=format_short_time(record.out_time),
                            amount=record.deduction_amount,
                            reason=reason,
                        ),
                    )
                except Exception as e:
                    logger.warning("Error sending email to %s: %s", record.employee_code, e)

            sent += 1

        logger.info("Sent %d deduction notifications", sent)
        return DeductionNotificationResult(target_date=target_date, count=sent)
