from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Optional, Sequence

from ..attendance.repository import AttendanceSummaryRepository
from ..common.datetime_utils import now_local
from ..core.enums import NotificationType
from . import messages
from .mailer import MailSender
from .model import DispatchReport, Notification, QueuedNotification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Announce a run's outcomes: in-app row, sent flag, then best-effort email.

    Every step is caught on its own; nothing here can fail the run or affect
    another employee. Only a failed in-app insert counts as a failed delivery.
    """

    def __init__(
        self,
        notifications: NotificationRepository,
        summaries: AttendanceSummaryRepository,
        *,
        mailer: Optional[MailSender] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._notifications = notifications
        self._summaries = summaries
        self._mailer = mailer
        self._clock = clock

    def dispatch(self, queued: Sequence[QueuedNotification], *, target_date: date) -> DispatchReport:
        report = DispatchReport()
        for item in queued:
            error = self._dispatch_one(item, target_date=target_date)
            if error is None:
                report.sent += 1
            else:
                report.failures[item.employee_code] = error
        logger.info("Sent %d of %d attendance notifications", report.sent, len(queued))
        return report

    def _dispatch_one(self, item: QueuedNotification, *, target_date: date) -> Optional[str]:
        title = messages.attendance_title(item.process_type)
        body = messages.attendance_body(
            item.process_type,
            in_time=item.payload.get("in_time"),
            out_time=item.payload.get("out_time"),
            late_minutes=int(item.payload.get("late_minutes") or 0),
            deduction_amount=Decimal(str(item.payload.get("deduction_amount") or 0)),
        )
        error: Optional[str] = None

        try:
            self._notifications.insert(
                Notification(
                    user_id=item.user_id,
                    title=title,
                    body=body,
                    type=NotificationType.ATTENDANCE,
                    data=dict(item.payload),
                )
            )
        except Exception as e:
            logger.error("Error creating notification for %s: %s", item.employee_code, e)
            error = str(e)

        if error is None:
            try:
                self._summaries.mark_notification_sent(
                    employee_code=item.employee_code,
                    attendance_date=target_date,
                    process_type=item.process_type,
                    sent_at=self._clock(),
                )
            except Exception as e:
                logger.error("Error updating notification flag for %s: %s", item.employee_code, e)

        if item.email and self._mailer is not None:
            try:
                self._mailer.send(
                    to=item.email,
                    subject=title,
                    html=messages.attendance_email_html(title=title, body=body, target_date=target_date),
                )
            except Exception as e:
                logger.warning("Error sending email to %s: %s", item.employee_code, e)

        return error
