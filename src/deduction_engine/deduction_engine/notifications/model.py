from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..core.enums import NotificationType, ProcessType


@dataclass(frozen=True)
class Notification:
    """In-app notification row shown in the employee's bell menu."""

    user_id: str
    title: str
    body: str
    type: NotificationType
    data: dict[str, Any] = field(default_factory=dict)
    is_read: bool = False
    notification_id: Optional[int] = None


@dataclass(frozen=True)
class QueuedNotification:
    """An attendance outcome waiting to be announced after the run's writes finish."""

    employee_code: str
    user_id: str
    email: Optional[str]
    employee_name: str
    process_type: ProcessType
    payload: dict[str, Any]


@dataclass
class DispatchReport:
    sent: int = 0
    failures: dict[str, str] = field(default_factory=dict)
