from __future__ import annotations

from enum import Enum


class ProcessType(str, Enum):
    """Run mode: morning only looks at check-in, evening at check-in and check-out."""

    MORNING = "morning"
    EVENING = "evening"


class RuleType(str, Enum):
    LATE_ARRIVAL = "late_arrival"
    EARLY_EXIT = "early_exit"
    ABSENCE = "absence"
    OVERTIME = "overtime"


class DeductionType(str, Enum):
    """How a rule's deduction_value is turned into money."""

    FIXED = "fixed"
    PERCENTAGE = "percentage"
    HOURLY = "hourly"


class IssueType(str, Enum):
    """Ordered by precedence: the first triggering reason wins."""

    DEDUCTION = "deduction"
    LATE = "late"
    EARLY_EXIT = "early_exit"
    MISSING_IN = "missing_in"
    MISSING_OUT = "missing_out"


class OutcomeStatus(str, Enum):
    """Per-employee result of a processing run."""

    OK = "ok"
    SUMMARY_WRITE_FAILED = "summary_write_failed"
    TIMESHEET_WRITE_FAILED = "timesheet_write_failed"
    NOTIFY_FAILED = "notify_failed"


class NotificationType(str, Enum):
    ATTENDANCE = "attendance"
    DEDUCTION = "deduction"


class ActorKind(str, Enum):
    SYSTEM = "system"
    USER = "user"
