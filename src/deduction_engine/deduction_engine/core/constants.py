"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SALARY_DAYS_PER_MONTH = 30
WORK_HOURS_PER_DAY = 8

DEFAULT_OUT_WINDOW_START = "14:00"
DEFAULT_OUT_WINDOW_END = "23:00"
DEFAULT_ISSUE_LATE_THRESHOLD_MINUTES = 15

PROCESSING_SOURCE = "zk_auto"
RECORD_STATUS_NORMAL = "normal"
TIMESHEET_STATUS_PENDING = "pending"
ABSENCE_REASON_NO_CHECKIN = "No check-in recorded"

DEFAULT_MAIL_TIMEOUT_SECONDS = 10
