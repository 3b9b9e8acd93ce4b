from __future__ import annotations

from datetime import time
from typing import Optional

from ..attendance_types.model import AttendanceType
from ..common.time_utils import duration_hours, scheduled_hours, time_to_minutes
from .model import VarianceResult


def compute_variance(
    *,
    in_time: Optional[time],
    out_time: Optional[time],
    attendance_type: Optional[AttendanceType],
) -> VarianceResult:
    """Compare actual in/out against the employee's fixed schedule.

    Grace minutes are subtracted before flooring at zero, so arriving exactly
    ``allow_late_minutes`` late yields 0 and one minute more yields 1.
    """

    late_minutes = 0
    early_exit_minutes = 0

    if attendance_type is not None:
        if in_time is not None and attendance_type.fixed_start_time is not None:
            raw_late = time_to_minutes(in_time) - time_to_minutes(attendance_type.fixed_start_time)
            late_minutes = max(0, raw_late - int(attendance_type.allow_late_minutes or 0))

        if out_time is not None and attendance_type.fixed_end_time is not None:
            raw_early = time_to_minutes(attendance_type.fixed_end_time) - time_to_minutes(out_time)
            early_exit_minutes = max(0, raw_early - int(attendance_type.allow_early_exit_minutes or 0))

    total_hours = duration_hours(in_time, out_time)
    expected_hours = scheduled_hours(attendance_type)
    difference_hours = None
    if total_hours is not None and expected_hours is not None:
        difference_hours = round(total_hours - expected_hours, 2)

    return VarianceResult(
        late_minutes=late_minutes,
        early_exit_minutes=early_exit_minutes,
        total_hours=total_hours,
        expected_hours=expected_hours,
        difference_hours=difference_hours,
    )
