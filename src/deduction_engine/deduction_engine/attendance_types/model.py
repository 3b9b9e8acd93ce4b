from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional


@dataclass(frozen=True)
class AttendanceType:
    """Domain entity: a named schedule template shared by many employees.

    Shift-based types carry no fixed start/end; their schedule is resolved
    elsewhere and the engine treats them as having no expected hours.
    """

    type_id: str
    type_name: str
    fixed_start_time: Optional[time] = None
    fixed_end_time: Optional[time] = None
    allow_late_minutes: int = 0
    allow_early_exit_minutes: int = 0

    @property
    def has_fixed_schedule(self) -> bool:
        return self.fixed_start_time is not None and self.fixed_end_time is not None
