from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional


@dataclass(frozen=True)
class RawPunch:
    """Domain entity: one biometric clock event as ingested from the device."""

    punch_id: int
    employee_code: str
    attendance_date: date
    attendance_time: time
    record_type: Optional[str] = None
    is_processed: bool = False


@dataclass(frozen=True)
class ResolvedPunches:
    in_time: Optional[time] = None
    out_time: Optional[time] = None
    punch_count: int = 0
