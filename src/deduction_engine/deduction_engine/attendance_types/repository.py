from __future__ import annotations

from typing import Protocol, Sequence

from .model import AttendanceType


class AttendanceTypeRepository(Protocol):
    def list_all(self) -> Sequence[AttendanceType]:
        raise NotImplementedError
