from __future__ import annotations

from datetime import date, datetime
from typing import Protocol, Sequence

from .model import RawPunch


class PunchRepository(Protocol):
    def list_for_date(self, attendance_date: date) -> Sequence[RawPunch]:
        """All punches of the date, processed or not, ascending by time.

        The evening run must see the punches the morning run already consumed.
        """

        raise NotImplementedError

    def mark_processed(self, punch_ids: Sequence[int], *, processed_at: datetime) -> int:
        """Flag punches as consumed in one batched update. Returns affected rows."""

        raise NotImplementedError
