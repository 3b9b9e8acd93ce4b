from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Sequence

from ..common.time_utils import TimeLike, in_window, parse_time, time_to_minutes
from ..core.constants import DEFAULT_OUT_WINDOW_END, DEFAULT_OUT_WINDOW_START
from .model import RawPunch, ResolvedPunches


def group_by_employee(punches: Iterable[RawPunch]) -> dict[str, list[RawPunch]]:
    grouped: dict[str, list[RawPunch]] = defaultdict(list)
    for punch in punches:
        grouped[punch.employee_code].append(punch)
    return dict(grouped)


class PunchResolver:
    """Pick a day's check-in and check-out from an employee's raw punches.

    Check-in is the first punch of the day. Check-out is the *last* punch that
    falls inside the out window (14:00-23:00 by default, both ends inclusive),
    so a mid-day re-entry is never mistaken for leaving.
    """

    def __init__(self, *, out_window_start: TimeLike = DEFAULT_OUT_WINDOW_START, out_window_end: TimeLike = DEFAULT_OUT_WINDOW_END):
        self._window_start = parse_time(out_window_start)
        self._window_end = parse_time(out_window_end)
        if time_to_minutes(self._window_end) < time_to_minutes(self._window_start):
            raise ValueError("out window must not wrap past midnight")

    def resolve(self, punches: Sequence[RawPunch]) -> ResolvedPunches:
        if not punches:
            return ResolvedPunches()

        ordered = sorted(punches, key=lambda p: (p.attendance_time, p.punch_id))
        out_candidates = [p for p in ordered if in_window(p.attendance_time, self._window_start, self._window_end)]

        return ResolvedPunches(
            in_time=ordered[0].attendance_time,
            out_time=out_candidates[-1].attendance_time if out_candidates else None,
            punch_count=len(ordered),
        )
