from __future__ import annotations

from datetime import date
from typing import Sequence

from ..attendance.model import PresenceRecord
from ..common.datetime_utils import work_duration_minutes
from ..common.numbers import round_half_up
from ..core.enums import AttendanceStatus
from .model import AttendanceSummary


def summarize(records: Sequence[PresenceRecord], *, start: date, end: date) -> AttendanceSummary:
    """Aggregate a user's records; days still missing a clock-out add no work time."""
    total_days = len(records)
    ontime = sum(1 for r in records if r.status == AttendanceStatus.ON_TIME)
    late = sum(1 for r in records if r.status == AttendanceStatus.LATE)
    minutes = sum(work_duration_minutes(r.clock_in, r.clock_out) for r in records if r.clock_in and r.clock_out)

    total_hours = round_half_up(minutes / 60, 2)
    average = round_half_up(total_hours / total_days, 2) if total_days else 0

    return AttendanceSummary(
        start=start,
        end=end,
        total_days=total_days,
        ontime_days=ontime,
        late_days=late,
        total_work_minutes=minutes,
        total_work_hours=total_hours,
        average_work_hours=average,
        records=tuple(records),
    )


def attendance_rate(present: int, employees: int, working_days: int) -> float:
    """Percentage of expected employee-days that have a presence record."""
    if employees <= 0 or working_days <= 0:
        return 0
    return round_half_up(present / (employees * working_days) * 100, 2)
