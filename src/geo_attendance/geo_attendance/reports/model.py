from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Sequence

from ..attendance.model import PresenceRecord


@dataclass(frozen=True)
class AttendanceSummary:
    start: date
    end: date
    total_days: int
    ontime_days: int
    late_days: int
    total_work_minutes: int
    total_work_hours: float
    average_work_hours: float
    records: Sequence[PresenceRecord] = ()

    def to_dict(self, *, include_records: bool = True) -> dict:
        out = {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "totalDays": self.total_days,
            "ontimeDays": self.ontime_days,
            "lateDays": self.late_days,
            "totalWorkHours": self.total_work_hours,
            "averageWorkHours": self.average_work_hours,
        }
        if include_records:
            out["presences"] = [r.to_dict() for r in self.records]
        return out


@dataclass(frozen=True)
class AttendanceStatistics:
    """Admin view of one month across all employees."""

    year: int
    month: int
    total_users: int
    total_presence: int
    ontime_count: int
    late_count: int
    working_days: int
    attendance_rate: float

    def to_dict(self) -> dict:
        return {
            "totalUsers": self.total_users,
            "totalPresenceThisMonth": self.total_presence,
            "ontimeCount": self.ontime_count,
            "lateCount": self.late_count,
            "workingDays": self.working_days,
            "attendanceRate": self.attendance_rate,
            "month": self.month,
            "year": self.year,
        }
