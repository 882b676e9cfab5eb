from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional

from ..attendance.repository import PresenceRepository
from ..common.datetime_utils import month_range, now_local, work_week_range, working_days_in_month
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import ValidationError
from ..users.repository import UserRepository
from .model import AttendanceStatistics, AttendanceSummary
from .summary import attendance_rate, summarize


class AttendanceReportService:
    def __init__(
        self,
        presences: PresenceRepository,
        users: UserRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._presences = presences
        self._users = users
        self._clock = clock

    def _resolve_month(self, year: Optional[int], month: Optional[int]) -> tuple[int, int]:
        today = self._clock().date()
        year = year or today.year
        month = month or today.month
        if not 1 <= month <= 12:
            raise ValidationError("Month must be between 1 and 12")
        return year, month

    def user_summary(self, user_id: int, start: date, end: date) -> AttendanceSummary:
        records = self._presences.list_for_user_between(user_id, start, end)
        return summarize(records, start=start, end=end)

    def user_month_summary(self, user_id: int, *, year: Optional[int] = None, month: Optional[int] = None) -> AttendanceSummary:
        year, month = self._resolve_month(year, month)
        start, end = month_range(year, month)
        return self.user_summary(user_id, start, end)

    def user_week_summary(self, user_id: int, *, day: Optional[date] = None) -> AttendanceSummary:
        start, end = work_week_range(day or self._clock().date())
        return self.user_summary(user_id, start, end)

    def monthly_statistics(self, *, year: Optional[int] = None, month: Optional[int] = None) -> AttendanceStatistics:
        year, month = self._resolve_month(year, month)
        start, end = month_range(year, month)

        employees = self._users.count_by_role(Role.EMPLOYEE)
        total = self._presences.count_between(start, end)
        ontime = self._presences.count_between(start, end, status=AttendanceStatus.ON_TIME)
        late = self._presences.count_between(start, end, status=AttendanceStatus.LATE)
        working_days = working_days_in_month(year, month)

        return AttendanceStatistics(
            year=year,
            month=month,
            total_users=employees,
            total_presence=total,
            ontime_count=ontime,
            late_count=late,
            working_days=working_days,
            attendance_rate=attendance_rate(total, employees, working_days),
        )
