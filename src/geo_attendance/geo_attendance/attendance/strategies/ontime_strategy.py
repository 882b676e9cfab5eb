from __future__ import annotations

from datetime import datetime, time

from ...common.datetime_utils import format_time
from ...core.enums import AttendanceStatus, NotificationPriority
from .base import AttendanceStrategy, StatusDecision


class OnTimeStrategy(AttendanceStrategy):
    """Clock-in at or before the work start time."""

    def decide_clock_in(self, *, now: datetime, work_start: time) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.ON_TIME,
            title="Clock In Successful",
            priority=NotificationPriority.MEDIUM,
        )

    def clock_in_message(self, *, now: datetime) -> str:
        return f"You clocked in at {format_time(now)}. Have a good day at work!"
