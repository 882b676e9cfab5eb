from __future__ import annotations

from datetime import datetime, time

from ...common.datetime_utils import format_time
from ...core.enums import AttendanceStatus, NotificationPriority
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late clock-in."""

    def decide_clock_in(self, *, now: datetime, work_start: time) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.LATE,
            title="Late Clock In",
            priority=NotificationPriority.HIGH,
        )

    def clock_in_message(self, *, now: datetime) -> str:
        return f"You clocked in late at {format_time(now)}. Please pay more attention to your arrival time."
