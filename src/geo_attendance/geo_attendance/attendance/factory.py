from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time

from ..common.datetime_utils import is_late
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.ontime_strategy import OnTimeStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_clock_in(self, *, now: datetime, work_start: time) -> AttendanceStrategy:
        # Strictly after the start instant is late; exactly on it is on time.
        if is_late(now, work_start):
            return LateStrategy()
        return OnTimeStrategy()
