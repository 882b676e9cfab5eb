from datetime import datetime, time

from src.geo_attendance.geo_attendance.attendance.factory import AttendanceStrategyFactory
from src.geo_attendance.geo_attendance.attendance.strategies.late_strategy import LateStrategy
from src.geo_attendance.geo_attendance.attendance.strategies.ontime_strategy import OnTimeStrategy
from src.geo_attendance.geo_attendance.core.enums import AttendanceStatus, NotificationPriority


def test_factory_clock_in_before_start_is_on_time():
    now = datetime(2025, 1, 6, 7, 59, 59)

    strategy = AttendanceStrategyFactory().for_clock_in(now=now, work_start=time(8, 0))

    assert isinstance(strategy, OnTimeStrategy)
    decision = strategy.decide_clock_in(now=now, work_start=time(8, 0))
    assert decision.status == AttendanceStatus.ON_TIME
    assert decision.priority == NotificationPriority.MEDIUM


def test_factory_clock_in_one_second_late():
    now = datetime(2025, 1, 6, 8, 0, 1)

    strategy = AttendanceStrategyFactory().for_clock_in(now=now, work_start=time(8, 0))

    assert isinstance(strategy, LateStrategy)
    decision = strategy.decide_clock_in(now=now, work_start=time(8, 0))
    assert decision.status == AttendanceStatus.LATE
    assert decision.priority == NotificationPriority.HIGH
