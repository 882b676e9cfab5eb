from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Any, Callable, Optional

from ..common.datetime_utils import format_duration, format_time, month_range, now_local
from ..common.pagination import Page, PageRequest
from ..common.validators import require_coordinates
from ..core.constants import DEFAULT_WORK_START
from ..core.enums import AttendanceStatus, NotificationPriority, NotificationType
from ..core.exceptions import AlreadyClockedInError, AlreadyClockedOutError, NoClockInError, ValidationError
from ..geofence.model import Coordinates
from ..geofence.service import GeofenceService
from ..notifications.service import NotificationService
from .factory import AttendanceStrategyFactory
from .model import PresenceRecord, TodayStatus
from .repository import PresenceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Daily presence lifecycle: NoRecord -> Recorded (clock-in) -> Completed (clock-out)."""

    def __init__(
        self,
        presences: PresenceRepository,
        geofence: GeofenceService,
        notifications: NotificationService,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        work_start: time = DEFAULT_WORK_START,
        clock: Callable[[], datetime] = now_local,
    ):
        self._presences = presences
        self._geofence = geofence
        self._notifications = notifications
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._work_start = work_start
        self._clock = clock

    def clock_in(self, user_id: int, lat: Any, lng: Any, *, now: datetime | None = None) -> PresenceRecord:
        location = Coordinates(*require_coordinates(lat, lng))
        now = now or self._clock()
        today = now.date()

        if self._presences.get_for_user_and_date(user_id, today):
            raise AlreadyClockedInError()

        self._geofence.require_within(location.lat, location.lng)

        strategy = self._factory.for_clock_in(now=now, work_start=self._work_start)
        decision = strategy.decide_clock_in(now=now, work_start=self._work_start)

        presence_id = self._presences.create_clock_in(
            user_id=user_id,
            work_date=today,
            clock_in=now,
            location_in=location,
            status=decision.status,
        )
        record = self._presences.get_by_id(presence_id)

        self._notifications.notify(
            user_id,
            decision.title,
            strategy.clock_in_message(now=now),
            NotificationType.ATTENDANCE,
            decision.priority,
            {
                "presenceId": presence_id,
                "clockInTime": now.isoformat(),
                "status": decision.status.value,
                "location": location.to_dict(),
            },
        )
        logger.info("clock_in user_id=%s status=%s", user_id, decision.status.value)
        return record

    def clock_out(self, user_id: int, lat: Any, lng: Any, *, now: datetime | None = None) -> PresenceRecord:
        location = Coordinates(*require_coordinates(lat, lng))
        now = now or self._clock()

        record = self._presences.get_for_user_and_date(user_id, now.date())
        if not record:
            raise NoClockInError()
        if record.clock_out is not None:
            raise AlreadyClockedOutError()

        self._geofence.require_within(location.lat, location.lng)

        if not self._presences.update_clock_out(presence_id=record.presence_id, clock_out=now, location_out=location):
            raise AlreadyClockedOutError()

        record = self._presences.get_by_id(record.presence_id)
        duration = record.work_duration or 0

        self._notifications.notify(
            user_id,
            "Clock Out Successful",
            f"You clocked out at {format_time(now)}. Total work time: {format_duration(duration)}.",
            NotificationType.ATTENDANCE,
            NotificationPriority.MEDIUM,
            {
                "presenceId": record.presence_id,
                "clockOutTime": now.isoformat(),
                "workDuration": duration,
                "location": location.to_dict(),
            },
        )
        logger.info("clock_out user_id=%s work_minutes=%s", user_id, duration)
        return record

    def today_status(self, user_id: int, *, now: datetime | None = None) -> TodayStatus:
        now = now or self._clock()
        return TodayStatus(presence=self._presences.get_for_user_and_date(user_id, now.date()))

    def history(
        self,
        user_id: int,
        page: PageRequest,
        *,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Page[PresenceRecord]:
        start: Optional[date] = None
        end: Optional[date] = None
        if month:
            year = year or self._clock().year
            if not 1 <= month <= 12:
                raise ValidationError("Month must be between 1 and 12")
            start, end = month_range(year, month)
        return self._presences.list_page(page, user_id=user_id, start=start, end=end)

    def list_presences(
        self,
        page: PageRequest,
        *,
        user_id: Optional[int] = None,
        status: Optional[AttendanceStatus] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Page[PresenceRecord]:
        """Admin listing across all users."""
        if start and end and start > end:
            raise ValidationError("startDate must not be after endDate")
        return self._presences.list_page(page, user_id=user_id, status=status, start=start, end=end)
