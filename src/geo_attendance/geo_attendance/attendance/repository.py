from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..common.pagination import Page, PageRequest
from ..core.enums import AttendanceStatus
from ..geofence.model import Coordinates
from .model import PresenceRecord


class PresenceRepository(Protocol):
    def get_by_id(self, presence_id: int) -> Optional[PresenceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[PresenceRecord]:
        raise NotImplementedError

    def create_clock_in(
        self,
        *,
        user_id: int,
        work_date: date,
        clock_in: datetime,
        location_in: Coordinates,
        status: AttendanceStatus,
    ) -> int:
        """Insert the day's record.

        The (user_id, work_date) unique key backs the duplicate-day check;
        a duplicate insert raises AlreadyClockedInError.
        """

        raise NotImplementedError

    def update_clock_out(self, *, presence_id: int, clock_out: datetime, location_out: Coordinates) -> bool:
        """Set clock-out only while it is still empty; False when another request won."""

        raise NotImplementedError

    def list_for_user_between(self, user_id: int, start: date, end: date) -> Sequence[PresenceRecord]:
        """Records with ``start <= work_date <= end``, oldest first."""

        raise NotImplementedError

    def list_page(
        self,
        page: PageRequest,
        *,
        user_id: Optional[int] = None,
        status: Optional[AttendanceStatus] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Page[PresenceRecord]:
        """Newest first, with user name/email joined in."""

        raise NotImplementedError

    def list_for_date(
        self,
        work_date: date,
        *,
        status: Optional[AttendanceStatus] = None,
        open_only: bool = False,
    ) -> Sequence[PresenceRecord]:
        raise NotImplementedError

    def count_between(self, start: date, end: date, *, status: Optional[AttendanceStatus] = None) -> int:
        raise NotImplementedError
