from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import to_iso, work_duration_minutes
from ..core.enums import AttendanceStatus
from ..geofence.model import Coordinates


@dataclass(frozen=True)
class PresenceRecord:
    """Domain entity: one user's attendance for one calendar day.

    ``status`` is decided at clock-in and never recomputed; ``work_duration``
    is derived on read.
    """

    presence_id: int
    user_id: int
    work_date: date
    clock_in: datetime
    location_in: Coordinates
    status: AttendanceStatus
    clock_out: Optional[datetime] = None
    location_out: Optional[Coordinates] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.clock_out is not None

    @property
    def work_duration(self) -> Optional[int]:
        """Minutes worked, or None while the day is still open."""
        if not self.clock_out:
            return None
        return work_duration_minutes(self.clock_in, self.clock_out)

    def to_dict(self) -> dict:
        out = {
            "id": self.presence_id,
            "userId": self.user_id,
            "date": to_iso(self.work_date),
            "clockIn": to_iso(self.clock_in),
            "clockOut": to_iso(self.clock_out),
            "locationIn": self.location_in.to_dict(),
            "locationOut": self.location_out.to_dict() if self.location_out else None,
            "status": self.status.value,
            "workDuration": self.work_duration,
        }
        if self.user_name is not None:
            out["user"] = {"id": self.user_id, "name": self.user_name, "email": self.user_email}
        return out


@dataclass(frozen=True)
class TodayStatus:
    presence: Optional[PresenceRecord]

    def to_dict(self) -> dict:
        p = self.presence
        return {
            "presence": p.to_dict() if p else None,
            "hasClockIn": p is not None,
            "hasClockOut": bool(p and p.is_completed),
            "canClockIn": p is None,
            "canClockOut": bool(p and not p.is_completed),
            "workDuration": p.work_duration if p else None,
        }
