"""In-memory repositories mirroring the MySQL implementations."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from src.geo_attendance.geo_attendance.attendance.model import PresenceRecord
from src.geo_attendance.geo_attendance.auth.model import DeviceInfo, PasswordResetCode, RefreshToken
from src.geo_attendance.geo_attendance.common.pagination import Page, PageRequest
from src.geo_attendance.geo_attendance.core.enums import AttendanceStatus, NotificationType, Role
from src.geo_attendance.geo_attendance.core.exceptions import AlreadyClockedInError, ConflictError
from src.geo_attendance.geo_attendance.geofence.model import Coordinates, OfficeLocation
from src.geo_attendance.geo_attendance.notifications.model import NewNotification, Notification, NotificationStats
from src.geo_attendance.geo_attendance.users.model import User


def _page(items: list, request: PageRequest) -> Page:
    return Page(items=items[request.offset : request.offset + request.limit], total=len(items), request=request)


class InMemoryUsers:
    def __init__(self):
        self.users: dict[int, User] = {}
        self._id = 0

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    def create_user(self, *, name: str, email: str, password_hash: str, role: Role) -> int:
        if self.get_by_email(email):
            raise ConflictError("Email is already registered")
        self._id += 1
        self.users[self._id] = User(user_id=self._id, name=name, email=email, password_hash=password_hash, role=role)
        return self._id

    def update_profile(self, user_id: int, *, name: str, email: str, role: Role) -> bool:
        if user_id not in self.users:
            return False
        self.users[user_id] = replace(self.users[user_id], name=name, email=email, role=role)
        return True

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        if user_id not in self.users:
            return False
        self.users[user_id] = replace(self.users[user_id], password_hash=password_hash)
        return True

    def delete_by_id(self, user_id: int) -> bool:
        return self.users.pop(user_id, None) is not None

    def list_page(self, page: PageRequest, *, role: Optional[Role] = None, search: Optional[str] = None) -> Page[User]:
        items = [
            u
            for u in sorted(self.users.values(), key=lambda u: u.user_id, reverse=True)
            if (role is None or u.role == role) and (not search or search in u.name or search in u.email)
        ]
        return _page(items, page)

    def list_by_role(self, role: Role):
        return [u for u in sorted(self.users.values(), key=lambda u: u.user_id) if u.role == role]

    def count_by_role(self, role: Role) -> int:
        return len(self.list_by_role(role))


class InMemoryPresences:
    def __init__(self):
        self.records: dict[int, PresenceRecord] = {}
        self._id = 0

    def get_by_id(self, presence_id: int) -> Optional[PresenceRecord]:
        return self.records.get(presence_id)

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[PresenceRecord]:
        return next((r for r in self.records.values() if r.user_id == user_id and r.work_date == work_date), None)

    def create_clock_in(
        self,
        *,
        user_id: int,
        work_date: date,
        clock_in: datetime,
        location_in: Coordinates,
        status: AttendanceStatus,
    ) -> int:
        # unique (user_id, work_date)
        if any(r.user_id == user_id and r.work_date == work_date for r in self.records.values()):
            raise AlreadyClockedInError()
        self._id += 1
        self.records[self._id] = PresenceRecord(
            presence_id=self._id,
            user_id=user_id,
            work_date=work_date,
            clock_in=clock_in,
            location_in=location_in,
            status=status,
        )
        return self._id

    def update_clock_out(self, *, presence_id: int, clock_out: datetime, location_out: Coordinates) -> bool:
        record = self.records.get(presence_id)
        if not record or record.clock_out is not None:
            return False
        self.records[presence_id] = replace(record, clock_out=clock_out, location_out=location_out)
        return True

    def list_for_user_between(self, user_id: int, start: date, end: date):
        return sorted(
            (r for r in self.records.values() if r.user_id == user_id and start <= r.work_date <= end),
            key=lambda r: r.work_date,
        )

    def list_page(self, page: PageRequest, *, user_id=None, status=None, start=None, end=None) -> Page[PresenceRecord]:
        items = [
            r
            for r in self.records.values()
            if (user_id is None or r.user_id == user_id)
            and (status is None or r.status == status)
            and (start is None or r.work_date >= start)
            and (end is None or r.work_date <= end)
        ]
        items.sort(key=lambda r: (r.work_date, r.presence_id), reverse=True)
        return _page(items, page)

    def list_for_date(self, work_date: date, *, status=None, open_only: bool = False):
        items = [
            r
            for r in self.records.values()
            if r.work_date == work_date
            and (status is None or r.status == status)
            and (not open_only or r.clock_out is None)
        ]
        return sorted(items, key=lambda r: r.clock_in)

    def count_between(self, start: date, end: date, *, status=None) -> int:
        return sum(
            1
            for r in self.records.values()
            if start <= r.work_date <= end and (status is None or r.status == status)
        )


class InMemoryOffices:
    def __init__(self, offices: Optional[list[OfficeLocation]] = None):
        self.offices: dict[int, OfficeLocation] = {o.location_id: o for o in offices or []}
        self._id = max(self.offices, default=0)

    def list_all(self):
        return sorted(self.offices.values(), key=lambda o: o.location_id)

    def get_by_id(self, location_id: int) -> Optional[OfficeLocation]:
        return self.offices.get(location_id)

    def create(self, *, name: str, lat: float, lng: float, radius: int) -> int:
        if any(o.name == name for o in self.offices.values()):
            raise ConflictError("Office location name already exists")
        self._id += 1
        self.offices[self._id] = OfficeLocation(location_id=self._id, name=name, lat=lat, lng=lng, radius=radius)
        return self._id

    def update(self, location_id: int, *, name: str, lat: float, lng: float, radius: int) -> bool:
        if location_id not in self.offices:
            return False
        self.offices[location_id] = replace(self.offices[location_id], name=name, lat=lat, lng=lng, radius=radius)
        return True

    def delete(self, location_id: int) -> bool:
        return self.offices.pop(location_id, None) is not None


class InMemoryNotifications:
    def __init__(self):
        self.items: dict[int, Notification] = {}
        self._id = 0
        self.fail = False

    def create_many(self, items, *, created_at: datetime, expires_at: datetime) -> int:
        if self.fail:
            raise RuntimeError("notification store unavailable")
        for item in items:
            self._id += 1
            self.items[self._id] = Notification(
                notification_id=self._id,
                user_id=item.user_id,
                title=item.title,
                message=item.message,
                type=item.type,
                priority=item.priority,
                is_read=False,
                read_at=None,
                data=dict(item.data),
                created_at=created_at,
                expires_at=expires_at,
            )
        return len(items)

    def for_user(self, user_id: int) -> list[Notification]:
        return [n for n in self.items.values() if n.user_id == user_id]

    def list_page(self, user_id: int, page: PageRequest, *, now: datetime, is_read=None, type=None):
        items = [
            n
            for n in self.for_user(user_id)
            if n.expires_at > now
            and (is_read is None or n.is_read == is_read)
            and (type is None or n.type == type)
        ]
        items.sort(key=lambda n: (n.created_at, n.notification_id), reverse=True)
        return _page(items, page)

    def mark_read(self, user_id: int, notification_id: int, *, read_at: datetime):
        n = self.items.get(notification_id)
        if not n or n.user_id != user_id:
            return None
        self.items[notification_id] = replace(n, is_read=True, read_at=n.read_at or read_at)
        return self.items[notification_id]

    def mark_all_read(self, user_id: int, *, read_at: datetime) -> int:
        count = 0
        for n in self.for_user(user_id):
            if not n.is_read:
                self.items[n.notification_id] = replace(n, is_read=True, read_at=read_at)
                count += 1
        return count

    def delete(self, user_id: int, notification_id: int) -> bool:
        n = self.items.get(notification_id)
        if not n or n.user_id != user_id:
            return False
        del self.items[notification_id]
        return True

    def delete_read(self, user_id: int) -> int:
        ids = [n.notification_id for n in self.for_user(user_id) if n.is_read]
        for i in ids:
            del self.items[i]
        return len(ids)

    def count_unread(self, user_id: int, *, now: datetime) -> int:
        return sum(1 for n in self.for_user(user_id) if not n.is_read and n.expires_at > now)

    def stats(self, user_id: int, *, now: datetime) -> NotificationStats:
        live = [n for n in self.for_user(user_id) if n.expires_at > now]
        by_type: dict[str, int] = {}
        for n in live:
            by_type[n.type.value] = by_type.get(n.type.value, 0) + 1
        return NotificationStats(total=len(live), unread=sum(1 for n in live if not n.is_read), by_type=by_type)

    def purge(self, *, read_before: datetime, now: datetime) -> int:
        ids = [
            n.notification_id
            for n in self.items.values()
            if (n.is_read and n.created_at < read_before) or n.expires_at <= now
        ]
        for i in ids:
            del self.items[i]
        return len(ids)


class InMemoryRefreshTokens:
    def __init__(self):
        self.rows: dict[int, RefreshToken] = {}
        self._id = 0

    def create(self, *, user_id: int, token: str, expires_at: datetime, device: DeviceInfo) -> int:
        self._id += 1
        self.rows[self._id] = RefreshToken(
            token_id=self._id,
            user_id=user_id,
            token=token,
            expires_at=expires_at,
            user_agent=device.user_agent,
            ip=device.ip,
            device_type=device.device_type,
        )
        return self._id

    def active_for(self, user_id: int) -> list[RefreshToken]:
        return [r for r in self.rows.values() if r.user_id == user_id and r.is_active]

    def find_active(self, *, token: str, user_id: int, now: datetime) -> Optional[RefreshToken]:
        return next(
            (r for r in self.rows.values() if r.token == token and r.user_id == user_id and r.is_valid(now)),
            None,
        )

    def deactivate(self, token: str) -> bool:
        changed = False
        for key, r in self.rows.items():
            if r.token == token and r.is_active:
                self.rows[key] = replace(r, is_active=False)
                changed = True
        return changed

    def deactivate_all_for_user(self, user_id: int, *, except_token: Optional[str] = None) -> int:
        count = 0
        for key, r in self.rows.items():
            if r.user_id == user_id and r.is_active and r.token != except_token:
                self.rows[key] = replace(r, is_active=False)
                count += 1
        return count

    def purge_expired(self, *, now: datetime) -> int:
        ids = [k for k, r in self.rows.items() if r.expires_at <= now]
        for k in ids:
            del self.rows[k]
        return len(ids)


class InMemoryPasswordResets:
    def __init__(self):
        self.rows: dict[int, PasswordResetCode] = {}
        self._id = 0

    def create(self, *, user_id: int, email: str, code: str, expires_at: datetime, device: DeviceInfo) -> int:
        self._id += 1
        self.rows[self._id] = PasswordResetCode(
            code_id=self._id,
            user_id=user_id,
            email=email,
            code=code,
            expires_at=expires_at,
            ip_address=device.ip,
            user_agent=device.user_agent,
        )
        return self._id

    def latest_for(self, user_id: int) -> Optional[PasswordResetCode]:
        rows = [r for r in self.rows.values() if r.user_id == user_id]
        return max(rows, key=lambda r: r.code_id) if rows else None

    def find_unused(self, *, email: str, code: str) -> Optional[PasswordResetCode]:
        rows = [r for r in self.rows.values() if r.email == email and r.code == code and not r.is_used]
        return max(rows, key=lambda r: r.code_id) if rows else None

    def mark_used(self, code_id: int) -> bool:
        r = self.rows.get(code_id)
        if not r or r.is_used:
            return False
        self.rows[code_id] = replace(r, is_used=True)
        return True

    def purge_expired(self, *, now: datetime) -> int:
        ids = [k for k, r in self.rows.items() if r.expires_at <= now]
        for k in ids:
            del self.rows[k]
        return len(ids)


def notification(user_id: int, title: str = "Hello", type: NotificationType = NotificationType.INFO) -> NewNotification:
    return NewNotification(user_id=user_id, title=title, message=f"{title} message", type=type)
