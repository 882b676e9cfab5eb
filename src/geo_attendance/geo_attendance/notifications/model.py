from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso
from ..core.enums import NotificationPriority, NotificationType


@dataclass(frozen=True)
class NewNotification:
    """A notification waiting to be stored."""

    user_id: int
    title: str
    message: str
    type: NotificationType = NotificationType.INFO
    priority: NotificationPriority = NotificationPriority.MEDIUM
    data: dict = field(default_factory=dict)


@dataclass(frozen=True)
class Notification:
    notification_id: int
    user_id: int
    title: str
    message: str
    type: NotificationType
    priority: NotificationPriority
    is_read: bool
    read_at: Optional[datetime]
    data: dict
    created_at: datetime
    expires_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "title": self.title,
            "message": self.message,
            "type": self.type.value,
            "priority": self.priority.value,
            "isRead": self.is_read,
            "readAt": to_iso(self.read_at),
            "data": self.data,
            "createdAt": to_iso(self.created_at),
            "expiresAt": to_iso(self.expires_at),
        }


@dataclass(frozen=True)
class NotificationStats:
    total: int
    unread: int
    by_type: dict[str, int]

    def to_dict(self) -> dict:
        return {"total": self.total, "unread": self.unread, "read": self.total - self.unread, "byType": self.by_type}
