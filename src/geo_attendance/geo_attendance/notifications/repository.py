from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..common.pagination import Page, PageRequest
from ..core.enums import NotificationType
from .model import NewNotification, Notification, NotificationStats


class NotificationRepository(Protocol):
    def create_many(self, items: Sequence[NewNotification], *, created_at: datetime, expires_at: datetime) -> int:
        raise NotImplementedError

    def list_page(
        self,
        user_id: int,
        page: PageRequest,
        *,
        now: datetime,
        is_read: Optional[bool] = None,
        type: Optional[NotificationType] = None,
    ) -> Page[Notification]:
        """Unexpired notifications for a user, newest first."""

        raise NotImplementedError

    def mark_read(self, user_id: int, notification_id: int, *, read_at: datetime) -> Optional[Notification]:
        raise NotImplementedError

    def mark_all_read(self, user_id: int, *, read_at: datetime) -> int:
        raise NotImplementedError

    def delete(self, user_id: int, notification_id: int) -> bool:
        raise NotImplementedError

    def delete_read(self, user_id: int) -> int:
        raise NotImplementedError

    def count_unread(self, user_id: int, *, now: datetime) -> int:
        raise NotImplementedError

    def stats(self, user_id: int, *, now: datetime) -> NotificationStats:
        raise NotImplementedError

    def purge(self, *, read_before: datetime, now: datetime) -> int:
        """Delete read notifications created before ``read_before`` and expired ones."""

        raise NotImplementedError
