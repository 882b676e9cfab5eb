from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.pagination import Page, PageRequest
from ..common.validators import require_non_empty
from ..core.constants import NOTIFICATION_TTL_DAYS
from ..core.enums import NotificationPriority, NotificationType, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..users.repository import UserRepository
from .model import NewNotification, Notification, NotificationStats
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Notification sink plus the per-user notification feed.

    ``notify`` and ``notify_many`` are fire-and-forget: a storage failure is
    logged and never propagates to the action that triggered it.
    """

    def __init__(
        self,
        notifications: NotificationRepository,
        users: Optional[UserRepository] = None,
        *,
        clock: Callable[[], datetime] = now_local,
        ttl_days: int = NOTIFICATION_TTL_DAYS,
    ):
        self._notifications = notifications
        self._users = users
        self._clock = clock
        self._ttl = timedelta(days=ttl_days)

    def notify(
        self,
        user_id: int,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        priority: NotificationPriority = NotificationPriority.MEDIUM,
        data: Optional[dict] = None,
    ) -> bool:
        item = NewNotification(user_id=user_id, title=title, message=message, type=type, priority=priority, data=data or {})
        return self.notify_many([item]) == 1

    def notify_many(self, items: Sequence[NewNotification]) -> int:
        if not items:
            return 0
        now = self._clock()
        try:
            return self._notifications.create_many(items, created_at=now, expires_at=now + self._ttl)
        except Exception:
            logger.exception("failed to store %d notification(s)", len(items))
            return 0

    # Feed -----------------------------------------------------------------

    def list_for_user(
        self,
        user_id: int,
        page: PageRequest,
        *,
        is_read: Optional[bool] = None,
        type: Optional[NotificationType] = None,
    ) -> Page[Notification]:
        return self._notifications.list_page(user_id, page, now=self._clock(), is_read=is_read, type=type)

    def mark_read(self, user_id: int, notification_id: int) -> Notification:
        notification = self._notifications.mark_read(user_id, notification_id, read_at=self._clock())
        if not notification:
            raise NotFoundError("Notification not found")
        return notification

    def mark_all_read(self, user_id: int) -> int:
        return self._notifications.mark_all_read(user_id, read_at=self._clock())

    def delete(self, user_id: int, notification_id: int) -> None:
        if not self._notifications.delete(user_id, notification_id):
            raise NotFoundError("Notification not found")

    def clear_read(self, user_id: int) -> int:
        return self._notifications.delete_read(user_id)

    def unread_count(self, user_id: int) -> int:
        return self._notifications.count_unread(user_id, now=self._clock())

    def stats(self, user_id: int) -> NotificationStats:
        return self._notifications.stats(user_id, now=self._clock())

    def broadcast(
        self,
        *,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        priority: NotificationPriority = NotificationPriority.MEDIUM,
        role: Optional[Role] = None,
        user_ids: Optional[Sequence[int]] = None,
    ) -> int:
        """Admin broadcast to explicit users, or to everyone with ``role`` (employees by default)."""
        title = require_non_empty(title, "Title")
        message = require_non_empty(message, "Message")

        if user_ids:
            try:
                targets = [int(u) for u in user_ids]
            except (TypeError, ValueError):
                raise ValidationError("userIds must be a list of user ids")
        else:
            if self._users is None:
                raise ValidationError("No recipients")
            targets = [u.user_id for u in self._users.list_by_role(role or Role.EMPLOYEE)]

        items = [
            NewNotification(user_id=uid, title=title, message=message, type=type, priority=priority, data={"broadcast": True})
            for uid in targets
        ]
        sent = self.notify_many(items)
        logger.info("broadcast sent=%d targets=%d", sent, len(targets))
        return sent

    def purge_old(self, *, now: Optional[datetime] = None) -> int:
        now = now or self._clock()
        return self._notifications.purge(read_before=now - self._ttl, now=now)
