from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.pagination import Page, PageRequest
from ..core.enums import NotificationPriority, NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import NewNotification, Notification, NotificationStats
from .repository import NotificationRepository

_COLUMNS = "notification_id, user_id, title, message, type, priority, is_read, read_at, data, created_at, expires_at"


def _to_notification(row: dict) -> Notification:
    return Notification(
        notification_id=int(row["notification_id"]),
        user_id=int(row["user_id"]),
        title=row["title"],
        message=row["message"],
        type=NotificationType(row["type"]),
        priority=NotificationPriority(row["priority"]),
        is_read=bool(row["is_read"]),
        read_at=row.get("read_at"),
        data=load_json(row.get("data")),
        created_at=row["created_at"],
        expires_at=row["expires_at"],
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_many(self, items: Sequence[NewNotification], *, created_at: datetime, expires_at: datetime) -> int:
        if not items:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO notifications(user_id, title, message, type, priority, data, created_at, expires_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                [
                    (
                        n.user_id,
                        n.title,
                        n.message,
                        n.type.value,
                        n.priority.value,
                        dump_json(n.data),
                        created_at,
                        expires_at,
                    )
                    for n in items
                ],
            )
            return len(items)

    def list_page(
        self,
        user_id: int,
        page: PageRequest,
        *,
        now: datetime,
        is_read: Optional[bool] = None,
        type: Optional[NotificationType] = None,
    ) -> Page[Notification]:
        where = ["user_id=%s", "expires_at > %s"]
        params: list = [user_id, now]
        if is_read is not None:
            where.append("is_read=%s")
            params.append(1 if is_read else 0)
        if type is not None:
            where.append("type=%s")
            params.append(type.value)
        clause = " AND ".join(where)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM notifications WHERE {clause}", tuple(params))
            total = int(fetchone(cur)["total"])
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM notifications
                WHERE {clause}
                ORDER BY created_at DESC, notification_id DESC
                LIMIT %s OFFSET %s
                """,
                (*params, page.limit, page.offset),
            )
            items = [_to_notification(r) for r in fetchall(cur)]
            return Page(items=items, total=total, request=page)

    def mark_read(self, user_id: int, notification_id: int, *, read_at: datetime) -> Optional[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE notifications
                SET is_read=1, read_at=COALESCE(read_at, %s)
                WHERE notification_id=%s AND user_id=%s
                """,
                (read_at, notification_id, user_id),
            )
            cur.execute(
                f"SELECT {_COLUMNS} FROM notifications WHERE notification_id=%s AND user_id=%s",
                (notification_id, user_id),
            )
            row = fetchone(cur)
            return _to_notification(row) if row else None

    def mark_all_read(self, user_id: int, *, read_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1, read_at=%s WHERE user_id=%s AND is_read=0",
                (read_at, user_id),
            )
            return cur.rowcount

    def delete(self, user_id: int, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM notifications WHERE notification_id=%s AND user_id=%s",
                (notification_id, user_id),
            )
            return cur.rowcount > 0

    def delete_read(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM notifications WHERE user_id=%s AND is_read=1", (user_id,))
            return cur.rowcount

    def count_unread(self, user_id: int, *, now: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS total FROM notifications WHERE user_id=%s AND is_read=0 AND expires_at > %s",
                (user_id, now),
            )
            return int(fetchone(cur)["total"])

    def stats(self, user_id: int, *, now: datetime) -> NotificationStats:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT type, COUNT(*) AS total, SUM(CASE WHEN is_read=0 THEN 1 ELSE 0 END) AS unread
                FROM notifications
                WHERE user_id=%s AND expires_at > %s
                GROUP BY type
                """,
                (user_id, now),
            )
            rows = fetchall(cur)
            by_type = {r["type"]: int(r["total"]) for r in rows}
            return NotificationStats(
                total=sum(by_type.values()),
                unread=sum(int(r["unread"] or 0) for r in rows),
                by_type=by_type,
            )

    def purge(self, *, read_before: datetime, now: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM notifications WHERE (is_read=1 AND created_at < %s) OR expires_at <= %s",
                (read_before, now),
            )
            return cur.rowcount
