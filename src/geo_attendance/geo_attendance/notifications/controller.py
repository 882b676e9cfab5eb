from __future__ import annotations

from flask import Flask, request

from ..auth.decorators import build_guards, current_user
from ..common.pagination import PageRequest
from ..common.responses import json_body, paginated, success
from ..container import Container
from ..core.enums import NotificationPriority, NotificationType
from ..core.exceptions import ValidationError
from ..users.service import parse_role


def _parse_enum(enum_cls, value, field_name: str):
    if value in (None, ""):
        return None
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"{field_name} is not valid")


def _parse_bool(value):
    if value in (None, ""):
        return None
    return str(value).lower() in ("1", "true", "yes")


def register(app: Flask, container: Container) -> None:
    guards = build_guards(container.auth_service)
    notifications = container.notification_service

    @app.route("/api/notifications", methods=["GET"], endpoint="notifications_list")
    @guards.login_required
    def list_notifications():
        page = notifications.list_for_user(
            current_user().user_id,
            PageRequest.from_args(request.args),
            is_read=_parse_bool(request.args.get("isRead")),
            type=_parse_enum(NotificationType, request.args.get("type"), "Type"),
        )
        return paginated(page, "notifications", [n.to_dict() for n in page.items])

    @app.route("/api/notifications/stats", methods=["GET"], endpoint="notifications_stats")
    @guards.login_required
    def stats():
        return success("Success", notifications.stats(current_user().user_id).to_dict())

    @app.route("/api/notifications/<int:notification_id>/read", methods=["PUT"], endpoint="notifications_read")
    @guards.login_required
    def mark_read(notification_id: int):
        item = notifications.mark_read(current_user().user_id, notification_id)
        return success("Notification marked as read", {"notification": item.to_dict()})

    @app.route("/api/notifications/read-all", methods=["PUT"], endpoint="notifications_read_all")
    @guards.login_required
    def mark_all_read():
        count = notifications.mark_all_read(current_user().user_id)
        return success("All notifications marked as read", {"updated": count})

    @app.route("/api/notifications/<int:notification_id>", methods=["DELETE"], endpoint="notifications_delete")
    @guards.login_required
    def delete(notification_id: int):
        notifications.delete(current_user().user_id, notification_id)
        return success("Notification deleted")

    @app.route("/api/notifications/clear-read", methods=["DELETE"], endpoint="notifications_clear_read")
    @guards.login_required
    def clear_read():
        count = notifications.clear_read(current_user().user_id)
        return success("Read notifications cleared", {"deleted": count})

    @app.route("/api/notifications/broadcast", methods=["POST"], endpoint="notifications_broadcast")
    @guards.admin_required
    def broadcast():
        body = json_body()
        sent = notifications.broadcast(
            title=body.get("title"),
            message=body.get("message"),
            type=_parse_enum(NotificationType, body.get("type"), "Type") or NotificationType.INFO,
            priority=_parse_enum(NotificationPriority, body.get("priority"), "Priority") or NotificationPriority.MEDIUM,
            role=parse_role(body.get("role")),
            user_ids=body.get("userIds"),
        )
        return success("Notification sent", {"sent": sent})
