from __future__ import annotations

from flask import Flask, request

from ..auth.decorators import build_guards, current_user
from ..common.datetime_utils import parse_iso_date
from ..common.pagination import PageRequest
from ..common.responses import json_body, paginated, success
from ..common.validators import parse_positive_int
from ..container import Container
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..users.service import parse_role


def _parse_status(value):
    if value in (None, ""):
        return None
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise ValidationError("Status is not valid")


def _parse_date_arg(name: str):
    value = request.args.get(name)
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{name} must be a date (YYYY-MM-DD)")


def register(app: Flask, container: Container) -> None:
    guards = build_guards(container.auth_service)
    users = container.user_service

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_users")
    @guards.admin_required
    def list_users():
        page = users.list_users(
            PageRequest.from_args(request.args),
            role=parse_role(request.args.get("role")),
            search=request.args.get("search"),
        )
        return paginated(page, "users", [u.to_public() for u in page.items])

    @app.route("/api/admin/users/<int:user_id>", methods=["GET"], endpoint="admin_user_get")
    @guards.admin_required
    def get_user(user_id: int):
        return success("Success", {"user": users.get_user(user_id).to_public()})

    @app.route("/api/admin/users/<int:user_id>", methods=["PUT"], endpoint="admin_user_update")
    @guards.admin_required
    def update_user(user_id: int):
        body = json_body()
        user = users.update_user(
            user_id,
            name=body.get("name"),
            email=body.get("email"),
            role=parse_role(body.get("role")),
        )
        return success("User updated", {"user": user.to_public()})

    @app.route("/api/admin/users/<int:user_id>", methods=["DELETE"], endpoint="admin_user_delete")
    @guards.admin_required
    def delete_user(user_id: int):
        users.delete_user(current_user_id=current_user().user_id, user_id=user_id)
        return success("User deleted")

    @app.route("/api/admin/presence", methods=["GET"], endpoint="admin_presence")
    @guards.admin_required
    def list_presence():
        user_id = request.args.get("userId")
        page = container.attendance_service.list_presences(
            PageRequest.from_args(request.args),
            user_id=parse_positive_int(user_id, "userId", 0) or None,
            status=_parse_status(request.args.get("status")),
            start=_parse_date_arg("startDate"),
            end=_parse_date_arg("endDate"),
        )
        return paginated(page, "presences", [r.to_dict() for r in page.items])

    @app.route("/api/admin/stats", methods=["GET"], endpoint="admin_stats")
    @guards.admin_required
    def stats():
        result = container.report_service.monthly_statistics(
            year=parse_positive_int(request.args.get("year"), "year", 0) or None,
            month=parse_positive_int(request.args.get("month"), "month", 0) or None,
        )
        return success("Success", result.to_dict())
