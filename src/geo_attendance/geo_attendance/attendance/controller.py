from __future__ import annotations

from flask import Flask, request

from ..auth.decorators import build_guards, current_user
from ..common.pagination import PageRequest
from ..common.responses import json_body, paginated, success
from ..common.validators import parse_positive_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    guards = build_guards(container.auth_service)
    attendance = container.attendance_service

    @app.route("/api/presence/clock-in", methods=["POST"], endpoint="presence_clock_in")
    @guards.login_required
    def clock_in():
        body = json_body()
        record = attendance.clock_in(current_user().user_id, body.get("lat"), body.get("lng"))
        return success("Clock in successful", {"presence": record.to_dict()}, 201)

    @app.route("/api/presence/clock-out", methods=["POST"], endpoint="presence_clock_out")
    @guards.login_required
    def clock_out():
        body = json_body()
        record = attendance.clock_out(current_user().user_id, body.get("lat"), body.get("lng"))
        return success("Clock out successful", {"presence": record.to_dict()})

    @app.route("/api/presence/today", methods=["GET"], endpoint="presence_today")
    @guards.login_required
    def today():
        return success("Success", attendance.today_status(current_user().user_id).to_dict())

    @app.route("/api/presence/history", methods=["GET"], endpoint="presence_history")
    @guards.login_required
    def history():
        page = attendance.history(
            current_user().user_id,
            PageRequest.from_args(request.args),
            month=parse_positive_int(request.args.get("month"), "month", 0) or None,
            year=parse_positive_int(request.args.get("year"), "year", 0) or None,
        )
        return paginated(page, "presences", [r.to_dict() for r in page.items])

    @app.route("/api/presence/summary", methods=["GET"], endpoint="presence_summary")
    @guards.login_required
    def summary():
        result = container.report_service.user_month_summary(
            current_user().user_id,
            year=parse_positive_int(request.args.get("year"), "year", 0) or None,
            month=parse_positive_int(request.args.get("month"), "month", 0) or None,
        )
        return success("Success", {"summary": result.to_dict(include_records=False)})
