"""JSON envelope helpers and the app-wide error handlers.

Every response is ``{"success": bool, "message": str, "data": ...}``; paginated
responses also carry ``pagination``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError
from .pagination import Page

logger = logging.getLogger(__name__)


def success(message: str = "Success", data: Any = None, status: int = 200, *, pagination: Optional[dict] = None):
    body: dict[str, Any] = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    if pagination is not None:
        body["pagination"] = pagination
    return jsonify(body), status


def paginated(page: Page, key: str, items: list, message: str = "Success"):
    return success(message, {key: items}, pagination=page.pagination())


def failure(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def json_body() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        return failure(exc.message, exc.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        if exc.code == 404:
            return failure(f"Route {request.path} not found", 404)
        return failure(exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception(
            "Unhandled error route=%s method=%s ip=%s",
            request.path,
            request.method,
            request.remote_addr,
        )
        return failure("Internal server error", 500)
