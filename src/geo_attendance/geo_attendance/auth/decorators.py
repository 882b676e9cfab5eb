from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Callable, Optional

from flask import g, request

from ..core.constants import ACCESS_COOKIE, REFRESH_COOKIE
from ..core.exceptions import AuthorizationError
from ..users.model import User
from .model import DeviceInfo
from .service import AuthService


def bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return request.cookies.get(ACCESS_COOKIE)


def presented_refresh_token(body: Optional[dict] = None) -> Optional[str]:
    token = (body or {}).get("refreshToken")
    if isinstance(token, str) and token:
        return token
    return request.cookies.get(REFRESH_COOKIE)


def device_info() -> DeviceInfo:
    return DeviceInfo(
        user_agent=request.headers.get("User-Agent", ""),
        ip=request.headers.get("X-Forwarded-For", request.remote_addr or "").split(",")[0].strip(),
    )


def current_user() -> User:
    return g.current_user


@dataclass(frozen=True)
class Guards:
    login_required: Callable
    admin_required: Callable


def build_guards(auth_service: AuthService) -> Guards:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.current_user = auth_service.authenticate_access_token(bearer_token())
            return view(*args, **kwargs)

        return wrapper

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = auth_service.authenticate_access_token(bearer_token())
            if not user.is_admin:
                raise AuthorizationError("Admin access required")
            g.current_user = user
            return view(*args, **kwargs)

        return wrapper

    return Guards(login_required=login_required, admin_required=admin_required)
