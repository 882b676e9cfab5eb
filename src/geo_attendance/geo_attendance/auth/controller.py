from __future__ import annotations

from flask import Flask, current_app

from ..common.responses import json_body, success
from ..core.constants import ACCESS_COOKIE, REFRESH_COOKIE
from ..container import Container
from .decorators import build_guards, current_user, device_info, presented_refresh_token


def register(app: Flask, container: Container) -> None:
    guards = build_guards(container.auth_service)
    auth = container.auth_service
    codec = container.token_codec

    def _set_cookie(response, name: str, value: str, max_age: int) -> None:
        response.set_cookie(
            name,
            value,
            max_age=max_age,
            httponly=True,
            secure=bool(current_app.config.get("COOKIE_SECURE", False)),
            samesite="Lax",
        )

    def _with_tokens(resp, *, access: str, refresh: str | None = None):
        response, status = resp
        _set_cookie(response, ACCESS_COOKIE, access, int(codec.access_ttl.total_seconds()))
        if refresh:
            _set_cookie(response, REFRESH_COOKIE, refresh, int(codec.refresh_ttl.total_seconds()))
        return response, status

    def _clear_tokens(resp):
        response, status = resp
        response.delete_cookie(ACCESS_COOKIE)
        response.delete_cookie(REFRESH_COOKIE)
        return response, status

    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def register_user():
        body = json_body()
        result = auth.register(
            name=body.get("name"),
            email=body.get("email"),
            password=body.get("password"),
            device=device_info(),
        )
        return _with_tokens(
            success("Registration successful", result.to_dict(), 201),
            access=result.tokens.access_token,
            refresh=result.tokens.refresh_token,
        )

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        body = json_body()
        result = auth.login(email=body.get("email"), password=body.get("password"), device=device_info())
        return _with_tokens(
            success("Login successful", result.to_dict()),
            access=result.tokens.access_token,
            refresh=result.tokens.refresh_token,
        )

    @app.route("/api/auth/refresh", methods=["POST"], endpoint="auth_refresh")
    def refresh():
        _, access = auth.refresh(presented_refresh_token(json_body()))
        return _with_tokens(success("Token refreshed", {"accessToken": access}), access=access)

    @app.route("/api/auth/forgot-password", methods=["POST"], endpoint="auth_forgot_password")
    def forgot_password():
        auth.forgot_password(json_body().get("email"), device=device_info())
        return success("A password reset code has been sent")

    @app.route("/api/auth/reset-password", methods=["POST"], endpoint="auth_reset_password")
    def reset_password():
        body = json_body()
        auth.reset_password(email=body.get("email"), code=body.get("code"), new_password=body.get("newPassword"))
        return success("Password has been reset, please sign in again")

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    @guards.login_required
    def logout():
        auth.logout(presented_refresh_token(json_body()), user_id=current_user().user_id)
        return _clear_tokens(success("Logged out"))

    @app.route("/api/auth/logout-all", methods=["POST"], endpoint="auth_logout_all")
    @guards.login_required
    def logout_all():
        count = auth.logout_all(current_user().user_id)
        return _clear_tokens(success("Logged out from all devices", {"sessions": count}))

    @app.route("/api/auth/change-password", methods=["POST"], endpoint="auth_change_password")
    @guards.login_required
    def change_password():
        body = json_body()
        auth.change_password(
            current_user().user_id,
            current_password=body.get("currentPassword"),
            new_password=body.get("newPassword"),
            refresh_token=presented_refresh_token(body),
        )
        return success("Password changed")

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @guards.login_required
    def me():
        return success("Success", auth.me(current_user().user_id))
