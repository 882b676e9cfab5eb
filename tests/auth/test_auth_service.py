from __future__ import annotations

from datetime import timedelta

import pytest

from src.geo_attendance.geo_attendance.auth import service as auth_service_module
from src.geo_attendance.geo_attendance.auth.model import DeviceInfo
from src.geo_attendance.geo_attendance.core.enums import Role
from src.geo_attendance.geo_attendance.core.exceptions import (
    AuthenticationError,
    ConflictError,
    InvalidRefreshTokenError,
    NotFoundError,
    ValidationError,
)


@pytest.fixture
def auth(container):
    return container.auth_service


@pytest.fixture
def user(make_user):
    return make_user(email="ana@example.com")


def test_register_creates_employee_and_active_refresh_token(auth, repos, email_sender):
    result = auth.register(name="Ana", email="Ana@Example.com", password="secret123")

    assert result.user.role == Role.EMPLOYEE
    assert result.user.email == "ana@example.com"
    assert [r.token for r in repos.refresh_tokens.active_for(result.user.user_id)] == [result.tokens.refresh_token]
    assert email_sender.outbox[0]["to"] == "ana@example.com"
    assert repos.notifications.for_user(result.user.user_id)[0].title == "Welcome!"


def test_register_duplicate_email(auth, user):
    with pytest.raises(ConflictError):
        auth.register(name="Other", email="ana@example.com", password="secret123")


def test_register_survives_email_failure(auth, email_sender):
    email_sender.fail = True

    result = auth.register(name="Ana", email="ana2@example.com", password="secret123")

    assert result.user.user_id


def test_register_validates_input(auth):
    with pytest.raises(ValidationError):
        auth.register(name="Ana", email="not-an-email", password="secret123")
    with pytest.raises(ValidationError):
        auth.register(name="Ana", email="ana3@example.com", password="123")


def test_login_unknown_email_and_wrong_password_look_the_same(auth, user):
    with pytest.raises(AuthenticationError) as unknown:
        auth.login(email="nobody@example.com", password="secret123")
    with pytest.raises(AuthenticationError) as wrong:
        auth.login(email="ana@example.com", password="wrong-password")

    assert unknown.value.message == wrong.value.message


def test_second_login_deactivates_first_refresh_token(auth, user, repos, clock):
    first = auth.login(email="ana@example.com", password="secret123", device=DeviceInfo("Mozilla/5.0 (iPhone)", "10.0.0.1"))
    clock.advance(seconds=1)
    second = auth.login(email="ana@example.com", password="secret123")

    active = repos.refresh_tokens.active_for(user.user_id)
    assert [r.token for r in active] == [second.tokens.refresh_token]
    assert len(repos.refresh_tokens.rows) == 2
    assert repos.refresh_tokens.rows[1].device_type == "mobile"

    with pytest.raises(InvalidRefreshTokenError):
        auth.refresh(first.tokens.refresh_token)


def test_refresh_issues_new_access_token_only(auth, user, repos, container):
    session = auth.login(email="ana@example.com", password="secret123")

    refreshed_user, access = auth.refresh(session.tokens.refresh_token)

    assert refreshed_user.user_id == user.user_id
    assert container.token_codec.verify_access(access).user_id == user.user_id
    assert len(repos.refresh_tokens.rows) == 1


def test_refresh_fails_identically_for_every_cause(auth, user, repos, clock):
    session = auth.login(email="ana@example.com", password="secret123")
    token = session.tokens.refresh_token

    failures = []

    # Tampered signature.
    with pytest.raises(InvalidRefreshTokenError) as exc:
        auth.refresh(token[:-2] + "xx")
    failures.append(exc.value)

    # No matching database row.
    repos.refresh_tokens.rows.clear()
    with pytest.raises(InvalidRefreshTokenError) as exc:
        auth.refresh(token)
    failures.append(exc.value)

    # Expired.
    session = auth.login(email="ana@example.com", password="secret123")
    with pytest.raises(InvalidRefreshTokenError) as exc:
        auth.refresh(session.tokens.refresh_token, now=clock.now + timedelta(days=8))
    failures.append(exc.value)

    assert {(e.status_code, e.message) for e in failures} == {(401, "Invalid refresh token")}


def test_logout_and_logout_all(auth, user, repos, clock):
    first = auth.login(email="ana@example.com", password="secret123")
    auth.logout(first.tokens.refresh_token, user_id=user.user_id)
    assert repos.refresh_tokens.active_for(user.user_id) == []

    for _ in range(2):
        clock.advance(seconds=1)
        repos.refresh_tokens.create(
            user_id=user.user_id,
            token=f"tok-{clock.now.timestamp()}",
            expires_at=clock.now + timedelta(days=7),
            device=DeviceInfo(),
        )
    assert auth.logout_all(user.user_id) == 2
    assert repos.refresh_tokens.active_for(user.user_id) == []


def test_change_password_keeps_current_session(auth, user, repos, clock):
    session = auth.login(email="ana@example.com", password="secret123")
    repos.refresh_tokens.create(
        user_id=user.user_id,
        token="other-device",
        expires_at=clock.now + timedelta(days=7),
        device=DeviceInfo(),
    )

    auth.change_password(
        user.user_id,
        current_password="secret123",
        new_password="new-secret",
        refresh_token=session.tokens.refresh_token,
    )

    active = [r.token for r in repos.refresh_tokens.active_for(user.user_id)]
    assert active == [session.tokens.refresh_token]
    auth.login(email="ana@example.com", password="new-secret")


def test_change_password_requires_current_password(auth, user):
    with pytest.raises(AuthenticationError):
        auth.change_password(user.user_id, current_password="wrong", new_password="new-secret")


def test_forgot_password_unknown_email(auth):
    with pytest.raises(NotFoundError):
        auth.forgot_password("nobody@example.com")


def test_forgot_password_emails_six_digit_code(auth, user, repos, email_sender, clock):
    auth.forgot_password("ana@example.com", device=DeviceInfo("curl", "1.2.3.4"))

    code = repos.password_resets.latest_for(user.user_id)
    assert len(code.code) == 6 and code.code.isdigit()
    assert code.expires_at == clock.now + timedelta(minutes=15)
    assert code.ip_address == "1.2.3.4"
    assert code.code in email_sender.outbox[-1]["text"]
    assert all(code.code not in n.message for n in repos.notifications.for_user(user.user_id))


def test_forgot_password_falls_back_to_notification(auth, user, repos, email_sender):
    email_sender.fail = True

    auth.forgot_password("ana@example.com")

    code = repos.password_resets.latest_for(user.user_id).code
    assert code in repos.notifications.for_user(user.user_id)[-1].message


def test_forgot_password_keeps_earlier_codes_usable(auth, user, repos, monkeypatch):
    codes = iter(["111111", "222222"])
    monkeypatch.setattr(auth_service_module, "generate_reset_code", lambda: next(codes))

    auth.forgot_password("ana@example.com")
    first = repos.password_resets.latest_for(user.user_id)
    auth.forgot_password("ana@example.com")
    second = repos.password_resets.latest_for(user.user_id)

    assert first.code_id != second.code_id
    assert not repos.password_resets.rows[first.code_id].is_used
    assert not repos.password_resets.rows[second.code_id].is_used

    auth.reset_password(email="ana@example.com", code="111111", new_password="brand-new")

    assert repos.password_resets.rows[first.code_id].is_used
    assert not repos.password_resets.rows[second.code_id].is_used
    auth.login(email="ana@example.com", password="brand-new")


def test_reset_password_consumes_code_once(auth, user, repos):
    session = auth.login(email="ana@example.com", password="secret123")
    auth.forgot_password("ana@example.com")
    code = repos.password_resets.latest_for(user.user_id).code

    auth.reset_password(email="ana@example.com", code=code, new_password="brand-new")

    assert repos.refresh_tokens.active_for(user.user_id) == []
    with pytest.raises(InvalidRefreshTokenError):
        auth.refresh(session.tokens.refresh_token)
    with pytest.raises(ValidationError):
        auth.reset_password(email="ana@example.com", code=code, new_password="another-one")
    auth.login(email="ana@example.com", password="brand-new")


def test_reset_password_rejects_expired_code(auth, user, repos, clock):
    auth.forgot_password("ana@example.com")
    code = repos.password_resets.latest_for(user.user_id).code

    with pytest.raises(ValidationError):
        auth.reset_password(
            email="ana@example.com",
            code=code,
            new_password="brand-new",
            now=clock.now + timedelta(minutes=16),
        )
    assert not repos.password_resets.latest_for(user.user_id).is_used


def test_me_includes_unread_count(auth, user, container):
    container.notification_service.notify(user.user_id, "Hi", "There")

    me = auth.me(user.user_id)

    assert me["email"] == "ana@example.com"
    assert me["unreadNotifications"] == 1
    assert "password_hash" not in me
