from __future__ import annotations

from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest
from werkzeug.security import generate_password_hash

from src.geo_attendance.geo_attendance.container import AuthSettings, assemble
from src.geo_attendance.geo_attendance.core.enums import Role
from src.geo_attendance.geo_attendance.geofence.model import OfficeLocation
from src.geo_attendance.geo_attendance.mail.sender import FakeEmailSender
from tests.fakes import (
    InMemoryNotifications,
    InMemoryOffices,
    InMemoryPasswordResets,
    InMemoryPresences,
    InMemoryRefreshTokens,
    InMemoryUsers,
)

OFFICE_LAT = -6.2
OFFICE_LNG = 106.816666


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, *args) -> datetime:
        self.now = datetime(*args)
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return datetime(2025, 1, 6, 7, 45, 0)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture
def office() -> OfficeLocation:
    return OfficeLocation(location_id=1, name="Head Office", lat=OFFICE_LAT, lng=OFFICE_LNG, radius=100)


@pytest.fixture
def repos(office):
    return SimpleNamespace(
        users=InMemoryUsers(),
        presences=InMemoryPresences(),
        offices=InMemoryOffices([office]),
        notifications=InMemoryNotifications(),
        refresh_tokens=InMemoryRefreshTokens(),
        password_resets=InMemoryPasswordResets(),
    )


@pytest.fixture
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture
def container(repos, email_sender, clock):
    return assemble(
        users_repo=repos.users,
        presences_repo=repos.presences,
        offices_repo=repos.offices,
        notifications_repo=repos.notifications,
        refresh_tokens_repo=repos.refresh_tokens,
        password_resets_repo=repos.password_resets,
        email_sender=email_sender,
        auth=AuthSettings(access_secret="test-access", refresh_secret="test-refresh"),
        clock=clock,
    )


@pytest.fixture
def make_user(repos):
    def _make(name: str = "Employee", email: str = "employee@example.com", password: str = "secret123", role=Role.EMPLOYEE):
        user_id = repos.users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
        )
        return repos.users.get_by_id(user_id)

    return _make


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.geo_attendance.geo_attendance.main import create_app

    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(email: str, password: str = "secret123") -> dict:
        resp = client.post("/api/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return {"Authorization": f"Bearer {resp.get_json()['data']['accessToken']}"}

    return _login
