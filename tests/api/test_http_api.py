from __future__ import annotations

from src.geo_attendance.geo_attendance.core.enums import Role

IN = {"lat": -6.2, "lng": 106.816666}
OUT = {"lat": -6.198651, "lng": 106.816666}


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "ok"


def test_unknown_route_uses_envelope(client):
    resp = client.get("/api/nope")

    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "message": "Route /api/nope not found"}


def test_register_sets_cookies_and_returns_tokens(client):
    resp = client.post("/api/auth/register", json={"name": "Ana", "email": "ana@example.com", "password": "secret123", "role": "admin"})

    body = resp.get_json()
    assert resp.status_code == 201
    assert body["data"]["user"]["role"] == "employee"
    assert body["data"]["accessToken"] and body["data"]["refreshToken"]
    cookies = resp.headers.getlist("Set-Cookie")
    assert any(c.startswith("accessToken=") and "HttpOnly" in c for c in cookies)
    assert any(c.startswith("refreshToken=") for c in cookies)


def test_protected_route_requires_token(client):
    resp = client.get("/api/auth/me")

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_login_me_and_refresh(client, make_user):
    make_user(email="ana@example.com")
    login = client.post("/api/auth/login", json={"email": "ana@example.com", "password": "secret123"}).get_json()
    headers = {"Authorization": f"Bearer {login['data']['accessToken']}"}

    me = client.get("/api/auth/me", headers=headers).get_json()
    assert me["data"]["email"] == "ana@example.com"
    assert me["data"]["unreadNotifications"] == 1

    refreshed = client.post("/api/auth/refresh", json={"refreshToken": login["data"]["refreshToken"]})
    assert refreshed.status_code == 200
    assert "refreshToken" not in refreshed.get_json()["data"]

    bad = client.post("/api/auth/refresh", json={"refreshToken": "garbage"})
    assert bad.status_code == 401
    assert bad.get_json()["message"] == "Invalid refresh token"


def test_bad_login_is_401(client, make_user):
    make_user(email="ana@example.com")

    resp = client.post("/api/auth/login", json={"email": "ana@example.com", "password": "nope"})

    assert resp.status_code == 401


def test_clock_in_and_out_flow(client, make_user, login, clock):
    make_user(email="ana@example.com")
    headers = login("ana@example.com")

    resp = client.post("/api/presence/clock-in", json=IN, headers=headers)
    assert resp.status_code == 201
    assert resp.get_json()["data"]["presence"]["status"] == "ontime"

    again = client.post("/api/presence/clock-in", json=IN, headers=headers)
    assert again.status_code == 409
    assert again.get_json()["message"] == "You have already clocked in today"

    clock.advance(hours=9)
    headers = login("ana@example.com")
    out = client.post("/api/presence/clock-out", json=IN, headers=headers)
    assert out.status_code == 200
    assert out.get_json()["data"]["presence"]["workDuration"] == 540

    today = client.get("/api/presence/today", headers=headers).get_json()["data"]
    assert today["hasClockOut"] is True

    history = client.get("/api/presence/history?page=1&limit=5", headers=headers).get_json()
    assert history["pagination"] == {"current": 1, "pages": 1, "total": 1}

    summary = client.get("/api/presence/summary?year=2025&month=1", headers=headers).get_json()
    assert summary["data"]["summary"]["totalWorkHours"] == 9


def test_clock_in_outside_geofence_is_400(client, make_user, login):
    make_user(email="ana@example.com")
    headers = login("ana@example.com")

    resp = client.post("/api/presence/clock-in", json=OUT, headers=headers)

    assert resp.status_code == 400
    assert "m from the office" in resp.get_json()["message"]


def test_validate_location(client, make_user, login):
    make_user(email="ana@example.com")

    resp = client.post("/api/office-location/validate", json=IN, headers=login("ana@example.com"))

    assert resp.get_json()["data"] == {
        "isWithinRadius": True,
        "distance": 0,
        "officeLocation": {"name": "Head Office", "radius": 100},
    }


def test_office_writes_are_admin_only(client, make_user, login):
    make_user(email="ana@example.com")
    make_user(name="Boss", email="boss@example.com", role=Role.ADMIN)
    payload = {"name": "Branch", "lat": 1.0, "lng": 2.0, "radius": 200}

    denied = client.post("/api/office-location", json=payload, headers=login("ana@example.com"))
    assert denied.status_code == 403

    created = client.post("/api/office-location", json=payload, headers=login("boss@example.com"))
    assert created.status_code == 201
    assert created.get_json()["data"]["officeLocation"]["radius"] == 200


def test_admin_stats_and_users(client, make_user, login):
    employee = make_user(email="ana@example.com")
    make_user(name="Boss", email="boss@example.com", role=Role.ADMIN)
    client.post("/api/presence/clock-in", json=IN, headers=login("ana@example.com"))
    admin = login("boss@example.com")

    stats = client.get("/api/admin/stats?year=2025&month=1", headers=admin).get_json()["data"]
    assert stats["totalUsers"] == 1
    assert stats["totalPresenceThisMonth"] == 1
    assert stats["workingDays"] == 23

    users = client.get("/api/admin/users?role=employee", headers=admin).get_json()
    assert [u["email"] for u in users["data"]["users"]] == ["ana@example.com"]

    presence = client.get("/api/admin/presence?status=ontime", headers=admin).get_json()
    assert presence["pagination"]["total"] == 1

    assert client.delete(f"/api/admin/users/{employee.user_id}", headers=admin).status_code == 200


def test_admin_cannot_delete_self(client, make_user, login):
    boss = make_user(name="Boss", email="boss@example.com", role=Role.ADMIN)

    resp = client.delete(f"/api/admin/users/{boss.user_id}", headers=login("boss@example.com"))

    assert resp.status_code == 400


def test_notification_feed(client, make_user, login):
    make_user(email="ana@example.com")
    headers = login("ana@example.com")

    feed = client.get("/api/notifications", headers=headers).get_json()
    assert feed["pagination"]["total"] == 1
    note_id = feed["data"]["notifications"][0]["id"]

    read = client.put(f"/api/notifications/{note_id}/read", headers=headers).get_json()
    assert read["data"]["notification"]["isRead"] is True

    assert client.delete("/api/notifications/clear-read", headers=headers).get_json()["data"]["deleted"] == 1
    assert client.get("/api/notifications/stats", headers=headers).get_json()["data"]["total"] == 0


def test_logout_clears_cookies_and_refresh(client, make_user):
    make_user(email="ana@example.com")
    login = client.post("/api/auth/login", json={"email": "ana@example.com", "password": "secret123"}).get_json()
    headers = {"Authorization": f"Bearer {login['data']['accessToken']}"}

    resp = client.post("/api/auth/logout", json={"refreshToken": login["data"]["refreshToken"]}, headers=headers)
    assert resp.status_code == 200

    again = client.post("/api/auth/refresh", json={"refreshToken": login["data"]["refreshToken"]})
    assert again.status_code == 401


def test_unexpected_errors_are_hidden(client, make_user, login, container, monkeypatch):
    make_user(email="ana@example.com")
    headers = login("ana@example.com")

    def boom(*args, **kwargs):
        raise RuntimeError("db down")

    monkeypatch.setattr(container.presences_repo, "get_for_user_and_date", boom)
    resp = client.get("/api/presence/today", headers=headers)

    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "message": "Internal server error"}
