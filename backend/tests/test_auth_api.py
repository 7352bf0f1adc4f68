from fastapi.testclient import TestClient

from conftest import ADMIN_PASSWORD, ADMIN_USERNAME, login


def test_login_sets_session_cookie(client: TestClient):
    r = login(client, ADMIN_USERNAME, ADMIN_PASSWORD)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["success"] is True
    assert body["user"]["username"] == "admin"
    assert body["user"]["role"] == "admin"

    set_cookie = r.headers["set-cookie"].lower()
    assert "auth_token=" in set_cookie
    assert "httponly" in set_cookie
    assert "samesite=strict" in set_cookie

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json() == {"id": body["user"]["id"], "username": "admin", "role": "admin"}


def test_login_wrong_password(client: TestClient):
    r = login(client, ADMIN_USERNAME, "wrong")
    assert r.status_code == 401
    assert "set-cookie" not in r.headers
    assert client.get("/api/auth/me").status_code == 401


def test_login_unknown_user(client: TestClient):
    r = login(client, "nobody", "whatever")
    assert r.status_code == 401


def test_login_missing_fields(client: TestClient):
    r = client.post("/api/auth/login", json={"username": "admin"})
    assert r.status_code == 400
    assert "error" in r.json()

    r = client.post("/api/auth/login", json={"username": "", "password": ""})
    assert r.status_code == 400


def test_protected_route_requires_cookie(client: TestClient):
    r = client.get("/api/landscapes")
    assert r.status_code == 401
    assert r.json() == {"error": "Nicht authentifiziert"}


def test_bearer_header_is_not_accepted(client: TestClient):
    token = login(client, ADMIN_USERNAME, ADMIN_PASSWORD).cookies["auth_token"]
    client.cookies.clear()
    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


def test_invalid_cookie_is_rejected(client: TestClient):
    client.cookies.set("auth_token", "forged-token")
    r = client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json() == {"error": "Session abgelaufen oder ungültig"}


def test_logout_destroys_session(admin_client: TestClient):
    token = admin_client.cookies["auth_token"]
    r = admin_client.post("/api/auth/logout")
    assert r.status_code == 200
    assert r.json() == {"success": True}

    # Even when a client replays the old cookie the session is gone
    admin_client.cookies.set("auth_token", token)
    assert admin_client.get("/api/auth/me").status_code == 401

    # Logging out again is harmless
    assert admin_client.post("/api/auth/logout").status_code == 200


def test_change_password(admin_client: TestClient):
    r = admin_client.post(
        "/api/auth/change-password",
        json={"currentPassword": "wrong", "newPassword": "new-secret"},
    )
    assert r.status_code == 401

    r = admin_client.post(
        "/api/auth/change-password",
        json={"currentPassword": ADMIN_PASSWORD, "newPassword": "short"},
    )
    assert r.status_code == 400

    r = admin_client.post(
        "/api/auth/change-password",
        json={"currentPassword": ADMIN_PASSWORD, "newPassword": "new-secret"},
    )
    assert r.status_code == 200

    assert login(admin_client, ADMIN_USERNAME, ADMIN_PASSWORD).status_code == 401
    assert login(admin_client, ADMIN_USERNAME, "new-secret").status_code == 200


def test_login_rate_limit(client: TestClient):
    for _ in range(10):
        assert login(client, ADMIN_USERNAME, "wrong").status_code == 401

    r = login(client, ADMIN_USERNAME, ADMIN_PASSWORD)
    assert r.status_code == 429
    assert "error" in r.json()


def test_user_role_is_read_only(admin_client: TestClient, viewer: dict):
    assert login(admin_client, viewer["username"], viewer["password"]).status_code == 200

    assert admin_client.get("/api/landscapes").status_code == 200
    r = admin_client.post("/api/landscapes", json={"name": "ERP"})
    assert r.status_code == 403
    assert r.json() == {"error": "Admin-Berechtigung erforderlich"}
    assert admin_client.get("/api/users").status_code == 403
