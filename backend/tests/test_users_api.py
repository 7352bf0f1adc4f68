from fastapi.testclient import TestClient

from conftest import ADMIN_PASSWORD, ADMIN_USERNAME, login


def _admin_id(client: TestClient) -> int:
    return client.get("/api/auth/me").json()["id"]


def test_list_users_hides_password_hash(admin_client: TestClient, viewer: dict):
    r = admin_client.get("/api/users")
    assert r.status_code == 200
    users = r.json()
    assert [u["username"] for u in users] == ["admin", "viewer"]
    for user in users:
        assert set(user) == {"id", "username", "role", "created_at"}


def test_create_user_defaults_to_read_only(admin_client: TestClient):
    r = admin_client.post("/api/users", json={"username": "anna", "password": "secret1"})
    assert r.status_code == 200
    assert r.json()["role"] == "user"


def test_duplicate_username(admin_client: TestClient, viewer: dict):
    r = admin_client.post("/api/users", json={"username": "viewer", "password": "other"})
    assert r.status_code == 409


def test_invalid_role(admin_client: TestClient):
    r = admin_client.post("/api/users", json={"username": "bob", "password": "secret1", "role": "root"})
    assert r.status_code == 400
    assert admin_client.put("/api/users/1", json={"role": "root"}).status_code == 400


def test_partial_update(admin_client: TestClient, viewer: dict):
    r = admin_client.put(f"/api/users/{viewer['id']}", json={"role": "admin"})
    assert r.status_code == 200

    updated = next(u for u in admin_client.get("/api/users").json() if u["id"] == viewer["id"])
    assert updated["username"] == "viewer"
    assert updated["role"] == "admin"

    # Password untouched
    admin_client.cookies.clear()
    assert login(admin_client, "viewer", viewer["password"]).status_code == 200


def test_update_password_and_username(admin_client: TestClient, viewer: dict):
    r = admin_client.put(f"/api/users/{viewer['id']}", json={"username": "viewer2", "password": "fresh-pass"})
    assert r.status_code == 200

    admin_client.cookies.clear()
    assert login(admin_client, "viewer", viewer["password"]).status_code == 401
    assert login(admin_client, "viewer2", "fresh-pass").status_code == 200


def test_update_to_taken_username(admin_client: TestClient, viewer: dict):
    r = admin_client.put(f"/api/users/{viewer['id']}", json={"username": ADMIN_USERNAME})
    assert r.status_code == 409


def test_update_nothing_or_missing(admin_client: TestClient, viewer: dict):
    assert admin_client.put(f"/api/users/{viewer['id']}", json={}).status_code == 400
    assert admin_client.put("/api/users/999", json={"role": "user"}).status_code == 404


def test_admin_cannot_delete_self(admin_client: TestClient):
    admin_id = _admin_id(admin_client)
    r = admin_client.delete(f"/api/users/{admin_id}")
    assert r.status_code == 400
    assert r.json() == {"error": "Sie können sich nicht selbst löschen"}
    assert any(u["id"] == admin_id for u in admin_client.get("/api/users").json())


def test_builtin_admin_is_protected(admin_client: TestClient):
    admin_id = _admin_id(admin_client)
    admin_client.post("/api/users", json={"username": "second", "password": "second-pass", "role": "admin"})
    admin_client.cookies.clear()
    assert login(admin_client, "second", "second-pass").status_code == 200

    r = admin_client.delete(f"/api/users/{admin_id}")
    assert r.status_code == 400
    assert any(u["id"] == admin_id for u in admin_client.get("/api/users").json())


def test_delete_user(admin_client: TestClient, viewer: dict):
    r = admin_client.delete(f"/api/users/{viewer['id']}")
    assert r.status_code == 200
    assert all(u["id"] != viewer["id"] for u in admin_client.get("/api/users").json())
    assert admin_client.delete(f"/api/users/{viewer['id']}").status_code == 404

    admin_client.cookies.clear()
    assert login(admin_client, "viewer", viewer["password"]).status_code == 401
    assert login(admin_client, ADMIN_USERNAME, ADMIN_PASSWORD).status_code == 200


def test_user_management_requires_admin(admin_client: TestClient, viewer: dict):
    admin_client.cookies.clear()
    login(admin_client, viewer["username"], viewer["password"])
    assert admin_client.get("/api/users").status_code == 403
    assert admin_client.post("/api/users", json={"username": "x", "password": "y"}).status_code == 403
    assert admin_client.delete("/api/users/1").status_code == 403
