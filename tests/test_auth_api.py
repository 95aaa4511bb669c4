# tests/test_auth_api.py

from conftest import API_KEY


def test_login_success_returns_token(client, john):
    res = client.post("/api/auth/login", json={"username": "john", "password": "secret"})

    assert res.status_code == 200
    body = res.json()
    assert body["token"]
    assert body["token"].startswith(f"token_{john['id']}_")
    assert body["user"] == john
    assert "password" not in body["user"]


def test_wrong_password_and_unknown_user_look_the_same(client, john):
    wrong_password = client.post("/api/auth/login", json={"username": "john", "password": "wrong"})
    unknown_user = client.post("/api/auth/login", json={"username": "nobody", "password": "secret"})

    assert wrong_password.status_code == 401
    assert unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()
    assert wrong_password.json()["error"] == "Invalid credentials"
    assert wrong_password.json()["code"] == 401


def test_login_with_missing_fields(client):
    res = client.post("/api/auth/login", json={"username": "john"})

    assert res.status_code == 400
    assert res.json()["error"] == "Invalid request body"


# -------------------------------
# API-key guarded routes
# -------------------------------

def test_admin_requires_api_key(client, john):
    res = client.get("/api/admin/users")

    assert res.status_code == 401
    assert res.json()["error"] == "Invalid API key"
    assert res.json()["code"] == 401


def test_admin_rejects_wrong_api_key(client):
    res = client.get("/api/admin/users", headers={"X-API-Key": "nope"})
    assert res.status_code == 401


def test_admin_with_api_key(client, john):
    res = client.get("/api/admin/users", headers={"X-API-Key": API_KEY})

    assert res.status_code == 200
    assert res.json() == [john]


def test_guard_does_not_run_handler(app, client):
    from user_service.database import get_store

    calls = []

    def tracking_store():
        calls.append(1)
        return None

    app.dependency_overrides[get_store] = tracking_store
    res = client.get("/api/admin/users")

    assert res.status_code == 401
    assert calls == []


def test_login_token_does_not_open_admin_routes(client, john):
    token = client.post("/api/auth/login", json={"username": "john", "password": "secret"}).json()["token"]

    res = client.get("/api/admin/users", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401
