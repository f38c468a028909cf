from __future__ import annotations

from models import storage
from models.refresh_token import RefreshToken
from utils.errors import server_error


def _signup(client, email="a@x.com", password="pw123", name="Alice"):
    return client.post("/signup", json={"name": name, "email": email, "password": password})


def _login(client, email="a@x.com", password="pw123"):
    return client.post("/login", json={"email": email, "password": password})


def test_signup_then_duplicate_email(client) -> None:
    r1 = _signup(client)
    assert r1.status_code == 201, r1.get_json()
    assert r1.get_json()["user_id"]

    r2 = _signup(client, email="A@X.com ")
    assert r2.status_code == 409
    body = r2.get_json()
    assert body["error"] == "CONFLICT"
    assert "user_id" not in body


def test_signup_with_malformed_input_is_422(client) -> None:
    r = client.post("/signup", json={"name": "", "email": "not-an-email"})
    assert r.status_code == 422
    details = r.get_json()["details"]
    assert {"name", "email", "password"} <= set(details)


def test_login_returns_token_pair(client) -> None:
    _signup(client)
    r = _login(client)
    assert r.status_code == 200
    body = r.get_json()
    assert body["access_token"] and body["refresh_token"]
    assert body["access_token"] != body["refresh_token"]


def test_login_with_wrong_password_returns_no_tokens(client) -> None:
    _signup(client)
    r = _login(client, password="nope")
    assert r.status_code == 401
    body = r.get_json()
    assert "access_token" not in body and "refresh_token" not in body
    assert storage.count(RefreshToken) == 0


def test_login_without_fields_is_422(client) -> None:
    r = client.post("/login", json={})
    assert r.status_code == 422


def test_login_fails_closed_when_whitelisting_fails(client, flow, monkeypatch) -> None:
    _signup(client)

    def failing_insert(user_id, token):
        raise server_error("Failed to whitelist the refresh token.")

    monkeypatch.setattr(flow.whitelist, "insert", failing_insert)
    r = _login(client)
    assert r.status_code == 500
    body = r.get_json()
    assert body["error"] == "SERVER_ERROR"
    assert "access_token" not in body and "refresh_token" not in body


def test_get_user_with_access_token_header(client) -> None:
    user_id = _signup(client).get_json()["user_id"]
    tokens = _login(client).get_json()

    r = client.get("/user", headers={"access_token": tokens["access_token"]})
    assert r.status_code == 200
    user = r.get_json()["user"]
    assert user == {"id": user_id, "name": "Alice", "email": "a@x.com"}


def test_get_user_token_errors(client) -> None:
    _signup(client)
    tokens = _login(client).get_json()

    assert client.get("/user").status_code == 401
    assert client.get("/user", headers={"access_token": "garbage"}).status_code == 401
    wrong = client.get("/user", headers={"access_token": tokens["refresh_token"]})
    assert wrong.status_code == 403
    assert wrong.get_json()["error"] == "FORBIDDEN"


def test_refresh_succeeds_once_then_old_token_is_rejected(client) -> None:
    _signup(client)
    tokens = _login(client).get_json()

    r1 = client.post("/refresh", headers={"refresh_token": tokens["refresh_token"]})
    assert r1.status_code == 200
    fresh = r1.get_json()
    assert fresh["access_token"] != tokens["access_token"]
    assert fresh["refresh_token"] != tokens["refresh_token"]
    assert client.get("/user", headers={"access_token": fresh["access_token"]}).status_code == 200

    r2 = client.post("/refresh", headers={"refresh_token": tokens["refresh_token"]})
    assert r2.status_code == 401
    assert "access_token" not in r2.get_json()


def test_refresh_without_header_is_401(client) -> None:
    assert client.post("/refresh").status_code == 401


def test_logout_revokes_refresh_token(client) -> None:
    _signup(client)
    tokens = _login(client).get_json()

    r = client.post("/logout", headers={"refresh_token": tokens["refresh_token"]})
    assert r.status_code == 204
    assert client.post("/refresh", headers={"refresh_token": tokens["refresh_token"]}).status_code == 401


def test_health_and_root(client) -> None:
    r = client.get("/health")
    assert r.status_code == 200
    assert r.get_json()["database"] == "ok"
    assert client.get("/").status_code == 200
    assert client.get("/no-such-route").status_code == 404
