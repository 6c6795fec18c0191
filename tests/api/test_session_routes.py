import json
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from account_service.infrastructure.security.tokens import TokenCodec
from tests.api.conftest import register_and_activate


def test_login_sets_cookies_and_returns_public_user(client, logged_in, sessions):
    body = logged_in.json()
    assert body["success"] is True
    assert body["accessToken"]
    user = body["user"]
    assert user["email"] == "a@x.com"
    assert user["isVerified"] is True
    assert user["role"] == "user"
    assert "passwordHash" not in user and "password" not in user

    cookies = logged_in.headers.get_list("set-cookie")
    access = next(c for c in cookies if c.startswith("access_token="))
    refresh = next(c for c in cookies if c.startswith("refresh_token="))
    assert "HttpOnly" in access and "Max-Age=300" in access
    assert "samesite=lax" in access.lower()
    assert "Max-Age=1200" in refresh

    snapshot = json.loads(sessions.store[user["id"]])
    assert snapshot["email"] == "a@x.com"


def test_login_failures_are_indistinguishable(client: TestClient):
    register_and_activate(client)

    wrong_password = client.post(
        "/v1/login", json={"email": "a@x.com", "password": "nope"}
    )
    unknown_email = client.post(
        "/v1/login", json={"email": "ghost@x.com", "password": "secret1"}
    )

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json() == {
        "success": False,
        "message": "Invalid email or password.",
    }


def test_me_with_cookie_and_with_bearer(client, logged_in):
    r = client.get("/v1/me")
    assert r.status_code == 200, r.text
    assert r.json()["user"]["email"] == "a@x.com"

    token = logged_in.json()["accessToken"]
    bare = TestClient(client.app, raise_server_exceptions=False)
    r = bare.get("/v1/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200, r.text


def test_me_requires_login(client):
    r = client.get("/v1/me")
    assert r.status_code == 401
    assert r.json() == {
        "success": False,
        "message": "Please login to access this resource.",
    }


def test_me_rejects_refresh_token_as_bearer(client, logged_in):
    refresh = client.cookies.get("refresh_token")
    client.cookies.clear()
    r = client.get("/v1/me", headers={"Authorization": f"Bearer {refresh}"})
    assert r.status_code == 400
    assert r.json()["message"] == "JSON Web Token is invalid. Try again."


def test_logout_clears_cookies_and_session(client, logged_in, sessions):
    user_id = logged_in.json()["user"]["id"]
    token = logged_in.json()["accessToken"]

    r = client.get("/v1/logout")

    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "Logged out successfully."}
    cleared = r.headers.get_list("set-cookie")
    assert any(c.startswith('access_token=""') and "Max-Age=0" in c for c in cleared)
    assert any(c.startswith('refresh_token=""') and "Max-Age=0" in c for c in cleared)
    assert user_id not in sessions.store

    # a copy of the pre-logout access token no longer opens a session
    r = client.get("/v1/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 400
    assert r.json()["message"] == "Session expired. Please login again."


def test_logout_when_anonymous_still_succeeds(client):
    r = client.get("/v1/logout")
    assert r.status_code == 200
    assert r.json()["success"] is True


def test_refresh_rotates_cookies(client, logged_in, app_and_deps):
    _, codec = app_and_deps
    user_id = logged_in.json()["user"]["id"]

    r = client.post("/v1/refresh")

    assert r.status_code == 200, r.text
    assert codec.verify_access_token(r.json()["accessToken"]) == user_id
    names = [c.split("=", 1)[0] for c in r.headers.get_list("set-cookie")]
    assert sorted(names) == ["access_token", "refresh_token"]


def test_refresh_without_cookie(client):
    r = client.post("/v1/refresh")
    assert r.status_code == 401
    assert r.json()["success"] is False


def test_refresh_after_logout_is_rejected(client, logged_in):
    refresh = client.cookies.get("refresh_token")
    client.get("/v1/logout")

    r = client.post("/v1/refresh", headers={"Cookie": f"refresh_token={refresh}"})

    assert r.status_code == 400
    assert r.json()["message"] == "Session expired. Please login again."


def test_logout_with_expired_access_cookie_still_ends_session(
    client, logged_in, settings, sessions
):
    user_id = logged_in.json()["user"]["id"]
    refresh = client.cookies.get("refresh_token")
    then = datetime.now(timezone.utc) - timedelta(
        seconds=settings.access_token_ttl_seconds + 5
    )
    expired_access = TokenCodec(settings, clock=lambda: then).issue_access_token(user_id)
    client.cookies.clear()

    r = client.get(
        "/v1/logout",
        headers={"Cookie": f"access_token={expired_access}; refresh_token={refresh}"},
    )

    assert r.status_code == 200
    assert user_id not in sessions.store

    r = client.post("/v1/refresh", headers={"Cookie": f"refresh_token={refresh}"})
    assert r.status_code == 400
    assert r.json()["message"] == "Session expired. Please login again."
