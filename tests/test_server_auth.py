"""Tests for the reference auth server's cookie contract."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from kotoba.config import Settings
from kotoba.server import create_app
from tests.conftest import SIGNUP, signup_and_login


class TestSignup:
    def test_signup_does_not_log_in(self, client: TestClient) -> None:
        response = client.post("/api/auth/signup", json=SIGNUP)

        assert response.status_code == 200
        assert response.json() == {
            "resultCode": "201",
            "msg": "Registration completed",
            "data": None,
        }
        assert "accessToken" not in client.cookies

    def test_password_mismatch(self, client: TestClient) -> None:
        response = client.post(
            "/api/auth/signup", json={**SIGNUP, "passwordConfirm": "something-else"}
        )

        assert response.status_code == 400
        assert response.json()["msg"] == "Passwords do not match."

    @pytest.mark.parametrize(
        ("overrides", "message"),
        [
            ({"email": "other@example.com"}, "Username already exists."),
            ({"username": "other", "email": "other@example.com"}, "Nickname already exists."),
            ({"username": "other", "nickname": "other"}, "Email already exists."),
        ],
    )
    def test_taken_identity(
        self, client: TestClient, overrides: dict[str, str], message: str
    ) -> None:
        client.post("/api/auth/signup", json=SIGNUP)

        response = client.post("/api/auth/signup", json={**SIGNUP, **overrides})

        assert response.status_code == 400
        assert response.json()["resultCode"] == "400"
        assert response.json()["msg"] == message

    def test_invalid_email_is_a_400_envelope(self, client: TestClient) -> None:
        response = client.post("/api/auth/signup", json={**SIGNUP, "email": "not-an-email"})

        assert response.status_code == 400
        body = response.json()
        assert body["resultCode"] == "400"
        assert body["msg"].startswith("email:")
        assert body["data"] is None


class TestLogin:
    def test_login_sets_both_cookies(self, client: TestClient) -> None:
        client.post("/api/auth/signup", json=SIGNUP)

        response = client.post(
            "/api/auth/login",
            json={"username": SIGNUP["username"], "password": SIGNUP["password"]},
        )

        assert response.status_code == 200
        assert response.json()["msg"] == "Login successful"
        set_cookies = response.headers.get_list("set-cookie")
        access = next(c for c in set_cookies if c.startswith("accessToken="))
        refresh = next(c for c in set_cookies if c.startswith("refreshToken="))
        assert "HttpOnly" in access
        assert "Max-Age=3600" in access
        assert "Max-Age=604800" in refresh
        assert "samesite=lax" in refresh.lower()

    def test_wrong_password(self, client: TestClient) -> None:
        client.post("/api/auth/signup", json=SIGNUP)

        response = client.post(
            "/api/auth/login", json={"username": SIGNUP["username"], "password": "wrong"}
        )

        assert response.status_code == 401
        assert response.json() == {
            "resultCode": "401",
            "msg": "Incorrect username or password.",
            "data": None,
        }

    def test_unknown_user(self, client: TestClient) -> None:
        response = client.post("/api/auth/login", json={"username": "nobody", "password": "x"})

        assert response.status_code == 401
        assert response.json()["msg"] == "Incorrect username or password."

    def test_login_rate_limit(self, client: TestClient) -> None:
        body = {"username": "nobody", "password": "x"}

        statuses = [client.post("/api/auth/login", json=body).status_code for _ in range(6)]

        assert statuses[:5] == [401] * 5
        assert statuses[5] == 429

    def test_login_rate_limit_comes_from_app_settings(self, settings: Settings) -> None:
        app = create_app(settings.model_copy(update={"LOGIN_RATE_LIMIT": "1/minute"}))
        body = {"username": "nobody", "password": "x"}

        with TestClient(app) as client:
            statuses = [client.post("/api/auth/login", json=body).status_code for _ in range(2)]

        assert statuses == [401, 429]

    def test_rate_limits_are_per_app(self, settings: Settings) -> None:
        limited = settings.model_copy(update={"LOGIN_RATE_LIMIT": "1/minute"})
        body = {"username": "nobody", "password": "x"}

        with TestClient(create_app(limited)) as first:
            first.post("/api/auth/login", json=body)
        with TestClient(create_app(limited)) as second:
            response = second.post("/api/auth/login", json=body)

        assert response.status_code == 401


class TestSessionIdentity:
    def test_me_returns_identity(self, client: TestClient) -> None:
        signup_and_login(client)

        response = client.get("/api/auth/me")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["username"] == SIGNUP["username"]
        assert data["nickname"] == SIGNUP["nickname"]
        assert data["email"] == SIGNUP["email"]
        assert data["role"] == "USER"
        assert "hashedPassword" not in data

    def test_users_me_matches_auth_me(self, client: TestClient) -> None:
        signup_and_login(client)

        assert client.get("/api/users/me").json() == client.get("/api/auth/me").json()

    def test_me_without_cookie(self, client: TestClient) -> None:
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["msg"] == "Authentication required."

    def test_me_with_forged_cookie(self, app: FastAPI) -> None:
        with TestClient(app, cookies={"accessToken": "not-a-jwt"}) as forged:
            response = forged.get("/api/auth/me")

        assert response.status_code == 401


class TestRefresh:
    def test_refresh_rate_limit_comes_from_app_settings(self, settings: Settings) -> None:
        app = create_app(settings.model_copy(update={"REFRESH_RATE_LIMIT": "2/minute"}))

        with TestClient(app) as client:
            statuses = [client.post("/api/auth/refresh").status_code for _ in range(3)]

        assert statuses == [401, 401, 429]

    def test_refresh_issues_new_access_cookie(self, client: TestClient) -> None:
        signup_and_login(client)
        old_access = client.cookies.get("accessToken")

        response = client.post("/api/auth/refresh")

        assert response.status_code == 200
        assert response.json()["msg"] == "Token refreshed"
        assert client.cookies.get("accessToken") != old_access
        assert client.get("/api/auth/me").status_code == 200

    def test_refresh_without_cookie(self, client: TestClient) -> None:
        response = client.post("/api/auth/refresh")

        assert response.status_code == 401
        assert response.json()["msg"] == "Invalid refresh token."

    def test_access_token_is_not_a_refresh_token(self, client: TestClient, app: FastAPI) -> None:
        signup_and_login(client)
        access = client.cookies.get("accessToken")

        with TestClient(app, cookies={"refreshToken": access}) as other:
            response = other.post("/api/auth/refresh")

        assert response.status_code == 401

    def test_rotated_refresh_token_is_rejected(self, client: TestClient, app: FastAPI) -> None:
        signup_and_login(client)
        stale = client.cookies.get("refreshToken")
        client.post(
            "/api/auth/login",
            json={"username": SIGNUP["username"], "password": SIGNUP["password"]},
        )

        with TestClient(app, cookies={"refreshToken": stale}) as other:
            response = other.post("/api/auth/refresh")

        assert response.status_code == 401
        assert response.json()["msg"] == "Refresh token does not match."


class TestLogout:
    def test_logout_clears_session(self, client: TestClient, app: FastAPI) -> None:
        signup_and_login(client)
        refresh_token = client.cookies.get("refreshToken")

        response = client.post("/api/auth/logout")

        assert response.status_code == 200
        assert response.json()["msg"] == "Logout successful"
        assert "accessToken" not in client.cookies
        assert client.get("/api/auth/me").status_code == 401

        # The server forgot the refresh token, not just the cookie.
        with TestClient(app, cookies={"refreshToken": refresh_token}) as other:
            assert other.post("/api/auth/refresh").status_code == 401

    def test_logout_without_session(self, client: TestClient) -> None:
        response = client.post("/api/auth/logout")

        assert response.status_code == 200
