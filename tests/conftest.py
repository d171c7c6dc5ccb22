"""Pytest configuration and fixtures."""

import asyncio
import json
from collections.abc import Generator
from typing import Any

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from kotoba.api import ApiClient
from kotoba.config import Settings
from kotoba.server import create_app

API_URL = "http://api.test"

VOCABULARIES = [
    {
        "id": 1,
        "word": "勉強",
        "hiragana": "べんきょう",
        "meaning": "study",
        "studyStatus": "STUDYING",
        "studyStatusDisplay": "Studying",
        "createDate": "2024-11-22T10:00:00",
    }
]

MY_DIARIES = [
    {
        "id": 7,
        "nickname": "taro",
        "diaryDate": "2024-11-22",
        "title": "今日",
        "contentPreview": "いい天気でした",
        "isPublic": False,
        "createDate": "2024-11-22T21:00:00",
    }
]

USER = {
    "id": 1,
    "username": "taro",
    "email": "taro@example.com",
    "nickname": "taro",
    "role": "USER",
}


def envelope_response(
    status_code: int,
    msg: str,
    data: Any = None,
    *,
    result_code: str | None = None,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    """Build a JSON envelope response."""
    body = {"resultCode": result_code or str(status_code), "msg": msg, "data": data}
    return httpx.Response(
        status_code,
        content=json.dumps(body).encode(),
        headers={"content-type": "application/json", **(headers or {})},
    )


class FakeApi:
    """Stand-in for the remote API behind `httpx.MockTransport`.

    Protected paths answer 401 unless the request carries the access cookie
    issued by `/api/auth/refresh` (or login). The refresh answer can be held
    back until a number of 401s has been served, so concurrent failures all
    land while the refresh is in flight.
    """

    ACCESS_COOKIE = "accessToken=fresh-access; Path=/; HttpOnly"

    def __init__(self, *, hold_refresh_until: int = 0, refresh_status: int = 200) -> None:
        self.resources: dict[str, Any] = {
            "/api/vocabularies": VOCABULARIES,
            "/api/diary/my": MY_DIARIES,
        }
        self.hold_refresh_until = hold_refresh_until
        self.refresh_status = refresh_status
        self.refresh_delay = 0.0
        self.always_unauthorized: set[str] = set()
        self.calls: list[tuple[str, str]] = []
        self.requests: list[httpx.Request] = []
        self.unauthorized_served = 0
        self.refreshes_in_flight = 0
        self.peak_refreshes_in_flight = 0
        self._enough_unauthorized = asyncio.Event()
        if hold_refresh_until == 0:
            self._enough_unauthorized.set()

    def calls_to(self, path: str) -> int:
        return sum(1 for _, called in self.calls if called == path)

    @property
    def refresh_calls(self) -> int:
        return self.calls_to("/api/auth/refresh")

    def _authorized(self, request: httpx.Request) -> bool:
        return "accessToken=fresh-access" in request.headers.get("cookie", "")

    def _unauthorized(self) -> httpx.Response:
        self.unauthorized_served += 1
        if self.unauthorized_served >= self.hold_refresh_until:
            self._enough_unauthorized.set()
        return envelope_response(401, "Authentication required.")

    async def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append((request.method, path))
        self.requests.append(request)

        if path == "/api/auth/refresh":
            self.refreshes_in_flight += 1
            self.peak_refreshes_in_flight = max(
                self.peak_refreshes_in_flight, self.refreshes_in_flight
            )
            try:
                await self._enough_unauthorized.wait()
                if self.refresh_delay:
                    await asyncio.sleep(self.refresh_delay)
            finally:
                self.refreshes_in_flight -= 1
            if self.refresh_status != 200:
                return envelope_response(self.refresh_status, "Invalid refresh token.")
            return envelope_response(
                200, "Token refreshed", headers={"set-cookie": self.ACCESS_COOKIE}
            )

        if path == "/api/auth/login":
            payload = json.loads(request.content)
            if payload.get("password") != "correct-password":
                return envelope_response(401, "Incorrect username or password.")
            return envelope_response(
                200, "Login successful", headers={"set-cookie": self.ACCESS_COOKIE}
            )

        if path == "/api/auth/signup":
            return envelope_response(400, "Username already exists.")

        if path in ("/api/auth/me", "/api/users/me"):
            if not self._authorized(request):
                return envelope_response(401, "Authentication required.")
            return envelope_response(200, "User information retrieved", USER)

        if path in self.always_unauthorized or not self._authorized(request):
            return self._unauthorized()

        if path in self.resources:
            return envelope_response(200, "OK", self.resources[path])
        return envelope_response(404, "The requested data does not exist.")


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def redirects() -> list[str]:
    """Login paths the client asked to redirect to."""
    return []


def make_client(fake: FakeApi, redirects: list[str] | None = None, **kwargs: Any) -> ApiClient:
    """Create an API client wired to `fake`."""
    hook = redirects.append if redirects is not None else None
    return ApiClient(
        API_URL,
        transport=httpx.MockTransport(fake.handler),
        on_login_required=hook,
        **kwargs,
    )


@pytest.fixture
def api_client(fake_api: FakeApi, redirects: list[str]) -> ApiClient:
    return make_client(fake_api, redirects)


# --- Reference server ---


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        SECRET_KEY="test-secret-key-for-kotoba-tests-0123456789",
        COOKIE_SECURE=False,
    )


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Create a test client for the reference server."""
    with TestClient(app) as test_client:
        yield test_client


SIGNUP = {
    "username": "hanako",
    "password": "kotoba-password",
    "passwordConfirm": "kotoba-password",
    "email": "hanako@example.com",
    "nickname": "hana",
}


def signup_and_login(client: TestClient, **overrides: str) -> dict[str, str]:
    """Register a user and log them in; return the signup body used."""
    body = {**SIGNUP, **overrides}
    response = client.post("/api/auth/signup", json=body)
    assert response.status_code == 200, response.text
    response = client.post(
        "/api/auth/login", json={"username": body["username"], "password": body["password"]}
    )
    assert response.status_code == 200, response.text
    return body
