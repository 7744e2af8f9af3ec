from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import redis
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from fakes import DeterministicHasher
from postboard.app import create_app
from postboard.infrastructure.cache import InMemoryTTLCache
from postboard.infrastructure.container import Container
from postboard.infrastructure.mail import LoggingEmailSender
from postboard.infrastructure.redis_cache import RedisCache
from postboard.shared.config import AppConfig, SecurityConfig


@pytest.fixture()
def outbox() -> LoggingEmailSender:
    return LoggingEmailSender()


def _build_app(outbox, *, security: SecurityConfig | None = None, cache=None):
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    config = AppConfig(APP_ENV="test", FRONTEND_URL="http://front.test/")
    if security is not None:
        config.security = security
    container = Container(
        config,
        engine=engine,
        cache=cache if cache is not None else InMemoryTTLCache(),
        email_sender=outbox,
        password_hasher=DeterministicHasher(),
    )
    flask_app = create_app(container)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture()
def app(outbox):
    return _build_app(outbox)


@pytest.fixture()
def client(app):
    return app.test_client()


def _register(client, username="alice", email="alice@example.com", password="correct-horse"):
    return client.post(
        "/api/auth/register",
        json={"username": username, "email": email, "password": password},
    )


def test_register_returns_user_and_sets_cookie(client):
    response = _register(client)

    assert response.status_code == 200
    user = response.get_json()["user"]
    assert user["username"] == "alice"
    assert user["email"] == "alice@example.com"
    assert {"id", "createdAt", "updatedAt"} <= user.keys()
    assert "passwordHash" not in user and "password_hash" not in user
    assert client.get_cookie("qid") is not None

    me = client.get("/api/auth/me")
    assert me.get_json()["user"]["id"] == user["id"]


def test_register_duplicate_returns_field_errors(client):
    _register(client)

    response = _register(client, email="second@example.com")

    assert response.status_code == 400
    assert response.get_json() == {
        "errors": [{"field": "username", "message": "The username alice is already taken"}]
    }


def test_register_malformed_body(client):
    response = client.post("/api/auth/register", json={"username": "alice"})

    assert response.status_code == 422
    body = response.get_json()
    assert body["error"] == "validation_error"
    assert "email" in body["context"]["fields"]


def test_login_and_logout(client):
    _register(client)
    client.delete("/api/auth/logout")

    bad = client.post(
        "/api/auth/login", json={"usernameOrEmail": "alice", "password": "wrong-horse"}
    )
    assert bad.status_code == 400
    assert bad.get_json()["errors"][0]["field"] == "password"
    assert client.get("/api/auth/me").get_json() == {"user": None}

    good = client.post(
        "/api/auth/login",
        json={"usernameOrEmail": "alice@example.com", "password": "correct-horse"},
    )
    assert good.status_code == 200
    assert client.get("/api/auth/me").get_json()["user"]["username"] == "alice"

    logout = client.delete("/api/auth/logout")
    assert logout.get_json() == {"ok": True}
    assert client.get_cookie("qid") is None
    assert client.get("/api/auth/me").get_json() == {"user": None}


def test_login_unknown_account(client):
    response = client.post(
        "/api/auth/login", json={"usernameOrEmail": "nobody", "password": "whatever"}
    )

    assert response.status_code == 400
    assert response.get_json() == {
        "errors": [{"field": "usernameOrEmail", "message": "That account doesn't exist"}]
    }


def test_logout_without_session(client):
    response = client.delete("/api/auth/logout")

    assert response.status_code == 200
    assert response.get_json() == {"ok": True}


def test_forgot_and_reset_password(client, outbox):
    _register(client)
    client.delete("/api/auth/logout")

    forgot = client.post("/api/auth/forgot-password", json={"email": "alice@example.com"})
    assert forgot.get_json() == {"ok": True}
    assert len(outbox.outbox) == 1
    html = outbox.outbox[0].html
    assert "http://front.test/change-password/" in html
    token = html.split("/change-password/")[1].split('"')[0]

    mismatch = client.post(
        "/api/auth/reset-password",
        json={"newPassword": "brand-new-pass", "newPasswordConfirm": "other", "token": token},
    )
    assert mismatch.get_json()["errors"][0]["field"] == "newPasswordConfirm"

    reset = client.post(
        "/api/auth/reset-password",
        json={"newPassword": "brand-new-pass", "newPasswordConfirm": "brand-new-pass", "token": token},
    )
    assert reset.status_code == 200
    assert reset.get_json()["user"]["username"] == "alice"
    assert client.get("/api/auth/me").get_json()["user"]["username"] == "alice"

    replay = client.post(
        "/api/auth/reset-password",
        json={"newPassword": "brand-new-pass", "newPasswordConfirm": "brand-new-pass", "token": token},
    )
    assert replay.get_json() == {"errors": [{"field": "token", "message": "Token expired"}]}

    client.delete("/api/auth/logout")
    login = client.post(
        "/api/auth/login", json={"usernameOrEmail": "alice", "password": "brand-new-pass"}
    )
    assert login.status_code == 200


def test_forgot_password_unknown_email(client, outbox):
    response = client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})

    assert response.status_code == 400
    assert response.get_json()["errors"][0]["field"] == "email"
    assert outbox.outbox == []


def test_get_user(client):
    user = _register(client).get_json()["user"]

    found = client.get(f"/api/users/{user['id']}")
    missing = client.get("/api/users/9999")

    assert found.get_json()["user"]["username"] == "alice"
    assert missing.get_json() == {"user": None}


def test_health_and_headers(client):
    response = client.get("/api/health", headers={"X-Request-ID": "req-123"})

    assert response.get_json() == {"status": "ok", "cache": "ok"}
    assert response.headers["X-Request-ID"] == "req-123"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_rate_limit_uses_injected_settings(outbox):
    security = SecurityConfig(ENABLE_RATE_LIMIT=True, RL_STRICT_LIMIT=2, RL_WINDOW=60)
    limited = _build_app(outbox, security=security).test_client()
    other = _build_app(outbox, security=security).test_client()

    statuses = [
        limited.post("/api/auth/forgot-password", json={"email": "ghost@example.com"}).status_code
        for _ in range(3)
    ]

    assert statuses == [400, 400, 429]
    # Each app owns its limiters.
    fresh = other.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})
    assert fresh.status_code == 400


def test_rate_limit_disabled(outbox):
    client = _build_app(outbox, security=SecurityConfig(ENABLE_RATE_LIMIT=False)).test_client()

    statuses = {
        client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"}).status_code
        for _ in range(20)
    }

    assert statuses == {400}


def test_health_reports_unreachable_redis(outbox):
    client_mock = MagicMock()
    client_mock.ping.side_effect = redis.exceptions.ConnectionError("down")
    client = _build_app(outbox, cache=RedisCache(client_mock)).test_client()

    response = client.get("/api/health")

    assert response.status_code == 503
    assert response.get_json() == {"status": "degraded", "cache": "unavailable"}


def test_health_with_reachable_redis(outbox):
    client_mock = MagicMock()
    client_mock.ping.return_value = True
    client = _build_app(outbox, cache=RedisCache(client_mock)).test_client()

    assert client.get("/api/health").status_code == 200
