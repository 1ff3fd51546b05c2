from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from flask import Flask

from feedline.application.use_cases.accounts.login_account import LoginResult
from feedline.domain.accounts.entities import Account, Identity, SessionToken
from feedline.domain.accounts.exceptions import (
    AccountAlreadyExistsError,
    AccountLockedError,
    AuthFailureReason,
    CredentialStoreError,
    InvalidCredentialsError,
)
from feedline.interfaces.http.auth import AUTH_COOKIE
from feedline.interfaces.http.controllers.auth_controller import AuthController
from feedline.shared.errors import register_error_handler


@pytest.fixture()
def use_cases():
    return MagicMock(), MagicMock(), MagicMock()


@pytest.fixture()
def client(use_cases):
    register, login, logout = use_cases
    controller = AuthController(
        register_use_case=register, login_use_case=login, logout_use_case=logout
    )
    app = Flask(__name__)
    register_error_handler(app)
    app.register_blueprint(controller.as_blueprint())
    return app.test_client()


def test_register_returns_user_id(client, use_cases) -> None:
    register, _, _ = use_cases
    register.execute.return_value = Account(
        id=7, username="alice", email="alice@example.com", password_hash="h"
    )

    response = client.post(
        "/api/auth/register",
        json={"username": "alice", "email": "alice@example.com", "password": "secret123"},
    )

    assert response.status_code == 200
    assert response.get_json() == {"ok": True, "user_id": 7}
    register.execute.assert_called_once_with("alice", "alice@example.com", "secret123")


def test_register_keeps_email_verbatim(client, use_cases) -> None:
    register, _, _ = use_cases
    register.execute.return_value = Account(
        id=1, username="bob", email="Bob@Example.com", password_hash="h"
    )

    client.post(
        "/api/auth/register",
        json={"username": "bob", "email": "Bob@Example.com", "password": "secret123"},
    )

    assert register.execute.call_args.args[1] == "Bob@Example.com"


def test_register_rejects_weak_password(client, use_cases) -> None:
    register, _, _ = use_cases

    response = client.post(
        "/api/auth/register",
        json={"username": "alice", "email": "alice@example.com", "password": "abcdefgh"},
    )

    assert response.status_code == 422
    body = response.get_json()
    assert body["error"] == "validation_error"
    assert body["context"]["fields"] == ["password"]
    register.execute.assert_not_called()


def test_register_conflict(client, use_cases) -> None:
    register, _, _ = use_cases
    register.execute.side_effect = AccountAlreadyExistsError()

    response = client.post(
        "/api/auth/register",
        json={"username": "alice", "email": "alice@example.com", "password": "secret123"},
    )

    assert response.status_code == 409
    assert response.get_json() == {"error": "account_already_exists"}


def test_login_sets_http_only_cookie(client, use_cases) -> None:
    _, login, _ = use_cases
    identity = Identity(id=3, username="alice")
    login.execute.return_value = LoginResult(
        identity=identity,
        session=SessionToken(
            user_id=3,
            token="tok-123",
            expires_at=datetime.now(timezone.utc) + timedelta(days=7),
        ),
    )

    response = client.post(
        "/api/auth/login", json={"email": "alice@example.com", "password": "secret123"}
    )

    assert response.status_code == 200
    assert response.get_json() == {"ok": True, "username": "alice"}
    cookie = response.headers["Set-Cookie"]
    assert cookie.startswith(f"{AUTH_COOKIE}=tok-123")
    assert "HttpOnly" in cookie


@pytest.mark.parametrize(
    "reason", [AuthFailureReason.NOT_FOUND, AuthFailureReason.WRONG_SECRET]
)
def test_login_failure_hides_reason(client, use_cases, reason) -> None:
    _, login, _ = use_cases
    login.execute.side_effect = InvalidCredentialsError(reason)

    response = client.post(
        "/api/auth/login", json={"email": "alice@example.com", "password": "nope"}
    )

    assert response.status_code == 401
    assert response.get_json() == {"error": "invalid_credentials"}
    assert "Set-Cookie" not in response.headers


def test_login_locked(client, use_cases) -> None:
    _, login, _ = use_cases
    login.execute.side_effect = AccountLockedError(lockout_remaining=120.0)

    response = client.post(
        "/api/auth/login", json={"email": "alice@example.com", "password": "nope"}
    )

    assert response.status_code == 429
    assert response.get_json()["error"] == "account_locked"


def test_login_store_outage_is_not_reported_as_bad_credentials(client, use_cases) -> None:
    _, login, _ = use_cases
    login.execute.side_effect = CredentialStoreError("OperationalError")

    response = client.post(
        "/api/auth/login", json={"email": "alice@example.com", "password": "secret123"}
    )

    assert response.status_code == 503
    assert response.get_json() == {"error": "credential_store_unavailable"}


def test_login_requires_fields(client, use_cases) -> None:
    _, login, _ = use_cases

    response = client.post("/api/auth/login", json={"email": "alice@example.com"})

    assert response.status_code == 422
    login.execute.assert_not_called()


def test_logout_revokes_bearer_token_and_clears_cookie(client, use_cases) -> None:
    _, _, logout = use_cases

    response = client.delete("/api/auth/logout", headers={"Authorization": "Bearer tok-123"})

    assert response.status_code == 200
    logout.execute.assert_called_once_with("tok-123")
    assert f"{AUTH_COOKIE}=;" in response.headers["Set-Cookie"]
