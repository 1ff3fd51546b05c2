# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from enum import StrEnum
from http import HTTPStatus

from feedline.shared.errors.base import DomainError, InfrastructureError


class AuthFailureReason(StrEnum):
    NOT_FOUND = "not_found"
    WRONG_SECRET = "wrong_secret"


class InvalidCredentialsError(DomainError):
    """Login rejected.

    ``reason`` is kept for logs and metrics only; ``to_dict`` renders the same
    payload for an unknown email and a wrong password.
    """

    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED

    def __init__(self, reason: AuthFailureReason = AuthFailureReason.WRONG_SECRET) -> None:
        super().__init__()
        self.reason = reason


class AccountAlreadyExistsError(DomainError):
    code = "account_already_exists"
    status = HTTPStatus.CONFLICT


class AccountLockedError(DomainError):
    code = "account_locked"
    status = HTTPStatus.TOO_MANY_REQUESTS

    def __init__(self, lockout_remaining: float = 0) -> None:
        super().__init__(context={"lockout_remaining_seconds": round(lockout_remaining, 1)})


class CredentialCacheError(InfrastructureError):
    def __init__(self, detail: str | None = None) -> None:
        super().__init__(
            code="credential_cache_unavailable",
            status=HTTPStatus.SERVICE_UNAVAILABLE,
        )
        self.detail = detail


class CredentialStoreError(InfrastructureError):
    def __init__(self, detail: str | None = None) -> None:
        super().__init__(
            code="credential_store_unavailable",
            status=HTTPStatus.SERVICE_UNAVAILABLE,
        )
        self.detail = detail
