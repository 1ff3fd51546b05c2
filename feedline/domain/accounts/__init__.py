# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import Account, Identity, SessionToken
from .exceptions import (
    AccountAlreadyExistsError,
    AccountLockedError,
    AuthFailureReason,
    CredentialCacheError,
    CredentialStoreError,
    InvalidCredentialsError,
)
from .repositories import AccountRepository, CredentialCache, PasswordHasher, SessionManager

__all__ = [
    "Account",
    "AccountAlreadyExistsError",
    "AccountLockedError",
    "AccountRepository",
    "AuthFailureReason",
    "CredentialCache",
    "CredentialCacheError",
    "CredentialStoreError",
    "Identity",
    "InvalidCredentialsError",
    "PasswordHasher",
    "SessionManager",
    "SessionToken",
]
