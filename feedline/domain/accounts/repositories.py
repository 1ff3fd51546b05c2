# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import Account, Identity, SessionToken


class AccountRepository(Protocol):
    def find_by_email(self, email: str) -> Account | None: ...
    def add(self, username: str, email: str, password_hash: str) -> Account: ...


class CredentialCache(Protocol):
    """Key/value store with expiry. ``get`` returns ``None`` only when the key is absent."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str, ttl_seconds: int) -> None: ...


class SessionManager(Protocol):
    def establish(self, identity: Identity) -> SessionToken: ...
    def resolve(self, token: str) -> Identity | None: ...
    def revoke(self, token: str) -> None: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...
