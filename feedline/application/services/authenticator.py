# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Credential verification with a read-through/write-through cache.

Lookup order is cache first, then the account store. A successful store
verification writes a snapshot of the account into the cache for a fixed
TTL; nothing here ever refreshes or deletes a cache entry.

The cached snapshot can be stale: if the stored hash changes, the cached
hash keeps answering until the entry expires. With ``stale_hit_fallback``
off (the default) a cached hash that rejects the password is final, so a
user who just changed their password cannot log in with the new one until
expiry. Turning it on re-checks the store on every cache-side rejection.
"""

from __future__ import annotations

import secrets
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from feedline.domain.accounts.entities import Account, Identity
from feedline.domain.accounts.exceptions import (
    AuthFailureReason,
    CredentialCacheError,
    InvalidCredentialsError,
)
from feedline.domain.accounts.repositories import (
    AccountRepository,
    CredentialCache,
    PasswordHasher,
)
from feedline.infrastructure.observability import record_cache_failure, record_lookup
from feedline.shared.logging import logger

LookupHook = Callable[[str, str], None]

SOURCE_CACHE = "cache"
SOURCE_STORE = "store"


class CachedCredential(BaseModel):
    """Serialized account snapshot stored in the credential cache."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    username: str
    email: str
    password_hash: str

    @classmethod
    def from_account(cls, account: Account) -> CachedCredential:
        return cls(
            id=account.id,
            username=account.username,
            email=account.email,
            password_hash=account.password_hash,
        )

    def to_account(self) -> Account:
        return Account(
            id=self.id,
            username=self.username,
            email=self.email,
            password_hash=self.password_hash,
        )

    def serialize(self) -> str:
        return self.model_dump_json()


class Authenticator:
    def __init__(
        self,
        *,
        accounts: AccountRepository,
        cache: CredentialCache,
        password_hasher: PasswordHasher,
        ttl_seconds: int = 300,
        key_prefix: str = "",
        fail_open: bool = True,
        stale_hit_fallback: bool = False,
        on_lookup: LookupHook | None = None,
    ) -> None:
        self._accounts = accounts
        self._cache = cache
        self._password_hasher = password_hasher
        self._ttl = ttl_seconds
        self._key_prefix = key_prefix
        self._fail_open = fail_open
        self._stale_hit_fallback = stale_hit_fallback
        self._on_lookup = on_lookup
        # Verified against on unknown emails so both failure paths cost one hash check.
        self._dummy_hash = password_hasher.hash(secrets.token_urlsafe(16))

    def cache_key(self, identifier: str) -> str:
        return f"{self._key_prefix}{identifier}"

    def authenticate(self, identifier: str, secret: str) -> Identity:
        cached = self._read_cache(identifier)
        if cached is not None:
            if self._password_hasher.verify(secret, cached.password_hash):
                self._lookup(SOURCE_CACHE, "verified")
                logger.debug(f"auth: warm path ok user_id={cached.id}")
                return cached.identity()

            self._lookup(SOURCE_CACHE, "rejected")
            if not self._stale_hit_fallback:
                raise InvalidCredentialsError(AuthFailureReason.WRONG_SECRET)
            logger.info(f"auth: cached hash rejected secret, re-checking store user_id={cached.id}")

        account = self._accounts.find_by_email(identifier)
        if account is None:
            self._password_hasher.verify(secret, self._dummy_hash)
            self._lookup(SOURCE_STORE, "not_found")
            raise InvalidCredentialsError(AuthFailureReason.NOT_FOUND)

        if not self._password_hasher.verify(secret, account.password_hash):
            self._lookup(SOURCE_STORE, "rejected")
            raise InvalidCredentialsError(AuthFailureReason.WRONG_SECRET)

        self._lookup(SOURCE_STORE, "verified")
        self._write_cache(identifier, account)
        logger.debug(f"auth: cold path ok user_id={account.id}")
        return account.identity()

    def _read_cache(self, identifier: str) -> Account | None:
        try:
            raw = self._cache.get(self.cache_key(identifier))
        except CredentialCacheError as exc:
            record_cache_failure("get")
            if not self._fail_open:
                raise
            logger.warning(f"auth: cache read failed, using store ({exc.detail or exc.code})")
            self._lookup(SOURCE_CACHE, "error")
            return None

        if raw is None:
            self._lookup(SOURCE_CACHE, "miss")
            return None

        try:
            return CachedCredential.model_validate_json(raw).to_account()
        except PydanticValidationError:
            logger.warning("auth: unreadable cache entry ignored")
            self._lookup(SOURCE_CACHE, "corrupt")
            return None

    def _write_cache(self, identifier: str, account: Account) -> None:
        value = CachedCredential.from_account(account).serialize()
        try:
            self._cache.set(self.cache_key(identifier), value, self._ttl)
        except CredentialCacheError as exc:
            record_cache_failure("set")
            if not self._fail_open:
                raise
            logger.warning(f"auth: cache write skipped ({exc.detail or exc.code})")

    def _lookup(self, source: str, outcome: str) -> None:
        record_lookup(source, outcome)
        if self._on_lookup is not None:
            self._on_lookup(source, outcome)


__all__ = ["Authenticator", "CachedCredential", "LookupHook"]
