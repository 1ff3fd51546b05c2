# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from feedline.domain.accounts.entities import Account, Identity
from feedline.domain.accounts.entities import SessionToken as DomainSessionToken
from feedline.domain.accounts.exceptions import AccountAlreadyExistsError, CredentialStoreError
from feedline.domain.accounts.repositories import AccountRepository, SessionManager
from feedline.infrastructure.db.models import SessionToken, User
from feedline.infrastructure.unit_of_work import unit_of_work_scope
from feedline.shared.logging import logger


def _to_domain(row: User) -> Account:
    return Account(
        id=row.id,
        username=row.username,
        email=row.email,
        password_hash=row.password_hash,
    )


class SqlAlchemyAccountRepository(AccountRepository):
    """Credential store. Emails are matched exactly as given, with no case folding."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def find_by_email(self, email: str) -> Account | None:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = session.scalars(select(User).where(User.email == email)).first()
                return _to_domain(row) if row else None
        except SQLAlchemyError as exc:
            logger.error(f"accounts.find_by_email: store error {type(exc).__name__}")
            raise CredentialStoreError(type(exc).__name__) from exc

    def add(self, username: str, email: str, password_hash: str) -> Account:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = User(username=username, email=email, password_hash=password_hash)
                session.add(row)
                session.flush()
                return _to_domain(row)
        except IntegrityError as exc:
            logger.info("accounts.add: unique constraint rejected new account")
            raise AccountAlreadyExistsError() from exc
        except SQLAlchemyError as exc:
            logger.error(f"accounts.add: store error {type(exc).__name__}")
            raise CredentialStoreError(type(exc).__name__) from exc


class SqlAlchemySessionManager(SessionManager):
    """Opaque bearer tokens persisted in ``session_tokens``."""

    def __init__(
        self, session_factory: Callable[[], Session], *, lifetime_days: int = 7
    ) -> None:
        self._session_factory = session_factory
        self._lifetime = timedelta(days=lifetime_days)

    def establish(self, identity: Identity) -> DomainSessionToken:
        token_value = secrets.token_urlsafe(48)
        expires_at = datetime.now(UTC) + self._lifetime
        with unit_of_work_scope(self._session_factory) as session:
            session.add(SessionToken(user_id=identity.id, token=token_value, expires_at=expires_at))
        logger.info(f"session: issued user_id={identity.id} exp={expires_at.isoformat()}")
        return DomainSessionToken(user_id=identity.id, token=token_value, expires_at=expires_at)

    def resolve(self, token: str) -> Identity | None:
        if not token:
            return None
        with unit_of_work_scope(self._session_factory) as session:
            row = session.execute(
                select(User.id, User.username)
                .join(SessionToken, SessionToken.user_id == User.id)
                .where(
                    SessionToken.token == token,
                    SessionToken.expires_at > datetime.now(UTC),
                )
            ).first()
        if row is None:
            return None
        return Identity(id=row.id, username=row.username)

    def revoke(self, token: str) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            session.query(SessionToken).filter(SessionToken.token == token).delete()
