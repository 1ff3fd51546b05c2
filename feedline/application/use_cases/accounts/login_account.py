# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass

from feedline.application.services.authenticator import Authenticator
from feedline.domain.accounts.entities import Identity, SessionToken
from feedline.domain.accounts.exceptions import AccountLockedError, InvalidCredentialsError
from feedline.domain.accounts.repositories import SessionManager
from feedline.infrastructure.auth.login_attempts import LoginAttemptsTracker
from feedline.infrastructure.observability import record_login
from feedline.shared.logging import logger


@dataclass(slots=True, frozen=True)
class LoginResult:
    identity: Identity
    session: SessionToken


class LoginAccountUseCase:
    def __init__(
        self,
        *,
        authenticator: Authenticator,
        sessions: SessionManager,
        attempts: LoginAttemptsTracker,
    ) -> None:
        self._authenticator = authenticator
        self._sessions = sessions
        self._attempts = attempts

    def execute(self, email: str, password: str, ip_address: str | None = None) -> LoginResult:
        remaining = self._attempts.try_begin(email)
        if remaining > 0:
            record_login("locked")
            raise AccountLockedError(lockout_remaining=remaining)

        try:
            identity = self._authenticator.authenticate(email, password)
        except InvalidCredentialsError as exc:
            self._attempts.finish(email, success=False, ip_address=ip_address)
            record_login(f"rejected_{exc.reason.value}")
            logger.info(f"auth.login: rejected reason={exc.reason.value} ip={ip_address}")
            raise
        except Exception:
            # Store or cache outage: the guess was never judged.
            self._attempts.release(email)
            raise

        self._attempts.finish(email, success=True, ip_address=ip_address)
        session = self._sessions.establish(identity)
        record_login("ok")
        logger.info(f"auth.login: ok user_id={identity.id}")
        return LoginResult(identity=identity, session=session)
