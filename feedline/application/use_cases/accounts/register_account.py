# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from feedline.domain.accounts.entities import Account
from feedline.domain.accounts.repositories import AccountRepository, PasswordHasher
from feedline.shared.logging import logger


class RegisterAccountUseCase:
    def __init__(
        self,
        *,
        accounts: AccountRepository,
        password_hasher: PasswordHasher,
    ) -> None:
        self._accounts = accounts
        self._password_hasher = password_hasher

    def execute(self, username: str, email: str, password: str) -> Account:
        # Uniqueness is enforced by the store; a conflict raises AccountAlreadyExistsError.
        hashed = self._password_hasher.hash(password)
        account = self._accounts.add(username, email, hashed)
        logger.info(f"accounts.register: ok user_id={account.id}")
        return account
