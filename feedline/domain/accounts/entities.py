# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class Account:

    id: int
    username: str
    email: str
    password_hash: str

    def identity(self) -> Identity:
        return Identity(id=self.id, username=self.username)


@dataclass(slots=True, frozen=True)
class Identity:
    """Authenticated principal handed to session establishment. Carries no secrets."""

    id: int
    username: str


@dataclass(slots=True, frozen=True)
class SessionToken:

    user_id: int
    token: str
    expires_at: datetime
