"""Use-case for revoking session tokens."""

from __future__ import annotations

from feedline.domain.accounts.repositories import SessionManager


class LogoutAccountUseCase:
    def __init__(self, *, sessions: SessionManager) -> None:
        self._sessions = sessions

    def execute(self, token: str) -> None:
        if token:
            self._sessions.revoke(token)
