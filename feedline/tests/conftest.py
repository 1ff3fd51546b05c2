from __future__ import annotations

import os
import tempfile
import threading
from pathlib import Path

_TMP = Path(tempfile.mkdtemp(prefix="feedline-tests-"))
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TMP / 'test.db'}")
os.environ.setdefault("CACHE_BACKEND", "memory")
os.environ.setdefault("UPLOAD_DIR", str(_TMP / "uploads"))
os.environ.setdefault("ENABLE_RATE_LIMIT", "false")
os.environ.setdefault("APP_ENV", "test")

import pytest  # noqa: E402

from feedline.domain.accounts.entities import Account  # noqa: E402
from feedline.domain.accounts.exceptions import AccountAlreadyExistsError  # noqa: E402
from feedline.domain.accounts.repositories import AccountRepository, PasswordHasher  # noqa: E402
from feedline.infrastructure.cache.memory import InMemoryTTLCache  # noqa: E402


class InMemoryAccountRepository(AccountRepository):
    def __init__(self) -> None:
        self._by_email: dict[str, Account] = {}
        self._seq = 1
        self._lock = threading.Lock()
        self.find_calls = 0

    def find_by_email(self, email: str) -> Account | None:
        with self._lock:
            self.find_calls += 1
            return self._by_email.get(email)

    def add(self, username: str, email: str, password_hash: str) -> Account:
        with self._lock:
            if email in self._by_email or any(
                a.username == username for a in self._by_email.values()
            ):
                raise AccountAlreadyExistsError()
            account = Account(
                id=self._seq, username=username, email=email, password_hash=password_hash
            )
            self._seq += 1
            self._by_email[email] = account
            return account

    def replace_hash(self, email: str, password_hash: str) -> None:
        """Out-of-band credential change that bypasses the cache."""
        current = self._by_email[email]
        self._by_email[email] = Account(
            id=current.id,
            username=current.username,
            email=current.email,
            password_hash=password_hash,
        )


class DeterministicHasher(PasswordHasher):
    def __init__(self) -> None:
        self.verify_calls = 0

    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        self.verify_calls += 1
        return hashed == f"hashed:{password}"


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def accounts() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def cache(clock: FakeClock) -> InMemoryTTLCache:
    return InMemoryTTLCache(clock=clock)
