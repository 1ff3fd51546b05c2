from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest

from feedline.application.services.authenticator import Authenticator
from feedline.application.use_cases.accounts.login_account import LoginAccountUseCase
from feedline.application.use_cases.accounts.logout_account import LogoutAccountUseCase
from feedline.application.use_cases.accounts.register_account import RegisterAccountUseCase
from feedline.domain.accounts.entities import Identity, SessionToken
from feedline.domain.accounts.exceptions import (
    AccountAlreadyExistsError,
    AccountLockedError,
    CredentialStoreError,
    InvalidCredentialsError,
)
from feedline.infrastructure.auth.login_attempts import LoginAttemptsTracker


class InMemorySessions:
    def __init__(self) -> None:
        self.tokens: dict[str, Identity] = {}
        self._seq = 0

    def establish(self, identity: Identity) -> SessionToken:
        self._seq += 1
        token = f"token-{self._seq}"
        self.tokens[token] = identity
        return SessionToken(
            user_id=identity.id,
            token=token,
            expires_at=datetime.now(timezone.utc) + timedelta(days=7),
        )

    def resolve(self, token: str) -> Identity | None:
        return self.tokens.get(token)

    def revoke(self, token: str) -> None:
        self.tokens.pop(token, None)


@pytest.fixture()
def sessions() -> InMemorySessions:
    return InMemorySessions()


@pytest.fixture()
def register(accounts, hasher) -> RegisterAccountUseCase:
    return RegisterAccountUseCase(accounts=accounts, password_hasher=hasher)


@pytest.fixture()
def login(accounts, cache, clock, hasher, sessions) -> LoginAccountUseCase:
    authenticator = Authenticator(accounts=accounts, cache=cache, password_hasher=hasher)
    tracker = LoginAttemptsTracker(max_attempts=5, lockout_duration=900, clock=clock)
    return LoginAccountUseCase(authenticator=authenticator, sessions=sessions, attempts=tracker)


def test_register_stores_hashed_password(register, accounts) -> None:
    account = register.execute("alice", "alice@example.com", "secret123")

    stored = accounts.find_by_email("alice@example.com")
    assert stored == account
    assert stored.password_hash == "hashed:secret123"


def test_duplicate_email_is_rejected_and_first_account_kept(register, accounts) -> None:
    first = register.execute("alice", "alice@example.com", "secret123")

    with pytest.raises(AccountAlreadyExistsError) as exc:
        register.execute("alice2", "alice@example.com", "other456")

    assert exc.value.status == 409
    assert accounts.find_by_email("alice@example.com").password_hash == first.password_hash


def test_duplicate_username_is_rejected(register) -> None:
    register.execute("alice", "alice@example.com", "secret123")

    with pytest.raises(AccountAlreadyExistsError):
        register.execute("alice", "other@example.com", "secret123")


def test_login_establishes_session(register, login, sessions) -> None:
    account = register.execute("alice", "alice@example.com", "secret123")

    result = login.execute("alice@example.com", "secret123", ip_address="10.0.0.1")

    assert result.identity == Identity(id=account.id, username="alice")
    assert sessions.resolve(result.session.token) == result.identity


def test_login_locks_after_repeated_failures(register, login, clock) -> None:
    register.execute("alice", "alice@example.com", "secret123")

    for _ in range(5):
        with pytest.raises(InvalidCredentialsError):
            login.execute("alice@example.com", "wrong")

    with pytest.raises(AccountLockedError) as exc:
        login.execute("alice@example.com", "secret123")
    assert exc.value.status == 429

    clock.advance(901)
    assert login.execute("alice@example.com", "secret123").identity.username == "alice"


def test_unknown_email_failures_also_count_towards_lockout(login) -> None:
    for _ in range(5):
        with pytest.raises(InvalidCredentialsError):
            login.execute("ghost@example.com", "whatever")

    with pytest.raises(AccountLockedError):
        login.execute("ghost@example.com", "whatever")


def test_successful_login_resets_failure_count(register, login) -> None:
    register.execute("alice", "alice@example.com", "secret123")

    for _ in range(4):
        with pytest.raises(InvalidCredentialsError):
            login.execute("alice@example.com", "wrong")
    login.execute("alice@example.com", "secret123")
    for _ in range(4):
        with pytest.raises(InvalidCredentialsError):
            login.execute("alice@example.com", "wrong")

    assert login.execute("alice@example.com", "secret123").identity.username == "alice"


def test_logout_revokes_token(register, login, sessions) -> None:
    register.execute("alice", "alice@example.com", "secret123")
    token = login.execute("alice@example.com", "secret123").session.token

    LogoutAccountUseCase(sessions=sessions).execute(token)

    assert sessions.resolve(token) is None


class SlowHasher:
    """Hasher whose verify takes long enough for parallel logins to overlap."""

    def __init__(self, delay: float = 0.05) -> None:
        self.delay = delay
        self.verify_calls = 0
        self._lock = threading.Lock()

    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        with self._lock:
            self.verify_calls += 1
        time.sleep(self.delay)
        return hashed == f"hashed:{password}"


def test_parallel_guesses_cannot_exceed_attempt_budget(accounts, cache, sessions) -> None:
    hasher = SlowHasher()
    accounts.add("alice", "alice@example.com", hasher.hash("secret123"))
    use_case = LoginAccountUseCase(
        authenticator=Authenticator(accounts=accounts, cache=cache, password_hasher=hasher),
        sessions=sessions,
        attempts=LoginAttemptsTracker(max_attempts=5),
    )

    def guess(i: int) -> str:
        try:
            use_case.execute("alice@example.com", f"wrong-{i}")
        except InvalidCredentialsError:
            return "rejected"
        except AccountLockedError:
            return "locked"
        return "ok"

    with ThreadPoolExecutor(max_workers=40) as pool:
        outcomes = list(pool.map(guess, range(40)))

    assert hasher.verify_calls <= 5
    assert outcomes.count("rejected") == hasher.verify_calls
    assert outcomes.count("locked") == 40 - hasher.verify_calls
    with pytest.raises(AccountLockedError):
        use_case.execute("alice@example.com", "secret123")


def test_store_outage_does_not_count_as_failed_attempt(cache, hasher, sessions) -> None:
    class DownStore:
        def find_by_email(self, email: str):
            raise CredentialStoreError("OperationalError")

        def add(self, username: str, email: str, password_hash: str):
            raise CredentialStoreError("OperationalError")

    tracker = LoginAttemptsTracker(max_attempts=2)
    use_case = LoginAccountUseCase(
        authenticator=Authenticator(accounts=DownStore(), cache=cache, password_hasher=hasher),
        sessions=sessions,
        attempts=tracker,
    )

    for _ in range(3):
        with pytest.raises(CredentialStoreError):
            use_case.execute("alice@example.com", "secret123")

    assert tracker.try_begin("alice@example.com") == 0
