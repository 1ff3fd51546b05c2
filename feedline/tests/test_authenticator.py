from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from feedline.application.services.authenticator import Authenticator, CachedCredential
from feedline.domain.accounts.entities import Identity
from feedline.domain.accounts.exceptions import (
    AuthFailureReason,
    CredentialCacheError,
    InvalidCredentialsError,
)

EMAIL = "alice@example.com"
TTL = 300


class RecordingHook:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def __call__(self, source: str, outcome: str) -> None:
        with self._lock:
            self.calls.append((source, outcome))


class BrokenCache:
    def __init__(self, *, fail_get: bool = True, fail_set: bool = True) -> None:
        self.fail_get = fail_get
        self.fail_set = fail_set
        self.values: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        if self.fail_get:
            raise CredentialCacheError("get: ConnectionError")
        return self.values.get(key)

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        if self.fail_set:
            raise CredentialCacheError("set: ConnectionError")
        self.values[key] = value


def _authenticator(accounts, cache, hasher, **kwargs) -> Authenticator:
    return Authenticator(
        accounts=accounts,
        cache=cache,
        password_hasher=hasher,
        ttl_seconds=TTL,
        key_prefix="cred:",
        **kwargs,
    )


@pytest.fixture()
def alice(accounts, hasher):
    return accounts.add("alice", EMAIL, hasher.hash("secret123"))


def test_cold_login_populates_cache_and_warm_login_skips_store(
    accounts, cache, hasher, alice
) -> None:
    hook = RecordingHook()
    auth = _authenticator(accounts, cache, hasher, on_lookup=hook)

    first = auth.authenticate(EMAIL, "secret123")
    assert first == Identity(id=alice.id, username="alice")
    assert hook.calls == [("cache", "miss"), ("store", "verified")]
    assert accounts.find_calls == 1

    hook.calls.clear()
    second = auth.authenticate(EMAIL, "secret123")

    assert second == first
    assert hook.calls == [("cache", "verified")]
    assert accounts.find_calls == 1


def test_cache_entry_is_snapshot_under_prefixed_email(accounts, cache, hasher, alice) -> None:
    auth = _authenticator(accounts, cache, hasher)

    auth.authenticate(EMAIL, "secret123")

    raw = cache.get("cred:alice@example.com")
    assert raw is not None
    snapshot = CachedCredential.model_validate_json(raw)
    assert snapshot.id == alice.id
    assert snapshot.email == EMAIL
    assert snapshot.password_hash == alice.password_hash


def test_repeated_logins_return_same_identity_and_stable_cache_value(
    accounts, cache, hasher, alice
) -> None:
    auth = _authenticator(accounts, cache, hasher)

    auth.authenticate(EMAIL, "secret123")
    stored = cache.get(auth.cache_key(EMAIL))

    identities = {auth.authenticate(EMAIL, "secret123") for _ in range(10)}

    assert identities == {Identity(id=alice.id, username="alice")}
    assert cache.get(auth.cache_key(EMAIL)) == stored


def test_warm_hit_does_not_extend_ttl(accounts, cache, clock, hasher, alice) -> None:
    auth = _authenticator(accounts, cache, hasher)
    auth.authenticate(EMAIL, "secret123")

    clock.advance(TTL - 1)
    auth.authenticate(EMAIL, "secret123")
    clock.advance(2)

    assert cache.get(auth.cache_key(EMAIL)) is None


def test_unknown_email_and_wrong_password_look_the_same(accounts, cache, hasher, alice) -> None:
    auth = _authenticator(accounts, cache, hasher)

    with pytest.raises(InvalidCredentialsError) as unknown:
        auth.authenticate("nobody@example.com", "anything")
    with pytest.raises(InvalidCredentialsError) as wrong:
        auth.authenticate(EMAIL, "anything")

    assert unknown.value.reason is AuthFailureReason.NOT_FOUND
    assert wrong.value.reason is AuthFailureReason.WRONG_SECRET
    assert unknown.value.to_dict() == wrong.value.to_dict() == {"error": "invalid_credentials"}
    assert unknown.value.status == wrong.value.status


def test_unknown_email_still_runs_one_hash_check(accounts, cache, hasher) -> None:
    auth = _authenticator(accounts, cache, hasher)
    hasher.verify_calls = 0

    with pytest.raises(InvalidCredentialsError):
        auth.authenticate("nobody@example.com", "anything")

    assert hasher.verify_calls == 1


def test_failed_logins_never_write_cache(accounts, cache, hasher, alice) -> None:
    auth = _authenticator(accounts, cache, hasher)

    with pytest.raises(InvalidCredentialsError):
        auth.authenticate(EMAIL, "wrong")
    with pytest.raises(InvalidCredentialsError):
        auth.authenticate("nobody@example.com", "wrong")

    assert cache.get(auth.cache_key(EMAIL)) is None
    assert cache.get(auth.cache_key("nobody@example.com")) is None


def test_email_is_not_case_folded(accounts, cache, hasher, alice) -> None:
    auth = _authenticator(accounts, cache, hasher)

    with pytest.raises(InvalidCredentialsError) as exc:
        auth.authenticate("Alice@Example.com", "secret123")

    assert exc.value.reason is AuthFailureReason.NOT_FOUND


def test_stale_cache_keeps_old_password_until_expiry(
    accounts, cache, clock, hasher, alice
) -> None:
    auth = _authenticator(accounts, cache, hasher)
    auth.authenticate(EMAIL, "secret123")

    accounts.replace_hash(EMAIL, hasher.hash("newsecret456"))

    # Documented staleness window: the cached hash still answers.
    with pytest.raises(InvalidCredentialsError) as exc:
        auth.authenticate(EMAIL, "newsecret456")
    assert exc.value.reason is AuthFailureReason.WRONG_SECRET
    assert auth.authenticate(EMAIL, "secret123").id == alice.id

    clock.advance(TTL)

    assert auth.authenticate(EMAIL, "newsecret456").id == alice.id
    with pytest.raises(InvalidCredentialsError):
        auth.authenticate(EMAIL, "secret123")


def test_strict_policy_does_not_consult_store_after_cached_rejection(
    accounts, cache, hasher, alice
) -> None:
    hook = RecordingHook()
    auth = _authenticator(accounts, cache, hasher, on_lookup=hook)
    auth.authenticate(EMAIL, "secret123")
    hook.calls.clear()
    finds_before = accounts.find_calls

    with pytest.raises(InvalidCredentialsError):
        auth.authenticate(EMAIL, "wrong")

    assert hook.calls == [("cache", "rejected")]
    assert accounts.find_calls == finds_before


def test_stale_hit_fallback_rechecks_store_and_refreshes_cache(
    accounts, cache, hasher, alice
) -> None:
    auth = _authenticator(accounts, cache, hasher, stale_hit_fallback=True)
    auth.authenticate(EMAIL, "secret123")
    accounts.replace_hash(EMAIL, hasher.hash("newsecret456"))

    assert auth.authenticate(EMAIL, "newsecret456").id == alice.id

    snapshot = CachedCredential.model_validate_json(cache.get(auth.cache_key(EMAIL)))
    assert snapshot.password_hash == hasher.hash("newsecret456")


def test_cache_outage_falls_back_to_store(accounts, hasher, alice) -> None:
    hook = RecordingHook()
    auth = _authenticator(accounts, BrokenCache(), hasher, on_lookup=hook)

    identity = auth.authenticate(EMAIL, "secret123")

    assert identity.id == alice.id
    assert hook.calls == [("cache", "error"), ("store", "verified")]


def test_cache_write_failure_does_not_fail_login(accounts, hasher, alice) -> None:
    broken = BrokenCache(fail_get=False, fail_set=True)
    auth = _authenticator(accounts, broken, hasher)

    assert auth.authenticate(EMAIL, "secret123").id == alice.id
    assert broken.values == {}


def test_cache_outage_propagates_when_fail_open_disabled(accounts, hasher, alice) -> None:
    auth = _authenticator(accounts, BrokenCache(), hasher, fail_open=False)

    with pytest.raises(CredentialCacheError):
        auth.authenticate(EMAIL, "secret123")


def test_unreadable_cache_entry_is_treated_as_miss(accounts, cache, hasher, alice) -> None:
    auth = _authenticator(accounts, cache, hasher)
    cache.set(auth.cache_key(EMAIL), "{not json", TTL)

    assert auth.authenticate(EMAIL, "secret123").id == alice.id
    assert CachedCredential.model_validate_json(cache.get(auth.cache_key(EMAIL))).id == alice.id


def test_concurrent_cold_logins_all_succeed_with_one_valid_snapshot(
    accounts, cache, hasher, alice
) -> None:
    auth = _authenticator(accounts, cache, hasher)
    expected = CachedCredential.from_account(alice).serialize()

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: auth.authenticate(EMAIL, "secret123"), range(32)))

    assert set(results) == {Identity(id=alice.id, username="alice")}
    assert cache.get(auth.cache_key(EMAIL)) == expected
