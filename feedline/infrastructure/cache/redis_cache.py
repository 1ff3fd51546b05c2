# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Redis-backed credential cache."""

from __future__ import annotations

import redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from feedline.domain.accounts.exceptions import CredentialCacheError
from feedline.domain.accounts.repositories import CredentialCache
from feedline.infrastructure.resilience import CircuitBreaker, CircuitOpenError, resilient_call
from feedline.shared.config.settings import CacheConfig, ResilienceConfig
from feedline.shared.logging import logger

_TRANSIENT_ERRORS = (RedisConnectionError, RedisTimeoutError)


class RedisCredentialCache(CredentialCache):
    """Get/set-with-expiry over a pooled Redis client.

    The client pool is thread-safe and shared by all requests. A missing key
    is ``None``; any transport failure, including an open breaker, raises
    ``CredentialCacheError`` so callers never mistake an outage for a miss.
    """

    def __init__(
        self,
        client: redis.Redis,
        *,
        breaker: CircuitBreaker | None = None,
        max_retries: int = 0,
        backoff_base: float = 0.05,
        backoff_cap: float = 0.5,
    ) -> None:
        self._client = client
        self._breaker = breaker
        self._max_retries = max_retries
        self._backoff_base = backoff_base
        self._backoff_cap = backoff_cap

    @classmethod
    def from_config(
        cls, cache: CacheConfig, resilience: ResilienceConfig
    ) -> RedisCredentialCache:
        client = redis.Redis.from_url(
            cache.redis_url,
            socket_timeout=cache.socket_timeout,
            socket_connect_timeout=cache.connect_timeout,
            decode_responses=True,
        )
        breaker = CircuitBreaker(
            failure_threshold=resilience.circuit_fail_threshold,
            reset_timeout=resilience.circuit_reset_timeout,
            name="credential_cache",
        )
        return cls(
            client,
            breaker=breaker,
            max_retries=resilience.max_retries,
            backoff_base=resilience.backoff_base,
            backoff_cap=resilience.backoff_cap,
        )

    def _call(self, operation: str, func, *args, **kwargs):
        try:
            return resilient_call(
                func,
                *args,
                breaker=self._breaker,
                retry_on=_TRANSIENT_ERRORS,
                max_retries=self._max_retries,
                backoff_base=self._backoff_base,
                backoff_cap=self._backoff_cap,
                **kwargs,
            )
        except CircuitOpenError as exc:
            raise CredentialCacheError(f"{operation}: circuit open") from exc
        except RedisError as exc:
            logger.warning(f"cache.redis: {operation} failed: {type(exc).__name__}")
            raise CredentialCacheError(f"{operation}: {type(exc).__name__}") from exc

    def get(self, key: str) -> str | None:
        value = self._call("get", self._client.get, key)
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._call("set", self._client.set, key, value, ex=ttl_seconds)

    def ping(self) -> bool:
        return bool(self._call("ping", self._client.ping))


__all__ = ["RedisCredentialCache"]
