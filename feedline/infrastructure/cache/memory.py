# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock

from feedline.domain.accounts.repositories import CredentialCache
from feedline.shared.logging import logger


@dataclass(slots=True)
class CacheEntry:
    value: str
    expires_at: float


class InMemoryTTLCache(CredentialCache):
    """Process-local cache with the same get/set-with-expiry contract as Redis."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = Lock()
        self._store: dict[str, CacheEntry] = {}

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                logger.debug("cache: expired entry dropped")
                self._store.pop(key, None)
                return None
            return entry.value

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        expires_at = self._clock() + ttl_seconds
        with self._lock:
            self._store[key] = CacheEntry(value=value, expires_at=expires_at)

    def ping(self) -> bool:
        return True


__all__ = ["InMemoryTTLCache"]
