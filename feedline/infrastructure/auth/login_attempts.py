# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock

from feedline.shared.logging import logger

# Retry hint when the budget is taken by attempts still being verified.
_IN_FLIGHT_RETRY_SECONDS = 1.0


@dataclass(slots=True, frozen=True)
class FailedLogin:
    timestamp: float
    ip_address: str | None = None


class LoginAttemptsTracker:
    """Locks a login identifier after repeated failures within a window.

    Unknown emails are tracked like real ones, so lockout behaviour does not
    reveal whether an account exists. A successful login forgets the history.

    Callers reserve a slot with ``try_begin`` before verifying a password and
    settle it with ``finish`` or ``release``. Attempts still in flight count
    against the budget, so parallel guesses cannot exceed ``max_attempts``.
    """

    def __init__(
        self,
        *,
        max_attempts: int = 5,
        lockout_duration: float = 15 * 60,
        attempt_window: float = 60 * 60,
        sweep_interval: float = 60.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.max_attempts = max_attempts
        self.lockout_duration = lockout_duration
        self.attempt_window = attempt_window
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._failures: dict[str, deque[FailedLogin]] = {}
        self._in_flight: dict[str, int] = {}
        self._unlock_at: dict[str, float] = {}
        self._last_sweep = clock()
        self._lock = Lock()

    def try_begin(self, identifier: str) -> float:
        """Reserve an attempt; returns 0 when reserved, else seconds to wait."""
        with self._lock:
            now = self._clock()
            self._maybe_sweep(now)

            remaining = self._remaining(identifier, now)
            if remaining > 0:
                return remaining

            used = len(self._recent(identifier, now)) + self._in_flight.get(identifier, 0)
            if used >= self.max_attempts:
                return _IN_FLIGHT_RETRY_SECONDS

            self._in_flight[identifier] = self._in_flight.get(identifier, 0) + 1
            return 0.0

    def finish(self, identifier: str, success: bool, ip_address: str | None = None) -> None:
        with self._lock:
            self._release(identifier)
            if success:
                self._failures.pop(identifier, None)
                self._unlock_at.pop(identifier, None)
                return

            now = self._clock()
            failures = self._failures.setdefault(identifier, deque(maxlen=self.max_attempts))
            failures.append(FailedLogin(timestamp=now, ip_address=ip_address))

            recent = self._recent(identifier, now)
            if len(recent) >= self.max_attempts:
                self._unlock_at[identifier] = now + self.lockout_duration
                del self._failures[identifier]
                ips = sorted({f.ip_address for f in recent if f.ip_address})
                logger.warning(
                    f"login_attempts: locked failures={len(recent)} "
                    f"for={self.lockout_duration:.0f}s ips={ips or 'unknown'}"
                )

    def release(self, identifier: str) -> None:
        """Give a reservation back without counting it, e.g. on a store outage."""
        with self._lock:
            self._release(identifier)

    def tracked_identifiers(self) -> int:
        with self._lock:
            return len(self._failures.keys() | self._in_flight.keys() | self._unlock_at.keys())

    def _release(self, identifier: str) -> None:
        count = self._in_flight.get(identifier, 0) - 1
        if count > 0:
            self._in_flight[identifier] = count
        else:
            self._in_flight.pop(identifier, None)

    def _recent(self, identifier: str, now: float) -> list[FailedLogin]:
        failures = self._failures.get(identifier, ())
        return [f for f in failures if now - f.timestamp < self.attempt_window]

    def _remaining(self, identifier: str, now: float) -> float:
        unlock_at = self._unlock_at.get(identifier)
        if unlock_at is None:
            return 0.0
        if unlock_at <= now:
            del self._unlock_at[identifier]
            return 0.0
        return unlock_at - now

    def _maybe_sweep(self, now: float) -> None:
        if now - self._last_sweep < self.sweep_interval:
            return
        self._last_sweep = now
        stale = [
            key
            for key, failures in self._failures.items()
            if not failures or now - failures[-1].timestamp >= self.attempt_window
        ]
        for key in stale:
            del self._failures[key]
        expired = [key for key, unlock_at in self._unlock_at.items() if unlock_at <= now]
        for key in expired:
            del self._unlock_at[key]
        if stale or expired:
            logger.debug(f"login_attempts: swept failures={len(stale)} lockouts={len(expired)}")


__all__ = ["FailedLogin", "LoginAttemptsTracker"]
