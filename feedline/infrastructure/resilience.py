# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Resilience utilities (retries, circuit breaker)."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, TypeVar

from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from feedline.shared.logging import logger

T = TypeVar("T")


class CircuitOpenError(RuntimeError):
    pass


@dataclass
class CircuitBreaker:
    """In-memory circuit breaker, safe to share between threads.

    After ``reset_timeout`` an open breaker lets exactly one trial call through.
    Its success closes the circuit; its failure re-opens it for another period.
    """

    failure_threshold: int
    reset_timeout: float
    name: str = "breaker"
    clock: Callable[[], float] = time.monotonic
    _lock: Lock = field(default_factory=Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        self._failures = 0
        self._opened_at: float | None = None
        self._trial_in_flight = False

    @property
    def is_open(self) -> bool:
        with self._lock:
            return self._opened_at is not None

    def allow(self) -> bool:
        with self._lock:
            if self._opened_at is None:
                return True
            if self._trial_in_flight:
                return False
            if self.clock() - self._opened_at >= self.reset_timeout:
                logger.info(f"{self.name}: half-open, allowing one trial call")
                self._trial_in_flight = True
                return True
            return False

    def on_success(self) -> None:
        with self._lock:
            if self._opened_at is not None:
                logger.info(f"{self.name}: trial call succeeded, closing circuit")
            self._failures = 0
            self._opened_at = None
            self._trial_in_flight = False

    def on_failure(self) -> None:
        with self._lock:
            if self._trial_in_flight:
                self._trial_in_flight = False
                self._opened_at = self.clock()
                logger.warning(f"{self.name}: trial call failed, circuit re-opened")
                return
            self._failures += 1
            if self._failures >= self.failure_threshold and self._opened_at is None:
                self._opened_at = self.clock()
                logger.error(f"{self.name}: opening circuit after {self._failures} failures")


def resilient_call(  # noqa: UP047
    func: Callable[..., T],
    *args: Any,
    breaker: CircuitBreaker | None = None,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    max_retries: int = 0,
    backoff_base: float = 0.05,
    backoff_cap: float = 0.5,
    **kwargs: Any,
) -> T:
    """Execute call with retries on ``retry_on`` errors and an optional circuit breaker."""

    if breaker is not None and not breaker.allow():
        raise CircuitOpenError(f"{breaker.name}: circuit open")

    retry = Retrying(
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_exponential(multiplier=backoff_base, max=backoff_cap),
        retry=retry_if_exception_type(retry_on),
        reraise=True,
    )

    try:
        for attempt in retry:
            with attempt:
                result = func(*args, **kwargs)
    except Exception:
        if breaker is not None:
            breaker.on_failure()
        raise

    if breaker is not None:
        breaker.on_success()
    return result


__all__ = ["CircuitBreaker", "CircuitOpenError", "resilient_call"]
