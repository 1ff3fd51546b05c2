# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Per-client request throttling for the unauthenticated auth endpoints."""

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from threading import Lock

from flask import request

from feedline.shared.config import load_config
from feedline.shared.errors import AppError
from feedline.shared.logging import logger


class RateLimitedError(AppError):
    def __init__(self, retry_after: float) -> None:
        super().__init__(
            code="rate_limited",
            status=HTTPStatus.TOO_MANY_REQUESTS,
            context={"retry_after_seconds": round(retry_after, 1)},
        )


class SlidingWindowLimiter:
    """At most ``limit`` hits per key within any ``window_seconds`` span."""

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = max(1, int(limit))
        self.window = max(0.1, float(window_seconds))
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._last_sweep = clock()
        self._lock = Lock()

    def hit(self, key: str) -> float:
        """Record a hit; returns 0 when allowed, else seconds until the next slot."""
        now = self._clock()
        with self._lock:
            self._maybe_sweep(now)
            hits = self._hits.setdefault(key, deque())
            while hits and now - hits[0] >= self.window:
                hits.popleft()
            if len(hits) >= self.limit:
                return self.window - (now - hits[0])
            hits.append(now)
            return 0.0

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._hits)

    def _maybe_sweep(self, now: float) -> None:
        # Keys whose newest hit left the window carry no state worth keeping.
        if now - self._last_sweep < self.window:
            return
        self._last_sweep = now
        stale = [
            key for key, hits in self._hits.items() if not hits or now - hits[-1] >= self.window
        ]
        for key in stale:
            del self._hits[key]


def _client_address() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    return forwarded.split(",")[0].strip() or request.remote_addr or "unknown"


def rate_limit(limit: int | None = None, window_seconds: float | None = None):
    security = load_config().security
    limiter = SlidingWindowLimiter(
        limit or security.rate_limit_requests,
        window_seconds or security.rate_limit_window,
    )

    def decorator(view: Callable):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if load_config().security.enable_rate_limit:
                retry_after = limiter.hit(f"{request.endpoint}:{_client_address()}")
                if retry_after > 0:
                    logger.warning(f"rate_limit: throttled endpoint={request.endpoint}")
                    raise RateLimitedError(retry_after)
            return view(*args, **kwargs)

        return wrapper

    return decorator


__all__ = ["RateLimitedError", "SlidingWindowLimiter", "rate_limit"]
