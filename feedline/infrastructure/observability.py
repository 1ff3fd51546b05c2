# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from prometheus_client import Counter, Histogram

from feedline.shared.config import load_config

REQUEST_LATENCY = Histogram(
    "feedline_request_latency_seconds",
    "Request latency",
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10),
)
CREDENTIAL_LOOKUPS = Counter(
    "feedline_credential_lookups_total",
    "Credential lookups by source (cache/store) and outcome",
    labelnames=("source", "outcome"),
)
CACHE_FAILURES = Counter(
    "feedline_credential_cache_failures_total",
    "Credential cache operations that failed",
    labelnames=("operation",),
)
LOGIN_RESULTS = Counter(
    "feedline_login_results_total",
    "Login attempts by result",
    labelnames=("result",),
)


def _metrics_enabled() -> bool:
    return load_config().observability.metrics_enabled


def record_lookup(source: str, outcome: str) -> None:
    if _metrics_enabled():
        CREDENTIAL_LOOKUPS.labels(source=source, outcome=outcome).inc()


def record_cache_failure(operation: str) -> None:
    if _metrics_enabled():
        CACHE_FAILURES.labels(operation=operation).inc()


def record_login(result: str) -> None:
    if _metrics_enabled():
        LOGIN_RESULTS.labels(result=result).inc()


def observe_request_latency(seconds: float) -> None:
    if _metrics_enabled():
        REQUEST_LATENCY.observe(seconds)


__all__ = [
    "CACHE_FAILURES",
    "CREDENTIAL_LOOKUPS",
    "LOGIN_RESULTS",
    "REQUEST_LATENCY",
    "observe_request_latency",
    "record_cache_failure",
    "record_login",
    "record_lookup",
]
