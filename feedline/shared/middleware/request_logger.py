# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Per-request correlation ids and access log lines."""

from __future__ import annotations

import secrets
import time

from flask import Flask, Response, g, request

from feedline.shared.config import load_config
from feedline.shared.logging import clear_correlation_id, logger, set_correlation_id

REQUEST_ID_HEADER = "X-Request-ID"

# Query keys never written to the log, even in debug mode.
_HIDDEN_QUERY_KEYS = ("password", "token", "secret", "email")


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    return forwarded.split(",")[0].strip() or request.remote_addr or "unknown"


def _visible_query() -> dict[str, str]:
    return {
        key: "<hidden>" if any(word in key.lower() for word in _HIDDEN_QUERY_KEYS) else value
        for key, value in request.args.items()
    }


def configure_request_logging(app: Flask) -> None:
    verbose = load_config().debug_logging

    @app.before_request
    def _open_request() -> None:
        request_id = request.headers.get(REQUEST_ID_HEADER) or secrets.token_hex(8)
        set_correlation_id(request_id)
        g.request_id = request_id
        g.request_started = time.perf_counter()
        if verbose:
            logger.debug(
                f"http.request: start {request.method} {request.path} ip={_client_ip()} "
                f"query={_visible_query()} bytes={request.content_length or 0}"
            )

    @app.after_request
    def _close_request(response: Response) -> Response:
        elapsed = time.perf_counter() - g.get("request_started", time.perf_counter())
        response.headers.setdefault(REQUEST_ID_HEADER, g.get("request_id", "-"))
        logger.info(
            f"http.request: {request.method} {request.path} -> {response.status_code} "
            f"in {elapsed * 1000:.1f}ms ip={_client_ip()} user_id={g.get('user_id')}"
        )
        return response

    @app.teardown_request
    def _end_request(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"http.request: aborted {type(exc).__name__} on {request.path}")
        clear_correlation_id()


__all__ = ["REQUEST_ID_HEADER", "configure_request_logging"]
