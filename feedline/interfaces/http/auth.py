# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import wraps

from flask import g, request

from feedline.domain.accounts.entities import Identity
from feedline.shared.errors import UnauthorizedError
from feedline.shared.logging import logger

AUTH_COOKIE = "auth_token"


def extract_token() -> str:
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        return auth[7:].strip()
    return request.cookies.get(AUTH_COOKIE, "")


def client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


def auth_required(f):
    """Resolve the bearer token through the controller's session manager.

    The decorated method's controller must expose ``_sessions``.
    """

    @wraps(f)
    def inner(self, *a, **kw):
        token = extract_token()
        identity = self._sessions.resolve(token) if token else None
        if identity is None:
            logger.warning(
                f"Auth failed (token missing/expired) on {request.method} {request.path}"
            )
            raise UnauthorizedError()

        g.user_id = identity.id
        g.identity = identity
        return f(self, *a, **kw)

    return inner


def current_identity() -> Identity:
    return g.identity


__all__ = ["AUTH_COOKIE", "auth_required", "client_ip", "current_identity", "extract_token"]
