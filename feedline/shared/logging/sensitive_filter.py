# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Redaction applied to every log record before it reaches a sink."""

from __future__ import annotations

import re
from typing import Any

_REDACTED = "***"

_RULES: list[tuple[re.Pattern[str], str]] = [
    # Werkzeug password hashes (scrypt:..., pbkdf2:...).
    (re.compile(r"\b(?:scrypt|pbkdf2)[:$][^\s'\",}]+"), "<hash>"),
    (re.compile(r"(password(?:_hash)?\s*[:=]\s*['\"]?)[^'\"\s,}]+", re.IGNORECASE), rf"\g<1>{_REDACTED}"),
    (re.compile(r"(bearer\s+)[\w\-.~+/]{16,}", re.IGNORECASE), rf"\g<1>{_REDACTED}"),
    (re.compile(r"((?:auth_)?token\s*[:=]\s*['\"]?)[\w\-.]{16,}", re.IGNORECASE), rf"\g<1>{_REDACTED}"),
    (re.compile(r"(secret_key\s*[:=]\s*['\"]?)\S+", re.IGNORECASE), rf"\g<1>{_REDACTED}"),
    # Credentials embedded in database and Redis URLs.
    (re.compile(r"(\w+(?:\+\w+)?://[^:/@\s]*:)[^@\s]+@"), rf"\g<1>{_REDACTED}@"),
    # Login identifiers: keep the domain only.
    (re.compile(r"[\w.%+-]+@([\w-]+(?:\.[\w-]+)*\.[a-zA-Z]{2,})"), r"<email>@\1"),
]


def sanitize_message(message: str) -> str:
    for pattern, replacement in _RULES:
        message = pattern.sub(replacement, message)
    return message


def sanitize_record(record: dict[str, Any]) -> bool:
    """Loguru sink filter; rewrites the message in place and never drops a record."""
    record["message"] = sanitize_message(record["message"])
    return True


__all__ = ["sanitize_message", "sanitize_record"]
