# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from sqlalchemy import text

from feedline.infrastructure.db import ENGINE


class _Pingable(Protocol):
    def ping(self) -> bool: ...


def check_database() -> bool:
    with ENGINE.connect() as connection:
        connection.execute(text("SELECT 1"))
    return True


def check_cache(cache: _Pingable) -> bool:
    return cache.ping()


__all__ = ["check_cache", "check_database"]
