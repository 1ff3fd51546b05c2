# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import math

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from feedline.shared.config import load_config
from feedline.shared.config.settings import DatabaseConfig
from feedline.shared.logging import logger

_config = load_config()


class Base(DeclarativeBase):
    pass


def build_connect_args(database: DatabaseConfig) -> dict[str, object]:
    """Driver arguments that bound connecting and statement execution."""
    url = make_url(database.url)
    backend = url.get_backend_name()
    driver = url.get_driver_name()
    statement_seconds = math.ceil(database.statement_timeout_ms / 1000)

    if backend == "sqlite":
        # SQLite has no network; ``timeout`` bounds waiting on a locked file.
        return {
            "check_same_thread": False,
            "timeout": statement_seconds or database.connect_timeout,
        }

    if backend == "postgresql":
        args: dict[str, object] = {"connect_timeout": database.connect_timeout}
        if database.statement_timeout_ms:
            args["options"] = f"-c statement_timeout={database.statement_timeout_ms}"
        return args

    if backend in ("mysql", "mariadb") and driver in ("pymysql", "mysqldb"):
        args = {"connect_timeout": database.connect_timeout}
        if statement_seconds:
            args["read_timeout"] = statement_seconds
            args["write_timeout"] = statement_seconds
        return args

    logger.warning(f"db: no timeout mapping for {backend}+{driver}, relying on driver defaults")
    return {}


ENGINE: Engine = create_engine(
    _config.database.url,
    echo=False,
    pool_pre_ping=True,
    pool_size=_config.database.pool_size,
    max_overflow=_config.database.max_overflow,
    pool_timeout=_config.database.pool_timeout,
    connect_args=build_connect_args(_config.database),
)


SessionFactory = sessionmaker(bind=ENGINE, autoflush=False, expire_on_commit=False)


def init_db() -> None:
    from feedline.infrastructure.db import models  # noqa: F401

    Base.metadata.create_all(bind=ENGINE)
    logger.info("Database schema ensured")
