# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Transaction scope shared by the SQLAlchemy repositories."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session

from feedline.shared.logging import logger


@contextmanager
def unit_of_work_scope(factory: Callable[[], Session]) -> Iterator[Session]:
    """Yield a session that commits when the block exits cleanly.

    Any exception raised inside the block, or by the commit itself, rolls the
    transaction back and propagates unchanged.
    """
    session = factory()
    try:
        yield session
        session.commit()
    except BaseException as exc:
        logger.debug(f"db.uow: rollback ({type(exc).__name__})")
        session.rollback()
        raise
    finally:
        session.close()


__all__ = ["unit_of_work_scope"]
