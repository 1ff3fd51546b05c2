# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""File storage adapter for post images."""

from __future__ import annotations

import uuid
from pathlib import Path

from feedline.domain.posts.repositories import ImageStorage
from feedline.shared.logging import logger


class LocalImageStorage(ImageStorage):
    """Stores images flat under the configured root with generated names."""

    def __init__(self, root: Path) -> None:
        self._root = root
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, name: str) -> Path:
        path = (self._root / name).resolve()
        if path.parent != self._root.resolve():
            msg = "Attempted directory traversal outside storage root"
            raise ValueError(msg)
        return path

    def save(self, data: bytes, extension: str) -> str:
        name = f"{uuid.uuid4().hex}.{extension.lower()}"
        file_path = self._resolve(name)
        file_path.write_bytes(data)
        logger.debug(f"storage: write name={name} size={len(data)}")
        return name

    def delete(self, name: str) -> None:
        file_path = self._resolve(name)
        if file_path.exists():
            file_path.unlink()
            logger.debug(f"storage: deleted name={name}")


__all__ = ["LocalImageStorage"]
