# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from .entities import FeedItem, Post


class PostRepository(Protocol):
    def add(self, user_id: int, content: str, image: str | None) -> Post: ...
    def get(self, post_id: int) -> Post | None: ...
    def delete(self, post_id: int) -> None: ...
    def list_feed(self, limit: int, offset: int = 0) -> Sequence[FeedItem]: ...


class LikeRepository(Protocol):
    def add(self, user_id: int, post_id: int) -> bool: ...


class ImageStorage(Protocol):
    def save(self, data: bytes, extension: str) -> str: ...
    def delete(self, name: str) -> None: ...
