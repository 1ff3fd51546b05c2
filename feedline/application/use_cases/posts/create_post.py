# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from feedline.domain.posts.entities import Post
from feedline.domain.posts.repositories import ImageStorage, PostRepository
from feedline.shared.errors import ImageTooLargeError, UnsupportedImageError
from feedline.shared.logging import logger


@dataclass(slots=True, frozen=True)
class ImageUpload:
    filename: str
    data: bytes

    @property
    def extension(self) -> str:
        if "." not in self.filename:
            return ""
        return self.filename.rsplit(".", 1)[1].lower()


class CreatePostUseCase:
    def __init__(
        self,
        *,
        posts: PostRepository,
        storage: ImageStorage,
        allowed_extensions: Iterable[str],
        max_upload_bytes: int,
    ) -> None:
        self._posts = posts
        self._storage = storage
        self._allowed_extensions = frozenset(ext.lower() for ext in allowed_extensions)
        self._max_upload_bytes = max_upload_bytes

    def execute(self, user_id: int, content: str, image: ImageUpload | None = None) -> Post:
        stored_name: str | None = None
        if image is not None:
            if image.extension not in self._allowed_extensions:
                raise UnsupportedImageError(image.filename)
            if len(image.data) > self._max_upload_bytes:
                raise ImageTooLargeError(self._max_upload_bytes)
            stored_name = self._storage.save(image.data, image.extension)

        try:
            post = self._posts.add(user_id, content, stored_name)
        except Exception:
            if stored_name:
                self._storage.delete(stored_name)
            raise

        logger.info(f"posts.create: ok post_id={post.id} user_id={user_id} image={bool(stored_name)}")
        return post
