# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from feedline.domain.posts.repositories import ImageStorage, PostRepository
from feedline.shared.errors import PostForbiddenError, PostNotFoundError
from feedline.shared.logging import logger


class DeletePostUseCase:
    def __init__(self, *, posts: PostRepository, storage: ImageStorage) -> None:
        self._posts = posts
        self._storage = storage

    def execute(self, user_id: int, post_id: int) -> None:
        post = self._posts.get(post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        if not post.is_owned_by(user_id):
            raise PostForbiddenError(post_id)

        self._posts.delete(post_id)
        if post.image:
            try:
                self._storage.delete(post.image)
            except OSError:
                logger.warning(f"posts.delete: image cleanup failed post_id={post_id}")
        logger.info(f"posts.delete: ok post_id={post_id} user_id={user_id}")
