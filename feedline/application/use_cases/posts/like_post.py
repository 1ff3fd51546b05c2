# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from feedline.domain.posts.repositories import LikeRepository, PostRepository
from feedline.shared.errors import PostNotFoundError
from feedline.shared.logging import logger


class LikePostUseCase:
    def __init__(self, *, posts: PostRepository, likes: LikeRepository) -> None:
        self._posts = posts
        self._likes = likes

    def execute(self, user_id: int, post_id: int) -> bool:
        """Like a post once per user; repeated likes are accepted and ignored."""
        if self._posts.get(post_id) is None:
            raise PostNotFoundError(post_id)
        created = self._likes.add(user_id, post_id)
        logger.debug(f"posts.like: post_id={post_id} user_id={user_id} created={created}")
        return created
