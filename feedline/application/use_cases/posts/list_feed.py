# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence

from feedline.domain.posts.entities import FeedItem
from feedline.domain.posts.repositories import PostRepository

MAX_PAGE_SIZE = 100


class ListFeedUseCase:
    """Newest posts first, with author name and like count."""

    def __init__(self, *, posts: PostRepository) -> None:
        self._posts = posts

    def execute(self, limit: int = 50, offset: int = 0) -> Sequence[FeedItem]:
        limit = min(max(1, limit), MAX_PAGE_SIZE)
        return self._posts.list_feed(limit=limit, offset=max(0, offset))
