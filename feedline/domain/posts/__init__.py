# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import FeedItem, Post
from .repositories import ImageStorage, LikeRepository, PostRepository

__all__ = ["FeedItem", "ImageStorage", "LikeRepository", "Post", "PostRepository"]
