# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class Post:

    id: int
    user_id: int
    content: str
    image: str | None
    created_at: datetime

    def is_owned_by(self, user_id: int) -> bool:
        return self.user_id == user_id


@dataclass(slots=True, frozen=True)
class FeedItem:

    id: int
    author: str
    content: str
    image: str | None
    likes: int
    created_at: datetime

    def to_dict(self, viewer: str | None = None) -> dict[str, object]:
        return {
            "id": self.id,
            "author": self.author,
            "content": self.content,
            "image": self.image,
            "likes": self.likes,
            "created_at": self.created_at.isoformat(),
            "can_delete": viewer is not None and viewer == self.author,
        }
