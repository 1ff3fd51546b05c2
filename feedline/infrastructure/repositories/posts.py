# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from feedline.domain.posts.entities import FeedItem
from feedline.domain.posts.entities import Post as DomainPost
from feedline.domain.posts.repositories import LikeRepository, PostRepository
from feedline.infrastructure.db.models import Like, Post, User
from feedline.infrastructure.unit_of_work import unit_of_work_scope


def _to_domain(row: Post) -> DomainPost:
    return DomainPost(
        id=row.id,
        user_id=row.user_id,
        content=row.content,
        image=row.image,
        created_at=row.created_at,
    )


class SqlAlchemyPostRepository(PostRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def add(self, user_id: int, content: str, image: str | None) -> DomainPost:
        with unit_of_work_scope(self._session_factory) as session:
            row = Post(user_id=user_id, content=content, image=image)
            session.add(row)
            session.flush()
            return _to_domain(row)

    def get(self, post_id: int) -> DomainPost | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Post, post_id)
            return _to_domain(row) if row else None

    def delete(self, post_id: int) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            session.execute(delete(Like).where(Like.post_id == post_id))
            session.execute(delete(Post).where(Post.id == post_id))

    def list_feed(self, limit: int, offset: int = 0) -> Sequence[FeedItem]:
        like_counts = (
            select(Like.post_id, func.count(Like.id).label("likes"))
            .group_by(Like.post_id)
            .subquery()
        )
        with unit_of_work_scope(self._session_factory) as session:
            rows = session.execute(
                select(
                    Post.id,
                    User.username,
                    Post.content,
                    Post.image,
                    func.coalesce(like_counts.c.likes, 0).label("likes"),
                    Post.created_at,
                )
                .join(User, Post.user_id == User.id)
                .outerjoin(like_counts, like_counts.c.post_id == Post.id)
                .order_by(Post.created_at.desc(), Post.id.desc())
                .limit(limit)
                .offset(offset)
            ).all()
        return [
            FeedItem(
                id=row.id,
                author=row.username,
                content=row.content,
                image=row.image,
                likes=int(row.likes),
                created_at=row.created_at,
            )
            for row in rows
        ]


class SqlAlchemyLikeRepository(LikeRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def add(self, user_id: int, post_id: int) -> bool:
        """Record a like; returns False when the user already liked the post."""
        try:
            with unit_of_work_scope(self._session_factory) as session:
                session.add(Like(user_id=user_id, post_id=post_id))
                session.flush()
                return True
        except IntegrityError:
            return False
