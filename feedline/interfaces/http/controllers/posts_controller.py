# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pathlib import Path

from flask import Blueprint, Response, jsonify, request, send_from_directory

from feedline.application.use_cases.posts.create_post import CreatePostUseCase, ImageUpload
from feedline.application.use_cases.posts.delete_post import DeletePostUseCase
from feedline.application.use_cases.posts.like_post import LikePostUseCase
from feedline.application.use_cases.posts.list_feed import ListFeedUseCase
from feedline.domain.accounts.repositories import SessionManager
from feedline.interfaces.http.auth import auth_required, current_identity
from feedline.interfaces.http.dto.auth import OkDTO
from feedline.interfaces.http.dto.posts import CreatePostDTO, FeedQueryDTO, PostCreatedDTO
from feedline.shared.errors.validation import parse_payload
from feedline.shared.logging import logger


class PostsController:
    def __init__(
        self,
        *,
        sessions: SessionManager,
        list_feed_use_case: ListFeedUseCase,
        create_post_use_case: CreatePostUseCase,
        like_post_use_case: LikePostUseCase,
        delete_post_use_case: DeletePostUseCase,
        upload_dir: Path,
    ) -> None:
        self._sessions = sessions
        self._list_feed = list_feed_use_case
        self._create_post = create_post_use_case
        self._like_post = like_post_use_case
        self._delete_post = delete_post_use_case
        self._upload_dir = upload_dir

    @auth_required
    def feed(self) -> tuple[Response, int]:
        query = parse_payload(FeedQueryDTO, request.args.to_dict())

        viewer = current_identity().username
        items = self._list_feed.execute(limit=query.limit, offset=query.offset)
        logger.info(f"posts.feed: ok n={len(items)}")
        return jsonify({"items": [item.to_dict(viewer) for item in items]}), 200

    @auth_required
    def create(self) -> tuple[Response, int]:
        dto = parse_payload(CreatePostDTO, {"content": request.form.get("content", "")})

        upload = None
        photo = request.files.get("photo")
        if photo is not None and photo.filename:
            upload = ImageUpload(filename=photo.filename, data=photo.read())

        post = self._create_post.execute(current_identity().id, dto.content, upload)
        return jsonify(PostCreatedDTO(id=post.id, image=post.image).model_dump()), 201

    @auth_required
    def like(self, post_id: int) -> tuple[Response, int]:
        self._like_post.execute(current_identity().id, post_id)
        return jsonify(OkDTO().model_dump()), 200

    @auth_required
    def delete(self, post_id: int) -> tuple[Response, int]:
        self._delete_post.execute(current_identity().id, post_id)
        return jsonify(OkDTO().model_dump()), 200

    def upload(self, name: str) -> Response:
        return send_from_directory(self._upload_dir.resolve(), name)

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("posts", __name__)
        bp.add_url_rule("/api/feed", view_func=self.feed, methods=["GET"])
        bp.add_url_rule("/api/posts", view_func=self.create, methods=["POST"])
        bp.add_url_rule("/api/posts/<int:post_id>/like", view_func=self.like, methods=["POST"])
        bp.add_url_rule("/api/posts/<int:post_id>", view_func=self.delete, methods=["DELETE"])
        bp.add_url_rule("/uploads/<path:name>", view_func=self.upload, methods=["GET"])
        return bp
