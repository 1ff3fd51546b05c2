# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Application dependency container."""

from __future__ import annotations

from functools import cached_property

from sqlalchemy.orm import Session, sessionmaker

from feedline.application.services.authenticator import Authenticator
from feedline.application.services.password_hashing import WerkzeugPasswordHasher
from feedline.application.use_cases.accounts.login_account import LoginAccountUseCase
from feedline.application.use_cases.accounts.logout_account import LogoutAccountUseCase
from feedline.application.use_cases.accounts.register_account import RegisterAccountUseCase
from feedline.application.use_cases.posts.create_post import CreatePostUseCase
from feedline.application.use_cases.posts.delete_post import DeletePostUseCase
from feedline.application.use_cases.posts.like_post import LikePostUseCase
from feedline.application.use_cases.posts.list_feed import ListFeedUseCase
from feedline.domain.accounts.repositories import CredentialCache
from feedline.infrastructure.auth.login_attempts import LoginAttemptsTracker
from feedline.infrastructure.cache import build_credential_cache
from feedline.infrastructure.repositories.accounts import (
    SqlAlchemyAccountRepository,
    SqlAlchemySessionManager,
)
from feedline.infrastructure.repositories.posts import (
    SqlAlchemyLikeRepository,
    SqlAlchemyPostRepository,
)
from feedline.infrastructure.storage import LocalImageStorage
from feedline.interfaces.http.controllers.auth_controller import AuthController
from feedline.interfaces.http.controllers.misc_controller import MiscController
from feedline.interfaces.http.controllers.posts_controller import PostsController
from feedline.shared.config import AppConfig


class Container:
    def __init__(
        self,
        config: AppConfig,
        session_factory: sessionmaker[Session],
        *,
        credential_cache: CredentialCache | None = None,
    ) -> None:
        self._config = config
        self._session_factory = session_factory
        self._credential_cache_override = credential_cache

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def credential_cache(self) -> CredentialCache:
        if self._credential_cache_override is not None:
            return self._credential_cache_override
        return build_credential_cache(self._config)

    @cached_property
    def account_repository(self) -> SqlAlchemyAccountRepository:
        return SqlAlchemyAccountRepository(self._session_factory)

    @cached_property
    def session_manager(self) -> SqlAlchemySessionManager:
        return SqlAlchemySessionManager(
            self._session_factory,
            lifetime_days=self._config.security.session_lifetime_days,
        )

    @cached_property
    def login_attempts(self) -> LoginAttemptsTracker:
        security = self._config.security
        return LoginAttemptsTracker(
            max_attempts=security.login_max_attempts,
            lockout_duration=security.login_lockout_seconds,
            attempt_window=security.login_attempt_window,
        )

    @cached_property
    def authenticator(self) -> Authenticator:
        cache = self._config.cache
        return Authenticator(
            accounts=self.account_repository,
            cache=self.credential_cache,
            password_hasher=self.password_hasher,
            ttl_seconds=cache.credential_ttl,
            key_prefix=cache.key_prefix,
            fail_open=cache.fail_open,
            stale_hit_fallback=cache.stale_hit_fallback,
        )

    @cached_property
    def register_account_use_case(self) -> RegisterAccountUseCase:
        return RegisterAccountUseCase(
            accounts=self.account_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_account_use_case(self) -> LoginAccountUseCase:
        return LoginAccountUseCase(
            authenticator=self.authenticator,
            sessions=self.session_manager,
            attempts=self.login_attempts,
        )

    @cached_property
    def logout_account_use_case(self) -> LogoutAccountUseCase:
        return LogoutAccountUseCase(sessions=self.session_manager)

    @cached_property
    def image_storage(self) -> LocalImageStorage:
        return LocalImageStorage(self._config.storage.upload_dir)

    @cached_property
    def post_repository(self) -> SqlAlchemyPostRepository:
        return SqlAlchemyPostRepository(self._session_factory)

    @cached_property
    def like_repository(self) -> SqlAlchemyLikeRepository:
        return SqlAlchemyLikeRepository(self._session_factory)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_account_use_case,
            login_use_case=self.login_account_use_case,
            logout_use_case=self.logout_account_use_case,
        )

    @cached_property
    def posts_controller(self) -> PostsController:
        storage = self._config.storage
        return PostsController(
            sessions=self.session_manager,
            list_feed_use_case=ListFeedUseCase(posts=self.post_repository),
            create_post_use_case=CreatePostUseCase(
                posts=self.post_repository,
                storage=self.image_storage,
                allowed_extensions=storage.allowed_extensions,
                max_upload_bytes=storage.max_upload_bytes,
            ),
            like_post_use_case=LikePostUseCase(
                posts=self.post_repository, likes=self.like_repository
            ),
            delete_post_use_case=DeletePostUseCase(
                posts=self.post_repository, storage=self.image_storage
            ),
            upload_dir=self.image_storage.root,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(cache=self.credential_cache)
