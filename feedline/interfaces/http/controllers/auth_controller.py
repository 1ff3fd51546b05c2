# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request

from feedline.application.use_cases.accounts.login_account import LoginAccountUseCase
from feedline.application.use_cases.accounts.logout_account import LogoutAccountUseCase
from feedline.application.use_cases.accounts.register_account import RegisterAccountUseCase
from feedline.interfaces.http.auth import AUTH_COOKIE, client_ip, extract_token
from feedline.interfaces.http.dto.auth import (
    LoginRequestDTO,
    LoginSuccessDTO,
    OkDTO,
    RegisterRequestDTO,
    RegisterSuccessDTO,
)
from feedline.shared.config import load_config
from feedline.shared.errors.validation import parse_payload
from feedline.shared.logging import logger
from feedline.shared.middleware.rate_limit import rate_limit


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterAccountUseCase,
        login_use_case: LoginAccountUseCase,
        logout_use_case: LogoutAccountUseCase,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case

    @rate_limit(limit=5, window_seconds=60.0)
    def register(self) -> tuple[Response, int]:
        dto = parse_payload(RegisterRequestDTO, request.get_json(silent=True))

        account = self._register_use_case.execute(dto.username, dto.email, dto.password)

        logger.info(f"auth.register: ok user_id={account.id}")
        return jsonify(RegisterSuccessDTO(user_id=account.id).model_dump()), 200

    @rate_limit()
    def login(self) -> tuple[Response, int]:
        dto = parse_payload(LoginRequestDTO, request.get_json(silent=True))

        result = self._login_use_case.execute(dto.email, dto.password, client_ip())

        config = load_config()
        response = jsonify(LoginSuccessDTO(username=result.identity.username).model_dump())
        response.set_cookie(
            AUTH_COOKIE,
            result.session.token,
            httponly=True,
            samesite=config.security.cookie_samesite,
            secure=config.security.cookie_secure,
            max_age=config.security.session_lifetime_days * 24 * 60 * 60,
        )
        return response, 200

    def logout(self) -> tuple[Response, int]:
        self._logout_use_case.execute(extract_token())

        response = jsonify(OkDTO().model_dump())
        response.delete_cookie(AUTH_COOKIE)
        logger.info("auth.logout: ok")
        return response, 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["DELETE"])
        return bp
