# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException

from feedline.shared.logging import logger

from .base import AppError, InfrastructureError


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    return jsonify(error.to_dict()), error.status


def register_error_handler(
    app: Flask,
    *,
    debug_mode: bool = False,
    default_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
) -> None:
    """Render every failure as ``{"error": <code>, ...}`` JSON."""

    @app.errorhandler(AppError)
    def _app_error(exc: AppError):
        where = f"{request.method} {request.path}"
        if isinstance(exc, InfrastructureError):
            detail = getattr(exc, "detail", None) or "-"
            logger.error(f"http.error: {exc.code} detail={detail} on {where}")
        else:
            logger.info(f"http.error: {exc.code} on {where}")
        return handle_app_error(exc)

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        code = (exc.name or "http_error").lower().replace(" ", "_")
        return jsonify({"error": code}), exc.code or default_status

    @app.errorhandler(Exception)
    def _unexpected(exc: Exception):
        if debug_mode:
            logger.exception(f"http.error: unhandled on {request.method} {request.path}")
        else:
            logger.error(f"http.error: unhandled {type(exc).__name__} on {request.path}")
        return jsonify({"error": "internal_error"}), default_status


__all__ = ["handle_app_error", "register_error_handler"]
