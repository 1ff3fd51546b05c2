# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, cast


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code}
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class DomainError(AppError):
    def __init__(
        self,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_code = code or cast(str, getattr(type(self), "code", "domain_error"))
        resolved_status = status or cast(
            HTTPStatus, getattr(type(self), "status", HTTPStatus.BAD_REQUEST)
        )
        super().__init__(code=resolved_code, status=resolved_status, context=context)


class InfrastructureError(AppError):
    def __init__(
        self,
        code: str = "infrastructure_error",
        *,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_status = status or HTTPStatus.INTERNAL_SERVER_ERROR
        super().__init__(code=code, status=resolved_status, context=context)


class ValidationError(AppError):
    def __init__(
        self,
        code: str = "validation_error",
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            context=context,
        )


class UnauthorizedError(AppError):
    def __init__(self) -> None:
        super().__init__(code="unauthorized", status=HTTPStatus.UNAUTHORIZED)


class PostNotFoundError(AppError):
    def __init__(self, post_id: int) -> None:
        super().__init__(
            code="post_not_found",
            status=HTTPStatus.NOT_FOUND,
            context={"post_id": post_id},
        )


class PostForbiddenError(AppError):
    def __init__(self, post_id: int) -> None:
        super().__init__(
            code="post_forbidden",
            status=HTTPStatus.FORBIDDEN,
            context={"post_id": post_id},
        )


class UnsupportedImageError(AppError):
    def __init__(self, filename: str | None = None) -> None:
        context = {"filename": filename} if filename else None
        super().__init__(
            code="unsupported_image",
            status=HTTPStatus.UNSUPPORTED_MEDIA_TYPE,
            context=context,
        )


class ImageTooLargeError(AppError):
    def __init__(self, limit: int) -> None:
        super().__init__(
            code="image_too_large",
            status=HTTPStatus.REQUEST_ENTITY_TOO_LARGE,
            context={"max_bytes": limit},
        )
