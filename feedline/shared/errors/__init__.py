# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .base import (
    AppError,
    DomainError,
    ImageTooLargeError,
    InfrastructureError,
    PostForbiddenError,
    PostNotFoundError,
    UnauthorizedError,
    UnsupportedImageError,
    ValidationError,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "DomainError",
    "ImageTooLargeError",
    "InfrastructureError",
    "PostForbiddenError",
    "PostNotFoundError",
    "UnauthorizedError",
    "UnsupportedImageError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]
