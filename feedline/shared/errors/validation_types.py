# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from enum import StrEnum


class ValidationErrorType(StrEnum):
    USERNAME_INVALID_CHARS = "username_invalid_chars"
    EMAIL_INVALID = "email_invalid"
    PASSWORD_NO_LETTER = "password_no_letter"
    PASSWORD_NO_DIGIT = "password_no_digit"
    PASSWORD_WEAK = "password_weak"
    CONTENT_EMPTY = "content_empty"
