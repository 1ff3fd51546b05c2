from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from feedline.shared.errors.validation_types import ValidationErrorType

# Emails are validated for shape only and kept verbatim: no case folding or trimming.
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class RegisterRequestDTO(BaseModel):
    username: str = Field(min_length=3, max_length=64)
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=8, max_length=128)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        if not re.match(r"^[a-zA-Z0-9_]+$", value):
            raise PydanticCustomError(
                ValidationErrorType.USERNAME_INVALID_CHARS,
                "Username must contain only ASCII letters, digits and underscores",
                {"pattern": "^[a-zA-Z0-9_]+$"},
            )
        return value

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        if not _EMAIL_RE.match(value):
            raise PydanticCustomError(
                ValidationErrorType.EMAIL_INVALID,
                "Email address is not valid",
                {},
            )
        return value

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, value: str) -> str:
        if not re.search(r"[A-Za-z]", value):
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_NO_LETTER,
                "Password must contain at least one letter",
                {},
            )

        if not re.search(r"\d", value):
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_NO_DIGIT,
                "Password must contain at least one digit",
                {},
            )

        weak_passwords = {"password1", "password123", "qwerty123", "12345678a", "letmein123"}
        if value.lower() in weak_passwords:
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_WEAK,
                "Password is too weak, please choose a stronger password",
                {},
            )

        return value


class LoginRequestDTO(BaseModel):
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=128)  # No strength check on login


class RegisterSuccessDTO(BaseModel):
    ok: bool = True
    user_id: int


class LoginSuccessDTO(BaseModel):
    ok: bool = True
    username: str


class OkDTO(BaseModel):
    ok: bool = True
