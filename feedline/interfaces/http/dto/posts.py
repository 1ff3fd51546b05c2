from __future__ import annotations

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from feedline.shared.errors.validation_types import ValidationErrorType


class CreatePostDTO(BaseModel):
    content: str = Field(max_length=5000)

    @field_validator("content")
    @classmethod
    def validate_content(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise PydanticCustomError(
                ValidationErrorType.CONTENT_EMPTY,
                "Post content cannot be empty",
                {},
            )
        return value


class FeedQueryDTO(BaseModel):
    limit: int = Field(50, ge=1, le=100)
    offset: int = Field(0, ge=0)


class PostCreatedDTO(BaseModel):
    ok: bool = True
    id: int
    image: str | None = None
