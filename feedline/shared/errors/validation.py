# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def describe_validation_failure(exc: PydanticValidationError) -> dict[str, Any]:
    """Client-safe summary: offending field paths and error types, never input values."""
    problems: list[dict[str, Any]] = []
    for error in exc.errors(include_input=False, include_url=False):
        field = ".".join(str(part) for part in error["loc"]) or "body"
        problem: dict[str, Any] = {"field": field, "type": error["type"]}
        if error.get("ctx"):
            problem["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
        problems.append(problem)

    return {
        "fields": sorted({problem["field"] for problem in problems}),
        "errors": problems,
    }


def parse_payload(model: type[ModelT], payload: object) -> ModelT:
    """Validate request data into ``model`` or raise a 422 ``ValidationError``."""
    try:
        return model.model_validate(dict(payload) if isinstance(payload, Mapping) else {})
    except PydanticValidationError as exc:
        raise ValidationError(context=describe_validation_failure(exc)) from exc


__all__ = ["describe_validation_failure", "parse_payload"]
