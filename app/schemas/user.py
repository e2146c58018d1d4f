"""User-related schemas."""

from __future__ import annotations

import unicodedata
from datetime import datetime
from typing import Any, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from app.utils.errors import MalformedRequestError, ValidationFailedError

LOGIN_CHARACTERS_MESSAGE = "Login should contain only letters and digits"
NAME_CHARACTERS_MESSAGE = "Name must not contain control characters"

ModelT = TypeVar("ModelT", bound=BaseModel)


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserWriteRequest(CamelModel):
    """Fields shared by every write path (create, replace, patch result)."""

    login: str = Field(..., min_length=1)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)

    @field_validator("login")
    @classmethod
    def login_is_alphanumeric(cls, value: str) -> str:
        if not all(char.isalnum() for char in value):
            raise ValueError(LOGIN_CHARACTERS_MESSAGE)
        return value

    @field_validator("first_name", "last_name")
    @classmethod
    def name_has_no_control_characters(cls, value: str) -> str:
        if any(unicodedata.category(char) == "Cc" for char in value):
            raise ValueError(NAME_CHARACTERS_MESSAGE)
        return value


class UserCreateRequest(UserWriteRequest):
    """Request body for creating a user."""


class UserUpdateRequest(UserWriteRequest):
    """Request body for replacing a user, also the target of a patch."""


class UserView(CamelModel):
    """Public user representation."""

    id: UUID
    login: str
    first_name: str | None = None
    last_name: str | None = None
    full_name: str
    registered_at: datetime


class PaginationHeader(CamelModel):
    """Paging metadata sent in the ``X-Pagination`` header."""

    previous_page_link: str | None
    next_page_link: str | None
    total_count: int
    page_size: int
    current_page: int
    total_pages: int


def _error_field(error: dict[str, Any]) -> str:
    location = [str(part) for part in error.get("loc", ())]
    return ".".join(location) or "body"


def _error_message(error: dict[str, Any]) -> str:
    message = str(error.get("msg", "Invalid value"))
    return message.removeprefix("Value error, ")


def validate_payload(model: type[ModelT], payload: Any) -> ModelT:
    """Validate a parsed request body against ``model``.

    Raises:
        MalformedRequestError: the body is absent or not an object.
        ValidationFailedError: one or more fields are invalid; errors are
            keyed by wire field name.
    """
    if payload is None:
        raise MalformedRequestError("Request body is required")
    if not isinstance(payload, dict):
        raise MalformedRequestError("Request body must be an object")

    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        errors: dict[str, list[str]] = {}
        for error in exc.errors():
            errors.setdefault(_error_field(error), []).append(_error_message(error))
        raise ValidationFailedError(errors) from exc
