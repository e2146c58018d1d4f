"""Conversions between stored users and their request/response shapes."""

from __future__ import annotations

import dataclasses
from typing import Any

from app.repositories.models import UserEntity
from app.schemas.user import UserCreateRequest, UserUpdateRequest, UserView


def full_name(first_name: str | None, last_name: str | None) -> str:
    """Join first and last name, skipping blanks."""
    parts = [part.strip() for part in (first_name, last_name) if part and part.strip()]
    return " ".join(parts)


def to_user_view(user: UserEntity) -> UserView:
    """Project a stored user for output."""
    return UserView(
        id=user.id,
        login=user.login,
        first_name=user.first_name,
        last_name=user.last_name,
        full_name=full_name(user.first_name, user.last_name),
        registered_at=user.created_at,
    )


def to_new_entity(request: UserCreateRequest) -> UserEntity:
    """Build a new, not yet identified user from a create request."""
    return UserEntity(
        login=request.login,
        first_name=request.first_name,
        last_name=request.last_name,
    )


def merge_update(request: UserUpdateRequest, user: UserEntity) -> UserEntity:
    """Copy request fields onto ``user``; id, timestamp and gravatar are kept."""
    return dataclasses.replace(
        user,
        login=request.login,
        first_name=request.first_name,
        last_name=request.last_name,
    )


def to_update_fields(user: UserEntity) -> dict[str, Any]:
    """Return the editable fields of ``user`` keyed by wire name."""
    return {
        "login": user.login,
        "firstName": user.first_name,
        "lastName": user.last_name,
    }
