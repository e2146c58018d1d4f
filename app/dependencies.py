"""FastAPI dependency injection helpers."""

from __future__ import annotations

from functools import lru_cache
from uuid import UUID

from fastapi import Depends

from app.config import settings
from app.repositories.base import UserRepository
from app.repositories.memory import InMemoryUserRepository
from app.services.user_service import UserService
from app.utils.errors import MalformedRequestError


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    """Return the process-wide user repository for the configured backend."""
    if settings.user_repository_backend == "supabase":
        from app.repositories.supabase_repository import SupabaseUserRepository
        from app.utils.supabase_client import get_service_client

        return SupabaseUserRepository(get_service_client(), table=settings.users_table)
    return InMemoryUserRepository()


def get_user_service(
    repository: UserRepository = Depends(get_user_repository),
) -> UserService:
    """Return a request-scoped user service."""
    return UserService(repository)


def parse_user_id(user_id: str) -> UUID:
    """Parse a route identifier.

    Raises:
        MalformedRequestError: 400 when the value is not a UUID.
    """
    try:
        return UUID(user_id)
    except ValueError as exc:
        raise MalformedRequestError(f"Invalid user id: {user_id}") from exc
