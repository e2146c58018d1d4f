"""Supabase-backed user repository."""

from __future__ import annotations

import dataclasses
import logging
import time
import uuid
from typing import Any
from uuid import UUID

from postgrest import APIError

from app.config import settings
from app.repositories.base import UserRepository
from app.repositories.models import Page, UserEntity
from app.utils.errors import ConflictError, NotFoundError, StorageError
from app.utils.time import parse_timestamp
from supabase import Client

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: APIError) -> bool:
    """Return True when a write failed due to a duplicate key."""
    message = str(getattr(exc, "message", "")).lower()
    code = str(getattr(exc, "code", "")).lower()
    return "duplicate key value" in message or code == UNIQUE_VIOLATION


def entity_to_row(user: UserEntity) -> dict[str, Any]:
    """Convert a user entity into a table row payload."""
    return {
        "id": str(user.id),
        "login": user.login,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "gravatar_hash": user.gravatar_hash,
        "created_at": user.created_at.isoformat(),
    }


def row_to_entity(row: dict[str, Any]) -> UserEntity:
    """Convert a table row into a user entity."""
    return UserEntity(
        id=UUID(str(row["id"])),
        login=str(row["login"]),
        first_name=row.get("first_name"),
        last_name=row.get("last_name"),
        gravatar_hash=row.get("gravatar_hash"),
        created_at=parse_timestamp(row.get("created_at")),
    )


class SupabaseUserRepository(UserRepository):
    """Stores users as rows of one PostgREST table."""

    def __init__(self, client: Client, table: str = "users") -> None:
        self.client = client
        self.table = table

    def _execute(self, query) -> Any:
        """Execute a query, logging slow calls and normalizing API errors."""
        started = time.perf_counter()
        try:
            response = query.execute()
        except APIError as exc:
            message = str(getattr(exc, "message", "") or "Database request failed")
            if is_unique_violation(exc):
                raise ConflictError(message) from exc
            raise StorageError(message) from exc

        elapsed_ms = (time.perf_counter() - started) * 1000
        threshold_ms = settings.slow_query_log_threshold_ms
        if threshold_ms > 0 and elapsed_ms >= threshold_ms:
            logger.warning("Slow Supabase query on %s %.1fms", self.table, elapsed_ms)
        return response

    def find_by_id(self, user_id: UUID) -> UserEntity | None:
        response = self._execute(
            self.client.table(self.table).select("*").eq("id", str(user_id)).limit(1)
        )
        rows = response.data or []
        return row_to_entity(rows[0]) if rows else None

    def insert(self, user: UserEntity) -> UserEntity:
        if user.id is None:
            user = dataclasses.replace(user, id=uuid.uuid4())
        response = self._execute(self.client.table(self.table).insert(entity_to_row(user)))
        rows = response.data or []
        if not rows:
            raise StorageError(f"Failed to insert into {self.table}")
        return row_to_entity(rows[0])

    def update_or_insert(self, user: UserEntity) -> bool:
        if user.id is None:
            raise ValueError("update_or_insert requires a user id")
        # The primary key decides: only one concurrent writer wins the insert.
        try:
            self.insert(user)
        except ConflictError:
            self.update(user)
            return False
        return True

    def update(self, user: UserEntity) -> None:
        payload = entity_to_row(user)
        payload.pop("id")
        payload.pop("created_at")
        response = self._execute(
            self.client.table(self.table).update(payload).eq("id", str(user.id))
        )
        if not response.data:
            raise NotFoundError("User")

    def delete(self, user_id: UUID) -> None:
        self._execute(self.client.table(self.table).delete().eq("id", str(user_id)))

    def count(self) -> int:
        """Return the number of stored users."""
        response = self._execute(
            self.client.table(self.table).select("*", count="exact", head=True)
        )
        return response.count or 0

    def get_page(self, page_number: int, page_size: int) -> Page[UserEntity]:
        total = self.count()
        offset = (page_number - 1) * page_size
        items: list[UserEntity] = []
        # PostgREST rejects ranges that start past the last row.
        if offset < total:
            response = self._execute(
                self.client.table(self.table)
                .select("*")
                .order("created_at")
                .order("id")
                .range(offset, offset + page_size - 1)
            )
            items = [row_to_entity(row) for row in response.data or []]
        return Page(
            items=items,
            current_page=page_number,
            page_size=page_size,
            total_count=total,
        )
