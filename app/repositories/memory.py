"""Process-local user repository."""

from __future__ import annotations

import dataclasses
import threading
import uuid
from uuid import UUID

from app.repositories.base import UserRepository
from app.repositories.models import Page, UserEntity
from app.utils.errors import ConflictError, NotFoundError


class InMemoryUserRepository(UserRepository):
    """Dict-backed repository guarded by a lock.

    Entities are frozen dataclasses, so handing them out never exposes
    mutable storage.
    """

    def __init__(self) -> None:
        self._users: dict[UUID, UserEntity] = {}
        self._lock = threading.Lock()

    def find_by_id(self, user_id: UUID) -> UserEntity | None:
        with self._lock:
            return self._users.get(user_id)

    def insert(self, user: UserEntity) -> UserEntity:
        with self._lock:
            if user.id is None:
                user = dataclasses.replace(user, id=self._new_id())
            elif user.id in self._users:
                raise ConflictError(f"User {user.id} already exists")
            self._users[user.id] = user
            return user

    def update_or_insert(self, user: UserEntity) -> bool:
        if user.id is None:
            raise ValueError("update_or_insert requires a user id")
        with self._lock:
            inserted = user.id not in self._users
            self._users[user.id] = user
            return inserted

    def update(self, user: UserEntity) -> None:
        with self._lock:
            if user.id is None or user.id not in self._users:
                raise NotFoundError("User")
            self._users[user.id] = user

    def delete(self, user_id: UUID) -> None:
        with self._lock:
            self._users.pop(user_id, None)

    def get_page(self, page_number: int, page_size: int) -> Page[UserEntity]:
        offset = (page_number - 1) * page_size
        with self._lock:
            ordered = list(self._users.values())
        return Page(
            items=ordered[offset : offset + page_size],
            current_page=page_number,
            page_size=page_size,
            total_count=len(ordered),
        )

    def _new_id(self) -> UUID:
        # Caller holds the lock.
        while True:
            candidate = uuid.uuid4()
            if candidate not in self._users:
                return candidate
