"""User repository contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from uuid import UUID

from app.repositories.models import Page, UserEntity


class UserRepository(ABC):
    """Storage contract the user handlers rely on."""

    @abstractmethod
    def find_by_id(self, user_id: UUID) -> UserEntity | None:
        """Return the user with ``user_id`` or None."""

    @abstractmethod
    def insert(self, user: UserEntity) -> UserEntity:
        """Store a new user, assigning an id when absent, and return it.

        Raises:
            ConflictError: a user with the same id already exists.
        """

    @abstractmethod
    def update_or_insert(self, user: UserEntity) -> bool:
        """Replace or create ``user`` by id. Return True when it was inserted."""

    @abstractmethod
    def update(self, user: UserEntity) -> None:
        """Replace an existing user.

        Raises:
            NotFoundError: no user exists for ``user.id``.
        """

    @abstractmethod
    def delete(self, user_id: UUID) -> None:
        """Remove the user with ``user_id`` if present."""

    @abstractmethod
    def get_page(self, page_number: int, page_size: int) -> Page[UserEntity]:
        """Return one page of users in creation order (``page_number`` is 1-based)."""
