"""User lookup, validation and persistence rules."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any
from uuid import UUID

from app.repositories.base import UserRepository
from app.repositories.models import Page, UserEntity
from app.schemas.user import UserCreateRequest, UserUpdateRequest, UserView, validate_payload
from app.services.patching import apply_patch, parse_patch_document
from app.services.user_mapping import (
    merge_update,
    to_new_entity,
    to_update_fields,
    to_user_view,
)
from app.utils.errors import MalformedRequestError, NotFoundError, ValidationFailedError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_NUMBER = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 20


def normalize_page_number(page_number: int) -> int:
    """Clamp a requested page number to the first page or later."""
    return max(DEFAULT_PAGE_NUMBER, page_number)


def normalize_page_size(page_size: int) -> int:
    """Clamp a requested page size into ``[1, MAX_PAGE_SIZE]``."""
    return min(max(1, page_size), MAX_PAGE_SIZE)


class UserService:
    """User resource operations on top of a repository."""

    def __init__(self, repository: UserRepository) -> None:
        self.repository = repository

    def _get_entity(self, user_id: UUID) -> UserEntity:
        user = self.repository.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User")
        return user

    def get_user(self, user_id: UUID) -> UserView:
        """Return the view of one user."""
        return to_user_view(self._get_entity(user_id))

    def create_user(self, payload: Any) -> UUID:
        """Validate a create request, store a new user and return its id."""
        request = validate_payload(UserCreateRequest, payload)
        created = self.repository.insert(to_new_entity(request))
        logger.info("Created user %s", created.id)
        return created.id

    def update_user(self, user_id: UUID, payload: Any) -> bool:
        """Replace or create the user ``user_id``. Return True when it was inserted."""
        if payload is None or user_id.int == 0:
            raise MalformedRequestError("A request body and a non-empty user id are required")

        request = validate_payload(UserUpdateRequest, payload)
        user = self.repository.find_by_id(user_id) or UserEntity(id=user_id)
        inserted = self.repository.update_or_insert(merge_update(request, user))
        logger.info("%s user %s", "Inserted" if inserted else "Updated", user_id)
        return inserted

    def patch_user(self, user_id: UUID, document: Any) -> None:
        """Apply a patch document to an existing user."""
        operations = parse_patch_document(document)
        user = self._get_entity(user_id)

        fields = to_update_fields(user)
        errors = apply_patch(fields, operations)
        try:
            request = validate_payload(UserUpdateRequest, fields)
        except ValidationFailedError as exc:
            for field_name, messages in exc.errors.items():
                errors.setdefault(field_name, []).extend(messages)
        if errors:
            raise ValidationFailedError(errors)

        self.repository.update(merge_update(request, user))
        logger.info("Patched user %s with %s operation(s)", user_id, len(operations))

    def delete_user(self, user_id: UUID) -> None:
        """Delete an existing user."""
        self._get_entity(user_id)
        self.repository.delete(user_id)
        logger.info("Deleted user %s", user_id)

    def list_users(self, page_number: int, page_size: int) -> Page[UserView]:
        """Return one page of user views with normalized paging parameters."""
        page = self.repository.get_page(
            normalize_page_number(page_number),
            normalize_page_size(page_size),
        )
        return dataclasses.replace(page, items=[to_user_view(user) for user in page.items])
