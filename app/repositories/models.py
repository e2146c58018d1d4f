"""Stored user representation and paging container."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, TypeVar
from uuid import UUID

from app.utils.time import now_utc

T = TypeVar("T")


@dataclass(frozen=True)
class UserEntity:
    """Canonical stored user. ``id`` is assigned once by the repository."""

    id: UUID | None = None
    login: str = ""
    first_name: str | None = None
    last_name: str | None = None
    gravatar_hash: str | None = None
    created_at: datetime = field(default_factory=now_utc)


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of an ordered collection plus the collection size."""

    items: list[T]
    current_page: int
    page_size: int
    total_count: int

    @property
    def total_pages(self) -> int:
        if self.total_count <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages
