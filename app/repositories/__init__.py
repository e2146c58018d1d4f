"""User storage backends."""

from app.repositories.base import UserRepository
from app.repositories.memory import InMemoryUserRepository
from app.repositories.models import Page, UserEntity

__all__ = [
    "InMemoryUserRepository",
    "Page",
    "UserEntity",
    "UserRepository",
]
