"""API router package."""

from app.routers import users

__all__ = ["users"]
