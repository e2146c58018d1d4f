"""Pytest fixtures for backend tests."""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient


def _set_default_env() -> None:
    os.environ.setdefault("USER_REPOSITORY_BACKEND", "memory")


_set_default_env()


@pytest.fixture(scope="session")
def fastapi_app():
    """Return the FastAPI application."""
    from app.main import app as fastapi_app

    return fastapi_app


@pytest.fixture()
def repository():
    """Fresh in-memory repository per test."""
    from app.repositories.memory import InMemoryUserRepository

    return InMemoryUserRepository()


@pytest.fixture()
def client(fastapi_app, repository) -> Iterator[TestClient]:
    """Create a FastAPI test client backed by an isolated repository."""
    from app.dependencies import get_user_repository

    fastapi_app.dependency_overrides[get_user_repository] = lambda: repository
    try:
        yield TestClient(fastapi_app)
    finally:
        fastapi_app.dependency_overrides.clear()
