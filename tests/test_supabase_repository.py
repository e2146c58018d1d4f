"""Supabase repository tests against a recorded query builder."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from types import SimpleNamespace
from typing import Any

import pytest
from postgrest import APIError

from app.repositories.models import UserEntity
from app.repositories.supabase_repository import (
    SupabaseUserRepository,
    entity_to_row,
    is_unique_violation,
    row_to_entity,
)
from app.utils.errors import ConflictError, NotFoundError, StorageError

USER_ID = uuid.UUID("6f1c2a4e-1111-4c3b-9f6a-2b7c5d8e9f00")
ROW = {
    "id": str(USER_ID),
    "login": "neo",
    "first_name": "Thomas",
    "last_name": "Anderson",
    "gravatar_hash": None,
    "created_at": "2026-01-01T00:00:00Z",
}


class FakeQuery:
    """Chainable stand-in for a PostgREST request builder."""

    def __init__(self, client: FakeClient, table: str) -> None:
        self.client = client
        self.table = table
        self.calls: list[tuple[str, tuple, dict]] = []

    def __getattr__(self, name: str):
        def method(*args: Any, **kwargs: Any) -> FakeQuery:
            self.calls.append((name, args, kwargs))
            return self

        return method

    def execute(self) -> Any:
        result = self.client.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    def called(self, name: str) -> list[tuple[tuple, dict]]:
        return [(args, kwargs) for call, args, kwargs in self.calls if call == name]


class FakeClient:
    def __init__(self, *results: Any) -> None:
        self.results = list(results)
        self.queries: list[FakeQuery] = []

    def table(self, name: str) -> FakeQuery:
        query = FakeQuery(self, name)
        self.queries.append(query)
        return query


def _response(data: Any = None, count: int | None = None) -> SimpleNamespace:
    return SimpleNamespace(data=data, count=count)


def test_row_conversion_round_trip() -> None:
    """Rows and entities convert both ways."""
    entity = row_to_entity(ROW)
    assert entity.id == USER_ID
    assert entity.created_at == datetime(2026, 1, 1, tzinfo=UTC)

    row = entity_to_row(entity)
    assert row["id"] == str(USER_ID)
    assert row["first_name"] == "Thomas"


def test_is_unique_violation() -> None:
    """Duplicate keys are detected by code or message."""
    assert is_unique_violation(APIError({"message": "x", "code": "23505"}))
    assert is_unique_violation(APIError({"message": "duplicate key value violates", "code": ""}))
    assert not is_unique_violation(APIError({"message": "timeout", "code": "57014"}))


def test_find_by_id() -> None:
    """Lookups filter by id and map the row."""
    client = FakeClient(_response([ROW]), _response([]))
    repository = SupabaseUserRepository(client, table="people")

    found = repository.find_by_id(USER_ID)
    assert found is not None and found.login == "neo"
    assert client.queries[0].table == "people"
    assert client.queries[0].called("eq") == [(("id", str(USER_ID)), {})]

    assert repository.find_by_id(uuid.uuid4()) is None


def test_insert_assigns_id() -> None:
    """Inserts generate an id when the entity has none."""
    client = FakeClient(_response([ROW]))
    repository = SupabaseUserRepository(client)

    created = repository.insert(UserEntity(login="neo", first_name="Thomas"))
    assert created.id == USER_ID

    (payload,), _ = client.queries[0].called("insert")[0]
    assert uuid.UUID(payload["id"])
    assert payload["login"] == "neo"


def test_insert_maps_duplicate_to_conflict() -> None:
    """Unique violations surface as conflicts."""
    client = FakeClient(APIError({"message": "duplicate key value", "code": "23505"}))
    with pytest.raises(ConflictError):
        SupabaseUserRepository(client).insert(UserEntity(id=USER_ID, login="neo"))


def test_other_api_errors_are_storage_errors() -> None:
    """Unexpected PostgREST failures become storage errors."""
    client = FakeClient(APIError({"message": "boom", "code": "XX000"}))
    with pytest.raises(StorageError):
        SupabaseUserRepository(client).find_by_id(USER_ID)


def test_update_or_insert_reports_insertion() -> None:
    """The insert either wins or conflicts; a conflict falls back to update."""
    client = FakeClient(
        _response([ROW]),
        APIError({"message": "duplicate key value", "code": "23505"}),
        _response([ROW]),
    )
    repository = SupabaseUserRepository(client)
    user = row_to_entity(ROW)

    assert repository.update_or_insert(user) is True
    assert repository.update_or_insert(user) is False

    assert [query.called("insert") != [] for query in client.queries] == [True, True, False]
    assert client.queries[2].called("update")
    assert not any(query.called("upsert") for query in client.queries)


def test_update_missing_row_is_not_found() -> None:
    """Updating nothing means the user does not exist."""
    client = FakeClient(_response([]))
    with pytest.raises(NotFoundError):
        SupabaseUserRepository(client).update(row_to_entity(ROW))


def test_update_does_not_rewrite_id() -> None:
    """Updates filter by id instead of sending it."""
    client = FakeClient(_response([ROW]))
    SupabaseUserRepository(client).update(row_to_entity(ROW))

    (payload,), _ = client.queries[0].called("update")[0]
    assert "id" not in payload
    assert "created_at" not in payload
    assert client.queries[0].called("eq") == [(("id", str(USER_ID)), {})]


def test_get_page_uses_range() -> None:
    """Pages translate to inclusive PostgREST ranges."""
    client = FakeClient(_response(None, count=25), _response([ROW]))
    page = SupabaseUserRepository(client).get_page(page_number=2, page_size=10)

    assert page.total_count == 25
    assert page.total_pages == 3
    assert [user.login for user in page.items] == ["neo"]
    assert client.queries[1].called("range") == [((10, 19), {})]


def test_get_page_past_the_end_skips_fetch() -> None:
    """No range request is made beyond the last row."""
    client = FakeClient(_response(None, count=3))
    page = SupabaseUserRepository(client).get_page(page_number=5, page_size=10)

    assert page.items == []
    assert page.total_count == 3
    assert len(client.queries) == 1
