"""User resource endpoints."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response

from app.dependencies import get_user_service, parse_user_id
from app.repositories.models import Page
from app.schemas.user import PaginationHeader, UserView
from app.services.user_service import DEFAULT_PAGE_NUMBER, DEFAULT_PAGE_SIZE, UserService
from app.utils.negotiation import preferred_media_type, read_body, render

router = APIRouter()

COLLECTION_METHODS = "POST, GET, OPTIONS"


def _user_location(request: Request, user_id: UUID) -> str:
    return str(request.url_for("get_user_by_id", user_id=str(user_id)))


def _created(request: Request, user_id: UUID) -> Response:
    return render(
        request,
        str(user_id),
        status_code=201,
        headers={"Location": _user_location(request, user_id)},
        xml_root="guid",
    )


def _page_link(request: Request, page_number: int, page_size: int) -> str:
    url = request.url_for("get_users")
    return str(url.include_query_params(pageNumber=page_number, pageSize=page_size))


def build_pagination_header(request: Request, page: Page[UserView]) -> PaginationHeader:
    """Describe ``page`` with links to its neighbours."""
    previous_link = (
        _page_link(request, page.current_page - 1, page.page_size) if page.has_previous else None
    )
    next_link = _page_link(request, page.current_page + 1, page.page_size) if page.has_next else None
    return PaginationHeader(
        previous_page_link=previous_link,
        next_page_link=next_link,
        total_count=page.total_count,
        page_size=page.page_size,
        current_page=page.current_page,
        total_pages=page.total_pages,
    )


@router.get("", name="get_users")
def get_users(
    request: Request,
    page_number: int = Query(default=DEFAULT_PAGE_NUMBER, alias="pageNumber"),
    page_size: int = Query(default=DEFAULT_PAGE_SIZE, alias="pageSize"),
    service: UserService = Depends(get_user_service),
) -> Response:
    """List users page by page; paging metadata goes in ``X-Pagination``."""
    page = service.list_users(page_number, page_size)
    header = build_pagination_header(request, page)
    return render(
        request,
        [user.model_dump(mode="json", by_alias=True) for user in page.items],
        headers={"X-Pagination": header.model_dump_json(by_alias=True)},
        xml_root="ArrayOfUserView",
        xml_item="UserView",
    )


@router.options("", name="get_users_options")
def get_users_options() -> Response:
    """Advertise the methods supported by the collection."""
    return Response(status_code=200, headers={"Allow": COLLECTION_METHODS})


@router.post("", name="create_user")
def create_user(
    request: Request,
    payload: Any = Depends(read_body),
    service: UserService = Depends(get_user_service),
) -> Response:
    """Create a user; the new id is returned and linked via ``Location``."""
    user_id = service.create_user(payload)
    return _created(request, user_id)


@router.get("/{user_id}", name="get_user_by_id")
def get_user_by_id(
    request: Request,
    user_uuid: UUID = Depends(parse_user_id),
    service: UserService = Depends(get_user_service),
) -> Response:
    """Return one user."""
    user = service.get_user(user_uuid)
    return render(request, user.model_dump(mode="json", by_alias=True), xml_root="UserView")


@router.head("/{user_id}", name="head_user_by_id")
def head_user_by_id(
    request: Request,
    user_uuid: UUID = Depends(parse_user_id),
    service: UserService = Depends(get_user_service),
) -> Response:
    """Check that a user exists without transferring it."""
    service.get_user(user_uuid)
    return Response(status_code=200, media_type=preferred_media_type(request.headers.get("accept")))


@router.put("/{user_id}", name="update_user")
def update_user(
    request: Request,
    user_uuid: UUID = Depends(parse_user_id),
    payload: Any = Depends(read_body),
    service: UserService = Depends(get_user_service),
) -> Response:
    """Replace a user, creating it under the given id when missing."""
    inserted = service.update_user(user_uuid, payload)
    if inserted:
        return _created(request, user_uuid)
    return Response(status_code=204)


@router.patch("/{user_id}", name="patch_user")
def patch_user(
    user_uuid: UUID = Depends(parse_user_id),
    document: Any = Depends(read_body),
    service: UserService = Depends(get_user_service),
) -> Response:
    """Apply a patch document to an existing user."""
    service.patch_user(user_uuid, document)
    return Response(status_code=204)


@router.delete("/{user_id}", name="delete_user")
def delete_user(
    user_uuid: UUID = Depends(parse_user_id),
    service: UserService = Depends(get_user_service),
) -> Response:
    """Delete a user."""
    service.delete_user(user_uuid)
    return Response(status_code=204)
