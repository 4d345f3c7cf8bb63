"""Dependencies and helpers shared by the content routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Query, Request, Response

from dega.core.alerts import entity_creation_alert, entity_deletion_alert, entity_update_alert
from dega.core.pagination import (
    DEFAULT_PAGE_SIZE,
    Page,
    PageRequest,
    pagination_headers,
    search_pagination_headers,
)
from dega.entrypoints.api.deps import Settings, get_settings
from dega.entrypoints.api.middleware.client import ClientContext, get_client_context


def get_page_request(
    page: int = 0,
    size: int = DEFAULT_PAGE_SIZE,
    sort: Annotated[list[str] | None, Query()] = None,
) -> PageRequest:
    """Page descriptor from the ``page``, ``size`` and ``sort`` query parameters.

    Out-of-range values are rejected by PageRequest with a 400.
    """
    return PageRequest.parse(page=page, size=size, sort=sort)


# Annotated types for dependency injection
ClientDep = Annotated[ClientContext, Depends(get_client_context)]
PageDep = Annotated[PageRequest, Depends(get_page_request)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


def set_page_headers(response: Response, request: Request, page: Page[object]) -> None:
    """Attach totals and navigation links for a listing."""
    response.headers.update(pagination_headers(page, request.url.path))


def set_search_headers(
    response: Response, request: Request, query: str, page: Page[object]
) -> None:
    """Attach totals and navigation links for a search, echoing the query."""
    response.headers.update(search_pagination_headers(query, page, request.url.path))


def set_created_headers(
    response: Response, settings: Settings, entity_name: str, location: str, entity_id: str
) -> None:
    """Location plus creation alert."""
    response.headers["Location"] = location
    response.headers.update(entity_creation_alert(entity_name, entity_id, settings.app_name))


def set_updated_headers(
    response: Response, settings: Settings, entity_name: str, entity_id: str
) -> None:
    """Update alert."""
    response.headers.update(entity_update_alert(entity_name, entity_id, settings.app_name))


def deleted_response(settings: Settings, entity_name: str, entity_id: str) -> Response:
    """Empty 200 response carrying the deletion alert."""
    return Response(
        status_code=200,
        headers=entity_deletion_alert(entity_name, entity_id, settings.app_name),
    )
