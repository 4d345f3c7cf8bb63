"""Category API routes."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, ConfigDict

from dega.core.domain_types import Category
from dega.entrypoints.api.deps import get_category_service
from dega.entrypoints.api.routes.common import (
    ClientDep,
    PageDep,
    SettingsDep,
    deleted_response,
    set_created_headers,
    set_page_headers,
    set_search_headers,
    set_updated_headers,
)
from dega.services import CategoryService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["categories"])

ENTITY_NAME = "coreCategory"

CategoryServiceDep = Annotated[CategoryService, Depends(get_category_service)]


class CategoryDTO(BaseModel):
    """Category request and response body."""

    model_config = ConfigDict(from_attributes=True)

    id: str | None = None
    name: str
    description: str | None = None
    slug: str | None = None
    parent_id: str | None = None
    client_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_entity(self) -> Category:
        """Convert to the domain dataclass."""
        return Category(**self.model_dump())

    @classmethod
    def from_entity(cls, category: Category) -> CategoryDTO:
        """Build from the domain dataclass."""
        return cls.model_validate(asdict(category))


@router.post("/categories", response_model=CategoryDTO, status_code=status.HTTP_201_CREATED)
async def create_category(
    body: CategoryDTO,
    request: Request,
    response: Response,
    ctx: ClientDep,
    service: CategoryServiceDep,
    settings: SettingsDep,
) -> CategoryDTO:
    """Create a category. The slug is derived from the name."""
    logger.debug("REST request to save Category : %s", body)
    created = await service.create(body.to_entity(), ctx.client_id)
    set_created_headers(
        response, settings, ENTITY_NAME, f"{request.url.path}/{created.id}", created.id or ""
    )
    return CategoryDTO.from_entity(created)


@router.put("/categories", response_model=CategoryDTO)
async def update_category(
    body: CategoryDTO,
    response: Response,
    ctx: ClientDep,
    service: CategoryServiceDep,
    settings: SettingsDep,
) -> CategoryDTO:
    """Replace an existing category."""
    logger.debug("REST request to update Category : %s", body)
    updated = await service.update(body.to_entity(), ctx.client_id)
    set_updated_headers(response, settings, ENTITY_NAME, updated.id or "")
    return CategoryDTO.from_entity(updated)


@router.get("/categories", response_model=list[CategoryDTO])
async def list_categories(
    request: Request,
    response: Response,
    page_request: PageDep,
    ctx: ClientDep,
    service: CategoryServiceDep,
) -> list[CategoryDTO]:
    """Get a page of categories."""
    logger.debug("REST request to get a page of Categories")
    page = await service.list(page_request, ctx.client_id)
    set_page_headers(response, request, page)
    return [CategoryDTO.from_entity(c) for c in page.content]


@router.get("/categories/{category_id}", response_model=CategoryDTO)
async def get_category(
    category_id: str,
    ctx: ClientDep,
    service: CategoryServiceDep,
) -> CategoryDTO:
    """Get a category by id."""
    logger.debug("REST request to get Category : %s", category_id)
    return CategoryDTO.from_entity(await service.get(category_id, ctx.client_id))


@router.delete("/categories/{category_id}", response_class=Response)
async def delete_category(
    category_id: str,
    ctx: ClientDep,
    service: CategoryServiceDep,
    settings: SettingsDep,
) -> Response:
    """Delete a category. Succeeds whether or not it existed."""
    logger.debug("REST request to delete Category : %s", category_id)
    await service.delete(category_id, ctx.client_id)
    return deleted_response(settings, ENTITY_NAME, category_id)


@router.get("/_search/categories", response_model=list[CategoryDTO])
async def search_categories(
    query: str,
    request: Request,
    response: Response,
    page_request: PageDep,
    ctx: ClientDep,
    service: CategoryServiceDep,
) -> list[CategoryDTO]:
    """Search categories by name, description or slug."""
    logger.debug("REST request to search for a page of Categories for query %s", query)
    page = await service.search(query, page_request, ctx.client_id)
    set_search_headers(response, request, query, page)
    return [CategoryDTO.from_entity(c) for c in page.content]


@router.get("/categorybyslug/{slug}", response_model=CategoryDTO)
async def get_category_by_slug(
    slug: str,
    ctx: ClientDep,
    service: CategoryServiceDep,
) -> CategoryDTO:
    """Get a category by its slug within the caller's client."""
    logger.debug("REST request to get Category by slug : %s", slug)
    return CategoryDTO.from_entity(await service.get_by_slug(slug, ctx.client_id))
