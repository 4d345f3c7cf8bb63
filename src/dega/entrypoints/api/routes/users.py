"""DegaUser API routes."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, ConfigDict, Field

from dega.core.domain_types import DegaUser
from dega.entrypoints.api.deps import get_user_service
from dega.entrypoints.api.routes.common import (
    PageDep,
    SettingsDep,
    deleted_response,
    set_created_headers,
    set_page_headers,
    set_search_headers,
    set_updated_headers,
)
from dega.services import DegaUserService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dega-users"])

ENTITY_NAME = "coreDegaUser"

UserServiceDep = Annotated[DegaUserService, Depends(get_user_service)]


class DegaUserDTO(BaseModel):
    """User request and response body."""

    model_config = ConfigDict(from_attributes=True)

    id: str | None = None
    display_name: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    website: str | None = None
    facebook_url: str | None = None
    twitter_url: str | None = None
    instagram_url: str | None = None
    linkedin_url: str | None = None
    github_url: str | None = None
    profile_picture: str | None = None
    description: str | None = None
    is_active: bool = True
    slug: str | None = None
    organization_ids: list[str] = Field(default_factory=list)
    organization_default_id: str | None = None
    client_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_entity(self) -> DegaUser:
        """Convert to the domain dataclass."""
        values = self.model_dump()
        values["organization_ids"] = set(self.organization_ids)
        return DegaUser(**values)

    @classmethod
    def from_entity(cls, user: DegaUser) -> DegaUserDTO:
        """Build from the domain dataclass. Organization ids are sorted."""
        values = asdict(user)
        values["organization_ids"] = sorted(user.organization_ids)
        return cls.model_validate(values)


@router.post("/dega-users", response_model=DegaUserDTO, status_code=status.HTTP_201_CREATED)
async def create_user(
    body: DegaUserDTO,
    request: Request,
    response: Response,
    service: UserServiceDep,
    settings: SettingsDep,
) -> DegaUserDTO:
    """Create a user. The slug is derived from the display name."""
    logger.debug("REST request to save DegaUser : %s", body)
    created = await service.create(body.to_entity())
    set_created_headers(
        response, settings, ENTITY_NAME, f"{request.url.path}/{created.id}", created.id or ""
    )
    return DegaUserDTO.from_entity(created)


@router.put("/dega-users", response_model=DegaUserDTO)
async def update_user(
    body: DegaUserDTO,
    response: Response,
    service: UserServiceDep,
    settings: SettingsDep,
) -> DegaUserDTO:
    """Replace an existing user, including its organization memberships."""
    logger.debug("REST request to update DegaUser : %s", body)
    updated = await service.update(body.to_entity())
    set_updated_headers(response, settings, ENTITY_NAME, updated.id or "")
    return DegaUserDTO.from_entity(updated)


@router.get("/dega-users", response_model=list[DegaUserDTO])
async def list_users(
    request: Request,
    response: Response,
    page_request: PageDep,
    service: UserServiceDep,
) -> list[DegaUserDTO]:
    """Get a page of users."""
    logger.debug("REST request to get a page of DegaUsers")
    page = await service.list(page_request)
    set_page_headers(response, request, page)
    return [DegaUserDTO.from_entity(u) for u in page.content]


@router.get("/dega-users/{user_id}", response_model=DegaUserDTO)
async def get_user(
    user_id: str,
    service: UserServiceDep,
) -> DegaUserDTO:
    """Get a user by id."""
    logger.debug("REST request to get DegaUser : %s", user_id)
    return DegaUserDTO.from_entity(await service.get(user_id))


@router.delete("/dega-users/{user_id}", response_class=Response)
async def delete_user(
    user_id: str,
    service: UserServiceDep,
    settings: SettingsDep,
) -> Response:
    """Delete a user and its memberships."""
    logger.debug("REST request to delete DegaUser : %s", user_id)
    await service.delete(user_id)
    return deleted_response(settings, ENTITY_NAME, user_id)


@router.post(
    "/dega-users/{user_id}/organizations/{organization_id}", response_model=DegaUserDTO
)
async def add_user_organization(
    user_id: str,
    organization_id: str,
    response: Response,
    service: UserServiceDep,
    settings: SettingsDep,
) -> DegaUserDTO:
    """Make the user a member of an organization."""
    logger.debug("REST request to add DegaUser %s to Organization %s", user_id, organization_id)
    user = await service.add_organization(user_id, organization_id)
    set_updated_headers(response, settings, ENTITY_NAME, user_id)
    return DegaUserDTO.from_entity(user)


@router.delete(
    "/dega-users/{user_id}/organizations/{organization_id}", response_model=DegaUserDTO
)
async def remove_user_organization(
    user_id: str,
    organization_id: str,
    response: Response,
    service: UserServiceDep,
    settings: SettingsDep,
) -> DegaUserDTO:
    """Remove the user from an organization."""
    logger.debug(
        "REST request to remove DegaUser %s from Organization %s", user_id, organization_id
    )
    user = await service.remove_organization(user_id, organization_id)
    set_updated_headers(response, settings, ENTITY_NAME, user_id)
    return DegaUserDTO.from_entity(user)


@router.get("/_search/dega-users", response_model=list[DegaUserDTO])
async def search_users(
    query: str,
    request: Request,
    response: Response,
    page_request: PageDep,
    service: UserServiceDep,
) -> list[DegaUserDTO]:
    """Search users by name, email or slug."""
    logger.debug("REST request to search for a page of DegaUsers for query %s", query)
    page = await service.search(query, page_request)
    set_search_headers(response, request, query, page)
    return [DegaUserDTO.from_entity(u) for u in page.content]


@router.get("/degauserbyslug/{slug}", response_model=DegaUserDTO)
async def get_user_by_slug(
    slug: str,
    service: UserServiceDep,
) -> DegaUserDTO:
    """Get a user by its slug."""
    logger.debug("REST request to get DegaUser by slug : %s", slug)
    return DegaUserDTO.from_entity(await service.get_by_slug(slug))
