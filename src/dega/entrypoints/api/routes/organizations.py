"""Organization API routes."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, ConfigDict

from dega.core.domain_types import Organization
from dega.entrypoints.api.deps import get_organization_service
from dega.entrypoints.api.routes.common import (
    PageDep,
    SettingsDep,
    deleted_response,
    set_created_headers,
    set_page_headers,
    set_search_headers,
    set_updated_headers,
)
from dega.services import OrganizationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["organizations"])

ENTITY_NAME = "coreOrganization"

OrganizationServiceDep = Annotated[OrganizationService, Depends(get_organization_service)]


class OrganizationDTO(BaseModel):
    """Organization request and response body."""

    model_config = ConfigDict(from_attributes=True)

    id: str | None = None
    name: str
    description: str | None = None
    email: str | None = None
    phone: str | None = None
    site_title: str | None = None
    tag_line: str | None = None
    site_address: str | None = None
    logo_url: str | None = None
    fav_icon_url: str | None = None
    facebook_url: str | None = None
    twitter_url: str | None = None
    slug: str | None = None
    client_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_entity(self) -> Organization:
        """Convert to the domain dataclass."""
        return Organization(**self.model_dump())

    @classmethod
    def from_entity(cls, organization: Organization) -> OrganizationDTO:
        """Build from the domain dataclass."""
        return cls.model_validate(asdict(organization))


@router.post(
    "/organizations", response_model=OrganizationDTO, status_code=status.HTTP_201_CREATED
)
async def create_organization(
    body: OrganizationDTO,
    request: Request,
    response: Response,
    service: OrganizationServiceDep,
    settings: SettingsDep,
) -> OrganizationDTO:
    """Create an organization.

    The generated slug doubles as the organization's client id.
    """
    logger.debug("REST request to save Organization : %s", body)
    created = await service.create(body.to_entity())
    set_created_headers(
        response, settings, ENTITY_NAME, f"{request.url.path}/{created.id}", created.id or ""
    )
    return OrganizationDTO.from_entity(created)


@router.put("/organizations", response_model=OrganizationDTO)
async def update_organization(
    body: OrganizationDTO,
    response: Response,
    service: OrganizationServiceDep,
    settings: SettingsDep,
) -> OrganizationDTO:
    """Replace an existing organization."""
    logger.debug("REST request to update Organization : %s", body)
    updated = await service.update(body.to_entity())
    set_updated_headers(response, settings, ENTITY_NAME, updated.id or "")
    return OrganizationDTO.from_entity(updated)


@router.get("/organizations", response_model=list[OrganizationDTO])
async def list_organizations(
    request: Request,
    response: Response,
    page_request: PageDep,
    service: OrganizationServiceDep,
    user_id: str | None = None,
) -> list[OrganizationDTO]:
    """Get a page of organizations, optionally only those a user belongs to."""
    if user_id:
        logger.debug("REST request to get Organizations of user : %s", user_id)
        page = await service.list_for_user(user_id, page_request)
    else:
        logger.debug("REST request to get a page of Organizations")
        page = await service.list(page_request)
    set_page_headers(response, request, page)
    return [OrganizationDTO.from_entity(o) for o in page.content]


@router.get("/organizations/{organization_id}", response_model=OrganizationDTO)
async def get_organization(
    organization_id: str,
    service: OrganizationServiceDep,
) -> OrganizationDTO:
    """Get an organization by id."""
    logger.debug("REST request to get Organization : %s", organization_id)
    return OrganizationDTO.from_entity(await service.get(organization_id))


@router.delete("/organizations/{organization_id}", response_class=Response)
async def delete_organization(
    organization_id: str,
    service: OrganizationServiceDep,
    settings: SettingsDep,
) -> Response:
    """Delete an organization and its memberships."""
    logger.debug("REST request to delete Organization : %s", organization_id)
    await service.delete(organization_id)
    return deleted_response(settings, ENTITY_NAME, organization_id)


@router.get("/_search/organizations", response_model=list[OrganizationDTO])
async def search_organizations(
    query: str,
    request: Request,
    response: Response,
    page_request: PageDep,
    service: OrganizationServiceDep,
) -> list[OrganizationDTO]:
    """Search organizations."""
    logger.debug("REST request to search for a page of Organizations for query %s", query)
    page = await service.search(query, page_request)
    set_search_headers(response, request, query, page)
    return [OrganizationDTO.from_entity(o) for o in page.content]


@router.get("/organizationbyslug/{slug}", response_model=OrganizationDTO)
async def get_organization_by_slug(
    slug: str,
    service: OrganizationServiceDep,
) -> OrganizationDTO:
    """Get an organization by its slug."""
    logger.debug("REST request to get Organization by slug : %s", slug)
    return OrganizationDTO.from_entity(await service.get_by_slug(slug))
