"""Organization service."""

from __future__ import annotations

from dega.core.domain_types import Organization
from dega.core.interfaces import OrganizationRepository
from dega.core.pagination import Page, PageRequest
from dega.core.slug import DEFAULT_MAX_ATTEMPTS
from dega.services.content import ContentService


class OrganizationService(ContentService[Organization]):
    """Organizations are global. Each one is a client whose id is its slug."""

    entity_name = "coreOrganization"
    scoped = False

    def __init__(
        self,
        repository: OrganizationRepository,
        max_slug_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        """Initialize the service."""
        super().__init__(repository, max_slug_attempts)
        self.organizations = repository

    async def list_for_user(self, user_id: str, request: PageRequest) -> Page[Organization]:
        """Organizations the given user belongs to."""
        return await self.organizations.list_for_user(user_id, request)

    def _before_create(self, entity: Organization) -> None:
        entity.client_id = entity.slug
