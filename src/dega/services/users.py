"""DegaUser service: profiles and organization memberships."""

from __future__ import annotations

import structlog

from dega.core.domain_types import DegaUser
from dega.core.exceptions import BadRequestAlertError, EntityNotFoundError
from dega.core.interfaces import DegaUserRepository, OrganizationRepository
from dega.core.memberships import OrganizationMemberships
from dega.core.slug import DEFAULT_MAX_ATTEMPTS
from dega.services.content import ContentService

logger = structlog.get_logger()


class DegaUserService(ContentService[DegaUser]):
    """Users are global; slugs derive from the display name."""

    entity_name = "coreDegaUser"
    slug_source = "display_name"
    scoped = False

    def __init__(
        self,
        repository: DegaUserRepository,
        organizations: OrganizationRepository,
        max_slug_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        """Initialize the service.

        Args:
            repository: User gateway.
            organizations: Organization gateway, used to check references.
            max_slug_attempts: Bound on slug probes per creation.
        """
        super().__init__(repository, max_slug_attempts)
        self.users = repository
        self.organizations = organizations

    async def create(self, entity: DegaUser, client_id: str | None = None) -> DegaUser:
        """Create a user after checking its organization references."""
        await self._check_organizations(entity)
        return await super().create(entity, client_id)

    async def update(self, entity: DegaUser, client_id: str | None = None) -> DegaUser:
        """Replace a user and its full membership set."""
        await self._check_organizations(entity)
        return await super().update(entity, client_id)

    async def _replace(self, entity: DegaUser) -> DegaUser | None:
        """Write the user together with only the memberships that changed."""
        user_id = entity.id or ""
        graph = OrganizationMemberships.from_pairs(await self.users.get_memberships(user_id))
        change = graph.set_organizations(user_id, entity.organization_ids)
        if not change.is_empty:
            logger.info(
                "user_memberships_changed",
                user_id=user_id,
                added=sorted(change.added),
                removed=sorted(change.removed),
            )
        return await self.users.replace(entity, change)

    async def add_organization(self, user_id: str, organization_id: str) -> DegaUser:
        """Make the user a member of the organization. Idempotent.

        Raises:
            EntityNotFoundError: If the user or the organization is missing.
        """
        await self.get(user_id)
        await self._require_organization(organization_id)
        graph = OrganizationMemberships.from_pairs(await self.users.get_memberships(user_id))
        if not graph.is_member(user_id, organization_id):
            graph.add_organization(user_id, organization_id)
            await self.users.add_membership(user_id, organization_id)
            logger.info("user_organization_added", user_id=user_id, organization_id=organization_id)
        return await self.get(user_id)

    async def remove_organization(self, user_id: str, organization_id: str) -> DegaUser:
        """Drop the membership. No-op when the user is not a member.

        Raises:
            EntityNotFoundError: If the user is missing.
        """
        await self.get(user_id)
        graph = OrganizationMemberships.from_pairs(await self.users.get_memberships(user_id))
        if graph.is_member(user_id, organization_id):
            graph.remove_organization(user_id, organization_id)
            await self.users.remove_membership(user_id, organization_id)
            logger.info(
                "user_organization_removed", user_id=user_id, organization_id=organization_id
            )
        return await self.get(user_id)

    async def _check_organizations(self, entity: DegaUser) -> None:
        referenced = set(entity.organization_ids)
        if entity.organization_default_id:
            referenced.add(entity.organization_default_id)
        for organization_id in sorted(referenced):
            if await self.organizations.get_by_id(organization_id) is None:
                raise BadRequestAlertError(
                    f"Unknown organization {organization_id}",
                    entity_name=self.entity_name,
                    error_key="organizationnotfound",
                )

    async def _require_organization(self, organization_id: str) -> None:
        if await self.organizations.get_by_id(organization_id) is None:
            raise EntityNotFoundError(
                f"coreOrganization {organization_id} not found",
                entity_name="coreOrganization",
            )
