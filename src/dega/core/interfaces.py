"""Protocol definitions for the persistence and search gateway.

The services depend only on these protocols. The asyncpg repositories in
dega.adapters.content implement them against PostgreSQL; the in-memory
repositories implement them for tests and local development.

Scoping: ``client_id`` is passed explicitly. Tenant-scoped entities
(categories, media) match the given client exactly, so a None client only
sees records without a client. Global entities (organizations, users)
ignore it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from .domain_types import DegaUser, Organization
    from .memberships import MembershipChange
    from .pagination import Page, PageRequest

T = TypeVar("T")


@runtime_checkable
class ContentRepository(Protocol[T]):
    """Find, page, search and write one entity type."""

    async def get_by_id(self, entity_id: str) -> T | None:
        """Fetch by id, or None."""
        ...

    async def get_by_slug(self, slug: str, client_id: str | None = None) -> T | None:
        """Fetch by slug within the client scope, or None."""
        ...

    async def slug_exists(self, slug: str, client_id: str | None = None) -> bool:
        """Whether the slug is taken within the client scope."""
        ...

    async def list(self, request: PageRequest, client_id: str | None = None) -> Page[T]:
        """Return one page of entities."""
        ...

    async def search(
        self, query: str, request: PageRequest, client_id: str | None = None
    ) -> Page[T]:
        """Return one page of entities matching a free-text query."""
        ...

    async def create(self, entity: T) -> T:
        """Persist a new entity and return it with its assigned id.

        Raises:
            SlugConflictError: If the slug was taken concurrently.
        """
        ...

    async def replace(self, entity: T) -> T | None:
        """Overwrite the stored record with the same id, or None if absent.

        Raises:
            SlugConflictError: If the new slug is already taken.
        """
        ...

    async def delete(self, entity_id: str) -> bool:
        """Delete by id. Returns whether a record was removed."""
        ...


@runtime_checkable
class OrganizationRepository(ContentRepository["Organization"], Protocol):
    """Organization gateway with membership lookups."""

    async def list_for_user(self, user_id: str, request: PageRequest) -> Page[Organization]:
        """Organizations the user belongs to."""
        ...


@runtime_checkable
class DegaUserRepository(ContentRepository["DegaUser"], Protocol):
    """User gateway with membership persistence."""

    async def replace(
        self, entity: DegaUser, change: MembershipChange | None = None
    ) -> DegaUser | None:
        """Overwrite the user and apply the membership change in one unit.

        Without a change, the stored memberships are diffed against
        ``entity.organization_ids``.
        """
        ...

    async def get_memberships(self, user_id: str) -> set[tuple[str, str]]:
        """(user_id, organization_id) pairs for one user."""
        ...

    async def add_membership(self, user_id: str, organization_id: str) -> None:
        """Link a user to an organization. Idempotent."""
        ...

    async def remove_membership(self, user_id: str, organization_id: str) -> None:
        """Unlink a user from an organization. No-op if not linked."""
        ...
