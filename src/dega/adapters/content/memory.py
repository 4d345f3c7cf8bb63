"""In-memory content repositories.

These implement the same protocols as the asyncpg repositories and are
useful for:
- Unit and API testing without a real database
- Local development without database setup

Records are copied on the way in and out, so callers never share state
with the store.
"""

from __future__ import annotations

import copy
import dataclasses
from datetime import datetime
from typing import Any, Generic, TypeVar

from dega.core.domain_types import Category, DegaUser, Media, Organization
from dega.core.exceptions import SlugConflictError
from dega.core.memberships import MembershipChange, OrganizationMemberships
from dega.core.pagination import Direction, Page, PageRequest, validate_sort
from dega.models.base import new_id

T = TypeVar("T")


def _sort_key(value: Any) -> tuple[bool, Any]:
    # None sorts last in ascending order
    if isinstance(value, datetime):
        return (value is None, value.timestamp())
    return (value is None, value if value is not None else "")


class InMemoryContentRepository(Generic[T]):
    """Dictionary-backed repository for one entity type."""

    def __init__(
        self,
        entity_type: type,
        entity_name: str,
        search_fields: tuple[str, ...],
        scoped: bool = True,
    ) -> None:
        """Initialize an empty repository.

        Args:
            entity_type: Entity dataclass; its scalar fields are sortable.
            entity_name: Entity name used in errors.
            search_fields: Fields matched by search().
            scoped: Whether slugs and listings are scoped by client_id.
        """
        self.entity_name = entity_name
        self.fields = tuple(
            f.name for f in dataclasses.fields(entity_type) if f.name != "organization_ids"
        )
        self.search_fields = search_fields
        self.scoped = scoped
        self._records: dict[str, T] = {}

    async def get_by_id(self, entity_id: str) -> T | None:
        record = self._records.get(entity_id)
        return self._out(record) if record is not None else None

    async def get_by_slug(self, slug: str, client_id: str | None = None) -> T | None:
        for record in self._records.values():
            if getattr(record, "slug") == slug and self._in_scope(record, client_id):
                return self._out(record)
        return None

    async def slug_exists(self, slug: str, client_id: str | None = None) -> bool:
        return await self.get_by_slug(slug, client_id) is not None

    async def list(self, request: PageRequest, client_id: str | None = None) -> Page[T]:
        matches = [r for r in self._records.values() if self._in_scope(r, client_id)]
        return self._page(matches, request)

    async def search(
        self, query: str, request: PageRequest, client_id: str | None = None
    ) -> Page[T]:
        needle = query.lower()
        matches = [
            r
            for r in self._records.values()
            if self._in_scope(r, client_id)
            and any(needle in str(getattr(r, f) or "").lower() for f in self.search_fields)
        ]
        return self._page(matches, request)

    async def create(self, entity: T) -> T:
        self._check_slug(entity, exclude_id=None)
        record = copy.deepcopy(entity)
        setattr(record, "id", new_id())
        self._records[getattr(record, "id")] = record
        return self._out(record)

    async def replace(self, entity: T) -> T | None:
        entity_id = getattr(entity, "id")
        existing = self._records.get(entity_id)
        if existing is None:
            return None
        self._check_slug(entity, exclude_id=entity_id)
        record = copy.deepcopy(entity)
        setattr(record, "created_at", getattr(existing, "created_at"))
        self._records[entity_id] = record
        return self._out(record)

    async def delete(self, entity_id: str) -> bool:
        return self._records.pop(entity_id, None) is not None

    def _in_scope(self, record: T, client_id: str | None) -> bool:
        return not self.scoped or getattr(record, "client_id") == client_id

    def _check_slug(self, entity: T, exclude_id: str | None) -> None:
        slug = getattr(entity, "slug")
        client_id = getattr(entity, "client_id")
        for record_id, record in self._records.items():
            if record_id == exclude_id:
                continue
            same_scope = not self.scoped or getattr(record, "client_id") == client_id
            if same_scope and getattr(record, "slug") == slug:
                raise SlugConflictError(
                    f"Slug '{slug}' is already in use", entity_name=self.entity_name
                )

    def _page(self, records: list[T], request: PageRequest) -> Page[T]:
        validate_sort(request, self.fields, self.entity_name)
        ordered = sorted(records, key=lambda r: _sort_key(getattr(r, "id")))
        if request.sort:
            for order in reversed(request.sort):
                ordered.sort(
                    key=lambda r, f=order.field: _sort_key(getattr(r, f)),
                    reverse=order.direction is Direction.DESC,
                )
        else:
            ordered.sort(key=lambda r: _sort_key(getattr(r, "created_at")), reverse=True)
        window = ordered[request.offset : request.offset + request.size]
        return Page(content=[self._out(r) for r in window], request=request, total=len(records))

    def _out(self, record: T) -> T:
        return copy.deepcopy(record)


class InMemoryOrganizationsRepository(InMemoryContentRepository[Organization]):
    """Organizations backed by a shared membership graph."""

    def __init__(
        self,
        memberships: OrganizationMemberships,
        users: InMemoryDegaUsersRepository | None = None,
    ) -> None:
        """Initialize with the membership graph shared with the users store."""
        super().__init__(
            entity_type=Organization,
            entity_name="coreOrganization",
            search_fields=("name", "description", "site_title", "tag_line", "email", "slug"),
            scoped=False,
        )
        self.memberships = memberships
        self.users = users

    async def list_for_user(self, user_id: str, request: PageRequest) -> Page[Organization]:
        organization_ids = self.memberships.organizations_of(user_id)
        matches = [r for r in self._records.values() if r.id in organization_ids]
        return self._page(matches, request)

    async def delete(self, entity_id: str) -> bool:
        removed = await super().delete(entity_id)
        self.memberships.remove_organization_everywhere(entity_id)
        if self.users is not None:
            self.users.clear_default_organization(entity_id)
        return removed


class InMemoryDegaUsersRepository(InMemoryContentRepository[DegaUser]):
    """Users whose memberships live in a shared graph."""

    def __init__(self, memberships: OrganizationMemberships) -> None:
        """Initialize with the membership graph shared with the organizations store."""
        super().__init__(
            entity_type=DegaUser,
            entity_name="coreDegaUser",
            search_fields=("display_name", "first_name", "last_name", "email", "slug"),
            scoped=False,
        )
        self.memberships = memberships

    async def create(self, entity: DegaUser) -> DegaUser:
        user = await super().create(entity)
        self.memberships.set_organizations(user.id or "", entity.organization_ids)
        return self._out(self._records[user.id or ""])

    async def replace(
        self, entity: DegaUser, change: MembershipChange | None = None
    ) -> DegaUser | None:
        user = await super().replace(entity)
        if user is None:
            return None
        user_id = user.id or ""
        if change is None:
            self.memberships.set_organizations(user_id, entity.organization_ids)
        else:
            for organization_id in change.added:
                self.memberships.add_organization(user_id, organization_id)
            for organization_id in change.removed:
                self.memberships.remove_organization(user_id, organization_id)
        return self._out(self._records[user_id])

    async def delete(self, entity_id: str) -> bool:
        self.memberships.remove_user(entity_id)
        return await super().delete(entity_id)

    async def get_memberships(self, user_id: str) -> set[tuple[str, str]]:
        return {(user_id, org_id) for org_id in self.memberships.organizations_of(user_id)}

    async def add_membership(self, user_id: str, organization_id: str) -> None:
        self.memberships.add_organization(user_id, organization_id)

    async def remove_membership(self, user_id: str, organization_id: str) -> None:
        self.memberships.remove_organization(user_id, organization_id)

    def clear_default_organization(self, organization_id: str) -> None:
        """Unset the default organization wherever it points to the given one."""
        for record in self._records.values():
            if record.organization_default_id == organization_id:
                record.organization_default_id = None

    def _out(self, record: DegaUser) -> DegaUser:
        user = copy.deepcopy(record)
        user.organization_ids = set(self.memberships.organizations_of(record.id or ""))
        return user


class InMemoryStore:
    """All four content repositories wired to one membership graph."""

    def __init__(self) -> None:
        """Create empty repositories."""
        self.memberships = OrganizationMemberships()
        self.categories: InMemoryContentRepository[Category] = InMemoryContentRepository(
            entity_type=Category,
            entity_name="coreCategory",
            search_fields=("name", "description", "slug"),
        )
        self.media: InMemoryContentRepository[Media] = InMemoryContentRepository(
            entity_type=Media,
            entity_name="coreMedia",
            search_fields=("name", "title", "caption", "alt_text", "description", "slug"),
        )
        self.users = InMemoryDegaUsersRepository(self.memberships)
        self.organizations = InMemoryOrganizationsRepository(self.memberships, users=self.users)
