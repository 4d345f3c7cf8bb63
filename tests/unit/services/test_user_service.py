"""Tests for the user service and its membership operations."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from dega.adapters.content import InMemoryStore
from dega.core.domain_types import DegaUser, Organization
from dega.core.exceptions import BadRequestAlertError, EntityNotFoundError
from dega.core.memberships import MembershipChange
from dega.services import DegaUserService


@pytest.fixture
def service(store: InMemoryStore) -> DegaUserService:
    """Create user service over in-memory repositories."""
    return DegaUserService(store.users, store.organizations)


async def make_org(store: InMemoryStore, slug: str) -> Organization:
    """Persist an organization directly."""
    return await store.organizations.create(Organization(name=slug, slug=slug, client_id=slug))


class TestCreate:
    """Tests for create."""

    async def test_slug_from_display_name(self, service: DegaUserService) -> None:
        """Users get a global slug from their display name."""
        first = await service.create(DegaUser(display_name="Jane Doe", email="a@x.io"), "factly")
        second = await service.create(DegaUser(display_name="Jane-Doe", email="b@x.io"), "other")

        assert first.slug == "JaneDoe"
        assert second.slug == "JaneDoe1"
        assert first.client_id is None

    async def test_saves_memberships(
        self, service: DegaUserService, store: InMemoryStore
    ) -> None:
        """Organizations given on create are linked."""
        org = await make_org(store, "factly")

        user = await service.create(
            DegaUser(display_name="Jane", email="j@x.io", organization_ids={org.id or ""})
        )

        assert user.organization_ids == {org.id}
        assert store.memberships.users_of(org.id or "") == {user.id}

    async def test_rejects_unknown_organization(self, service: DegaUserService) -> None:
        """References to missing organizations are a bad request."""
        with pytest.raises(BadRequestAlertError) as exc_info:
            await service.create(
                DegaUser(display_name="Jane", email="j@x.io", organization_default_id="nope")
            )

        assert exc_info.value.error_key == "organizationnotfound"


class TestUpdate:
    """Tests for update."""

    async def test_replaces_memberships(
        self, service: DegaUserService, store: InMemoryStore
    ) -> None:
        """The saved set becomes the full membership set."""
        first = await make_org(store, "first")
        second = await make_org(store, "second")
        user = await service.create(
            DegaUser(display_name="Jane", email="j@x.io", organization_ids={first.id or ""})
        )

        user.organization_ids = {second.id or ""}
        updated = await service.update(user)

        assert updated.organization_ids == {second.id}
        assert store.memberships.users_of(first.id or "") == frozenset()

    async def test_passes_only_the_membership_delta(self) -> None:
        """The repository receives the organizations added and removed, not the full set."""
        users = AsyncMock()
        users.get_by_id.return_value = DegaUser(
            id="user-1",
            display_name="Jane",
            email="j@x.io",
            slug="Jane",
            organization_ids={"org-1", "org-2"},
        )
        users.get_memberships.return_value = {("user-1", "org-1"), ("user-1", "org-2")}
        users.replace.return_value = DegaUser(id="user-1", display_name="Jane", email="j@x.io")
        organizations = AsyncMock()
        organizations.get_by_id.return_value = Organization(name="org")
        service = DegaUserService(users, organizations)

        await service.update(
            DegaUser(
                id="user-1",
                display_name="Jane",
                email="j@x.io",
                organization_ids={"org-2", "org-3"},
            )
        )

        replaced, change = users.replace.await_args.args
        assert replaced.slug == "Jane"
        assert change == MembershipChange(added=frozenset({"org-3"}), removed=frozenset({"org-1"}))
        users.add_membership.assert_not_awaited()
        users.remove_membership.assert_not_awaited()


class TestMemberships:
    """Tests for add_organization and remove_organization."""

    async def test_add_is_idempotent(
        self, service: DegaUserService, store: InMemoryStore
    ) -> None:
        """Adding twice leaves one membership."""
        org = await make_org(store, "factly")
        user = await service.create(DegaUser(display_name="Jane", email="j@x.io"))

        await service.add_organization(user.id or "", org.id or "")
        again = await service.add_organization(user.id or "", org.id or "")

        assert again.organization_ids == {org.id}
        assert store.memberships.pairs() == {(user.id, org.id)}

    async def test_add_then_remove_restores(
        self, service: DegaUserService, store: InMemoryStore
    ) -> None:
        """Removing the added organization restores the user."""
        org = await make_org(store, "factly")
        user = await service.create(DegaUser(display_name="Jane", email="j@x.io"))

        await service.add_organization(user.id or "", org.id or "")
        restored = await service.remove_organization(user.id or "", org.id or "")

        assert restored.organization_ids == set()
        assert store.memberships.pairs() == set()

    async def test_remove_non_member_is_noop(
        self, service: DegaUserService, store: InMemoryStore
    ) -> None:
        """Removing an organization the user is not in changes nothing."""
        user = await service.create(DegaUser(display_name="Jane", email="j@x.io"))

        result = await service.remove_organization(user.id or "", "not-a-member")

        assert result.organization_ids == set()

    async def test_add_requires_both_sides(
        self, service: DegaUserService, store: InMemoryStore
    ) -> None:
        """Unknown users or organizations are not found."""
        org = await make_org(store, "factly")
        user = await service.create(DegaUser(display_name="Jane", email="j@x.io"))

        with pytest.raises(EntityNotFoundError):
            await service.add_organization("missing", org.id or "")
        with pytest.raises(EntityNotFoundError) as exc_info:
            await service.add_organization(user.id or "", "missing")
        assert exc_info.value.entity_name == "coreOrganization"
