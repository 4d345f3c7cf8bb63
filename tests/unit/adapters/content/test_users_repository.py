"""Tests for the users repository."""

from __future__ import annotations

from unittest.mock import MagicMock

import asyncpg
import pytest

from dega.adapters.content import DegaUsersRepository, OrganizationsRepository
from dega.core.domain_types import DegaUser
from dega.core.exceptions import SlugConflictError
from dega.core.memberships import MembershipChange
from dega.core.pagination import PageRequest
from tests.fixtures.domain_objects import user_row


@pytest.fixture
def repository(mock_app_db: MagicMock) -> DegaUsersRepository:
    """Create repository with mock database."""
    return DegaUsersRepository(mock_app_db)


class TestCreate:
    """Tests for create method."""

    async def test_writes_user_and_memberships_in_transaction(
        self, repository: DegaUsersRepository, mock_conn: MagicMock
    ) -> None:
        """The user row and one row per organization share one transaction."""
        mock_conn.fetchrow.return_value = user_row(id="user-9")
        user = DegaUser(
            display_name="Jane Doe",
            email="jane@example.com",
            slug="JaneDoe",
            organization_ids={"org-2", "org-1"},
        )

        created = await repository.create(user)

        assert created.organization_ids == {"org-1", "org-2"}
        first, second = mock_conn.execute.await_args_list
        assert "INSERT INTO dega_user_organizations" in first.args[0]
        assert first.args[2] == "org-1"
        assert second.args[2] == "org-2"
        assert first.args[1] == second.args[1] == mock_conn.fetchrow.await_args.args[1]

    async def test_skips_memberships_without_organizations(
        self, repository: DegaUsersRepository, mock_conn: MagicMock
    ) -> None:
        """No membership statements run for a user without organizations."""
        mock_conn.fetchrow.return_value = user_row()

        await repository.create(DegaUser(display_name="Jane Doe", email="j@x.io", slug="JaneDoe"))

        mock_conn.execute.assert_not_awaited()

    async def test_new_users_are_active(
        self, repository: DegaUsersRepository, mock_conn: MagicMock
    ) -> None:
        """is_active is written as true when the caller leaves it out."""
        mock_conn.fetchrow.return_value = user_row()

        await repository.create(DegaUser(display_name="Jane Doe", email="j@x.io", slug="JaneDoe"))

        query, *params = mock_conn.fetchrow.await_args.args
        columns = query.split("(", 1)[1].split(")", 1)[0].split(", ")
        assert params[columns.index("is_active")] is True

    async def test_maps_unique_violation(
        self, repository: DegaUsersRepository, mock_conn: MagicMock
    ) -> None:
        """Duplicate slugs surface as SlugConflictError."""
        mock_conn.fetchrow.side_effect = asyncpg.UniqueViolationError("duplicate")

        with pytest.raises(SlugConflictError):
            await repository.create(DegaUser(display_name="Jane", email="j@x.io", slug="Jane"))


class TestReplace:
    """Tests for replace method."""

    async def test_missing_user_returns_none(
        self, repository: DegaUsersRepository, mock_conn: MagicMock
    ) -> None:
        """Memberships are not touched for an unknown user."""
        user = DegaUser(id="missing", display_name="Jane", email="j@x.io", slug="Jane")

        assert await repository.replace(user) is None
        mock_conn.execute.assert_not_awaited()

    async def test_writes_only_the_given_change(
        self, repository: DegaUsersRepository, mock_conn: MagicMock
    ) -> None:
        """One insert per added and one delete per removed organization."""
        mock_conn.fetchrow.return_value = user_row()
        user = DegaUser(
            id="user-1",
            display_name="Jane",
            email="j@x.io",
            slug="Jane",
            organization_ids={"org-2", "org-3"},
        )
        change = MembershipChange(added=frozenset({"org-3"}), removed=frozenset({"org-1"}))

        updated = await repository.replace(user, change)

        assert updated is not None
        assert updated.organization_ids == {"org-2", "org-3"}
        insert_call, delete_call = mock_conn.execute.await_args_list
        assert "INSERT INTO dega_user_organizations" in insert_call.args[0]
        assert insert_call.args[1:] == ("user-1", "org-3")
        assert delete_call.args[0].startswith("DELETE FROM dega_user_organizations")
        assert delete_call.args[1:] == ("user-1", "org-1")
        mock_conn.fetch.assert_not_awaited()

    async def test_diffs_stored_memberships_without_change(
        self, repository: DegaUsersRepository, mock_conn: MagicMock
    ) -> None:
        """Without a change the stored rows are read in the transaction and diffed."""
        mock_conn.fetchrow.return_value = user_row()
        mock_conn.fetch.return_value = [
            {"user_id": "user-1", "organization_id": "org-1"},
            {"user_id": "user-1", "organization_id": "org-2"},
        ]
        user = DegaUser(
            id="user-1",
            display_name="Jane",
            email="j@x.io",
            slug="Jane",
            organization_ids={"org-2"},
        )

        await repository.replace(user)

        (delete_call,) = mock_conn.execute.await_args_list
        assert delete_call.args[1:] == ("user-1", "org-1")


class TestHydration:
    """Tests for membership loading."""

    async def test_get_by_id_attaches_organizations(
        self, repository: DegaUsersRepository, mock_app_db: MagicMock
    ) -> None:
        """Users come back with their organization ids."""
        mock_app_db.fetch_one.return_value = user_row()
        mock_app_db.fetch_all.return_value = [
            {"user_id": "user-1", "organization_id": "org-1"},
            {"user_id": "user-1", "organization_id": "org-2"},
        ]

        user = await repository.get_by_id("user-1")

        assert user is not None
        assert user.organization_ids == {"org-1", "org-2"}

    async def test_list_loads_memberships_in_one_query(
        self, repository: DegaUsersRepository, mock_app_db: MagicMock
    ) -> None:
        """A page of users triggers a single membership query."""
        mock_app_db.fetch_val.return_value = 2
        mock_app_db.fetch_all.side_effect = [
            [user_row(id="user-1", slug="a"), user_row(id="user-2", slug="b")],
            [{"user_id": "user-2", "organization_id": "org-1"}],
        ]

        page = await repository.list(PageRequest())

        assert [u.organization_ids for u in page.content] == [set(), {"org-1"}]
        assert mock_app_db.fetch_all.await_args.args[1] == ["user-1", "user-2"]


class TestMemberships:
    """Tests for membership methods."""

    async def test_get_memberships(
        self, repository: DegaUsersRepository, mock_app_db: MagicMock
    ) -> None:
        """Returns (user, organization) pairs."""
        mock_app_db.fetch_all.return_value = [{"user_id": "user-1", "organization_id": "org-1"}]

        assert await repository.get_memberships("user-1") == {("user-1", "org-1")}

    async def test_add_membership_is_idempotent_in_sql(
        self, repository: DegaUsersRepository, mock_app_db: MagicMock
    ) -> None:
        """Duplicate inserts are ignored by the database."""
        await repository.add_membership("user-1", "org-1")

        query, *params = mock_app_db.execute.await_args.args
        assert "ON CONFLICT (user_id, organization_id) DO NOTHING" in query
        assert params == ["user-1", "org-1"]

    async def test_remove_membership(
        self, repository: DegaUsersRepository, mock_app_db: MagicMock
    ) -> None:
        """Deletes the single pair."""
        await repository.remove_membership("user-1", "org-1")

        query, *params = mock_app_db.execute.await_args.args
        assert query.startswith("DELETE FROM dega_user_organizations")
        assert params == ["user-1", "org-1"]


class TestOrganizationsForUser:
    """Tests for OrganizationsRepository.list_for_user."""

    async def test_filters_through_membership_table(self, mock_app_db: MagicMock) -> None:
        """Only organizations linked to the user are listed."""
        repository = OrganizationsRepository(mock_app_db)

        await repository.list_for_user("user-1", PageRequest())

        query, *params = mock_app_db.fetch_all.await_args.args
        assert "FROM dega_user_organizations WHERE user_id = $1" in query
        assert params == ["user-1", 20, 0]
