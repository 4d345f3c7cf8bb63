"""Unit tests for the content table definitions."""

from __future__ import annotations

from dega.models import Category, DegaUser, Media, Organization, dega_user_organizations, metadata


def index_named(table, name):  # type: ignore[no-untyped-def]
    """Find an index by name."""
    return next(ix for ix in table.indexes if ix.name == name)


class TestTables:
    """Tests for the registered tables."""

    def test_all_tables_registered(self) -> None:
        """Every content table is part of the metadata."""
        assert set(metadata.tables) == {
            "categories",
            "organizations",
            "media",
            "dega_users",
            "dega_user_organizations",
        }

    def test_dependency_order(self) -> None:
        """Referenced tables come before the tables referring to them."""
        order = [t.name for t in metadata.sorted_tables]

        assert order.index("organizations") < order.index("dega_users")
        assert order.index("dega_users") < order.index("dega_user_organizations")


class TestSlugUniqueness:
    """Tests for slug indexes."""

    def test_scoped_tables_unique_per_client(self) -> None:
        """Categories and media slugs are unique per client."""
        for model in (Category, Media):
            table = model.__table__
            index = index_named(table, f"uq_{table.name}_client_id_slug")
            assert index.unique
            assert [c.name for c in index.columns] == ["client_id", "slug"]
            assert index.dialect_options["postgresql"]["nulls_not_distinct"] is True

    def test_global_tables_unique_slug(self) -> None:
        """Organization and user slugs are unique globally."""
        for model in (Organization, DegaUser):
            table = model.__table__
            index = index_named(table, f"uq_{table.name}_slug")
            assert index.unique
            assert [c.name for c in index.columns] == ["slug"]


class TestMemberships:
    """Tests for the membership join table."""

    def test_composite_primary_key(self) -> None:
        """One row per (user, organization) pair."""
        assert [c.name for c in dega_user_organizations.primary_key.columns] == [
            "user_id",
            "organization_id",
        ]

    def test_cascades_on_delete(self) -> None:
        """Membership rows go away with either side."""
        for fk in dega_user_organizations.foreign_keys:
            assert fk.ondelete == "CASCADE"

    def test_default_organization_is_set_null(self) -> None:
        """Deleting an organization clears default references."""
        column = DegaUser.__table__.c.organization_default_id
        (fk,) = column.foreign_keys
        assert fk.ondelete == "SET NULL"


class TestDefaults:
    """Tests for column defaults applied by the database."""

    def test_users_are_active_by_default(self) -> None:
        """Inserts that pass no value still store an active user."""
        column = DegaUser.__table__.c.is_active

        assert column.nullable is False
        assert column.server_default is not None
