"""DegaUsers repository."""

from collections import defaultdict
from typing import Any

import asyncpg
import structlog

from dega.adapters.content.base import PostgresContentRepository
from dega.core.domain_types import DegaUser
from dega.core.memberships import MembershipChange, OrganizationMemberships
from dega.models.base import new_id

logger = structlog.get_logger()


class DegaUsersRepository(PostgresContentRepository[DegaUser]):
    """Repository for user profiles and their organization memberships.

    The membership set of a user is stored in ``dega_user_organizations``
    and written together with the user row in one transaction.
    """

    table = "dega_users"
    entity_type = DegaUser
    entity_name = "coreDegaUser"
    scoped = False
    columns = (
        "id",
        "first_name",
        "last_name",
        "display_name",
        "email",
        "website",
        "facebook_url",
        "twitter_url",
        "instagram_url",
        "linkedin_url",
        "github_url",
        "profile_picture",
        "description",
        "is_active",
        "slug",
        "organization_default_id",
        "client_id",
        "created_at",
        "updated_at",
    )
    search_columns = ("display_name", "first_name", "last_name", "email", "slug")

    async def create(self, entity: DegaUser) -> DegaUser:
        """Insert a user and its memberships."""
        entity_id = new_id()
        columns = ("id",) + tuple(c for c in self.columns if c != "id")
        placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
        params = [entity_id] + [self._param(entity, c) for c in columns[1:]]
        query = f"""
            INSERT INTO dega_users ({', '.join(columns)})
            VALUES ({placeholders})
            RETURNING {', '.join(self.columns)}
        """
        change = OrganizationMemberships().set_organizations(entity_id, entity.organization_ids)
        try:
            async with self._db.transaction() as conn:
                row = await conn.fetchrow(query, *params)
                await self._apply_membership_change(conn, entity_id, change)
        except asyncpg.UniqueViolationError as exc:
            raise self._slug_conflict(entity) from exc
        except asyncpg.ForeignKeyViolationError as exc:
            raise self._missing_reference() from exc

        user = self._row_to_entity(dict(row))
        user.organization_ids = set(entity.organization_ids)
        logger.info(
            "dega_user_created", user_id=entity_id, organizations=len(user.organization_ids)
        )
        return user

    async def replace(
        self, entity: DegaUser, change: MembershipChange | None = None
    ) -> DegaUser | None:
        """Overwrite a user row and apply a membership change.

        Without a change, the stored memberships are read inside the
        transaction and diffed against ``entity.organization_ids``.
        """
        query, params = self._replace_statement(entity)
        user_id = entity.id or ""
        try:
            async with self._db.transaction() as conn:
                row = await conn.fetchrow(query, *params)
                if not row:
                    return None
                if change is None:
                    rows = await conn.fetch(
                        "SELECT user_id, organization_id FROM dega_user_organizations "
                        "WHERE user_id = $1",
                        user_id,
                    )
                    graph = OrganizationMemberships.from_pairs(
                        (r["user_id"], r["organization_id"]) for r in rows
                    )
                    change = graph.set_organizations(user_id, entity.organization_ids)
                await self._apply_membership_change(conn, user_id, change)
        except asyncpg.UniqueViolationError as exc:
            raise self._slug_conflict(entity) from exc
        except asyncpg.ForeignKeyViolationError as exc:
            raise self._missing_reference() from exc

        user = self._row_to_entity(dict(row))
        user.organization_ids = set(entity.organization_ids)
        return user

    async def get_memberships(self, user_id: str) -> set[tuple[str, str]]:
        """Get (user_id, organization_id) pairs for a user."""
        rows = await self._db.fetch_all(
            "SELECT user_id, organization_id FROM dega_user_organizations WHERE user_id = $1",
            user_id,
        )
        return {(row["user_id"], row["organization_id"]) for row in rows}

    async def add_membership(self, user_id: str, organization_id: str) -> None:
        """Add a user to an organization."""
        await self._db.execute(
            """
            INSERT INTO dega_user_organizations (user_id, organization_id)
            VALUES ($1, $2)
            ON CONFLICT (user_id, organization_id) DO NOTHING
            """,
            user_id,
            organization_id,
        )

    async def remove_membership(self, user_id: str, organization_id: str) -> None:
        """Remove a user from an organization."""
        await self._db.execute(
            "DELETE FROM dega_user_organizations WHERE user_id = $1 AND organization_id = $2",
            user_id,
            organization_id,
        )

    async def _apply_membership_change(
        self, conn: Any, user_id: str, change: MembershipChange
    ) -> None:
        """Write one row per added and one delete per removed organization."""
        for organization_id in sorted(change.added):
            await conn.execute(
                """
                INSERT INTO dega_user_organizations (user_id, organization_id)
                VALUES ($1, $2)
                ON CONFLICT (user_id, organization_id) DO NOTHING
                """,
                user_id,
                organization_id,
            )
        for organization_id in sorted(change.removed):
            await conn.execute(
                "DELETE FROM dega_user_organizations WHERE user_id = $1 AND organization_id = $2",
                user_id,
                organization_id,
            )

    async def _hydrate(self, entities: list[DegaUser]) -> list[DegaUser]:
        """Attach organization ids to each user."""
        user_ids = [u.id for u in entities if u.id]
        if not user_ids:
            return entities
        rows = await self._db.fetch_all(
            """
            SELECT user_id, organization_id FROM dega_user_organizations
            WHERE user_id = ANY($1::text[])
            """,
            user_ids,
        )
        by_user: dict[str, set[str]] = defaultdict(set)
        for row in rows:
            by_user[row["user_id"]].add(row["organization_id"])
        for user in entities:
            user.organization_ids = set(by_user.get(user.id or "", ()))
        return entities
