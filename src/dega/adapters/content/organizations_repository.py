"""Organizations repository."""

from typing import Any

from dega.adapters.content.base import PostgresContentRepository
from dega.core.domain_types import Organization
from dega.core.pagination import Page, PageRequest


class OrganizationsRepository(PostgresContentRepository[Organization]):
    """Repository for organization operations.

    Organizations are tenants themselves, so slugs are unique globally.
    """

    table = "organizations"
    entity_type = Organization
    entity_name = "coreOrganization"
    scoped = False
    columns = (
        "id",
        "name",
        "description",
        "email",
        "phone",
        "site_title",
        "tag_line",
        "site_address",
        "logo_url",
        "fav_icon_url",
        "facebook_url",
        "twitter_url",
        "slug",
        "client_id",
        "created_at",
        "updated_at",
    )
    search_columns = ("name", "description", "site_title", "tag_line", "email", "slug")

    async def list_for_user(self, user_id: str, request: PageRequest) -> Page[Organization]:
        """List organizations a user belongs to."""
        conditions = [
            "id IN (SELECT organization_id FROM dega_user_organizations WHERE user_id = $1)"
        ]
        params: list[Any] = [user_id]
        return await self._page(conditions, params, request)
