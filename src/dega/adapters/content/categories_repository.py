"""Categories repository."""

from dega.adapters.content.base import PostgresContentRepository
from dega.core.domain_types import Category


class CategoriesRepository(PostgresContentRepository[Category]):
    """Repository for category operations."""

    table = "categories"
    entity_type = Category
    entity_name = "coreCategory"
    columns = (
        "id",
        "name",
        "description",
        "slug",
        "parent_id",
        "client_id",
        "created_at",
        "updated_at",
    )
    search_columns = ("name", "description", "slug")
