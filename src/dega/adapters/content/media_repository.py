"""Media repository."""

from dega.adapters.content.base import PostgresContentRepository
from dega.core.domain_types import Media


class MediaRepository(PostgresContentRepository[Media]):
    """Repository for media metadata operations."""

    table = "media"
    entity_type = Media
    entity_name = "coreMedia"
    columns = (
        "id",
        "name",
        "type",
        "description",
        "uploaded_by",
        "published_date",
        "title",
        "caption",
        "alt_text",
        "file_size",
        "url",
        "dimensions",
        "slug",
        "client_id",
        "created_at",
        "updated_at",
    )
    search_columns = ("name", "title", "caption", "alt_text", "description", "slug")
