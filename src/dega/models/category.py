"""Category model."""
from sqlalchemy import Column, ForeignKey, Index, String, Text

from dega.models.base import BaseModel


class Category(BaseModel):
    """A content category, scoped to a client."""

    __tablename__ = "categories"

    name = Column(String(255), nullable=False)
    description = Column(Text)
    parent_id = Column(String(36), ForeignKey("categories.id", ondelete="SET NULL"))

    __table_args__ = (
        # Slugs are unique per client
        Index(
            "uq_categories_client_id_slug",
            "client_id",
            "slug",
            unique=True,
            postgresql_nulls_not_distinct=True,
        ),
    )
