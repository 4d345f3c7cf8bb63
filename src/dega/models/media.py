"""Media model."""
from sqlalchemy import Column, DateTime, Index, String, Text

from dega.models.base import BaseModel


class Media(BaseModel):
    """Metadata of an uploaded file. The bytes live in the file store."""

    __tablename__ = "media"

    name = Column(String(500), nullable=False)
    type = Column(String(255))
    description = Column(Text)
    uploaded_by = Column(String(255))
    published_date = Column(DateTime(timezone=True))
    title = Column(String(500))
    caption = Column(Text)
    alt_text = Column(String(500))
    file_size = Column(String(50))
    url = Column(String(2000))
    dimensions = Column(String(100))

    __table_args__ = (
        # Slugs are unique per client
        Index(
            "uq_media_client_id_slug",
            "client_id",
            "slug",
            unique=True,
            postgresql_nulls_not_distinct=True,
        ),
    )
