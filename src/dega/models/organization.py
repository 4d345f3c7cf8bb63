"""Organization model."""
from sqlalchemy import Column, Index, String, Text
from sqlalchemy.orm import relationship

from dega.models.base import BaseModel


class Organization(BaseModel):
    """An organization. Its client_id is the tenant key of its content."""

    __tablename__ = "organizations"

    name = Column(String(255), nullable=False)
    description = Column(Text)
    email = Column(String(255))
    phone = Column(String(50))
    site_title = Column(String(255))
    tag_line = Column(String(255))
    site_address = Column(String(500))
    logo_url = Column(String(1000))
    fav_icon_url = Column(String(1000))
    facebook_url = Column(String(1000))
    twitter_url = Column(String(1000))

    # Relationships
    dega_users = relationship(
        "DegaUser",
        secondary="dega_user_organizations",
        back_populates="organizations",
    )

    __table_args__ = (Index("uq_organizations_slug", "slug", unique=True),)
