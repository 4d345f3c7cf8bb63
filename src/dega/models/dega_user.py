"""DegaUser model and its organization membership table."""
from sqlalchemy import Boolean, Column, ForeignKey, Index, String, Table, Text, true
from sqlalchemy.orm import relationship

from dega.models.base import BaseModel, metadata

dega_user_organizations = Table(
    "dega_user_organizations",
    metadata,
    Column(
        "user_id",
        String(36),
        ForeignKey("dega_users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "organization_id",
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Index("ix_dega_user_organizations_organization_id", "organization_id"),
)


class DegaUser(BaseModel):
    """A user profile."""

    __tablename__ = "dega_users"

    first_name = Column(String(255))
    last_name = Column(String(255))
    display_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    website = Column(String(1000))
    facebook_url = Column(String(1000))
    twitter_url = Column(String(1000))
    instagram_url = Column(String(1000))
    linkedin_url = Column(String(1000))
    github_url = Column(String(1000))
    profile_picture = Column(String(1000))
    description = Column(Text)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())
    organization_default_id = Column(
        String(36), ForeignKey("organizations.id", ondelete="SET NULL")
    )

    # Relationships
    organizations = relationship(
        "Organization",
        secondary=dega_user_organizations,
        back_populates="dega_users",
    )
    organization_default = relationship("Organization", foreign_keys=[organization_default_id])

    __table_args__ = (Index("uq_dega_users_slug", "slug", unique=True),)
