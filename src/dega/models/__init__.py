"""SQLAlchemy table definitions for the content database."""
from dega.models.base import BaseModel, metadata
from dega.models.category import Category
from dega.models.dega_user import DegaUser, dega_user_organizations
from dega.models.media import Media
from dega.models.organization import Organization

__all__ = [
    "BaseModel",
    "Category",
    "DegaUser",
    "Media",
    "Organization",
    "dega_user_organizations",
    "metadata",
]
