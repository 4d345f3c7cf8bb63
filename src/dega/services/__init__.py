"""Application services."""

from dega.services.categories import CategoryService
from dega.services.content import ContentService
from dega.services.media import MediaService
from dega.services.organizations import OrganizationService
from dega.services.users import DegaUserService

__all__ = [
    "CategoryService",
    "ContentService",
    "DegaUserService",
    "MediaService",
    "OrganizationService",
]
