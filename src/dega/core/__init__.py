"""Content domain core: entities, slugs, memberships, paging."""

from dega.core.domain_types import Category, DegaUser, Media, Organization
from dega.core.exceptions import (
    BadRequestAlertError,
    DegaError,
    EntityNotFoundError,
    FileStorageError,
    SlugConflictError,
    SlugExhaustedError,
    StoredFileNotFoundError,
)
from dega.core.memberships import MembershipChange, OrganizationMemberships
from dega.core.pagination import Direction, Page, PageRequest, SortOrder
from dega.core.slug import SlugGenerator, remove_special_chars

__all__ = [
    "BadRequestAlertError",
    "Category",
    "DegaError",
    "DegaUser",
    "Direction",
    "EntityNotFoundError",
    "FileStorageError",
    "Media",
    "MembershipChange",
    "Organization",
    "OrganizationMemberships",
    "Page",
    "PageRequest",
    "SlugConflictError",
    "SlugExhaustedError",
    "SlugGenerator",
    "SortOrder",
    "StoredFileNotFoundError",
    "remove_special_chars",
]
