"""Content repositories.

Contents:
- base: shared SQL plumbing (PostgresContentRepository)
- categories_repository, organizations_repository, media_repository,
  users_repository: asyncpg implementations of the gateway protocols
- memory: in-memory implementations for tests and local development
"""

from .base import PostgresContentRepository
from .categories_repository import CategoriesRepository
from .media_repository import MediaRepository
from .memory import (
    InMemoryContentRepository,
    InMemoryDegaUsersRepository,
    InMemoryOrganizationsRepository,
    InMemoryStore,
)
from .organizations_repository import OrganizationsRepository
from .users_repository import DegaUsersRepository

__all__ = [
    "CategoriesRepository",
    "DegaUsersRepository",
    "InMemoryContentRepository",
    "InMemoryDegaUsersRepository",
    "InMemoryOrganizationsRepository",
    "InMemoryStore",
    "MediaRepository",
    "OrganizationsRepository",
    "PostgresContentRepository",
]
