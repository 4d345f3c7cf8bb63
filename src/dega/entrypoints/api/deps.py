"""Dependency injection and application lifespan management."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import Request

from dega.adapters.content import (
    CategoriesRepository,
    DegaUsersRepository,
    MediaRepository,
    OrganizationsRepository,
)
from dega.adapters.db.app_db import AppDatabase
from dega.adapters.storage import FileStorage
from dega.services import CategoryService, DegaUserService, MediaService, OrganizationService

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)


class Settings:
    """Application settings loaded from environment."""

    def __init__(self) -> None:
        """Load settings from environment variables."""
        self.database_url = os.getenv("DATABASE_URL", "postgresql://localhost:5432/dega")
        self.upload_dir = os.getenv("DEGA_UPLOAD_DIR", "./uploads")
        self.max_upload_bytes = int(os.getenv("DEGA_MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
        self.slug_max_attempts = int(os.getenv("DEGA_SLUG_MAX_ATTEMPTS", "1000"))
        self.app_name = os.getenv("DEGA_APP_NAME", "dega")
        self.create_schema = os.getenv("DEGA_CREATE_SCHEMA", "true").lower() == "true"


settings = Settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan - setup and teardown.

    This context manager handles:
    - Database connection pool setup and schema bootstrap
    - Repository and service wiring
    - File store configuration
    """
    app_db = AppDatabase(settings.database_url)
    await app_db.connect()
    if settings.create_schema:
        await app_db.ensure_schema()

    organizations = OrganizationsRepository(app_db)
    storage = FileStorage(settings.upload_dir)
    attempts = settings.slug_max_attempts

    app.state.app_db = app_db
    app.state.settings = settings
    app.state.category_service = CategoryService(CategoriesRepository(app_db), attempts)
    app.state.organization_service = OrganizationService(organizations, attempts)
    app.state.media_service = MediaService(MediaRepository(app_db), storage, attempts)
    app.state.user_service = DegaUserService(DegaUsersRepository(app_db), organizations, attempts)
    logger.info("Content services ready, uploads in %s", settings.upload_dir)

    yield

    await app_db.close()


def get_settings(request: Request) -> Settings:
    """Get the settings the application was started with."""
    app_settings: Settings = getattr(request.app.state, "settings", settings)
    return app_settings


def get_app_db(request: Request) -> AppDatabase:
    """Get the application database from app state.

    Args:
        request: The current request.

    Returns:
        The configured AppDatabase.
    """
    app_db: AppDatabase = request.app.state.app_db
    return app_db


def get_category_service(request: Request) -> CategoryService:
    """Get the category service from app state."""
    service: CategoryService = request.app.state.category_service
    return service


def get_organization_service(request: Request) -> OrganizationService:
    """Get the organization service from app state."""
    service: OrganizationService = request.app.state.organization_service
    return service


def get_media_service(request: Request) -> MediaService:
    """Get the media service from app state."""
    service: MediaService = request.app.state.media_service
    return service


def get_user_service(request: Request) -> DegaUserService:
    """Get the user service from app state."""
    service: DegaUserService = request.app.state.user_service
    return service
