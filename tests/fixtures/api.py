"""FastAPI application fixtures backed by in-memory repositories."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from dega.adapters.content import InMemoryStore
from dega.adapters.storage import FileStorage
from dega.entrypoints.api.deps import (
    Settings,
    get_category_service,
    get_media_service,
    get_organization_service,
    get_settings,
    get_user_service,
)
from dega.entrypoints.api.errors import register_exception_handlers
from dega.entrypoints.api.routes import api_router
from dega.services import CategoryService, DegaUserService, MediaService, OrganizationService


@pytest.fixture
def api_settings() -> Settings:
    """Return settings with a small upload limit."""
    settings = Settings()
    settings.app_name = "dega"
    settings.max_upload_bytes = 1024
    return settings


@pytest.fixture
def app(store: InMemoryStore, file_storage: FileStorage, api_settings: Settings) -> FastAPI:
    """Create test app with all content routes."""
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api")

    category_service = CategoryService(store.categories)
    organization_service = OrganizationService(store.organizations)
    media_service = MediaService(store.media, file_storage)
    user_service = DegaUserService(store.users, store.organizations)

    app.dependency_overrides[get_category_service] = lambda: category_service
    app.dependency_overrides[get_organization_service] = lambda: organization_service
    app.dependency_overrides[get_media_service] = lambda: media_service
    app.dependency_overrides[get_user_service] = lambda: user_service
    app.dependency_overrides[get_settings] = lambda: api_settings
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client."""
    return TestClient(app)
