"""Tests for application wiring: settings, error mapping and health."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from dega.core.exceptions import (
    BadRequestAlertError,
    DegaError,
    EntityNotFoundError,
    FileStorageError,
    SlugConflictError,
    SlugExhaustedError,
    StoredFileNotFoundError,
)
from dega.entrypoints.api.app import app
from dega.entrypoints.api.deps import Settings
from dega.entrypoints.api.errors import status_for


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Defaults apply when the environment is empty."""
        for name in (
            "DATABASE_URL",
            "DEGA_UPLOAD_DIR",
            "DEGA_MAX_UPLOAD_BYTES",
            "DEGA_SLUG_MAX_ATTEMPTS",
            "DEGA_APP_NAME",
            "DEGA_CREATE_SCHEMA",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = Settings()

        assert settings.database_url == "postgresql://localhost:5432/dega"
        assert settings.upload_dir == "./uploads"
        assert settings.max_upload_bytes == 10 * 1024 * 1024
        assert settings.slug_max_attempts == 1000
        assert settings.app_name == "dega"
        assert settings.create_schema is True

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Environment variables take precedence."""
        monkeypatch.setenv("DEGA_SLUG_MAX_ATTEMPTS", "5")
        monkeypatch.setenv("DEGA_CREATE_SCHEMA", "false")

        settings = Settings()

        assert settings.slug_max_attempts == 5
        assert settings.create_schema is False


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (BadRequestAlertError("x"), 400),
        (FileStorageError("x"), 400),
        (EntityNotFoundError("x"), 404),
        (StoredFileNotFoundError("x"), 404),
        (SlugExhaustedError("x", 3), 409),
        (SlugConflictError("x"), 409),
        (DegaError("x"), 500),
    ],
)
def test_status_for(error: DegaError, expected: int) -> None:
    """Each error kind maps to one HTTP status."""
    assert status_for(error) == expected


def test_health_check() -> None:
    """The health endpoint answers without a database."""
    response = TestClient(app).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
