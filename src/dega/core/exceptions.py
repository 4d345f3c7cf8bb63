"""Error definitions for the content domain.

Every error raised by the core, the adapters or the services derives from
DegaError. The API layer maps each kind to an HTTP status and alert headers
(see dega.entrypoints.api.errors).
"""

from __future__ import annotations

from typing import Any


class DegaError(Exception):
    """Base exception for all domain errors.

    Attributes:
        message: Human-readable error message.
        entity_name: Entity the error refers to (e.g. "coreCategory").
        error_key: Short machine-readable key (e.g. "idexists").
    """

    default_error_key = "internal"

    def __init__(
        self,
        message: str,
        entity_name: str | None = None,
        error_key: str | None = None,
    ) -> None:
        """Initialize the error."""
        super().__init__(message)
        self.message = message
        self.entity_name = entity_name
        self.error_key = error_key or self.default_error_key

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API response."""
        return {
            "title": self.message,
            "message": f"error.{self.error_key}",
            "params": self.entity_name,
        }


class BadRequestAlertError(DegaError):
    """Request is malformed (id present on create, missing on update, ...)."""

    default_error_key = "badrequest"


class EntityNotFoundError(DegaError):
    """A referenced entity does not exist (or belongs to another tenant)."""

    default_error_key = "notfound"


class SlugExhaustedError(DegaError):
    """No free slug was found within the configured number of probes."""

    default_error_key = "slugexhausted"

    def __init__(
        self,
        base: str,
        attempts: int,
        entity_name: str | None = None,
    ) -> None:
        """Initialize with the base candidate and number of probes made."""
        super().__init__(
            f"No free slug for '{base}' after {attempts} attempts",
            entity_name=entity_name,
        )
        self.base = base
        self.attempts = attempts


class SlugConflictError(DegaError):
    """The database rejected a slug already taken by a concurrent writer."""

    default_error_key = "slugexists"


class FileStorageError(DegaError):
    """A file could not be stored (invalid name, invalid path)."""

    default_error_key = "filestorage"


class StoredFileNotFoundError(DegaError):
    """A requested file does not exist in the file store."""

    default_error_key = "filenotfound"
