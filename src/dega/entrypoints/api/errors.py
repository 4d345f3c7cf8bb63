"""Exception handlers turning domain errors into HTTP responses."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse

from dega.core.alerts import DEFAULT_APP_NAME, failure_alert
from dega.core.exceptions import (
    BadRequestAlertError,
    DegaError,
    EntityNotFoundError,
    FileStorageError,
    SlugConflictError,
    SlugExhaustedError,
    StoredFileNotFoundError,
)

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = structlog.get_logger()

# Most specific first; the first isinstance match wins.
STATUS_BY_ERROR: tuple[tuple[type[DegaError], int], ...] = (
    (BadRequestAlertError, status.HTTP_400_BAD_REQUEST),
    (FileStorageError, status.HTTP_400_BAD_REQUEST),
    (EntityNotFoundError, status.HTTP_404_NOT_FOUND),
    (StoredFileNotFoundError, status.HTTP_404_NOT_FOUND),
    (SlugExhaustedError, status.HTTP_409_CONFLICT),
    (SlugConflictError, status.HTTP_409_CONFLICT),
)


def status_for(exc: DegaError) -> int:
    """HTTP status for a domain error."""
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def dega_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render a DegaError as a problem body plus failure alert headers."""
    if not isinstance(exc, DegaError):
        raise exc
    status_code = status_for(exc)
    app_name = getattr(getattr(request.app.state, "settings", None), "app_name", DEFAULT_APP_NAME)
    logger.info(
        "request_failed",
        path=request.url.path,
        status=status_code,
        error_key=exc.error_key,
        entity=exc.entity_name,
    )
    body = exc.to_dict()
    body["status"] = status_code
    return JSONResponse(
        status_code=status_code,
        content=body,
        headers=failure_alert(exc.entity_name, exc.error_key, app_name),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain error handler on an application."""
    app.add_exception_handler(DegaError, dega_error_handler)
