"""Alert response headers for entity lifecycle events and failures."""

from __future__ import annotations

DEFAULT_APP_NAME = "dega"


def create_alert(message: str, param: str, app_name: str = DEFAULT_APP_NAME) -> dict[str, str]:
    """Headers carrying a success alert and its parameter."""
    return {
        f"X-{app_name}-alert": message,
        f"X-{app_name}-params": param,
    }


def entity_creation_alert(
    entity_name: str, param: str, app_name: str = DEFAULT_APP_NAME
) -> dict[str, str]:
    """Alert for a newly created entity."""
    return create_alert(
        f"A new {entity_name} is created with identifier {param}", param, app_name
    )


def entity_update_alert(
    entity_name: str, param: str, app_name: str = DEFAULT_APP_NAME
) -> dict[str, str]:
    """Alert for an updated entity."""
    return create_alert(f"A {entity_name} is updated with identifier {param}", param, app_name)


def entity_deletion_alert(
    entity_name: str, param: str, app_name: str = DEFAULT_APP_NAME
) -> dict[str, str]:
    """Alert for a deleted entity."""
    return create_alert(f"A {entity_name} is deleted with identifier {param}", param, app_name)


def failure_alert(
    entity_name: str | None, error_key: str, app_name: str = DEFAULT_APP_NAME
) -> dict[str, str]:
    """Headers describing a failed request."""
    return {
        f"X-{app_name}-error": f"error.{error_key}",
        f"X-{app_name}-params": entity_name or "",
    }
