"""Request context dependencies."""

from dega.entrypoints.api.middleware.client import ClientContext, get_client_context

__all__ = ["ClientContext", "get_client_context"]
