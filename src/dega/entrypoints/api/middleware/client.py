"""Client (tenant) context read from request headers."""

from dataclasses import dataclass

from fastapi import Header

CLIENT_ID_HEADER = "X-Client-ID"
USER_ID_HEADER = "X-User-ID"


@dataclass
class ClientContext:
    """Tenant and acting user of a request."""

    client_id: str | None
    user_id: str | None


async def get_client_context(
    x_client_id: str | None = Header(default=None, alias=CLIENT_ID_HEADER),
    x_user_id: str | None = Header(default=None, alias=USER_ID_HEADER),
) -> ClientContext:
    """Build the request context. Blank headers count as absent."""
    return ClientContext(
        client_id=(x_client_id or "").strip() or None,
        user_id=(x_user_id or "").strip() or None,
    )
