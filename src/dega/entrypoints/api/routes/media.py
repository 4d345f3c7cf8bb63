"""Media API routes: metadata CRUD, upload and download."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Request, Response, UploadFile, status
from fastapi.responses import FileResponse
from pydantic import BaseModel, ConfigDict

from dega.core.domain_types import Media
from dega.entrypoints.api.deps import get_media_service
from dega.entrypoints.api.routes.common import (
    ClientDep,
    PageDep,
    SettingsDep,
    deleted_response,
    set_created_headers,
    set_page_headers,
    set_search_headers,
    set_updated_headers,
)
from dega.services import MediaService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["media"])

ENTITY_NAME = "coreMedia"

UPLOAD_CHUNK_BYTES = 1024 * 1024

MediaServiceDep = Annotated[MediaService, Depends(get_media_service)]


class MediaDTO(BaseModel):
    """Media metadata request and response body."""

    model_config = ConfigDict(from_attributes=True)

    id: str | None = None
    name: str
    type: str | None = None
    description: str | None = None
    uploaded_by: str | None = None
    published_date: datetime | None = None
    title: str | None = None
    caption: str | None = None
    alt_text: str | None = None
    file_size: str | None = None
    url: str | None = None
    dimensions: str | None = None
    slug: str | None = None
    client_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_entity(self) -> Media:
        """Convert to the domain dataclass."""
        return Media(**self.model_dump())

    @classmethod
    def from_entity(cls, media: Media) -> MediaDTO:
        """Build from the domain dataclass."""
        return cls.model_validate(asdict(media))


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    """Read the upload into memory, enforcing a maximum size."""
    buf = bytearray()
    while True:
        chunk = await file.read(UPLOAD_CHUNK_BYTES)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Max allowed is {max_bytes} bytes.",
            )
    return bytes(buf)


@router.post("/media", response_model=MediaDTO, status_code=status.HTTP_201_CREATED)
async def upload_media(
    request: Request,
    response: Response,
    ctx: ClientDep,
    service: MediaServiceDep,
    settings: SettingsDep,
    file: UploadFile = File(...),
) -> MediaDTO:
    """Upload a file and create its media record.

    The slug is derived from the stored filename and the url points at the
    download endpoint.
    """
    logger.debug("REST request to upload Media : %s", file.filename)
    try:
        data = await read_upload_bytes(file, settings.max_upload_bytes)
    finally:
        await file.close()

    created = await service.upload(
        filename=file.filename,
        data=data,
        content_type=file.content_type,
        client_id=ctx.client_id,
        uploaded_by=ctx.user_id,
    )
    set_created_headers(
        response, settings, ENTITY_NAME, f"{request.url.path}/{created.id}", created.id or ""
    )
    return MediaDTO.from_entity(created)


@router.put("/media", response_model=MediaDTO)
async def update_media(
    body: MediaDTO,
    response: Response,
    ctx: ClientDep,
    service: MediaServiceDep,
    settings: SettingsDep,
) -> MediaDTO:
    """Replace an existing media record."""
    logger.debug("REST request to update Media : %s", body)
    updated = await service.update(body.to_entity(), ctx.client_id)
    set_updated_headers(response, settings, ENTITY_NAME, updated.id or "")
    return MediaDTO.from_entity(updated)


@router.get("/media", response_model=list[MediaDTO])
async def list_media(
    request: Request,
    response: Response,
    page_request: PageDep,
    ctx: ClientDep,
    service: MediaServiceDep,
) -> list[MediaDTO]:
    """Get a page of media records."""
    logger.debug("REST request to get a page of Media")
    page = await service.list(page_request, ctx.client_id)
    set_page_headers(response, request, page)
    return [MediaDTO.from_entity(m) for m in page.content]


@router.get("/media/download/{file_name}", response_class=FileResponse)
async def download_media(
    file_name: str,
    service: MediaServiceDep,
) -> FileResponse:
    """Send a file uploaded without a client as an attachment."""
    logger.debug("REST request to download file : %s", file_name)
    return file_response(service, file_name)


@router.get("/media/download/{client_key}/{file_name}", response_class=FileResponse)
async def download_client_media(
    client_key: str,
    file_name: str,
    service: MediaServiceDep,
) -> FileResponse:
    """Send a file stored under a client as an attachment."""
    logger.debug("REST request to download file : %s/%s", client_key, file_name)
    return file_response(service, f"{client_key}/{file_name}")


def file_response(service: MediaService, key: str) -> FileResponse:
    """Build the attachment response for a storage key."""
    path, content_type = service.open_download(key)
    return FileResponse(path, media_type=content_type, filename=path.name)


@router.get("/media/{media_id}", response_model=MediaDTO)
async def get_media(
    media_id: str,
    ctx: ClientDep,
    service: MediaServiceDep,
) -> MediaDTO:
    """Get a media record by id."""
    logger.debug("REST request to get Media : %s", media_id)
    return MediaDTO.from_entity(await service.get(media_id, ctx.client_id))


@router.delete("/media/{media_id}", response_class=Response)
async def delete_media(
    media_id: str,
    ctx: ClientDep,
    service: MediaServiceDep,
    settings: SettingsDep,
) -> Response:
    """Delete a media record. The stored file is left in place."""
    logger.debug("REST request to delete Media : %s", media_id)
    await service.delete(media_id, ctx.client_id)
    return deleted_response(settings, ENTITY_NAME, media_id)


@router.get("/_search/media", response_model=list[MediaDTO])
async def search_media(
    query: str,
    request: Request,
    response: Response,
    page_request: PageDep,
    ctx: ClientDep,
    service: MediaServiceDep,
) -> list[MediaDTO]:
    """Search media records."""
    logger.debug("REST request to search for a page of Media for query %s", query)
    page = await service.search(query, page_request, ctx.client_id)
    set_search_headers(response, request, query, page)
    return [MediaDTO.from_entity(m) for m in page.content]


@router.get("/mediabyslug/{slug}", response_model=MediaDTO)
async def get_media_by_slug(
    slug: str,
    ctx: ClientDep,
    service: MediaServiceDep,
) -> MediaDTO:
    """Get a media record by its slug within the caller's client."""
    logger.debug("REST request to get Media by slug : %s", slug)
    return MediaDTO.from_entity(await service.get_by_slug(slug, ctx.client_id))
