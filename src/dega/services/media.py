"""Media service: metadata records plus the bytes in the file store."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import quote

import structlog

from dega.adapters.storage import FileStorage
from dega.core.domain_types import Media
from dega.core.interfaces import ContentRepository
from dega.core.slug import DEFAULT_MAX_ATTEMPTS
from dega.services.content import ContentService, utc_now

logger = structlog.get_logger()

DOWNLOAD_PATH = "/api/media/download"


class MediaService(ContentService[Media]):
    """Media is scoped by client; slugs derive from the stored filename."""

    entity_name = "coreMedia"

    def __init__(
        self,
        repository: ContentRepository[Media],
        storage: FileStorage,
        max_slug_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        """Initialize the service."""
        super().__init__(repository, max_slug_attempts)
        self.storage = storage

    async def upload(
        self,
        filename: str | None,
        data: bytes,
        content_type: str | None = None,
        client_id: str | None = None,
        uploaded_by: str | None = None,
    ) -> Media:
        """Store an uploaded file and record its metadata.

        Files are kept per client, so a file with the same name is only
        overwritten within the caller's client; the metadata record is always
        new and gets its own unique slug.
        """
        stored_name = self.storage.clean_filename(filename)
        key = self.storage.store_file(stored_name, data, client_id)
        media = Media(
            name=stored_name,
            type=content_type,
            uploaded_by=uploaded_by,
            published_date=utc_now(),
            file_size=str(len(data)),
            url=f"{DOWNLOAD_PATH}/{quote(key)}",
        )
        created = await self.create(media, client_id)
        logger.info(
            "media_uploaded",
            media_id=created.id,
            key=key,
            size_bytes=len(data),
            uploaded_by=uploaded_by,
        )
        return created

    def open_download(self, key: str) -> tuple[Path, str]:
        """Resolve a stored file by its storage key, with its content type.

        Raises:
            StoredFileNotFoundError: If the file does not exist.
        """
        path = self.storage.load_file(key)
        return path, self.storage.content_type(path)
