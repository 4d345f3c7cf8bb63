"""Local file store for media bytes."""

from __future__ import annotations

import mimetypes
from pathlib import Path, PurePosixPath

import structlog

from dega.core.exceptions import FileStorageError, StoredFileNotFoundError

logger = structlog.get_logger()

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class FileStorage:
    """Stores uploaded files under one directory per client, keyed by filename."""

    def __init__(self, upload_dir: str | Path) -> None:
        """Initialize the store. The directory is created on first write."""
        self.root = Path(upload_dir)

    def clean_filename(self, filename: str | None) -> str:
        """Normalize a client-supplied filename.

        Raises:
            FileStorageError: If the name is empty or points outside the store.
        """
        if not filename:
            raise FileStorageError("Missing filename", entity_name="coreMedia")
        normalized = filename.replace("\\", "/")
        if ".." in PurePosixPath(normalized).parts:
            raise FileStorageError(
                f"Cannot store file with relative path outside current directory {filename}",
                entity_name="coreMedia",
            )
        name = PurePosixPath(normalized).name
        if not name or name in (".", ".."):
            raise FileStorageError(f"Invalid filename {filename}", entity_name="coreMedia")
        return name

    def storage_key(self, filename: str | None, client_id: str | None = None) -> str:
        """Key a file under its client's directory.

        Files of one client never replace those of another; within a client
        the same filename maps to the same key.

        Raises:
            FileStorageError: If the name or the client id is unusable as a path.
        """
        name = self.clean_filename(filename)
        if client_id is None:
            return name
        return f"{self._segment(client_id)}/{name}"

    def store_file(self, filename: str | None, data: bytes, client_id: str | None = None) -> str:
        """Write bytes under the storage key, replacing any existing file.

        Returns:
            The storage key, relative to the store root.
        """
        key = self.storage_key(filename, client_id)
        target = self.root.joinpath(*key.split("/"))
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise FileStorageError(f"Failed to store file {key}", entity_name="coreMedia") from exc
        logger.info("file_stored", key=key, client_id=client_id, size_bytes=len(data))
        return key

    def load_file(self, key: str) -> Path:
        """Resolve a stored file by its storage key.

        Raises:
            StoredFileNotFoundError: If the file does not exist.
        """
        parts = key.split("/")
        try:
            if len(parts) > 2:
                raise FileStorageError(f"Invalid key {key}", entity_name="coreMedia")
            segments = [self._segment(part) for part in parts]
        except FileStorageError as exc:
            raise StoredFileNotFoundError(
                f"Could not read file: {key}", entity_name="coreMedia"
            ) from exc
        path = self.root.joinpath(*segments)
        if not path.is_file():
            raise StoredFileNotFoundError(f"Could not read file: {key}", entity_name="coreMedia")
        return path

    @staticmethod
    def _segment(value: str) -> str:
        if not value or value in (".", "..") or "/" in value or "\\" in value:
            raise FileStorageError(f"Invalid path segment {value}", entity_name="coreMedia")
        return value

    @staticmethod
    def content_type(path: str | Path) -> str:
        """Guess the content type from the file extension."""
        guessed, _ = mimetypes.guess_type(str(path))
        return guessed or DEFAULT_CONTENT_TYPE
