"""File storage adapters."""

from .file_storage import DEFAULT_CONTENT_TYPE, FileStorage

__all__ = ["DEFAULT_CONTENT_TYPE", "FileStorage"]
