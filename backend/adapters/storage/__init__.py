"""Storage adapters for article images."""

from .image_storage import (
    ALLOWED_IMAGE_EXTENSIONS,
    LocalStorageAdapter,
    S3StorageAdapter,
    StorageAdapter,
    get_storage_adapter,
    sanitize_filename,
)

__all__ = [
    "ALLOWED_IMAGE_EXTENSIONS",
    "StorageAdapter",
    "LocalStorageAdapter",
    "S3StorageAdapter",
    "get_storage_adapter",
    "sanitize_filename",
]
