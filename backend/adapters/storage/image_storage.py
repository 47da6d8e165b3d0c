"""
Image storage adapters for local and S3 storage.

Provides abstract base class and concrete implementations for storing
article featured images locally or in cloud storage. Every adapter hands
back the public URL that gets persisted on the article.
"""

import asyncio
import logging
import os
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Optional
from uuid import uuid4

import aiofiles
import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from infrastructure.config.settings import Settings

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp", ".gif"}

_CONTENT_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".gif": "image/gif",
}


def _date_prefix() -> str:
    now = datetime.now()
    return f"articles/{now.year}/{now.month:02d}"


def sanitize_filename(filename: str) -> str:
    """
    Sanitize filename to prevent directory traversal and collisions.

    Args:
        filename: Original filename

    Returns:
        Sanitized, unique filename safe for any backend
    """
    filename = os.path.basename(filename or "")

    unsafe_chars = ['/', '\\', '..', '\0', '\n', '\r', '\t', ' ']
    for char in unsafe_chars:
        filename = filename.replace(char, '_')

    name, ext = os.path.splitext(filename)
    ext = ext.lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        ext = ".png"
    name = name[:80] or "image"

    return f"{name}_{uuid4().hex[:12]}{ext}"


class StorageAdapter(ABC):
    """Abstract base class for storage adapters."""

    @abstractmethod
    async def save_image(self, image_data: bytes, filename: str) -> str:
        """
        Save image data to storage.

        Args:
            image_data: Raw image bytes
            filename: Desired filename (will be sanitized)

        Returns:
            Public URL of the saved image
        """

    @abstractmethod
    async def delete_image(self, url: str) -> bool:
        """
        Delete an image previously returned by save_image.

        URLs that do not belong to this storage are left alone.

        Returns:
            True if deleted, False otherwise
        """


class LocalStorageAdapter(StorageAdapter):
    """
    Local filesystem storage adapter.

    Saves images under ``base_path`` organized by date and serves them from
    ``{public_base_url}/uploads/``.
    Structure: articles/YYYY/MM/filename.ext
    """

    def __init__(self, base_path: str, public_base_url: str):
        self.base_path = Path(base_path)
        self.url_prefix = f"{public_base_url.rstrip('/')}/uploads/"

    def _path_from_url(self, url: str) -> Optional[Path]:
        if not url.startswith(self.url_prefix):
            return None
        relative = url[len(self.url_prefix):]
        candidate = (self.base_path / relative).resolve()
        # Refuse anything that escapes the upload root
        if self.base_path.resolve() not in candidate.parents:
            return None
        return candidate

    async def save_image(self, image_data: bytes, filename: str) -> str:
        relative_dir = _date_prefix()
        full_dir = self.base_path / relative_dir
        full_dir.mkdir(parents=True, exist_ok=True)

        safe_filename = sanitize_filename(filename)
        file_path = full_dir / safe_filename

        async with aiofiles.open(file_path, 'wb') as f:
            await f.write(image_data)

        relative_path = f"{relative_dir}/{safe_filename}"
        logger.info("Saved image to local storage: %s", relative_path)
        return f"{self.url_prefix}{relative_path}"

    async def delete_image(self, url: str) -> bool:
        file_path = self._path_from_url(url)
        if file_path is None:
            logger.debug("Skipping deletion of foreign image URL: %s", url)
            return False

        if file_path.exists():
            file_path.unlink()
            logger.info("Deleted image from local storage: %s", file_path)
            return True

        logger.warning("Image not found for deletion: %s", file_path)
        return False


class S3StorageAdapter(StorageAdapter):
    """
    AWS S3 storage adapter.

    Objects are served from the CDN domain when one is configured, otherwise
    from the bucket's virtual-hosted URL.
    """

    def __init__(
        self,
        bucket: Optional[str],
        region: Optional[str] = None,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        cdn_domain: Optional[str] = None,
        client=None,
    ):
        self.bucket = bucket
        self.region = region
        self.cdn_domain = cdn_domain

        if client is not None:
            self.s3_client = client
        elif access_key and secret_key:
            self.s3_client = boto3.client(
                's3',
                region_name=region,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
            )
        else:
            # Default credential chain (IAM role, env vars, etc.)
            self.s3_client = boto3.client('s3', region_name=region)

    @property
    def base_url(self) -> str:
        if self.cdn_domain:
            return f"https://{self.cdn_domain}/"
        if self.region:
            return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/"
        return f"https://{self.bucket}.s3.amazonaws.com/"

    async def save_image(self, image_data: bytes, filename: str) -> str:
        if not self.bucket:
            raise RuntimeError("S3 bucket not configured.")

        safe_filename = sanitize_filename(filename)
        s3_key = f"{_date_prefix()}/{safe_filename}"
        content_type = _CONTENT_TYPES.get(os.path.splitext(safe_filename)[1], "image/png")

        try:
            await asyncio.to_thread(
                self.s3_client.put_object,
                Bucket=self.bucket,
                Key=s3_key,
                Body=image_data,
                ContentType=content_type,
            )
        except NoCredentialsError:
            logger.error("AWS credentials not found")
            raise RuntimeError("AWS credentials not configured")
        except (ClientError, BotoCoreError) as e:
            logger.error("S3 upload failed: %s", e)
            raise RuntimeError(f"Failed to upload to S3: {e}")

        logger.info("Uploaded image to S3: %s", s3_key)
        return f"{self.base_url}{s3_key}"

    async def delete_image(self, url: str) -> bool:
        if not self.bucket or not url.startswith(self.base_url):
            return False

        s3_key = url[len(self.base_url):]
        try:
            await asyncio.to_thread(self.s3_client.delete_object, Bucket=self.bucket, Key=s3_key)
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to delete from S3: %s", e)
            return False

        logger.info("Deleted image from S3: %s", s3_key)
        return True


def get_storage_adapter(settings: Settings) -> StorageAdapter:
    """
    Factory function to get the appropriate storage adapter.

    Raises:
        ValueError: If storage_type is not recognized
    """
    storage_type = settings.storage_type.lower()

    if storage_type == "local":
        return LocalStorageAdapter(
            base_path=settings.storage_local_path,
            public_base_url=settings.public_base_url,
        )
    elif storage_type == "s3":
        return S3StorageAdapter(
            bucket=settings.s3_bucket,
            region=settings.s3_region,
            access_key=settings.s3_access_key,
            secret_key=settings.s3_secret_key,
            cdn_domain=settings.cdn_domain,
        )
    else:
        raise ValueError(
            f"Unknown storage type: {storage_type}. Must be 'local' or 's3'"
        )
