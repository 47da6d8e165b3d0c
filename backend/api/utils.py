"""
Shared API utility functions.

Helpers for the multipart article form used by the writer endpoints.
"""

from typing import Optional

from fastapi import UploadFile

from core.domain.localization import LocalizedText, parse_localized
from core.errors import ValidationError
from infrastructure.config.settings import settings
from services.moderation import ImageUpload

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif"}


def parse_localized_field(raw: Optional[str], field_name: str) -> Optional[LocalizedText]:
    """Decode a form field holding a JSON map of language code to text.

    A plain (non-JSON) string is taken as the English text.
    """
    if raw is None:
        return None
    try:
        return parse_localized(raw)
    except TypeError:
        raise ValidationError(f"{field_name} must be a JSON object of translations")


def parse_tags(raw: Optional[str]) -> Optional[list[str]]:
    """Comma-separated tag names. ``None`` means the field was not sent."""
    if raw is None:
        return None
    return [name.strip() for name in raw.split(",") if name.strip()]


async def read_image_upload(upload: Optional[UploadFile]) -> Optional[ImageUpload]:
    """Validate type and size of an uploaded image and read it into memory."""
    if upload is None or not upload.filename:
        return None

    if upload.content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError(
            f"Unsupported image type '{upload.content_type}'. Use JPEG, PNG, WebP or GIF."
        )

    max_bytes = settings.max_image_size_mb * 1024 * 1024
    data = await upload.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise ValidationError(f"Image exceeds {settings.max_image_size_mb}MB limit")
    if not data:
        raise ValidationError("Image file is empty")

    return ImageUpload(data=data, filename=upload.filename)
