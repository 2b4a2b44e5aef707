# =============================================================================
# lib/cdn.py - Cloudinary Image Uploads
# =============================================================================
# Thin wrapper over the Cloudinary SDK. Images are stored under
# <CLOUDINARY_FOLDER>/<kind> and resized/re-encoded by Cloudinary on upload
# (bounded box, automatic quality, webp).
#
# Usage:
#   from lib.cdn import ImageCDN, PRODUCT_IMAGE
#   url = ImageCDN.upload(content, PRODUCT_IMAGE)
# =============================================================================

from __future__ import annotations

import io
import logging
from dataclasses import dataclass

import cloudinary
import cloudinary.uploader

from app.config import settings
from app.exceptions import UpstreamError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImagePreset:
    """Destination folder and bounding box for one kind of image."""
    folder: str
    width: int
    height: int


PRODUCT_IMAGE = ImagePreset(folder="products", width=1000, height=1000)
CATEGORY_IMAGE = ImagePreset(folder="categories", width=500, height=500)


class ImageUploadError(UpstreamError):
    """Raised when Cloudinary rejects or fails an upload."""

    def __init__(self, cause: str):
        super().__init__(message="Error al subir la imagen", cause=f"cloudinary upload: {cause}")


class ImageCDN:
    """Cloudinary uploads. Configuration is applied lazily on first use."""

    _configured: bool = False

    @classmethod
    def _configure(cls) -> None:
        if cls._configured:
            return
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            secure=True,
        )
        cls._configured = True

    @classmethod
    def upload(cls, content: bytes, preset: ImagePreset, filename: str | None = None) -> str:
        """
        Upload image bytes and return the HTTPS delivery URL.

        Raises:
            ImageUploadError: If the SDK raises or returns no secure_url
        """
        cls._configure()
        folder = f"{settings.CLOUDINARY_FOLDER}/{preset.folder}"
        logger.info(f"Uploading image to Cloudinary: {filename or '<unnamed>'} ({len(content)} bytes) -> {folder}")

        try:
            result = cloudinary.uploader.upload(
                io.BytesIO(content),
                folder=folder,
                resource_type="image",
                transformation=[{
                    "width": preset.width,
                    "height": preset.height,
                    "crop": "limit",
                    "quality": "auto:good",
                    "format": "webp",
                }],
            )
        except Exception as e:
            logger.error(f"Cloudinary upload error: {e}")
            raise ImageUploadError(str(e))

        url = result.get("secure_url") if result else None
        if not url:
            raise ImageUploadError("response missing secure_url")

        logger.info(f"Cloudinary upload success: {result.get('public_id')}")
        return url
