# =============================================================================
# app/routers/uploads.py - Image Upload Validation
# =============================================================================
# Shared checks for the multipart `image` field accepted by the product and
# category image endpoints. Runs before anything is sent to the CDN.
# =============================================================================

import logging

from fastapi import UploadFile

from app.config import settings
from app.exceptions import InvalidImageError

logger = logging.getLogger(__name__)


async def read_image(image: UploadFile | None) -> bytes:
    """
    Validate an uploaded image and return its bytes.

    Raises:
        InvalidImageError: If no file was sent, it is a video, its type is
            not an allowed image type, or it exceeds MAX_IMAGE_SIZE_MB
    """
    if image is None or not image.filename:
        raise InvalidImageError("No se recibió ninguna imagen")

    content_type = (image.content_type or "").lower()
    if content_type.startswith("video/"):
        raise InvalidImageError("No se permiten archivos de video")

    if content_type not in settings.allowed_image_types_list:
        raise InvalidImageError(
            "Tipo de archivo no permitido. Solo imágenes JPEG, PNG, GIF o WebP",
            details={"content_type": content_type, "allowed": settings.allowed_image_types_list},
        )

    # Read one byte past the limit so oversize files are detected without
    # buffering them entirely
    content = await image.read(settings.max_image_size_bytes + 1)
    if len(content) > settings.max_image_size_bytes:
        raise InvalidImageError(
            f"La imagen excede el tamaño máximo de {settings.MAX_IMAGE_SIZE_MB}MB",
            details={"max_size_mb": settings.MAX_IMAGE_SIZE_MB},
        )
    if not content:
        raise InvalidImageError("No se recibió ninguna imagen")

    logger.debug(f"Accepted image upload {image.filename} ({content_type}, {len(content)} bytes)")
    return content
