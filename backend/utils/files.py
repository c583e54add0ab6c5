"""File handling utilities for secure file processing."""

import io
import logging

from fastapi import UploadFile, HTTPException
from PIL import Image

logger = logging.getLogger(__name__)

# Pillow format name -> media type accepted by the vision model
SUPPORTED_IMAGE_FORMATS = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "GIF": "image/gif",
    "WEBP": "image/webp",
}


async def read_upload_file_securely(file: UploadFile, max_size_bytes: int) -> bytes:
    """
    Securely reads an uploaded file, ensuring it doesn't exceed the maximum size.
    Reads in chunks to prevent memory exhaustion DoS attacks.

    Args:
        file: The FastAPI UploadFile object
        max_size_bytes: Maximum allowed file size in bytes

    Returns:
        bytes: The content of the file

    Raises:
        HTTPException: If the file size exceeds the limit
    """
    content = bytearray()
    chunk_size = 1024 * 1024  # 1MB chunks

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break

        content.extend(chunk)

        if len(content) > max_size_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"Image too large. Please use an image under {max_size_bytes / (1024 * 1024):.0f}MB."
            )

    return bytes(content)


def detect_image_media_type(image_content: bytes) -> str:
    """
    Inspect image bytes with Pillow and return the media type.
    The client-declared content type is not trusted.

    Raises:
        HTTPException: 400 if the bytes are not a supported, intact image
    """
    try:
        image = Image.open(io.BytesIO(image_content))
        img_format = image.format
        image.verify()  # Check for corruption/invalid format
    except Exception as e:
        logger.info("Image validation failed: %s", e)
        raise HTTPException(status_code=400, detail="Invalid image file.")

    if img_format not in SUPPORTED_IMAGE_FORMATS:
        raise HTTPException(
            status_code=400,
            detail="Invalid image format. Please use JPEG, PNG, GIF, or WebP."
        )

    return SUPPORTED_IMAGE_FORMATS[img_format]
