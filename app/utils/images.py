"""
Storage of uploaded user and project images on the local filesystem.

Stored images are referenced by their path relative to the upload root
(e.g. ``images/3f0c....png``) and served by the static mount in `main.py`.
Removal is best-effort: the database record is authoritative, a leftover
file is only logged.
"""

import asyncio
import uuid
from pathlib import Path

from fastapi import UploadFile

from app.config import settings
from app.exceptions import ValidationFailed
from app.utils.logger import setup_logger

logger = setup_logger("images")

IMAGE_FOLDER = "images"
MIME_TYPE_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpeg",
    "image/jpg": "jpg",
}
MAX_IMAGE_BYTES = 500 * 1024


def upload_root() -> Path:
    return Path(settings.upload_dir)


async def save_image(upload: UploadFile) -> str:
    """Validate and store an uploaded image; return its relative path."""
    extension = MIME_TYPE_EXTENSIONS.get(upload.content_type or "")
    if extension is None:
        raise ValidationFailed("Invalid image type, use png, jpg or jpeg")

    content = await upload.read()
    if not content:
        raise ValidationFailed("Uploaded image is empty")
    if len(content) > MAX_IMAGE_BYTES:
        raise ValidationFailed("Uploaded image is too large")

    relative_path = f"{IMAGE_FOLDER}/{uuid.uuid4()}.{extension}"
    target = upload_root() / relative_path
    target.parent.mkdir(parents=True, exist_ok=True)
    await asyncio.to_thread(target.write_bytes, content)
    logger.debug(f"Stored upload '{upload.filename}' as {relative_path}")
    return relative_path


def remove_image(relative_path: str | None) -> bool:
    """Delete a stored image. Never raises; returns whether a file was removed."""
    if not relative_path:
        return False

    root = upload_root().resolve()
    target = (root / relative_path).resolve()
    if not target.is_relative_to(root):
        logger.warning(f"Refusing to remove image outside upload root: {relative_path}")
        return False

    try:
        target.unlink()
        return True
    except OSError as e:
        logger.warning(f"Could not remove image {relative_path}: {e}")
        return False
