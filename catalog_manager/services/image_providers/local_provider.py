"""
Local filesystem image provider

Images are written under ``UPLOAD_DIR`` and served by the application at
``/uploads``. Locators have the form ``/uploads/<file name>``; the public URL
is ``PUBLIC_BASE_URL`` followed by the locator.
"""
import logging
import os
import uuid
from pathlib import Path
from typing import Optional
from catalog_manager.services.image_providers.base import ImageProvider
from catalog_manager.config import settings

logger = logging.getLogger(__name__)

UPLOADS_PREFIX = "/uploads/"

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".svg"}

CONTENT_TYPE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/bmp": ".bmp",
    "image/svg+xml": ".svg",
}


def _pick_extension(metadata: dict) -> str:
    ext = os.path.splitext(metadata.get("filename") or "")[1].lower()
    if ext in ALLOWED_EXTENSIONS:
        return ext
    return CONTENT_TYPE_EXTENSIONS.get(metadata.get("content_type") or "", "")


class LocalImageProvider(ImageProvider):
    """Filesystem implementation of ImageProvider"""

    def __init__(self, upload_dir: Optional[str] = None, public_base_url: Optional[str] = None):
        self.upload_dir = Path(upload_dir or settings.upload_dir)
        self.public_base_url = (settings.public_base_url if public_base_url is None else public_base_url).rstrip("/")

    def _file_for(self, locator: str) -> Path:
        # Only the base name is trusted; locators never address sub-directories
        return self.upload_dir / os.path.basename(locator)

    def upload_image(self, image_data: bytes, metadata: Optional[dict] = None) -> Optional[str]:
        metadata = metadata or {}
        file_name = f"{uuid.uuid4().hex}{_pick_extension(metadata)}"
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            self._file_for(file_name).write_bytes(image_data)
        except OSError as e:
            logger.error(f"Failed to write image to {self.upload_dir}: {e}", exc_info=True)
            return None

        locator = f"{UPLOADS_PREFIX}{file_name}"
        logger.info(f"Stored image locally: {locator} ({len(image_data)} bytes)")
        return locator

    def delete_image(self, locator: str) -> bool:
        path = self._file_for(locator)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning(f"Image file already gone: {path}")
            return False
        except OSError as e:
            logger.error(f"Failed to delete image file {path}: {e}")
            return False
        logger.info(f"Deleted local image: {locator}")
        return True

    def get_image_url(self, locator: str) -> str:
        return f"{self.public_base_url}{locator}"
