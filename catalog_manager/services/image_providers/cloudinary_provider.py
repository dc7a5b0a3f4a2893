"""
Cloudinary image provider implementation
"""
import cloudinary
import cloudinary.uploader
import logging
from typing import Optional
from catalog_manager.services.image_providers.base import ImageProvider
from catalog_manager.config import settings

logger = logging.getLogger(__name__)


class CloudinaryImageProvider(ImageProvider):
    """Cloudinary implementation of ImageProvider; locators are public_ids"""

    def __init__(self):
        self.cloud_name = settings.cloudinary_cloud_name
        self.api_key = settings.cloudinary_api_key
        self.api_secret = settings.cloudinary_api_secret

        if not self.is_configured:
            logger.warning("Cloudinary not fully configured (missing cloud_name, api_key, or api_secret)")
        else:
            cloudinary.config(
                cloud_name=self.cloud_name,
                api_key=self.api_key,
                api_secret=self.api_secret,
                secure=True  # Use HTTPS
            )

    @property
    def is_configured(self) -> bool:
        return all([self.cloud_name, self.api_key, self.api_secret])

    def upload_image(self, image_data: bytes, metadata: Optional[dict] = None) -> Optional[str]:
        """
        Upload an image to Cloudinary.
        Returns the public_id if successful, None otherwise.
        """
        if not self.is_configured:
            logger.warning("Cloudinary not configured")
            return None

        metadata = metadata or {}
        upload_options = {
            "resource_type": "image",
            "folder": metadata.get("folder", "products"),
        }
        if "tags" in metadata:
            upload_options["tags"] = metadata["tags"]

        try:
            result = cloudinary.uploader.upload(image_data, **upload_options)
        except Exception as e:
            logger.error(f"Failed to upload image to Cloudinary: {e}", exc_info=True)
            return None

        public_id = result.get("public_id")
        if not public_id:
            logger.error(f"Cloudinary upload succeeded but no public_id returned: {result}")
            return None

        logger.info(f"Successfully uploaded image to Cloudinary: {public_id}")
        return public_id

    def delete_image(self, locator: str) -> bool:
        if not self.is_configured:
            logger.warning("Cloudinary not configured")
            return False

        try:
            result = cloudinary.uploader.destroy(locator, resource_type="image")
        except Exception as e:
            logger.error(f"Failed to delete image from Cloudinary: {e}", exc_info=True)
            return False

        if result.get("result") != "ok":
            logger.error(f"Cloudinary delete failed: {result}")
            return False

        logger.info(f"Successfully deleted image from Cloudinary: {locator}")
        return True

    def get_image_url(self, locator: str) -> str:
        return cloudinary.CloudinaryImage(locator).build_url(secure=True, cloud_name=self.cloud_name)
