"""
Abstract base class for image providers
"""
from abc import ABC, abstractmethod
from typing import Optional


class ImageProvider(ABC):
    """Abstract interface for image storage providers.

    A provider stores raw image bytes and hands back an opaque locator. The
    locator is what gets persisted on ``ProductImage.path``; it is turned into
    a public URL only when a response is rendered.
    """

    @abstractmethod
    def upload_image(self, image_data: bytes, metadata: Optional[dict] = None) -> Optional[str]:
        """
        Store an image.

        Args:
            image_data: Image bytes
            metadata: Optional metadata (filename, content_type, folder, tags)

        Returns:
            Storage locator if successful, None otherwise
        """
        pass

    @abstractmethod
    def delete_image(self, locator: str) -> bool:
        """
        Delete a stored image.

        Returns:
            True if successful, False otherwise
        """
        pass

    @abstractmethod
    def get_image_url(self, locator: str) -> str:
        """Public URL for a stored image"""
        pass
