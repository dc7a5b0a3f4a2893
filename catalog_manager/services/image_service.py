"""
Images attached to a product and the product's primary image.

``Product.primary_image_id`` is always NULL or the id of one of the product's
own images:

* the first image uploaded to a product without a primary becomes primary;
* ``set_primary`` moves it to any image of the same product;
* deleting the primary moves it to the most recently created remaining image,
  or clears it when none remain. The pointer update is flushed before the
  row delete, inside the same transaction.
"""
from sqlalchemy.orm import Session
from typing import Optional, Tuple
from uuid import UUID
import logging

from catalog_manager.config import settings
from catalog_manager.errors import ForbiddenError, ImageStorageError, InvalidRequestError, NotFoundError
from catalog_manager.models.product import Product
from catalog_manager.models.product_image import ProductImage
from catalog_manager.services import get_image_provider
from catalog_manager.services.image_providers.base import ImageProvider
from catalog_manager.services.ownership import resolve_owned

logger = logging.getLogger(__name__)


class ImageService:
    """Service layer for product image operations"""

    def __init__(self, db: Session, image_provider: Optional[ImageProvider] = None):
        self.db = db
        self.image_provider = image_provider or get_image_provider()

    def _validate_payload(self, image_data: bytes, content_type: Optional[str]) -> None:
        if not content_type or not content_type.startswith("image/"):
            raise InvalidRequestError("File must be an image")
        if not image_data:
            raise InvalidRequestError("No file uploaded")
        if len(image_data) > settings.max_upload_bytes:
            raise InvalidRequestError(
                f"Image exceeds the maximum upload size of {settings.max_upload_bytes} bytes"
            )

    def _owned_image(self, owner_id: UUID, image_id: UUID) -> Tuple[ProductImage, Product]:
        """Locate an image by its own id, then check the parent product's owner.

        The image id alone identifies the row, so a foreign owner is reported
        as ForbiddenError rather than NotFoundError.
        """
        image = self.db.query(ProductImage).filter(ProductImage.id == image_id).first()
        if not image:
            raise NotFoundError("Image not found")

        product = image.product
        if product.user_id != owner_id:
            logger.warning(f"User {owner_id} attempted to modify image {image_id} of product {product.id}")
            raise ForbiddenError("You can only modify images of your own products")

        return image, product

    def _replacement_for(self, image: ProductImage) -> Optional[ProductImage]:
        """Most recently created other image of the same product"""
        return self.db.query(ProductImage).filter(
            ProductImage.product_id == image.product_id,
            ProductImage.id != image.id,
        ).order_by(ProductImage.created_at.desc(), ProductImage.id.desc()).first()

    def upload_image(
        self,
        owner_id: UUID,
        product_id: UUID,
        image_data: bytes,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> Tuple[ProductImage, Product]:
        """Store an image for one of the caller's products.

        Returns the new image and the refreshed product.
        """
        product = resolve_owned(self.db, Product, product_id, owner_id, "Product")
        self._validate_payload(image_data, content_type)

        locator = self.image_provider.upload_image(
            image_data,
            metadata={
                "filename": filename,
                "content_type": content_type,
                "folder": "products",
                "tags": ["product", str(product.id)],
            }
        )
        if not locator:
            raise ImageStorageError("Failed to store image")

        image = ProductImage(product_id=product.id, path=locator)
        self.db.add(image)
        self.db.flush()

        # Compare-and-set: only promote when no primary is set yet
        promoted = self.db.query(Product).filter(
            Product.id == product.id,
            Product.primary_image_id.is_(None),
        ).update({Product.primary_image_id: image.id}, synchronize_session=False)

        self.db.commit()
        self.db.refresh(image)
        self.db.refresh(product)

        logger.info(
            f"Uploaded image {image.id} to product {product.id}"
            + (" (set as primary)" if promoted else "")
        )
        return image, product

    def delete_image(self, owner_id: UUID, image_id: UUID) -> Product:
        image, product = self._owned_image(owner_id, image_id)
        locator = image.path

        if product.primary_image_id == image.id:
            replacement = self._replacement_for(image)
            product.primary_image_id = replacement.id if replacement else None
            logger.info(
                f"Primary image of product {product.id} moves from {image.id} to "
                f"{replacement.id if replacement else None}"
            )
            # Pointer first, then the row, in one transaction
            self.db.flush()

        self.db.delete(image)
        self.db.commit()
        self.db.refresh(product)

        logger.info(f"Deleted image {image_id} of product {product.id}")

        if not self.image_provider.delete_image(locator):
            logger.warning(f"Stored image {locator} was not removed from storage")

        return product

    def set_primary_image(self, owner_id: UUID, image_id: UUID) -> Product:
        image, product = self._owned_image(owner_id, image_id)

        product.primary_image_id = image.id
        self.db.commit()
        self.db.refresh(product)

        logger.info(f"Set image {image.id} as primary for product {product.id}")
        return product
