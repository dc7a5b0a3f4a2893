from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload, selectinload
from typing import List, Optional
from uuid import UUID
import logging

from catalog_manager.errors import InvalidRequestError
from catalog_manager.models.product import Product
from catalog_manager.models.product_image import ProductImage
from catalog_manager.models.supplier import Supplier
from catalog_manager.schemas.product import ProductCreate, ProductUpdate
from catalog_manager.services import get_image_provider
from catalog_manager.services.image_providers.base import ImageProvider
from catalog_manager.services.ownership import resolve_owned

logger = logging.getLogger(__name__)


def _escape_like(term: str) -> str:
    # Search terms are literal text, not LIKE patterns
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def image_to_response_dict(image: ProductImage, image_provider: ImageProvider) -> dict:
    return {
        "id": image.id,
        "path": image.path,
        "url": image_provider.get_image_url(image.path),
        "created_at": image.created_at,
    }


def product_to_response_dict(product: Product, image_provider: ImageProvider) -> dict:
    """Convert a Product model to a response dict with supplier and images resolved"""
    images = [image_to_response_dict(image, image_provider) for image in product.images]
    primary = product.primary_image

    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "supplier_id": product.supplier_id,
        "supplier": product.supplier,
        "primary_image_id": product.primary_image_id,
        "primary_image": image_to_response_dict(primary, image_provider) if primary else None,
        "images": images,
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }


class ProductService:
    """Service layer for product operations, always scoped to one owner"""

    def __init__(self, db: Session, image_provider: Optional[ImageProvider] = None):
        self.db = db
        self.image_provider = image_provider or get_image_provider()

    def _product_to_response_dict(self, product: Product) -> dict:
        return product_to_response_dict(product, self.image_provider)

    def _owned_products_query(self, owner_id: UUID):
        return self.db.query(Product).options(
            joinedload(Product.supplier),
            selectinload(Product.images),
        ).filter(Product.user_id == owner_id)

    def list_products(self, owner_id: UUID) -> List[Product]:
        """List the caller's products, newest first"""
        products = self._owned_products_query(owner_id).order_by(Product.created_at.desc()).all()
        logger.info(f"Found {len(products)} products for user {owner_id}")
        return products

    def search_products(self, owner_id: UUID, term: str) -> List[Product]:
        """Case-insensitive substring search over product name and supplier name"""
        term = (term or "").strip()
        if not term:
            raise InvalidRequestError("Search query is required")

        pattern = f"%{_escape_like(term)}%"
        products = self._owned_products_query(owner_id).join(
            Supplier, Product.supplier_id == Supplier.id
        ).filter(
            or_(
                Product.name.ilike(pattern, escape="\\"),
                Supplier.name.ilike(pattern, escape="\\"),
            )
        ).order_by(Product.created_at.desc()).all()

        logger.info(f"Search '{term}' matched {len(products)} products for user {owner_id}")
        return products

    def create_product(self, owner_id: UUID, product_data: ProductCreate) -> Product:
        """Create a product attached to one of the caller's suppliers"""
        supplier = resolve_owned(self.db, Supplier, product_data.supplier_id, owner_id, "Supplier")

        product = Product(
            user_id=owner_id,
            supplier_id=supplier.id,
            name=product_data.name,
            description=product_data.description,
            price=product_data.price,
        )

        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)

        logger.info(f"Created product {product.id} (supplier {supplier.id}) for user {owner_id}")
        return product

    def update_product(self, owner_id: UUID, product_id: UUID, product_data: ProductUpdate) -> Product:
        """Replace a product's fields.

        ``supplier_id`` is optional; when given it must resolve to one of the
        caller's suppliers and becomes the new association, otherwise the
        current supplier is kept.
        """
        product = resolve_owned(self.db, Product, product_id, owner_id, "Product")

        supplier_id = product.supplier_id
        if product_data.supplier_id is not None:
            supplier = resolve_owned(self.db, Supplier, product_data.supplier_id, owner_id, "Supplier")
            if supplier.id != product.supplier_id:
                logger.info(f"Reassigning product {product.id} from supplier {product.supplier_id} to {supplier.id}")
            supplier_id = supplier.id

        product.name = product_data.name
        product.description = product_data.description
        product.price = product_data.price
        product.supplier_id = supplier_id

        self.db.commit()
        self.db.refresh(product)

        logger.info(f"Updated product {product.id}")
        return product

    def delete_product(self, owner_id: UUID, product_id: UUID) -> None:
        """Hard delete a product together with its images"""
        product = resolve_owned(self.db, Product, product_id, owner_id, "Product")
        locators = [image.path for image in product.images]

        # Drop the pointer before its target rows disappear
        product.primary_image_id = None
        self.db.flush()
        self.db.delete(product)
        self.db.commit()

        logger.info(f"Deleted product {product_id} and {len(locators)} images")

        for locator in locators:
            if not self.image_provider.delete_image(locator):
                logger.warning(f"Stored image {locator} of deleted product {product_id} was not removed")
