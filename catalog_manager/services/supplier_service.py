from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import logging

from catalog_manager.errors import ConflictError
from catalog_manager.models.product import Product
from catalog_manager.models.supplier import Supplier
from catalog_manager.schemas.supplier import SupplierCreate, SupplierUpdate
from catalog_manager.services.ownership import resolve_owned

logger = logging.getLogger(__name__)


class SupplierService:
    """Service layer for supplier operations, always scoped to one owner"""

    def __init__(self, db: Session):
        self.db = db

    def list_suppliers(self, owner_id: UUID) -> List[Supplier]:
        return self.db.query(Supplier).filter(
            Supplier.user_id == owner_id
        ).order_by(Supplier.created_at.desc()).all()

    def create_supplier(self, owner_id: UUID, supplier_data: SupplierCreate) -> Supplier:
        supplier = Supplier(
            user_id=owner_id,
            name=supplier_data.name,
            email=supplier_data.email,
            phone=supplier_data.phone,
        )
        self.db.add(supplier)
        self.db.commit()
        self.db.refresh(supplier)

        logger.info(f"Created supplier {supplier.id} for user {owner_id}")
        return supplier

    def update_supplier(self, owner_id: UUID, supplier_id: UUID, supplier_data: SupplierUpdate) -> Supplier:
        supplier = resolve_owned(self.db, Supplier, supplier_id, owner_id, "Supplier")

        supplier.name = supplier_data.name
        supplier.email = supplier_data.email
        supplier.phone = supplier_data.phone

        self.db.commit()
        self.db.refresh(supplier)

        logger.info(f"Updated supplier {supplier.id}")
        return supplier

    def delete_supplier(self, owner_id: UUID, supplier_id: UUID) -> None:
        """Delete a supplier that no product references any more.

        Suppliers still attached to products are kept and reported as a
        conflict, together with the number of products blocking the delete.
        """
        supplier = resolve_owned(self.db, Supplier, supplier_id, owner_id, "Supplier")

        product_count = self.db.query(Product).filter(
            Product.supplier_id == supplier.id
        ).count()
        if product_count:
            logger.warning(f"Refusing to delete supplier {supplier.id}: {product_count} products attached")
            raise ConflictError(
                "Cannot delete supplier with associated products",
                product_count=product_count,
            )

        self.db.delete(supplier)
        self.db.commit()
        logger.info(f"Deleted supplier {supplier_id}")
