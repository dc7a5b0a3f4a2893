from sqlalchemy import Column, Text, Numeric, DateTime, ForeignKey, CheckConstraint, Index, Uuid
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import uuid
from catalog_manager.db.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Product(Base):
    __tablename__ = "products"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    supplier_id = Column(Uuid(as_uuid=True), ForeignKey("suppliers.id"), nullable=False)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    # Points at one of this product's own images, or NULL. The foreign key
    # (ON DELETE SET NULL) is added by migration 001 to avoid a create-time cycle.
    primary_image_id = Column(Uuid(as_uuid=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("price >= 0", name="non_negative_price"),
        Index("idx_products_user_created", "user_id", "created_at"),
        Index("idx_products_supplier", "supplier_id"),
    )

    owner = relationship("User", back_populates="products")
    supplier = relationship("Supplier", back_populates="products")
    images = relationship(
        "ProductImage",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductImage.created_at.desc()",
    )

    @property
    def primary_image(self):
        """The image referenced by primary_image_id, if it is loaded in images"""
        if self.primary_image_id is None:
            return None
        for image in self.images:
            if image.id == self.primary_image_id:
                return image
        return None
