from sqlalchemy import Column, Text, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import uuid
from catalog_manager.db.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class ProductImage(Base):
    """One uploaded image of a product.

    ``path`` is the opaque locator returned by the image provider; it is
    turned into a public URL by ``ImageProvider.get_image_url``.
    """
    __tablename__ = "product_images"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    path = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("idx_product_images_product_created", "product_id", "created_at"),
    )

    product = relationship("Product", back_populates="images")
