from pydantic import BaseModel, Field
from typing import Optional, List
from uuid import UUID
from decimal import Decimal
from datetime import datetime

from catalog_manager.schemas.common import NonBlankStr
from catalog_manager.schemas.supplier import SupplierResponse


class ProductCreate(BaseModel):
    name: NonBlankStr = Field(..., min_length=1, max_length=500, description="Product name", examples=["Widget"])
    description: NonBlankStr = Field(..., min_length=1, description="Product description", examples=["A very useful widget"])
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, description="Unit price", examples=["19.99"])
    supplier_id: UUID = Field(..., description="Supplier UUID (must belong to the caller)")


class ProductUpdate(BaseModel):
    name: NonBlankStr = Field(..., min_length=1, max_length=500, description="Product name")
    description: NonBlankStr = Field(..., min_length=1, description="Product description")
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, description="Unit price")
    supplier_id: Optional[UUID] = Field(
        None,
        description="New supplier UUID. Omit to keep the current supplier. "
                    "Clients confirm the password via /api/auth/verify-password before changing it."
    )


class ProductImageResponse(BaseModel):
    id: UUID = Field(..., description="Image UUID")
    path: str = Field(..., description="Storage locator", examples=["/uploads/5c1e...-widget.png"])
    url: str = Field(..., description="Public URL of the image")
    created_at: datetime


class ProductResponse(BaseModel):
    id: UUID = Field(..., description="Product UUID")
    name: str
    description: str
    price: float = Field(..., description="Unit price", examples=[19.99])
    supplier_id: UUID
    supplier: SupplierResponse
    primary_image_id: Optional[UUID] = Field(None, description="UUID of the primary image, if any")
    primary_image: Optional[ProductImageResponse] = None
    images: List[ProductImageResponse] = Field(default_factory=list, description="Images, newest first")
    created_at: datetime
    updated_at: datetime


class ImageUploadResponse(BaseModel):
    message: str
    image: ProductImageResponse
    product: ProductResponse


class ProductMutationResponse(BaseModel):
    message: str
    product: ProductResponse
