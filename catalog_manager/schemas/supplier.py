from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime

from catalog_manager.schemas.common import NonBlankStr


class SupplierCreate(BaseModel):
    name: NonBlankStr = Field(..., min_length=1, max_length=255, description="Supplier name", examples=["Acme Parts"])
    email: NonBlankStr = Field(..., min_length=1, max_length=320, description="Supplier contact email", examples=["sales@acme.test"])
    phone: NonBlankStr = Field(..., min_length=1, max_length=64, description="Supplier contact phone", examples=["+1 555 0100"])


class SupplierUpdate(SupplierCreate):
    """Full replacement of a supplier's editable fields (no partial update)"""


class SupplierResponse(BaseModel):
    id: UUID = Field(..., description="Supplier UUID")
    name: str
    email: str
    phone: str
    created_at: datetime = Field(..., description="Creation timestamp")

    class Config:
        from_attributes = True
