# Package exports - these allow cleaner imports like:
# from catalog_manager.schemas import ProductCreate, ProductResponse
from catalog_manager.schemas.auth import RegisterRequest, LoginRequest, VerifyPasswordRequest, AuthResponse, VerifyPasswordResponse
from catalog_manager.schemas.supplier import SupplierCreate, SupplierUpdate, SupplierResponse
from catalog_manager.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductImageResponse,
    ImageUploadResponse,
    ProductMutationResponse,
)
from catalog_manager.schemas.common import MessageResponse
