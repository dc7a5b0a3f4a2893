from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
from catalog_manager.db.database import get_db
from catalog_manager.schemas.common import MessageResponse
from catalog_manager.schemas.product import ProductCreate, ProductUpdate, ProductResponse
from catalog_manager.auth.dependencies import get_current_user
from catalog_manager.services import get_image_provider
from catalog_manager.services.image_providers.base import ImageProvider
from catalog_manager.services.product_service import ProductService

router = APIRouter(
    prefix="/products",
    tags=["Products"]
)


def get_product_service(
    db: Session = Depends(get_db),
    image_provider: ImageProvider = Depends(get_image_provider)
) -> ProductService:
    """Dependency to get product service"""
    return ProductService(db, image_provider)


@router.get(
    "",
    response_model=List[ProductResponse],
    summary="List products",
    description="""
    List the authenticated user's products, newest first, with their supplier,
    images (newest first) and primary image.
    """,
    responses={
        200: {"description": "List of products"},
        401: {"description": "Authentication required"}
    }
)
async def list_products(
    current_user: dict = Depends(get_current_user),
    product_service: ProductService = Depends(get_product_service)
):
    products = product_service.list_products(current_user["user_id"])
    return [product_service._product_to_response_dict(product) for product in products]


@router.get(
    "/search",
    response_model=List[ProductResponse],
    summary="Search products",
    description="""
    Case-insensitive substring search over product name and supplier name,
    restricted to the authenticated user's products.
    """,
    responses={
        200: {"description": "Matching products"},
        400: {"description": "Search query is required"},
        401: {"description": "Authentication required"}
    }
)
async def search_products(
    q: str = Query("", description="Text to look for in product or supplier names"),
    current_user: dict = Depends(get_current_user),
    product_service: ProductService = Depends(get_product_service)
):
    products = product_service.search_products(current_user["user_id"], q)
    return [product_service._product_to_response_dict(product) for product in products]


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product",
    description="""
    Create a product for one of the authenticated user's suppliers.

    `name`, `description`, `price` (>= 0) and `supplier_id` are required.
    A supplier that does not exist or belongs to someone else answers 404.
    """,
    responses={
        201: {"description": "Product created"},
        401: {"description": "Authentication required"},
        404: {"description": "Supplier not found"},
        422: {"description": "Invalid request data"}
    }
)
async def create_product(
    product_data: ProductCreate,
    current_user: dict = Depends(get_current_user),
    product_service: ProductService = Depends(get_product_service)
):
    product = product_service.create_product(current_user["user_id"], product_data)
    return product_service._product_to_response_dict(product)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Update a product",
    description="""
    Replace a product's name, description and price.

    **Changing the supplier:**
    `supplier_id` is optional; omit it to keep the current supplier. Clients
    must re-confirm the user's password via `POST /api/auth/verify-password`
    before sending a different `supplier_id`.
    """,
    responses={
        200: {"description": "Product updated"},
        401: {"description": "Authentication required"},
        404: {"description": "Product or supplier not found"},
        422: {"description": "Invalid request data"}
    }
)
async def update_product(
    product_id: UUID,
    product_data: ProductUpdate,
    current_user: dict = Depends(get_current_user),
    product_service: ProductService = Depends(get_product_service)
):
    product = product_service.update_product(current_user["user_id"], product_id, product_data)
    return product_service._product_to_response_dict(product)


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    summary="Delete a product",
    description="""
    Permanently delete a product and all of its images.
    """,
    responses={
        200: {"description": "Product deleted"},
        401: {"description": "Authentication required"},
        404: {"description": "Product not found"}
    }
)
async def delete_product(
    product_id: UUID,
    current_user: dict = Depends(get_current_user),
    product_service: ProductService = Depends(get_product_service)
):
    product_service.delete_product(current_user["user_id"], product_id)
    return MessageResponse(message="Product deleted successfully")
