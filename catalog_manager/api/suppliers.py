from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
from catalog_manager.db.database import get_db
from catalog_manager.schemas.common import MessageResponse
from catalog_manager.schemas.supplier import SupplierCreate, SupplierUpdate, SupplierResponse
from catalog_manager.auth.dependencies import get_current_user
from catalog_manager.services.supplier_service import SupplierService

router = APIRouter(
    prefix="/suppliers",
    tags=["Suppliers"]
)


def get_supplier_service(db: Session = Depends(get_db)) -> SupplierService:
    """Dependency to get supplier service"""
    return SupplierService(db)


@router.get(
    "",
    response_model=List[SupplierResponse],
    summary="List suppliers",
    description="""
    List the authenticated user's suppliers, newest first.
    """,
    responses={
        200: {"description": "List of suppliers"},
        401: {"description": "Authentication required"}
    }
)
async def list_suppliers(
    current_user: dict = Depends(get_current_user),
    supplier_service: SupplierService = Depends(get_supplier_service)
):
    return supplier_service.list_suppliers(current_user["user_id"])


@router.post(
    "",
    response_model=SupplierResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a supplier",
    description="""
    Create a supplier owned by the authenticated user.

    `name`, `email` and `phone` are all required.
    """,
    responses={
        201: {"description": "Supplier created"},
        401: {"description": "Authentication required"},
        422: {"description": "Missing or blank fields"}
    }
)
async def create_supplier(
    supplier_data: SupplierCreate,
    current_user: dict = Depends(get_current_user),
    supplier_service: SupplierService = Depends(get_supplier_service)
):
    return supplier_service.create_supplier(current_user["user_id"], supplier_data)


@router.put(
    "/{supplier_id}",
    response_model=SupplierResponse,
    summary="Update a supplier",
    description="""
    Replace a supplier's name, email and phone. Partial updates are not supported.

    Suppliers of other users are reported as not found.
    """,
    responses={
        200: {"description": "Supplier updated"},
        401: {"description": "Authentication required"},
        404: {"description": "Supplier not found"}
    }
)
async def update_supplier(
    supplier_id: UUID,
    supplier_data: SupplierUpdate,
    current_user: dict = Depends(get_current_user),
    supplier_service: SupplierService = Depends(get_supplier_service)
):
    return supplier_service.update_supplier(current_user["user_id"], supplier_id, supplier_data)


@router.delete(
    "/{supplier_id}",
    response_model=MessageResponse,
    summary="Delete a supplier",
    description="""
    Delete a supplier that has no products.

    If products still reference the supplier the request answers 409 with a
    `product_count` field and nothing is deleted.
    """,
    responses={
        200: {"description": "Supplier deleted"},
        401: {"description": "Authentication required"},
        404: {"description": "Supplier not found"},
        409: {"description": "Supplier still has products"}
    }
)
async def delete_supplier(
    supplier_id: UUID,
    current_user: dict = Depends(get_current_user),
    supplier_service: SupplierService = Depends(get_supplier_service)
):
    supplier_service.delete_supplier(current_user["user_id"], supplier_id)
    return MessageResponse(message="Supplier deleted successfully")
