from fastapi import APIRouter, Depends, status, UploadFile, File, Form
from sqlalchemy.orm import Session
from uuid import UUID
from catalog_manager.config import settings
from catalog_manager.db.database import get_db
from catalog_manager.schemas.product import ImageUploadResponse, ProductMutationResponse
from catalog_manager.auth.dependencies import get_current_user
from catalog_manager.services import get_image_provider
from catalog_manager.services.image_providers.base import ImageProvider
from catalog_manager.services.image_service import ImageService
from catalog_manager.services.product_service import image_to_response_dict, product_to_response_dict

router = APIRouter(
    prefix="/products",
    tags=["Images"]
)


def get_image_service(
    db: Session = Depends(get_db),
    image_provider: ImageProvider = Depends(get_image_provider)
) -> ImageService:
    """Dependency to get image service"""
    return ImageService(db, image_provider)


@router.post(
    "/upload",
    response_model=ImageUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a product image",
    description="""
    Upload an image file for one of the authenticated user's products
    (multipart form with `product_id` and `image`).

    The first image of a product without a primary image becomes its primary
    image; later uploads leave the primary unchanged.
    """,
    responses={
        201: {"description": "Image uploaded"},
        400: {"description": "Missing file or not an image"},
        401: {"description": "Authentication required"},
        404: {"description": "Product not found"}
    }
)
async def upload_product_image(
    product_id: UUID = Form(..., description="Product UUID"),
    image: UploadFile = File(..., description="Image file to upload"),
    current_user: dict = Depends(get_current_user),
    image_service: ImageService = Depends(get_image_service)
):
    # One byte past the limit is enough to reject oversized uploads
    image_data = await image.read(settings.max_upload_bytes + 1)
    stored, product = image_service.upload_image(
        current_user["user_id"],
        product_id,
        image_data,
        filename=image.filename,
        content_type=image.content_type,
    )
    return {
        "message": "Image uploaded successfully",
        "image": image_to_response_dict(stored, image_service.image_provider),
        "product": product_to_response_dict(product, image_service.image_provider),
    }


@router.delete(
    "/images/{image_id}",
    response_model=ProductMutationResponse,
    summary="Delete a product image",
    description="""
    Delete an image. If it was the primary image, the most recently uploaded
    remaining image becomes primary (or none, if it was the last one).
    """,
    responses={
        200: {"description": "Image deleted"},
        401: {"description": "Authentication required"},
        403: {"description": "Image belongs to another user's product"},
        404: {"description": "Image not found"}
    }
)
async def delete_product_image(
    image_id: UUID,
    current_user: dict = Depends(get_current_user),
    image_service: ImageService = Depends(get_image_service)
):
    product = image_service.delete_image(current_user["user_id"], image_id)
    return {
        "message": "Image deleted successfully",
        "product": product_to_response_dict(product, image_service.image_provider),
    }


@router.put(
    "/images/{image_id}/primary",
    response_model=ProductMutationResponse,
    summary="Set the primary product image",
    responses={
        200: {"description": "Primary image updated"},
        401: {"description": "Authentication required"},
        403: {"description": "Image belongs to another user's product"},
        404: {"description": "Image not found"}
    }
)
async def set_primary_image(
    image_id: UUID,
    current_user: dict = Depends(get_current_user),
    image_service: ImageService = Depends(get_image_service)
):
    product = image_service.set_primary_image(current_user["user_id"], image_id)
    return {
        "message": "Primary image updated successfully",
        "product": product_to_response_dict(product, image_service.image_provider),
    }
