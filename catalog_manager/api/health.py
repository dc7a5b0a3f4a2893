from fastapi import APIRouter
from pydantic import BaseModel, Field
from catalog_manager.config import settings

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    status: str = Field(..., description="Service health status", examples=["ok"])
    service: str = Field(..., description="Service name", examples=["catalog-manager"])
    version: str = Field(..., description="Service version", examples=["1.0.0"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="""
    Health check endpoint for monitoring and load balancer health checks.
    """
)
async def health():
    """Health check endpoint"""
    return HealthResponse(
        status="ok",
        service=settings.app_name,
        version="1.0.0"
    )
