from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
import logging

from catalog_manager.config import settings
from catalog_manager.db.database import init_db
from catalog_manager.errors import CatalogError
from catalog_manager.api import auth, suppliers, products, images, health

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting Catalog Manager...")
    await init_db()
    logger.info(f"Image provider: {settings.image_provider}")
    logger.info("Catalog Manager started successfully")
    yield
    # Shutdown
    logger.info("Shutting down Catalog Manager...")


app = FastAPI(
    title="Catalog Manager",
    description="""
    Supplier and product catalog management, scoped per user account.

    **Features:**
    - Account registration and login
    - Supplier CRUD
    - Product CRUD and search over product and supplier names
    - Multiple images per product with a designated primary image
    - Password re-confirmation before changing a product's supplier

    **Authentication:**
    Every endpoint except register, login and health requires the session token
    returned by register/login:
    ```
    Authorization: Bearer <token>
    ```

    **Errors:**
    Errors answer `{"error_type": "<kind>", "detail": "<message>"}` where kind is one of
    `validation_error`, `not_found`, `forbidden`, `unauthorized`,
    `reauthentication_failed`, `conflict`, `internal_error`.
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "Origin", "X-Requested-With"],
    max_age=3600,
)


def custom_openapi():
    """Custom OpenAPI schema with JWT Bearer authentication"""
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )

    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": "Session token from /api/auth/login. Format: Bearer <token>"
        }
    }

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    """Render domain errors with their stable kind"""
    if exc.status_code >= 500:
        logger.error(
            f"{type(exc).__name__}: {exc.message}",
            exc_info=exc,
            extra={"path": request.url.path, "method": request.method}
        )
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.kind}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Validation error handler
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors"""
    logger.warning(
        f"Validation error: {exc.errors()}",
        extra={
            "path": request.url.path,
            "method": request.method,
        }
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error_type": "validation_error", "detail": jsonable_encoder(exc.errors())}
    )


# Global exception handler for unhandled exceptions
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log unexpected failures; the caller only sees a generic message"""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
        exc_info=exc,
        extra={
            "path": request.url.path,
            "method": request.method,
        }
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error_type": "internal_error", "detail": "Internal server error"}
    )


# Include routers
app.include_router(health.router, prefix="/api")
app.include_router(auth.router, prefix="/api")
app.include_router(suppliers.router, prefix="/api")
app.include_router(products.router, prefix="/api")
app.include_router(images.router, prefix="/api")

# Locally stored uploads are served straight from disk
if settings.image_provider == "local":
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")


@app.get("/")
async def root():
    return {"service": settings.app_name, "version": "1.0.0"}
