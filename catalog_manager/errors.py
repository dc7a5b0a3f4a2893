"""
Error taxonomy shared by the service layer and the HTTP exception handlers.

Every error carries a stable machine-readable ``kind`` and the HTTP status it
is rendered with. Services raise these; ``catalog_manager.main`` turns them
into ``{"error_type": kind, "detail": message}`` responses.
"""
from typing import Any, Dict, Optional


class CatalogError(Exception):
    """Base class for errors reported to the caller"""

    kind = "internal_error"
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, **extra: Any):
        self.message = message or self.default_message
        self.extra: Dict[str, Any] = extra
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body = {"error_type": self.kind, "detail": self.message}
        body.update(self.extra)
        return body


class InvalidRequestError(CatalogError):
    """Missing or malformed input; nothing was mutated"""
    kind = "validation_error"
    status_code = 400
    default_message = "Invalid request"


class NotFoundError(CatalogError):
    """Entity is absent or owned by somebody else"""
    kind = "not_found"
    status_code = 404
    default_message = "Not found"


class ForbiddenError(CatalogError):
    """Entity was located by its own id but belongs to another user"""
    kind = "forbidden"
    status_code = 403
    default_message = "Forbidden"


class UnauthorizedError(CatalogError):
    kind = "unauthorized"
    status_code = 401
    default_message = "Unauthorized"


class ReauthenticationFailedError(CatalogError):
    # 400 rather than 401: clients treat 401 as "session expired, log out"
    kind = "reauthentication_failed"
    status_code = 400
    default_message = "Invalid password"


class ConflictError(CatalogError):
    kind = "conflict"
    status_code = 409
    default_message = "Conflict"


class InternalError(CatalogError):
    pass


class ImageStorageError(InternalError):
    default_message = "Failed to store image"
