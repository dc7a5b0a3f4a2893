from fastapi import Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
from catalog_manager.auth.credentials import credential_service
from catalog_manager.errors import UnauthorizedError
import logging

logger = logging.getLogger(__name__)

# auto_error is off so a missing header is reported as 401 with our error body
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme)
) -> dict:
    """Dependency to extract and validate the bearer session token.

    Returns ``{"user_id": UUID, "email": str, "payload": dict}``. The caller
    identity is then passed explicitly into every service call.
    """
    if not credentials or not credentials.credentials:
        logger.warning("Authentication credentials missing")
        raise UnauthorizedError("Authorization header missing")

    payload = credential_service.validate_token(credentials.credentials)
    user_id = payload["user_id"]
    email = payload.get("email")

    logger.debug(f"Authenticated user: {email} (user_id: {user_id})")

    return {
        "user_id": user_id,
        "email": email,
        "payload": payload,
    }
