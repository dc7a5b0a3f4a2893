"""
Password hashing and bearer session tokens.

Passwords are hashed with bcrypt; session tokens are HS256 JWTs signed with
``JWT_SECRET`` and carrying the caller's ``user_id`` and ``email``.
"""
import jwt
import bcrypt
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
from uuid import UUID
from catalog_manager.config import settings
from catalog_manager.errors import UnauthorizedError

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _password_bytes(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:BCRYPT_MAX_BYTES]


class CredentialService:
    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        expires_minutes: Optional[int] = None,
        bcrypt_rounds: Optional[int] = None,
    ):
        self.secret = secret or settings.jwt_secret
        self.algorithm = algorithm or settings.jwt_algorithm
        self.expires_minutes = expires_minutes or settings.jwt_expires_minutes
        self.bcrypt_rounds = bcrypt_rounds or settings.bcrypt_rounds

    def hash_password(self, plaintext: str) -> str:
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        return bcrypt.hashpw(_password_bytes(plaintext), salt).decode("utf-8")

    def verify_password(self, plaintext: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(_password_bytes(plaintext), password_hash.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt hash
            logger.error("Stored password hash is malformed")
            return False

    def issue_token(self, user_id: UUID, email: str) -> str:
        """Sign a session token for the given user"""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "user_id": str(user_id),
            "email": email,
            "iat": now,
            "exp": now + timedelta(minutes=self.expires_minutes),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def validate_token(self, token: str) -> Dict:
        """
        Verify a session token.
        Returns the decoded claims with ``user_id`` converted to a UUID.
        Raises UnauthorizedError when the token is expired, forged or malformed.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            logger.warning("JWT token has expired")
            raise UnauthorizedError("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.warning(f"JWT verification failed: {e}")
            raise UnauthorizedError("Invalid authentication credentials")

        try:
            payload["user_id"] = UUID(str(payload.get("user_id") or payload["sub"]))
        except ValueError:
            logger.warning("Token carries a malformed user_id claim")
            raise UnauthorizedError("Invalid authentication credentials")
        return payload


credential_service = CredentialService()
