from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from uuid import UUID
import logging

from catalog_manager.auth.credentials import CredentialService, credential_service
from catalog_manager.errors import ConflictError, NotFoundError, ReauthenticationFailedError, UnauthorizedError
from catalog_manager.models.user import User

logger = logging.getLogger(__name__)


class UserService:
    """Registration, login and step-up password confirmation"""

    def __init__(self, db: Session, credentials: CredentialService = credential_service):
        self.db = db
        self.credentials = credentials

    def _auth_payload(self, user: User) -> dict:
        return {
            "token": self.credentials.issue_token(user.id, user.email),
            "user": {"id": user.id, "email": user.email},
        }

    def register(self, email: str, password: str) -> dict:
        """Create a user and sign them in. Duplicate emails raise ConflictError."""
        existing = self.db.query(User).filter(User.email == email).first()
        if existing:
            logger.warning(f"Registration rejected, email already in use: {email}")
            raise ConflictError("User already exists")

        user = User(email=email, password_hash=self.credentials.hash_password(password))
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            self.db.rollback()
            logger.warning(f"Registration raced on unique email: {email}")
            raise ConflictError("User already exists")
        self.db.refresh(user)

        logger.info(f"Registered user {user.id}")
        return self._auth_payload(user)

    def login(self, email: str, password: str) -> dict:
        # Unknown email and wrong password answer the same error
        user = self.db.query(User).filter(User.email == email).first()
        if not user or not self.credentials.verify_password(password, user.password_hash):
            logger.warning("Login failed: invalid credentials")
            raise UnauthorizedError("Invalid credentials")

        logger.info(f"User {user.id} logged in")
        return self._auth_payload(user)

    def verify_password(self, user_id: UUID, password: str) -> dict:
        """Step-up check before a sensitive mutation.

        Only the caller's own record is consulted. A mismatch raises
        ReauthenticationFailedError, which is not an authentication failure:
        the session token stays valid. Nothing is granted server-side; the
        client sequences this call before the mutation it protects.
        """
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found")

        if not self.credentials.verify_password(password, user.password_hash):
            logger.warning(f"Password re-confirmation failed for user {user_id}")
            raise ReauthenticationFailedError("Invalid password")

        return {"verified": True}
