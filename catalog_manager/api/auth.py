from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from catalog_manager.db.database import get_db
from catalog_manager.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    VerifyPasswordRequest,
    AuthResponse,
    VerifyPasswordResponse,
)
from catalog_manager.auth.dependencies import get_current_user
from catalog_manager.services.user_service import UserService

router = APIRouter(
    prefix="/auth",
    tags=["Auth"]
)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency to get user service"""
    return UserService(db)


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
    description="""
    Create an account and return a session token.

    The email must not be registered yet.
    """,
    responses={
        201: {"description": "Account created"},
        409: {"description": "User already exists"},
        422: {"description": "Missing email or password"}
    }
)
async def register(
    request: RegisterRequest,
    user_service: UserService = Depends(get_user_service)
):
    return user_service.register(request.email, request.password)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log in",
    description="""
    Exchange email and password for a session token.

    Unknown emails and wrong passwords both answer 401 "Invalid credentials".
    """,
    responses={
        200: {"description": "Logged in"},
        401: {"description": "Invalid credentials"}
    }
)
async def login(
    request: LoginRequest,
    user_service: UserService = Depends(get_user_service)
):
    return user_service.login(request.email, request.password)


@router.post(
    "/verify-password",
    response_model=VerifyPasswordResponse,
    summary="Re-confirm the current password",
    description="""
    Step-up confirmation used before changing a product's supplier.

    **Requirements:**
    - Authentication: Required (session token)

    A wrong password answers **400** with `error_type: reauthentication_failed`,
    never 401, so clients do not mistake it for an expired session. The session
    token remains valid either way.
    """,
    responses={
        200: {"description": "Password verified"},
        400: {"description": "Invalid password"},
        401: {"description": "Authentication required"}
    }
)
async def verify_password(
    request: VerifyPasswordRequest,
    current_user: dict = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    return user_service.verify_password(current_user["user_id"], request.password)
