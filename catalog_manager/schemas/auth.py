from pydantic import BaseModel, Field
from uuid import UUID

from catalog_manager.schemas.common import NonBlankStr


class RegisterRequest(BaseModel):
    email: NonBlankStr = Field(..., min_length=1, max_length=320, description="Account email (unique)", examples=["owner@example.com"])
    password: str = Field(..., min_length=1, description="Plain-text password", examples=["s3cret-pass"])


class LoginRequest(BaseModel):
    email: NonBlankStr = Field(..., min_length=1, description="Account email", examples=["owner@example.com"])
    password: str = Field(..., min_length=1, description="Plain-text password")


class VerifyPasswordRequest(BaseModel):
    password: str = Field(..., min_length=1, description="Current password of the signed-in user")


class AuthUser(BaseModel):
    id: UUID
    email: str

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    token: str = Field(..., description="Bearer session token")
    user: AuthUser


class VerifyPasswordResponse(BaseModel):
    verified: bool = Field(..., examples=[True])
