"""
Authentication Schemas
"""

from pydantic import Field, field_validator

from newsletter_api.schemas.base import BaseSchema


class LoginRequest(BaseSchema):
    """Login request schema"""
    email: str = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class TokenResponse(BaseSchema):
    """Bearer token issued on login"""
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token lifetime in seconds")
    pending_password: bool = Field(..., description="Caller must change password before anything else")


class ChangePasswordRequest(BaseSchema):
    """Change password request schema"""
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)
