"""
Newsletter Schemas
Request/response models for newsletter management
"""

from typing import Optional
from pydantic import Field, field_validator

from newsletter_api.schemas.base import (
    BaseSchema,
    BaseCreateSchema,
    BaseUpdateSchema,
    BaseResponseSchema,
)


class NewsletterCreate(BaseCreateSchema):
    """Schema for creating a newsletter"""
    name: str = Field(..., min_length=1, max_length=255, description="Newsletter name")
    description: Optional[str] = Field(None, max_length=1000, description="Newsletter description")
    user_id: int = Field(..., ge=1, description="Owning user")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Newsletter name cannot be empty")
        return v.strip()


class NewsletterUpdate(BaseUpdateSchema):
    """Schema for editing a newsletter; the owner must always be sent"""
    name: str = Field(..., min_length=1, max_length=255, description="Newsletter name")
    description: Optional[str] = Field(None, max_length=1000, description="Newsletter description")
    user_id: int = Field(..., ge=1, description="Owning user")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Newsletter name cannot be empty")
        return v.strip()


class NewsletterRead(BaseResponseSchema):
    """Newsletter response"""
    name: str
    description: Optional[str] = None
    active: bool
    user_id: int


class NewsletterStatusResponse(BaseSchema):
    """Activation / deactivation response"""
    message: str
    newsletter: NewsletterRead
