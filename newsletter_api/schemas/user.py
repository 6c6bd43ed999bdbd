"""
User schemas for the user controller.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator

from newsletter_api.schemas.base import BaseCreateSchema, BaseResponseSchema, BaseSchema, BaseUpdateSchema


def _normalize_email(value: str) -> str:
    value = value.strip().lower()
    if "@" not in value or value.startswith("@") or value.endswith("@"):
        raise ValueError("Invalid email format")
    return value


class UserRead(BaseResponseSchema):
    name: str
    email: str
    is_super: bool
    pending_confirm: bool
    pending_password: bool


class UserCreate(BaseCreateSchema):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=254)
    password: str = Field(..., min_length=6, max_length=128)
    is_super: bool = Field(False, description="Grant super privileges (pending confirmation)")

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _normalize_email(value)


class UserUpdate(BaseUpdateSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[str] = Field(default=None, max_length=254)
    password: Optional[str] = Field(default=None, min_length=6, max_length=128)
    # Only honoured for super callers
    pending_confirm: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _normalize_email(value)


class UserPromoteResponse(BaseSchema):
    message: str
    user: UserRead
