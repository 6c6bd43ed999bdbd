"""
Base Pydantic Schemas
Common schemas and base classes for request/response models
"""

from datetime import datetime
from typing import Optional, Any, Dict, List
from pydantic import BaseModel, Field, ConfigDict


class TimestampMixin(BaseModel):
    """Mixin for timestamp fields"""
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class BaseSchema(BaseModel):
    """Base schema with common configuration"""
    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
        str_strip_whitespace=True,
        use_enum_values=True
    )


class BaseCreateSchema(BaseSchema):
    """Base schema for creation requests"""
    pass


class BaseUpdateSchema(BaseSchema):
    """Base schema for update requests"""
    pass


class BaseResponseSchema(BaseSchema, TimestampMixin):
    """Base schema for API responses"""
    id: int = Field(..., description="Unique identifier")


class PaginatedResponse(BaseModel):
    """Page envelope returned by every list endpoint"""
    items: List[Any] = Field(..., description="Items on the requested page")
    total_items: int = Field(..., description="Total number of matching items")
    total_pages: int = Field(..., description="Number of pages for the requested size")
    current_page: int = Field(..., description="Zero-based page number")
    size: int = Field(..., description="Requested page size")


class SuccessResponse(BaseModel):
    """Success response schema"""
    message: str = Field(..., description="Success message")
    data: Optional[Dict[str, Any]] = Field(None, description="Additional data")
