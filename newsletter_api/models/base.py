"""
Base Model Classes
Common fields and functionality for all models
"""

from sqlalchemy import Column, DateTime, Boolean, Integer
from sqlalchemy.sql import func
from newsletter_api.core.database import Base

# Largest value a signed 64-bit INTEGER column holds
MAX_RECORD_ID = 2**63 - 1


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps"""
    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )


class IntegerIDMixin:
    """Mixin for auto-increment integer primary key"""
    id = Column(Integer, primary_key=True, autoincrement=True)


class SoftDeleteMixin:
    """Mixin for soft delete functionality"""
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    is_deleted = Column(Boolean, default=False, nullable=False, index=True)


class BaseModel(Base, IntegerIDMixin, TimestampMixin):
    """Base model with common fields"""
    __abstract__ = True


class SoftDeleteModel(BaseModel, SoftDeleteMixin):
    """Base model with soft delete capability"""
    __abstract__ = True
