"""
User Model
Account, credentials and privilege flags
"""

from sqlalchemy import Column, String, Boolean
from newsletter_api.models.base import SoftDeleteModel


class User(SoftDeleteModel):
    """User model; owner of newsletters and caller identity for every request"""
    __tablename__ = "users"

    name = Column(String(100), nullable=False)
    email = Column(String(254), nullable=False, unique=True, index=True)
    hashed_password = Column(String(128), nullable=False)

    # Privilege flags
    is_super = Column(Boolean, default=False, nullable=False)
    # Super grant not confirmed yet; behaves as a regular user until cleared
    pending_confirm = Column(Boolean, default=False, nullable=False)
    # Forced password change blocks every gated action until done
    pending_password = Column(Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"
